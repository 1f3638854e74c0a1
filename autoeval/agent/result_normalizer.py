"""
Total construction of an AnalysisResult from a partial upstream payload.

Every required field is filled from the payload when it has the expected
shape (object / array / string / number) and from a fixed default otherwise,
so callers never need to tell "missing" from "present". Optional sections
stay None when the model did not produce them.

Out-of-range values:
- reliabilityScore.score is clamped to [0, 100]; a non-numeric score drops
  the whole section.
- priceRange with min > max has its bounds swapped.
- depreciationData is kept in the order produced.
- Numbers that are not finite or do not fit a float count as missing.
"""

import math
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from autoeval.models.analysis import (
    AnalysisResult,
    CommonIssue,
    DepreciationPoint,
    FuelEfficiency,
    GroundingSource,
    MaintenanceCostShare,
    MaintenanceItem,
    PriceRange,
    ReliabilityScore,
    SimilarListing,
)

INCOMPLETE_ANALYSIS = "Analysis incomplete."
NOT_AVAILABLE = "Not available"

T = TypeVar("T")


# -------------------------------------------------
# Shape helpers
# -------------------------------------------------

def _as_float(value: Any) -> Optional[float]:
    """
    Finite float for an int or float, None otherwise. json.loads keeps huge
    integer literals as ints that do not fit a float.
    """
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _is_number(value: Any) -> bool:
    return _as_float(value) is not None


def _text(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value
    if _is_number(value):
        return str(value)
    return default


def _number(value: Any, default: float = 0) -> float:
    number = _as_float(value)
    return default if number is None else number


def _objects(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _strings(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _optional_list(
    value: Any,
    build: Callable[[Mapping[str, Any]], T],
) -> Optional[List[T]]:
    if not isinstance(value, list):
        return None
    return [build(item) for item in _objects(value)]


# -------------------------------------------------
# Section builders
# -------------------------------------------------

def _price_range(value: Any) -> PriceRange:
    if not isinstance(value, dict):
        return PriceRange()

    low = _number(value.get("min"))
    high = _number(value.get("max"))
    if low > high:
        low, high = high, low
    return PriceRange(min=low, max=high)


def _depreciation_point(item: Mapping[str, Any]) -> DepreciationPoint:
    return DepreciationPoint(year=_text(item.get("year")), value=_number(item.get("value")))


def _common_issue(item: Mapping[str, Any]) -> CommonIssue:
    return CommonIssue(
        issue=_text(item.get("issue")),
        description=_text(item.get("description")),
        estimated_repair_cost=_text(item.get("estimatedRepairCost")),
    )


def _maintenance_item(item: Mapping[str, Any]) -> MaintenanceItem:
    return MaintenanceItem(
        interval=_text(item.get("interval")),
        task=_text(item.get("task")),
        estimated_cost=_text(item.get("estimatedCost")),
    )


def _cost_share(item: Mapping[str, Any]) -> MaintenanceCostShare:
    return MaintenanceCostShare(
        component=_text(item.get("component")),
        cost_percentage=_number(item.get("costPercentage")),
    )


def _similar_listing(item: Mapping[str, Any]) -> SimilarListing:
    url = _text(item.get("url"))
    return SimilarListing(
        description=_text(item.get("description")),
        price=_text(item.get("price")),
        source=_text(item.get("source")),
        url=url or None,
    )


def _fuel_efficiency(value: Any) -> Optional[FuelEfficiency]:
    if not isinstance(value, dict):
        return None
    return FuelEfficiency(
        city=_text(value.get("city")),
        highway=_text(value.get("highway")),
        combined=_text(value.get("combined")),
        average_combined=_text(value.get("averageCombined")),
        verdict=_text(value.get("verdict")),
    )


def _reliability(value: Any) -> Optional[ReliabilityScore]:
    if not isinstance(value, dict) or not _is_number(value.get("score")):
        return None
    return ReliabilityScore(
        score=clamp_score(_number(value["score"])),
        rating=_text(value.get("rating")),
        details=_text(value.get("details")),
    )


def clamp_score(score: float) -> float:
    return max(0.0, min(100.0, float(score)))


# -------------------------------------------------
# Public API
# -------------------------------------------------

def normalize(
    market_summary: str,
    sources: List[GroundingSource],
    partial: Optional[Dict[str, Any]],
) -> AnalysisResult:
    data = partial if isinstance(partial, dict) else {}

    return AnalysisResult(
        search_summary=market_summary,
        reasoning_analysis=_text(data.get("reasoningAnalysis")) or INCOMPLETE_ANALYSIS,
        sources=list(sources),
        price_range=_price_range(data.get("priceRange")),
        depreciation_data=_optional_list(data.get("depreciationData"), _depreciation_point) or [],
        common_issues=_optional_list(data.get("commonIssues"), _common_issue) or [],
        pros=_strings(data.get("pros")),
        cons=_strings(data.get("cons")),
        maintenance_cost=_text(data.get("maintenanceCost")) or NOT_AVAILABLE,
        maintenance_schedule=[_maintenance_item(item) for item in _objects(data.get("maintenanceSchedule"))],
        maintenance_cost_breakdown=_optional_list(data.get("maintenanceCostBreakdown"), _cost_share),
        fuel_efficiency=_fuel_efficiency(data.get("fuelEfficiency")),
        similar_listings=_optional_list(data.get("similarListings"), _similar_listing),
        reliability_score=_reliability(data.get("reliabilityScore")),
        vehicle_image_url=_text(data.get("vehicleImageUrl")) or None,
    )
