# autoeval/models/analysis.py

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field # type: ignore
from pydantic.alias_generators import to_camel # type: ignore


class WireModel(BaseModel):
    """
    Frozen model whose serialized names follow the camelCase wire contract
    the reasoning prompt asks the upstream model for.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class GroundingSource(WireModel):
    uri: str
    title: str = "Source"


class PriceRange(WireModel):
    min: float = 0
    max: float = 0


class DepreciationPoint(WireModel):
    year: str                   # "Current", "+1 Year" ... "+5 Years"
    value: float = 0


class CommonIssue(WireModel):
    issue: str
    description: str = ""
    estimated_repair_cost: str = ""


class MaintenanceItem(WireModel):
    interval: str = ""
    task: str = ""
    estimated_cost: str = ""


class MaintenanceCostShare(WireModel):
    component: str
    cost_percentage: float = 0  # advisory, shares need not sum to 100


class FuelEfficiency(WireModel):
    city: str = ""
    highway: str = ""
    combined: str = ""
    average_combined: str = ""
    verdict: str = ""


class SimilarListing(WireModel):
    description: str = ""
    price: str = ""
    source: str = ""
    url: Optional[str] = None


class ReliabilityScore(WireModel):
    score: float = Field(ge=0, le=100)
    rating: str = ""
    details: str = ""


class AnalysisResult(WireModel):
    search_summary: str
    reasoning_analysis: str
    sources: List[GroundingSource]
    price_range: PriceRange
    depreciation_data: List[DepreciationPoint]
    common_issues: List[CommonIssue]
    pros: List[str]
    cons: List[str]
    maintenance_cost: str
    maintenance_schedule: List[MaintenanceItem]

    # absent means the upstream model never produced the section
    maintenance_cost_breakdown: Optional[List[MaintenanceCostShare]] = None
    fuel_efficiency: Optional[FuelEfficiency] = None
    similar_listings: Optional[List[SimilarListing]] = None
    reliability_score: Optional[ReliabilityScore] = None
    vehicle_image_url: Optional[str] = None
