import pytest

from autoeval.agent.result_normalizer import INCOMPLETE_ANALYSIS, NOT_AVAILABLE, normalize
from autoeval.models.analysis import GroundingSource

REQUIRED_FIELDS = (
    "search_summary",
    "reasoning_analysis",
    "sources",
    "price_range",
    "depreciation_data",
    "common_issues",
    "pros",
    "cons",
    "maintenance_cost",
    "maintenance_schedule",
)

FULL_PAYLOAD = {
    "reasoningAnalysis": "Solid mid-size sedan.",
    "reliabilityScore": {"score": 78, "rating": "Above Average", "details": "Robust engine"},
    "priceRange": {"min": 18000, "max": 24000},
    "depreciationData": [
        {"year": "Current", "value": 21000},
        {"year": "+1 Year", "value": 19000},
        {"year": "+2 Years", "value": 17200},
        {"year": "+3 Years", "value": 15600},
        {"year": "+4 Years", "value": 14100},
        {"year": "+5 Years", "value": 12800},
    ],
    "commonIssues": [
        {"issue": "Water pump", "description": "Plastic impeller leaks.", "estimatedRepairCost": "600 EUR"}
    ],
    "pros": ["Comfortable", "Efficient"],
    "cons": ["Expensive parts"],
    "maintenanceCost": "900 EUR",
    "maintenanceSchedule": [{"interval": "Every 15k km", "task": "Oil change", "estimatedCost": "180 EUR"}],
    "maintenanceCostBreakdown": [{"component": "Tires", "costPercentage": 30}],
    "fuelEfficiency": {
        "city": "8.5L/100km",
        "highway": "5.5L/100km",
        "combined": "6.6L/100km",
        "averageCombined": "7.0L/100km",
        "verdict": "Slightly better than class average",
    },
    "similarListings": [{"description": "2018 BMW 320i", "price": "22000 EUR", "source": "Autotrader"}],
    "vehicleImageUrl": "https://img.example/a4.jpg",
}


@pytest.mark.parametrize(
    "partial",
    [
        {},
        None,
        {"pros": "not a list", "priceRange": [1, 2], "commonIssues": {"issue": "x"}},
        {"reasoningAnalysis": 42, "maintenanceCost": None, "depreciationData": ["x", 3]},
    ],
)
def test_normalize_is_total(partial):
    result = normalize("summary", [], partial)

    for name in REQUIRED_FIELDS:
        assert getattr(result, name) is not None

    assert result.price_range.min == 0 and result.price_range.max == 0
    assert result.pros == [] or all(isinstance(p, str) for p in result.pros)
    assert result.depreciation_data == []
    assert result.maintenance_cost == NOT_AVAILABLE


def test_empty_partial_gets_documented_defaults():
    result = normalize("summary", [], {})

    assert result.search_summary == "summary"
    assert result.reasoning_analysis == INCOMPLETE_ANALYSIS
    assert result.maintenance_cost == NOT_AVAILABLE
    assert result.cons == []
    assert result.maintenance_cost_breakdown is None
    assert result.fuel_efficiency is None
    assert result.similar_listings is None
    assert result.reliability_score is None
    assert result.vehicle_image_url is None


def test_full_payload_is_carried_over():
    sources = [GroundingSource(uri="https://a.example", title="A")]

    result = normalize("summary", sources, FULL_PAYLOAD)

    assert result.sources == sources
    assert result.reliability_score.score == 78
    assert result.price_range.max == 24000
    assert [p.year for p in result.depreciation_data] == [
        "Current", "+1 Year", "+2 Years", "+3 Years", "+4 Years", "+5 Years"
    ]
    assert result.common_issues[0].estimated_repair_cost == "600 EUR"
    assert result.maintenance_schedule[0].task == "Oil change"
    assert result.maintenance_cost_breakdown[0].cost_percentage == 30
    assert result.fuel_efficiency.average_combined == "7.0L/100km"
    assert result.similar_listings[0].url is None
    assert result.vehicle_image_url == "https://img.example/a4.jpg"


def test_wire_names_are_camel_case():
    dumped = normalize("summary", [], FULL_PAYLOAD).model_dump(by_alias=True)

    assert dumped["reasoningAnalysis"] == "Solid mid-size sedan."
    assert dumped["commonIssues"][0]["estimatedRepairCost"] == "600 EUR"
    assert dumped["fuelEfficiency"]["averageCombined"] == "7.0L/100km"


@pytest.mark.parametrize("raw, expected", [(142, 100), (-5, 0), (100, 100), (0, 0), (63.5, 63.5)])
def test_reliability_score_is_clamped(raw, expected):
    result = normalize("s", [], {"reliabilityScore": {"score": raw, "rating": "x"}})

    assert result.reliability_score.score == expected
    assert 0 <= result.reliability_score.score <= 100


@pytest.mark.parametrize("score", ["high", None, True])
def test_non_numeric_reliability_score_drops_section(score):
    result = normalize("s", [], {"reliabilityScore": {"score": score}})

    assert result.reliability_score is None


def test_inverted_price_range_is_swapped():
    result = normalize("s", [], {"priceRange": {"min": 30000, "max": 20000}})

    assert (result.price_range.min, result.price_range.max) == (20000, 30000)


def test_depreciation_order_is_preserved_as_produced():
    points = [
        {"year": "+2 Years", "value": 10},
        {"year": "Current", "value": 30},
        {"year": "+1 Year", "value": 20},
    ]

    result = normalize("s", [], {"depreciationData": points})

    assert [p.year for p in result.depreciation_data] == ["+2 Years", "Current", "+1 Year"]


def test_breakdown_percentages_are_not_forced_to_sum():
    breakdown = [{"component": "Tires", "costPercentage": 70}, {"component": "Brakes", "costPercentage": 70}]

    result = normalize("s", [], {"maintenanceCostBreakdown": breakdown})

    assert sum(s.cost_percentage for s in result.maintenance_cost_breakdown) == 140


def test_non_object_elements_are_skipped_and_missing_members_defaulted():
    payload = {
        "commonIssues": ["Timing chain", {"description": "leaks", "estimatedRepairCost": "600 EUR"}, {"issue": "Turbo"}],
        "pros": ["Quiet", 3, None],
        "maintenanceSchedule": [{"task": "Brakes"}, "oops"],
        "maintenanceCostBreakdown": [{"costPercentage": 40}],
    }

    result = normalize("s", [], payload)

    assert [(i.issue, i.description) for i in result.common_issues] == [("", "leaks"), ("Turbo", "")]
    assert result.common_issues[0].estimated_repair_cost == "600 EUR"
    assert result.pros == ["Quiet"]
    assert result.maintenance_schedule[0].interval == ""
    assert len(result.maintenance_schedule) == 1
    assert result.maintenance_cost_breakdown[0].component == ""
    assert result.maintenance_cost_breakdown[0].cost_percentage == 40


def test_unlabelled_depreciation_point_keeps_its_place():
    points = [{"value": 1}, {"year": "+1 Year", "value": 2}]

    result = normalize("s", [], {"depreciationData": points})

    assert [(p.year, p.value) for p in result.depreciation_data] == [("", 1), ("+1 Year", 2)]


def test_numbers_too_large_for_a_float_count_as_missing():
    payload = {
        "reliabilityScore": {"score": 10**400, "rating": "Excellent"},
        "priceRange": {"min": 10**400, "max": 24000},
        "maintenanceCostBreakdown": [{"component": "Tires", "costPercentage": 10**400}],
        "depreciationData": [{"year": "Current", "value": -(10**400)}],
    }

    result = normalize("s", [], payload)

    assert result.reliability_score is None
    assert (result.price_range.min, result.price_range.max) == (0, 24000)
    assert result.maintenance_cost_breakdown[0].cost_percentage == 0
    assert result.depreciation_data[0].value == 0


@pytest.mark.parametrize("score", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_score_drops_section(score):
    result = normalize("s", [], {"reliabilityScore": {"score": score}})

    assert result.reliability_score is None
