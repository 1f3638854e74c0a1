import json
from typing import List

from autoeval.models.analysis import GroundingSource
from autoeval.models.vehicle import VehicleQuery, format_amount


GENERAL_NOTE = (
    "Note: This is a general model analysis. "
    "User did not provide specific mileage or price."
)

LISTING_NOTE = "Mileage: {mileage} km, Price: {price} {currency}."

GENERAL_DEPRECIATION_HINT = (
    " Since no specific price is provided, use the current average market "
    "value as the starting point (Year Current)."
)

# Field names below are the wire contract read by result_normalizer.
# Rename them here and there together, never one side alone.
reasoning_prompt = """
CONTEXT:
Vehicle: {year} {make} {model} ({fuel_type}).
{vehicle_note}
Market Data Analysis: {market_summary}
Market Data Sources (URLs): {sources_json}

TASK:
Act as a senior automotive engineer and financial analyst.
Perform a deep reasoning analysis.

1. Analyze the reliability and common issues. Calculate a "Reliability Score" (0-100) based on the frequency and severity of issues for this model year.
2. Calculate a theoretical depreciation curve for the next 5 years.{depreciation_hint}
3. Provide a maintenance roadmap with estimated costs. Break down the costs by component percentage.
4. Estimate fuel consumption (L/100km or MPG) and compare with category average.
5. Identify specific common technical issues, explain them briefly, and estimate repair costs.
6. Extract similar vehicle listings mentioned in the market data or construct them based on the sources provided. Match descriptions to the provided Source URLs if possible.
7. Provide a URL for a representative image of this vehicle model (exterior side or front view).

OUTPUT FORMAT:
Return ONE JSON object with this EXACT structure. No markdown, no text outside the JSON.
The depreciationData array MUST contain exactly these labels in this order:
"Current", "+1 Year", "+2 Years", "+3 Years", "+4 Years", "+5 Years".
{{
  "reasoningAnalysis": "Detailed 3 paragraph analysis text focusing on reliability, driving experience, and value retention...",
  "reliabilityScore": {{
    "score": number,
    "rating": "string (e.g. Above Average)",
    "details": "string (e.g. Robust engine but prone to electrical glitches)"
  }},
  "priceRange": {{ "min": number, "max": number }},
  "depreciationData": [
    {{ "year": "Current", "value": number }},
    {{ "year": "+1 Year", "value": number }},
    {{ "year": "+2 Years", "value": number }},
    {{ "year": "+3 Years", "value": number }},
    {{ "year": "+4 Years", "value": number }},
    {{ "year": "+5 Years", "value": number }}
  ],
  "commonIssues": [
    {{
      "issue": "Name of issue (e.g. Timing Chain)",
      "description": "Brief explanation of the failure.",
      "estimatedRepairCost": "Cost estimate string (e.g. 1500 EUR)"
    }}
  ],
  "pros": ["pro 1", "pro 2"],
  "cons": ["con 1", "con 2"],
  "maintenanceCost": "Estimated annual cost string (e.g. 800 EUR)",
  "maintenanceSchedule": [
    {{ "interval": "e.g. Every 10k km", "task": "Oil change", "estimatedCost": "150 EUR" }},
    {{ "interval": "e.g. 60k km", "task": "Brake pads", "estimatedCost": "300 EUR" }}
  ],
  "maintenanceCostBreakdown": [
    {{ "component": "Tires", "costPercentage": 25 }},
    {{ "component": "Brakes", "costPercentage": 15 }},
    {{ "component": "Fluids/Filters", "costPercentage": 20 }},
    {{ "component": "Unscheduled Repairs", "costPercentage": 40 }}
  ],
  "fuelEfficiency": {{
    "city": "string (e.g. 12L/100km)",
    "highway": "string (e.g. 8L/100km)",
    "combined": "string (e.g. 10L/100km)",
    "averageCombined": "string (e.g. 11L/100km)",
    "verdict": "string comparison (e.g. '15% better than average SUV')"
  }},
  "similarListings": [
    {{ "description": "e.g. 2018 BMW 320i", "price": "e.g. 24000 EUR", "source": "e.g. Autotrader", "url": "url from sources if available" }}
  ],
  "vehicleImageUrl": "A public URL for a high-quality image of this vehicle model. If none found, leave empty."
}}
"""


def build_reasoning_prompt(
    vehicle: VehicleQuery,
    market_summary: str,
    sources: List[GroundingSource],
) -> str:
    if vehicle.is_general:
        vehicle_note = GENERAL_NOTE
        depreciation_hint = GENERAL_DEPRECIATION_HINT
    else:
        vehicle_note = LISTING_NOTE.format(
            mileage=format_amount(vehicle.mileage),
            price=format_amount(vehicle.price),
            currency=vehicle.currency,
        )
        depreciation_hint = ""

    sources_json = json.dumps(
        [s.model_dump() for s in sources],
        ensure_ascii=False,
    )

    return reasoning_prompt.format(
        year=vehicle.year,
        make=vehicle.make,
        model=vehicle.model,
        fuel_type=vehicle.fuel_type,
        vehicle_note=vehicle_note,
        market_summary=market_summary,
        sources_json=sources_json,
        depreciation_hint=depreciation_hint,
    ).strip()
