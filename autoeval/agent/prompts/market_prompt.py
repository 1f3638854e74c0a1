from autoeval.models.vehicle import VehicleQuery, format_amount


GENERAL_CONTEXT = (
    "Analyze the general reliability and market value of the "
    "{year} {make} {model} ({fuel_type})."
)

LISTING_CONTEXT = (
    "Analyze this vehicle: {year} {make} {model} ({fuel_type}) "
    "with {mileage} km listed for {price} {currency}."
)

market_prompt = """
{context}

Please search for:
1. Current market price range for this specific model and year.
2. Common defects and reported failures (engine, transmission, electronics) for this specific generation.
3. Annual maintenance cost estimates.
4. Fuel consumption averages.
5. Competitor comparisons.

Return a concise summary of facts.
"""


def build_market_context(vehicle: VehicleQuery) -> str:
    template = GENERAL_CONTEXT if vehicle.is_general else LISTING_CONTEXT
    return template.format(
        year=vehicle.year,
        make=vehicle.make,
        model=vehicle.model,
        fuel_type=vehicle.fuel_type,
        mileage=format_amount(vehicle.mileage),
        price=format_amount(vehicle.price),
        currency=vehicle.currency,
    )


def build_market_prompt(vehicle: VehicleQuery) -> str:
    return market_prompt.format(context=build_market_context(vehicle)).strip()


def build_market_search_query(vehicle: VehicleQuery) -> str:
    return (
        f"{vehicle.year} {vehicle.make} {vehicle.model} {vehicle.fuel_type} "
        "used price reliability common problems maintenance cost fuel consumption"
    )
