from typing import Optional

from autoeval.models.vehicle import VehicleQuery, format_amount


chat_persona = """
You are AutoEval AI, an expert automotive consultant.
You analyze cars based on user input.
Be concise, technical but accessible, and helpful.
"""

VEHICLE_CONTEXT = "The user is evaluating a {label}."
LISTING_DETAILS = " It has {mileage} km and is listed for {price} {currency}."


def build_chat_instruction(vehicle: Optional[VehicleQuery] = None) -> str:
    instruction = chat_persona.strip()
    if vehicle is None:
        return instruction

    context = VEHICLE_CONTEXT.format(label=vehicle.label)
    if not vehicle.is_general:
        context += LISTING_DETAILS.format(
            mileage=format_amount(vehicle.mileage),
            price=format_amount(vehicle.price),
            currency=vehicle.currency,
        )
    return f"{instruction}\n\n{context}"
