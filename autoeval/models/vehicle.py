from typing import Literal

from pydantic import BaseModel, ConfigDict, Field # type: ignore
from pydantic.alias_generators import to_camel # type: ignore


FuelType = Literal["Petrol", "Diesel", "Hybrid", "Electric", "LPG"]


class VehicleQuery(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    make: str
    model: str
    year: int
    mileage: float = Field(default=0, ge=0)     # km
    price: float = Field(default=0, ge=0)
    currency: str = "EUR"
    fuel_type: FuelType = "Petrol"

    @property
    def is_general(self) -> bool:
        """No specific listing: both price and mileage left at zero."""
        return self.price == 0 and self.mileage == 0

    @property
    def label(self) -> str:
        return f"{self.year} {self.make} {self.model} ({self.fuel_type})"


def format_amount(value: float) -> str:
    """Render 120000.0 as '120000', keep real fractions."""
    return str(int(value)) if float(value).is_integer() else str(value)
