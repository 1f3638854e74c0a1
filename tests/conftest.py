import os

import pytest

os.environ.setdefault("GROQ_API_KEY", "test-key")
os.environ.setdefault("TAVILY_API_KEY", "test-key")

from autoeval.agent.inference import InferenceRequest, InferenceResponse
from autoeval.models.vehicle import VehicleQuery


class FakeInferenceClient:
    """Replays queued responses (or raises queued exceptions) and records requests."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def queue(self, *outcomes):
        self.outcomes.extend(outcomes)

    async def generate(self, request: InferenceRequest) -> InferenceResponse:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if self.outcomes else InferenceResponse(text="")
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, str):
            return InferenceResponse(text=outcome)
        return outcome


@pytest.fixture
def fake_client():
    return FakeInferenceClient()


@pytest.fixture
def general_audi():
    return VehicleQuery(make="Audi", model="A4", year=2018, mileage=0, price=0)


@pytest.fixture
def listed_golf():
    return VehicleQuery(
        make="Volkswagen",
        model="Golf",
        year=2016,
        mileage=120000,
        price=9500,
        currency="EUR",
        fuel_type="Diesel",
    )
