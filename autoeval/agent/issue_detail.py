import asyncio
import logging

from autoeval import config
from autoeval.agent.inference import InferenceClient, InferenceRequest
from autoeval.agent.prompts.issue_prompt import build_issue_prompt
from autoeval.models.vehicle import VehicleQuery

logger = logging.getLogger(__name__)

DETAILS_UNAVAILABLE = "Details unavailable."
DETAIL_FALLBACK = "Unable to retrieve detailed repair information at this moment."


class IssueDetailFetcher:
    """
    Advisory deep-dive on one reported issue. Never raises: any failure
    becomes DETAIL_FALLBACK so the surrounding view keeps working.
    """

    def __init__(self, client: InferenceClient, model: str = config.DETAIL_MODEL):
        self._client = client
        self._model = model

    async def fetch_detail(self, vehicle: VehicleQuery, issue: str) -> str:
        request = InferenceRequest(
            model=self._model,
            messages=build_issue_prompt(vehicle, issue),
        )

        try:
            response = await self._client.generate(request)
        except (Exception, asyncio.CancelledError):
            logger.warning("Issue details fetch failed for %r on %s", issue, vehicle.label, exc_info=True)
            return DETAIL_FALLBACK

        return response.text or DETAILS_UNAVAILABLE
