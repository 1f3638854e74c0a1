import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List

from autoeval import config
from autoeval.agent.errors import RetrievalError
from autoeval.agent.inference import InferenceClient, InferenceOptions, InferenceRequest
from autoeval.agent.prompts.market_prompt import build_market_prompt, build_market_search_query
from autoeval.models.analysis import GroundingSource
from autoeval.models.vehicle import VehicleQuery

logger = logging.getLogger(__name__)

NO_MARKET_DATA = "Could not retrieve market data."
DEFAULT_SOURCE_TITLE = "Source"


@dataclass(frozen=True)
class MarketFacts:
    summary: str
    sources: List[GroundingSource]


def extract_sources(citations: Any) -> List[GroundingSource]:
    """
    Citations come from search metadata and may be absent at any level.
    Entries without a URI are dropped; missing titles become "Source".
    Duplicates are kept in upstream order.
    """
    if not isinstance(citations, list):
        return []

    sources: List[GroundingSource] = []
    for entry in citations:
        if not isinstance(entry, dict):
            continue

        uri = entry.get("uri")
        if not isinstance(uri, str) or not uri.strip():
            continue

        title = entry.get("title")
        if not isinstance(title, str) or not title.strip():
            title = DEFAULT_SOURCE_TITLE

        sources.append(GroundingSource(uri=uri, title=title))

    return sources


class GroundedFactRetriever:
    """Stage 1: grounded, low-temperature market facts with citations."""

    def __init__(self, client: InferenceClient, model: str = config.FACTS_MODEL):
        self._client = client
        self._model = model

    async def retrieve(self, vehicle: VehicleQuery) -> MarketFacts:
        request = InferenceRequest(
            model=self._model,
            prompt=build_market_prompt(vehicle),
            search_query=build_market_search_query(vehicle),
            options=InferenceOptions(
                enable_grounding=True,
                temperature=config.FACTS_TEMPERATURE,
            ),
        )

        try:
            response = await self._client.generate(request)
        except (Exception, asyncio.CancelledError) as exc:
            logger.exception("Market analysis failed for %s", vehicle.label)
            raise RetrievalError(f"Market data request failed: {exc}") from exc

        sources = extract_sources(response.citations)
        logger.info("Market facts for %s: %d sources", vehicle.label, len(sources))

        return MarketFacts(
            summary=response.text or NO_MARKET_DATA,
            sources=sources,
        )
