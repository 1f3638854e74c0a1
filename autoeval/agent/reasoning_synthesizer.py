"""
Stage 2: structured reasoning.

The upstream model is asked for exactly one JSON object. It sometimes wraps
that object in a markdown code fence, occasionally after a line of prose.
The fence is stripped, then the remainder must parse as a JSON object or the
whole analysis is rejected. No further repair is attempted.
"""

import asyncio
import json
import logging
import re
from typing import Any, Dict, List

from autoeval import config
from autoeval.agent.errors import AnalysisFormatError, SynthesisError
from autoeval.agent.inference import InferenceClient, InferenceOptions, InferenceRequest
from autoeval.agent.prompts.reasoning_prompt import build_reasoning_prompt
from autoeval.models.analysis import GroundingSource
from autoeval.models.vehicle import VehicleQuery

logger = logging.getLogger(__name__)

# ```json ... ``` (language tag optional) anywhere in the text; the closing
# marker must end its line so backticks inside JSON strings are not taken for it
FENCED_BLOCK = re.compile(r"```[A-Za-z0-9_+-]*[ \t]*\n?(.*?)\n?[ \t]*```[ \t]*(?:\n|$)", re.DOTALL)
DANGLING_FENCE = re.compile(r"^```[A-Za-z0-9_+-]*|```$")


def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if not stripped.startswith("{"):
        match = FENCED_BLOCK.search(stripped)
        if match:
            return match.group(1).strip()

    # lone opening or closing marker
    return DANGLING_FENCE.sub("", stripped).strip()


def parse_reasoning_payload(text: str) -> Dict[str, Any]:
    """
    Returns {} for an empty reply, the decoded object otherwise.
    Raises AnalysisFormatError for anything that is not a JSON object.
    """
    if not text or not text.strip():
        return {}

    cleaned = strip_code_fence(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise AnalysisFormatError("Analysis failed format check.") from exc

    if not isinstance(payload, dict):
        raise AnalysisFormatError(
            f"Analysis failed format check: expected an object, got {type(payload).__name__}."
        )

    return payload


class StructuredReasoningSynthesizer:
    def __init__(
        self,
        client: InferenceClient,
        model: str = config.REASONING_MODEL,
        reasoning_effort: str = config.REASONING_EFFORT,
    ):
        self._client = client
        self._model = model
        self._reasoning_effort = reasoning_effort

    async def synthesize(
        self,
        vehicle: VehicleQuery,
        market_summary: str,
        sources: List[GroundingSource],
    ) -> Dict[str, Any]:
        request = InferenceRequest(
            model=self._model,
            prompt=build_reasoning_prompt(vehicle, market_summary, sources),
            options=InferenceOptions(
                reasoning_effort=self._reasoning_effort,
                response_format="json",
            ),
        )

        try:
            response = await self._client.generate(request)
        except (Exception, asyncio.CancelledError) as exc:
            logger.exception("Deep reasoning failed for %s", vehicle.label)
            raise SynthesisError(f"Reasoning request failed: {exc}") from exc

        if not response.text:
            logger.warning("Reasoning model returned no text for %s", vehicle.label)
            return {}

        try:
            payload = parse_reasoning_payload(response.text)
        except AnalysisFormatError:
            logger.error("Failed to parse JSON from reasoning model for %s", vehicle.label)
            raise

        logger.info("Reasoning for %s: %d fields", vehicle.label, len(payload))
        return payload
