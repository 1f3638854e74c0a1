"""
Upstream inference contract and its Groq + Tavily binding.

Every component talks to the model through ``InferenceClient.generate``:
one request in, one response out. Tests swap in a scripted client; the
service wires ``GroqInferenceClient`` at startup.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Protocol, Sequence, Tuple

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage # type: ignore
from langchain_core.runnables import Runnable # type: ignore
from langchain_groq import ChatGroq # type: ignore
from tavily import AsyncTavilyClient # type: ignore

logger = logging.getLogger(__name__)

MAX_SEARCH_QUERY = 400


@dataclass(frozen=True)
class InferenceOptions:
    enable_grounding: bool = False
    temperature: Optional[float] = None
    reasoning_effort: Optional[str] = None
    response_format: Literal["text", "json"] = "text"


@dataclass(frozen=True)
class InferenceRequest:
    model: str
    prompt: str = ""
    messages: Sequence[BaseMessage] = ()
    search_query: Optional[str] = None     # only read when grounding is enabled
    options: InferenceOptions = field(default_factory=InferenceOptions)


@dataclass(frozen=True)
class InferenceResponse:
    text: Optional[str] = None
    # loosely typed on purpose: [{"uri": ..., "title": ...}], any key may be missing
    citations: Optional[List[Dict[str, Any]]] = None


class InferenceClient(Protocol):
    async def generate(self, request: InferenceRequest) -> InferenceResponse:
        ...


# -------------------------------------------------
# Helpers
# -------------------------------------------------

def message_text(content: Any) -> str:
    """
    ChatGroq returns either a plain string or a list of content blocks.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return ""


def build_grounding_context(results: List[Dict[str, Any]]) -> str:
    lines = [
        "Use the following web search results as your factual grounding. "
        "Prefer them over prior knowledge and do not invent figures.",
        "",
    ]
    for idx, hit in enumerate(results, start=1):
        lines.append(f"[{idx}] {hit.get('title') or 'Untitled'} ({hit.get('url', '')})")
        lines.append((hit.get("content") or "").strip())
        lines.append("")
    return "\n".join(lines).strip()


# -------------------------------------------------
# Groq + Tavily client
# -------------------------------------------------

class GroqInferenceClient:
    def __init__(
        self,
        api_key: str,
        search_api_key: Optional[str] = None,
        search_results: int = 5,
    ):
        self._api_key = api_key
        self._search = AsyncTavilyClient(api_key=search_api_key) if search_api_key else None
        self._search_results = search_results

    def _chat_model(self, model: str, options: InferenceOptions) -> Runnable:
        kwargs: Dict[str, Any] = {"api_key": self._api_key, "model": model}

        if options.temperature is not None:
            kwargs["temperature"] = options.temperature
        if options.reasoning_effort:
            kwargs["reasoning_effort"] = options.reasoning_effort

        llm = ChatGroq(**kwargs)
        if options.response_format == "json":
            return llm.bind(response_format={"type": "json_object"})
        return llm

    async def _ground(self, query: str) -> Tuple[str, List[Dict[str, Any]]]:
        if self._search is None:
            raise RuntimeError("Grounding requested but no search client is configured")

        res = await self._search.search(
            query=query,
            max_results=self._search_results,
            search_depth="advanced",
        )
        results = res.get("results", []) or []

        citations = [
            {"uri": hit.get("url"), "title": hit.get("title")}
            for hit in results
        ]
        return build_grounding_context(results), citations

    async def generate(self, request: InferenceRequest) -> InferenceResponse:
        messages: List[BaseMessage] = list(request.messages) or [
            HumanMessage(content=request.prompt)
        ]

        citations = None
        if request.options.enable_grounding:
            context, citations = await self._ground(
                request.search_query or request.prompt[:MAX_SEARCH_QUERY]
            )
            messages.insert(0, SystemMessage(content=context))
            logger.debug("Grounded %s with %d search hits", request.model, len(citations))

        llm = self._chat_model(request.model, request.options)
        response = await llm.ainvoke(messages)

        return InferenceResponse(
            text=message_text(response.content),
            citations=citations,
        )
