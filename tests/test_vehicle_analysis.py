import pytest

from autoeval.agent.errors import AnalysisFormatError, RetrievalError, SynthesisError
from autoeval.agent.inference import InferenceResponse
from autoeval.agent.issue_detail import DETAIL_FALLBACK, IssueDetailFetcher
from autoeval.agent.result_normalizer import NOT_AVAILABLE
from autoeval.agent.vehicle_analysis import VehicleAnalysisPipeline, run_vehicle_analysis

MARKET_TEXT = "A4 B9: 18-24k EUR, occasional water pump leaks."


@pytest.mark.asyncio
async def test_general_query_flows_from_facts_into_reasoning(fake_client, general_audi):
    fake_client.queue(
        InferenceResponse(
            text=MARKET_TEXT,
            citations=[{"uri": "https://autos.example/a4", "title": "A4 buyer guide"}],
        ),
        '{"pros": ["Comfortable"]}',
    )

    result = await run_vehicle_analysis(fake_client, general_audi)

    facts_request, reasoning_request = fake_client.requests
    assert "general reliability and market value of the 2018 Audi A4" in facts_request.prompt
    assert f"Market Data Analysis: {MARKET_TEXT}" in reasoning_request.prompt
    assert "https://autos.example/a4" in reasoning_request.prompt
    assert result.search_summary == MARKET_TEXT
    assert result.sources[0].title == "A4 buyer guide"
    assert result.pros == ["Comfortable"]


@pytest.mark.asyncio
async def test_fenced_reply_after_prose_is_normalized(fake_client, general_audi):
    fake_client.queue(
        MARKET_TEXT,
        'Here you go:\n```json\n{"pros":["Reliable"]}\n```',
    )

    result = await run_vehicle_analysis(fake_client, general_audi)

    assert result.pros == ["Reliable"]
    assert result.cons == []
    assert result.maintenance_cost == NOT_AVAILABLE
    assert result.reliability_score is None


@pytest.mark.asyncio
async def test_malformed_reasoning_aborts_without_result(fake_client, general_audi):
    fake_client.queue(MARKET_TEXT, "not json at all")
    result = None

    with pytest.raises(AnalysisFormatError):
        result = await run_vehicle_analysis(fake_client, general_audi)

    assert result is None


@pytest.mark.asyncio
async def test_stage_one_failure_skips_stage_two(fake_client, listed_golf):
    fake_client.queue(ConnectionError("offline"))

    with pytest.raises(RetrievalError):
        await run_vehicle_analysis(fake_client, listed_golf)

    assert len(fake_client.requests) == 1


@pytest.mark.asyncio
async def test_stage_two_failure_propagates(fake_client, listed_golf):
    fake_client.queue(MARKET_TEXT, PermissionError("invalid api key"))

    with pytest.raises(SynthesisError):
        await VehicleAnalysisPipeline.from_client(fake_client).run(listed_golf)


@pytest.mark.asyncio
async def test_empty_reasoning_still_yields_complete_result(fake_client, listed_golf):
    fake_client.queue(MARKET_TEXT, InferenceResponse(text=None))

    result = await run_vehicle_analysis(fake_client, listed_golf)

    assert result.depreciation_data == []
    assert result.price_range.min == 0


@pytest.mark.asyncio
async def test_issue_detail_transport_error_returns_fallback(fake_client, general_audi):
    fake_client.queue(ConnectionError("offline"))

    detail = await IssueDetailFetcher(fake_client).fetch_detail(general_audi, "Water pump")

    assert detail == DETAIL_FALLBACK
