import logging

from autoeval.agent.inference import InferenceClient
from autoeval.agent.market_retriever import GroundedFactRetriever
from autoeval.agent.reasoning_synthesizer import StructuredReasoningSynthesizer
from autoeval.agent.result_normalizer import normalize
from autoeval.models.analysis import AnalysisResult
from autoeval.models.vehicle import VehicleQuery

logger = logging.getLogger(__name__)


class VehicleAnalysisPipeline:
    """
    Facts first, reasoning second: stage 2 embeds stage 1's output, so the
    two calls always run in sequence. Any AnalysisError aborts the run and
    no partial result is returned.
    """

    def __init__(
        self,
        retriever: GroundedFactRetriever,
        synthesizer: StructuredReasoningSynthesizer,
    ):
        self.retriever = retriever
        self.synthesizer = synthesizer

    @classmethod
    def from_client(cls, client: InferenceClient) -> "VehicleAnalysisPipeline":
        return cls(
            GroundedFactRetriever(client),
            StructuredReasoningSynthesizer(client),
        )

    async def run(self, vehicle: VehicleQuery) -> AnalysisResult:
        logger.info("Analysis started for %s (general=%s)", vehicle.label, vehicle.is_general)

        facts = await self.retriever.retrieve(vehicle)
        partial = await self.synthesizer.synthesize(vehicle, facts.summary, facts.sources)
        result = normalize(facts.summary, facts.sources, partial)

        logger.info("Analysis finished for %s", vehicle.label)
        return result


async def run_vehicle_analysis(client: InferenceClient, vehicle: VehicleQuery) -> AnalysisResult:
    return await VehicleAnalysisPipeline.from_client(client).run(vehicle)
