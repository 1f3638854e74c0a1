from fastapi import APIRouter, Depends, HTTPException # type: ignore

from autoeval.agent.errors import AnalysisError
from autoeval.agent.inference import InferenceClient
from autoeval.agent.issue_detail import IssueDetailFetcher
from autoeval.agent.vehicle_analysis import run_vehicle_analysis
from autoeval.auth.auth import verify_token
from autoeval.models.analysis import AnalysisResult
from autoeval.models.vehicle import VehicleQuery
from autoeval.models.vehicle_chat import IssueDetailRequest, IssueDetailResponse
from autoeval.routers.deps import get_inference_client

router = APIRouter(
    prefix="/vehicle",
    tags=["Vehicle Analysis"]
)

ANALYSIS_FAILED = "Analysis failed. Please check your connection and try again."


@router.post("/analysis", response_model=AnalysisResult)
async def analyze_vehicle(
    vehicle: VehicleQuery,
    user=Depends(verify_token),
    client: InferenceClient = Depends(get_inference_client),
):
    try:
        return await run_vehicle_analysis(client, vehicle)
    except AnalysisError:
        # all-or-nothing: never hand back a half-built report
        raise HTTPException(status_code=502, detail=ANALYSIS_FAILED)


@router.post("/issues/detail", response_model=IssueDetailResponse)
async def issue_detail(
    req: IssueDetailRequest,
    user=Depends(verify_token),
    client: InferenceClient = Depends(get_inference_client),
):
    detail = await IssueDetailFetcher(client).fetch_detail(req.vehicle, req.issue)
    return {"issue": req.issue, "detail": detail}
