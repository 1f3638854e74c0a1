from fastapi import Request # type: ignore

from autoeval.agent.conversation import SessionRegistry
from autoeval.agent.inference import InferenceClient


def get_inference_client(request: Request) -> InferenceClient:
    return request.app.state.inference_client


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions
