import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI # type: ignore
from fastapi.middleware.cors import CORSMiddleware # type: ignore

from autoeval import config
from autoeval.agent.conversation import SessionRegistry
from autoeval.agent.inference import GroqInferenceClient
from autoeval.routers import vehicle_analysis, vehicle_chat

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # missing credentials stop the service here, not on the first request
    config.require_api_keys()

    client = GroqInferenceClient(
        api_key=config.GROQ_API_KEY,
        search_api_key=config.TAVILY_API_KEY,
        search_results=config.SEARCH_RESULTS,
    )
    app.state.inference_client = client
    app.state.sessions = SessionRegistry(client)
    yield
    app.state.sessions.close_all()


app = FastAPI(title="AutoEval Vehicle Analysis", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(vehicle_analysis.router)
app.include_router(vehicle_chat.router)


@app.get("/")
async def health():
    return {"status": "ok"}
