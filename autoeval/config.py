import os
from dotenv import load_dotenv # type: ignore

load_dotenv()

GROQ_API_KEY = os.getenv("GROQ_API_KEY")
TAVILY_API_KEY = os.getenv("TAVILY_API_KEY")

FACTS_MODEL = os.getenv("AUTOEVAL_FACTS_MODEL", "llama-3.1-8b-instant")
REASONING_MODEL = os.getenv("AUTOEVAL_REASONING_MODEL", "openai/gpt-oss-120b")
DETAIL_MODEL = os.getenv("AUTOEVAL_DETAIL_MODEL", "llama-3.1-8b-instant")
CHAT_MODEL = os.getenv("AUTOEVAL_CHAT_MODEL", "llama-3.3-70b-versatile")

FACTS_TEMPERATURE = float(os.getenv("AUTOEVAL_FACTS_TEMPERATURE", "0.3"))
REASONING_EFFORT = os.getenv("AUTOEVAL_REASONING_EFFORT", "high")
SEARCH_RESULTS = int(os.getenv("AUTOEVAL_SEARCH_RESULTS", "5"))
CHAT_SESSION_IDLE_SECONDS = float(os.getenv("AUTOEVAL_CHAT_IDLE_SECONDS", "3600"))

AUTH_JWKS_URL = os.getenv("AUTH_JWKS_URL")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def require_api_keys() -> None:
    """
    Fail fast when an upstream credential is missing.
    Called once at startup, never per request.
    """
    if not GROQ_API_KEY:
        raise RuntimeError("GROQ_API_KEY not set")
    if not TAVILY_API_KEY:
        raise RuntimeError("TAVILY_API_KEY not set")
