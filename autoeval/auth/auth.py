# autoeval/auth/auth.py
from jose import jwt # type: ignore
from fastapi import HTTPException, Header # type: ignore
import httpx

from autoeval.config import AUTH_JWKS_URL

ANONYMOUS = {"sub": "anonymous"}
cached_keys = None


async def get_jwks():
    global cached_keys
    if cached_keys is None:
        async with httpx.AsyncClient() as client:
            res = await client.get(AUTH_JWKS_URL, timeout=10)
            res.raise_for_status()
            cached_keys = res.json()
    return cached_keys


async def verify_token(authorization: str = Header(None)):
    # auth is opt-in: without a JWKS url every caller is anonymous
    if not AUTH_JWKS_URL:
        return ANONYMOUS

    if not authorization:
        raise HTTPException(401, "No token provided")

    token = authorization.removeprefix("Bearer ").strip()

    try:
        jwks = await get_jwks()
    except httpx.HTTPError:
        raise HTTPException(status_code=503, detail="Token keys unavailable")

    try:
        return jwt.decode(token, jwks, algorithms=["RS256"], options={"verify_aud": False})
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
