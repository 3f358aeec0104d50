# fiesta/auth.py
import logging
from typing import Any, Dict

import httpx
from fastapi import HTTPException
from jose import JWTError, jwt

from . import config
from .models import Role, SessionContext

log = logging.getLogger("uvicorn.error")


def _fetch_user_from_supabase(token: str) -> Dict[str, Any]:
    """Fallback: ask Supabase who this token belongs to."""
    headers = {
        "Authorization": f"Bearer {token}",
        "apikey": config.anon_key() or token,
    }
    url = f"{config.supabase_url()}/auth/v1/user"
    try:
        r = httpx.get(url, headers=headers, timeout=10)
    except httpx.HTTPError as e:
        log.error(f"Supabase user lookup failed: {e}")
        raise HTTPException(status_code=503, detail="Could not reach Supabase auth")
    if r.status_code != 200:
        raise HTTPException(status_code=401, detail="Could not verify token with Supabase")
    data = r.json() or {}
    return data.get("user") or data


def _decode_hs256(token: str, secret: str) -> Dict[str, Any]:
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            options={"verify_aud": False},
            issuer=f"{config.supabase_url()}/auth/v1",
        )
    except JWTError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token (HS256): {e}")


def session_from_claims(claims: Dict[str, Any]) -> SessionContext:
    """
    Build the caller's session from a token's claims or a /auth/v1/user body.
    Both carry the user id (`sub` or `id`) and `user_metadata.role`; a missing
    or unknown role is treated as client.
    """
    user_id = claims.get("sub") or claims.get("id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token missing subject (sub)")
    raw_role = (claims.get("user_metadata") or {}).get("role")
    try:
        role = Role(raw_role) if raw_role else Role.CLIENT
    except ValueError:
        role = Role.CLIENT
    return SessionContext(user_id=user_id, role=role, email=claims.get("email"))


def verify_token(token: str) -> SessionContext:
    """
    Accepts Supabase access tokens:
      - HS256 with SUPABASE_JWT_SECRET set -> verified locally
      - anything else                       -> verified by /auth/v1/user
    """
    secret = config.jwt_secret()
    try:
        alg = jwt.get_unverified_header(token).get("alg", "")
    except JWTError:
        return session_from_claims(_fetch_user_from_supabase(token))

    if alg.upper() == "HS256" and secret:
        return session_from_claims(_decode_hs256(token, secret))
    return session_from_claims(_fetch_user_from_supabase(token))


def bearer_token(authorization: str) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return authorization.split(" ", 1)[1].strip()
