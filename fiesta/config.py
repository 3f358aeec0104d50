# fiesta/config.py
import os
from typing import List, Optional


def supabase_url() -> str:
    url = os.environ.get("SUPABASE_URL")
    if not url:
        # defer failure until a store-using endpoint is called
        raise RuntimeError("SUPABASE_URL is not set")
    return url.rstrip("/")


def service_role_key() -> str:
    key = os.environ.get("SUPABASE_SERVICE_ROLE")
    if not key:
        raise RuntimeError("SUPABASE_SERVICE_ROLE is not set")
    return key


def anon_key() -> str:
    return os.environ.get("SUPABASE_ANON_KEY", "")


def jwt_secret() -> Optional[str]:
    """HS256 secret used to verify access tokens locally. Unset means ask Supabase."""
    return os.environ.get("SUPABASE_JWT_SECRET") or None


def cors_origins() -> List[str]:
    raw = os.environ.get("CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()]


def port() -> int:
    return int(os.environ.get("PORT", "8000"))
