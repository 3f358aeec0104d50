# fiesta/deps.py
from fastapi import Header, HTTPException
from supabase import Client, create_client

from . import config
from .auth import bearer_token, verify_token
from .models import SessionContext
from .store import RecordStore, SupabaseStore

_client: Client | None = None


def get_supabase() -> Client:
    # service role key: row-level security is bypassed, ownership is checked in code
    global _client
    if _client is None:
        _client = create_client(config.supabase_url(), config.service_role_key())
    return _client


def supabase_store() -> SupabaseStore:
    """Raises RuntimeError when Supabase is not configured."""
    return SupabaseStore(get_supabase())


def get_store() -> RecordStore:
    try:
        return supabase_store()
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=f"Supabase init failed: {e}")


def get_session(authorization: str = Header(default="")) -> SessionContext:
    return verify_token(bearer_token(authorization))
