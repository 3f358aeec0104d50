# fiesta/routers/health.py
import os

from fastapi import APIRouter, HTTPException

from ..deps import supabase_store
from ..errors import StoreError

router = APIRouter(tags=["health"])

# tables the workflow, listings and chat touch, with the columns they read
CHECKS = {
    "requests": "id,client_id,category_id,title,status,event_id,created_at",
    "quotes": "id,request_id,provider_id,proposed_price,status",
    "events": "id,client_id,title,status",
    "payments": "id,quote_id,amount,payment_method,status,paid_at",
    "hired_services": "id,event_id,quote_id,payment_id,price_paid,status",
    "chat_channels": "id,request_id,client_id,provider_id",
    "chat_messages": "id,channel_id,sender_id,content",
}


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/health/db")
def health_db():
    """Ping Supabase with the service role (SUPABASE_URL & SUPABASE_SERVICE_ROLE)."""
    try:
        supabase_store().query("requests", columns="id", limit=1)
        return {"ok": True, "db": "up"}
    except (RuntimeError, StoreError) as e:
        raise HTTPException(status_code=503, detail=f"DB check failed: {e}")


# ──────────────────────────────────────────────────────────────────────────────
# Diagnostics (to explain 500s quickly)
# ──────────────────────────────────────────────────────────────────────────────
@router.get("/diag")
def diag():
    out = {
        "supabase_url_set": bool(os.environ.get("SUPABASE_URL")),
        "service_role_set": bool(os.environ.get("SUPABASE_SERVICE_ROLE")),
        "jwt_secret_set": bool(os.environ.get("SUPABASE_JWT_SECRET")),
        "errors": [],
    }
    try:
        store = supabase_store()
    except RuntimeError as e:
        out["errors"].append(f"supabase init: {e}")
        return out

    for table, cols in CHECKS.items():
        try:
            store.query(table, columns=cols, limit=1)
        except StoreError as e:
            out["errors"].append(e.message)
    return out
