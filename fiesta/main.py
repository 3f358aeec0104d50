# fiesta/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .routers.catalog import router as catalog_router
from .routers.chats import router as chats_router
from .routers.health import router as health_router
from .routers.quotes import router as quotes_router
from .routers.requests import router as requests_router

log = logging.getLogger("uvicorn.error")

app = FastAPI(
    title="Fiesta API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["default"])
def read_root():
    return {"ok": True, "service": "fiesta-api"}


# routers
app.include_router(health_router)
app.include_router(catalog_router)
app.include_router(requests_router)
app.include_router(quotes_router)
app.include_router(chats_router)


# ──────────────────────────────────────────────────────────────────────────────
# Local dev entrypoint
# ──────────────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "fiesta.main:app",
        host="0.0.0.0",
        port=config.port(),
        reload=True,
    )
