# backend/tmsdb/main.py
import logging
import os
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .errors import install_exception_handlers

from .apps.accounts.router import router as auth_router
from .apps.participants.router import router as participants_router
from .apps.trainings.router import router as trainings_router
from .apps.trainings.router_transfers import router as transfers_router
from .apps.enrollments.router import router as enrollments_router
from .apps.allowances.router import router as allowances_router
from .apps.allowances.router_catalog import allowance_statuses_router, allowance_types_router
from .apps.lookups.router import router as lookup_router
from .apps.lookups.router_departments import router as departments_router

logger = logging.getLogger(__name__)


def _allowed_origins() -> List[str]:
    """
    Parse CORS_ALLOWED_ORIGINS from env.

    Accepts comma-separated origins. If unset, defaults to local dev ports.
    """
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "")
    if raw:
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        if origins:
            return origins
    return [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]


app = FastAPI(title="Training Management API", version="1.0.0")
cors_origins = _allowed_origins()
allow_credentials = "*" not in cors_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_exception_handlers(app)


@app.get("/", tags=["health"])
def read_root():
    return {"status": "ok", "message": "Training Management backend is running"}


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


app.include_router(auth_router)
app.include_router(participants_router)
app.include_router(trainings_router)
app.include_router(transfers_router)
app.include_router(enrollments_router)
app.include_router(allowances_router)
app.include_router(allowance_types_router)
app.include_router(allowance_statuses_router)
app.include_router(lookup_router)
app.include_router(departments_router)
