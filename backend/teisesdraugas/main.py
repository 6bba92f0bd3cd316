"""
FastAPI application entry point
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from teisesdraugas.core.config import settings
from teisesdraugas.api.v1.api import api_router
from teisesdraugas.core.logger import logger
from teisesdraugas.db.database import init_db
from teisesdraugas.middleware.correlation import CorrelationMiddleware

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(api_router, prefix="/api/v1")

# ── Correlation ID middleware (must be added before CORS) ─────────────────────
app.add_middleware(CorrelationMiddleware)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)


@app.get("/")
def read_root():
    return {"message": f"{settings.APP_NAME} API is running", "version": "1.0.0"}


@app.on_event("startup")
def startup_event():
    init_db()
    logger.info(f"{settings.APP_NAME} API started")


@app.on_event("shutdown")
def shutdown_event():
    logger.info(f"{settings.APP_NAME} API shutdown")
