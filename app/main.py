# app/main.py
"""
FastAPI application entry point.
Includes security middleware, domain error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import locations, queue, checkins, profile, admin, health
from app.database import create_tables, SessionLocal
from app.config import settings
from app.errors import SmartQueueError, Unavailable
from app.services.demo_simulator import demo_simulator
from app.services.location_registry import seed_defaults
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="SmartQueue Campus API",
    description="Live campus crowd levels, virtual queues and QR check-in.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (mobile web client is served from another origin) ──────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the web client origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional shared key between the gateway and this API.
    Health check and docs stay open. Set API_KEY in .env; leave empty to disable.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(SmartQueueError)
async def domain_error_handler(request: Request, exc: SmartQueueError):
    logger.info(f"{request.method} {request.url.path} rejected: {exc.name} — {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.name},
    )


@app.exception_handler(OperationalError)
async def store_unavailable_handler(request: Request, exc: OperationalError):
    logger.error(f"Store unavailable on {request.url.path}: {exc}")
    err = Unavailable("Service temporarily unavailable, please retry")
    return JSONResponse(
        status_code=err.status_code,
        content={"detail": err.detail, "error": err.name},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(locations.router, prefix="/api/v1", tags=["📍 Locations"])
app.include_router(queue.router,     prefix="/api/v1", tags=["🎟️  Queue"])
app.include_router(checkins.router,  prefix="/api/v1", tags=["✅ Check-in"])
app.include_router(profile.router,   prefix="/api/v1", tags=["👤 Profile"])
app.include_router(admin.router,     prefix="/api/v1", tags=["🛠️  Admin"])
app.include_router(health.router,    prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 SmartQueue backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")

    if settings.SEED_DEFAULT_LOCATIONS:
        db = SessionLocal()
        try:
            seed_defaults(db)
        finally:
            db.close()

    if settings.DEMO_MODE:
        demo_simulator.start()

    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 SmartQueue backend shutting down...")
    await demo_simulator.stop()
