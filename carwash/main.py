# carwash/main.py
"""
FastAPI application entry point.
Includes API key middleware, global error handler, all routers, and the
startup hook that creates the single ledger/inbox instance for the process.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from carwash.routers import conversations, customers, dashboard, health, services
from carwash.database import SessionLocal, create_tables
from carwash.config import settings
from carwash.services.inbox import InboxStore
from carwash.services.ledger import LedgerStore
from carwash.services.persistence import SqlSlotGateway
from carwash.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Studio Xpress Car Wash API",
    description="Service tickets, customer ledger, live metrics and receipts for a single car wash.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (front end served from another origin) ─────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional shared-key auth. Set API_KEY in .env; leave empty to disable.
    Health and docs stay open.
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


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(services.router,      prefix="/api/v1", tags=["🚗 Services"])
app.include_router(customers.router,     prefix="/api/v1", tags=["👤 Customers"])
app.include_router(dashboard.router,     prefix="/api/v1", tags=["📊 Dashboard"])
app.include_router(conversations.router, prefix="/api/v1", tags=["💬 Inbox"])
app.include_router(health.router,        prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info(f"🚀 {settings.BUSINESS_NAME} backend starting up...")
    create_tables()
    logger.info("✅ Storage slots ready")

    gateway = SqlSlotGateway(SessionLocal)
    app.state.ledger = LedgerStore(gateway)
    app.state.ledger.load()
    app.state.inbox = InboxStore(gateway)
    app.state.inbox.load()

    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info(f"🛑 {settings.BUSINESS_NAME} backend shutting down...")
