"""
PickleFantasy FastAPI Application
Main entry point for the application
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi.responses import Response, JSONResponse
from fastapi import Request
import logging
import time
import os
import subprocess

from app.core.config import settings
from app.core.exceptions import FantasyError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Sentry integration
if os.getenv("SENTRY_DSN"):
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
    from sentry_sdk.integrations.redis import RedisIntegration

    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        integrations=[
            FastApiIntegration(),
            SqlalchemyIntegration(),
            RedisIntegration(),
        ],
        traces_sample_rate=0.1,
        environment=settings.app_env,
    )

from app.api.health import router as health_router
from app.api.webhooks import router as webhooks_router
from app.api.v1.fantasy import router as fantasy_router
from app.api.v1.prizes import router as prizes_router

# Prometheus metrics
REQUEST_COUNT = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
REQUEST_DURATION = Histogram('http_request_duration_seconds', 'HTTP request duration', ['method', 'endpoint'])
ACTIVE_CONNECTIONS = Gauge('http_active_connections', 'Number of active HTTP connections')
DOMAIN_ERROR_COUNT = Counter('fantasy_errors_total', 'Domain errors returned to clients', ['code'])

# Create FastAPI app instance
app = FastAPI(
    title="PickleFantasy API",
    description="Pickleball fantasy scoring and prize distribution API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


# Run database migrations on startup
@app.on_event("startup")
async def startup_event():
    """Run database migrations on startup"""
    if settings.app_env == "testing":
        return
    try:
        logger.info("Running database migrations...")
        result = subprocess.run(
            ["alembic", "upgrade", "head"],
            capture_output=True,
            text=True,
            timeout=60
        )
        if result.returncode == 0:
            logger.info("Database migrations completed successfully")
        else:
            logger.warning(f"Migration warning: {result.stderr}")
    except Exception as e:
        logger.warning(f"Migration error (continuing anyway): {e}")


@app.exception_handler(FantasyError)
async def fantasy_error_handler(request: Request, exc: FantasyError):
    """Map domain errors to their status code and a stable error code."""
    DOMAIN_ERROR_COUNT.labels(code=exc.code).inc()
    logger.info(f"{request.method} {request.url.path} -> {exc.code}: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Add metrics middleware
@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start_time = time.time()
    ACTIVE_CONNECTIONS.inc()
    response = None

    try:
        response = await call_next(request)
        return response
    finally:
        duration = time.time() - start_time
        ACTIVE_CONNECTIONS.dec()

        # Unhandled exceptions are counted as 500s
        status_code = response.status_code if response else 500
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=request.url.path,
            status=status_code
        ).inc()

        REQUEST_DURATION.labels(
            method=request.method,
            endpoint=request.url.path
        ).observe(duration)


# Add metrics endpoint
@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


# Include routers
app.include_router(health_router, prefix=settings.api_v1_prefix, tags=["health"])
app.include_router(webhooks_router, prefix=settings.api_v1_prefix, tags=["webhooks"])
app.include_router(fantasy_router, prefix=settings.api_v1_prefix, tags=["fantasy"])
app.include_router(prizes_router, prefix=settings.api_v1_prefix, tags=["prizes"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
