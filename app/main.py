from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from app.api import quotes, services, zones
from app.core.config import settings
from app.core.errors import NotFoundError, RemoteFailureError
from app.core.logging_config import setup_logging
from app.core.redis import init_redis, close_redis, get_redis
from app.core.metrics import registry, request_count, request_duration, db_connected, redis_connected, get_metrics_text
from app.db.session import engine
import time
import logging

logger = logging.getLogger(__name__)


def _endpoint_label(request: Request) -> str:
    # templated path keeps label cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception:
            endpoint = _endpoint_label(request)
            request_count.labels(
                method=request.method,
                endpoint=endpoint,
                status=500
            ).inc()
            request_duration.labels(
                method=request.method,
                endpoint=endpoint
            ).observe(time.time() - start_time)
            raise

        endpoint = _endpoint_label(request)
        request_count.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code
        ).inc()
        request_duration.labels(
            method=request.method,
            endpoint=endpoint
        ).observe(time.time() - start_time)

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    logger.info("Application starting...")

    logger.info("Initializing Redis connection...")
    try:
        await init_redis()
        redis_connected.set(1)
        logger.info("Redis connected")
    except Exception as e:
        logger.error(f"Redis connection failed, quotes will not be cached: {e}")
        redis_connected.set(0)

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        db_connected.set(1)
        logger.info("Database connected")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        db_connected.set(0)

    yield

    logger.info("Application shutting down...")
    await close_redis()
    redis_connected.set(0)
    await engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)

app.include_router(quotes.router)
app.include_router(services.router)
app.include_router(zones.router)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(RemoteFailureError)
async def remote_failure_handler(request: Request, exc: RemoteFailureError):
    logger.error(f"{request.method} {request.url.path} aborted: {exc}")
    return JSONResponse(
        status_code=502,
        content={"detail": f"Pricing data unavailable ({exc.operation})"}
    )


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@app.get("/health", tags=["monitoring"])
async def health_check():
    redis_healthy = get_redis() is not None

    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "dependencies": {
            "redis": "connected" if redis_healthy else "disconnected",
            "database": "connected" if registry.get_sample_value("db_connected") else "disconnected"
        }
    }


@app.get("/readiness", tags=["monitoring"])
async def readiness_check():
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Readiness probe failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"ready": False, "reason": "Database not available"}
        )

    return {
        "ready": True,
        "service": settings.API_TITLE
    }


@app.get("/", tags=["root"])
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }
