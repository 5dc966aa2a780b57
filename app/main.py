"""FastAPI application setup for the weather cache gateway."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import router as api_router
from .config import settings
from .errors import WeatherGatewayError
from .resources import build_resources
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build shared resources on startup and release them on shutdown."""
    app.state.resources = build_resources(settings)
    logger.info("Weather gateway started", extra={"environment": settings.environment})
    try:
        yield
    finally:
        app.state.resources.close()


app = FastAPI(title="Weather Cache Gateway", lifespan=lifespan)


@app.exception_handler(WeatherGatewayError)
async def handle_gateway_error(request: Request, exc: WeatherGatewayError):
    """Map classified failures onto their HTTP status and `{error, message}` body."""
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException):
    """Render framework errors (unknown routes, bad methods) in the same shape."""
    if exc.status_code == 404:
        body = {"error": "route not found", "message": f"the route {request.url.path} doesn't exist in the server"}
    else:
        body = {"error": "request failed", "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    """Last-resort handler: log and answer 500 in the `{error, message}` shape."""
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc!r}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "internal server error", "message": str(exc) or "something went wrong"},
    )


@app.get("/")
def index():
    """Welcome document listing the available endpoints."""
    return {
        "message": "Weather API is running",
        "endpoints": {
            "status": "/status",
            "weather": "/weather/{city}",
        },
    }


@app.get("/status")
def service_status(request: Request):
    """Liveness information for health checks, including cache reachability."""
    resources = getattr(request.app.state, "resources", None)
    cache_ok = bool(resources and resources.cache.ping())
    return {
        "status": "running",
        "environment": settings.environment,
        "cache": "up" if cache_ok else "down",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


app.include_router(api_router)
