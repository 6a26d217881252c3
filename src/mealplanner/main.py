"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from mealplanner.config import get_settings
from mealplanner.logging_config import LoggingContext, configure_logging, get_logger
from mealplanner.routers import meal_plans_router
from mealplanner.routers.meal_plans import get_engine

settings = get_settings()

# Configure logging on module load; JSON lines outside development
configure_logging(settings.log_level, json_format=not settings.is_development)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Meal Planner API")
    if not settings.generation_configured:
        logger.warning("No generation API key configured; plan endpoints will return 503")

    yield

    logger.info("Shutting down Meal Planner API")
    if get_engine.cache_info().currsize:
        generator = get_engine().generator
        close = getattr(generator, "close", None)
        if close is not None:
            await close()


app = FastAPI(
    title="Meal Planner API",
    description="Weekly meal plans and shopping lists generated around user preferences",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag every log line of a request with its id and echo it back."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(meal_plans_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "mealplanner-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Meal Planner API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
