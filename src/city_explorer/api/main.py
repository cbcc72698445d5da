from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from city_explorer.api.routes import router
from city_explorer.config import settings
from city_explorer.data.database import check_connection, create_db_engine, create_session_factory, init_db
from city_explorer.exceptions import CityExplorerError, NoLocationFound, StoreError, ValidationError
from city_explorer.logging_config import get_logger, setup_logging
from city_explorer.pipeline import RequestOrchestrator
from city_explorer.pipeline.orchestrator import GENERIC_ERROR

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(
        settings.logging.level,
        settings.logging.file,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )

    # Startup: one engine and one HTTP client for the whole process
    app.state.engine = None
    app.state.orchestrator = None
    client = httpx.AsyncClient(timeout=settings.providers.timeout)
    try:
        engine = create_db_engine()
        await init_db(engine)
        app.state.engine = engine
        app.state.orchestrator = RequestOrchestrator.from_settings(create_session_factory(engine), client)
        logger.info("RequestOrchestrator initialized successfully.")
    except StoreError as e:
        # Keep booting so /health can report the outage
        logger.error("Failed to initialize the store: %s", e.message)

    yield

    await client.aclose()
    if app.state.engine is not None:
        await app.state.engine.dispose()
    logger.info("City Explorer shutting down")


app = FastAPI(
    title="City Explorer API",
    description="Location lookup with cached weather, events, movies and business reviews.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(router)


def _error(status: int, text: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"status": status, "responseText": text})


@app.exception_handler(NoLocationFound)
async def no_location_handler(request: Request, exc: NoLocationFound):
    logger.info("No location found | %s", exc.details.get("search_query"))
    return _error(404, "No location found")


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return _error(400, exc.message)


@app.exception_handler(CityExplorerError)
async def generic_handler(request: Request, exc: CityExplorerError):
    logger.error("%s %s failed: %s | %s", request.method, request.url.path, exc.message, exc.details)
    return _error(500, GENERIC_ERROR)


@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    engine = app.state.engine if hasattr(app.state, "engine") else None
    database = engine is not None and await check_connection(engine)
    return {"status": "healthy", "database": database}
