"""FastAPI application for Flavor Mix."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import MODE_CONFIGS, get_settings
from flavormix import __version__
from flavormix.core.catalog import CatalogStore, create_catalog_store
from flavormix.core.model_interface import CompletionManager, get_completion_manager
from flavormix.core.pipeline import MixOutcome, MixPipeline
from flavormix.models.schemas import (
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    MixResult
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

catalog_store: CatalogStore = None
completion_manager: CompletionManager = None
mix_pipeline: MixPipeline = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    global catalog_store, completion_manager, mix_pipeline

    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    mode = "mock" if settings.use_mock else "live"
    logger.info(f"Starting {settings.app_name} application ({MODE_CONFIGS[mode]['description']})...")

    catalog_store = create_catalog_store(settings)

    completion_manager = get_completion_manager()
    client = completion_manager.initialize(
        use_mock=settings.use_mock,
        model=settings.openai_model,
        api_key=settings.openai_api_key
    )

    mix_pipeline = MixPipeline(
        catalog=catalog_store,
        completion_client=client,
        max_tokens=settings.max_tokens
    )
    logger.info("Mix pipeline initialized")

    yield

    logger.info("Shutting down Flavor Mix application...")
    await completion_manager.shutdown()
    await catalog_store.close()
    mix_pipeline = None


app = FastAPI(
    title="Flavor Mix API",
    description="Personalized hookah flavor mixes generated from a flavor catalog",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_pipeline() -> MixPipeline:
    """Return the process-wide mix pipeline."""
    if mix_pipeline is None:
        raise HTTPException(status_code=503, detail="Mix pipeline not initialized")
    return mix_pipeline


def outcome_to_response(outcome: MixOutcome) -> JSONResponse:
    """Map a pipeline outcome to its HTTP response."""
    if outcome.ok:
        return JSONResponse(status_code=200, content=outcome.result.model_dump())

    error = outcome.error
    body = ErrorResponse(
        error=ErrorDetail(message=error.public_message, status=error.status)
    )
    return JSONResponse(status_code=error.http_status, content=body.model_dump())


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check service health and status."""
    settings = get_settings()
    model_loaded = completion_manager.is_ready() if completion_manager else False
    model_name = ""
    if completion_manager and completion_manager.interface:
        model_name = completion_manager.interface.get_model_name()

    return HealthResponse(
        status="healthy",
        model_loaded=model_loaded,
        model_name=model_name,
        mode="mock" if settings.use_mock else "live",
        catalog_backend=catalog_store.backend_name if catalog_store else "",
        version=__version__
    )


@app.post(
    "/generateMix",
    response_model=MixResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Mix"]
)
@app.post(
    "/api/v1/mix",
    response_model=MixResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Mix"]
)
async def generate_mix(request: Request, pipeline: MixPipeline = Depends(get_pipeline)):
    """
    Generate a personalized flavor mix.

    - **userId**: Caller identifier
    - **query**: Free-text description of the desired mix
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    outcome = await pipeline.run(payload)
    return outcome_to_response(outcome)


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "flavormix.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
