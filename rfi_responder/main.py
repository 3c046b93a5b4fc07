"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from rfi_responder.api.main import api_router
from rfi_responder.config import settings
from rfi_responder.core.embedding_client import create_embedding_client_from_settings
from rfi_responder.core.exceptions import (
    AppError,
    ConfigurationError,
    ExtractionError,
    NotFoundError,
    OracleError,
    UnsupportedFormatError,
    UploadRejectedError,
)
from rfi_responder.core.unified_llm import create_llm_client_from_settings
from rfi_responder.database.base import async_session_maker
from rfi_responder.database.client import close_database, db_client, init_database
from rfi_responder.schemas.responses import HealthCheckResponse
from rfi_responder.services.chunking.text_chunker import TextChunker
from rfi_responder.services.extraction.content_extractor import ContentExtractor
from rfi_responder.services.pipeline.dispatcher import PipelineDispatcher
from rfi_responder.services.pipeline.orchestrator import DocumentPipeline, user_message
from rfi_responder.services.pipeline.status_store import ProcessingStatusStore
from rfi_responder.services.questions.llm_extractor import LLMQuestionExtractor
from rfi_responder.services.questions.rule_based_classifier import RuleBasedQuestionClassifier
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)


class RootResponse(BaseModel):
    """Root endpoint response payload."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")


def build_classifier(app_settings):
    """Question classifier selected by ``QUESTION_CLASSIFIER``.

    Raises:
        ConfigurationError: Unknown classifier, or the LLM provider has no credential
    """
    choice = app_settings.processing.question_classifier.lower()
    if choice == "rule_based":
        return RuleBasedQuestionClassifier()
    if choice == "llm":
        llm_client = create_llm_client_from_settings(app_settings.llm)
        return LLMQuestionExtractor(
            llm_client,
            temperature=app_settings.llm.temperature,
            max_tokens=app_settings.llm.max_tokens,
        )
    raise ConfigurationError(f"Unsupported question classifier: {app_settings.processing.question_classifier}")


def configure_app_state(app: FastAPI, app_settings=settings, session_factory=async_session_maker) -> None:
    """Create the long-lived pipeline objects and attach them to ``app.state``.

    Raises:
        ConfigurationError: If an oracle client cannot be configured
    """
    processing = app_settings.processing

    status_store = ProcessingStatusStore(
        terminal_ttl=processing.status_ttl,
        max_terminal=processing.status_max_finished,
    )
    extractor = ContentExtractor(temp_dir=processing.temp_dir)
    pipeline = DocumentPipeline(
        extractor=extractor,
        chunker=TextChunker(
            chunk_size=processing.chunk_size,
            chunk_overlap=processing.chunk_overlap,
            min_chunk_length=processing.min_chunk_length,
        ),
        classifier=build_classifier(app_settings),
        status_store=status_store,
        session_factory=session_factory,
        chunk_concurrency=app_settings.llm.chunk_concurrency,
    )

    app.state.status_store = status_store
    app.state.extractor = extractor
    app.state.embedding_client = create_embedding_client_from_settings(app_settings.embedding, app_settings.llm)
    app.state.pipeline = pipeline
    app.state.dispatcher = PipelineDispatcher(pipeline)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Oracle clients are built before the app serves requests, so missing
    credentials stop startup instead of failing the first upload.
    """
    LOGGER.info(
        "Starting application",
        extra={
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        },
    )

    configure_app_state(app)

    try:
        LOGGER.info("Initializing database...")
        await init_database(create_schema=settings.db.create_schema)
        LOGGER.info("Database initialized successfully")
    except Exception as e:
        LOGGER.error(
            "Failed to initialize database",
            exc_info=True,
            extra={"error": str(e)}
        )

    yield

    LOGGER.info("Shutting down application")
    await app.state.dispatcher.drain(timeout=settings.processing.shutdown_timeout)

    try:
        await close_database()
    except Exception as e:
        LOGGER.error(
            "Error closing database",
            exc_info=True,
            extra={"error": str(e)}
        )


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Extracts questions and requirements from RFI documents and drafts answers",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(UploadRejectedError)
async def upload_rejected_handler(request: Request, exc: UploadRejectedError) -> JSONResponse:
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE if exc.too_large else status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.exception_handler(UnsupportedFormatError)
@app.exception_handler(ExtractionError)
async def extraction_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": exc.message})


@app.exception_handler(OracleError)
async def oracle_error_handler(request: Request, exc: OracleError) -> JSONResponse:
    LOGGER.error(f"Oracle failure while handling {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": user_message(exc)})


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    LOGGER.error(f"Unhandled application error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": exc.message})


@app.get(
    "/health",
    response_model=HealthCheckResponse,
    tags=["Health"],
    summary="Health check endpoint",
    description="Check if the service is running and healthy",
    operation_id="get_service_health_status",
)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint.

    Returns:
        HealthCheckResponse: Service health status
    """
    db_health = await db_client.health_check()

    return HealthCheckResponse(
        status="healthy" if db_health["status"] == "healthy" else "degraded",
        version=settings.app_version,
        service=settings.app_name,
    )


@app.get(
    "/",
    response_model=RootResponse,
    tags=["Root"],
    summary="Root endpoint",
    operation_id="get_public_root_metadata",
)
async def root() -> RootResponse:
    return RootResponse(
        message="Server is running",
        version=settings.app_version,
        docs="/docs",
        health="/health",
    )


app.include_router(api_router, prefix=settings.api_prefix)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rfi_responder.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
