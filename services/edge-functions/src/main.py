"""
Edge Functions Service
======================
HTTP endpoints behind the FS RAG web client:

- GET  /gold-prices       gold price table by purity (INR)
- POST /hybrid-chat       strict RAG chat, streamed as text/event-stream
- POST /transcribe-media  audio/video transcription into the document row

Each request is handled independently; clients are built per request and
closed when the response completes.
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Add repo root to path to access shared modules
root_dir = str(Path(__file__).resolve().parents[3])
if root_dir not in sys.path:
    sys.path.insert(0, root_dir)

from shared.config import get_settings
from shared.errors import APIError, APIException, ErrorCode, internal_error
from shared.logging.structured import setup_structured_logging

settings = get_settings()

# =============================================================================
# Logging Configuration
# =============================================================================
if settings.STRUCTURED_LOGGING:
    setup_structured_logging(settings.SERVICE_NAME, "DEBUG" if settings.DEBUG else settings.LOG_LEVEL)
    logger = logging.getLogger(__name__)
    logger.info("Structured logging enabled for %s", settings.SERVICE_NAME)
else:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger(__name__)

from src.routers import (  # noqa: E402
    gold_prices_router,
    health_router,
    hybrid_chat_router,
    transcribe_media_router,
)

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


# =============================================================================
# Lifespan (Startup/Shutdown)
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s...", settings.SERVICE_NAME)
    if not settings.AI_GATEWAY_API_KEY:
        logger.warning("AI_GATEWAY_API_KEY not set; chat and transcription requests will fail")
    if not (settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY):
        logger.warning("Supabase credentials not set; transcription requests will fail")
    yield
    logger.info("%s shutdown complete", settings.SERVICE_NAME)


# =============================================================================
# App Initialization
# =============================================================================
app = FastAPI(title="FS RAG Edge Functions", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_methods=["*"],
    allow_headers=CORS_ALLOW_HEADERS,
)


# =============================================================================
# Error Handlers
# =============================================================================
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    exc.error.service = settings.SERVICE_NAME
    logger.error(
        "%s %s failed: %s",
        request.method,
        request.url.path,
        exc.error.message,
        extra={"request_id": exc.error.request_id},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = APIError(
        error_code=ErrorCode.VALIDATION_ERROR.value,
        message="Invalid request body",
        details={"fields": [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]},
        service=settings.SERVICE_NAME,
    )
    return JSONResponse(status_code=400, content=error.to_payload())


def _cors_headers(request: Request) -> dict[str, str]:
    origin = request.headers.get("origin")
    allowed = settings.allowed_origins_list
    if not origin:
        return {}
    if "*" in allowed:
        return {"Access-Control-Allow-Origin": "*"}
    if origin in allowed:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


# Exception (500) handlers run outside CORSMiddleware, so headers are added here.
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s crashed", request.method, request.url.path)
    error = internal_error(exc, service=settings.SERVICE_NAME)
    return JSONResponse(status_code=500, content=error.to_payload(), headers=_cors_headers(request))


# =============================================================================
# Routers
# =============================================================================
app.include_router(health_router)
app.include_router(gold_prices_router)
app.include_router(hybrid_chat_router)
app.include_router(transcribe_media_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
