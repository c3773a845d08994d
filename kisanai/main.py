# KisanAI Advisory Backend v1.0.0
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware

from kisanai.config import (
    CORS_ORIGINS,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    GROQ_API_KEY,
    GROQ_MODEL,
)
from kisanai.dependencies import close_services, get_result_cache, limiter
from kisanai.errors import (
    AdvisoryError,
    AuthenticationError,
    BadRequestError,
    EmptyCompletionError,
    IncompleteAnalysisError,
    InputRejectedError,
    MalformedResponseError,
    MissingCredentialError,
    NetworkError,
    PermissionDeniedError,
    RateLimitError,
    UpstreamServerError,
)
from kisanai.routers import disease, farming, health, results

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Most specific class first
ERROR_STATUS_CODES = [
    (InputRejectedError, 422),
    (MissingCredentialError, 503),
    (AuthenticationError, 502),
    (PermissionDeniedError, 502),
    (RateLimitError, 429),
    (NetworkError, 504),
    (BadRequestError, 502),
    (UpstreamServerError, 502),
    (EmptyCompletionError, 502),
    (MalformedResponseError, 502),
    (IncompleteAnalysisError, 502),
]


def status_for_error(error: AdvisoryError) -> int:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_class):
            return status_code
    return 500


# ============================================================================#
# Lifespan Events
# ============================================================================#

@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    # Startup
    logger.info("=" * 60)
    logger.info("Starting KisanAI Advisory Backend")
    logger.info(f"Gemini ({GEMINI_MODEL}): {'✓' if GEMINI_API_KEY else '✗'}")
    logger.info(f"Groq ({GROQ_MODEL}): {'✓' if GROQ_API_KEY else '✗'}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Shutting down gracefully...")
    get_result_cache().clear_all()
    await close_services()


app = FastAPI(
    title="KisanAI Advisory Backend",
    description="LLM-backed plant disease diagnosis and farming technique analysis",
    version="1.0.0",
    lifespan=lifespan
)

# Initialize Rate Limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AdvisoryError)
async def advisory_error_handler(request: Request, exc: AdvisoryError):
    status_code = status_for_error(exc)
    if status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.code} - {exc.message}")
    else:
        logger.warning(f"{request.url.path} rejected: {exc.code} - {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


app.include_router(health.router)
app.include_router(disease.router)
app.include_router(farming.router)
app.include_router(results.router)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    uvicorn.run('kisanai.main:app', host='0.0.0.0', port=port, reload=True)
