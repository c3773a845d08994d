import logging
from fastapi import APIRouter, Depends

from kisanai.config import GEMINI_API_KEY, GEMINI_MODEL, GROQ_API_KEY, GROQ_MODEL
from kisanai.dependencies import get_result_cache
from kisanai.services.cache import ResultCache

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "KisanAI Advisory Backend"
SERVICE_VERSION = "1.0.0"


@router.get("/")
async def root():
    return {
        "status": "online",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "features": [
            "Plant Disease Diagnosis (Gemini)",
            "Modern Farming Technique Analysis (Groq)",
        ]
    }


@router.get("/health")
async def health_check(cache: ResultCache = Depends(get_result_cache)):
    return {
        "status": "healthy",
        "version": SERVICE_VERSION,
        "cache_stats": cache.get_cache_stats(),
        "services": {
            "gemini": {"configured": bool(GEMINI_API_KEY), "model": GEMINI_MODEL},
            "groq": {"configured": bool(GROQ_API_KEY), "model": GROQ_MODEL},
        }
    }
