import logging

from fastapi import APIRouter, Depends, Request

from kisanai.config import RATE_LIMIT
from kisanai.dependencies import get_farming_service, get_result_cache, limiter
from kisanai.models import FarmingAnalysisRequest
from kisanai.services.cache import ResultCache
from kisanai.services.farming.analysis import ModernFarmingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/farming", tags=["farming"])


@router.post("/analyze")
@limiter.limit(RATE_LIMIT)
async def analyze_farming(
    request: Request,
    body: FarmingAnalysisRequest,
    service: ModernFarmingService = Depends(get_farming_service),
    cache: ResultCache = Depends(get_result_cache),
):
    logger.info(f"🌱 Farming analysis request: {body.technique[:50]}")
    result = await service.analyze(body)

    payload = result.model_dump(by_alias=True)
    cache.save_result("farming", request=body.model_dump(by_alias=True), result=payload)
    return payload
