from enum import Enum

from fastapi import APIRouter, Depends, HTTPException

from kisanai.dependencies import get_result_cache
from kisanai.services.cache import ResultCache

router = APIRouter(prefix="/api", tags=["results"])


class AnalysisDomain(str, Enum):
    DISEASE = "disease"
    FARMING = "farming"


@router.get("/{domain}/last")
async def get_last_result(domain: AnalysisDomain, cache: ResultCache = Depends(get_result_cache)):
    cached = cache.load_result(domain.value)
    if cached is None:
        raise HTTPException(status_code=404, detail=f"No saved {domain.value} result")
    return cached.model_dump()


@router.delete("/{domain}/last")
async def clear_last_result(domain: AnalysisDomain, cache: ResultCache = Depends(get_result_cache)):
    if not cache.clear_domain(domain.value):
        raise HTTPException(status_code=404, detail=f"No saved {domain.value} result")
    return {"status": "cleared", "domain": domain.value}
