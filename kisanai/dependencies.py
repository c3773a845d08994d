"""
Shared singletons for the routers.

Services are built lazily so the app starts without API keys; a missing
key surfaces as ``MissingCredentialError`` on the first request that needs
it. Tests swap these out through ``app.dependency_overrides``.
"""
import logging
from functools import lru_cache

from slowapi import Limiter
from slowapi.util import get_remote_address

from kisanai.config import ProviderConfig
from kisanai.services.cache import ResultCache, result_cache
from kisanai.services.disease.detection import DiseaseDetectionService
from kisanai.services.dispatchers import GeminiDispatcher, GroqDispatcher
from kisanai.services.farming.analysis import ModernFarmingService
from kisanai.services.farming.constants import FARMING_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)


@lru_cache(maxsize=1)
def get_disease_service() -> DiseaseDetectionService:
    dispatcher = GeminiDispatcher(ProviderConfig.gemini())
    logger.info("Disease detection service initialized")
    return DiseaseDetectionService(dispatcher)


@lru_cache(maxsize=1)
def get_farming_service() -> ModernFarmingService:
    dispatcher = GroqDispatcher(ProviderConfig.groq(), FARMING_SYSTEM_PROMPT)
    logger.info("Modern farming service initialized")
    return ModernFarmingService(dispatcher)


def get_result_cache() -> ResultCache:
    return result_cache


async def close_services() -> None:
    """Close the dispatchers of services that were actually created."""
    for factory in (get_disease_service, get_farming_service):
        if factory.cache_info().currsize:
            await factory().dispatcher.aclose()
