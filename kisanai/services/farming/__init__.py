"""
Modern farming technique analysis pipeline (Groq text)
"""
from .analysis import ModernFarmingService, check_farming_completeness, parse_farming_completion
from .gatekeeper import ensure_farming_related, is_farming_related
from .prompt import build_farming_prompt

__all__ = [
    'ModernFarmingService',
    'check_farming_completeness',
    'parse_farming_completion',
    'ensure_farming_related',
    'is_farming_related',
    'build_farming_prompt'
]
