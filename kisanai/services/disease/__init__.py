"""
Plant disease diagnosis pipeline (Gemini image + text)
"""
from .detection import DiseaseDetectionService, parse_disease_completion
from .prompt import build_disease_prompt

__all__ = [
    'DiseaseDetectionService',
    'parse_disease_completion',
    'build_disease_prompt'
]
