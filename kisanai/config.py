import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _get_env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ============================================================================#
# LLM PROVIDERS
# ============================================================================#
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")  # Image + text model (disease diagnosis)
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-pro")
GEMINI_API_URL = os.getenv(
    "GEMINI_API_URL",
    "https://generativelanguage.googleapis.com/v1beta/models",
)

GROQ_API_KEY = os.getenv("GROQ_API_KEY")  # Text model (farming analysis)
GROQ_MODEL = os.getenv("GROQ_MODEL", "moonshotai/kimi-k2-instruct-0905")
GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")

# Timeouts (seconds)
DIAGNOSIS_TIMEOUT = _get_env_float("DIAGNOSIS_TIMEOUT", 30.0)
FARMING_TIMEOUT = _get_env_float("FARMING_TIMEOUT", 60.0)
CONNECT_TIMEOUT = _get_env_float("CONNECT_TIMEOUT", 10.0)

# Decoding
MAX_OUTPUT_TOKENS = 4096

# Retry policy (farming pipeline)
FARMING_MAX_ATTEMPTS = _get_env_int("FARMING_MAX_ATTEMPTS", 2)
RETRY_BASE_DELAY = _get_env_float("RETRY_BASE_DELAY", 1.0)  # seconds × attempt number

# ============================================================================#
# HTTP SURFACE
# ============================================================================#
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
RATE_LIMIT = os.getenv("RATE_LIMIT", "10/minute")  # per client, analysis endpoints
MAX_UPLOAD_SIZE = _get_env_int("MAX_UPLOAD_SIZE", 10 * 1024 * 1024)  # 10 MB

# Cache configuration
RESULT_CACHE_TTL = _get_env_int("RESULT_CACHE_TTL", 24 * 3600)  # 24 hours
CACHE_NAMESPACE = "kisanai"


@dataclass(frozen=True)
class ProviderConfig:
    """Connection and decoding settings for one completion provider."""
    api_key: Optional[str]
    base_url: str
    model: str
    timeout: float
    temperature: float
    top_p: float
    max_output_tokens: int = MAX_OUTPUT_TOKENS
    top_k: Optional[int] = None
    connect_timeout: float = CONNECT_TIMEOUT

    @classmethod
    def gemini(cls, api_key: Optional[str] = None) -> "ProviderConfig":
        return cls(
            api_key=api_key if api_key is not None else GEMINI_API_KEY,
            base_url=GEMINI_API_URL,
            model=GEMINI_MODEL,
            timeout=DIAGNOSIS_TIMEOUT,
            temperature=0.3,
            top_p=1.0,
            top_k=32,
        )

    @classmethod
    def groq(cls, api_key: Optional[str] = None) -> "ProviderConfig":
        return cls(
            api_key=api_key if api_key is not None else GROQ_API_KEY,
            base_url=GROQ_BASE_URL,
            model=GROQ_MODEL,
            timeout=FARMING_TIMEOUT,
            temperature=0.7,
            top_p=0.9,
        )
