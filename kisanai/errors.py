"""
Error taxonomy for the advisory pipelines.

Every failure a pipeline can surface derives from ``AdvisoryError`` and
carries a stable ``code`` for the caller, a human-readable message and a
``retryable`` flag used by the retry controller.
"""
from typing import Optional


class AdvisoryError(Exception):
    code = "ADVISORY_ERROR"
    retryable = True
    fatal = False

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class InputRejectedError(AdvisoryError):
    """Query failed the pre-flight relevance check; never reached the network."""
    code = "NOT_APPLICABLE"
    retryable = False


class MissingCredentialError(AdvisoryError):
    code = "MISSING_CREDENTIAL"
    retryable = False
    fatal = True


# ----------------------------------------------------------------------------
# Transport
# ----------------------------------------------------------------------------

class TransportError(AdvisoryError):
    code = "TRANSPORT_ERROR"


class AuthenticationError(TransportError):
    code = "AUTHENTICATION_FAILED"
    retryable = False
    fatal = True


class PermissionDeniedError(TransportError):
    code = "PERMISSION_DENIED"
    retryable = False
    fatal = True


class RateLimitError(TransportError):
    code = "RATE_LIMITED"


class BadRequestError(TransportError):
    code = "BAD_REQUEST"


class UpstreamServerError(TransportError):
    code = "UPSTREAM_SERVER_ERROR"


class NetworkError(TransportError):
    code = "NETWORK_ERROR"


# ----------------------------------------------------------------------------
# Response content
# ----------------------------------------------------------------------------

class EmptyCompletionError(AdvisoryError):
    code = "EMPTY_COMPLETION"


class MalformedResponseError(AdvisoryError):
    code = "MALFORMED_RESPONSE"


class IncompleteAnalysisError(AdvisoryError):
    code = "INCOMPLETE_ANALYSIS"


def error_for_status(status_code: int, provider: str, detail: str = "") -> TransportError:
    """Map an upstream HTTP status to the matching transport error."""
    suffix = f": {detail}" if detail else ""
    if status_code == 401:
        return AuthenticationError(
            f"Invalid {provider} API key. Please check your credentials.", status_code
        )
    if status_code == 403:
        return PermissionDeniedError(
            f"{provider} API access forbidden. Please check your API key permissions.",
            status_code,
        )
    if status_code == 429:
        return RateLimitError(f"{provider} rate limit exceeded{suffix}", status_code)
    if status_code == 400:
        return BadRequestError(f"{provider} rejected the request (invalid image or prompt){suffix}", status_code)
    if status_code >= 500:
        return UpstreamServerError(f"{provider} server error {status_code}{suffix}", status_code)
    return TransportError(f"{provider} API error {status_code}{suffix}", status_code)
