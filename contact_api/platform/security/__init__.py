from contact_api.platform.security.headers import SecurityHeadersMiddleware
from contact_api.platform.security.origins import (
    CORS_REJECTED_MESSAGE,
    PAYLOAD_TOO_LARGE_MESSAGE,
    BodySizeLimitMiddleware,
    OriginGuardMiddleware,
)

__all__ = [
    "CORS_REJECTED_MESSAGE",
    "PAYLOAD_TOO_LARGE_MESSAGE",
    "BodySizeLimitMiddleware",
    "OriginGuardMiddleware",
    "SecurityHeadersMiddleware",
]
