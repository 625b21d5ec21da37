"""API models for the Flavor Mix service."""

from .schemas import (
    MixRequest,
    MixResult,
    ErrorDetail,
    ErrorResponse,
    ChatMessage,
    HealthResponse
)

__all__ = [
    "MixRequest",
    "MixResult",
    "ErrorDetail",
    "ErrorResponse",
    "ChatMessage",
    "HealthResponse"
]
