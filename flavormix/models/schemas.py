"""Pydantic models for API request/response schemas."""

from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator


class MixRequest(BaseModel):
    """Request body for the mix endpoint."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: str = Field(alias="userId", min_length=1, description="Caller identifier")
    query: str = Field(min_length=1, description="Free-text description of the desired mix")

    @field_validator("user_id", "query", mode="before")
    @classmethod
    def present_as_text(cls, value: Any) -> Any:
        """Accept any present value; null, false, zero and empty stay invalid."""
        if value is None or value is False or isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and value == 0:
            return value
        return str(value)


class MixResult(BaseModel):
    """Response body for a generated mix."""
    response: str = Field(description="Synthesized mix description")


class ErrorDetail(BaseModel):
    """Error payload returned to the caller."""
    message: str = Field(description="Human-readable error message")
    status: Literal["INVALID_ARGUMENT", "INTERNAL"] = Field(description="Error status code")


class ErrorResponse(BaseModel):
    """Response body for a failed mix request."""
    error: ErrorDetail


class ChatMessage(BaseModel):
    """A single chat message sent to the completion API."""
    role: Literal["user", "assistant", "system"] = Field(description="Message role")
    content: str = Field(description="Message content")


class HealthResponse(BaseModel):
    """Response body for the /health endpoint."""
    model_config = ConfigDict(protected_namespaces=())

    status: str = Field(description="Service status")
    model_loaded: bool = Field(description="Whether the completion client is ready")
    model_name: str = Field(description="Name of the completion model")
    mode: str = Field(description="Current operating mode")
    catalog_backend: str = Field(description="Where flavor records are read from")
    version: str = Field(description="API version")
