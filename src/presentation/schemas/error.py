"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["INSUFFICIENT_FUNDS"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Insufficient funds in Checking: available 100.00, required 1500.00"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "INSUFFICIENT_FUNDS",
                    "message": "Insufficient funds in Checking: available 100.00, required 1500.00",
                    "request_id": "abc123",
                }
            ]
        }
    }
