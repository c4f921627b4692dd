"""
Notes API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the API contract for notes.
Why:   Strict input validation, automatic serialization, and OpenAPI doc generation.
How:   The validator turns raw JSON into NoteCreate / NotePatch; routes
       serialize NoteResponse with camelCase timestamps.

Design Decision:
    Input schemas use strict types (StrictStr, StrictBool): "true" is not a
    boolean and 1 is not a title. A payload that only works because of
    coercion is reported as malformed instead of being silently rewritten.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator


def _require_text(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("title must not be empty")
    return value


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Normalized payload for POST /api/notes.

    Only `title` is required. The stored title is the submitted string
    unchanged; blank-ness is checked on a stripped copy.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Shopping list",
                "content": "Milk, eggs, bread",
                "category": "personal",
                "published": False,
            }
        },
    )

    title: StrictStr = Field(description="Note title (required, non-blank)")
    content: StrictStr = Field(default="", description="Note body, may be empty")
    category: Optional[StrictStr] = Field(default=None, description="Optional category")
    published: StrictBool = Field(default=False, description="Publication flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _require_text(v)


class NotePatch(BaseModel):
    """
    Partial update payload for PATCH /api/notes/{id}.

    Every field is optional. Which fields the client actually sent is read
    from `model_fields_set`, never from the values: an absent field is left
    alone, while an explicit `"category": null` clears the category.
    `title`, `content` and `published` cannot be set to null.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": {"published": True}},
    )

    title: Optional[StrictStr] = Field(default=None, description="New title (non-blank)")
    content: Optional[StrictStr] = Field(default=None, description="New body")
    category: Optional[StrictStr] = Field(default=None, description="New category, null clears it")
    published: Optional[StrictBool] = Field(default=None, description="New publication flag")

    @field_validator("title", "content", "published", mode="before")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _require_text(v)

    def changes(self) -> dict:
        """Only the fields present in the request body."""
        return self.model_dump(include=self.model_fields_set)


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    Full representation of a note.

    Returned by create, get, list (as array items) and update. Timestamps
    are serialized as `createdAt` / `updatedAt`; FastAPI renders response
    models by alias.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(description="Opaque note identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    category: Optional[str] = Field(default=None, description="Category, if any")
    published: bool = Field(description="Publication flag")
    created_at: datetime = Field(
        alias="createdAt", description="Creation time (UTC ISO 8601)"
    )
    updated_at: datetime = Field(
        alias="updatedAt", description="Last modification time (UTC ISO 8601)"
    )


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description
        details: Optional extra context (e.g., which fields failed validation)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Liveness report returned by GET /api/healthchecker."""
    status: str = Field(description="Always 'success' while the process serves requests")
    message: str = Field(description="Service banner")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
