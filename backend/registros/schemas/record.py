"""
Registros API - Pydantic Request/Response Schemas
==================================================

What:  The API contract for every route: one request model per body-carrying
       route, one response model per success shape.
How:   FastAPI validates request bodies against these models before the
       handler runs. A body that is not a JSON object, or that carries a field
       of the wrong type, never reaches storage (400 via main.py's handler).

Presence vs shape:
    `title` is Optional in the request models on purpose: a missing or empty
    title is a presence failure reported as "Title is required" by the route,
    while a title of the wrong type is a shape failure reported by Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RecordCreate(BaseModel):
    """Body of POST /registros."""
    title: Optional[str] = Field(default=None, description="Record title (required, non-empty)")
    description: Optional[str] = Field(default=None, description="Optional free text")


class RecordUpdate(BaseModel):
    """
    Body of PUT /registros/{id}.

    Full replace: every field is written. Omitting `description` or
    `completed` stores NULL, it does not keep the previous value.
    """
    title: Optional[str] = Field(default=None, description="Record title (required, non-empty)")
    description: Optional[str] = Field(default=None, description="Free text; null when omitted")
    completed: Optional[int] = Field(
        default=None,
        description="Completion flag (0 or 1; booleans are accepted); null when omitted",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class RecordResponse(BaseModel):
    """A stored record as returned by GET, POST and PUT."""
    id: int = Field(description="Store-assigned identifier")
    title: str = Field(description="Record title")
    description: Optional[str] = Field(default=None, description="Free text, may be null")
    completed: Optional[int] = Field(default=0, description="Completion flag")

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Confirmation body returned by DELETE."""
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """
    Error body shared by every failing route.

    Example:
        {"error": "Record not found"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and container probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
