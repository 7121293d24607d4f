from datetime import datetime
from uuid import UUID

from pydantic import Field

from champions.core.db import ApiModel, MongoModel
from champions.utils import now


class ScreeningAttachment(ApiModel):
    """File forwarded inline to the model: lab results, reports or photos."""

    content: bytes
    mime_type: str


class ScreeningUsage(ApiModel):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class ScreeningResult(ApiModel):
    """Complete (non-streamed) assessment."""

    text: str = Field(..., description="Assessment text, starting with the not-a-diagnosis disclaimer")
    model: str = Field(..., description="Model that produced the assessment")
    usage: ScreeningUsage = Field(default_factory=ScreeningUsage)


class ScreeningLog(MongoModel):
    """Record of one AI screening call."""

    user_id: UUID
    model: str
    streamed: bool
    medical_history: str
    attachment_mime_type: str | None = None
    attachment_size: int | None = None
    response_text: str | None = None
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None
    error_message: str | None = None
    duration_ms: int
    created_at: datetime = Field(default_factory=now)
