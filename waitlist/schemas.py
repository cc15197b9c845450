"""Waitlist entry and response schemas."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class WaitlistEntry(BaseModel):
    """One validated signup, as written to the store."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    joined_at: datetime = Field(default_factory=utcnow, alias="joinedAt")

    def to_document(self) -> dict:
        """Document shape stored in the ``emails`` collection."""
        return self.model_dump(by_alias=True)


class JoinWaitlistRequest(BaseModel):
    """Request body for POST /join-waitlist (documentation only)."""

    email: str


class SignupResult(BaseModel):
    """Response body for every signup outcome."""

    success: bool
    message: str
    insertedId: Optional[str] = None
