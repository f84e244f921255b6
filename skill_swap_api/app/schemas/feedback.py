"""
Pydantic schemas for swap feedback.

Feedback is a star rating (1 to 5) with an optional comment, left by
one participant of an accepted swap about the other.
"""

from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel
from .user import UserSummary

MAX_COMMENT_LENGTH = 1000


class FeedbackCreate(CamelModel):
    rating: int = Field(..., ge=1, le=5, strict=True, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, description="Optional textual comment")

    @field_validator("comment")
    @classmethod
    def sanitize_comment(cls, v: Optional[str]) -> Optional[str]:
        """Trim whitespace from the comment and enforce a maximum length."""
        if v is None:
            return None
        v = v.strip()
        if len(v) > MAX_COMMENT_LENGTH:
            raise ValueError(f"Comment must be {MAX_COMMENT_LENGTH} characters or fewer")
        return v


class SwapContext(CamelModel):
    """The two skill labels of the swap a feedback record refers to."""

    id: int
    skill_offered_by_requester: str
    skill_wanted_by_requester: str


class FeedbackRead(CamelModel):
    id: int
    swap_request_id: int
    giver_id: int
    receiver_id: int
    giver: Optional[UserSummary] = None
    receiver: Optional[UserSummary] = None
    swap_request: Optional[SwapContext] = None
    rating: int
    comment: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FeedbackSubmitResponse(CamelModel):
    msg: str
    feedback: FeedbackRead
