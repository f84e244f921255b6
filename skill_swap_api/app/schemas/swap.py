"""
Pydantic schemas for swap requests.

A swap request proposes that the requester teaches
``skill_offered_by_requester`` in exchange for
``skill_wanted_by_requester``.  The labels are free text captured at
request time; they are not checked against either profile.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import field_validator

from .base import CamelModel
from .user import UserSummary


class SwapStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    # Part of the stored status set, but cancellation deletes the row.
    CANCELLED = "cancelled"


class SwapCreate(CamelModel):
    """Payload for ``POST /swaps/request``.

    Every field is optional at the schema level so that missing values
    produce the service's own validation message.
    """

    responder_id: Optional[Union[int, str]] = None
    skill_offered_by_requester: Optional[str] = None
    skill_wanted_by_requester: Optional[str] = None
    message: Optional[str] = None

    @field_validator("skill_offered_by_requester", "skill_wanted_by_requester", "message")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None


class SwapRead(CamelModel):
    id: int
    requester_id: int
    responder_id: int
    requester: Optional[UserSummary] = None
    responder: Optional[UserSummary] = None
    skill_offered_by_requester: str
    skill_wanted_by_requester: str
    message: str = ""
    status: SwapStatus
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SwapActionResponse(CamelModel):
    msg: str
    swap_request: SwapRead
