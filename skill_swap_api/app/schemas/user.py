"""
Pydantic models for user data.

Three views of a user exist: ``UserSummary`` (what other records embed
when they reference a user), ``PublicProfile`` (what anyone may see of
a public profile) and ``UserProfile`` (what the owner and the admins
see).  None of them carries the credential hash.
"""

import re
from typing import List, Optional

from pydantic import Field, field_validator

from .base import CamelModel

EMAIL_PATTERN = re.compile(r".+@.+\..+")

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


class RegisterRequest(CamelModel):
    username: str = Field(..., examples=["alice"])
    email: str = Field(..., examples=["alice@example.com"])
    password: str = Field(..., examples=["secret1"])

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters")
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_PATTERN.fullmatch(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class TokenResponse(CamelModel):
    msg: str
    token: str


class UserSummary(CamelModel):
    """Identity fields embedded in swap and feedback records."""

    id: int
    username: str
    name: str = ""
    profile_photo: Optional[str] = None


class PublicProfile(UserSummary):
    location: str = ""
    skills_offered: List[str] = Field(default_factory=list)
    skills_wanted: List[str] = Field(default_factory=list)
    availability: List[str] = Field(default_factory=list)
    is_public: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class UserProfile(PublicProfile):
    email: str
    is_admin: bool = False
    is_banned: bool = False


def _clean_labels(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    cleaned = []
    for value in values:
        value = value.strip()
        if value:
            cleaned.append(value)
    return cleaned


class ProfileUpdate(CamelModel):
    """Fields a user may change on their own profile.

    Username and email are deliberately absent: they cannot be changed
    through the profile endpoint.
    """

    name: Optional[str] = None
    location: Optional[str] = None
    skills_offered: Optional[List[str]] = None
    skills_wanted: Optional[List[str]] = None
    availability: Optional[List[str]] = None
    is_public: Optional[bool] = None

    @field_validator("name", "location")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    @field_validator("skills_offered", "skills_wanted", "availability")
    @classmethod
    def strip_labels(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_labels(v)


class BanResponse(CamelModel):
    msg: str
    user: UserProfile
