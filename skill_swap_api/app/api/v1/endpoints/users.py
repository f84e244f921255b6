"""
User endpoints for API v1.

``/users/profile`` reads and updates the caller's own profile.  The
listing and the single-profile route are public and only expose
public profiles, without email or admin/ban flags.
"""

from typing import List

from fastapi import APIRouter, Depends

from skill_swap_api.app.api.deps import get_user_service
from skill_swap_api.app.core.errors import ServiceError, server_error, to_http
from skill_swap_api.app.core.security import get_current_user
from skill_swap_api.app.schemas.user import ProfileUpdate, PublicProfile, UserProfile
from skill_swap_api.app.services.user_service import UserService

router = APIRouter()


@router.get("/profile", response_model=UserProfile)
async def get_own_profile(
    current_user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> UserProfile:
    try:
        return await users.get_profile(current_user["user_id"])
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "loading a profile")


@router.put("/profile", response_model=UserProfile)
async def update_own_profile(
    data: ProfileUpdate,
    current_user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> UserProfile:
    """Update name, location, skills, availability and visibility.

    Username and email cannot be changed here; unknown fields in the
    body are ignored.
    """
    try:
        return await users.update_profile(current_user["user_id"], data)
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "updating a profile")


@router.get("", response_model=List[PublicProfile])
@router.get("/", response_model=List[PublicProfile], include_in_schema=False)
async def list_public_users(users: UserService = Depends(get_user_service)) -> List[PublicProfile]:
    """List every public profile."""
    try:
        return await users.list_public()
    except Exception as e:
        raise server_error(e, "listing users")


@router.get("/{user_id}", response_model=PublicProfile)
async def get_public_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
) -> PublicProfile:
    """Return a single public profile.

    404 when the user does not exist (including malformed ids), 403
    when the profile is private.
    """
    try:
        return await users.get_public(user_id)
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "loading a public profile")
