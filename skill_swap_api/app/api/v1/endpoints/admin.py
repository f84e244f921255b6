"""
Admin console endpoints for API v1.

Every route requires an authenticated administrator; other callers get
401 (no/invalid token) or 403 (not an admin).
"""

from typing import List

from fastapi import APIRouter, Depends

from skill_swap_api.app.api.deps import get_admin_service
from skill_swap_api.app.core.errors import ServiceError, server_error, to_http
from skill_swap_api.app.core.security import require_admin
from skill_swap_api.app.schemas.base import MessageResponse
from skill_swap_api.app.schemas.feedback import FeedbackRead
from skill_swap_api.app.schemas.swap import SwapRead
from skill_swap_api.app.schemas.user import BanResponse, UserProfile
from skill_swap_api.app.services.admin_service import AdminService

router = APIRouter()


@router.post("/make-admin/{user_id}", response_model=MessageResponse)
async def make_admin(
    user_id: str,
    current_user: dict = Depends(require_admin),
    admin: AdminService = Depends(get_admin_service),
) -> MessageResponse:
    """Promote a user to administrator."""
    try:
        msg = await admin.make_admin(user_id, current_user["user_id"])
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "promoting a user")
    return MessageResponse(msg=msg)


@router.get("/users", response_model=List[UserProfile])
async def list_all_users(
    current_user: dict = Depends(require_admin),
    admin: AdminService = Depends(get_admin_service),
) -> List[UserProfile]:
    """All users, private and banned ones included."""
    try:
        return await admin.list_users()
    except Exception as e:
        raise server_error(e, "listing users for admin")


@router.put("/users/ban/{user_id}", response_model=BanResponse)
async def toggle_user_ban(
    user_id: str,
    current_user: dict = Depends(require_admin),
    admin: AdminService = Depends(get_admin_service),
) -> BanResponse:
    """Ban a user, or lift an existing ban.

    Administrators cannot ban themselves or each other.
    """
    try:
        return await admin.toggle_ban(user_id, current_user["user_id"])
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "toggling a ban")


@router.get("/swaps", response_model=List[SwapRead])
async def list_all_swaps(
    current_user: dict = Depends(require_admin),
    admin: AdminService = Depends(get_admin_service),
) -> List[SwapRead]:
    try:
        return await admin.list_swaps()
    except Exception as e:
        raise server_error(e, "listing swaps for admin")


@router.get("/feedback", response_model=List[FeedbackRead])
async def list_all_feedback(
    current_user: dict = Depends(require_admin),
    admin: AdminService = Depends(get_admin_service),
) -> List[FeedbackRead]:
    try:
        return await admin.list_feedback()
    except Exception as e:
        raise server_error(e, "listing feedback for admin")
