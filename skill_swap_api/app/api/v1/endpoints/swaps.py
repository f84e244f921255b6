"""
Swap request and feedback endpoints for API v1.

All routes except the public feedback listing require a valid token.
Path identifiers are taken as strings so that malformed ids are
reported as 404 by the services.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from skill_swap_api.app.api.deps import get_feedback_service, get_swap_service
from skill_swap_api.app.core.errors import ServiceError, server_error, to_http
from skill_swap_api.app.core.security import get_current_user
from skill_swap_api.app.schemas.base import MessageResponse
from skill_swap_api.app.schemas.feedback import (
    FeedbackCreate,
    FeedbackRead,
    FeedbackSubmitResponse,
)
from skill_swap_api.app.schemas.swap import SwapActionResponse, SwapCreate, SwapRead
from skill_swap_api.app.services.feedback_service import FeedbackService
from skill_swap_api.app.services.swap_service import SwapService

router = APIRouter()


@router.post(
    "/request",
    response_model=SwapActionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a skill swap",
)
async def create_swap_request(
    data: SwapCreate,
    current_user: dict = Depends(get_current_user),
    swaps: SwapService = Depends(get_swap_service),
) -> SwapActionResponse:
    """Ask another user for a swap.

    The requester is always the caller.  The responder must exist and
    have a public profile, and the same pending request must not
    already exist.
    """
    try:
        swap = await swaps.create(current_user["user_id"], data)
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "creating a swap request")
    return SwapActionResponse(msg="Swap request sent successfully!", swap_request=swap)


@router.get("/my-requests", response_model=List[SwapRead], summary="List my swap requests")
async def list_my_requests(
    current_user: dict = Depends(get_current_user),
    swaps: SwapService = Depends(get_swap_service),
) -> List[SwapRead]:
    """Requests the caller sent or received, newest first."""
    try:
        return await swaps.list_mine(current_user["user_id"])
    except Exception as e:
        raise server_error(e, "listing swap requests")


@router.put("/{swap_id}/accept", response_model=SwapActionResponse)
async def accept_swap(
    swap_id: str,
    current_user: dict = Depends(get_current_user),
    swaps: SwapService = Depends(get_swap_service),
) -> SwapActionResponse:
    try:
        swap = await swaps.accept(swap_id, current_user["user_id"])
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "accepting a swap request")
    return SwapActionResponse(msg="Swap request accepted.", swap_request=swap)


@router.put("/{swap_id}/reject", response_model=SwapActionResponse)
async def reject_swap(
    swap_id: str,
    current_user: dict = Depends(get_current_user),
    swaps: SwapService = Depends(get_swap_service),
) -> SwapActionResponse:
    try:
        swap = await swaps.reject(swap_id, current_user["user_id"])
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "rejecting a swap request")
    return SwapActionResponse(msg="Swap request rejected.", swap_request=swap)


@router.delete("/{swap_id}", response_model=MessageResponse)
async def cancel_swap(
    swap_id: str,
    current_user: dict = Depends(get_current_user),
    swaps: SwapService = Depends(get_swap_service),
) -> MessageResponse:
    """Cancel a pending request the caller sent.  The record is deleted."""
    try:
        await swaps.cancel(swap_id, current_user["user_id"])
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "cancelling a swap request")
    return MessageResponse(msg="Swap request cancelled.")


@router.post(
    "/{swap_id}/feedback",
    response_model=FeedbackSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Rate an accepted swap",
)
async def submit_feedback(
    swap_id: str,
    data: FeedbackCreate,
    current_user: dict = Depends(get_current_user),
    feedback: FeedbackService = Depends(get_feedback_service),
) -> FeedbackSubmitResponse:
    """Leave a 1-5 rating and optional comment about the other participant.

    Only one feedback record is accepted per swap.
    """
    try:
        created = await feedback.submit(swap_id, current_user["user_id"], data)
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "submitting feedback")
    return FeedbackSubmitResponse(msg="Feedback submitted successfully!", feedback=created)


@router.get("/user/{user_id}", response_model=List[FeedbackRead], summary="Feedback received")
async def list_feedback_received(
    user_id: str,
    feedback: FeedbackService = Depends(get_feedback_service),
) -> List[FeedbackRead]:
    """Feedback the user received, newest first.

    Clients compute the average rating from this list.
    """
    try:
        return await feedback.list_received(user_id)
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "listing feedback")
