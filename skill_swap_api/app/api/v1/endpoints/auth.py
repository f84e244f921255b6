"""
Authentication endpoints: registration and login.

Both return a signed access token that the client sends back in the
``x-auth-token`` header.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from skill_swap_api.app.api.deps import get_settings, get_user_service
from skill_swap_api.app.core.config import Settings
from skill_swap_api.app.core.errors import ServiceError, server_error, to_http
from skill_swap_api.app.core.security import create_access_token
from skill_swap_api.app.schemas.user import LoginRequest, RegisterRequest, TokenResponse
from skill_swap_api.app.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """Register a new user and log them in.

    Returns 400 when the email or the username is already taken.
    """
    try:
        user = await users.register(data)
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "registering a user")
    token = create_access_token(user.id, user.is_admin, settings)
    return TokenResponse(msg="Registration successful", token=token)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """Exchange email and password for an access token.

    Unknown emails and wrong passwords get the same generic 400 so the
    response does not reveal which accounts exist.
    """
    try:
        user = await users.authenticate(data.email, data.password)
    except ServiceError as e:
        raise to_http(e)
    except Exception as e:
        raise server_error(e, "logging in")
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")
    token = create_access_token(user.id, user.is_admin, settings)
    return TokenResponse(msg="Login successful", token=token)
