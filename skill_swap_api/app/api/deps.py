"""
FastAPI dependencies that hand out configured services.

The ``Database`` and ``Settings`` live on ``app.state`` (set by
``create_app``); services are built per request from them.
"""

from fastapi import Depends, Request

from ..core.config import Settings
from ..core.db import Database
from ..services.admin_service import AdminService
from ..services.feedback_service import FeedbackService
from ..services.swap_service import SwapService
from ..services.user_service import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_user_service(
    db: Database = Depends(get_database),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, settings)


def get_swap_service(db: Database = Depends(get_database)) -> SwapService:
    return SwapService(db)


def get_feedback_service(db: Database = Depends(get_database)) -> FeedbackService:
    return FeedbackService(db)


def get_admin_service(db: Database = Depends(get_database)) -> AdminService:
    return AdminService(db)
