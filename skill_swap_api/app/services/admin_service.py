"""
Business logic for the admin console.

Administrators see every user (the credential hash excepted), every
swap request and every feedback record, can promote users to
administrator and can toggle a user's ban flag.  Access control
(``is_admin``) is enforced by the endpoints through ``require_admin``.
"""

import logging
from typing import List

from ..core.db import Database
from ..core.errors import NotFoundError, ValidationFailed, parse_id
from ..schemas.feedback import FeedbackRead
from ..schemas.swap import SwapRead
from ..schemas.user import BanResponse, UserProfile
from .feedback_service import FeedbackService
from .swap_service import SwapService
from .user_service import USER_COLUMNS, row_to_profile

logger = logging.getLogger(__name__)


class AdminService:
    """Service backing the ``/admin`` endpoints."""

    def __init__(self, db: Database) -> None:
        self.db = db
        self.swaps = SwapService(db)
        self.feedback = FeedbackService(db)

    async def list_users(self) -> List[UserProfile]:
        with self.db.cursor() as cursor:
            rows = cursor.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY id").fetchall()
        return [row_to_profile(row) for row in rows]

    async def toggle_ban(self, raw_user_id: object, admin_id: int) -> BanResponse:
        """Flip the ban flag of a user.

        Administrators cannot ban themselves or another administrator.
        """
        user_id = parse_id(raw_user_id, "User")
        with self.db.cursor() as cursor:
            row = cursor.execute(
                "SELECT id, username, is_admin, is_banned FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            if not row:
                raise NotFoundError("User not found.")
            if row["id"] == admin_id:
                raise ValidationFailed("You cannot ban yourself.")
            if row["is_admin"]:
                raise ValidationFailed("Cannot ban another administrator.")
            banned = not row["is_banned"]
            cursor.execute(
                "UPDATE users SET is_banned = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (1 if banned else 0, user_id),
            )
            updated = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        logger.info(
            "Admin %s %s user %s", admin_id, "banned" if banned else "unbanned", row["username"]
        )
        return BanResponse(
            msg=f"User {row['username']} ban status updated to {str(banned).lower()}.",
            user=row_to_profile(updated),
        )

    async def make_admin(self, raw_user_id: object, admin_id: int) -> str:
        user_id = parse_id(raw_user_id, "User")
        with self.db.cursor() as cursor:
            row = cursor.execute(
                "SELECT id, username FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            if not row:
                raise NotFoundError("User not found.")
            cursor.execute(
                "UPDATE users SET is_admin = 1, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (user_id,),
            )
        logger.info("Admin %s promoted user %s", admin_id, row["username"])
        return f"{row['username']} is now an administrator."

    async def list_swaps(self) -> List[SwapRead]:
        return await self.swaps.list_all()

    async def list_feedback(self) -> List[FeedbackRead]:
        return await self.feedback.list_all()
