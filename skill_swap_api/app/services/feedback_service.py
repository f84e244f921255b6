"""
Business logic for swap feedback.

Feedback may only be left on an ``accepted`` swap, by one of its two
participants, about the other one.  A swap receives at most one
feedback record in total: once either participant has rated it, the
other can no longer do so.  The ``UNIQUE`` constraint on
``feedback.swap_request_id`` enforces this for concurrent submissions
as well.
"""

import logging
import sqlite3
from typing import Iterable, List

from ..core.db import Database
from ..core.errors import ConflictError, NotAuthorizedError, NotFoundError, parse_id
from ..schemas.feedback import FeedbackCreate, FeedbackRead, SwapContext
from ..schemas.swap import SwapStatus
from .user_service import fetch_user_summaries

logger = logging.getLogger(__name__)

FEEDBACK_COLUMNS = (
    "f.id, f.swap_request_id, f.giver_id, f.receiver_id, f.rating, f.comment, "
    "f.created_at, f.updated_at"
)

ALREADY_SUBMITTED = "Feedback already submitted for this swap."


def _resolve(
    cursor: sqlite3.Cursor, rows: Iterable[sqlite3.Row], with_swap: bool = False
) -> List[FeedbackRead]:
    rows = list(rows)
    users = fetch_user_summaries(
        cursor, [r["giver_id"] for r in rows] + [r["receiver_id"] for r in rows]
    )
    swaps = {}
    if with_swap and rows:
        ids = sorted({r["swap_request_id"] for r in rows})
        placeholders = ", ".join("?" for _ in ids)
        for swap in cursor.execute(
            "SELECT id, skill_offered_by_requester, skill_wanted_by_requester "
            f"FROM swap_requests WHERE id IN ({placeholders})",
            tuple(ids),
        ).fetchall():
            swaps[swap["id"]] = SwapContext(
                id=swap["id"],
                skill_offered_by_requester=swap["skill_offered_by_requester"],
                skill_wanted_by_requester=swap["skill_wanted_by_requester"],
            )
    return [
        FeedbackRead(
            id=row["id"],
            swap_request_id=row["swap_request_id"],
            giver_id=row["giver_id"],
            receiver_id=row["receiver_id"],
            giver=users.get(row["giver_id"]),
            receiver=users.get(row["receiver_id"]),
            swap_request=swaps.get(row["swap_request_id"]),
            rating=row["rating"],
            comment=row["comment"] or "",
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
        for row in rows
    ]


class FeedbackService:
    """Service for submitting and listing swap feedback."""

    def __init__(self, db: Database) -> None:
        self.db = db

    @staticmethod
    def _already_rated(cursor: sqlite3.Cursor, swap_id: int) -> bool:
        row = cursor.execute(
            "SELECT id FROM feedback WHERE swap_request_id = ?", (swap_id,)
        ).fetchone()
        return row is not None

    async def submit(self, raw_swap_id: object, giver_id: int, data: FeedbackCreate) -> FeedbackRead:
        """Record the caller's feedback on an accepted swap.

        The receiver is whichever participant the caller is not.
        """
        swap_id = parse_id(raw_swap_id, "Swap request")
        with self.db.cursor() as cursor:
            swap = cursor.execute(
                "SELECT id, requester_id, responder_id, status FROM swap_requests WHERE id = ?",
                (swap_id,),
            ).fetchone()
            if not swap:
                raise NotFoundError("Swap request not found.")
            if swap["status"] != SwapStatus.ACCEPTED.value:
                raise ConflictError("Feedback can only be given for accepted swaps.")
            if giver_id == swap["requester_id"]:
                receiver_id = swap["responder_id"]
            elif giver_id == swap["responder_id"]:
                receiver_id = swap["requester_id"]
            else:
                logger.warning("User %s tried to rate swap %s", giver_id, swap_id)
                raise NotAuthorizedError("Not authorized to give feedback on this swap.")
            if self._already_rated(cursor, swap_id):
                raise ConflictError(ALREADY_SUBMITTED)

            try:
                cursor.execute(
                    "INSERT INTO feedback (swap_request_id, giver_id, receiver_id, rating, comment) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (swap_id, giver_id, receiver_id, data.rating, data.comment or ""),
                )
            except sqlite3.IntegrityError:
                raise ConflictError(ALREADY_SUBMITTED)
            feedback_id = cursor.lastrowid
            row = cursor.execute(
                f"SELECT {FEEDBACK_COLUMNS} FROM feedback f WHERE f.id = ?", (feedback_id,)
            ).fetchone()
            created = _resolve(cursor, [row])[0]
        logger.info(
            "User %s rated user %s %s/5 for swap %s", giver_id, receiver_id, data.rating, swap_id
        )
        return created

    async def list_received(self, raw_user_id: object) -> List[FeedbackRead]:
        """All feedback the user received, newest first."""
        user_id = parse_id(raw_user_id, "User")
        with self.db.cursor() as cursor:
            if not cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone():
                raise NotFoundError("User not found")
            rows = cursor.execute(
                f"SELECT {FEEDBACK_COLUMNS} FROM feedback f WHERE f.receiver_id = ? "
                "ORDER BY f.created_at DESC, f.id DESC",
                (user_id,),
            ).fetchall()
            return _resolve(cursor, rows)

    async def list_all(self) -> List[FeedbackRead]:
        """Every feedback record with the swap's skill labels, newest first."""
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {FEEDBACK_COLUMNS} FROM feedback f ORDER BY f.created_at DESC, f.id DESC"
            ).fetchall()
            return _resolve(cursor, rows, with_swap=True)
