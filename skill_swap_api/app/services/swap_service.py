"""
Business logic for swap requests.

A request starts ``pending``.  Only its responder may move it to
``accepted`` or ``rejected``; only its requester may cancel it, which
deletes the row.  No transition leaves ``accepted`` or ``rejected``,
and nothing ever returns to ``pending``.

Authorization always compares the caller with the participant ids
stored on the record, never with ids supplied in the request.
Transitions are conditional updates (``WHERE status = 'pending'``), so
when two callers race on the same request only one of them wins and
the other gets the state conflict.
"""

import logging
import sqlite3
from typing import Iterable, List, Optional

from ..core.db import Database
from ..core.errors import (
    ConflictError,
    ForbiddenError,
    NotAuthorizedError,
    NotFoundError,
    ValidationFailed,
    parse_id,
)
from ..schemas.swap import SwapCreate, SwapRead, SwapStatus
from .user_service import fetch_user_summaries

logger = logging.getLogger(__name__)

SWAP_COLUMNS = (
    "id, requester_id, responder_id, skill_offered_by_requester, "
    "skill_wanted_by_requester, message, status, created_at, updated_at"
)


def _resolve(cursor: sqlite3.Cursor, rows: Iterable[sqlite3.Row]) -> List[SwapRead]:
    """Build ``SwapRead`` objects with both participants resolved."""
    rows = list(rows)
    users = fetch_user_summaries(
        cursor, [r["requester_id"] for r in rows] + [r["responder_id"] for r in rows]
    )
    return [
        SwapRead(
            id=row["id"],
            requester_id=row["requester_id"],
            responder_id=row["responder_id"],
            requester=users.get(row["requester_id"]),
            responder=users.get(row["responder_id"]),
            skill_offered_by_requester=row["skill_offered_by_requester"],
            skill_wanted_by_requester=row["skill_wanted_by_requester"],
            message=row["message"] or "",
            status=SwapStatus(row["status"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
        for row in rows
    ]


class SwapService:
    """Service managing the lifecycle of swap requests."""

    def __init__(self, db: Database) -> None:
        self.db = db

    @staticmethod
    def _fetch(cursor: sqlite3.Cursor, swap_id: int) -> Optional[sqlite3.Row]:
        return cursor.execute(
            f"SELECT {SWAP_COLUMNS} FROM swap_requests WHERE id = ?", (swap_id,)
        ).fetchone()

    async def create(self, requester_id: int, data: SwapCreate) -> SwapRead:
        """Create a pending swap request from ``requester_id``.

        Checks run in this order: required fields, self-swap, responder
        existence, responder visibility, duplicate pending request.
        """
        responder_raw = data.responder_id
        if (
            responder_raw is None
            or str(responder_raw).strip() == ""
            or not data.skill_offered_by_requester
            or not data.skill_wanted_by_requester
        ):
            raise ValidationFailed("Please provide responder, skill offered, and skill wanted.")
        if str(responder_raw).strip() == str(requester_id):
            raise ValidationFailed("You cannot request a swap with yourself.")
        responder_id = parse_id(responder_raw, "Responder user")
        # Catches ids such as "007" that only differ from the caller's textually.
        if responder_id == requester_id:
            raise ValidationFailed("You cannot request a swap with yourself.")

        with self.db.cursor() as cursor:
            responder = cursor.execute(
                "SELECT id, is_public FROM users WHERE id = ?", (responder_id,)
            ).fetchone()
            if not responder:
                raise NotFoundError("Responder user not found.")
            if not responder["is_public"]:
                raise ForbiddenError("Cannot request swap with a private profile.")

            existing = cursor.execute(
                "SELECT id FROM swap_requests WHERE requester_id = ? AND responder_id = ? "
                "AND skill_offered_by_requester = ? AND skill_wanted_by_requester = ? "
                "AND status = ?",
                (
                    requester_id,
                    responder_id,
                    data.skill_offered_by_requester,
                    data.skill_wanted_by_requester,
                    SwapStatus.PENDING.value,
                ),
            ).fetchone()
            if existing:
                raise ConflictError(
                    "A pending swap request for these skills already exists with this user."
                )

            cursor.execute(
                "INSERT INTO swap_requests (requester_id, responder_id, "
                "skill_offered_by_requester, skill_wanted_by_requester, message, status) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    requester_id,
                    responder_id,
                    data.skill_offered_by_requester,
                    data.skill_wanted_by_requester,
                    data.message or "",
                    SwapStatus.PENDING.value,
                ),
            )
            swap_id = cursor.lastrowid
            created = _resolve(cursor, [self._fetch(cursor, swap_id)])[0]
        logger.info(
            "User %s requested swap %s with user %s (%s for %s)",
            requester_id,
            swap_id,
            responder_id,
            data.skill_offered_by_requester,
            data.skill_wanted_by_requester,
        )
        return created

    async def list_mine(self, user_id: int) -> List[SwapRead]:
        """All requests the user sent or received, newest first."""
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {SWAP_COLUMNS} FROM swap_requests "
                "WHERE requester_id = ? OR responder_id = ? "
                "ORDER BY created_at DESC, id DESC",
                (user_id, user_id),
            ).fetchall()
            return _resolve(cursor, rows)

    async def list_all(self) -> List[SwapRead]:
        """Every request in the system, newest first."""
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {SWAP_COLUMNS} FROM swap_requests ORDER BY created_at DESC, id DESC"
            ).fetchall()
            return _resolve(cursor, rows)

    async def accept(self, raw_swap_id: object, caller_id: int) -> SwapRead:
        return await self._respond(raw_swap_id, caller_id, SwapStatus.ACCEPTED)

    async def reject(self, raw_swap_id: object, caller_id: int) -> SwapRead:
        return await self._respond(raw_swap_id, caller_id, SwapStatus.REJECTED)

    async def _respond(self, raw_swap_id: object, caller_id: int, new_status: SwapStatus) -> SwapRead:
        """Move a pending request to ``new_status`` on behalf of its responder."""
        verb = "accept" if new_status is SwapStatus.ACCEPTED else "reject"
        swap_id = parse_id(raw_swap_id, "Swap request")
        with self.db.cursor() as cursor:
            row = self._fetch(cursor, swap_id)
            if not row:
                raise NotFoundError("Swap request not found.")
            if row["responder_id"] != caller_id:
                logger.warning("User %s tried to %s swap %s", caller_id, verb, swap_id)
                raise NotAuthorizedError(f"Not authorized to {verb} this swap request.")
            if row["status"] != SwapStatus.PENDING.value:
                raise ConflictError(f"Swap request is already {row['status']}.")
            cursor.execute(
                "UPDATE swap_requests SET status = ?, updated_at = CURRENT_TIMESTAMP "
                "WHERE id = ? AND status = ?",
                (new_status.value, swap_id, SwapStatus.PENDING.value),
            )
            if cursor.rowcount == 0:
                raise ConflictError("Swap request is no longer pending.")
            updated = _resolve(cursor, [self._fetch(cursor, swap_id)])[0]
        logger.info("User %s %sed swap %s", caller_id, verb, swap_id)
        return updated

    async def cancel(self, raw_swap_id: object, caller_id: int) -> None:
        """Delete a pending request on behalf of its requester."""
        swap_id = parse_id(raw_swap_id, "Swap request")
        with self.db.cursor() as cursor:
            row = self._fetch(cursor, swap_id)
            if not row:
                raise NotFoundError("Swap request not found.")
            if row["requester_id"] != caller_id:
                logger.warning("User %s tried to cancel swap %s", caller_id, swap_id)
                raise NotAuthorizedError("Not authorized to cancel this swap request.")
            if row["status"] != SwapStatus.PENDING.value:
                raise ConflictError("Only pending swap requests can be cancelled.")
            cursor.execute(
                "DELETE FROM swap_requests WHERE id = ? AND status = ?",
                (swap_id, SwapStatus.PENDING.value),
            )
            if cursor.rowcount == 0:
                raise ConflictError("Swap request is no longer pending.")
        logger.info("User %s cancelled swap %s", caller_id, swap_id)
