"""
Business logic for users.

The ``UserService`` is the user directory: registration, credential
checks, profile reads and updates, and the public listing.  The
module-level helpers convert ``users`` rows into the three user views
and resolve user ids to summaries for the other services.
"""

import logging
import sqlite3
from typing import Dict, Iterable, List, Optional

from ..core.config import Settings
from ..core.db import Database, dump_list, load_list
from ..core.errors import ForbiddenError, NotFoundError, ValidationFailed, parse_id
from ..core.security import hash_password, verify_password
from ..schemas.user import (
    ProfileUpdate,
    PublicProfile,
    RegisterRequest,
    UserProfile,
    UserSummary,
)

logger = logging.getLogger(__name__)

USER_COLUMNS = (
    "id, username, email, name, location, profile_photo, skills_offered, "
    "skills_wanted, availability, is_public, is_admin, is_banned, created_at, updated_at"
)

# Maps the attribute names of ``ProfileUpdate`` to ``users`` columns.
PROFILE_FIELDS = {
    "name": "name",
    "location": "location",
    "skills_offered": "skills_offered",
    "skills_wanted": "skills_wanted",
    "availability": "availability",
    "is_public": "is_public",
}
LIST_FIELDS = {"skills_offered", "skills_wanted", "availability"}


def row_to_summary(row: sqlite3.Row) -> UserSummary:
    return UserSummary(
        id=row["id"],
        username=row["username"],
        name=row["name"] or "",
        profile_photo=row["profile_photo"],
    )


def row_to_public(row: sqlite3.Row) -> PublicProfile:
    return PublicProfile(
        id=row["id"],
        username=row["username"],
        name=row["name"] or "",
        profile_photo=row["profile_photo"],
        location=row["location"] or "",
        skills_offered=load_list(row["skills_offered"]),
        skills_wanted=load_list(row["skills_wanted"]),
        availability=load_list(row["availability"]),
        is_public=bool(row["is_public"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def row_to_profile(row: sqlite3.Row) -> UserProfile:
    public = row_to_public(row)
    return UserProfile(
        **public.model_dump(),
        email=row["email"],
        is_admin=bool(row["is_admin"]),
        is_banned=bool(row["is_banned"]),
    )


def fetch_user_summaries(cursor: sqlite3.Cursor, user_ids: Iterable[int]) -> Dict[int, UserSummary]:
    """Resolve user ids to summaries with a single lookup.

    Ids with no matching row are simply absent from the result.
    """
    ids = sorted(set(user_ids))
    if not ids:
        return {}
    placeholders = ", ".join("?" for _ in ids)
    rows = cursor.execute(
        f"SELECT id, username, name, profile_photo FROM users WHERE id IN ({placeholders})",
        tuple(ids),
    ).fetchall()
    return {row["id"]: row_to_summary(row) for row in rows}


class UserService:
    """Service for registering users and managing their profiles."""

    def __init__(self, db: Database, settings: Settings) -> None:
        self.db = db
        self.settings = settings

    async def register(self, data: RegisterRequest) -> UserProfile:
        """Create a new user.

        Email is checked before username so that the client always sees
        the same message for the same conflict.  New users are public,
        not admins and not banned.
        """
        with self.db.cursor() as cursor:
            if cursor.execute("SELECT id FROM users WHERE email = ?", (data.email,)).fetchone():
                raise ValidationFailed("User with this email already exists")
            if cursor.execute(
                "SELECT id FROM users WHERE username = ?", (data.username,)
            ).fetchone():
                raise ValidationFailed("User with this username already exists")

            hashed = hash_password(data.password, rounds=self.settings.bcrypt_rounds)
            try:
                cursor.execute(
                    "INSERT INTO users (username, email, password, profile_photo) "
                    "VALUES (?, ?, ?, ?)",
                    (data.username, data.email, hashed, self.settings.default_profile_photo),
                )
            except sqlite3.IntegrityError:
                # Lost a race against a concurrent registration.
                raise ValidationFailed("User with this email or username already exists")
            user_id = cursor.lastrowid
            row = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        logger.info("Registered user %s (%s)", data.username, user_id)
        return row_to_profile(row)

    async def authenticate(self, email: str, password: str) -> Optional[UserProfile]:
        """Return the user when the credentials match, otherwise ``None``.

        Banned users are refused with ``ForbiddenError`` even when the
        password is correct.
        """
        with self.db.cursor() as cursor:
            row = cursor.execute(
                f"SELECT {USER_COLUMNS}, password FROM users WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
        if not row or not verify_password(password, row["password"]):
            logger.info("Failed login for %s", email)
            return None
        if row["is_banned"]:
            logger.warning("Banned user %s attempted to log in", row["username"])
            raise ForbiddenError("Your account has been banned.")
        return row_to_profile(row)

    async def get_profile(self, user_id: int) -> UserProfile:
        with self.db.cursor() as cursor:
            row = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        if not row:
            raise NotFoundError("User not found")
        return row_to_profile(row)

    async def update_profile(self, user_id: int, data: ProfileUpdate) -> UserProfile:
        """Apply the fields present in ``data`` to the caller's own profile.

        Fields that are absent or explicitly ``null`` are left unchanged.
        """
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if key in PROFILE_FIELDS and value is not None
        }
        with self.db.cursor() as cursor:
            if not cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone():
                raise NotFoundError("User not found")
            if updates:
                assignments = []
                values: list = []
                for key, value in updates.items():
                    assignments.append(f"{PROFILE_FIELDS[key]} = ?")
                    if key in LIST_FIELDS:
                        values.append(dump_list(value))
                    elif isinstance(value, bool):
                        values.append(1 if value else 0)
                    else:
                        values.append(value)
                values.append(user_id)
                cursor.execute(
                    f"UPDATE users SET {', '.join(assignments)}, "
                    "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    tuple(values),
                )
            row = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        if updates:
            logger.info("User %s updated profile fields %s", user_id, sorted(updates))
        return row_to_profile(row)

    async def list_public(self) -> List[PublicProfile]:
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE is_public = 1 ORDER BY id"
            ).fetchall()
        return [row_to_public(row) for row in rows]

    async def get_public(self, raw_user_id: object) -> PublicProfile:
        """Return a public profile; 404 when absent, 403 when private."""
        user_id = parse_id(raw_user_id, "User")
        with self.db.cursor() as cursor:
            row = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        if not row:
            raise NotFoundError("User not found")
        if not row["is_public"]:
            raise ForbiddenError("This profile is private.")
        return row_to_public(row)
