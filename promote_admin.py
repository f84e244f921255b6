#!/usr/bin/env python3
"""
Grant or revoke administrator rights for a Skill Swap user.

The HTTP route that promotes users is itself restricted to
administrators, so the first administrator has to be created from the
command line.  The user is looked up by email in the configured
database (``DATABASE_URL``, or ``--db``).

Usage:
    python promote_admin.py --email alice@example.com
    python promote_admin.py --email alice@example.com --revoke
    python promote_admin.py --db ./skill_swap_api/skill_swap.db --email alice@example.com
"""

import argparse
import logging
import sys
from typing import List, Optional

from skill_swap_api.app.core.config import Settings
from skill_swap_api.app.core.db import Database
from skill_swap_api.app.core.logging_config import setup_logging

logger = logging.getLogger("promote_admin")


def set_admin(db: Database, email: str, is_admin: bool) -> Optional[str]:
    """Set the admin flag; return the username, or ``None`` if no such user."""
    with db.cursor() as cursor:
        row = cursor.execute(
            "SELECT id, username FROM users WHERE email = ?", (email.strip().lower(),)
        ).fetchone()
        if not row:
            return None
        cursor.execute(
            "UPDATE users SET is_admin = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (1 if is_admin else 0, row["id"]),
        )
    return row["username"]


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Grant or revoke Skill Swap admin rights.")
    ap.add_argument("--email", required=True, help="Email of the user to update")
    ap.add_argument("--db", help="Path to the SQLite database (defaults to DATABASE_URL)")
    ap.add_argument("--revoke", action="store_true", help="Remove admin rights instead")
    args = ap.parse_args(argv)

    settings = Settings()
    setup_logging(settings.log_level)
    if args.db:
        settings.database_url = args.db
    db = Database.from_settings(settings)
    db.init()

    username = set_admin(db, args.email, not args.revoke)
    if username is None:
        logger.error("No user found with email: %s", args.email)
        return 2
    logger.info(
        "%s admin rights for %s (%s)",
        "Revoked" if args.revoke else "Granted",
        username,
        args.email,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
