"""
Repository for user database operations.

Accounts live with the authentication provider; this service only keeps
the owner rows every other table points at. Owners arriving through a
verified token are registered on their first write with ``ensure``.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from repositories.base import Database, row_to_dict

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user rows."""

    def __init__(self, db: Database):
        self._db = db

    def add(
        self,
        name: Optional[str],
        email: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Insert a user and return the created row.

        Args:
            name: Display name.
            email: Optional unique e-mail address.
            user_id: Id to use; a new UUID is generated when omitted.
        """
        user_id = user_id or str(uuid.uuid4())
        conn = self._db.get_connection()
        try:
            conn.execute(
                "INSERT INTO users (id, name, email) VALUES (?, ?, ?)",
                (user_id, name, email)
            )
            row = conn.execute(
                "SELECT id, name, email, created_at FROM users WHERE id = ?",
                (user_id,)
            ).fetchone()
            conn.commit()
            return row_to_dict(row)
        finally:
            conn.close()

    def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                "SELECT id, name, email, created_at FROM users WHERE id = ?",
                (user_id,)
            ).fetchone()
            return row_to_dict(row)
        finally:
            conn.close()

    def ensure(self, user_id: str) -> None:
        """Register ``user_id`` as an owner if it is not known yet."""
        conn = self._db.get_connection()
        try:
            cursor = conn.execute(
                "INSERT INTO users (id) VALUES (?) ON CONFLICT(id) DO NOTHING",
                (user_id,)
            )
            conn.commit()
            if cursor.rowcount:
                logger.info("Registered new owner", extra={"user_id": user_id})
        finally:
            conn.close()
