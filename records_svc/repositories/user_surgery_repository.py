"""
Repository for user surgery join records.

A user surgery links a user, a surgery from the shared catalogue and the
hospitalization episode in which it happened.

All SQL is encapsulated in this repository - no SQL in service or API layers.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from repositories.base import Database, row_to_dict

logger = logging.getLogger(__name__)

_USER_SURGERY_COLUMNS = "id, user_id, hospitalization_id, surgery_id, after_effects"


class UserSurgeryRepository:
    """
    Repository for ``user_surgeries`` rows.

    Plain rows are dicts with keys ``id``, ``user_id``, ``hospitalization_id``,
    ``surgery_id`` and ``after_effects``.
    """

    def __init__(self, db: Database):
        self._db = db

    def add(
        self,
        user_id: str,
        hospitalization_id: str,
        surgery_id: str,
        after_effects: Optional[str] = None
    ) -> Dict[str, Any]:
        """Insert a new join row with a generated id and return it."""
        return self.save(
            user_surgery_id=str(uuid.uuid4()),
            user_id=user_id,
            hospitalization_id=hospitalization_id,
            surgery_id=surgery_id,
            after_effects=after_effects,
        )

    def save(
        self,
        user_surgery_id: str,
        user_id: str,
        hospitalization_id: str,
        surgery_id: str,
        after_effects: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Write the join row with id ``user_surgery_id``.

        Inserts the row if it does not exist, otherwise overwrites every
        column of the existing row.

        Raises:
            sqlite3.IntegrityError: If a referenced user, surgery or
                hospitalization does not exist.
        """
        conn = self._db.get_connection()
        try:
            conn.execute(
                "INSERT INTO user_surgeries "
                "(id, user_id, hospitalization_id, surgery_id, after_effects) "
                "VALUES (?, ?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET "
                "user_id = excluded.user_id, "
                "hospitalization_id = excluded.hospitalization_id, "
                "surgery_id = excluded.surgery_id, "
                "after_effects = excluded.after_effects",
                (user_surgery_id, user_id, hospitalization_id, surgery_id, after_effects)
            )
            row = conn.execute(
                f"SELECT {_USER_SURGERY_COLUMNS} FROM user_surgeries WHERE id = ?",
                (user_surgery_id,)
            ).fetchone()
            conn.commit()
            return row_to_dict(row)
        finally:
            conn.close()

    def get_by_id(self, user_surgery_id: str) -> Optional[Dict[str, Any]]:
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                f"SELECT {_USER_SURGERY_COLUMNS} FROM user_surgeries WHERE id = ?",
                (user_surgery_id,)
            ).fetchone()
            return row_to_dict(row)
        finally:
            conn.close()

    def get_with_surgery(self, user_surgery_id: str) -> Optional[Dict[str, Any]]:
        """Get a join row plus the ``surgery_name`` it refers to."""
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                "SELECT us.id, us.user_id, us.hospitalization_id, us.surgery_id, "
                "us.after_effects, s.name AS surgery_name "
                "FROM user_surgeries us "
                "INNER JOIN surgeries s ON s.id = us.surgery_id "
                "WHERE us.id = ?",
                (user_surgery_id,)
            ).fetchone()
            return row_to_dict(row)
        finally:
            conn.close()

    def list_by_user_with_details(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Get every join row of ``user_id`` with its surgery and hospitalization.

        Returns:
            Dicts with the join columns plus nested ``surgery`` and
            ``hospitalization`` dicts, oldest first.
        """
        conn = self._db.get_connection()
        try:
            rows = conn.execute(
                "SELECT us.id, us.user_id, us.hospitalization_id, us.surgery_id, "
                "us.after_effects, "
                "s.name AS surgery_name, "
                "h.entrance_date, h.exit_date, h.location, h.reason "
                "FROM user_surgeries us "
                "INNER JOIN surgeries s ON s.id = us.surgery_id "
                "INNER JOIN hospitalizations h ON h.id = us.hospitalization_id "
                "WHERE us.user_id = ? "
                "ORDER BY us.created_at ASC, us.rowid ASC",
                (user_id,)
            ).fetchall()
        finally:
            conn.close()

        return [
            {
                "id": row["id"],
                "user_id": row["user_id"],
                "hospitalization_id": row["hospitalization_id"],
                "surgery_id": row["surgery_id"],
                "after_effects": row["after_effects"],
                "surgery": {"id": row["surgery_id"], "name": row["surgery_name"]},
                "hospitalization": {
                    "id": row["hospitalization_id"],
                    "entrance_date": row["entrance_date"],
                    "exit_date": row["exit_date"],
                    "location": row["location"],
                    "reason": row["reason"],
                },
            }
            for row in rows
        ]

    def delete(self, user_surgery_id: str) -> bool:
        """Delete a join row. Returns True if a row was removed."""
        conn = self._db.get_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM user_surgeries WHERE id = ?",
                (user_surgery_id,)
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()
