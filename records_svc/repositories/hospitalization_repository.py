"""
Repository for hospitalization database operations.

Hospitalizations are never updated in place: every save or update of a user
surgery inserts a new row. Linked diseases live in ``hospitalization_diseases``.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from repositories.base import Database

logger = logging.getLogger(__name__)

_HOSPITALIZATION_COLUMNS = "id, user_id, entrance_date, exit_date, location, reason"


class HospitalizationRepository:
    """
    Repository for hospitalization rows.

    Rows are returned as dicts with the table columns plus ``diseases``,
    the list of linked disease rows.
    """

    def __init__(self, db: Database):
        self._db = db

    def add(
        self,
        user_id: str,
        entrance_date: str,
        exit_date: Optional[str],
        location: str,
        reason: str,
        disease_ids: Sequence[str] = ()
    ) -> Dict[str, Any]:
        """
        Insert a hospitalization with its disease links in one transaction.

        Args:
            user_id: Owner of the hospitalization.
            entrance_date: Canonical UTC timestamp string.
            exit_date: Canonical UTC timestamp string, or None while still admitted.
            location: Where the hospitalization happened.
            reason: Why the patient was admitted.
            disease_ids: Diseases to link.

        Returns:
            The created row including ``diseases``.
        """
        hospitalization_id = str(uuid.uuid4())
        conn = self._db.get_connection()
        try:
            conn.execute(
                "INSERT INTO hospitalizations "
                "(id, user_id, entrance_date, exit_date, location, reason) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (hospitalization_id, user_id, entrance_date, exit_date, location, reason)
            )
            conn.executemany(
                "INSERT INTO hospitalization_diseases (hospitalization_id, disease_id) VALUES (?, ?)",
                [(hospitalization_id, disease_id) for disease_id in disease_ids]
            )
            conn.commit()
            return self._fetch(conn, hospitalization_id)
        finally:
            conn.close()

    def get_by_id(self, hospitalization_id: str) -> Optional[Dict[str, Any]]:
        conn = self._db.get_connection()
        try:
            return self._fetch(conn, hospitalization_id)
        finally:
            conn.close()

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        """Get every hospitalization of ``user_id``, including orphaned ones."""
        conn = self._db.get_connection()
        try:
            ids = [
                row["id"]
                for row in conn.execute(
                    "SELECT id FROM hospitalizations WHERE user_id = ? "
                    "ORDER BY created_at ASC, rowid ASC",
                    (user_id,)
                ).fetchall()
            ]
            return [self._fetch(conn, hospitalization_id) for hospitalization_id in ids]
        finally:
            conn.close()

    def _fetch(self, conn, hospitalization_id: str) -> Optional[Dict[str, Any]]:
        row = conn.execute(
            f"SELECT {_HOSPITALIZATION_COLUMNS} FROM hospitalizations WHERE id = ?",
            (hospitalization_id,)
        ).fetchone()
        if row is None:
            return None

        diseases = conn.execute(
            "SELECT d.id, d.name FROM diseases d "
            "INNER JOIN hospitalization_diseases hd ON hd.disease_id = d.id "
            "WHERE hd.hospitalization_id = ? ORDER BY d.name",
            (hospitalization_id,)
        ).fetchall()

        hospitalization = dict(row)
        hospitalization["diseases"] = [dict(disease) for disease in diseases]
        return hospitalization
