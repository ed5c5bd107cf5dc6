"""
Repository for the shared surgery catalogue.

Surgery names are unique; callers pass names already normalized with
core.text_utils.format_name.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from repositories.base import Database, row_to_dict

logger = logging.getLogger(__name__)


class SurgeryRepository:
    """Repository for surgery rows (``id``, ``name``)."""

    def __init__(self, db: Database):
        self._db = db

    def get_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Get a surgery by exact name."""
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                "SELECT id, name FROM surgeries WHERE name = ?",
                (name,)
            ).fetchone()
            return row_to_dict(row)
        finally:
            conn.close()

    def get_by_id(self, surgery_id: str) -> Optional[Dict[str, Any]]:
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                "SELECT id, name FROM surgeries WHERE id = ?",
                (surgery_id,)
            ).fetchone()
            return row_to_dict(row)
        finally:
            conn.close()

    def add(self, name: str) -> Dict[str, Any]:
        """
        Insert a surgery and return the stored row.

        If another request inserted the same name in the meantime, the
        existing row is returned instead of failing on the UNIQUE constraint.
        """
        conn = self._db.get_connection()
        try:
            conn.execute(
                "INSERT INTO surgeries (id, name) VALUES (?, ?) "
                "ON CONFLICT(name) DO NOTHING",
                (str(uuid.uuid4()), name)
            )
            row = conn.execute(
                "SELECT id, name FROM surgeries WHERE name = ?",
                (name,)
            ).fetchone()
            conn.commit()
            return row_to_dict(row)
        finally:
            conn.close()
