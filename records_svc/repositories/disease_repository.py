"""
Repository for the shared disease catalogue.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from repositories.base import Database, row_to_dict

logger = logging.getLogger(__name__)


class DiseaseRepository:
    """Repository for disease rows (``id``, ``name``)."""

    def __init__(self, db: Database):
        self._db = db

    def add(self, name: str) -> Dict[str, Any]:
        """Insert a disease, or return the existing row with the same name."""
        conn = self._db.get_connection()
        try:
            conn.execute(
                "INSERT INTO diseases (id, name) VALUES (?, ?) "
                "ON CONFLICT(name) DO NOTHING",
                (str(uuid.uuid4()), name)
            )
            row = conn.execute(
                "SELECT id, name FROM diseases WHERE name = ?",
                (name,)
            ).fetchone()
            conn.commit()
            return row_to_dict(row)
        finally:
            conn.close()

    def get_by_id(self, disease_id: str) -> Optional[Dict[str, Any]]:
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                "SELECT id, name FROM diseases WHERE id = ?",
                (disease_id,)
            ).fetchone()
            return row_to_dict(row)
        finally:
            conn.close()

    def get_many(self, disease_ids: Sequence[str]) -> List[Dict[str, Any]]:
        """Get the diseases with the given ids; unknown ids are skipped."""
        if not disease_ids:
            return []
        placeholders = ", ".join("?" for _ in disease_ids)
        conn = self._db.get_connection()
        try:
            rows = conn.execute(
                f"SELECT id, name FROM diseases WHERE id IN ({placeholders}) ORDER BY name",
                tuple(disease_ids)
            ).fetchall()
            return [dict(row) for row in rows]
        finally:
            conn.close()
