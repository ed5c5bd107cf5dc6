"""
Repository for exam database operations.

Architecture:
    ExamRepository is the data access layer for exams.
    It should be injected via core.dependencies.get_exam_repository().

All SQL is encapsulated in this repository - no SQL in service or API layers.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from repositories.base import Database, row_to_dict

logger = logging.getLogger(__name__)

_EXAM_COLUMNS = "id, name, user_id, path"


class ExamRepository:
    """
    Repository for exam CRUD operations.

    Rows are returned as dicts with keys ``id``, ``name``, ``user_id`` and ``path``.
    """

    def __init__(self, db: Database):
        """
        Initialize the exam repository.

        Args:
            db: Database instance for data access.
                Injected via core.dependencies.get_exam_repository().
        """
        self._db = db

    def add(self, name: str, user_id: str, path: str) -> Dict[str, Any]:
        """
        Insert an exam and return the created row.

        Uses a single transaction to insert and read back the record.

        Args:
            name: Exam name shown to the user.
            user_id: Owner of the exam.
            path: Stored filename inside the uploads directory.

        Raises:
            sqlite3.IntegrityError: If ``user_id`` does not reference an existing user.
        """
        exam_id = str(uuid.uuid4())
        conn = self._db.get_connection()
        try:
            conn.execute(
                "INSERT INTO exams (id, name, user_id, path) VALUES (?, ?, ?, ?)",
                (exam_id, name, user_id, path)
            )
            row = conn.execute(
                f"SELECT {_EXAM_COLUMNS} FROM exams WHERE id = ?",
                (exam_id,)
            ).fetchone()
            conn.commit()
            return row_to_dict(row)
        finally:
            conn.close()

    def get_by_id(self, exam_id: str) -> Optional[Dict[str, Any]]:
        """Get an exam by id, or None if it does not exist."""
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                f"SELECT {_EXAM_COLUMNS} FROM exams WHERE id = ?",
                (exam_id,)
            ).fetchone()
            return row_to_dict(row)
        finally:
            conn.close()

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        """Get every exam owned by ``user_id``, oldest first."""
        conn = self._db.get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_EXAM_COLUMNS} FROM exams WHERE user_id = ? "
                "ORDER BY created_at ASC, rowid ASC",
                (user_id,)
            ).fetchall()
            return [dict(row) for row in rows]
        finally:
            conn.close()

    def delete(self, exam_id: str) -> bool:
        """Delete an exam row. Returns True if a row was removed."""
        conn = self._db.get_connection()
        try:
            cursor = conn.execute("DELETE FROM exams WHERE id = ?", (exam_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()
