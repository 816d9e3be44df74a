"""Storage of discussions in SQLite."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

from .entities import Discussion
from .errors import NotChangedError, RepositoryError
from .logger import get_logger

_COLUMNS = ("id", "title", "user_id", "create_at")
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM discussions"


def _to_discussion(row: tuple) -> Discussion:
    return Discussion.from_dict(dict(zip(_COLUMNS, row)))


class DiscussionRepository:
    """Reads and writes rows of the ``discussions`` table."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def _fetch(self, failure: str, sql: str, params: tuple = ()) -> list[tuple]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            get_logger().error(failure, extra={"error": str(exc)})
            raise RepositoryError(str(exc)) from exc

    def _change(self, failure: str, unchanged: str, sql: str, params: tuple) -> None:
        try:
            with self._conn:
                affected = self._conn.execute(sql, params).rowcount
        except sqlite3.Error as exc:
            get_logger().error(failure, extra={"error": str(exc)})
            raise RepositoryError(str(exc)) from exc
        if affected == 0:
            get_logger().error(unchanged)
            raise NotChangedError(unchanged)

    def get_all(self) -> list[Discussion]:
        rows = self._fetch("Ошибка получения всех обсуждений", f"{_SELECT} ORDER BY id")
        try:
            return [_to_discussion(row) for row in rows]
        except ValueError as exc:
            get_logger().error(
                "Ошибка сканирования данных обсуждения", extra={"error": str(exc)}
            )
            raise RepositoryError(str(exc)) from exc

    def get_by_id(self, discussion_id: int) -> Discussion:
        rows = self._fetch(
            "Ошибка получения обсуждения", f"{_SELECT} WHERE id = ?", (discussion_id,)
        )
        if not rows:
            raise RepositoryError("обсуждение не найдено")
        try:
            return _to_discussion(rows[0])
        except ValueError as exc:
            raise RepositoryError(str(exc)) from exc

    def get_by_user_id(self, user_id: int) -> list[Discussion]:
        rows = self._fetch(
            "Ошибка получения всех обсуждений пользователя",
            f"{_SELECT} WHERE user_id = ? ORDER BY id",
            (user_id,),
        )
        try:
            return [_to_discussion(row) for row in rows]
        except ValueError as exc:
            get_logger().error(
                "Ошибка получения данных из таблицы", extra={"error": str(exc)}
            )
            return []

    def create(self, discussion: Discussion) -> int:
        """Insert a discussion stamped with the current time; return its id."""
        now = datetime.now(timezone.utc)
        try:
            with self._conn:
                cursor = self._conn.execute(
                    "INSERT INTO discussions (title, user_id, create_at) VALUES (?, ?, ?)",
                    (discussion.title, discussion.user_id, now.isoformat()),
                )
        except sqlite3.Error as exc:
            get_logger().error("Ошибка создания обсуждения", extra={"error": str(exc)})
            raise RepositoryError(str(exc)) from exc
        return cursor.lastrowid

    def update(self, discussion: Discussion) -> None:
        self._change(
            "Ошибка запроса на редактирования обсуждения",
            "Обсуждение не изменено",
            "UPDATE discussions SET title = ? WHERE id = ?",
            (discussion.title, discussion.id),
        )

    def delete(self, discussion_id: int) -> None:
        self._change(
            "Ошибка запроса на удаление обсуждения",
            "Обсуждение не удалено",
            "DELETE FROM discussions WHERE id = ?",
            (discussion_id,),
        )