"""Storage of messages in SQLite."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

from .entities import Message
from .errors import NotChangedError, RepositoryError
from .logger import get_logger

_COLUMNS = ("id", "user_id", "discussion_id", "content", "create_at")
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM messages"


def _to_message(row: tuple) -> Message:
    return Message.from_dict(dict(zip(_COLUMNS, row)))


class MessageRepository:
    """Reads and writes rows of the ``messages`` table."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def _fetch(self, failure: str, sql: str, params: tuple) -> list[tuple]:
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

    def get_all(self, discussion_id: int) -> list[Message]:
        rows = self._fetch(
            "Ошибка получения всех сообщений обсуждения",
            f"{_SELECT} WHERE discussion_id = ? ORDER BY id",
            (discussion_id,),
        )
        try:
            return [_to_message(row) for row in rows]
        except ValueError as exc:
            get_logger().error(
                "Ошибка получения данных из таблицы", extra={"error": str(exc)}
            )
            raise RepositoryError(str(exc)) from exc

    def get_by_user_id(self, user_id: int) -> list[Message]:
        rows = self._fetch(
            "Ошибка получения всех сообщений пользователя",
            f"{_SELECT} WHERE user_id = ? ORDER BY id",
            (user_id,),
        )
        try:
            return [_to_message(row) for row in rows]
        except ValueError as exc:
            get_logger().error(
                "Ошибка получения данных из таблицы", extra={"error": str(exc)}
            )
            return []

    def create(self, message: Message) -> int:
        """Insert a message stamped with the current time; return its id."""
        now = datetime.now(timezone.utc)
        try:
            with self._conn:
                cursor = self._conn.execute(
                    "INSERT INTO messages (user_id, discussion_id, content, create_at) "
                    "VALUES (?, ?, ?, ?)",
                    (message.user_id, message.discussion_id, message.content, now.isoformat()),
                )
        except sqlite3.Error as exc:
            get_logger().error("Ошибка создания сообщения", extra={"error": str(exc)})
            raise RepositoryError(str(exc)) from exc
        return cursor.lastrowid

    def update(self, message: Message) -> None:
        self._change(
            "Ошибка запроса на редактирования сообщения",
            "Сообщение не изменено",
            "UPDATE messages SET content = ?, discussion_id = ? WHERE id = ?",
            (message.content, message.discussion_id, message.id),
        )

    def delete(self, message_id: int) -> None:
        self._change(
            "Ошибка запроса на удаление сообщения",
            "Сообщение не удалено",
            "DELETE FROM messages WHERE id = ?",
            (message_id,),
        )