"""HTTP handlers for the discussion and message endpoints."""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Iterable, Mapping, TypeVar

from starlette.requests import Request
from starlette.responses import JSONResponse

from .entities import Discussion, Message
from .errors import RepositoryError
from .usecases import DiscussionUseCase, MessageUseCase

T = TypeVar("T")

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1
_JSON_WHITESPACE = " \t\n\r"
_DECODER = json.JSONDecoder()
_HTML_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


class ForumJSONResponse(JSONResponse):
    """Compact UTF-8 JSON with HTML-sensitive characters escaped."""

    media_type = "application/json; charset=utf-8"

    def render(self, content: Any) -> bytes:
        text = json.dumps(content, ensure_ascii=False, separators=(",", ":"))
        for char, escaped in _HTML_ESCAPES:
            text = text.replace(char, escaped)
        return text.encode("utf-8")


def _parse_id(text: Any) -> int | None:
    """Parse a decimal 64-bit integer; None if the text is not one."""
    if not isinstance(text, str) or not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        return None
    return value


async def _read_json(request: Request) -> Any:
    """Decode the first JSON value of the request body."""
    body = await request.body()
    text = body.decode("utf-8")
    value, _ = _DECODER.raw_decode(text.lstrip(_JSON_WHITESPACE))
    return value


async def _bind(request: Request, factory: Callable[[Any], T]) -> T | None:
    """Build an object from the JSON body; None if the body does not fit."""
    try:
        data = await _read_json(request)
        return factory({} if data is None else data)
    except ValueError:
        return None


def _title_of(data: Any) -> str:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    title = data.get("title")
    if title is None:
        return ""
    if not isinstance(title, str):
        raise ValueError("field 'title' must be a string")
    return title


def _error(status: int, text: str) -> ForumJSONResponse:
    return ForumJSONResponse({"error": text}, status_code=status)


def _ok(content: Any) -> ForumJSONResponse:
    return ForumJSONResponse(content, status_code=200)


def _items(entities: Iterable[Discussion | Message]) -> list[dict[str, Any]] | None:
    # An empty result is rendered as null, not as an empty array.
    return [entity.to_dict() for entity in entities] or None


class ForumHandler:
    """Request handlers backed by the discussion and message use cases."""

    def __init__(self, discussions: DiscussionUseCase, messages: MessageUseCase):
        self.discussions = discussions
        self.messages = messages

    # Messages

    async def get_all_messages(self, request: Request) -> ForumJSONResponse:
        discussion_id = _parse_id(request.path_params.get("id"))
        if discussion_id is None:
            return _error(400, "Невалидный параметр в id")
        try:
            messages = self.messages.get_all_messages(discussion_id)
        except RepositoryError:
            return _error(500, "Ошибка получения всех сообщений по id обсуждения")
        return _ok(_items(messages))

    async def get_messages_by_user_id(self, request: Request) -> ForumJSONResponse:
        user_id = _parse_id(request.path_params.get("id"))
        if user_id is None:
            return _error(400, "Невалидный параметр в id")
        try:
            messages = self.messages.get_messages_by_user_id(user_id)
        except RepositoryError as exc:
            return _error(500, f"Ошибка получения всех сообщений пользователя: {exc}")
        return _ok(_items(messages))

    async def create_message(self, request: Request) -> ForumJSONResponse:
        message = await _bind(request, Message.from_dict)
        if message is None:
            return _error(400, "Невалидные параметры сообщения")
        try:
            self.messages.create_message(message)
        except RepositoryError as exc:
            return _error(500, f"Ошибка создания сообщения: {exc}")
        return _ok("сообщение создано")

    async def update_message(self, request: Request) -> ForumJSONResponse:
        message = await _bind(request, Message.from_dict)
        if message is None:
            return _error(400, "Невалидные параметры сообщения")
        try:
            self.messages.update_message(message)
        except RepositoryError as exc:
            return _error(500, f"Ошибка редактирования сообщения: {exc}")
        return _ok("сообщение изменено")

    async def delete_message(self, request: Request) -> ForumJSONResponse:
        message_id = _parse_id(request.path_params.get("id"))
        if message_id is None:
            return _error(400, "Невалидный параметр в id")
        try:
            self.messages.delete_message(message_id)
        except RepositoryError as exc:
            return _error(500, f"Ошибка удаления сообщения: {exc}")
        return _ok("сообщение удалено")

    # Discussions

    async def get_all_discussions(self, request: Request) -> ForumJSONResponse:
        try:
            discussions = self.discussions.get_all_discussions()
        except RepositoryError as exc:
            return _error(500, f"Ошибка получения всех обсуждений: {exc}")
        return _ok(_items(discussions))

    async def get_discussion_by_id(self, request: Request) -> ForumJSONResponse:
        discussion_id = _parse_id(request.path_params.get("id")) or 0
        try:
            discussion = self.discussions.get_discussion_by_id(discussion_id)
        except RepositoryError as exc:
            return _error(500, f"Ошибка получения обсуждения по id: {exc}")
        return _ok(discussion.to_dict())

    async def get_discussions_by_user_id(self, request: Request) -> ForumJSONResponse:
        user_id = _parse_id(request.path_params.get("id"))
        if user_id is None:
            return _error(400, "Невалидный параметр id")
        try:
            discussions = self.discussions.get_discussions_by_user_id(user_id)
        except RepositoryError as exc:
            return _error(500, str(exc))
        return _ok(_items(discussions))

    async def create_discussion(self, request: Request) -> ForumJSONResponse:
        discussion = await _bind(request, Discussion.from_dict)
        if discussion is None:
            return _error(400, "Невалидные данные обсуждения")
        try:
            self.discussions.create_discussion(discussion)
        except RepositoryError as exc:
            return _error(500, str(exc))
        return _ok("обсуждение создано")

    async def update_discussion(self, request: Request) -> ForumJSONResponse:
        discussion_id = _parse_id(request.path_params.get("id")) or 0
        title = await _bind(request, _title_of)
        if title is None:
            return _error(400, "Невалидные данные обсуждения")
        try:
            discussion = self.discussions.get_discussion_by_id(discussion_id)
            discussion.title = title
            self.discussions.update_discussion(discussion)
        except RepositoryError as exc:
            return _error(500, str(exc))
        return _ok("обсуждение изменено")

    async def delete_discussion(self, request: Request) -> ForumJSONResponse:
        discussion_id = _parse_id(request.path_params.get("id"))
        if discussion_id is None:
            return _error(400, "Невалидные параметр id")
        try:
            self.discussions.delete_discussion(discussion_id)
        except RepositoryError as exc:
            return _error(500, str(exc))
        return _ok("обсуждение удалено")