"""Forum entities: discussions and the messages posted in them."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_FRACTION = re.compile(r"\.(\d+)")


def _format_time(value: datetime) -> str:
    """Render a timestamp in RFC 3339 form, trimming trailing fraction zeros."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.replace(microsecond=0, tzinfo=None).isoformat()
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset()
    if not offset:
        return text + "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, rest = divmod(abs(total), 3600)
    return f"{text}{sign}{hours:02d}:{rest // 60:02d}"


def _parse_time(value: Any) -> datetime:
    if value is None:
        return ZERO_TIME
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"invalid timestamp {value!r}") from exc
    else:
        raise ValueError(f"timestamp must be a string, got {type(value).__name__}")
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp {value!r} has no time zone")
    return parsed


def _int_field(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer")
    return value


def _str_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    return data


@dataclass
class Discussion:
    """A discussion thread opened by a user."""

    id: int = 0
    title: str = ""
    user_id: int = 0
    create_at: datetime = field(default=ZERO_TIME)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "user_id": self.user_id,
            "create_at": _format_time(self.create_at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Discussion":
        data = _require_mapping(data)
        return cls(
            id=_int_field(data, "id"),
            title=_str_field(data, "title"),
            user_id=_int_field(data, "user_id"),
            create_at=_parse_time(data.get("create_at")),
        )


@dataclass
class Message:
    """A message posted by a user in a discussion."""

    id: int = 0
    user_id: int = 0
    discussion_id: int = 0
    content: str = ""
    create_at: datetime = field(default=ZERO_TIME)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "discussion_id": self.discussion_id,
            "content": self.content,
            "create_at": _format_time(self.create_at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Message":
        data = _require_mapping(data)
        return cls(
            id=_int_field(data, "id"),
            user_id=_int_field(data, "user_id"),
            discussion_id=_int_field(data, "discussion_id"),
            content=_str_field(data, "content"),
            create_at=_parse_time(data.get("create_at")),
        )