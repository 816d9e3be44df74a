"""Live discussion chat over websockets."""

from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass, field
from typing import Any

from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from .entities import Message
from .errors import RepositoryError

SEND_BUFFER = 256

_INTEGER = re.compile(r"[+-]?[0-9]+")
_CLOSED = object()
_SEND_ERRORS = (WebSocketDisconnect, RuntimeError, OSError)


def _parse_id(text: Any) -> int | None:
    if not isinstance(text, str) or not _INTEGER.fullmatch(text):
        return None
    return int(text)


def _encode(message: Message) -> str:
    text = json.dumps(message.to_dict(), ensure_ascii=False, separators=(",", ":"))
    for char, escaped in (
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("&", "\\u0026"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        text = text.replace(char, escaped)
    return text


async def _close(websocket: WebSocket | None) -> None:
    if websocket is None:
        return
    if (
        websocket.application_state == WebSocketState.DISCONNECTED
        or websocket.client_state == WebSocketState.DISCONNECTED
    ):
        return
    try:
        await websocket.close()
    except _SEND_ERRORS:
        pass


@dataclass(eq=False)
class Client:
    """A websocket subscriber of one discussion with a bounded outbox."""

    discussion_id: int
    websocket: Any = None
    send: asyncio.Queue = field(default_factory=lambda: asyncio.Queue(maxsize=SEND_BUFFER))
    closed: bool = False

    def deliver(self, message: Message) -> bool:
        """Queue a message without waiting; False if closed or full."""
        if self.closed:
            return False
        try:
            self.send.put_nowait(message)
        except asyncio.QueueFull:
            return False
        return True

    def close(self) -> None:
        """Stop accepting messages; queued ones can still be drained."""
        if self.closed:
            return
        self.closed = True
        try:
            self.send.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            pass

    async def next_message(self) -> Message | None:
        """Wait for the next queued message; None once closed and drained."""
        if self.closed and self.send.empty():
            return None
        item = await self.send.get()
        if item is _CLOSED:
            return None
        return item


class Hub:
    """Keeps the connected clients and fans new messages out to them."""

    def __init__(self, messages, discussions):
        self.messages = messages
        self.discussions = discussions
        self._clients: dict[Client, None] = {}

    def register(self, client: Client) -> None:
        self._clients[client] = None

    def unregister(self, client: Client) -> None:
        if client in self._clients:
            client.close()
            del self._clients[client]

    def broadcast(self, message: Message) -> None:
        """Deliver to every client of the message's discussion, dropping slow ones."""
        for client in list(self._clients):
            if client.discussion_id != message.discussion_id:
                continue
            if not client.deliver(message):
                client.close()
                del self._clients[client]

    def clients_for(self, discussion_id: int) -> list[Client]:
        return [c for c in self._clients if c.discussion_id == discussion_id]

    async def chat(self, websocket: WebSocket) -> None:
        """Serve one websocket connection subscribed to a discussion."""
        await websocket.accept()
        discussion_id = _parse_id(websocket.path_params.get("id"))
        if discussion_id is None:
            await websocket.close(code=1003, reason="Invalid thread ID")
            return

        client = Client(discussion_id, websocket)
        self.register(client)
        history = asyncio.create_task(self._send_history(client))
        writer = asyncio.create_task(self._write(client))
        try:
            await self._read(client)
        finally:
            self.unregister(client)
            history.cancel()
            await _close(websocket)
            await asyncio.gather(writer, history, return_exceptions=True)

    async def _send_history(self, client: Client) -> None:
        try:
            posts = self.messages.get_all_messages(client.discussion_id)
        except RepositoryError:
            return
        for post in posts:
            if not client.deliver(post):
                self.unregister(client)
                await _close(client.websocket)
                return

    async def _reply_error(self, websocket: WebSocket, text: str) -> None:
        try:
            await websocket.send_json({"error": text})
        except _SEND_ERRORS:
            pass

    async def _read(self, client: Client) -> None:
        websocket = client.websocket
        while True:
            try:
                event = await websocket.receive()
            except _SEND_ERRORS:
                return
            if event["type"] == "websocket.disconnect":
                return
            raw = event.get("text")
            if raw is None:
                raw = event.get("bytes") or b""
            try:
                data = json.loads(raw)
                message = Message.from_dict({} if data is None else data)
            except ValueError:
                await self._reply_error(websocket, "invalid message format")
                continue

            message.discussion_id = client.discussion_id
            try:
                self.messages.create_message(message)
            except RepositoryError:
                await self._reply_error(websocket, "failed to create msg")
                continue
            self.broadcast(message)

    async def _write(self, client: Client) -> None:
        websocket = client.websocket
        while (message := await client.next_message()) is not None:
            try:
                await websocket.send_text(_encode(message))
            except _SEND_ERRORS:
                break
        await _close(websocket)