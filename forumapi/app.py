"""Assembly and entry point of the forum service."""

from __future__ import annotations

import argparse

import uvicorn
from starlette.applications import Starlette

from .db import DEFAULT_PATH, init_schema, sqlite_connection
from .discussion_repository import DiscussionRepository
from .handlers import ForumHandler
from .hub import Hub
from .logger import get_logger, run_logger
from .message_repository import MessageRepository
from .router import setup_routes
from .usecases import DiscussionUseCase, MessageUseCase

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8082


def build_app(db_path=DEFAULT_PATH) -> Starlette:
    """Open the database and wire storage, services and routes together."""
    conn = sqlite_connection(db_path)
    init_schema(conn)
    discussions = DiscussionUseCase(DiscussionRepository(conn))
    messages = MessageUseCase(MessageRepository(conn))
    app = setup_routes(ForumHandler(discussions, messages), Hub(messages, discussions))
    app.state.db = conn
    return app


def run(db_path=DEFAULT_PATH, host=DEFAULT_HOST, port=DEFAULT_PORT) -> None:
    """Build the application and serve it until stopped."""
    app = build_app(db_path)
    try:
        uvicorn.run(app, host=host, port=port)
    except OSError as exc:
        get_logger().critical("Ошибка создание подключения", extra={"error": str(exc)})
        raise SystemExit(1) from exc


def main(argv=None) -> int:
    """Command-line entry point: start logging, then the server."""
    parser = argparse.ArgumentParser(description="Forum API server.")
    parser.add_argument("--db", default=DEFAULT_PATH, help="SQLite database file")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument("--log-file", default="./logs.log", help="log file")
    parser.add_argument("--error-file", default="./error.log", help="error log file")
    args = parser.parse_args(argv)

    run_logger(args.log_file, args.error_file)
    run(args.db, args.host, args.port)
    return 0