"""Routing table and middleware of the forum HTTP service."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Route, WebSocketRoute

from .handlers import ForumHandler
from .hub import Hub

ALLOWED_ORIGINS = ["http://localhost:3000"]
ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Origin", "Content-Type", "Accept", "Authorization"]
EXPOSED_HEADERS = ["Content-Length"]
CORS_MAX_AGE = 12 * 60 * 60


def setup_routes(handler: ForumHandler, hub: Hub) -> Starlette:
    """Build the application serving the forum endpoints and the live chat."""
    routes = [
        Route("/messages/{id}", handler.get_all_messages, methods=["GET"]),
        Route("/messages/user/{id}", handler.get_messages_by_user_id, methods=["GET"]),
        Route("/messages", handler.create_message, methods=["POST"]),
        Route("/messages", handler.update_message, methods=["PUT"]),
        Route("/messages/{id}", handler.delete_message, methods=["DELETE"]),
        Route("/discussions", handler.get_all_discussions, methods=["GET"]),
        Route("/discussions/{id}", handler.get_discussion_by_id, methods=["GET"]),
        Route(
            "/discussions/user/{id}",
            handler.get_discussions_by_user_id,
            methods=["GET"],
        ),
        Route("/discussions", handler.create_discussion, methods=["POST"]),
        Route("/discussions/update/{id}", handler.update_discussion, methods=["PUT"]),
        Route("/discussions/{id}", handler.delete_discussion, methods=["DELETE"]),
        WebSocketRoute("/discussions/chat/{id}", hub.chat),
    ]
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_methods=ALLOWED_METHODS,
            allow_headers=ALLOWED_HEADERS,
            expose_headers=EXPOSED_HEADERS,
            allow_credentials=True,
            max_age=CORS_MAX_AGE,
        )
    ]
    return Starlette(routes=routes, middleware=middleware)