"""Forum HTTP API with discussions, messages and live WebSocket chat over SQLite."""

__version__ = "1.0.0"