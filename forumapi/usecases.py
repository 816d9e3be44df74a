"""Application services for discussions and messages."""

from __future__ import annotations

from .discussion_repository import DiscussionRepository
from .entities import Discussion, Message
from .message_repository import MessageRepository


class DiscussionUseCase:
    """Discussion operations exposed to the transport layer."""

    def __init__(self, repo: DiscussionRepository):
        self._repo = repo

    def get_all_discussions(self) -> list[Discussion]:
        return self._repo.get_all()

    def get_discussion_by_id(self, discussion_id: int) -> Discussion:
        return self._repo.get_by_id(discussion_id)

    def get_discussions_by_user_id(self, user_id: int) -> list[Discussion]:
        return self._repo.get_by_user_id(user_id)

    def create_discussion(self, discussion: Discussion) -> int:
        return self._repo.create(discussion)

    def update_discussion(self, discussion: Discussion) -> None:
        self._repo.update(discussion)

    def delete_discussion(self, discussion_id: int) -> None:
        self._repo.delete(discussion_id)


class MessageUseCase:
    """Message operations exposed to the transport layer."""

    def __init__(self, repo: MessageRepository):
        self._repo = repo

    def get_all_messages(self, discussion_id: int) -> list[Message]:
        return self._repo.get_all(discussion_id)

    def get_messages_by_user_id(self, user_id: int) -> list[Message]:
        return self._repo.get_by_user_id(user_id)

    def create_message(self, message: Message) -> int:
        return self._repo.create(message)

    def update_message(self, message: Message) -> None:
        self._repo.update(message)

    def delete_message(self, message_id: int) -> None:
        self._repo.delete(message_id)