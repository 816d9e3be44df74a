import pytest
from starlette.applications import Starlette
from starlette.routing import Route
from starlette.testclient import TestClient

from forumapi.db import init_schema, sqlite_connection
from forumapi.discussion_repository import DiscussionRepository
from forumapi.entities import Message
from forumapi.errors import RepositoryError
from forumapi.handlers import ForumHandler
from forumapi.message_repository import MessageRepository
from forumapi.usecases import DiscussionUseCase, MessageUseCase


class _Failing:
    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise RepositoryError("boom")

        return fail


def _client(discussions, messages):
    handler = ForumHandler(discussions, messages)
    app = Starlette(
        routes=[
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
            Route(
                "/discussions/update/{id}", handler.update_discussion, methods=["PUT"]
            ),
            Route("/discussions/{id}", handler.delete_discussion, methods=["DELETE"]),
        ]
    )
    return TestClient(app)


@pytest.fixture
def conn():
    connection = sqlite_connection(":memory:")
    init_schema(connection)
    yield connection
    connection.close()


@pytest.fixture
def client(conn):
    return _client(
        DiscussionUseCase(DiscussionRepository(conn)),
        MessageUseCase(MessageRepository(conn)),
    )


@pytest.fixture
def failing_client():
    return _client(_Failing(), _Failing())


def _create_discussion(client, title="hello", user_id=5):
    response = client.post("/discussions", json={"title": title, "user_id": user_id})
    assert response.status_code == 200
    return client.get("/discussions").json()[-1]


def _create_message(client, content="hi", user_id=3, discussion_id=1):
    response = client.post(
        "/messages",
        json={"user_id": user_id, "discussion_id": discussion_id, "content": content},
    )
    assert response.status_code == 200
    return client.get(f"/messages/{discussion_id}").json()[-1]


def test_empty_discussions_render_null(client):
    response = client.get("/discussions")
    assert response.status_code == 200
    assert response.json() is None


def test_create_and_fetch_discussion(client):
    response = client.post("/discussions", json={"title": "Topic", "user_id": 9})
    assert response.status_code == 200
    assert response.json() == "обсуждение создано"

    listed = client.get("/discussions").json()
    assert len(listed) == 1
    assert listed[0]["title"] == "Topic"
    assert listed[0]["user_id"] == 9

    single = client.get(f"/discussions/{listed[0]['id']}")
    assert single.status_code == 200
    assert single.json() == listed[0]


@pytest.mark.parametrize("body", [b"not json", b"", b"[1, 2]", b'{"title": 5}'])
def test_create_discussion_rejects_bad_body(client, body):
    response = client.post("/discussions", content=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Невалидные данные обсуждения"}


def test_discussions_by_user(client):
    _create_discussion(client, "a", 1)
    _create_discussion(client, "b", 2)
    _create_discussion(client, "c", 1)
    response = client.get("/discussions/user/1")
    assert response.status_code == 200
    assert [item["title"] for item in response.json()] == ["a", "c"]


def test_discussions_by_user_invalid_id(client):
    response = client.get("/discussions/user/abc")
    assert response.status_code == 400
    assert response.json() == {"error": "Невалидный параметр id"}


def test_missing_discussion_is_server_error(client):
    response = client.get("/discussions/42")
    assert response.status_code == 500
    assert response.json()["error"].startswith("Ошибка получения обсуждения по id: ")


def test_unparsable_discussion_id_looks_up_zero(client):
    _create_discussion(client)
    response = client.get("/discussions/abc")
    assert response.status_code == 500


def test_update_discussion(client):
    created = _create_discussion(client, "old")
    response = client.put(f"/discussions/update/{created['id']}", json={"title": "new"})
    assert response.status_code == 200
    assert response.json() == "обсуждение изменено"
    fetched = client.get(f"/discussions/{created['id']}").json()
    assert fetched["title"] == "new"
    assert fetched["user_id"] == created["user_id"]


def test_update_missing_discussion(client):
    response = client.put("/discussions/update/77", json={"title": "new"})
    assert response.status_code == 500


def test_update_discussion_bad_body(client):
    created = _create_discussion(client)
    response = client.put(f"/discussions/update/{created['id']}", content=b"{")
    assert response.status_code == 400
    assert response.json() == {"error": "Невалидные данные обсуждения"}


def test_delete_discussion(client):
    created = _create_discussion(client)
    first = client.delete(f"/discussions/{created['id']}")
    assert first.status_code == 200
    assert first.json() == "обсуждение удалено"
    second = client.delete(f"/discussions/{created['id']}")
    assert second.status_code == 500
    assert second.json() == {"error": "Обсуждение не удалено"}


def test_delete_discussion_invalid_id(client):
    response = client.delete("/discussions/x1")
    assert response.status_code == 400
    assert response.json() == {"error": "Невалидные параметр id"}


def test_create_and_list_messages(client):
    response = client.post(
        "/messages", json={"user_id": 3, "discussion_id": 1, "content": "hi"}
    )
    assert response.status_code == 200
    assert response.json() == "сообщение создано"

    by_discussion = client.get("/messages/1").json()
    assert len(by_discussion) == 1
    message = Message.from_dict(by_discussion[0])
    assert (message.user_id, message.discussion_id, message.content) == (3, 1, "hi")

    by_user = client.get("/messages/user/3").json()
    assert by_user == by_discussion


def test_empty_messages_render_null(client):
    response = client.get("/messages/1")
    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.parametrize("path", ["/messages/abc", "/messages/user/1.5"])
def test_message_lists_invalid_id(client, path):
    response = client.get(path)
    assert response.status_code == 400
    assert response.json() == {"error": "Невалидный параметр в id"}


def test_create_message_bad_timestamp(client):
    response = client.post("/messages", json={"content": "x", "create_at": "yesterday"})
    assert response.status_code == 400
    assert response.json() == {"error": "Невалидные параметры сообщения"}


def test_update_message(client):
    created = _create_message(client, "first")
    response = client.put(
        "/messages",
        json={"id": created["id"], "content": "edited", "discussion_id": 1},
    )
    assert response.status_code == 200
    assert response.json() == "сообщение изменено"
    assert client.get("/messages/1").json()[0]["content"] == "edited"


def test_update_missing_message(client):
    response = client.put("/messages", json={"id": 999, "content": "x"})
    assert response.status_code == 500
    assert response.json() == {
        "error": "Ошибка редактирования сообщения: Сообщение не изменено"
    }


def test_delete_message(client):
    created = _create_message(client)
    first = client.delete(f"/messages/{created['id']}")
    assert first.status_code == 200
    assert first.json() == "сообщение удалено"
    second = client.delete(f"/messages/{created['id']}")
    assert second.status_code == 500
    assert second.json() == {"error": "Ошибка удаления сообщения: Сообщение не удалено"}


def test_html_characters_are_escaped(client):
    _create_message(client, "<b>&")
    response = client.get("/messages/1")
    assert "\\u003cb\\u003e\\u0026" in response.text
    assert response.json()[0]["content"] == "<b>&"


def test_failures_become_server_errors(failing_client):
    response = failing_client.get("/messages/1")
    assert response.status_code == 500
    assert response.json() == {
        "error": "Ошибка получения всех сообщений по id обсуждения"
    }

    response = failing_client.get("/discussions")
    assert response.status_code == 500
    assert response.json() == {"error": "Ошибка получения всех обсуждений: boom"}

    response = failing_client.post("/messages", json={"content": "x"})
    assert response.json() == {"error": "Ошибка создания сообщения: boom"}

    response = failing_client.get("/messages/user/1")
    assert response.json() == {
        "error": "Ошибка получения всех сообщений пользователя: boom"
    }