# forumapi

A small forum service. It has discussions, messages inside them, and a
live WebSocket chat for each discussion. Data is kept in a SQLite
database. The tables are created when the application is built, if they
do not exist yet.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running the server

```
forumapi
```

Options:

| Option         | Default       | Meaning                      |
|----------------|---------------|------------------------------|
| `--db`         | `../forum.db` | SQLite database file         |
| `--host`       | `0.0.0.0`     | address to listen on         |
| `--port`       | `8082`        | port to listen on            |
| `--log-file`   | `./logs.log`  | file that receives every log |
| `--error-file` | `./error.log` | file that receives errors    |

Logs are written as one JSON object per line. They go to standard output
and to the log file. Records at error level and above also go to
standard error and to the error file.

CORS is allowed for the origin `http://localhost:3000`, with credentials.

## HTTP API

Request and response bodies are JSON.

### Discussions

| Method | Path                       | What it does                                   |
|--------|----------------------------|------------------------------------------------|
| GET    | `/discussions`             | all discussions, ordered by id                 |
| GET    | `/discussions/{id}`        | one discussion                                 |
| GET    | `/discussions/user/{id}`   | discussions started by a user                  |
| POST   | `/discussions`             | create a discussion (`title`, `user_id`)       |
| PUT    | `/discussions/update/{id}` | change a discussion's title (`{"title": ...}`) |
| DELETE | `/discussions/{id}`        | delete a discussion                            |
| WS     | `/discussions/chat/{id}`   | live chat for a discussion                     |

A discussion looks like this:

```json
{"id": 1, "title": "Hello", "user_id": 7, "create_at": "2024-01-01T12:00:00Z"}
```

### Messages

| Method | Path                  | What it does                                                  |
|--------|-----------------------|---------------------------------------------------------------|
| GET    | `/messages/{id}`      | all messages of the discussion `id`, ordered by id            |
| GET    | `/messages/user/{id}` | all messages written by a user                                |
| POST   | `/messages`           | create a message (`user_id`, `discussion_id`, `content`)      |
| PUT    | `/messages`           | change a message's `content` and `discussion_id` by its `id`  |
| DELETE | `/messages/{id}`      | delete a message                                              |

A message looks like this:

```json
{"id": 3, "user_id": 7, "discussion_id": 1, "content": "Hi!", "create_at": "2024-01-01T12:00:00Z"}
```

### Responses

- The server sets `create_at` to the current time when it stores a
  discussion or a message. Any `create_at` sent by the client is ignored.
- A successful create, update or delete answers with a JSON string, for
  example `"обсуждение создано"`.
- A list with no entries is returned as `null`, not as `[]`.
- Errors come back as `{"error": "..."}`. A malformed id or body gets
  status 400. A storage failure gets status 500. This includes a
  discussion that does not exist, and an update or delete that matched
  no row.

### Chat

Connect a WebSocket to `/discussions/chat/{id}`. If `id` is not an
integer, the connection is closed with code 1003.

The server first sends every message already in the discussion. After
that it relays each new message posted to that discussion.

To post, send a JSON message object. Its `discussion_id` is taken from
the URL. The message is stored and then delivered to every client
connected to the same discussion.

A message that is not valid JSON gets the reply
`{"error": "invalid message format"}`. One that cannot be stored gets
`{"error": "failed to create msg"}`.

A client that falls 256 messages behind is disconnected.

## Using it from Python

```python
from forumapi.app import build_app

app = build_app("forum.db")  # a Starlette application
```

`forumapi.app.run(db_path, host, port)` builds the application and
serves it with uvicorn. `forumapi.logger.run_logger(log_file, error_file)`
sets up logging the same way the `forumapi` command does.

The layers can also be used on their own:

- `forumapi.db`: `sqlite_connection`, `init_schema`
- `forumapi.discussion_repository.DiscussionRepository` and
  `forumapi.message_repository.MessageRepository`: storage
- `forumapi.usecases.DiscussionUseCase` and `MessageUseCase`: services
- `forumapi.handlers.ForumHandler`: the HTTP handlers
- `forumapi.hub.Hub`: the chat
- `forumapi.router.setup_routes`: the routing table

Storage failures raise `forumapi.errors.RepositoryError`. An update or
delete that matches no row raises its subclass `NotChangedError`.

## What it does not do

- There are no users, logins or permissions. Any client can edit or
  delete any discussion or message.
- No API documentation page (such as OpenAPI or Swagger) is served.