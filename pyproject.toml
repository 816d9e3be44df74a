[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "forumapi"
version = "1.0.0"
description = "A small forum HTTP API with discussions, messages and live WebSocket chat backed by SQLite"
requires-python = ">=3.10"
keywords = ["forum", "discussion", "chat", "websocket", "sqlite", "rest", "api"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: Message Boards",
]
dependencies = [
    "starlette",
    "uvicorn",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "httpx",
]

[project.scripts]
forumapi = "forumapi.app:main"

[tool.hatch.build.targets.wheel]
packages = ["forumapi"]

[tool.pytest.ini_options]
addopts = "-ra"
