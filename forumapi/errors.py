"""Errors raised by the forum storage layer."""


class RepositoryError(Exception):
    """A storage operation failed."""


class NotChangedError(RepositoryError):
    """An update or delete matched no rows."""