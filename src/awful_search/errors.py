"""Error taxonomy for forum search."""


class SearchError(Exception):
    """Base class for all search errors."""


class EmptyQueryError(SearchError, ValueError):
    """Neither free text nor filters were given, so there is nothing to search for."""


class InvalidStateError(SearchError, RuntimeError):
    """An operation was attempted in a session state that forbids it."""


class UnknownFilterKindError(SearchError, KeyError):
    """A persisted filter names a kind this version does not know."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown filter kind: {self.name!r}"


class IndexOutOfRangeError(SearchError, IndexError):
    """A filter position does not refer to an existing filter."""


class TransportError(SearchError, RuntimeError):
    """Network or server failure while talking to the forums."""
