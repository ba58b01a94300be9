"""Protocols for dependency injection in forum search."""

from typing import Any, Protocol, runtime_checkable

from awful_search.models.result import ResultPage, SearchOutcome


@runtime_checkable
class TransportProtocol(Protocol):
    """Protocol for the search backend used by a session.

    Each call delivers exactly one outcome: a return value, or a TransportError.
    """

    async def search(self, query: str, forum_scope: frozenset[int]) -> SearchOutcome:
        """Submit a query string, restricted to forum_scope when it is not empty."""
        ...

    async def fetch_page(self, query_id: int, page_number: int) -> ResultPage:
        """Fetch one page of results for a previously submitted query."""
        ...


@runtime_checkable
class ApiProtocol(Protocol):
    """Protocol for forum HTTP clients."""

    def call(self, path: str, params: dict[str, Any], *, post: bool = False) -> str:
        """Request a forum page and return the response document."""
        ...


@runtime_checkable
class ResultParserProtocol(Protocol):
    """Protocol for turning a search result document into an outcome."""

    def parse(self, document: str) -> SearchOutcome:
        """Extract query id, page count and result items from a document."""
        ...


@runtime_checkable
class IdentityProtocol(Protocol):
    """Protocol for the current user's identity."""

    @property
    def username(self) -> str:
        """The logged-in username."""
        ...
