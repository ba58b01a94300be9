"""Search session: query submission and incremental result paging."""

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from awful_search.core.filters.filter_set import FilterListener, FilterSet
from awful_search.core.filters.kinds import FilterKind
from awful_search.core.filters.search_filter import SearchFilter
from awful_search.core.query.builder import build_query
from awful_search.errors import EmptyQueryError, InvalidStateError, TransportError
from awful_search.models.result import SearchResultItem
from awful_search.protocols import IdentityProtocol, TransportProtocol


class SessionStatus(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    READY = "ready"
    FETCHING_NEXT_PAGE = "fetching_next_page"
    FAILED = "failed"


_IN_FLIGHT = (SessionStatus.SUBMITTING, SessionStatus.FETCHING_NEXT_PAGE)


@dataclass(frozen=True)
class _FailedRequest:
    """What to send again on retry."""

    query: str
    forum_scope: frozenset[int]
    query_id: int | None = None
    page_number: int | None = None


class SearchSession:
    """Free text, filters and forum scope, plus the results of the last query.

    A session is owned by a single screen and driven from one event loop.
    Only one request may be in flight at a time. Responses that arrive
    after reset() or close() belong to an earlier generation and are dropped.
    """

    def __init__(
        self,
        *,
        free_text: str = "",
        filters: Iterable[SearchFilter] = (),
        forum_scope: Iterable[int] = (),
        identity: IdentityProtocol | None = None,
    ) -> None:
        self._identity = identity
        self._free_text = free_text
        self._filters = FilterSet(filters)
        self._forum_scope: set[int] = set(forum_scope)

        self._status = SessionStatus.IDLE
        self._generation = 0
        self._closed = False

        # Result state, owned by the current query.
        self._query: str | None = None
        self._query_id: int | None = None
        self._current_page = 0
        self._total_pages = 0
        self._results: list[SearchResultItem] = []

        self._failed: _FailedRequest | None = None
        self._last_error: TransportError | None = None

    # --- Read-only state ---

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def free_text(self) -> str:
        return self._free_text

    @property
    def filters(self) -> list[SearchFilter]:
        return self._filters.to_list()

    @property
    def forum_scope(self) -> frozenset[int]:
        return frozenset(self._forum_scope)

    @property
    def query(self) -> str | None:
        """Query string of the results currently held, if any."""
        return self._query

    @property
    def query_id(self) -> int | None:
        return self._query_id

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def results(self) -> list[SearchResultItem]:
        return list(self._results)

    @property
    def last_error(self) -> TransportError | None:
        return self._last_error

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_busy(self) -> bool:
        return self._status in _IN_FLIGHT

    @property
    def has_more_pages(self) -> bool:
        """True when fetch_next_page is currently allowed."""
        return (
            not self._closed
            and self._status is SessionStatus.READY
            and self._query_id is not None
            and self._current_page < self._total_pages
        )

    def pending_query(self) -> str:
        """The query string the current inputs would submit."""
        return build_query(self._free_text, self._filters)

    # --- Inputs ---

    def set_free_text(self, text: str) -> None:
        self._check_editable()
        self._free_text = text

    def add_filter(self, search_filter: SearchFilter) -> None:
        self._check_editable()
        self._filters.append(search_filter)

    def add_filters(self, filters: Iterable[SearchFilter]) -> None:
        """Add several filters, e.g. when arriving from a "search this user" link."""
        self._check_editable()
        self._filters.extend(filters)

    def add_filter_of_kind(self, kind: FilterKind, parameter: str = "") -> SearchFilter:
        """Create a filter of kind (using the session's identity) and add it."""
        search_filter = SearchFilter.for_kind(kind, parameter, identity=self._identity)
        self.add_filter(search_filter)
        return search_filter

    def replace_filter(self, index: int, search_filter: SearchFilter) -> None:
        self._check_editable()
        self._filters.replace_at(index, search_filter)

    def edit_filter(self, index: int, parameter: str) -> bool:
        """Give the filter at index a new parameter.

        Returns False, changing nothing, if the filter's kind is not editable.
        """
        self._check_editable()
        edited = self._filters[index].edit(parameter)
        if edited is None:
            return False
        self._filters.replace_at(index, edited)
        return True

    def remove_filter(self, index: int) -> SearchFilter:
        self._check_editable()
        return self._filters.remove_at(index)

    def subscribe_filters(self, listener: FilterListener) -> Callable[[], None]:
        """Be told about filter list changes; returns an unsubscribe function."""
        return self._filters.subscribe(listener)

    def set_forum_scope(self, forum_ids: Iterable[int]) -> None:
        """Restrict the search to these forums; an empty scope searches everywhere."""
        self._check_editable()
        self._forum_scope = set(forum_ids)

    def add_forum(self, forum_id: int) -> None:
        self._check_editable()
        self._forum_scope.add(forum_id)

    def remove_forum(self, forum_id: int) -> None:
        self._check_editable()
        self._forum_scope.discard(forum_id)

    # --- Requests ---

    async def submit(
        self,
        transport: TransportProtocol,
        *,
        free_text: str | None = None,
        filters: Iterable[SearchFilter] | None = None,
        forum_scope: Iterable[int] | None = None,
    ) -> bool:
        """Submit a new query, replacing any results held.

        Arguments given here replace the session's inputs before the query is
        built. On success the first page of results is held and the status is
        READY. On failure the status is FAILED, earlier results are kept, and
        retry() sends the same query again.

        Returns:
            True if the response was applied, False if it arrived for a
            session that had been reset or closed in the meantime.

        Raises:
            EmptyQueryError: There is no text and no filter to search for.
            InvalidStateError: A request is already in flight, or the session is closed.
            TransportError: The search request failed.
        """
        self._check_can_request()
        text = self._free_text if free_text is None else free_text
        filter_list = self._filters.to_list() if filters is None else list(filters)
        scope = self._forum_scope if forum_scope is None else set(forum_scope)

        query = build_query(text, filter_list)
        if not query:
            msg = "Nothing to search for: no search text and no filters"
            raise EmptyQueryError(msg)

        if free_text is not None:
            self._free_text = free_text
        if filters is not None:
            self._filters.clear()
            self._filters.extend(filter_list)
        if forum_scope is not None:
            self._forum_scope = scope

        return await self._run_search(transport, query, frozenset(scope))

    async def fetch_next_page(self, transport: TransportProtocol) -> bool:
        """Fetch the page after current_page and append its results.

        Returns:
            True if the page was applied, False if it was discarded as stale.

        Raises:
            InvalidStateError: The session is not READY or has no more pages.
            TransportError: The page request failed; results so far are kept.
        """
        self._check_open()
        if not self.has_more_pages or self._query_id is None:
            msg = (
                f"Cannot fetch next page: status {self._status.value}, "
                f"page {self._current_page} of {self._total_pages}"
            )
            raise InvalidStateError(msg)
        return await self._run_fetch(transport, self._query_id, self._current_page + 1)

    async def retry(self, transport: TransportProtocol) -> bool:
        """Send the request that failed again, with identical parameters.

        Raises:
            InvalidStateError: The session is not FAILED.
            TransportError: The request failed again.
        """
        self._check_open()
        failed = self._failed
        if self._status is not SessionStatus.FAILED or failed is None:
            msg = f"Nothing to retry: status {self._status.value}"
            raise InvalidStateError(msg)

        if failed.page_number is None or failed.query_id is None:
            return await self._run_search(transport, failed.query, failed.forum_scope)
        if failed.query_id != self._query_id:
            msg = f"Failed page belongs to query {failed.query_id}, now showing {self._query_id}"
            raise InvalidStateError(msg)
        return await self._run_fetch(transport, failed.query_id, failed.page_number)

    def clear_failure(self) -> None:
        """Dismiss a failure, going back to the results held (or to IDLE)."""
        self._check_open()
        if self._status is not SessionStatus.FAILED:
            return
        self._failed = None
        self._last_error = None
        self._status = SessionStatus.READY if self._query is not None else SessionStatus.IDLE

    def reset(self) -> None:
        """Drop all results and go back to IDLE, keeping the inputs.

        Any request still in flight is abandoned: its response will be ignored.
        """
        self._check_open()
        self._generation += 1
        self._clear_results()
        self._failed = None
        self._last_error = None
        self._status = SessionStatus.IDLE

    def close(self) -> None:
        """Tear the session down. Late responses are ignored; further calls fail."""
        if self._closed:
            return
        self._generation += 1
        self._closed = True
        self._status = SessionStatus.IDLE
        logger.debug("Search session closed")

    # --- Internals ---

    async def _run_search(
        self, transport: TransportProtocol, query: str, forum_scope: frozenset[int]
    ) -> bool:
        generation = self._generation
        previous_status = self._status
        self._status = SessionStatus.SUBMITTING
        logger.debug("Submitting query {!r} (forums: {})", query, sorted(forum_scope) or "all")

        try:
            outcome = await transport.search(query, forum_scope)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._status = previous_status
            raise
        except TransportError as e:
            if generation != self._generation:
                logger.debug("Ignoring failure of abandoned search {!r}", query)
                return False
            self._fail(e, _FailedRequest(query=query, forum_scope=forum_scope))
            raise
        except Exception as e:
            if generation == self._generation:
                self._status = previous_status
            logger.error("Search {!r} broke with {!r}", query, e)
            raise

        if generation != self._generation:
            logger.debug("Discarding stale search response for {!r}", query)
            return False

        self._clear_results()
        self._query = query
        if outcome.query_id != 0:
            self._query_id = outcome.query_id
            self._total_pages = outcome.total_pages
            self._current_page = 1
            self._results = list(outcome.results)
        self._failed = None
        self._last_error = None
        self._status = SessionStatus.READY
        logger.info(
            "Query {!r}: id {}, {} pages, {} results on first page",
            query,
            outcome.query_id,
            self._total_pages,
            len(self._results),
        )
        return True

    async def _run_fetch(
        self, transport: TransportProtocol, query_id: int, page_number: int
    ) -> bool:
        generation = self._generation
        previous_status = self._status
        self._status = SessionStatus.FETCHING_NEXT_PAGE
        logger.debug("Fetching page {} of query {}", page_number, query_id)

        try:
            page = await transport.fetch_page(query_id, page_number)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._status = previous_status
            raise
        except TransportError as e:
            if generation != self._generation:
                logger.debug(
                    "Ignoring failure of abandoned page {} of query {}", page_number, query_id
                )
                return False
            self._fail(
                e,
                _FailedRequest(
                    query=self._query or "",
                    forum_scope=frozenset(self._forum_scope),
                    query_id=query_id,
                    page_number=page_number,
                ),
            )
            raise
        except Exception as e:
            if generation == self._generation:
                self._status = previous_status
            logger.error("Page {} of query {} broke with {!r}", page_number, query_id, e)
            raise

        if generation != self._generation or self._query_id != query_id:
            logger.debug("Discarding stale page {} of query {}", page_number, query_id)
            return False
        if page.query_id != query_id:
            logger.warning(
                "Discarding page for query {} while showing query {}", page.query_id, query_id
            )
            self._status = SessionStatus.READY
            return False

        self._results.extend(page.results)
        self._current_page = page_number
        self._failed = None
        self._last_error = None
        self._status = SessionStatus.READY
        if self._current_page >= self._total_pages:
            logger.debug("Reached last page ({}) of query {}", self._total_pages, query_id)
        return True

    def _fail(self, error: TransportError, request: _FailedRequest) -> None:
        logger.warning("Search request failed: {}", error)
        self._failed = request
        self._last_error = error
        self._status = SessionStatus.FAILED

    def _clear_results(self) -> None:
        self._query = None
        self._query_id = None
        self._current_page = 0
        self._total_pages = 0
        self._results = []

    def _check_open(self) -> None:
        if self._closed:
            msg = "Search session is closed"
            raise InvalidStateError(msg)

    def _check_can_request(self) -> None:
        self._check_open()
        if self._status in _IN_FLIGHT:
            msg = f"A request is already in flight ({self._status.value})"
            raise InvalidStateError(msg)

    def _check_editable(self) -> None:
        self._check_open()
        if self._status in _IN_FLIGHT:
            msg = f"Cannot change search inputs while {self._status.value}"
            raise InvalidStateError(msg)
