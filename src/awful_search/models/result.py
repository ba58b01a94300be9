"""Result models passed between the transport and the search session."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchResultItem:
    """A single search hit, as shown in the result list."""

    thread_title: str
    thread_link: str
    username: str
    forum_title: str
    blurb: str
    post_date: str
    forum_id: int | None = None


@dataclass(frozen=True)
class SearchOutcome:
    """Server answer to a search submission.

    A query_id of 0 means the server found nothing.
    """

    query_id: int
    total_pages: int
    results: tuple[SearchResultItem, ...] = ()


@dataclass(frozen=True)
class ResultPage:
    """One page of results for an already submitted query."""

    query_id: int
    page_number: int
    results: tuple[SearchResultItem, ...] = ()
