"""Shared test fixtures."""

import asyncio

import pytest

from awful_search.core.filters.kinds import FilterKind
from awful_search.core.filters.search_filter import SearchFilter
from awful_search.core.session.session import SearchSession
from awful_search.identity import StaticIdentity
from awful_search.models.result import SearchOutcome
from tests.unit.fakes import FakeTransport, make_items


@pytest.fixture
def identity() -> StaticIdentity:
    return StaticIdentity(username="Lowtax")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def session(identity: StaticIdentity) -> SearchSession:
    return SearchSession(identity=identity)


@pytest.fixture
def ready_session(session: SearchSession, transport: FakeTransport) -> SearchSession:
    """Return a session holding page 1 of 3 for query 42."""
    transport.add_search_response(
        SearchOutcome(query_id=42, total_pages=3, results=make_items(0, 2))
    )
    session.add_filter(SearchFilter(FilterKind.USER_ID, "5"))
    asyncio.run(session.submit(transport, free_text="foo bar"))
    return session
