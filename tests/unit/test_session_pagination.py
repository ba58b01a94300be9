"""Tests for fetching further result pages in SearchSession."""

import asyncio

import pytest

from awful_search.core.session.session import SearchSession, SessionStatus
from awful_search.errors import InvalidStateError, TransportError
from awful_search.models.result import ResultPage, SearchOutcome
from tests.unit.fakes import FakeTransport, make_items


def test_fetch_pages_until_last(ready_session: SearchSession, transport: FakeTransport) -> None:
    transport.add_page_response(42, 2, ResultPage(42, 2, make_items(2, 2)))
    transport.add_page_response(42, 3, ResultPage(42, 3, make_items(4, 1)))

    assert asyncio.run(ready_session.fetch_next_page(transport)) is True
    assert ready_session.current_page == 2
    assert ready_session.results == list(make_items(0, 4))
    assert ready_session.has_more_pages is True

    assert asyncio.run(ready_session.fetch_next_page(transport)) is True
    assert ready_session.current_page == 3
    assert ready_session.results == list(make_items(0, 5))
    assert ready_session.status is SessionStatus.READY
    assert ready_session.has_more_pages is False

    with pytest.raises(InvalidStateError):
        asyncio.run(ready_session.fetch_next_page(transport))
    assert transport.calls[1:] == [("fetch_page", 42, 2), ("fetch_page", 42, 3)]


def test_fetch_before_submit_is_rejected(session: SearchSession, transport: FakeTransport) -> None:
    with pytest.raises(InvalidStateError):
        asyncio.run(session.fetch_next_page(transport))
    assert transport.calls == []


def test_fetch_after_no_results_is_rejected(
    session: SearchSession, transport: FakeTransport
) -> None:
    transport.add_search_response(SearchOutcome(query_id=0, total_pages=0))
    asyncio.run(session.submit(transport, free_text="nothing"))

    with pytest.raises(InvalidStateError):
        asyncio.run(session.fetch_next_page(transport))


def test_failed_fetch_keeps_results(ready_session: SearchSession, transport: FakeTransport) -> None:
    transport.add_page_response(42, 2, TransportError("connection reset"))
    before = ready_session.results

    with pytest.raises(TransportError):
        asyncio.run(ready_session.fetch_next_page(transport))

    assert ready_session.status is SessionStatus.FAILED
    assert ready_session.current_page == 1
    assert ready_session.results == before
    assert ready_session.query_id == 42


def test_retry_failed_fetch(ready_session: SearchSession, transport: FakeTransport) -> None:
    transport.add_page_response(42, 2, TransportError("connection reset"))
    transport.add_page_response(42, 2, ResultPage(42, 2, make_items(2, 1)))
    with pytest.raises(TransportError):
        asyncio.run(ready_session.fetch_next_page(transport))

    assert asyncio.run(ready_session.retry(transport)) is True

    assert ready_session.status is SessionStatus.READY
    assert ready_session.current_page == 2
    assert ready_session.results == list(make_items(0, 3))
    assert transport.calls[1:] == [("fetch_page", 42, 2), ("fetch_page", 42, 2)]


def test_stale_page_after_new_submission_is_discarded(
    ready_session: SearchSession, transport: FakeTransport
) -> None:
    transport.add_page_response(42, 2, ResultPage(42, 2, make_items(2, 2)))
    transport.add_search_response(
        SearchOutcome(query_id=43, total_pages=2, results=make_items(10, 1, thread="New"))
    )

    async def scenario() -> bool:
        transport.page_gate = asyncio.Event()
        old_fetch = asyncio.create_task(ready_session.fetch_next_page(transport))
        await asyncio.sleep(0)
        assert ready_session.status is SessionStatus.FETCHING_NEXT_PAGE

        ready_session.reset()
        await ready_session.submit(transport, free_text="new")
        transport.page_gate.set()
        return await old_fetch

    assert asyncio.run(scenario()) is False
    assert ready_session.query_id == 43
    assert ready_session.current_page == 1
    assert ready_session.results == list(make_items(10, 1, thread="New"))
    assert ready_session.status is SessionStatus.READY


def test_page_for_other_query_is_discarded(
    ready_session: SearchSession, transport: FakeTransport
) -> None:
    transport.add_page_response(42, 2, ResultPage(99, 2, make_items(50, 3)))
    before = ready_session.results

    assert asyncio.run(ready_session.fetch_next_page(transport)) is False

    assert ready_session.status is SessionStatus.READY
    assert ready_session.current_page == 1
    assert ready_session.results == before


def test_second_fetch_while_fetching_is_rejected(
    ready_session: SearchSession, transport: FakeTransport
) -> None:
    transport.add_page_response(42, 2, ResultPage(42, 2, make_items(2, 1)))

    async def scenario() -> None:
        transport.page_gate = asyncio.Event()
        first = asyncio.create_task(ready_session.fetch_next_page(transport))
        await asyncio.sleep(0)
        with pytest.raises(InvalidStateError):
            await ready_session.fetch_next_page(transport)
        with pytest.raises(InvalidStateError):
            await ready_session.submit(transport, free_text="again")
        transport.page_gate.set()
        assert await first is True

    asyncio.run(scenario())
    assert ready_session.current_page == 2
    assert transport.calls[1:] == [("fetch_page", 42, 2)]


def test_unexpected_fetch_error_returns_to_ready(
    ready_session: SearchSession, transport: FakeTransport
) -> None:
    transport.add_page_response(42, 2, AttributeError("no 'tr' in result table"))
    transport.add_page_response(42, 2, ResultPage(42, 2, make_items(2, 1)))

    with pytest.raises(AttributeError):
        asyncio.run(ready_session.fetch_next_page(transport))

    assert ready_session.status is SessionStatus.READY
    assert ready_session.current_page == 1
    assert ready_session.results == list(make_items(0, 2))
    assert asyncio.run(ready_session.fetch_next_page(transport)) is True
    assert ready_session.current_page == 2


def test_late_page_failure_after_reset_is_ignored(
    ready_session: SearchSession, transport: FakeTransport
) -> None:
    transport.add_page_response(42, 2, TransportError("connection reset"))

    async def scenario() -> bool:
        transport.page_gate = asyncio.Event()
        pending = asyncio.create_task(ready_session.fetch_next_page(transport))
        await asyncio.sleep(0)
        ready_session.reset()
        transport.page_gate.set()
        return await pending

    assert asyncio.run(scenario()) is False
    assert ready_session.status is SessionStatus.IDLE
    assert ready_session.last_error is None
    assert ready_session.results == []
    assert ready_session.current_page == 0
