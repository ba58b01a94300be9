"""Async search transport over the forums HTTP client."""

import asyncio

from loguru import logger

from awful_search.config import SEARCH_PATH
from awful_search.errors import TransportError
from awful_search.models.result import ResultPage, SearchOutcome
from awful_search.protocols import ApiProtocol, ResultParserProtocol


class HttpTransport:
    """Runs blocking API calls in a worker thread and parses the documents.

    Parsing result pages is left to the parser passed in.
    """

    def __init__(self, api: ApiProtocol, parser: ResultParserProtocol) -> None:
        self._api = api
        self._parser = parser

    async def search(self, query: str, forum_scope: frozenset[int]) -> SearchOutcome:
        params: dict[str, object] = {"action": "query", "q": query}
        if forum_scope:
            params["forums[]"] = sorted(forum_scope)
        document = await asyncio.to_thread(self._api.call, SEARCH_PATH, params, post=True)
        return self._parse(document)

    async def fetch_page(self, query_id: int, page_number: int) -> ResultPage:
        params: dict[str, object] = {"qid": query_id, "page": page_number}
        document = await asyncio.to_thread(self._api.call, SEARCH_PATH, params)
        outcome = self._parse(document)
        if outcome.query_id and outcome.query_id != query_id:
            logger.warning(
                "Asked for query {}, server answered for query {}", query_id, outcome.query_id
            )
        return ResultPage(
            query_id=outcome.query_id or query_id,
            page_number=page_number,
            results=outcome.results,
        )

    def _parse(self, document: str) -> SearchOutcome:
        try:
            return self._parser.parse(document)
        except (ValueError, KeyError, IndexError, AttributeError) as e:
            msg = f"Could not read search results: {e}"
            raise TransportError(msg) from e
