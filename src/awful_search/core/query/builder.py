"""Compose free text and filters into a forums query string."""

from collections.abc import Iterable

from awful_search.core.filters.search_filter import SearchFilter


def build_query(free_text: str, filters: Iterable[SearchFilter]) -> str:
    """Build the query string sent to the server.

    - Free text is stripped and, if anything is left, goes first
    - Each filter follows in order, rendered by its kind's template
    - Parts are joined by single spaces; nothing is escaped

    Returns an empty string when there is no text and no filters.
    """
    parts: list[str] = []
    text = free_text.strip()
    if text:
        parts.append(text)
    parts.extend(f.render() for f in filters)
    return " ".join(parts)
