"""Save and restore filter lists as JSON text."""

import json
from collections.abc import Iterable

from loguru import logger

from awful_search.core.filters.filter_set import FilterSet
from awful_search.core.filters.search_filter import SearchFilter
from awful_search.errors import UnknownFilterKindError
from awful_search.protocols import IdentityProtocol


def dump_filters(filters: Iterable[SearchFilter]) -> str:
    """Serialize filters, in order, to a JSON list."""
    return json.dumps([f.to_dict() for f in filters], sort_keys=True, indent=4) + "\n"


def load_filters(text: str, *, identity: IdentityProtocol | None = None) -> FilterSet:
    """Restore filters saved by dump_filters.

    Entries naming an unknown filter kind, or a fixed-value kind when no
    identity is given, are dropped with a warning; the rest are restored in
    their saved order.

    Raises:
        ValueError: text is not a JSON list of filter objects.
    """
    data = json.loads(text)
    if not isinstance(data, list):
        msg = f"Expected a list of filters, got {type(data).__name__}"
        raise ValueError(msg)

    filters = FilterSet()
    for position, entry in enumerate(data):
        if not isinstance(entry, dict):
            msg = f"Filter entry {position} is not an object: {entry!r}"
            raise ValueError(msg)
        try:
            filters.append(SearchFilter.from_dict(entry, identity=identity))
        except (UnknownFilterKindError, ValueError) as e:
            logger.warning("Dropping saved filter {}: {}", position, e)
    return filters
