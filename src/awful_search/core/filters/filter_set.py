"""Ordered, editable collection of search filters."""

from collections.abc import Callable, Iterable, Iterator

from awful_search.core.filters.search_filter import SearchFilter
from awful_search.errors import IndexOutOfRangeError

# Listener signature: (event, index). Events are "inserted", "changed",
# "removed" and "cleared" (index -1).
FilterListener = Callable[[str, int], None]


class FilterSet:
    """Filters in display and query order. Duplicates are allowed."""

    def __init__(self, filters: Iterable[SearchFilter] = ()) -> None:
        self._filters: list[SearchFilter] = list(filters)
        self._listeners: list[FilterListener] = []

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[SearchFilter]:
        return iter(list(self._filters))

    def __getitem__(self, index: int) -> SearchFilter:
        self._check_index(index)
        return self._filters[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterSet):
            return NotImplemented
        return self._filters == other._filters

    def __repr__(self) -> str:
        return f"FilterSet({self._filters!r})"

    def subscribe(self, listener: FilterListener) -> Callable[[], None]:
        """Register a change listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def append(self, search_filter: SearchFilter) -> None:
        self._filters.append(search_filter)
        self._notify("inserted", len(self._filters) - 1)

    def extend(self, filters: Iterable[SearchFilter]) -> None:
        for search_filter in filters:
            self.append(search_filter)

    def replace_at(self, index: int, search_filter: SearchFilter) -> None:
        """Replace the filter at index.

        Raises:
            IndexOutOfRangeError: index is not an existing position.
        """
        self._check_index(index)
        self._filters[index] = search_filter
        self._notify("changed", index)

    def remove_at(self, index: int) -> SearchFilter:
        """Remove and return the filter at index.

        Raises:
            IndexOutOfRangeError: index is not an existing position.
        """
        self._check_index(index)
        removed = self._filters.pop(index)
        self._notify("removed", index)
        return removed

    def clear(self) -> None:
        self._filters.clear()
        self._notify("cleared", -1)

    def to_list(self) -> list[SearchFilter]:
        """Return an ordered snapshot of the filters."""
        return list(self._filters)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._filters):
            msg = f"No filter at position {index} (have {len(self._filters)})"
            raise IndexOutOfRangeError(msg)

    def _notify(self, event: str, index: int) -> None:
        for listener in list(self._listeners):
            listener(event, index)
