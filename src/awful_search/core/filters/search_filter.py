"""A single search filter: one kind plus the value it filters on."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from awful_search.core.filters.kinds import FilterKind, kind_for_name
from awful_search.protocols import IdentityProtocol


@dataclass(frozen=True)
class SearchFilter:
    """A filter for use in forums searches.

    Holds a kind (one of the search keywords the site supports) and the data
    being filtered on: text, IDs etc. Non-editable kinds get their parameter
    from provider, which is read again every time the filter is rendered.
    """

    kind: FilterKind
    parameter: str = ""
    provider: Callable[[], str] | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.kind.is_editable:
            if self.provider is not None:
                msg = f"{self.kind.label!r} filters take a parameter, not a value provider"
                raise ValueError(msg)
            return
        if self.provider is None:
            msg = f"{self.kind.label!r} filters need a value provider"
            raise ValueError(msg)
        # Whatever the caller passed is ignored for fixed kinds.
        object.__setattr__(self, "parameter", self.provider())

    @classmethod
    def for_kind(
        cls,
        kind: FilterKind,
        parameter: str = "",
        *,
        identity: IdentityProtocol | None = None,
    ) -> "SearchFilter":
        """Create a filter, wiring fixed-value kinds to the given identity."""
        if kind.is_editable:
            return cls(kind, parameter)
        if identity is None:
            msg = f"{kind.label!r} filters need an identity"
            raise ValueError(msg)
        return cls(kind, provider=kind.value_provider(identity))

    @property
    def display_value(self) -> str:
        """The parameter as shown to the user; fixed values are not shown."""
        return self.parameter if self.kind.is_editable else ""

    def render(self) -> str:
        """Return the query syntax fragment for this filter."""
        value = self.provider() if self.provider is not None else self.parameter
        return self.kind.template % value

    def edit(self, parameter: str) -> "SearchFilter | None":
        """Return a copy with a new parameter, or None if the kind is not editable."""
        if not self.kind.is_editable:
            return None
        return replace(self, parameter=parameter)

    def to_dict(self) -> dict[str, str]:
        """Compact persisted form: kind identifier and parameter."""
        return {"kind": self.kind.name, "parameter": self.parameter}

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], *, identity: IdentityProtocol | None = None
    ) -> "SearchFilter":
        """Rebuild a filter from to_dict output.

        Raises:
            UnknownFilterKindError: The kind identifier is not known.
            ValueError: The kind has a fixed value and no identity was given.
        """
        kind = kind_for_name(str(data.get("kind", "")))
        parameter = data.get("parameter")
        return cls.for_kind(kind, "" if parameter is None else str(parameter), identity=identity)

    def __str__(self) -> str:
        return self.render()
