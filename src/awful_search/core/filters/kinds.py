"""Catalog of the filter kinds understood by the forums search."""

from collections.abc import Callable
from enum import Enum

from awful_search.errors import UnknownFilterKindError
from awful_search.protocols import IdentityProtocol


class FilterKind(Enum):
    """A structured search keyword.

    template renders a parameter into query syntax, label is the short name
    shown in menus, and description is an optional longer input hint. Kinds
    with a fixed_field take their parameter from the user's identity instead
    of asking for one, and are not editable.
    """

    POST_TEXT = ("%s", "Text in posts")
    USER_ID = ("userid:%s", "User ID")
    USERNAME = ('username:"%s"', "Username")
    MY_USERNAME = ('username:"%s"', "My username", None, "username")
    QUOTING = ('quoting:"%s"', "User being quoted")
    BEFORE = ('before:"%s"', "Earlier than")
    AFTER = ('since:"%s"', "Later than")
    THREAD_ID = ("threadid:%s", "Thread ID")
    IN_TITLE = ('intitle:"%s"', "Thread title", "Text in thread title")

    def __init__(
        self,
        template: str,
        label: str,
        description: str | None = None,
        fixed_field: str | None = None,
    ) -> None:
        self.template = template
        self.label = label
        self.description = description
        self.fixed_field = fixed_field

    @property
    def is_editable(self) -> bool:
        return self.fixed_field is None

    @property
    def hint(self) -> str:
        """Prompt text for an input asking for this kind's parameter."""
        return self.description or self.label

    def value_provider(self, identity: IdentityProtocol) -> Callable[[], str] | None:
        """Return a zero-argument callable reading this kind's fixed value.

        The identity is read on each call, not when the provider is made.
        Editable kinds have no provider.
        """
        field_name = self.fixed_field
        if field_name is None:
            return None

        def provide() -> str:
            return str(getattr(identity, field_name))

        return provide


def all_kinds() -> tuple[FilterKind, ...]:
    """All filter kinds, in menu order."""
    return tuple(FilterKind)


def kind_for_label(label: str) -> FilterKind | None:
    """Map a menu label back to its kind, or None if no kind has that label."""
    for kind in FilterKind:
        if kind.label == label:
            return kind
    return None


def kind_for_name(name: str) -> FilterKind:
    """Look up a kind by its persisted identifier."""
    try:
        return FilterKind[name]
    except KeyError:
        raise UnknownFilterKindError(name) from None
