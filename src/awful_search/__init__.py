"""Forums search: filters, query building and paginated search sessions."""

from awful_search.api import ForumsApi
from awful_search.core.filters.filter_set import FilterSet
from awful_search.core.filters.kinds import FilterKind, all_kinds, kind_for_label, kind_for_name
from awful_search.core.filters.search_filter import SearchFilter
from awful_search.core.query.builder import build_query
from awful_search.core.session.session import SearchSession, SessionStatus
from awful_search.protocols import IdentityProtocol, ResultParserProtocol, TransportProtocol
from awful_search.transport import HttpTransport

__all__ = [
    "FilterKind",
    "FilterSet",
    "ForumsApi",
    "HttpTransport",
    "IdentityProtocol",
    "ResultParserProtocol",
    "SearchFilter",
    "SearchSession",
    "SessionStatus",
    "TransportProtocol",
    "all_kinds",
    "build_query",
    "kind_for_label",
    "kind_for_name",
]
