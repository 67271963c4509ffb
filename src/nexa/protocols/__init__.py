"""Protocolos e contratos das interfaces externas consumidas."""

from .change_feed import ChangeFeedProtocol, ChangeHandler, FeedSubscription
from .change_policy import ChangePolicyProtocol
from .models import (
    ChangeNotification,
    EventKind,
    Filter,
    FilterOp,
    OrderBy,
    QueryCriteria,
)
from .privileged import PrivilegedEndpointProtocol
from .remote_query import RemoteQueryProtocol, Row

__all__ = [
    "ChangeFeedProtocol",
    "ChangeHandler",
    "ChangeNotification",
    "ChangePolicyProtocol",
    "EventKind",
    "FeedSubscription",
    "Filter",
    "FilterOp",
    "OrderBy",
    "PrivilegedEndpointProtocol",
    "QueryCriteria",
    "RemoteQueryProtocol",
    "Row",
]
