# Browser Relay Storage

from .broadcaster import LogBroadcaster
from .log_store import LogStore, validate_filters

__all__ = [
    "LogBroadcaster",
    "LogStore",
    "validate_filters",
]
