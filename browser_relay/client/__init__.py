# Browser Relay Client
"""
Client for shipping console logs to a Browser Relay server.
"""

from .dispatcher import (
    DeliveryError,
    RETRY_DELAYS,
    RetryDispatcher,
    RetryState,
    generate_session_id,
)
from .forwarder import LogForwarder

__all__ = [
    "DeliveryError",
    "RETRY_DELAYS",
    "RetryDispatcher",
    "RetryState",
    "generate_session_id",
    "LogForwarder",
]
