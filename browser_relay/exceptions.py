# Browser Relay Exceptions
"""
Error types shared by the store, the ingestion path and the tool adapter.
"""


class BrowserRelayError(Exception):
    """Base class for Browser Relay errors."""


class StorageUnavailableError(BrowserRelayError):
    """The log database could not be reached or is corrupted."""


class InvalidFilterError(BrowserRelayError):
    """A query was issued with an invalid filter combination."""


class PayloadTooLargeError(BrowserRelayError):
    """An ingestion payload exceeded the configured size limit."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Payload of {size} bytes exceeds limit of {limit} bytes")


class UnsupportedToolError(BrowserRelayError):
    """A tool was called that the adapter does not expose."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unsupported operation: {name}")
