"""Exception taxonomy for Socials Studio.

Content and carousel actions that fail with NotFoundError, OutOfRangeError
or UnsupportedError abort only that action. StoreError is fatal for the
whole request.
"""

from __future__ import annotations


class StudioError(Exception):
    """Base exception for Socials Studio errors."""

    pass


class NotFoundError(StudioError):
    """An entity does not exist."""

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class OutOfRangeError(StudioError):
    """An index is invalid for the current array length."""

    def __init__(self, what: str, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"{what} index {index} out of range (length {length})")


class UnsupportedError(StudioError):
    """Operation is not valid for this content type or input."""

    pass


class UnavailableError(StudioError):
    """Dependent data (e.g. image bytes) is missing for a valid entity."""

    pass


class ProviderTimeoutError(StudioError):
    """An external model call exceeded its time budget."""

    def __init__(self, operation: str, timeout_seconds: float):
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(f"{operation} timed out after {timeout_seconds:g}s")


class MalformedActionError(StudioError):
    """A tool invocation is unknown or misses required fields."""

    pass


class StoreError(StudioError):
    """The content store failed to read or write."""

    pass


class RequestFailedError(StudioError):
    """Generic failure returned to the caller after a fatal error."""

    pass
