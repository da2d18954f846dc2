"""
Custom exceptions for shared-redis.
"""


class SharedRedisError(Exception):
    """Base exception for all shared-redis errors."""

    def __init__(self, message: str, error_code: str | None = None, details: dict | None = None):
        """
        Initialize exception.

        Args:
            message: Error message
            error_code: Optional error code
            details: Optional error details
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


# Cache Errors


class CacheError(SharedRedisError):
    """Cache-related errors."""

    pass


class CacheConnectionError(CacheError):
    """Cache connection errors."""

    def __init__(self, message: str = "Failed to connect to cache"):
        """Initialize exception."""
        super().__init__(message, error_code="CACHE_CONNECTION_ERROR")


class StoreOperationError(CacheError):
    """A command sent to the backing store failed."""

    def __init__(self, operation: str, message: str, key: str | None = None):
        """
        Initialize exception.

        Args:
            operation: Store command that failed (e.g., "get", "set")
            message: Error message
            key: Key the command targeted, if any
        """
        details = {"operation": operation}
        if key is not None:
            details["key"] = key
        super().__init__(message, error_code="STORE_OPERATION_ERROR", details=details)


# Serialization Errors


class SerializationError(SharedRedisError):
    """Value could not be encoded to JSON."""

    def __init__(self, message: str, type_name: str | None = None):
        """
        Initialize exception.

        Args:
            message: Error message
            type_name: Name of the type that failed to serialize
        """
        details = {"type": type_name} if type_name else {}
        super().__init__(message, error_code="SERIALIZATION_ERROR", details=details)


class DeserializationError(SharedRedisError):
    """Stored value could not be decoded."""

    def __init__(self, message: str, key: str | None = None):
        """
        Initialize exception.

        Args:
            message: Error message
            key: Cache key holding the undecodable value
        """
        details = {"key": key} if key else {}
        super().__init__(message, error_code="DESERIALIZATION_ERROR", details=details)


# Messaging Errors


class MessagingError(SharedRedisError):
    """Pub/sub messaging errors."""

    pass


class MessagePublishError(MessagingError):
    """Message publishing errors."""

    def __init__(self, channel: str, message: str = "Failed to publish message"):
        """
        Initialize exception.

        Args:
            channel: Channel name
            message: Error message
        """
        super().__init__(message, error_code="MESSAGE_PUBLISH_ERROR", details={"channel": channel})


class MessageSubscribeError(MessagingError):
    """Channel subscription errors."""

    def __init__(self, channels: list[str], message: str = "Failed to subscribe"):
        """
        Initialize exception.

        Args:
            channels: Channel names
            message: Error message
        """
        super().__init__(
            message, error_code="MESSAGE_SUBSCRIBE_ERROR", details={"channels": channels}
        )

