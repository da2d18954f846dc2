"""
Cache key builders.
"""

import dataclasses
import hashlib
import json
from typing import Any

from pydantic import BaseModel

from shared_redis.exceptions import SerializationError


def canonical_json(value: Any) -> str:
    """
    Serialize a value to canonical JSON.

    Mapping keys are sorted and separators are compact, so structurally
    equal values always produce the same text.

    Args:
        value: Pydantic model, dataclass instance, or JSON-compatible value

    Returns:
        Canonical JSON string

    Raises:
        SerializationError: If the value cannot be represented as JSON
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)

    try:
        return json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(
            f"Request is not JSON serializable: {e}",
            type_name=type(value).__name__,
        ) from e


class CacheKeys:
    """Cache key patterns."""

    SEPARATOR = ":"

    @classmethod
    def generate(cls, prefix: str, request: Any) -> str:
        """
        Derive a deterministic cache key from a request.

        Args:
            prefix: Namespace for the key (e.g., "user_profile")
            request: Request object to hash

        Returns:
            Cache key of the form "{prefix}:{sha256 hex digest}"

        Raises:
            SerializationError: If the request cannot be serialized
        """
        digest = hashlib.sha256(canonical_json(request).encode("utf-8")).hexdigest()
        return f"{prefix}{cls.SEPARATOR}{digest}"

    @classmethod
    def pattern(cls, prefix: str) -> str:
        """
        Glob pattern matching every key derived under a prefix.

        Args:
            prefix: Key namespace

        Returns:
            Glob pattern for clear_pattern()
        """
        return f"{prefix}{cls.SEPARATOR}*"

    @classmethod
    def custom(cls, *parts: Any) -> str:
        """
        Generate custom cache key from parts.

        Args:
            *parts: Key parts to join

        Returns:
            Cache key
        """
        return cls.SEPARATOR.join(str(part) for part in parts)
