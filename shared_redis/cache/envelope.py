"""
Envelope stored for every cached response.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from shared_redis.exceptions import DeserializationError, SerializationError

T = TypeVar("T")


def utc_now() -> datetime:
    """Current UTC datetime with timezone info."""
    return datetime.now(UTC)


class CachedResponse(BaseModel, Generic[T]):
    """Cached value with the key it is stored under and its write time."""

    model_config = ConfigDict(frozen=True)

    # "data" is the field name used by older writers of the same keys
    payload: T = Field(
        ...,
        validation_alias=AliasChoices("payload", "data"),
        description="Cached value",
    )
    cached_at: datetime = Field(default_factory=utc_now, description="Write timestamp (UTC)")
    cache_key: str = Field(..., description="Key the envelope is stored under")

    def to_json(self) -> str:
        """
        Serialize the envelope for storage.

        Returns:
            JSON text

        Raises:
            SerializationError: If the payload cannot be represented as JSON
        """
        try:
            return self.model_dump_json()
        except ValueError as e:
            raise SerializationError(
                f"Failed to serialize cached payload: {e}",
                type_name=type(self.payload).__name__,
            ) from e


def decode_envelope(
    raw: str | bytes,
    model: type[T] | None = None,
    key: str | None = None,
) -> CachedResponse[Any]:
    """
    Decode a stored envelope.

    Args:
        raw: JSON text read from the store
        model: Optional type to validate the payload into
        key: Key the value was read from, for error details

    Returns:
        Decoded envelope

    Raises:
        DeserializationError: If the value is not a valid envelope
    """
    envelope_type = CachedResponse[model] if model is not None else CachedResponse
    try:
        return envelope_type.model_validate_json(raw)
    except ValidationError as e:
        raise DeserializationError(f"Failed to decode cached envelope: {e}", key=key) from e


@dataclass(frozen=True)
class CacheWriteResult:
    """Envelope returned by a cache write, plus whether the store accepted it."""

    envelope: CachedResponse[Any]
    stored: bool
