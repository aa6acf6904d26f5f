"""JSON serializer for structured cache entries."""

import json
from typing import Any


class SerializationError(ValueError):
    """Raised when a value cannot be written to or read from storage."""


class JsonSerializer:
    """Encodes cache entries as compact JSON text.

    The database backend keeps entries in a text column, so values are
    exchanged as ``str``. Non-ASCII page content is written as is rather
    than as ``\\u`` escapes, which keeps stored sizes close to the page
    size. Objects exposing ``to_dict()`` (CacheEntry, EntryMeta) are
    encoded through it.
    """

    def __init__(self, separators: tuple[str, str] = (",", ":")) -> None:
        self._separators = separators

    def serialize(self, value: Any) -> str:
        """Encode ``value`` as JSON text.

        Raises:
            SerializationError: If the value has no JSON form.
        """
        try:
            return json.dumps(
                value,
                default=_to_plain,
                ensure_ascii=False,
                separators=self._separators,
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Cannot encode {type(value).__name__}: {e}") from e

    def deserialize(self, text: str | bytes) -> Any:
        """Decode JSON text read from storage.

        Raises:
            SerializationError: If the text is not valid JSON.
        """
        try:
            return json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SerializationError(f"Cannot decode stored value: {e}") from e


def _to_plain(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
