"""Serializer interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Contract for encoding structured entries for text storage.

    Backends that persist structured entries in a text column use a
    serializer to turn them into strings and back.
    """

    def serialize(self, value: Any) -> str:
        """Serialize value to text.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        ...

    def deserialize(self, text: str) -> Any:
        """Deserialize text to value.

        Raises:
            SerializationError: If the text cannot be deserialized.
        """
        ...
