"""Tests for JsonSerializer."""

import pytest

from cachify.core.entities import CacheEntry, EntryMeta
from cachify.infrastructure.serializers.json import JsonSerializer, SerializationError


class TestJsonSerializer:
    """Tests for JsonSerializer."""

    @pytest.fixture
    def serializer(self) -> JsonSerializer:
        """Create a serializer for testing."""
        return JsonSerializer()

    def test_serialize_entry(self, serializer: JsonSerializer) -> None:
        """Test that entries are encoded through their persisted form."""
        entry = CacheEntry(
            data="<p>Grüße</p>",
            meta=EntryMeta(queries=2, timer=0.1, memory="1 MB", timestamp=5),
        )

        result = serializer.serialize(entry)

        assert isinstance(result, str)
        assert "Grüße" in result
        assert serializer.deserialize(result) == entry.to_dict()

    def test_output_is_compact(self, serializer: JsonSerializer) -> None:
        assert serializer.serialize({"data": "page", "meta": None}) == '{"data":"page","meta":null}'

    def test_custom_separators(self) -> None:
        serializer = JsonSerializer(separators=(", ", ": "))

        assert serializer.serialize({"data": "page"}) == '{"data": "page"}'

    def test_entry_survives_storage(self, serializer: JsonSerializer) -> None:
        entry = CacheEntry(data="page", meta=None)

        restored = CacheEntry.from_dict(serializer.deserialize(serializer.serialize(entry)))

        assert restored == entry

    def test_deserialize_accepts_bytes(self, serializer: JsonSerializer) -> None:
        assert serializer.deserialize('{"data":"Grüße"}'.encode()) == {"data": "Grüße"}

    @pytest.mark.parametrize("text", ["not valid json", "", '{"data": '])
    def test_deserialize_invalid_json(self, serializer: JsonSerializer, text: str) -> None:
        """Test deserializing invalid JSON raises error."""
        with pytest.raises(SerializationError):
            serializer.deserialize(text)

    def test_serialize_non_serializable(self, serializer: JsonSerializer) -> None:
        """Test serializing unknown objects raises error."""
        with pytest.raises(SerializationError):
            serializer.serialize({"value": object()})

    def test_error_is_a_value_error(self, serializer: JsonSerializer) -> None:
        with pytest.raises(ValueError):
            serializer.deserialize("[")
