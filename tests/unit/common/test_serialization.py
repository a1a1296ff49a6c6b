"""Tests for common.serialization module."""

from dataclasses import dataclass
from datetime import datetime, timezone

from common.serialization import dumps_stable, serialize_dataclass, to_camel


@dataclass
class _Record:
    source_file: str
    created_at: datetime
    tags: tuple
    extra: dict


class TestSerializeDataclass:
    def _record(self) -> _Record:
        return _Record(
            source_file="a.md",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            tags=("x", "y"),
            extra={"nested_key": datetime(2024, 1, 2, tzinfo=timezone.utc)},
        )

    def test_datetimes_become_iso_strings(self) -> None:
        result = serialize_dataclass(self._record())
        assert result["created_at"] == "2024-01-01T00:00:00+00:00"
        assert result["extra"]["nested_key"] == "2024-01-02T00:00:00+00:00"

    def test_tuples_become_lists(self) -> None:
        assert serialize_dataclass(self._record())["tags"] == ["x", "y"]

    def test_camel_case_keys(self) -> None:
        result = serialize_dataclass(self._record(), camel_case=True)
        assert set(result) == {"sourceFile", "createdAt", "tags", "extra"}
        assert "nestedKey" in result["extra"]


class TestToCamel:
    def test_single_word_unchanged(self) -> None:
        assert to_camel("ordinal") == "ordinal"

    def test_multi_word(self) -> None:
        assert to_camel("source_file_path") == "sourceFilePath"


class TestDumpsStable:
    def test_trailing_newline_and_unicode(self) -> None:
        text = dumps_stable({"title": "Café"})
        assert text.endswith("\n")
        assert "Café" in text

    def test_same_input_same_output(self) -> None:
        payload = {"b": [1, 2], "a": {"c": None}}
        assert dumps_stable(payload) == dumps_stable(payload)
