"""Tests for common.hashing module."""

from common.hashing import content_hash, generate_document_id, normalize_body


class TestGenerateDocumentId:
    def test_deterministic_output(self) -> None:
        result1 = generate_document_id("posts/a.md", 0)
        result2 = generate_document_id("posts/a.md", 0)
        assert result1 == result2

    def test_returns_16_char_hex_string(self) -> None:
        result = generate_document_id("posts/a.md", 0)
        assert len(result) == 16
        assert all(c in "0123456789abcdef" for c in result)

    def test_different_ordinal_produces_different_id(self) -> None:
        assert generate_document_id("posts/a.md", 0) != generate_document_id("posts/a.md", 1)

    def test_different_file_produces_different_id(self) -> None:
        assert generate_document_id("posts/a.md", 0) != generate_document_id("posts/b.md", 0)


class TestContentHash:
    def test_line_endings_do_not_matter(self) -> None:
        assert content_hash("a\r\nb\r\n") == content_hash("a\nb\n")

    def test_trailing_spaces_and_outer_blank_lines_do_not_matter(self) -> None:
        assert content_hash("\n\nHello  \nWorld\t\n\n") == content_hash("Hello\nWorld")

    def test_different_text_differs(self) -> None:
        assert content_hash("Hello") != content_hash("Hello!")

    def test_normalize_body_keeps_inner_blank_lines(self) -> None:
        assert normalize_body("a\n\n\nb\n") == "a\n\n\nb"
