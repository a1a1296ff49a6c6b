"""Tests for ingest_posts.split_segments.split module."""

from ingest_posts.models import RawFile
from ingest_posts.parse_front_matter.parse import parse_segment
from ingest_posts.split_segments.split import (
    fenced_spans,
    find_separators,
    join_segments,
    split_file,
)

SEPARATOR = "<!-- post-break:a1b2c3d4 -->"
POST_A = "---\ntitle: LLM Council: Zero-to-Production Guide\ndate: 2025-12-04\n---\nBody A\n"
POST_B = "---\ntitle: Second Post\ndate: 2025-12-05\ntags: [x]\n---\nBody B\n"


def _file(text: str) -> RawFile:
    return RawFile(path="posts/joined.md", text=text)


class TestSplitFile:
    def test_no_separator_yields_whole_file(self) -> None:
        segments = split_file(_file(POST_A))
        assert len(segments) == 1
        assert segments[0].text == POST_A
        assert segments[0].ordinal == 0
        assert segments[0].prefix == ""
        assert segments[0].suffix == ""

    def test_empty_file_yields_one_empty_segment(self) -> None:
        segments = split_file(_file(""))
        assert len(segments) == 1
        assert segments[0].text == ""

    def test_two_concatenated_posts(self) -> None:
        text = POST_A + SEPARATOR + "\n" + POST_B
        segments = split_file(_file(text))

        assert [s.ordinal for s in segments] == [0, 1]
        assert segments[0].text == POST_A.rstrip("\n")
        assert segments[1].text == POST_B
        assert segments[1].separator == SEPARATOR
        assert all(s.source_file == "posts/joined.md" for s in segments)
        for segment in segments:
            front_matter, _ = parse_segment(segment)
            assert front_matter.title

    def test_exact_reconstruction_from_prefix_and_suffix(self) -> None:
        text = "\n" + POST_A + "\n" + SEPARATOR + "\n\n" + POST_B + SEPARATOR + "\n  \n"
        segments = split_file(_file(text))
        assert len(segments) == 2
        assert join_segments(segments) == text

    def test_round_trip_with_separator(self) -> None:
        text = POST_A + SEPARATOR + "\n" + POST_B
        segments = split_file(_file(text))
        assert join_segments(segments, SEPARATOR) == text

    def test_hash_suffix_varies(self) -> None:
        text = (
            POST_A
            + "<!-- post-break:ffff0000 -->\n"
            + POST_B
            + "<!-- POST-BREAK: 9a -->\n"
            + POST_A
        )
        assert len(split_file(_file(text))) == 3

    def test_bare_marker_without_hash(self) -> None:
        assert len(split_file(_file(POST_A + "<!-- post-break -->\n" + POST_B))) == 2

    def test_marker_inside_a_line_is_not_a_separator(self) -> None:
        text = POST_A.replace("Body A", f"See {SEPARATOR} for details")
        assert len(split_file(_file(text))) == 1

    def test_separator_inside_code_fence_is_ignored(self) -> None:
        quoted = POST_A + "```html\n" + SEPARATOR + "\n```\n"
        text = quoted + SEPARATOR + "\n" + POST_B
        segments = split_file(_file(text))
        assert len(segments) == 2
        assert SEPARATOR in segments[0].text

    def test_trailing_separator_produces_no_empty_segment(self) -> None:
        text = POST_A + SEPARATOR + "\n"
        segments = split_file(_file(text))
        assert len(segments) == 1
        assert segments[0].text == POST_A.rstrip("\n")
        assert join_segments(segments) == text

    def test_leading_and_repeated_separators(self) -> None:
        text = SEPARATOR + "\n" + POST_A + SEPARATOR + "\n\n" + SEPARATOR + "\n" + POST_B
        segments = split_file(_file(text))
        assert [s.ordinal for s in segments] == [0, 1]
        assert segments[1].text == POST_B
        assert join_segments(segments) == text

    def test_only_separators_yields_nothing(self) -> None:
        assert split_file(_file(SEPARATOR + "\n\n" + SEPARATOR + "\n")) == []

    def test_crlf_line_endings(self) -> None:
        post_a = POST_A.replace("\n", "\r\n")
        post_b = POST_B.replace("\n", "\r\n")
        text = post_a + SEPARATOR + "\r\n" + post_b
        segments = split_file(_file(text))
        assert len(segments) == 2
        assert segments[1].text == post_b
        assert join_segments(segments) == text

    def test_custom_separator_pattern(self) -> None:
        text = POST_A + "=== SPLIT ===\n" + POST_B
        assert len(split_file(_file(text), r"^=== SPLIT ===$")) == 2


class TestFencedSpans:
    def test_closed_fence(self) -> None:
        text = "a\n```\ncode\n```\nb\n"
        spans = fenced_spans(text)
        assert len(spans) == 1
        start, end = spans[0]
        assert text[start:end] == "```\ncode\n```"

    def test_unclosed_fence_is_ignored(self) -> None:
        assert fenced_spans("a\n```python\ncode\n") == []

    def test_closing_fence_needs_enough_backticks(self) -> None:
        text = "````\n```\nstill code\n````\n"
        assert len(fenced_spans(text)) == 1

    def test_find_separators_skips_fenced_matches(self) -> None:
        text = "```\n" + SEPARATOR + "\n```\n" + SEPARATOR + "\n"
        matches = find_separators(text, r"^<!-- post-break:[0-9a-z]+ -->$")
        assert len(matches) == 1
        assert matches[0].start() == text.rindex(SEPARATOR)
