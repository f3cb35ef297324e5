"""Unit tests for hunk header and body parsing."""

import pytest

from patchkit.diff.hunks import classify_body_line, parse_hunk, parse_hunk_header
from patchkit.errors import (
    ChunkFormatError,
    ChunkOverrunError,
    MalformedPatchError,
    TruncatedChunkError,
)
from patchkit.models import LineKind


class TestParseHunkHeader:
    """Tests for parse_hunk_header."""

    def test_full_header(self):
        hunk = parse_hunk_header("@@ -2,4 +2,5 @@")

        assert (hunk.old_start, hunk.old_lines) == (2, 4)
        assert (hunk.new_start, hunk.new_lines) == (2, 5)

    def test_omitted_counts_default_to_one(self):
        hunk = parse_hunk_header("@@ -7 +9 @@")

        assert hunk.old_lines == 1
        assert hunk.new_lines == 1

    def test_trailing_section_text_is_ignored(self):
        hunk = parse_hunk_header("@@ -10,3 +10,4 @@ def calculate_total(items):")

        assert hunk.old_start == 10
        assert hunk.new_lines == 4

    def test_invalid_header_raises_malformed(self):
        with pytest.raises(MalformedPatchError) as exc_info:
            parse_hunk_header("@@ -a,b +c,d @@", 5)

        assert "patch line 5" in str(exc_info.value)


class TestClassifyBodyLine:
    """Tests for classify_body_line."""

    def test_prefixes(self):
        assert classify_body_line(" same").kind == LineKind.CONTEXT
        assert classify_body_line("-gone").kind == LineKind.DELETE
        assert classify_body_line("+new").kind == LineKind.ADD
        assert classify_body_line("+new").text == "new"

    def test_blank_line_is_empty_context(self):
        line = classify_body_line("")

        assert line.kind == LineKind.CONTEXT
        assert line.text == ""

    def test_other_lines_are_not_body(self):
        assert classify_body_line("diff --git a/x b/x") is None
        assert classify_body_line("@@ -1 +1 @@") is None


class TestParseHunk:
    """Tests for parse_hunk."""

    def test_parses_body_and_returns_next_index(self):
        lines = [
            "@@ -1,3 +1,3 @@",
            " void lib(){",
            '-  printf("Hello bar");',
            '+  printf("Hello patch");',
            " }",
            "diff --git a/foo.cc b/foo.cc",
        ]

        hunk, next_index = parse_hunk(lines, 0)

        assert next_index == 5
        assert hunk.line_number == 1
        assert hunk.old_side == ["void lib(){", '  printf("Hello bar");', "}"]
        assert hunk.new_side == ["void lib(){", '  printf("Hello patch");', "}"]

    def test_blank_body_line_counts_as_context(self):
        lines = ["@@ -1,2 +1,2 @@", "", "-a", "+b"]

        hunk, _ = parse_hunk(lines, 0)

        assert hunk.old_side == ["", "a"]
        assert hunk.new_side == ["", "b"]

    def test_no_newline_marker_is_skipped(self):
        lines = ["@@ -1 +1 @@", "-old", "\\ No newline at end of file", "+new"]

        hunk, next_index = parse_hunk(lines, 0)

        assert next_index == 4
        assert hunk.added == ["new"]

    def test_truncated_at_end_of_input(self):
        lines = [
            "@@ -2,4 +2,5 @@",
            " ",
            " void main(){",
            '   printf("Hello foo");',
            '+  printf("Hello from patch");',
        ]

        with pytest.raises(TruncatedChunkError) as exc_info:
            parse_hunk(lines, 0)

        assert str(exc_info.value) == "Expecting more chunk line at line 6"
        assert exc_info.value.line_number == 6

    def test_truncated_by_next_header(self):
        lines = ["@@ -1,2 +1,2 @@", " a", "@@ -5 +5 @@", " b"]

        with pytest.raises(TruncatedChunkError) as exc_info:
            parse_hunk(lines, 0)

        assert exc_info.value.line_number == 3

    def test_overrun_names_line_and_text(self):
        lines = [
            "@@ -1,2 +1,1 @@",
            " a",
            "+b",
            "-c",
        ]

        with pytest.raises(ChunkOverrunError) as exc_info:
            parse_hunk(lines, 0)

        assert str(exc_info.value) == "Wrong chunk detected near line 3: +b"
        assert exc_info.value.detail == "+b"

    def test_overrun_is_a_chunk_format_error(self):
        with pytest.raises(ChunkFormatError):
            parse_hunk(["@@ -1 +1 @@", "+a", "+b"], 0)

    def test_start_index_offsets_line_numbers(self):
        lines = ["--- a/x", "+++ b/x", "@@ -1,2 +1,2 @@", " a"]

        with pytest.raises(TruncatedChunkError) as exc_info:
            parse_hunk(lines, 2)

        assert exc_info.value.line_number == 5
