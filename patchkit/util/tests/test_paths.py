"""Unit tests for patch path stripping and resolution."""

from pathlib import Path

import pytest

from patchkit.errors import MalformedPatchError
from patchkit.util.paths import PathEscapeError, resolve_safe_path, strip_path


class TestStripPath:
    """Tests for strip_path."""

    def test_strip_zero_keeps_path(self):
        assert strip_path("a/src/main.c", 0) == "a/src/main.c"

    def test_strip_one(self):
        assert strip_path("b/src/main.c", 1) == "src/main.c"

    def test_strip_two(self):
        assert strip_path("b/src/main.c", 2) == "main.c"

    def test_repeated_separators_count_once(self):
        assert strip_path("a//src/main.c", 1) == "src/main.c"

    def test_absolute_path(self):
        assert strip_path("/usr/src/main.c", 1) == "usr/src/main.c"

    def test_strip_everything_raises(self):
        with pytest.raises(MalformedPatchError):
            strip_path("b/main.c", 2)


class TestResolveSafePath:
    """Tests for resolve_safe_path."""

    def test_relative_path(self, tmp_path: Path):
        assert resolve_safe_path(tmp_path, "src/main.c") == tmp_path.resolve() / "src" / "main.c"

    def test_parent_escape(self, tmp_path: Path):
        with pytest.raises(PathEscapeError):
            resolve_safe_path(tmp_path, "../../../etc/passwd")

    def test_absolute_escape(self, tmp_path: Path):
        with pytest.raises(PathEscapeError):
            resolve_safe_path(tmp_path, "/etc/passwd")

    def test_root_itself_is_not_a_target(self, tmp_path: Path):
        with pytest.raises(PathEscapeError):
            resolve_safe_path(tmp_path, "src/..")

    def test_escape_is_a_malformed_patch(self, tmp_path: Path):
        with pytest.raises(MalformedPatchError):
            resolve_safe_path(tmp_path, "../x")
