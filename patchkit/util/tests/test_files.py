from pathlib import Path

from patchkit.util.files import read_lines, write_lines


class TestReadLines:
    """Tests for read_lines."""

    def test_trailing_newline_dropped(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_bytes(b"one\ntwo\n")

        assert read_lines(path) == ["one", "two"]

    def test_missing_final_newline(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_bytes(b"one\ntwo")

        assert read_lines(path) == ["one", "two"]

    def test_blank_lines_kept(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_bytes(b"one\n\n\n")

        assert read_lines(path) == ["one", "", ""]

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_bytes(b"")

        assert read_lines(path) == []

    def test_carriage_returns_kept(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_bytes(b"one\r\ntwo\r\n")

        assert read_lines(path) == ["one\r", "two\r"]

    def test_form_feed_is_not_a_line_break(self, tmp_path: Path):
        path = tmp_path / "f.txt"
        path.write_bytes(b"a\x0cb\n")

        assert read_lines(path) == ["a\x0cb"]


class TestWriteLines:
    """Tests for write_lines."""

    def test_terminates_with_newline(self, tmp_path: Path):
        path = tmp_path / "f.txt"

        write_lines(path, ["one", "two"])

        assert path.read_bytes() == b"one\ntwo\n"

    def test_empty_content(self, tmp_path: Path):
        path = tmp_path / "f.txt"

        write_lines(path, [])

        assert path.read_bytes() == b""

    def test_undecodable_bytes_round_trip(self, tmp_path: Path):
        path = tmp_path / "f.bin"
        path.write_bytes(b"caf\xe9\nok\n")

        write_lines(path, read_lines(path))

        assert path.read_bytes() == b"caf\xe9\nok\n"
