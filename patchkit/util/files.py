import logging
from pathlib import Path

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
ERRORS = "surrogateescape"


def read_lines(path: Path) -> list[str]:
    """
    Read a text file as a list of lines.

    Lines are split on "\\n" only; a trailing "\\r" stays part of the line so
    CRLF files survive a rewrite unchanged. The empty string after a final
    newline is dropped.
    """

    with open(path, "r", encoding=ENCODING, errors=ERRORS, newline="") as f:
        text = f.read()

    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def write_lines(path: Path, lines: list[str]) -> None:
    text = "\n".join(lines)
    if lines:
        text += "\n"
    with open(path, "w", encoding=ENCODING, errors=ERRORS, newline="") as f:
        f.write(text)
    logger.debug("Wrote %d lines to %s", len(lines), path)
