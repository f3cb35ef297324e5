import logging
import re
from pathlib import Path

from patchkit.errors import MalformedPatchError

logger = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(r"/+")


class PathEscapeError(MalformedPatchError):
    def __init__(self, candidate: Path, root: Path):
        super().__init__(f"Candidate {str(candidate)} is not relative to root: {str(root)}")


def strip_path(path: str, strip: int) -> str:
    """
    Drop `strip` leading segments from a patch-recorded path, like `patch -pN`.

    Runs of "/" count as one separator, so "/usr/src/x" stripped by one
    gives "usr/src/x".
    """

    if strip == 0:
        return path
    segments = _SEPARATOR_RE.split(path)
    if strip >= len(segments):
        raise MalformedPatchError(
            f"Cannot strip {strip} leading components from path {path!r}"
        )
    return "/".join(segments[strip:])


def resolve_safe_path(
    root: Path,
    relative_path: str,
) -> Path:
    """
    Resolve a relative path within a root directory safely.

    Args:
        root: Directory the patch is applied to
        relative_path: Path taken from the patch, already stripped

    Returns:
        Resolved absolute Path that is guaranteed to be within root

    Raises:
        PathEscapeError: If the resolved path would escape the root
    """

    root = Path(root).resolve()
    candidate = (root / relative_path).resolve()

    if candidate == root or not candidate.is_relative_to(root):
        logger.warning("Path escape attempt: %s is not relative to %s", candidate, root)
        raise PathEscapeError(candidate, root)

    logger.debug("Resolved safe path: %s -> %s", relative_path, candidate)
    return candidate
