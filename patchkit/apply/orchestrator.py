import logging
from pathlib import Path

from patchkit.apply.actions import TreeWriter, execute_file_diff
from patchkit.config import PatchSeries, default_max_offset
from patchkit.diff.scanner import parse_patch_file
from patchkit.errors import PatchArgumentError
from patchkit.models import ApplyReport

logger = logging.getLogger(__name__)


def apply_patch(
    patch_file: Path,
    strip: int,
    root: Path,
    *,
    dry_run: bool = False,
    max_offset: int | None = None,
) -> ApplyReport:
    """
    Apply a git-style patch file to the tree under `root`.

    The whole patch is parsed before anything is written. File diffs are then
    applied in patch order; the first failure stops the run and file diffs
    applied before it stay applied.

    Args:
        patch_file: Patch to apply
        strip: Leading path components to drop, like `patch -p`
        root: Directory the stripped paths are relative to
        dry_run: Check that the patch applies without touching the tree
        max_offset: Cap on how far a hunk may drift from its header position;
            defaults to PATCHKIT_MAX_OFFSET, unbounded when unset

    Returns:
        ApplyReport describing each file change

    Raises:
        PatchArgumentError: strip is negative
        FileNotFoundError / NotADirectoryError: root or a target is missing
        MalformedPatchError, ChunkFormatError: the patch cannot be parsed
        ApplyMismatchError: a hunk does not match its target
    """

    patch_file = Path(patch_file)
    root = Path(root)

    if strip < 0:
        raise PatchArgumentError(f"strip must be >= 0, got {strip}")
    if not root.exists():
        raise FileNotFoundError(f"Root directory does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Root is not a directory: {root}")
    if max_offset is None:
        max_offset = default_max_offset()

    file_diffs = parse_patch_file(patch_file)
    logger.debug("Applying %d file diffs from %s to %s", len(file_diffs), patch_file, root)

    writer = TreeWriter(root, dry_run=dry_run)
    report = ApplyReport(patch_file=patch_file, root=root, strip=strip, dry_run=dry_run)
    for file_diff in file_diffs:
        report.changes.append(
            execute_file_diff(writer, file_diff, strip, max_offset=max_offset)
        )

    logger.info(
        "Patch %s %s, changed %d files",
        patch_file,
        "checks out" if dry_run else "applied",
        len(report.changes),
    )
    return report


def apply_series(
    series: PatchSeries,
    *,
    dry_run: bool = False,
    max_offset: int | None = None,
) -> list[ApplyReport]:
    """Apply every patch of a series in order, stopping at the first failure."""
    reports = []
    for entry in series.patches:
        reports.append(
            apply_patch(
                entry.path,
                series.strip_for(entry),
                series.root,
                dry_run=dry_run,
                max_offset=max_offset,
            )
        )
    return reports
