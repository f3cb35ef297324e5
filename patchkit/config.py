import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from patchkit.errors import InvalidSeriesError

logger = logging.getLogger(__name__)

MAX_OFFSET_ENV = "PATCHKIT_MAX_OFFSET"


def _env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, value)
        return default


def default_max_offset() -> int | None:
    """Fuzz bound from PATCHKIT_MAX_OFFSET; None (unbounded) when unset or negative."""
    value = _env_int(MAX_OFFSET_ENV, None)
    if value is not None and value < 0:
        return None
    return value


class PatchEntry(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
    )

    path: Path
    strip: int | None = Field(default=None, ge=0)

    @field_serializer("path")
    def serialize_path(self, v: Path) -> str:
        return str(v)


class PatchSeries(BaseModel):
    """
    Ordered patches applied to one root, as read from a YAML file:

    ```yaml
    root: third_party/zlib
    strip: 1
    patches:
      - patches/0001-fix.patch
      - path: patches/0002-extra.patch
        strip: 0
    ```

    Relative paths are resolved against the directory of the YAML file.
    """

    model_config = ConfigDict(
        extra="forbid",
    )

    root: Path
    strip: int = Field(default=1, ge=0)
    patches: list[PatchEntry]
    source_path: Path | None = None

    @field_validator("patches", mode="before")
    @classmethod
    def coerce_entries(cls, value: object) -> object:
        if isinstance(value, list):
            return [{"path": item} if isinstance(item, str) else item for item in value]
        return value

    @field_serializer("root", "source_path")
    def serialize_paths(self, v: Path | None) -> str | None:
        return str(v) if v is not None else None

    def strip_for(self, entry: PatchEntry) -> int:
        return entry.strip if entry.strip is not None else self.strip


def load_series(series_yaml: Path) -> PatchSeries:
    series_yaml = Path(series_yaml)
    with open(series_yaml, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise InvalidSeriesError(series_yaml, exc) from exc

    if not isinstance(data, dict):
        raise InvalidSeriesError(series_yaml, TypeError("root must be a mapping"))

    try:
        series = PatchSeries.model_validate({**data, "source_path": series_yaml})
    except ValidationError as exc:
        raise InvalidSeriesError(series_yaml, exc) from exc

    base = series_yaml.parent
    series.root = base / series.root
    for entry in series.patches:
        entry.path = base / entry.path

    logger.debug("Loaded %d patches from %s", len(series.patches), series_yaml)
    return series
