"""Load-time configuration for PDF grid containers."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
import os
from pathlib import Path

from .constants import DATA_PATH_ENV, V2_DETECTION_TOLERANCE, VALIDATE_SCHEMA_ENV


def _default_data_dirs() -> tuple[Path, ...]:
    return (Path.home() / ".local" / "share" / "pdfgrid",)


@dataclass(frozen=True)
class LoadConfig:
    """Container for user-controlled loading options."""

    data_dirs: tuple[Path, ...] = field(default_factory=_default_data_dirs)
    validate_schema: bool = True
    version_tolerance: float = V2_DETECTION_TOLERANCE
    write_version_marker: bool = True
    check_axes_sorted: bool = False

    def __post_init__(self) -> None:
        if not self.data_dirs:
            raise ValueError("data_dirs must contain at least one directory")
        for d in self.data_dirs:
            if str(d).strip() == "":
                raise ValueError("data_dirs cannot contain empty paths")
        if not math.isfinite(self.version_tolerance):
            raise ValueError("version_tolerance must be finite")
        if self.version_tolerance < 0.0:
            raise ValueError("version_tolerance must be >= 0")

    @classmethod
    def from_env(cls, **overrides) -> "LoadConfig":
        """Build a config from ``PDFGRID_*`` environment variables.

        ``PDFGRID_DATA_PATH`` is an ``os.pathsep`` separated list searched before
        the default data directory.  Keyword arguments win over the environment.
        """
        kwargs: dict[str, object] = {}
        env_dirs = os.getenv(DATA_PATH_ENV)
        if env_dirs:
            dirs = tuple(Path(p).expanduser() for p in env_dirs.split(os.pathsep) if p.strip())
            kwargs["data_dirs"] = dirs + _default_data_dirs()
        env_validate = os.getenv(VALIDATE_SCHEMA_ENV)
        if env_validate is not None:
            value = env_validate.strip().lower()
            if value not in {"0", "1", "true", "false", "yes", "no"}:
                raise ValueError(f"{VALIDATE_SCHEMA_ENV} must be a boolean flag, got {env_validate!r}")
            kwargs["validate_schema"] = value in {"1", "true", "yes"}
        kwargs.update(overrides)
        return cls(**kwargs)
