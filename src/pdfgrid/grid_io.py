"""Reading and writing PDF grid containers.

A container is a single ``.npz`` archive holding the descriptor record of a
set and, for every member, its ordered subgrids.  Subgrids are stored as their
seven coordinate axes plus the flat payload in construction layout, so reading
a container goes through the same constructors as any other loader.  Archives
are written to a temporary file first and moved into place.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

import numpy as np

from .config import LoadConfig
from .constants import CONTAINER_FORMAT_VERSION, CONTAINER_SUFFIX
from .grid_data import FixedRankGrid, VariableRankGrid
from .metadata import MetaData
from .subgrid import SubGrid

logger = logging.getLogger(__name__)

_AXIS_FIELDS = ("nucleons", "alphas", "xis", "deltas", "kts", "xs", "q2s")


@dataclass(frozen=True)
class GridContainer:
    """Metadata and per-member subgrids of one PDF set."""

    metadata: MetaData
    members: tuple[tuple[SubGrid, ...], ...]

    @property
    def num_members(self) -> int:
        return len(self.members)

    def subgrids(self, member: int = 0) -> tuple[SubGrid, ...]:
        if not 0 <= member < len(self.members):
            raise IndexError(f"member {member} out of range for {len(self.members)} members")
        return self.members[member]

    def subgrid(self, member: int, index: int) -> SubGrid:
        subgrids = self.subgrids(member)
        if not 0 <= index < len(subgrids):
            raise IndexError(f"subgrid {index} out of range for {len(subgrids)} subgrids")
        return subgrids[index]


def _prefix(member: int, index: int) -> str:
    return f"member_{member}_subgrid_{index}_"


def _check_sorted(name: str, values: np.ndarray) -> None:
    if values.size > 1 and np.any(np.diff(values) <= 0.0):
        raise ValueError(f"axis '{name}' is not strictly ascending")


def _subgrid_arrays(sg: SubGrid, prefix: str) -> dict[str, np.ndarray]:
    out = {prefix + name: np.asarray(getattr(sg, name)) for name in _AXIS_FIELDS}
    out[prefix + "nflav"] = np.array(sg.nflav, dtype=np.int64)
    out[prefix + "layout"] = np.array(sg.grid.LAYOUT)
    out[prefix + "payload"] = np.asarray(sg.grid.payload())
    return out


def _subgrid_from_arrays(data: Mapping[str, Any], prefix: str, config: LoadConfig) -> SubGrid:
    axes = {name: np.asarray(data[prefix + name], dtype=float) for name in _AXIS_FIELDS}
    if config.check_axes_sorted:
        for name, values in axes.items():
            _check_sorted(name, values)
    nflav = int(data[prefix + "nflav"])
    layout = str(data[prefix + "layout"].item())
    payload = np.asarray(data[prefix + "payload"], dtype=float)
    if layout == FixedRankGrid.LAYOUT:
        return SubGrid.fixed_rank(
            nucleons=axes["nucleons"],
            alphas=axes["alphas"],
            kts=axes["kts"],
            xs=axes["xs"],
            q2s=axes["q2s"],
            nflav=nflav,
            payload=payload,
        )
    if layout == VariableRankGrid.LAYOUT:
        return SubGrid.variable_rank(**axes, nflav=nflav, payload=payload)
    raise ValueError(f"unknown grid layout '{layout}' in {prefix.rstrip('_')}")


def write_container(
    path: str | Path,
    metadata: MetaData,
    members: Sequence[Sequence[SubGrid]],
    *,
    config: LoadConfig | None = None,
) -> Path:
    """Write ``metadata`` and the subgrids of every member to ``path``."""
    config = config or LoadConfig()
    path = Path(path)
    record = metadata.to_record(with_marker=config.write_version_marker)
    payload: dict[str, np.ndarray] = {
        "format_version": np.array(CONTAINER_FORMAT_VERSION, dtype=np.int64),
        "metadata": np.array(json.dumps(record, sort_keys=True)),
        "num_members": np.array(len(members), dtype=np.int64),
    }
    for m, subgrids in enumerate(members):
        payload[f"member_{m}_num_subgrids"] = np.array(len(subgrids), dtype=np.int64)
        for i, sg in enumerate(subgrids):
            payload.update(_subgrid_arrays(sg, _prefix(m, i)))

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp" + CONTAINER_SUFFIX)
    np.savez(tmp, **payload)
    tmp.replace(path)
    logger.info("wrote %d member(s) of '%s' to %s", len(members), metadata.set_desc, path)
    return path


def _metadata_from(data: Mapping[str, Any], config: LoadConfig) -> MetaData:
    version = int(data["format_version"])
    if version != CONTAINER_FORMAT_VERSION:
        raise ValueError(f"unsupported container format version {version}")
    record = json.loads(str(data["metadata"].item()))
    return MetaData.from_record(record, validate=config.validate_schema, tolerance=config.version_tolerance)


def read_metadata(path: str | Path, *, config: LoadConfig | None = None) -> MetaData:
    config = config or LoadConfig()
    with np.load(Path(path), allow_pickle=False) as data:
        return _metadata_from(data, config)


def read_container(path: str | Path, *, config: LoadConfig | None = None) -> GridContainer:
    """Load a container written by :func:`write_container`."""
    config = config or LoadConfig()
    path = Path(path)
    with np.load(path, allow_pickle=False) as data:
        metadata = _metadata_from(data, config)
        members = []
        for m in range(int(data["num_members"])):
            n = int(data[f"member_{m}_num_subgrids"])
            members.append(tuple(_subgrid_from_arrays(data, _prefix(m, i), config) for i in range(n)))
    logger.info("read %d member(s) of '%s' from %s", len(members), metadata.set_desc, path)
    return GridContainer(metadata=metadata, members=tuple(members))


def load_descriptor(path: str | Path, *, config: LoadConfig | None = None) -> MetaData:
    """Read a JSON descriptor record from ``path``."""
    config = config or LoadConfig()
    record = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(record, dict):
        raise ValueError(f"descriptor {path} must hold a JSON object")
    return MetaData.from_record(record, validate=config.validate_schema, tolerance=config.version_tolerance)


def resolve_set_path(name: str | Path, *, config: LoadConfig | None = None) -> Path:
    """Find a container by file path or by set name in the data directories."""
    direct = Path(name).expanduser()
    if direct.is_file():
        return direct
    config = config or LoadConfig.from_env()
    filename = direct.name if direct.suffix == CONTAINER_SUFFIX else direct.name + CONTAINER_SUFFIX
    searched = []
    for base in config.data_dirs:
        for candidate in (base / filename, base / direct.stem / filename):
            searched.append(candidate)
            if candidate.is_file():
                logger.debug("resolved set '%s' to %s", name, candidate)
                return candidate
    raise FileNotFoundError(f"PDF set '{name}' not found; searched: {', '.join(str(p) for p in searched)}")
