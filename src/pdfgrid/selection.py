"""Selection of the subgrid responsible for a query point."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from .subgrid import SubGrid

logger = logging.getLogger(__name__)


def find_subgrid(subgrids: Sequence[SubGrid], point: Sequence[float]) -> int | None:
    """Index of the first subgrid containing ``point``, or ``None``."""
    for i, sg in enumerate(subgrids):
        if sg.contains_point(point):
            return i
    return None


def select_subgrid(subgrids: Sequence[SubGrid], point: Sequence[float]) -> int:
    """Index of the subgrid to interpolate ``point`` in.

    The first subgrid containing the point wins.  Otherwise the nearest subgrid
    by :meth:`SubGrid.distance_to_point` is returned (first one on ties), so
    callers can extrapolate from the closest region.  Subgrids expecting a
    different number of coordinates are never selected.  Points far enough
    away for every squared distance to overflow go to the first candidate.
    """
    if not subgrids:
        raise ValueError("no subgrids to select from")
    if not all(math.isfinite(float(v)) for v in point):
        raise ValueError(f"point {tuple(point)} has non-finite coordinates")
    inside = find_subgrid(subgrids, point)
    if inside is not None:
        return inside

    best, best_dist = -1, math.inf
    for i, sg in enumerate(subgrids):
        if sg.config.point_length != len(point):
            continue
        dist = sg.distance_to_point(point)
        if best < 0 or dist < best_dist:
            best, best_dist = i, dist
    if best < 0:
        raise ValueError(f"no subgrid accepts a point with {len(point)} coordinates")
    logger.debug("point %s outside all subgrids, nearest is %d (distance^2 %.6g)", tuple(point), best, best_dist)
    return best
