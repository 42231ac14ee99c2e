"""Subgrids: regions of phase space sharing one coordinate grid.

A PDF member is stored as an ordered list of subgrids.  Each subgrid owns its
coordinate axes, the grid tensor and the ranges derived from the axes.  The
selection layer asks every subgrid whether it contains a query point and, when
none does, ranks them by :meth:`SubGrid.distance_to_point`.

Query points list the coordinates of the active optional axes in canonical
order ``(A, alpha_s, xi, delta, kT)`` followed by ``x`` and ``Q2``; pinned
axes are left out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Sequence

import numpy as np

from .constants import ALPHAS, DELTA, KT, NUCLEONS, PINNED_LEGACY_VALUE, Q2, X, XI
from .grid_data import FixedRankGrid, GridData, GridShapeError, VariableRankGrid
from .interpolation_config import InterpolationConfig
from .param_range import ParamRange, RangeParameters

logger = logging.getLogger(__name__)

ArrayLike = Sequence[float] | np.ndarray


def _axis(name: str, values: ArrayLike) -> np.ndarray:
    arr = np.array(values, dtype=np.float64, copy=True).ravel()
    if arr.size < 1:
        raise ValueError(f"axis '{name}' must hold at least one coordinate")
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class SubGrid:
    """Coordinate axes, grid tensor and ranges of one subgrid.

    Prefer the :meth:`fixed_rank` and :meth:`variable_rank` constructors, which
    reshape a flat payload.  Construction fails for grids whose active axes
    have no :class:`InterpolationConfig`.
    """

    xs: np.ndarray
    q2s: np.ndarray
    kts: np.ndarray
    xis: np.ndarray
    deltas: np.ndarray
    nucleons: np.ndarray
    alphas: np.ndarray
    grid: GridData
    range_parameters: RangeParameters = field(init=False)
    config: InterpolationConfig = field(init=False)
    _query_ranges: tuple[ParamRange, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        for name in ("xs", "q2s", "kts", "xis", "deltas", "nucleons", "alphas"):
            object.__setattr__(self, name, _axis(name, getattr(self, name)))
        self._check_grid_shape()

        config = self.grid.interpolation_config()
        ranges = RangeParameters.from_axes(
            nucleons=self.nucleons,
            alphas=self.alphas,
            xi=self.xis,
            delta=self.deltas,
            kt=self.kts,
            x=self.xs,
            q2=self.q2s,
        )
        query = tuple(ranges.get(name) for name in config.active_axes) + (ranges.x, ranges.q2)
        object.__setattr__(self, "config", config)
        object.__setattr__(self, "range_parameters", ranges)
        object.__setattr__(self, "_query_ranges", query)
        logger.debug("subgrid %s with %d x and %d Q2 nodes", config.name, self.xs.size, self.q2s.size)

    def _check_grid_shape(self) -> None:
        lengths = {
            NUCLEONS: self.nucleons.size,
            ALPHAS: self.alphas.size,
            XI: self.xis.size,
            DELTA: self.deltas.size,
            KT: self.kts.size,
            X: self.xs.size,
            Q2: self.q2s.size,
        }
        for name, n in lengths.items():
            if name in self.grid.AXES:
                stored = self.grid.axis_length(name)
            else:
                stored = 1
            if stored != n:
                raise GridShapeError(f"axis '{name}' has {n} coordinates but the grid stores {stored}")

    @classmethod
    def fixed_rank(
        cls,
        *,
        nucleons: ArrayLike,
        alphas: ArrayLike,
        kts: ArrayLike,
        xs: ArrayLike,
        q2s: ArrayLike,
        nflav: int,
        payload: ArrayLike,
    ) -> "SubGrid":
        """Build a legacy subgrid from a flat ``[A, alphas, kT, x, Q2, flavor]`` payload.

        xi and delta are pinned to a single zero coordinate.
        """
        nucleons, alphas, kts, xs, q2s = (np.asarray(v, dtype=np.float64).ravel() for v in (nucleons, alphas, kts, xs, q2s))
        grid = FixedRankGrid.build(
            n_nucleons=nucleons.size,
            n_alphas=alphas.size,
            n_kt=kts.size,
            n_x=xs.size,
            n_q2=q2s.size,
            nflav=nflav,
            payload=payload,
        )
        return cls(
            xs=xs,
            q2s=q2s,
            kts=kts,
            xis=[PINNED_LEGACY_VALUE],
            deltas=[PINNED_LEGACY_VALUE],
            nucleons=nucleons,
            alphas=alphas,
            grid=grid,
        )

    @classmethod
    def variable_rank(
        cls,
        *,
        nucleons: ArrayLike,
        alphas: ArrayLike,
        xis: ArrayLike,
        deltas: ArrayLike,
        kts: ArrayLike,
        xs: ArrayLike,
        q2s: ArrayLike,
        nflav: int,
        payload: ArrayLike,
    ) -> "SubGrid":
        """Build a full subgrid from a flat payload in stored axis order."""
        nucleons, alphas, xis, deltas, kts, xs, q2s = (
            np.asarray(v, dtype=np.float64).ravel() for v in (nucleons, alphas, xis, deltas, kts, xs, q2s)
        )
        grid = VariableRankGrid.build(
            n_nucleons=nucleons.size,
            n_alphas=alphas.size,
            n_xi=xis.size,
            n_delta=deltas.size,
            n_kt=kts.size,
            nflav=nflav,
            n_x=xs.size,
            n_q2=q2s.size,
            payload=payload,
        )
        return cls(
            xs=xs,
            q2s=q2s,
            kts=kts,
            xis=xis,
            deltas=deltas,
            nucleons=nucleons,
            alphas=alphas,
            grid=grid,
        )

    # ------------------------------------------------------------------
    # Ranges
    # ------------------------------------------------------------------
    @property
    def nucleons_range(self) -> ParamRange:
        return self.range_parameters.nucleons

    @property
    def alphas_range(self) -> ParamRange:
        return self.range_parameters.alphas

    @property
    def xi_range(self) -> ParamRange:
        return self.range_parameters.xi

    @property
    def delta_range(self) -> ParamRange:
        return self.range_parameters.delta

    @property
    def kt_range(self) -> ParamRange:
        return self.range_parameters.kt

    @property
    def x_range(self) -> ParamRange:
        return self.range_parameters.x

    @property
    def q2_range(self) -> ParamRange:
        return self.range_parameters.q2

    def ranges(self) -> RangeParameters:
        return self.range_parameters

    def parameter_ranges(self) -> tuple[ParamRange, ...]:
        """Ranges checked for a query point, in point order."""
        return self._query_ranges

    def interpolation_config(self) -> InterpolationConfig:
        return self.config

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def contains_point(self, point: Sequence[float]) -> bool:
        """Whether ``point`` lies inside this subgrid, bounds included.

        A point with the wrong number of coordinates is not contained.
        """
        if len(point) != len(self._query_ranges):
            return False
        return all(r.contains(float(v)) for r, v in zip(self._query_ranges, point))

    def distance_to_point(self, point: Sequence[float]) -> float:
        """Squared euclidean distance from ``point`` to the subgrid box."""
        if len(point) != len(self._query_ranges):
            raise ValueError(
                f"point has {len(point)} coordinates, {self.config.name} subgrid expects {len(self._query_ranges)}"
            )
        return float(sum(r.distance2(float(v)) for r, v in zip(self._query_ranges, point)))

    def grid_slice(self, pid_index: int) -> np.ndarray:
        """``(x, Q2)`` plane of one flavor; only valid for 2D subgrids."""
        return self.grid.grid_slice(pid_index)

    # ------------------------------------------------------------------
    # Grid access
    # ------------------------------------------------------------------
    def grid_fixed(self) -> np.ndarray:
        return self.grid.as_fixed()

    def grid_variable(self) -> np.ndarray:
        return self.grid.as_variable()

    @property
    def is_variable_rank(self) -> bool:
        return isinstance(self.grid, VariableRankGrid)

    @property
    def nflav(self) -> int:
        return self.grid.nflav

    def axis(self, name: str) -> np.ndarray:
        return {
            NUCLEONS: self.nucleons,
            ALPHAS: self.alphas,
            XI: self.xis,
            DELTA: self.deltas,
            KT: self.kts,
            X: self.xs,
            Q2: self.q2s,
        }[name]

    def describe(self) -> dict[str, Any]:
        """Summary of the subgrid for listings."""
        r = self.range_parameters
        return {
            "config": self.config.name,
            "layout": self.grid.LAYOUT,
            "shape": list(self.grid.shape),
            "nflav": self.nflav,
            "ranges": {
                NUCLEONS: list(r.nucleons.as_tuple()),
                ALPHAS: list(r.alphas.as_tuple()),
                XI: list(r.xi.as_tuple()),
                DELTA: list(r.delta.as_tuple()),
                KT: list(r.kt.as_tuple()),
                X: list(r.x.as_tuple()),
                Q2: list(r.q2.as_tuple()),
            },
            "nodes": {
                NUCLEONS: int(self.nucleons.size),
                ALPHAS: int(self.alphas.size),
                XI: int(self.xis.size),
                DELTA: int(self.deltas.size),
                KT: int(self.kts.size),
                X: int(self.xs.size),
                Q2: int(self.q2s.size),
            },
        }
