"""Immutable grid tensors in the legacy (6 axes) and full (8 axes) layouts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
import math
from typing import ClassVar, Sequence

import numpy as np

from .constants import FIXED_RANK_ORDER, FLAVOR, VARIABLE_RANK_ORDER
from .interpolation_config import InterpolationConfig

logger = logging.getLogger(__name__)

# payload [A, as, kT, x, Q2, flavor] -> stored [A, as, flavor, kT, x, Q2]
_FIXED_FROM_PAYLOAD = (0, 1, 5, 2, 3, 4)
_FIXED_TO_PAYLOAD = (0, 1, 3, 4, 5, 2)


class GridShapeError(ValueError):
    """Raised when a flat payload does not match the requested grid shape."""


class GridRankError(RuntimeError):
    """Raised when a grid is accessed through a view it does not support."""


def _shaped_values(payload: Sequence[float] | np.ndarray, shape: tuple[int, ...]) -> np.ndarray:
    values = np.asarray(payload, dtype=np.float64).ravel()
    expected = math.prod(shape)
    if values.size != expected:
        raise GridShapeError(
            f"payload holds {values.size} values but shape {shape} needs {expected}"
        )
    return values.reshape(shape)


@dataclass(frozen=True, eq=False)
class GridData(ABC):
    """Grid tensor of one subgrid.

    Concrete grids are either :class:`FixedRankGrid` or :class:`VariableRankGrid`.
    Callers that know which layout they hold use :meth:`as_fixed` or
    :meth:`as_variable`; asking for the other one is a programming error and
    raises :class:`GridRankError`.  :meth:`try_fixed` and :meth:`try_variable`
    return ``None`` instead, for code that inspects an unknown grid.
    """

    array: np.ndarray

    LAYOUT: ClassVar[str] = ""
    AXES: ClassVar[tuple[str, ...]] = ()

    def __post_init__(self) -> None:
        # private copy; the caller's array stays writeable
        array = np.array(self.array, dtype=np.float64, order="C", copy=True)
        if array.ndim != len(self.AXES):
            raise GridShapeError(f"{self.LAYOUT} grid needs {len(self.AXES)} axes, got {array.ndim}")
        array.flags.writeable = False
        object.__setattr__(self, "array", array)

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self.array.shape)

    @property
    def rank(self) -> int:
        return self.array.ndim

    @property
    def nflav(self) -> int:
        return self.axis_length(FLAVOR)

    def axis_length(self, name: str) -> int:
        return int(self.array.shape[self.AXES.index(name)])

    def view(self) -> np.ndarray:
        return self.array

    def as_fixed(self) -> np.ndarray:
        raise GridRankError(f"cannot access a {self.LAYOUT} grid as fixed-rank")

    def as_variable(self) -> np.ndarray:
        raise GridRankError(f"cannot access a {self.LAYOUT} grid as variable-rank")

    def try_fixed(self) -> np.ndarray | None:
        return None

    def try_variable(self) -> np.ndarray | None:
        return None

    @abstractmethod
    def interpolation_config(self) -> InterpolationConfig:
        ...

    @abstractmethod
    def payload(self) -> np.ndarray:
        """Flat values in the layout accepted by ``build``."""

    @abstractmethod
    def _plane(self, pid_index: int) -> np.ndarray:
        ...

    def grid_slice(self, pid_index: int) -> np.ndarray:
        """Read-only ``(x, Q2)`` plane of one flavor of a two-D grid."""
        config = self.interpolation_config()
        if config is not InterpolationConfig.TWO_D:
            raise GridRankError(f"grid_slice is only defined for 2D grids, this grid is {config.name}")
        if not 0 <= pid_index < self.nflav:
            raise IndexError(f"flavor index {pid_index} out of range for {self.nflav} flavors")
        return self._plane(pid_index)


@dataclass(frozen=True, eq=False)
class FixedRankGrid(GridData):
    """Legacy grid with axes ``[nucleons, alphas, flavor, kT, x, Q2]``."""

    LAYOUT: ClassVar[str] = "fixed"
    AXES: ClassVar[tuple[str, ...]] = FIXED_RANK_ORDER

    @classmethod
    def build(
        cls,
        *,
        n_nucleons: int,
        n_alphas: int,
        n_kt: int,
        n_x: int,
        n_q2: int,
        nflav: int,
        payload: Sequence[float] | np.ndarray,
    ) -> "FixedRankGrid":
        """Reshape a flat ``[A, alphas, kT, x, Q2, flavor]`` payload."""
        values = _shaped_values(payload, (n_nucleons, n_alphas, n_kt, n_x, n_q2, nflav))
        array = values.transpose(_FIXED_FROM_PAYLOAD)
        logger.debug("built fixed-rank grid with shape %s", array.shape)
        return cls(array)

    def as_fixed(self) -> np.ndarray:
        return self.array

    def try_fixed(self) -> np.ndarray | None:
        return self.array

    def interpolation_config(self) -> InterpolationConfig:
        n_a, n_as, _, n_kt, _, _ = self.array.shape
        return InterpolationConfig.from_dimensions(n_a, n_as, 1, 1, n_kt)

    def payload(self) -> np.ndarray:
        return self.array.transpose(_FIXED_TO_PAYLOAD).ravel()

    def _plane(self, pid_index: int) -> np.ndarray:
        return self.array[0, 0, pid_index, 0, :, :]


@dataclass(frozen=True, eq=False)
class VariableRankGrid(GridData):
    """Full grid with axes ``[nucleons, alphas, xi, delta, kT, flavor, x, Q2]``."""

    LAYOUT: ClassVar[str] = "variable"
    AXES: ClassVar[tuple[str, ...]] = VARIABLE_RANK_ORDER

    @classmethod
    def build(
        cls,
        *,
        n_nucleons: int,
        n_alphas: int,
        n_xi: int,
        n_delta: int,
        n_kt: int,
        nflav: int,
        n_x: int,
        n_q2: int,
        payload: Sequence[float] | np.ndarray,
    ) -> "VariableRankGrid":
        """Reshape a flat payload already in the stored axis order."""
        array = _shaped_values(payload, (n_nucleons, n_alphas, n_xi, n_delta, n_kt, nflav, n_x, n_q2))
        logger.debug("built variable-rank grid with shape %s", array.shape)
        return cls(array)

    def as_variable(self) -> np.ndarray:
        return self.array

    def try_variable(self) -> np.ndarray | None:
        return self.array

    def interpolation_config(self) -> InterpolationConfig:
        n_a, n_as, n_xi, n_delta, n_kt = self.array.shape[:5]
        return InterpolationConfig.from_dimensions(n_a, n_as, n_xi, n_delta, n_kt)

    def payload(self) -> np.ndarray:
        return self.array.ravel()

    def _plane(self, pid_index: int) -> np.ndarray:
        return self.array[0, 0, 0, 0, 0, pid_index, :, :]
