"""Inclusive parameter ranges for the axes of a subgrid."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class ParamRange:
    """Closed interval ``[min, max]`` of one grid axis."""

    min: float
    max: float

    @classmethod
    def from_axis(cls, values: Sequence[float] | np.ndarray) -> "ParamRange":
        # Axes are sorted ascending by the caller; first/last are the bounds.
        return cls(float(values[0]), float(values[-1]))

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def distance2(self, value: float) -> float:
        """Squared gap between ``value`` and the nearest bound, 0 inside."""
        if math.isnan(value):
            return math.inf
        if value < self.min:
            return (self.min - value) * (self.min - value)
        if value > self.max:
            return (value - self.max) * (value - self.max)
        return 0.0

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)


@dataclass(frozen=True)
class RangeParameters:
    """Ranges of all seven axes of one subgrid."""

    nucleons: ParamRange
    alphas: ParamRange
    xi: ParamRange
    delta: ParamRange
    kt: ParamRange
    x: ParamRange
    q2: ParamRange

    @classmethod
    def from_axes(
        cls,
        *,
        nucleons: np.ndarray,
        alphas: np.ndarray,
        xi: np.ndarray,
        delta: np.ndarray,
        kt: np.ndarray,
        x: np.ndarray,
        q2: np.ndarray,
    ) -> "RangeParameters":
        return cls(
            nucleons=ParamRange.from_axis(nucleons),
            alphas=ParamRange.from_axis(alphas),
            xi=ParamRange.from_axis(xi),
            delta=ParamRange.from_axis(delta),
            kt=ParamRange.from_axis(kt),
            x=ParamRange.from_axis(x),
            q2=ParamRange.from_axis(q2),
        )

    def get(self, axis: str) -> ParamRange:
        return getattr(self, axis)
