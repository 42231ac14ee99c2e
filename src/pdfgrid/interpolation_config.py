"""Dimensionality classes of a subgrid.

A subgrid always interpolates in ``x`` and ``Q2``.  Each of the optional axes
(nucleons, alphas, xi, delta, kT) is *active* when it holds more than one
coordinate.  The set of active axes selects one :class:`InterpolationConfig`,
which in turn decides which ranges take part in membership tests and which
kernel the interpolation layer has to use.  Only the combinations listed in
``_MASK_TABLE`` are supported; every other mask is rejected.
"""

from __future__ import annotations

from enum import Enum
import logging

from .constants import ALPHAS, DELTA, KT, NUCLEONS, OPTIONAL_AXES, XI

logger = logging.getLogger(__name__)


class UnsupportedConfigurationError(ValueError):
    """Raised for an active-axis combination without a dimensionality class."""


class InterpolationConfig(Enum):
    TWO_D = "2d"
    THREE_D_NUCLEONS = "3d_nucleons"
    THREE_D_ALPHAS = "3d_alphas"
    THREE_D_XI = "3d_xi"
    THREE_D_DELTA = "3d_delta"
    THREE_D_KT = "3d_kt"
    FOUR_D_NUCLEONS_ALPHAS = "4d_nucleons_alphas"
    FOUR_D_NUCLEONS_KT = "4d_nucleons_kt"
    FOUR_D_ALPHAS_KT = "4d_alphas_kt"
    FOUR_D_XI_DELTA = "4d_xi_delta"
    FIVE_D = "5d"
    SIX_D = "6d"
    SEVEN_D = "7d"

    @classmethod
    def from_dimensions(
        cls,
        n_nucleons: int,
        n_alphas: int,
        n_xi: int,
        n_delta: int,
        n_kt: int,
    ) -> "InterpolationConfig":
        """Classify a subgrid from the lengths of its optional axes."""
        lengths = (n_nucleons, n_alphas, n_xi, n_delta, n_kt)
        for name, n in zip(OPTIONAL_AXES, lengths):
            if n < 1:
                raise ValueError(f"axis '{name}' must hold at least one coordinate, got {n}")
        return cls.from_mask(active_mask(*lengths))

    @classmethod
    def from_mask(cls, mask: int) -> "InterpolationConfig":
        if not 0 <= mask < (1 << len(OPTIONAL_AXES)):
            raise ValueError(f"active mask out of range: {mask}")
        try:
            config = _MASK_TABLE[mask]
        except KeyError:
            active = ", ".join(axes_from_mask(mask))
            raise UnsupportedConfigurationError(
                f"no interpolation configuration for active axes {{{active}}}"
            ) from None
        logger.debug("active mask %05b classified as %s", mask, config.name)
        return config

    @property
    def active_axes(self) -> tuple[str, ...]:
        """Active optional axes in canonical order (x and Q2 excluded)."""
        return _ACTIVE_AXES[self]

    @property
    def mask(self) -> int:
        return _mask_of(self.active_axes)

    @property
    def ndim(self) -> int:
        """Number of interpolation dimensions, x and Q2 included."""
        return len(self.active_axes) + 2

    @property
    def point_length(self) -> int:
        return self.ndim


def active_mask(n_nucleons: int, n_alphas: int, n_xi: int, n_delta: int, n_kt: int) -> int:
    """Bit mask of active axes; bit ``i`` follows ``OPTIONAL_AXES[i]``."""
    mask = 0
    for bit, n in enumerate((n_nucleons, n_alphas, n_xi, n_delta, n_kt)):
        if n > 1:
            mask |= 1 << bit
    return mask


def axes_from_mask(mask: int) -> tuple[str, ...]:
    return tuple(name for bit, name in enumerate(OPTIONAL_AXES) if mask & (1 << bit))


def _mask_of(axes: tuple[str, ...]) -> int:
    mask = 0
    for name in axes:
        mask |= 1 << OPTIONAL_AXES.index(name)
    return mask


_ACTIVE_AXES: dict[InterpolationConfig, tuple[str, ...]] = {
    InterpolationConfig.TWO_D: (),
    InterpolationConfig.THREE_D_NUCLEONS: (NUCLEONS,),
    InterpolationConfig.THREE_D_ALPHAS: (ALPHAS,),
    InterpolationConfig.THREE_D_XI: (XI,),
    InterpolationConfig.THREE_D_DELTA: (DELTA,),
    InterpolationConfig.THREE_D_KT: (KT,),
    InterpolationConfig.FOUR_D_NUCLEONS_ALPHAS: (NUCLEONS, ALPHAS),
    InterpolationConfig.FOUR_D_NUCLEONS_KT: (NUCLEONS, KT),
    InterpolationConfig.FOUR_D_ALPHAS_KT: (ALPHAS, KT),
    InterpolationConfig.FOUR_D_XI_DELTA: (XI, DELTA),
    InterpolationConfig.FIVE_D: (XI, DELTA, KT),
    InterpolationConfig.SIX_D: (NUCLEONS, XI, DELTA, KT),
    InterpolationConfig.SEVEN_D: (NUCLEONS, ALPHAS, XI, DELTA, KT),
}

_MASK_TABLE: dict[int, InterpolationConfig] = {_mask_of(axes): cfg for cfg, axes in _ACTIVE_AXES.items()}

SUPPORTED_MASKS = frozenset(_MASK_TABLE)
