"""Metadata of a PDF set in its two schema versions.

A descriptor record is a mapping from the LHAPDF-style ``.info`` keys
(``SetDesc``, ``XMin``, ...) to values.  Version 2 of the schema adds the
``XiMin``/``XiMax``/``DeltaMin``/``DeltaMax`` bounds and the ``LogFourCubic``
interpolator.  Every record is read with the V2 schema.  Records that carry
``MetaDataVersion`` are classified by it; for older records without the marker
the version is guessed: xi/delta bounds away from zero or ``LogFourCubic``
mean V2, anything else is downgraded to V1.  The neutral bounds written by a
V1 -> V2 upgrade (xi ``[1, 1]``, delta ``[0, 0]``) also read as V1.  A V2 set
whose four bounds are exactly zero is therefore read back as V1 as well.  The
guess is kept as is because legacy files cannot be told apart from such a
set; new files always get the marker.
"""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields
from enum import Enum, IntEnum
import logging
from typing import Any, Mapping

from .constants import (
    NEUTRAL_DELTA_RANGE,
    NEUTRAL_XI_RANGE,
    SUPPORTED_VERSIONS,
    V2_DETECTION_TOLERANCE,
    VERSION_MARKER_KEY,
)

logger = logging.getLogger(__name__)


class MetaDataRecordError(ValueError):
    """Raised for descriptor records that cannot be read."""


class MetaDataVersionError(RuntimeError):
    """Raised when V2 metadata is accessed through the V1 field layout."""


class SetType(Enum):
    SPACELIKE = "spacelike"
    TIMELIKE = "timelike"

    @classmethod
    def parse(cls, value: Any) -> "SetType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise MetaDataRecordError(f"unknown SetType: {value!r}") from None


class InterpolatorType(IntEnum):
    """Interpolation scheme of a set.

    The integer value is what gets stored, so members must never be reordered;
    new schemes are appended at the end.
    """

    BILINEAR = 0
    LOG_BILINEAR = 1
    LOG_BICUBIC = 2
    LOG_TRICUBIC = 3
    INTERP_ND_LINEAR = 4
    LOG_CHEBYSHEV = 5
    LOG_FOUR_CUBIC = 6

    @property
    def label(self) -> str:
        return _INTERPOLATOR_LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> "InterpolatorType":
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise MetaDataRecordError(f"unknown InterpolatorType ordinal: {value}") from None
        text = str(value).strip()
        for member, label in _INTERPOLATOR_LABELS.items():
            if text == label or text == member.name:
                return member
        raise MetaDataRecordError(f"unknown InterpolatorType: {value!r}")


_INTERPOLATOR_LABELS = {
    InterpolatorType.BILINEAR: "Bilinear",
    InterpolatorType.LOG_BILINEAR: "LogBilinear",
    InterpolatorType.LOG_BICUBIC: "LogBicubic",
    InterpolatorType.LOG_TRICUBIC: "LogTricubic",
    InterpolatorType.INTERP_ND_LINEAR: "InterpNDLinear",
    InterpolatorType.LOG_CHEBYSHEV: "LogChebyshev",
    InterpolatorType.LOG_FOUR_CUBIC: "LogFourCubic",
}

V2_ONLY_INTERPOLATORS = frozenset({InterpolatorType.LOG_FOUR_CUBIC})


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"true", "1", "yes"}:
        return True
    if text in {"false", "0", "no", ""}:
        return False
    raise MetaDataRecordError(f"not a boolean: {value!r}")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise MetaDataRecordError(f"not an integer: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise MetaDataRecordError(f"not an integer: {value!r}")
        return int(value)
    return int(value)


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise MetaDataRecordError(f"not a number: {value!r}")
    return float(value)


def _sequence(convert):
    def parse(value: Any) -> tuple:
        if isinstance(value, (str, bytes)):
            raise MetaDataRecordError(f"expected a list, got {value!r}")
        return tuple(convert(v) for v in value)

    return parse


_COERCE = {
    "str": str,
    "int": _to_int,
    "float": _to_float,
    "bool": _to_bool,
    "ints": _sequence(_to_int),
    "floats": _sequence(_to_float),
    "set_type": SetType.parse,
    "interpolator": InterpolatorType.parse,
}

_EXPORT = {
    "ints": list,
    "floats": list,
    "set_type": lambda v: v.value,
    "interpolator": lambda v: v.label,
}


def _key(key: str, kind: str, default: Any = MISSING) -> Any:
    return field(default=default, metadata={"key": key, "kind": kind})


@dataclass(frozen=True)
class _CommonFields:
    set_desc: str = _key("SetDesc", "str")
    set_index: int = _key("SetIndex", "int")
    num_members: int = _key("NumMembers", "int")
    x_min: float = _key("XMin", "float")
    x_max: float = _key("XMax", "float")
    q_min: float = _key("QMin", "float")
    q_max: float = _key("QMax", "float")
    flavors: tuple[int, ...] = _key("Flavors", "ints")
    format: str = _key("Format", "str")
    alphas_q_values: tuple[float, ...] = _key("AlphaS_Qs", "floats", ())
    alphas_vals: tuple[float, ...] = _key("AlphaS_Vals", "floats", ())
    polarised: bool = _key("Polarized", "bool", False)
    set_type: SetType = _key("SetType", "set_type", SetType.SPACELIKE)
    interpolator_type: InterpolatorType = _key("InterpolatorType", "interpolator", InterpolatorType.LOG_BICUBIC)
    error_type: str = _key("ErrorType", "str", "")
    hadron_pid: int = _key("Particle", "int", 0)
    git_version: str = _key("GitVersion", "str", "")
    code_version: str = _key("CodeVersion", "str", "")
    flavor_scheme: str = _key("FlavorScheme", "str", "")
    order_qcd: int = _key("OrderQCD", "int", 0)
    alphas_order_qcd: int = _key("AlphaS_OrderQCD", "int", 0)
    m_w: float = _key("MW", "float", 0.0)
    m_z: float = _key("MZ", "float", 0.0)
    m_up: float = _key("MUp", "float", 0.0)
    m_down: float = _key("MDown", "float", 0.0)
    m_strange: float = _key("MStrange", "float", 0.0)
    m_charm: float = _key("MCharm", "float", 0.0)
    m_bottom: float = _key("MBottom", "float", 0.0)
    m_top: float = _key("MTop", "float", 0.0)
    alphas_type: str = _key("AlphaS_Type", "str", "")
    number_flavors: int = _key("NumFlavors", "int", 0)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]):
        kwargs = {}
        for f in fields(cls):
            key = f.metadata["key"]
            if key not in record:
                if f.default is MISSING:
                    raise MetaDataRecordError(f"descriptor is missing required key '{key}'")
                continue
            try:
                kwargs[f.name] = _COERCE[f.metadata["kind"]](record[key])
            except (TypeError, ValueError) as exc:
                raise MetaDataRecordError(f"invalid value for '{key}': {record[key]!r}") from exc
        return cls(**kwargs)

    def to_record(self) -> dict[str, Any]:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            export = _EXPORT.get(f.metadata["kind"])
            out[f.metadata["key"]] = export(value) if export is not None else value
        return out

    def _common_kwargs(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(_CommonFields)}


@dataclass(frozen=True)
class MetaDataV1(_CommonFields):
    """Set information in the legacy layout (up to 6-axis grids)."""

    version = 1

    def to_v2(self) -> "MetaDataV2":
        """Upgrade with the neutral xi ``[1, 1]`` and delta ``[0, 0]`` ranges."""
        return MetaDataV2(
            **self._common_kwargs(),
            xi_min=NEUTRAL_XI_RANGE[0],
            xi_max=NEUTRAL_XI_RANGE[1],
            delta_min=NEUTRAL_DELTA_RANGE[0],
            delta_max=NEUTRAL_DELTA_RANGE[1],
        )


@dataclass(frozen=True)
class MetaDataV2(_CommonFields):
    """Set information extended with the xi and delta axes."""

    xi_min: float = _key("XiMin", "float", 0.0)
    xi_max: float = _key("XiMax", "float", 0.0)
    delta_min: float = _key("DeltaMin", "float", 0.0)
    delta_max: float = _key("DeltaMax", "float", 0.0)

    version = 2

    def to_v1(self) -> MetaDataV1:
        """Drop xi and delta; lossy unless :attr:`is_neutral`."""
        return MetaDataV1(**self._common_kwargs())

    def has_v2_data(self, tolerance: float = V2_DETECTION_TOLERANCE) -> bool:
        """The load-time heuristic.

        True for a V2-only interpolator, or for xi/delta bounds that are
        neither all zero nor the neutral ``[1, 1]`` / ``[0, 0]`` pair.
        """
        if self.interpolator_type in V2_ONLY_INTERPOLATORS:
            return True
        if self._neutral_bounds(tolerance):
            return False
        bounds = (self.xi_min, self.xi_max, self.delta_min, self.delta_max)
        return any(abs(v) > tolerance for v in bounds)

    def _neutral_bounds(self, tolerance: float) -> bool:
        expected = NEUTRAL_XI_RANGE + NEUTRAL_DELTA_RANGE
        bounds = (self.xi_min, self.xi_max, self.delta_min, self.delta_max)
        return all(abs(v - e) <= tolerance for v, e in zip(bounds, expected))

    @property
    def is_neutral(self) -> bool:
        """Whether a V1 view loses nothing."""
        return self._neutral_bounds(0.0) and self.interpolator_type not in V2_ONLY_INTERPOLATORS


_V1_FIELD_NAMES = frozenset(f.name for f in fields(MetaDataV1))


@dataclass(frozen=True)
class MetaData:
    """Version-aware wrapper around :class:`MetaDataV1` or :class:`MetaDataV2`.

    The properties below read fields present in both versions.  Any other V1
    field can be read directly on the wrapper (``metadata.x_min``); that path
    assumes the V1 layout and raises :class:`MetaDataVersionError` for V2
    metadata with xi/delta data a V1 view cannot represent.
    """

    data: MetaDataV1 | MetaDataV2

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        *,
        validate: bool = False,
        tolerance: float = V2_DETECTION_TOLERANCE,
    ) -> "MetaData":
        if validate:
            from .schema import validate_record

            validate_record(record)

        v2 = MetaDataV2.from_record(record)
        marker = record.get(VERSION_MARKER_KEY)
        if marker is not None:
            return cls._from_marker(v2, marker, tolerance)

        if v2.has_v2_data(tolerance):
            logger.debug("record '%s' classified as V2", v2.set_desc)
            return cls(v2)
        explicit = [k for k in ("XiMin", "XiMax", "DeltaMin", "DeltaMax") if k in record]
        if explicit:
            logger.warning(
                "record '%s' sets %s to zero or neutral values without %s; reading it as V1",
                v2.set_desc,
                ", ".join(explicit),
                VERSION_MARKER_KEY,
            )
        return cls(v2.to_v1())

    @classmethod
    def _from_marker(cls, v2: MetaDataV2, marker: Any, tolerance: float) -> "MetaData":
        try:
            version = int(marker)
        except (TypeError, ValueError):
            raise MetaDataRecordError(f"invalid {VERSION_MARKER_KEY}: {marker!r}") from None
        if version not in SUPPORTED_VERSIONS:
            raise MetaDataRecordError(f"unsupported {VERSION_MARKER_KEY}: {version}")
        if version == 2:
            return cls(v2)
        if v2.has_v2_data(tolerance):
            raise MetaDataRecordError(
                f"record '{v2.set_desc}' is marked as version 1 but carries xi/delta bounds or a V2 interpolator"
            )
        return cls(v2.to_v1())

    def to_record(self, *, with_marker: bool = True) -> dict[str, Any]:
        out = self.data.to_record()
        if with_marker:
            out[VERSION_MARKER_KEY] = self.version
        return out

    @property
    def version(self) -> int:
        return self.data.version

    @property
    def is_v2(self) -> bool:
        return isinstance(self.data, MetaDataV2)

    def as_latest(self) -> MetaDataV1:
        """V1 view; drops xi/delta of V2 metadata."""
        if isinstance(self.data, MetaDataV2):
            return self.data.to_v1()
        return self.data

    def as_latest_v2(self) -> MetaDataV2:
        if isinstance(self.data, MetaDataV1):
            return self.data.to_v2()
        return self.data

    def upgraded(self) -> "MetaData":
        return MetaData(self.as_latest_v2())

    def downgraded(self) -> "MetaData":
        return MetaData(self.as_latest())

    @property
    def legacy(self) -> MetaDataV1:
        """V1 layout of the metadata, refused when it would drop V2 data."""
        if isinstance(self.data, MetaDataV1):
            return self.data
        if not self.data.is_neutral:
            raise MetaDataVersionError(
                "V2 metadata has no V1 layout; use as_latest() or as_latest_v2() instead"
            )
        return self.data.to_v1()

    def __getattr__(self, name: str) -> Any:
        if name in _V1_FIELD_NAMES:
            return getattr(self.legacy, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    # common fields --------------------------------------------------------
    @property
    def set_desc(self) -> str:
        return self.data.set_desc

    @property
    def num_members(self) -> int:
        return self.data.num_members

    @property
    def flavors(self) -> tuple[int, ...]:
        return self.data.flavors

    @property
    def x_range(self) -> tuple[float, float]:
        return (self.data.x_min, self.data.x_max)

    @property
    def q_range(self) -> tuple[float, float]:
        return (self.data.q_min, self.data.q_max)

    @property
    def interpolator_type(self) -> InterpolatorType:
        return self.data.interpolator_type

    @property
    def alphas_q_values(self) -> tuple[float, ...]:
        return self.data.alphas_q_values

    @property
    def alphas_vals(self) -> tuple[float, ...]:
        return self.data.alphas_vals

    @property
    def alphas_order_qcd(self) -> int:
        return self.data.alphas_order_qcd

    @property
    def m_z(self) -> float:
        return self.data.m_z

    @property
    def quark_masses(self) -> tuple[float, float, float, float, float, float]:
        d = self.data
        return (d.m_up, d.m_down, d.m_strange, d.m_charm, d.m_bottom, d.m_top)

    @property
    def alphas_type(self) -> str:
        return self.data.alphas_type

    def __str__(self) -> str:
        d = self.data
        lines = [
            f"Set Description: {d.set_desc}",
            f"Set Index: {d.set_index}",
            f"Number of Members: {d.num_members}",
            f"XMin: {d.x_min}",
            f"XMax: {d.x_max}",
            f"QMin: {d.q_min}",
            f"QMax: {d.q_max}",
        ]
        if isinstance(d, MetaDataV2):
            lines += [
                f"XiMin: {d.xi_min}",
                f"XiMax: {d.xi_max}",
                f"DeltaMin: {d.delta_min}",
                f"DeltaMax: {d.delta_max}",
            ]
        lines += [
            f"Flavors: {list(d.flavors)}",
            f"Format: {d.format}",
            f"AlphaS Q Values: {list(d.alphas_q_values)}",
            f"AlphaS Values: {list(d.alphas_vals)}",
            f"Polarized: {d.polarised}",
            f"Set Type: {d.set_type.value}",
            f"Interpolator Type: {d.interpolator_type.label}",
            f"Error Type: {d.error_type}",
            f"Particle: {d.hadron_pid}",
            f"Flavor Scheme: {d.flavor_scheme}",
            f"Order QCD: {d.order_qcd}",
            f"AlphaS Order QCD: {d.alphas_order_qcd}",
            f"MW: {d.m_w}",
            f"MZ: {d.m_z}",
            f"MUp: {d.m_up}",
            f"MDown: {d.m_down}",
            f"MStrange: {d.m_strange}",
            f"MCharm: {d.m_charm}",
            f"MBottom: {d.m_bottom}",
            f"MTop: {d.m_top}",
            f"AlphaS Type: {d.alphas_type}",
            f"Number of PDF flavors: {d.number_flavors}",
        ]
        return "\n".join(lines)
