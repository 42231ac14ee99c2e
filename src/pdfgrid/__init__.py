"""Grid and metadata model for multi-dimensional PDF sets."""

from . import constants
from .config import LoadConfig
from .grid_data import FixedRankGrid, GridData, GridRankError, GridShapeError, VariableRankGrid
from .grid_io import GridContainer, load_descriptor, read_container, read_metadata, resolve_set_path, write_container
from .interpolation_config import InterpolationConfig, UnsupportedConfigurationError
from .metadata import (
    InterpolatorType,
    MetaData,
    MetaDataRecordError,
    MetaDataV1,
    MetaDataV2,
    MetaDataVersionError,
    SetType,
)
from .param_range import ParamRange, RangeParameters
from .selection import find_subgrid, select_subgrid
from .subgrid import SubGrid

__all__ = [
    "constants",
    "LoadConfig",
    "GridData",
    "FixedRankGrid",
    "VariableRankGrid",
    "GridRankError",
    "GridShapeError",
    "GridContainer",
    "load_descriptor",
    "read_container",
    "read_metadata",
    "resolve_set_path",
    "write_container",
    "InterpolationConfig",
    "UnsupportedConfigurationError",
    "InterpolatorType",
    "MetaData",
    "MetaDataRecordError",
    "MetaDataV1",
    "MetaDataV2",
    "MetaDataVersionError",
    "SetType",
    "ParamRange",
    "RangeParameters",
    "find_subgrid",
    "select_subgrid",
    "SubGrid",
]
