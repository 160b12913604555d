"""Tabulated BRDF/BTDF sample grids and their export to DDR files."""

__version__ = "0.1.0"

from .common.color import ColorModel
from .brdf import (
    SampleSet,
    Brdf,
    Btdf,
    DataType,
    Representation,
    SpecularCoordinatesBrdf,
    SphericalCoordinatesBrdf,
    HalfDifferenceCoordinatesBrdf,
)
from .conversion import CoordinateConverter
from .arrangement import ArrangementPipeline
from .models import ReflectanceModel, setup_tabular_brdf
from .io import DdrWriter, write_ddr
from .utils.config import ExportConfig, SourceType

__all__ = [
    "ColorModel",
    "SampleSet",
    "Brdf",
    "Btdf",
    "DataType",
    "Representation",
    "SpecularCoordinatesBrdf",
    "SphericalCoordinatesBrdf",
    "HalfDifferenceCoordinatesBrdf",
    "CoordinateConverter",
    "ArrangementPipeline",
    "ReflectanceModel",
    "setup_tabular_brdf",
    "DdrWriter",
    "write_ddr",
    "ExportConfig",
    "SourceType",
]
