"""Sample grids and BRDF representations."""

from .sample_set import SampleSet
from .brdf import (
    Brdf,
    DataType,
    Representation,
    SpecularCoordinatesBrdf,
    SphericalCoordinatesBrdf,
    HalfDifferenceCoordinatesBrdf,
)
from .btdf import Btdf
from .interpolator import interpolate
from .processor import fill_back_side, downward_mask

__all__ = [
    "SampleSet",
    "Brdf",
    "DataType",
    "Representation",
    "SpecularCoordinatesBrdf",
    "SphericalCoordinatesBrdf",
    "HalfDifferenceCoordinatesBrdf",
    "Btdf",
    "interpolate",
    "fill_back_side",
    "downward_mask",
]
