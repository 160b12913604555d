"""Array, color and coordinate helpers shared by all modules."""

from .array_util import is_equal_interval, create_exponential, find_bounds
from .color import ColorModel, channel_count, xyz_to_srgb
from . import coordinates

__all__ = [
    "is_equal_interval",
    "create_exponential",
    "find_bounds",
    "ColorModel",
    "channel_count",
    "xyz_to_srgb",
    "coordinates",
]
