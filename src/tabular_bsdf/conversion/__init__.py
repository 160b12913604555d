"""Conversion to the canonical specular-offset grid."""

from .converter import CoordinateConverter, to_canonical

__all__ = ["CoordinateConverter", "to_canonical"]
