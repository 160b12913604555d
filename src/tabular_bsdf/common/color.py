"""Color models and color space conversions for spectral samples."""

from enum import Enum

import numpy as np


class ColorModel(Enum):
    """Interpretation of the channel values stored in a sample grid."""
    RGB = "rgb"
    XYZ = "xyz"
    MONOCHROMATIC = "monochromatic"
    SPECTRAL = "spectral"


# IEC 61966-2-1:1999, D65 white point (linear, no gamma)
M_XYZ_TO_SRGB = np.array([
    [3.2404542, -1.5371385, -0.4985314],
    [-0.9692660, 1.8760108, 0.0415560],
    [0.0556434, -0.2040259, 1.0572252],
], dtype=np.float64)


def channel_count(color_model: ColorModel, num_wavelengths: int = 3) -> int:
    """Number of channels stored per sample for a color model.

    Args:
        color_model: Color model of the grid
        num_wavelengths: Channel count, only used by SPECTRAL

    Returns:
        1 for MONOCHROMATIC, 3 for RGB/XYZ, ``num_wavelengths`` for SPECTRAL
    """
    if color_model == ColorModel.MONOCHROMATIC:
        return 1
    if color_model in (ColorModel.RGB, ColorModel.XYZ):
        return 3
    if color_model == ColorModel.SPECTRAL:
        return num_wavelengths
    raise ValueError(f"Unknown color model: {color_model}")


def xyz_to_srgb(xyz: np.ndarray) -> np.ndarray:
    """Convert CIE XYZ values to linear sRGB.

    Args:
        xyz: Array with last dimension 3

    Returns:
        Linear sRGB values, same shape as ``xyz``
    """
    xyz = np.asarray(xyz, dtype=np.float64)
    if xyz.shape[-1] != 3:
        raise ValueError(f"Last dimension must be 3, got {xyz.shape[-1]}")
    return xyz @ M_XYZ_TO_SRGB.T
