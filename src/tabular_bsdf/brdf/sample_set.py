"""Four-dimensional angular sample grid with spectral samples."""

import copy
import logging
from typing import Sequence, Tuple

import numpy as np

from ..common.array_util import is_equal_interval
from ..common.color import ColorModel, channel_count

logger = logging.getLogger(__name__)

# Margin used to decide which azimuthal half a sample belongs to
_ONE_SIDE_OFFSET = float(np.finfo(np.float32).eps) * 2.0


class SampleSet:
    """Sample points of a BRDF on a grid of four angle axes.

    Spectra are stored densely in an array of shape
    ``(n0, n1, n2, n3, num_wavelengths)``. The meaning of the four axes is
    defined by the owning BRDF representation. Derived attributes
    (equal-interval axes, one-sidedness) are only refreshed by
    :meth:`update_angle_attributes`, which must be called after the axes
    have been filled.

    Example:
        >>> ss = SampleSet(2, 1, 3, 4, ColorModel.RGB)
        >>> ss.spectra.shape
        (2, 1, 3, 4, 3)
    """

    def __init__(
        self,
        num_angles0: int,
        num_angles1: int,
        num_angles2: int,
        num_angles3: int,
        color_model: ColorModel = ColorModel.RGB,
        num_wavelengths: int = 3
    ):
        """Initialize a zero-filled sample set.

        Args:
            num_angles0: Number of samples on axis 0 (> 0)
            num_angles1: Number of samples on axis 1 (> 0)
            num_angles2: Number of samples on axis 2 (> 0)
            num_angles3: Number of samples on axis 3 (> 0)
            color_model: Color model of the stored spectra
            num_wavelengths: Number of channels, only used by SPECTRAL
        """
        if not isinstance(color_model, ColorModel):
            raise ValueError(f"color_model must be a ColorModel, got {color_model!r}")

        self._equal_interval = [False, False, False, False]
        self._one_side = False
        self._color_model = color_model

        self.resize_angles(num_angles0, num_angles1, num_angles2, num_angles3)
        self.resize_wavelengths(channel_count(color_model, num_wavelengths))

    @property
    def color_model(self) -> ColorModel:
        return self._color_model

    @property
    def spectra(self) -> np.ndarray:
        """Dense spectra array, shape (n0, n1, n2, n3, num_wavelengths)."""
        return self._spectra

    @property
    def wavelengths(self) -> np.ndarray:
        return self._wavelengths

    @property
    def angles0(self) -> np.ndarray:
        return self._angles[0]

    @property
    def angles1(self) -> np.ndarray:
        return self._angles[1]

    @property
    def angles2(self) -> np.ndarray:
        return self._angles[2]

    @property
    def angles3(self) -> np.ndarray:
        return self._angles[3]

    @property
    def angles(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        return tuple(self._angles)

    @property
    def shape(self) -> Tuple[int, int, int, int]:
        """Number of samples on each angle axis."""
        return tuple(a.shape[0] for a in self._angles)

    @property
    def num_angles0(self) -> int:
        return self._angles[0].shape[0]

    @property
    def num_angles1(self) -> int:
        return self._angles[1].shape[0]

    @property
    def num_angles2(self) -> int:
        return self._angles[2].shape[0]

    @property
    def num_angles3(self) -> int:
        return self._angles[3].shape[0]

    @property
    def num_wavelengths(self) -> int:
        return self._wavelengths.shape[0]

    @property
    def is_isotropic(self) -> bool:
        """True if axis 1 (incoming azimuth) has a single sample."""
        return self.num_angles1 == 1

    @property
    def is_one_side(self) -> bool:
        """True if axis 3 covers at most one azimuthal half."""
        return self._one_side

    @property
    def equal_interval_angles(self) -> Tuple[bool, bool, bool, bool]:
        return tuple(self._equal_interval)

    def is_equal_interval_angles(self, axis: int) -> bool:
        """Cached equal-interval flag of one axis."""
        return self._equal_interval[axis]

    def set_angles(self, axis: int, values: Sequence[float]) -> None:
        """Overwrite the contents of an angle axis.

        The number of samples cannot change here; use :meth:`resize_angles`.
        """
        values = np.asarray(values, dtype=np.float64)
        if values.shape != self._angles[axis].shape:
            raise ValueError(
                f"Axis {axis} has {self._angles[axis].shape[0]} samples, "
                f"got {values.shape[0]} values"
            )
        self._angles[axis][:] = values

    def set_wavelengths(self, values: Sequence[float]) -> None:
        """Overwrite the wavelength markers."""
        values = np.asarray(values, dtype=np.float64)
        if values.shape != self._wavelengths.shape:
            raise ValueError(
                f"Expected {self.num_wavelengths} wavelengths, got {values.shape[0]}"
            )
        self._wavelengths[:] = values

    def get_spectrum(self, i0: int, i1: int, i2: int, i3: int) -> np.ndarray:
        """Spectrum at a grid index (a view into :attr:`spectra`)."""
        return self._spectra[i0, i1, i2, i3]

    def set_spectrum(self, i0: int, i1: int, i2: int, i3: int, spectrum) -> None:
        """Store a spectrum at a grid index.

        Raises:
            ValueError: If the spectrum length differs from the wavelength count
        """
        spectrum = np.asarray(spectrum, dtype=np.float64)
        if spectrum.shape != (self._spectra.shape[4],):
            raise ValueError(
                f"Spectrum must have {self._spectra.shape[4]} values, got shape {spectrum.shape}"
            )
        self._spectra[i0, i1, i2, i3] = spectrum

    def resize_angles(self, num_angles0: int, num_angles1: int,
                      num_angles2: int, num_angles3: int) -> None:
        """Reallocate the angle axes and discard all stored spectra.

        Spectra have zero length afterwards until :meth:`resize_wavelengths`
        is called.
        """
        sizes = (num_angles0, num_angles1, num_angles2, num_angles3)
        if any(n <= 0 for n in sizes):
            raise ValueError(f"Numbers of angles must be positive, got {sizes}")

        self._angles = [np.zeros(n, dtype=np.float64) for n in sizes]
        self._spectra = np.zeros(sizes + (0,), dtype=np.float64)

    def resize_wavelengths(self, num_wavelengths: int) -> None:
        """Re-zero every spectrum with ``num_wavelengths`` channels."""
        if num_wavelengths <= 0:
            raise ValueError(f"Number of wavelengths must be positive, got {num_wavelengths}")

        self._spectra = np.zeros(self.shape + (num_wavelengths,), dtype=np.float64)
        self._wavelengths = np.zeros(num_wavelengths, dtype=np.float64)

    def validate(self) -> bool:
        """Check spectra, angles and wavelengths for NaN and +/-INF values.

        Every invalid spectrum and array is logged. The data is never modified.

        Returns:
            True if all values are finite
        """
        valid = True

        # Spectra
        finite = np.isfinite(self._spectra).all(axis=-1)
        if finite.all():
            logger.info("Spectra are valid.")
        else:
            valid = False
            for index in np.argwhere(~finite):
                index = tuple(int(i) for i in index)
                if np.isnan(self._spectra[index]).any():
                    logger.warning("The spectrum contains NaN values at %s.", index)
                else:
                    logger.warning("The spectrum contains +/-INF values at %s.", index)
            logger.warning("Invalid spectra are found.")

        # Angles
        for axis, angles in enumerate(self._angles):
            if np.isfinite(angles).all():
                logger.info("The array of angle%d is valid.", axis)
            else:
                valid = False
                kind = "NaN" if np.isnan(angles).any() else "+/-INF"
                logger.warning("The invalid angle%d(s) is found (%s).", axis, kind)

        # Wavelengths
        if np.isfinite(self._wavelengths).all():
            logger.info("Wavelengths are valid.")
        else:
            valid = False
            logger.warning("The invalid wavelength(s) is found.")

        return valid

    def update_angle_attributes(self) -> None:
        """Recompute the equal-interval and one-side flags from the axes."""
        self._update_equal_interval_angles()
        self._update_one_side()

    def _update_equal_interval_angles(self) -> None:
        self._equal_interval = [is_equal_interval(a) for a in self._angles]
        logger.debug("Equal-interval angles: %s", self._equal_interval)

    def _update_one_side(self) -> None:
        offset = _ONE_SIDE_OFFSET
        angles = self._angles[3]

        lower_half = (angles > offset) & (angles < np.pi - offset * np.pi)
        upper_half = (angles > np.pi + offset * np.pi) & (angles < 2.0 * np.pi - offset * 2.0 * np.pi)

        self._one_side = not (lower_half.any() and upper_half.any())
        logger.debug("One side: %s", self._one_side)

    def copy(self) -> "SampleSet":
        """Deep copy of the sample set including its cached attributes."""
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return (f"SampleSet(shape={self.shape}, color_model={self._color_model.name}, "
                f"num_wavelengths={self.num_wavelengths})")
