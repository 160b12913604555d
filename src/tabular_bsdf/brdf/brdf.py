"""BRDF representations built on top of a SampleSet.

Each representation assigns a meaning to the four angle axes of its sample
set and converts between those angles and direction pairs. The
``representation`` tag lets converters dispatch on a closed set of kinds
instead of probing classes.
"""

import copy
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

from ..common import coordinates
from ..common.color import ColorModel
from .interpolator import interpolate
from .sample_set import SampleSet


class Representation(Enum):
    """Kinds of angular parameterization handled by the converter."""
    CANONICAL = "canonical"
    SPHERICAL = "spherical"
    GENERIC = "generic"


class DataType(Enum):
    """Whether a grid holds reflectance or transmittance data."""
    BRDF = "brdf"
    BTDF = "btdf"


class Brdf:
    """Base class of tabulated BRDFs.

    Subclasses define the angle <-> direction conversions through
    :meth:`to_xyz` and :meth:`from_xyz`. Lookups by direction interpolate
    the sample set multilinearly.
    """

    representation = Representation.GENERIC
    max_angles: Tuple[float, float, float, float] = (
        coordinates.PI_2, coordinates.TWO_PI, coordinates.PI_2, coordinates.TWO_PI
    )

    def __init__(self, sample_set: SampleSet):
        self._sample_set = sample_set

    @classmethod
    def create(
        cls,
        num_angles0: int,
        num_angles1: int,
        num_angles2: int,
        num_angles3: int,
        color_model: ColorModel = ColorModel.RGB,
        num_wavelengths: int = 3
    ) -> "Brdf":
        """Create a zero-filled BRDF whose axes are linear on their full ranges.

        A single-sample axis is placed at 0.
        """
        ss = SampleSet(num_angles0, num_angles1, num_angles2, num_angles3,
                       color_model, num_wavelengths)
        for axis, n in enumerate(ss.shape):
            if n > 1:
                ss.set_angles(axis, np.linspace(0.0, cls.max_angles[axis], n))
        ss.update_angle_attributes()
        return cls(ss)

    @classmethod
    def from_angles(
        cls,
        angles0: Sequence[float],
        angles1: Sequence[float],
        angles2: Sequence[float],
        angles3: Sequence[float],
        color_model: ColorModel = ColorModel.RGB,
        num_wavelengths: int = 3
    ) -> "Brdf":
        """Create a zero-filled BRDF with the given axes (radians)."""
        axes = [np.asarray(a, dtype=np.float64).ravel() for a in (angles0, angles1, angles2, angles3)]
        for axis, values in enumerate(axes):
            if values.shape[0] > 1 and not np.all(np.diff(values) > 0.0):
                raise ValueError(f"Angles of axis {axis} must be strictly ascending")

        ss = SampleSet(*(a.shape[0] for a in axes), color_model, num_wavelengths)
        for axis, values in enumerate(axes):
            ss.set_angles(axis, values)
        ss.update_angle_attributes()
        return cls(ss)

    @classmethod
    def from_brdf(
        cls,
        source: "Brdf",
        angles0: Sequence[float],
        angles1: Sequence[float],
        angles2: Sequence[float],
        angles3: Sequence[float]
    ) -> "Brdf":
        """Resample ``source`` onto new axes of this representation.

        Color model and wavelengths are taken from the source.
        """
        src_ss = source.sample_set
        brdf = cls.from_angles(angles0, angles1, angles2, angles3,
                               src_ss.color_model, src_ss.num_wavelengths)
        brdf.sample_set.set_wavelengths(src_ss.wavelengths)
        brdf.resample_from(source)
        return brdf

    @property
    def sample_set(self) -> SampleSet:
        return self._sample_set

    @property
    def is_isotropic(self) -> bool:
        return self._sample_set.is_isotropic

    def to_xyz(self, angle0, angle1, angle2, angle3) -> Tuple[np.ndarray, np.ndarray]:
        """Convert axis angles to (in_dir, out_dir)."""
        raise NotImplementedError

    def from_xyz(self, in_dir, out_dir) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Convert (in_dir, out_dir) to axis angles."""
        raise NotImplementedError

    def get_in_out_direction(self, i0: int, i1: int, i2: int, i3: int) -> Tuple[np.ndarray, np.ndarray]:
        """Directions of the sample point at a grid index."""
        ss = self._sample_set
        return self.to_xyz(ss.angles0[i0], ss.angles1[i1], ss.angles2[i2], ss.angles3[i3])

    def grid_directions(self, i0: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
        """Directions of all sample points, shape (n0, n1, n2, n3, 3).

        If ``i0`` is given only that slice of axis 0 is returned,
        shape (n1, n2, n3, 3).
        """
        ss = self._sample_set
        angles0 = ss.angles0 if i0 is None else ss.angles0[i0:i0 + 1]
        grids = np.meshgrid(angles0, ss.angles1, ss.angles2, ss.angles3, indexing='ij')
        in_dir, out_dir = self.to_xyz(*grids)
        if i0 is not None:
            return in_dir[0], out_dir[0]
        return in_dir, out_dir

    def lookup_angles(self, in_dir, out_dir) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Angles used to read the sample set for a direction pair.

        Azimuths of one-sided data are mirrored onto the stored half.
        """
        angle0, angle1, angle2, angle3 = self.from_xyz(in_dir, out_dir)
        return angle0, angle1, angle2, self._fold_azimuth(angle3)

    def _fold_azimuth(self, phi: np.ndarray) -> np.ndarray:
        ss = self._sample_set
        if not ss.is_one_side:
            return phi
        if ss.angles3[-1] <= np.pi + 1e-6:
            return np.where(phi > np.pi, coordinates.TWO_PI - phi, phi)
        return np.where(phi < np.pi, coordinates.TWO_PI - phi, phi)

    def get_spectrum(self, in_dir, out_dir) -> np.ndarray:
        """Interpolated spectra for direction pairs, shape (..., num_wavelengths)."""
        return interpolate(self._sample_set, *self.lookup_angles(in_dir, out_dir))

    def get_spectrum_at_angles(self, angle0, angle1, angle2, angle3) -> np.ndarray:
        """Interpolated spectra at axis angles of this representation."""
        return interpolate(self._sample_set, angle0, angle1, angle2, angle3)

    def resample_from(self, source: "Brdf") -> None:
        """Fill every sample point with the value of ``source`` in that direction.

        Axis 0 is processed one slice at a time to bound memory use.
        """
        ss = self._sample_set
        for i0 in range(ss.num_angles0):
            in_dir, out_dir = self.grid_directions(i0)
            ss.spectra[i0] = source.get_spectrum(in_dir, out_dir)

    def copy(self) -> "Brdf":
        """Deep copy of the BRDF and its sample set."""
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._sample_set!r})"


class SpecularCoordinatesBrdf(Brdf):
    """BRDF in the specular-offset coordinate system (canonical grid).

    Axes: incoming polar angle, incoming azimuth, polar offset from the
    specular direction, azimuth around the specular direction.

    Attributes:
        specular_offsets: Optional polar offsets of the specular peak per
            incoming polar angle (radians), exported as ``sigmat``.
    """

    representation = Representation.CANONICAL
    max_angles = coordinates.SPECULAR_MAX_ANGLES

    def __init__(self, sample_set: SampleSet, specular_offsets: Optional[np.ndarray] = None):
        super().__init__(sample_set)
        self.specular_offsets = None if specular_offsets is None else np.asarray(specular_offsets, dtype=np.float64)

    def to_xyz(self, angle0, angle1, angle2, angle3):
        return coordinates.specular_to_xyz(angle0, angle1, angle2, angle3)

    def from_xyz(self, in_dir, out_dir):
        return coordinates.xyz_to_specular(in_dir, out_dir)

    @property
    def in_theta(self) -> np.ndarray:
        return self._sample_set.angles0

    @property
    def in_phi(self) -> np.ndarray:
        return self._sample_set.angles1

    @property
    def spec_theta(self) -> np.ndarray:
        return self._sample_set.angles2

    @property
    def spec_phi(self) -> np.ndarray:
        return self._sample_set.angles3

    @property
    def num_in_theta(self) -> int:
        return self._sample_set.num_angles0

    @property
    def num_in_phi(self) -> int:
        return self._sample_set.num_angles1

    @property
    def num_spec_theta(self) -> int:
        return self._sample_set.num_angles2

    @property
    def num_spec_phi(self) -> int:
        return self._sample_set.num_angles3


class SphericalCoordinatesBrdf(Brdf):
    """BRDF in spherical coordinates of both directions.

    Axes: incoming polar angle, incoming azimuth, outgoing polar angle,
    outgoing azimuth. Isotropic data is looked up with the outgoing azimuth
    measured relative to the incoming one.
    """

    representation = Representation.SPHERICAL
    max_angles = coordinates.SPHERICAL_MAX_ANGLES

    def to_xyz(self, angle0, angle1, angle2, angle3):
        return coordinates.spherical_pair_to_xyz(angle0, angle1, angle2, angle3)

    def from_xyz(self, in_dir, out_dir):
        return coordinates.xyz_to_spherical_pair(in_dir, out_dir)

    def lookup_angles(self, in_dir, out_dir):
        in_theta, in_phi, out_theta, out_phi = self.from_xyz(in_dir, out_dir)
        if self.is_isotropic:
            out_phi = np.mod(out_phi - in_phi, coordinates.TWO_PI)
            in_phi = np.zeros_like(in_phi)
        return in_theta, in_phi, out_theta, self._fold_azimuth(out_phi)


class HalfDifferenceCoordinatesBrdf(Brdf):
    """BRDF in Rusinkiewicz half/difference coordinates.

    Axes: half-vector polar angle, half-vector azimuth, difference polar
    angle, difference azimuth.
    """

    representation = Representation.GENERIC
    max_angles = coordinates.HALF_DIFFERENCE_MAX_ANGLES

    def to_xyz(self, angle0, angle1, angle2, angle3):
        return coordinates.half_difference_to_xyz(angle0, angle1, angle2, angle3)

    def from_xyz(self, in_dir, out_dir):
        return coordinates.xyz_to_half_difference(in_dir, out_dir)
