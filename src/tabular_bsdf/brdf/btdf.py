"""BTDF view over BRDF data."""

import numpy as np

from .brdf import Brdf
from .sample_set import SampleSet


class Btdf:
    """Transmittance data sharing the sample grid of a BRDF.

    The wrapped BRDF keeps ownership of its sample set. Outgoing directions
    of a BTDF point into the lower hemisphere; they are mirrored to the
    upper hemisphere for lookups.
    """

    def __init__(self, brdf: Brdf):
        self._brdf = brdf

    @property
    def brdf(self) -> Brdf:
        return self._brdf

    @property
    def sample_set(self) -> SampleSet:
        return self._brdf.sample_set

    @property
    def spectra(self) -> np.ndarray:
        """Read-only view of the shared spectra."""
        view = self._brdf.sample_set.spectra.view()
        view.flags.writeable = False
        return view

    def get_spectrum(self, in_dir, out_dir) -> np.ndarray:
        """Spectra for direction pairs, using ``|z|`` of both directions."""
        in_dir = np.array(in_dir, dtype=np.float64)
        out_dir = np.array(out_dir, dtype=np.float64)
        in_dir[..., 2] = np.abs(in_dir[..., 2])
        out_dir[..., 2] = np.abs(out_dir[..., 2])
        return self._brdf.get_spectrum(in_dir, out_dir)

    def get_in_out_direction(self, i0: int, i1: int, i2: int, i3: int):
        """Directions of a sample point with the outgoing direction transmitted."""
        in_dir, out_dir = self._brdf.get_in_out_direction(i0, i1, i2, i3)
        out_dir = np.array(out_dir, dtype=np.float64)
        out_dir[..., 2] = -out_dir[..., 2]
        return in_dir, out_dir
