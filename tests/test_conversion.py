"""Tests for conversion to canonical grids."""

import numpy as np
import pytest

from tabular_bsdf.brdf import (
    Representation,
    SpecularCoordinatesBrdf,
    SphericalCoordinatesBrdf,
    HalfDifferenceCoordinatesBrdf,
)
from tabular_bsdf.conversion import CoordinateConverter, to_canonical
from tabular_bsdf.utils.config import ExportConfig


class TestCoordinateConverter:
    """Tests for CoordinateConverter."""

    def test_canonical_copy_is_independent(self):
        brdf = SpecularCoordinatesBrdf.create(2, 1, 3, 4)
        brdf.sample_set.spectra[...] = 0.5
        brdf.specular_offsets = np.array([0.0, 0.1])

        converted = CoordinateConverter().convert(brdf)
        converted.sample_set.spectra[...] = 2.0

        assert converted is not brdf
        assert converted.sample_set.shape == (2, 1, 3, 4)
        np.testing.assert_array_equal(converted.specular_offsets, [0.0, 0.1])
        assert np.all(brdf.sample_set.spectra == 0.5)

    def test_spherical_minimum_resolution(self):
        brdf = SphericalCoordinatesBrdf.create(4, 1, 5, 7)
        brdf.sample_set.spectra[...] = 0.5

        converted = to_canonical(brdf)

        assert converted.representation == Representation.CANONICAL
        assert converted.sample_set.shape == (4, 1, 181, 73)
        np.testing.assert_array_equal(converted.in_theta, brdf.sample_set.angles0)
        np.testing.assert_allclose(converted.sample_set.spectra, 0.5)

    def test_spherical_keeps_finer_resolution(self):
        brdf = SphericalCoordinatesBrdf.create(2, 1, 200, 80)
        converted = CoordinateConverter().convert(brdf)
        assert converted.sample_set.shape == (2, 1, 200, 80)

    def test_spherical_resampling_in_upper_hemisphere(self):
        """Values depending on the outgoing polar angle survive conversion."""
        brdf = SphericalCoordinatesBrdf.create(3, 1, 31, 5)
        ss = brdf.sample_set
        ss.spectra[...] = ss.angles2[np.newaxis, np.newaxis, :, np.newaxis, np.newaxis]

        config = ExportConfig(min_spec_theta=19, min_spec_phi=9)
        converted = CoordinateConverter(config).convert(brdf)

        in_dir, out_dir = converted.grid_directions()
        out_theta = np.arccos(np.clip(out_dir[..., 2], -1.0, 1.0))
        upward = out_dir[..., 2] >= 0.0
        np.testing.assert_allclose(converted.sample_set.spectra[..., 0][upward],
                                   out_theta[upward], atol=1e-6)

    def test_generic_isotropic_axes(self):
        brdf = HalfDifferenceCoordinatesBrdf.create(3, 1, 4, 5)
        brdf.sample_set.spectra[...] = 0.2

        converted = CoordinateConverter().convert(brdf)

        assert converted.sample_set.shape == (19, 1, 91, 73)
        np.testing.assert_array_equal(converted.in_phi, [0.0])
        assert converted.spec_theta[-1] == pytest.approx(np.pi)
        # Exponential spacing concentrates samples near the specular peak
        assert converted.spec_theta[1] < np.pi / 90
        np.testing.assert_allclose(converted.sample_set.spectra, 0.2)

    def test_generic_anisotropic_axes(self):
        brdf = HalfDifferenceCoordinatesBrdf.create(3, 2, 4, 5)
        config = ExportConfig(generic_in_theta=5, generic_in_phi=7,
                              generic_spec_theta=9, generic_spec_phi=11)

        converted = CoordinateConverter(config).convert(brdf)

        assert converted.sample_set.shape == (5, 7, 9, 11)
        assert converted.in_phi[-1] == pytest.approx(2 * np.pi)

    def test_color_model_and_wavelengths_preserved(self):
        from tabular_bsdf.common import ColorModel

        brdf = SphericalCoordinatesBrdf.create(2, 1, 3, 4, ColorModel.SPECTRAL, 4)
        brdf.sample_set.set_wavelengths([400.0, 500.0, 600.0, 700.0])

        converted = CoordinateConverter(ExportConfig(min_spec_theta=5, min_spec_phi=5)).convert(brdf)

        assert converted.sample_set.color_model == ColorModel.SPECTRAL
        np.testing.assert_array_equal(converted.sample_set.wavelengths, [400.0, 500.0, 600.0, 700.0])

    def test_source_not_modified(self):
        brdf = SphericalCoordinatesBrdf.create(2, 1, 3, 4)
        brdf.sample_set.spectra[...] = np.random.default_rng(0).random(brdf.sample_set.spectra.shape)
        before = brdf.sample_set.spectra.copy()

        CoordinateConverter(ExportConfig(min_spec_theta=5, min_spec_phi=5)).convert(brdf)

        np.testing.assert_array_equal(brdf.sample_set.spectra, before)
