"""Tests for sample sets, BRDF representations and BTDFs."""

import logging

import numpy as np
import pytest

from tabular_bsdf.brdf import (
    SampleSet,
    Btdf,
    SpecularCoordinatesBrdf,
    SphericalCoordinatesBrdf,
    interpolate,
    fill_back_side,
    downward_mask,
)
from tabular_bsdf.common import ColorModel


class TestSampleSet:
    """Tests for the four-dimensional sample grid."""

    def test_shape(self):
        ss = SampleSet(2, 1, 3, 4, ColorModel.RGB)
        assert ss.shape == (2, 1, 3, 4)
        assert ss.spectra.shape == (2, 1, 3, 4, 3)
        assert ss.is_isotropic
        assert np.all(ss.spectra == 0.0)

    def test_channel_counts(self):
        assert SampleSet(1, 1, 1, 1, ColorModel.MONOCHROMATIC).num_wavelengths == 1
        assert SampleSet(1, 1, 1, 1, ColorModel.XYZ).num_wavelengths == 3
        assert SampleSet(1, 1, 1, 1, ColorModel.SPECTRAL, 5).num_wavelengths == 5

    def test_invalid_sizes(self):
        with pytest.raises(ValueError):
            SampleSet(0, 1, 1, 1)
        with pytest.raises(ValueError):
            SampleSet(1, 1, -2, 1)

    def test_invalid_color_model(self):
        with pytest.raises(ValueError):
            SampleSet(1, 1, 1, 1, "rgb")

    def test_set_spectrum_length_mismatch(self):
        ss = SampleSet(1, 1, 2, 2, ColorModel.RGB)
        with pytest.raises(ValueError):
            ss.set_spectrum(0, 0, 1, 1, [1.0, 2.0])

        ss.set_spectrum(0, 0, 1, 1, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(ss.get_spectrum(0, 0, 1, 1), [1.0, 2.0, 3.0])

    def test_set_angles_size_mismatch(self):
        ss = SampleSet(1, 1, 3, 1)
        with pytest.raises(ValueError):
            ss.set_angles(2, [0.0, 1.0])

    def test_resize(self):
        ss = SampleSet(2, 2, 2, 2, ColorModel.RGB)
        ss.resize_angles(3, 1, 4, 5)
        assert ss.shape == (3, 1, 4, 5)
        assert ss.spectra.shape == (3, 1, 4, 5, 0)

        ss.resize_wavelengths(2)
        assert ss.spectra.shape == (3, 1, 4, 5, 2)
        assert np.all(ss.spectra == 0.0)

    def test_validate_valid(self):
        ss = SampleSet(1, 1, 2, 2)
        assert ss.validate()

    def test_validate_nan(self, caplog):
        ss = SampleSet(1, 1, 2, 3)
        ss.spectra[0, 0, 1, 2, 1] = np.nan
        before = ss.spectra.copy()

        with caplog.at_level(logging.WARNING):
            assert not ss.validate()

        assert "NaN" in caplog.text
        assert "(0, 0, 1, 2)" in caplog.text
        np.testing.assert_array_equal(ss.spectra, before)

    def test_validate_inf(self, caplog):
        ss = SampleSet(1, 1, 2, 2)
        ss.spectra[0, 0, 0, 0, 0] = np.inf
        ss.set_angles(3, [0.0, np.nan])

        with caplog.at_level(logging.WARNING):
            assert not ss.validate()

        assert "+/-INF" in caplog.text
        assert "angle3" in caplog.text

    def test_one_side(self):
        ss = SampleSet(1, 1, 1, 18)
        ss.set_angles(3, np.radians(np.linspace(0.0, 170.0, 18)))
        ss.update_angle_attributes()
        assert ss.is_one_side

        ss = SampleSet(1, 1, 1, 4)
        ss.set_angles(3, np.radians([10.0, 170.0, 190.0, 350.0]))
        ss.update_angle_attributes()
        assert not ss.is_one_side

    def test_plane_of_incidence_is_one_side(self):
        ss = SampleSet(1, 1, 1, 2)
        ss.set_angles(3, [0.0, np.pi])
        ss.update_angle_attributes()
        assert ss.is_one_side

    def test_equal_interval_flags(self):
        ss = SampleSet(4, 1, 3, 2)
        ss.set_angles(0, np.linspace(0.0, np.pi / 2, 4))
        ss.set_angles(2, [0.0, 0.1, 1.0])
        ss.set_angles(3, [0.0, np.pi])
        ss.update_angle_attributes()

        assert ss.equal_interval_angles == (True, False, False, False)
        assert ss.is_equal_interval_angles(0)

    def test_copy_is_independent(self):
        ss = SampleSet(1, 1, 2, 2)
        copied = ss.copy()
        copied.spectra[...] = 1.0
        assert np.all(ss.spectra == 0.0)


class TestBrdf:
    """Tests for BRDF representations and lookups."""

    @pytest.fixture
    def linear_brdf(self):
        """Canonical grid whose values are linear in each angle."""
        brdf = SpecularCoordinatesBrdf.create(4, 1, 7, 9)
        ss = brdf.sample_set
        a0, a1, a2, a3 = np.meshgrid(*ss.angles, indexing='ij')
        for channel in range(3):
            ss.spectra[..., channel] = a0 + 2.0 * a2 + 0.1 * a3 + channel
        return brdf

    def test_create_axes(self):
        brdf = SpecularCoordinatesBrdf.create(10, 1, 181, 73)
        assert brdf.in_theta[-1] == pytest.approx(np.pi / 2)
        assert brdf.in_phi[0] == 0.0
        assert brdf.spec_theta[-1] == pytest.approx(np.pi)
        assert brdf.spec_phi[-1] == pytest.approx(2 * np.pi)
        assert brdf.sample_set.equal_interval_angles == (True, False, True, True)

    def test_from_angles_requires_ascending(self):
        with pytest.raises(ValueError):
            SpecularCoordinatesBrdf.from_angles([0.0], [0.0], [0.5, 0.1], [0.0])

    def test_interpolation_is_exact_for_linear_data(self, linear_brdf):
        result = interpolate(linear_brdf.sample_set, 0.3, 0.0, 1.1, np.array([2.0, 4.5]))
        expected = 0.3 + 2.0 * 1.1 + 0.1 * np.array([2.0, 4.5])

        assert result.shape == (2, 3)
        np.testing.assert_allclose(result[:, 0], expected, atol=1e-9)
        np.testing.assert_allclose(result[:, 2], expected + 2.0, atol=1e-9)

    def test_lookup_by_direction(self, linear_brdf):
        in_dir, out_dir = linear_brdf.to_xyz(0.4, 0.0, 0.8, 1.5)
        spectrum = linear_brdf.get_spectrum(in_dir, out_dir)
        np.testing.assert_allclose(spectrum[0], 0.4 + 1.6 + 0.15, atol=1e-6)

    def test_grid_directions_shape(self):
        brdf = SpecularCoordinatesBrdf.create(3, 2, 4, 5)
        in_dir, out_dir = brdf.grid_directions()
        assert in_dir.shape == (3, 2, 4, 5, 3)

        in_dir, out_dir = brdf.grid_directions(1)
        assert out_dir.shape == (2, 4, 5, 3)

    def test_spherical_isotropic_uses_relative_azimuth(self):
        brdf = SphericalCoordinatesBrdf.create(3, 1, 4, 5)
        ss = brdf.sample_set
        ss.spectra[..., 0] = np.meshgrid(*ss.angles, indexing='ij')[3]

        in_dir, out_dir = brdf.to_xyz(0.5, 1.0, 0.5, 2.5)
        spectrum = brdf.get_spectrum(in_dir, out_dir)
        assert spectrum[0] == pytest.approx(1.5, abs=1e-6)

    def test_resample_from(self, linear_brdf):
        target = SpecularCoordinatesBrdf.from_brdf(
            linear_brdf, linear_brdf.in_theta, linear_brdf.in_phi,
            linear_brdf.spec_theta, linear_brdf.spec_phi
        )
        # spec_phi is undefined at spec_theta = 0 and wraps at 2*pi
        mask = ~downward_mask(target)
        mask[:, :, 0] = False
        mask[:, :, :, 0] = False
        mask[:, :, :, -1] = False
        np.testing.assert_allclose(target.sample_set.spectra[mask],
                                   linear_brdf.sample_set.spectra[mask], atol=1e-6)


class TestBackSide:
    """Tests for filling downward samples of canonical grids."""

    def test_fill_back_side(self):
        brdf = SpecularCoordinatesBrdf.create(3, 1, 19, 5)
        ss = brdf.sample_set
        ss.spectra[...] = np.arange(19, dtype=np.float64)[np.newaxis, np.newaxis, :, np.newaxis, np.newaxis]
        downward = downward_mask(brdf)
        assert downward.any()

        n_filled = fill_back_side(brdf)

        assert n_filled == int(downward.sum())
        # Downward samples take the value of an upward sample on the same line
        for i0, i1, i2, i3 in np.argwhere(downward):
            line_valid = ~downward[i0, i1, :, i3]
            assert line_valid[int(ss.spectra[i0, i1, i2, i3, 0])]

    def test_no_downward_samples(self):
        brdf = SpecularCoordinatesBrdf.from_angles([0.0], [0.0], [0.0, 0.5], [0.0, np.pi])
        assert fill_back_side(brdf) == 0


class TestBtdf:
    """Tests for the BTDF view."""

    def test_shares_sample_set(self):
        brdf = SpecularCoordinatesBrdf.create(2, 1, 3, 4)
        btdf = Btdf(brdf)
        assert btdf.sample_set is brdf.sample_set

    def test_spectra_read_only(self):
        btdf = Btdf(SpecularCoordinatesBrdf.create(2, 1, 3, 4))
        with pytest.raises(ValueError):
            btdf.spectra[0, 0, 0, 0, 0] = 1.0

    def test_transmitted_direction(self):
        brdf = SpecularCoordinatesBrdf.create(2, 1, 3, 4)
        btdf = Btdf(brdf)
        _, brdf_out = brdf.get_in_out_direction(1, 0, 1, 0)
        _, btdf_out = btdf.get_in_out_direction(1, 0, 1, 0)
        assert btdf_out[2] == pytest.approx(-brdf_out[2])

    def test_lookup_mirrors_lower_hemisphere(self):
        brdf = SpecularCoordinatesBrdf.create(4, 1, 7, 9)
        brdf.sample_set.spectra[...] = 0.25
        btdf = Btdf(brdf)

        in_dir = np.array([0.0, 0.0, 1.0])
        out_dir = np.array([0.6, 0.0, -0.8])
        np.testing.assert_allclose(btdf.get_spectrum(in_dir, out_dir), 0.25)
