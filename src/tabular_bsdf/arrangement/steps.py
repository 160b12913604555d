"""Repair passes applied to canonical grids before export.

Every step takes ownership of a grid and returns the grid to continue with,
which is either the same object modified in place or a new grid. Callers
must not use a grid after passing it to a step.
"""

import logging

import numpy as np
from scipy.integrate import trapezoid

from ..brdf.brdf import SpecularCoordinatesBrdf
from ..common import coordinates

logger = logging.getLogger(__name__)

# Tolerance for matching angles on an axis
ANGLE_TOLERANCE = 1e-6


def _rebuild(brdf: SpecularCoordinatesBrdf, in_theta, in_phi, spec_theta, spec_phi,
             spectra: np.ndarray) -> SpecularCoordinatesBrdf:
    """New canonical grid with the given axes and spectra, keeping metadata of ``brdf``."""
    ss = brdf.sample_set
    rebuilt = SpecularCoordinatesBrdf.from_angles(
        in_theta, in_phi, spec_theta, spec_phi, ss.color_model, ss.num_wavelengths
    )
    rebuilt.sample_set.set_wavelengths(ss.wavelengths)
    rebuilt.sample_set.spectra[...] = spectra
    rebuilt.specular_offsets = brdf.specular_offsets
    return rebuilt


def expand_in_theta(brdf: SpecularCoordinatesBrdf, num_in_theta: int = 10) -> SpecularCoordinatesBrdf:
    """Replace a single incoming polar sample with ``num_in_theta`` samples.

    The new samples span [0, pi/2] and all repeat the input data.
    Grids with more than one incoming polar sample are returned unchanged.
    """
    if brdf.num_in_theta != 1:
        return brdf

    in_theta = np.linspace(0.0, coordinates.SPECULAR_MAX_ANGLES[0], num_in_theta)
    spectra = np.repeat(brdf.sample_set.spectra, num_in_theta, axis=0)
    expanded = _rebuild(brdf, in_theta, brdf.in_phi, brdf.spec_theta, brdf.spec_phi, spectra)

    if brdf.specular_offsets is not None and brdf.specular_offsets.shape[0] == 1:
        expanded.specular_offsets = np.repeat(brdf.specular_offsets, num_in_theta)

    logger.info("Expanded incoming polar angles from 1 to %d samples.", num_in_theta)
    return expanded


def _periodic_shift(values: np.ndarray, phi: np.ndarray, shift: float) -> np.ndarray:
    """Sample ``values`` (n2, n3, n_wl) at ``phi + shift`` with periodic linear interpolation."""
    xp = phi
    fp = values
    if phi.shape[0] > 1 and np.isclose(phi[-1] - phi[0], coordinates.TWO_PI, atol=ANGLE_TOLERANCE):
        xp = phi[:-1]
        fp = values[:, :-1]

    xp_ext = np.append(xp, xp[0] + coordinates.TWO_PI)
    fp_ext = np.concatenate([fp, fp[:, :1]], axis=1)

    x = np.mod(phi + shift - xp[0], coordinates.TWO_PI) + xp[0]
    upper = np.clip(np.searchsorted(xp_ext, x, side='right'), 1, xp_ext.shape[0] - 1)
    lower = upper - 1
    t = (x - xp_ext[lower]) / (xp_ext[upper] - xp_ext[lower])
    t = t[np.newaxis, :, np.newaxis]
    return fp_ext[:, lower] * (1.0 - t) + fp_ext[:, upper] * t


def equalize_overlapping_samples(brdf: SpecularCoordinatesBrdf) -> SpecularCoordinatesBrdf:
    """Make samples that describe the same direction pair agree.

    - At spec_theta = 0 every spec_phi denotes the specular direction, so
      those samples are replaced by their mean.
    - At in_theta = 0 every in_phi denotes normal incidence. For anisotropic
      grids whose spec_phi axis covers both halves, samples of different
      in_phi that point to the same outgoing direction are replaced by
      their mean.
    """
    ss = brdf.sample_set
    spectra = ss.spectra

    zero_spec_theta = np.isclose(brdf.spec_theta, 0.0, atol=ANGLE_TOLERANCE)
    for i2 in np.flatnonzero(zero_spec_theta):
        spectra[:, :, i2] = spectra[:, :, i2].mean(axis=2, keepdims=True)

    if brdf.num_in_phi > 1 and brdf.num_spec_phi > 1 and not ss.is_one_side:
        in_phi = brdf.in_phi
        spec_phi = brdf.spec_phi
        for i0 in np.flatnonzero(np.isclose(brdf.in_theta, 0.0, atol=ANGLE_TOLERANCE)):
            normal = spectra[i0].copy()
            for target in range(brdf.num_in_phi):
                shifted = [
                    _periodic_shift(normal[source], spec_phi, in_phi[target] - in_phi[source])
                    for source in range(brdf.num_in_phi)
                ]
                spectra[i0, target] = np.mean(shifted, axis=0)

    logger.info("Equalized overlapping samples (%d specular rows).", int(zero_spec_theta.sum()))
    return brdf


def fill_symmetric_samples(brdf: SpecularCoordinatesBrdf) -> SpecularCoordinatesBrdf:
    """Mirror one-sided data across the plane of incidence.

    Each spec_phi sample ``a`` is copied to ``2*pi - a``. Duplicates and the
    2*pi sample are dropped. Grids that are not one-sided are returned
    unchanged.
    """
    ss = brdf.sample_set
    if not ss.is_one_side:
        return brdf

    spec_phi = brdf.spec_phi
    n = spec_phi.shape[0]
    candidates = np.concatenate([spec_phi, coordinates.TWO_PI - spec_phi])
    sources = np.concatenate([np.arange(n), np.arange(n)])

    keep = candidates < coordinates.TWO_PI - ANGLE_TOLERANCE
    keep &= candidates > -ANGLE_TOLERANCE
    candidates = np.clip(candidates[keep], 0.0, None)
    sources = sources[keep]

    order = np.argsort(candidates, kind='stable')
    candidates = candidates[order]
    sources = sources[order]

    unique = np.ones(candidates.shape[0], dtype=bool)
    unique[1:] = np.diff(candidates) > ANGLE_TOLERANCE
    candidates = candidates[unique]
    sources = sources[unique]

    spectra = ss.spectra[:, :, :, sources]
    filled = _rebuild(brdf, brdf.in_theta, brdf.in_phi, brdf.spec_theta, candidates, spectra)

    logger.info("Filled symmetric samples: spec_phi %d -> %d.", n, candidates.shape[0])
    return filled


def close_periodic_boundary(brdf: SpecularCoordinatesBrdf) -> SpecularCoordinatesBrdf:
    """Duplicate the spec_phi sample at 0 to 2*pi.

    A sample at 0 is inserted first if missing, interpolated across the
    periodic boundary. Axes that do not cover both azimuthal halves (only
    the plane of incidence, or a single azimuth) are returned unchanged.
    """
    ss = brdf.sample_set
    if ss.is_one_side:
        logger.debug("spec_phi does not cover both halves; periodic boundary left open.")
        return brdf

    spec_phi = brdf.spec_phi.copy()
    spectra = ss.spectra
    ends_at_two_pi = np.isclose(spec_phi[-1], coordinates.TWO_PI, atol=ANGLE_TOLERANCE)

    if spec_phi[0] > ANGLE_TOLERANCE:
        if ends_at_two_pi:
            first = spectra[:, :, :, -1:]
        else:
            last_phi = spec_phi[-1] - coordinates.TWO_PI
            t = (0.0 - last_phi) / (spec_phi[0] - last_phi)
            first = spectra[:, :, :, -1:] * (1.0 - t) + spectra[:, :, :, :1] * t
        spec_phi = np.insert(spec_phi, 0, 0.0)
        spectra = np.concatenate([first, spectra], axis=3)
    else:
        spec_phi[0] = 0.0

    if ends_at_two_pi:
        spec_phi[-1] = coordinates.TWO_PI
        spectra = spectra.copy()
        spectra[:, :, :, -1] = spectra[:, :, :, 0]
    else:
        spec_phi = np.append(spec_phi, coordinates.TWO_PI)
        spectra = np.concatenate([spectra, spectra[:, :, :, :1]], axis=3)

    closed = _rebuild(brdf, brdf.in_theta, brdf.in_phi, brdf.spec_theta, spec_phi, spectra)
    logger.info("Closed periodic boundary of spec_phi (%d samples).", spec_phi.shape[0])
    return closed


def azimuth_weights(spec_phi: np.ndarray) -> np.ndarray:
    """Quadrature weights of a spec_phi axis over the full circle.

    Each sample gets half of the circular gaps to its neighbours. A closing
    sample at 2*pi that repeats 0 gets weight 0. The weights sum to 2*pi.
    """
    spec_phi = np.asarray(spec_phi, dtype=np.float64)
    closed = (spec_phi.shape[0] > 1
              and np.isclose(spec_phi[-1] - spec_phi[0], coordinates.TWO_PI, atol=ANGLE_TOLERANCE))
    unique = spec_phi[:-1] if closed else spec_phi

    if unique.shape[0] == 1:
        weights = np.array([coordinates.TWO_PI])
    else:
        gaps = np.diff(np.append(unique, unique[0] + coordinates.TWO_PI))
        weights = 0.5 * (np.roll(gaps, 1) + gaps)

    if closed:
        weights = np.append(weights, 0.0)
    return weights


def compute_reflectances(brdf: SpecularCoordinatesBrdf) -> np.ndarray:
    """Directional-hemispherical reflectance per incoming direction.

    Integrates ``f * cos(theta_out)`` over the grid (trapezoid rule on
    spec_theta, circular quadrature on spec_phi). Outgoing directions below
    the surface contribute nothing.

    Returns:
        Array of shape (n_in_theta, n_in_phi, num_wavelengths)
    """
    ss = brdf.sample_set
    reflectances = np.zeros((ss.num_angles0, ss.num_angles1, ss.num_wavelengths))
    if ss.num_angles2 < 2:
        return reflectances

    phi_weights = azimuth_weights(brdf.spec_phi)[np.newaxis, np.newaxis, :, np.newaxis]
    sin_theta = np.sin(brdf.spec_theta)[np.newaxis, :, np.newaxis, np.newaxis]

    for i0 in range(ss.num_angles0):
        _, out_dir = brdf.grid_directions(i0)
        cos_out = np.clip(out_dir[..., 2], 0.0, None)[..., np.newaxis]
        integrand = ss.spectra[i0] * cos_out * sin_theta
        over_phi = np.sum(integrand * phi_weights, axis=2)
        reflectances[i0] = trapezoid(over_phi, x=brdf.spec_theta, axis=1)

    return reflectances


def fix_energy_conservation(
    brdf: SpecularCoordinatesBrdf,
    max_value: float = 10000.0,
    max_albedo: float = 1.0
) -> SpecularCoordinatesBrdf:
    """Bound values to a physically plausible range (clamp, then rescale).

    1. Every value is clamped into [0, ``max_value``].
    2. For each incoming direction and channel whose reflectance exceeds
       ``max_albedo``, the samples are scaled by ``max_albedo / reflectance``.

    Rescaling only lowers values, so the clamp bounds still hold afterwards.
    """
    spectra = brdf.sample_set.spectra

    n_clamped = int(np.count_nonzero((spectra < 0.0) | (spectra > max_value)))
    np.clip(spectra, 0.0, max_value, out=spectra)

    reflectances = compute_reflectances(brdf)
    excess = reflectances > max_albedo
    scale = np.where(excess, max_albedo / np.where(excess, reflectances, 1.0), 1.0)
    spectra *= scale[:, :, np.newaxis, np.newaxis, :]

    logger.info("Energy conservation: clamped %d values, rescaled %d incoming directions.",
                n_clamped, int(excess.any(axis=-1).sum()))
    return brdf


def fill_spectra_at_grazing_incidence(brdf: SpecularCoordinatesBrdf) -> SpecularCoordinatesBrdf:
    """Zero every sample at in_theta = pi/2 (no transmission at grazing incidence)."""
    grazing = np.isclose(brdf.in_theta, coordinates.PI_2, atol=ANGLE_TOLERANCE)
    brdf.sample_set.spectra[grazing] = 0.0
    logger.info("Zero-filled %d grazing incoming polar angles.", int(grazing.sum()))
    return brdf
