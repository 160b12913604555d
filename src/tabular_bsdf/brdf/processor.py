"""In-place processing of canonical grids owned by the caller."""

import logging

import numpy as np

from ..common import coordinates
from .brdf import SpecularCoordinatesBrdf

logger = logging.getLogger(__name__)


def downward_mask(brdf: SpecularCoordinatesBrdf) -> np.ndarray:
    """Boolean mask (n0, n1, n2, n3) of sample points with a downward outgoing direction."""
    _, out_dir = brdf.grid_directions()
    return coordinates.is_downward_dir(out_dir)


def fill_back_side(brdf: SpecularCoordinatesBrdf) -> int:
    """Fill samples whose outgoing direction points below the surface.

    Each such sample copies the nearest valid sample along the spec_theta
    axis of the same (in_theta, in_phi, spec_phi) line; the lower index wins
    ties. Lines without any valid sample are zero-filled.

    Args:
        brdf: Canonical BRDF, modified in place

    Returns:
        Number of filled samples
    """
    ss = brdf.sample_set
    downward = downward_mask(brdf)
    n_filled = int(downward.sum())
    if n_filled == 0:
        return 0

    valid = ~downward
    n2 = ss.num_angles2
    index = np.arange(n2).reshape(1, 1, n2, 1)

    # Nearest valid index at or before / at or after each position
    before = np.maximum.accumulate(np.where(valid, index, -1), axis=2)
    after = np.flip(
        np.minimum.accumulate(np.flip(np.where(valid, index, n2), axis=2), axis=2),
        axis=2,
    )

    dist_before = np.where(before >= 0, index - before, np.iinfo(np.int64).max)
    dist_after = np.where(after < n2, after - index, np.iinfo(np.int64).max)
    source = np.where(dist_before <= dist_after, before, after)
    has_source = (before >= 0) | (after < n2)

    source = np.clip(source, 0, n2 - 1)
    gather = np.broadcast_to(source[..., np.newaxis], ss.spectra.shape)
    filled = np.take_along_axis(ss.spectra, gather, axis=2)
    filled = np.where(has_source[..., np.newaxis], filled, 0.0)

    ss.spectra[downward] = filled[downward]

    logger.debug("Filled %d back side samples.", n_filled)
    return n_filled
