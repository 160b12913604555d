"""Multilinear interpolation of sample grids.

The kernel brackets every query coordinate with ``find_bounds`` and blends
the 16 surrounding samples. Queries outside an axis are extrapolated from
its two boundary samples. Queries are processed in parallel with ``prange``.
"""

import numpy as np
from numba import njit, prange

from ..common.array_util import find_bounds


@njit(cache=True)
def _lerp_weight(lower_value, upper_value, value):
    if upper_value == lower_value:
        return 0.0
    return (value - lower_value) / (upper_value - lower_value)


@njit(parallel=True, cache=True)
def interpolate_batch(angles0, angles1, angles2, angles3, equal_interval, spectra, queries):
    """Interpolate spectra at a batch of angle tuples.

    Args:
        angles0..angles3: Ascending float64 axis arrays
        equal_interval: Boolean array (4,) of per-axis equal-interval flags
        spectra: Samples, shape (n0, n1, n2, n3, n_wl)
        queries: Angle tuples, shape (N, 4)

    Returns:
        Interpolated spectra, shape (N, n_wl)
    """
    n_queries = queries.shape[0]
    n_wl = spectra.shape[4]
    result = np.zeros((n_queries, n_wl), dtype=np.float64)

    for q in prange(n_queries):
        l0, u0, lv0, uv0 = find_bounds(angles0, queries[q, 0], equal_interval[0])
        l1, u1, lv1, uv1 = find_bounds(angles1, queries[q, 1], equal_interval[1])
        l2, u2, lv2, uv2 = find_bounds(angles2, queries[q, 2], equal_interval[2])
        l3, u3, lv3, uv3 = find_bounds(angles3, queries[q, 3], equal_interval[3])

        t0 = _lerp_weight(lv0, uv0, queries[q, 0])
        t1 = _lerp_weight(lv1, uv1, queries[q, 1])
        t2 = _lerp_weight(lv2, uv2, queries[q, 2])
        t3 = _lerp_weight(lv3, uv3, queries[q, 3])

        for corner in range(16):
            if corner & 1:
                i0 = u0
                w0 = t0
            else:
                i0 = l0
                w0 = 1.0 - t0
            if corner & 2:
                i1 = u1
                w1 = t1
            else:
                i1 = l1
                w1 = 1.0 - t1
            if corner & 4:
                i2 = u2
                w2 = t2
            else:
                i2 = l2
                w2 = 1.0 - t2
            if corner & 8:
                i3 = u3
                w3 = t3
            else:
                i3 = l3
                w3 = 1.0 - t3

            weight = w0 * w1 * w2 * w3
            if weight == 0.0:
                continue
            for k in range(n_wl):
                result[q, k] += weight * spectra[i0, i1, i2, i3, k]

    return result


def interpolate(sample_set, angle0, angle1, angle2, angle3) -> np.ndarray:
    """Interpolate a sample set at arbitrary angles.

    Args:
        sample_set: SampleSet to read
        angle0..angle3: Query angles, broadcastable to a common shape

    Returns:
        Spectra of shape (..., num_wavelengths)
    """
    angle0, angle1, angle2, angle3 = np.broadcast_arrays(
        *(np.asarray(a, dtype=np.float64) for a in (angle0, angle1, angle2, angle3))
    )
    shape = angle0.shape
    queries = np.ascontiguousarray(
        np.stack([angle0, angle1, angle2, angle3], axis=-1).reshape(-1, 4)
    )

    result = interpolate_batch(
        np.ascontiguousarray(sample_set.angles0),
        np.ascontiguousarray(sample_set.angles1),
        np.ascontiguousarray(sample_set.angles2),
        np.ascontiguousarray(sample_set.angles3),
        np.array(sample_set.equal_interval_angles, dtype=np.bool_),
        np.ascontiguousarray(sample_set.spectra),
        queries,
    )
    return result.reshape(shape + (sample_set.num_wavelengths,))
