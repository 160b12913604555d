"""Utilities for ordered numeric sequences used as sample axes.

Axis arrays are plain 1D float64 numpy arrays sorted in ascending order.
``find_bounds`` is compiled with Numba so the interpolation kernels can call
it from inside their parallel loops.
"""

import numpy as np
from numba import njit

# Tolerances for equal-interval detection
EQUAL_INTERVAL_RTOL = 1e-5
EQUAL_INTERVAL_ATOL = 1e-6


def is_equal_interval(values) -> bool:
    """Check whether a sequence is 0, d, 2d, ..., (n-1)d.

    Sequences with two or fewer elements are never reported as equally
    spaced, since an O(1) lookup gains nothing over a search for them.

    Args:
        values: Ascending 1D sequence

    Returns:
        True if every element matches ``i * values[-1] / (n - 1)``
    """
    values = np.asarray(values, dtype=np.float64)
    n = values.shape[0]
    if n <= 2:
        return False

    interval = values[-1] / (n - 1)
    expected = interval * np.arange(n)
    return bool(np.all(np.isclose(values, expected,
                                  rtol=EQUAL_INTERVAL_RTOL,
                                  atol=EQUAL_INTERVAL_ATOL)))


def create_exponential(num_elements: int, max_value: float, exponent: float) -> np.ndarray:
    """Create a non-equal interval array from zero to ``max_value``.

    Interior points of a linear sequence are warped by raising their
    fractional position to ``exponent``. An exponent above 1 concentrates
    samples near zero; the end points are kept as is.

    Args:
        num_elements: Number of samples
        max_value: Last value of the sequence
        exponent: Warp exponent (1.0 gives a linear sequence)

    Returns:
        Array of shape (num_elements,)
    """
    values = np.linspace(0.0, max_value, num_elements, dtype=np.float64)
    if num_elements > 2:
        ratio = values[1:-1] / max_value
        values[1:-1] = np.power(ratio, exponent) * max_value
    return values


@njit(cache=True)
def find_bounds(values, value, equal_interval):
    """Find the indices and values of the samples bracketing ``value``.

    If ``value`` is out of range, the two nearest boundary samples are
    returned so the caller can extrapolate linearly.

    Args:
        values: Ascending float64 array
        value: Query value
        equal_interval: Whether ``values`` is equally spaced from zero

    Returns:
        Tuple of (lower_index, upper_index, lower_value, upper_value)
    """
    n = values.shape[0]
    if n == 1:
        return 0, 0, values[0], values[0]

    if value <= values[0]:
        lower = 0
    elif value >= values[n - 1]:
        lower = n - 2
    elif equal_interval:
        interval = values[n - 1] / (n - 1)
        lower = int(value / interval)
        if lower > n - 2:
            lower = n - 2
    else:
        lower = np.searchsorted(values, value, side='right') - 1
        if lower < 0:
            lower = 0
        elif lower > n - 2:
            lower = n - 2

    upper = lower + 1
    return lower, upper, values[lower], values[upper]
