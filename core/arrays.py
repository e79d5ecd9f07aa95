"""
core/arrays.py — Read-only float64 arrays for the frozen result types.

Result dataclasses hold numpy arrays but are meant to be shared between
threads by reference, so every stored array is float64 with its writeable
flag cleared.
"""

from __future__ import annotations

import numpy as np


def readonly_float64(values: np.ndarray, ndim: int | None = None) -> np.ndarray:
    """Return values as a read-only float64 array.

    A float64 array that owns its data and is already read-only is adopted
    as-is. Anything else is copied, so later writes through the caller's
    reference cannot reach the stored array.

    Args:
        values: Array-like input.
        ndim: Required number of dimensions, or None to accept any.

    Raises:
        ValueError: values does not have ndim dimensions.
    """
    if (
        isinstance(values, np.ndarray)
        and values.dtype == np.float64
        and values.flags.owndata
        and not values.flags.writeable
    ):
        arr = values
    else:
        arr = np.array(values, dtype=np.float64, copy=True)
    if ndim is not None and arr.ndim != ndim:
        raise ValueError(f"expected a {ndim}-D array, got shape {arr.shape}")
    arr.flags.writeable = False
    return arr
