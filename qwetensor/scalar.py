"""
Scalar trait.

A scalar dtype must have an additive identity, be closed under addition
and multiplication, convert from the literal zero and never fail on
arithmetic. Real numpy dtypes (integers and floats) qualify; complex, bool
and object dtypes do not.
"""

import math
import numbers

import numpy as np


def scalar_dtype(dtype) -> np.dtype:
    """
    Validate a scalar type and return it as a numpy dtype.

    Args:
        dtype: anything ``np.dtype`` understands (np.float64, "float32", int, ...)

    Returns:
        np.dtype: the normalized dtype
    """
    try:
        dt = np.dtype(dtype)
    except TypeError as err:
        raise TypeError(f"Not a scalar type: {dtype!r}") from err

    if dt.kind not in "iuf":
        raise TypeError(f"Scalar type must be a real integer or float dtype, got {dt}")
    return dt


def zero(dtype) -> np.generic:
    """Additive identity of ``dtype``."""
    return scalar_dtype(dtype).type(0)


def as_scalar(value, dtype) -> np.generic:
    """
    Convert ``value`` to a scalar of ``dtype``.

    Floats going into an integer dtype are truncated. NaN, infinities and
    values outside the integer range raise ValueError.
    """
    dt = scalar_dtype(dtype)
    if not isinstance(value, numbers.Real):
        raise TypeError(f"Expected a real scalar, got {type(value).__name__}")

    if dt.kind in "iu":
        info = np.iinfo(dt)
        if isinstance(value, numbers.Integral):
            representable = info.min <= int(value) <= info.max
        else:
            representable = math.isfinite(value) and info.min <= value <= info.max
        if not representable:
            raise ValueError(f"{value!r} is not representable as {dt}")
    return dt.type(value)
