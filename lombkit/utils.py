"""This module contains auxiliary functions.

Small numeric helpers shared by the kernels. ``imin``, ``imax``, ``sign`` and
``swap`` are jitted so that they can be called from inside other Numba
kernels as well as from plain Python.
"""
import numpy as np
from numba import njit


@njit(cache=True)
def imin(a, b):
    return a if a < b else b


@njit(cache=True)
def imax(a, b):
    return a if a > b else b


@njit(cache=True)
def sign(a, b):
    """Magnitude of `a` with the sign of `b` (zero counts as negative)."""
    return abs(a) if b > 0.0 else -abs(a)


@njit(cache=True)
def swap(data, i, j):
    """Exchange data[i] and data[j] in place."""
    tmp = data[i]
    data[i] = data[j]
    data[j] = tmp


def is_power_of_two(n):
    n = int(n)
    return n > 0 and (n & (n - 1)) == 0


def next_pow2(x, start=1):
    """Smallest power of two >= x, starting the doubling from `start`."""
    n = int(start)
    while n < x:
        n <<= 1
    return n


def default_capacity(n):
    """
    Default workspace capacity (grid length) for a series of n samples.

    Mirrors the classic ingest buffers: the sample buffer starts at 512 and
    doubles until the series fits, and each grid is given 64 times that.
    """
    return 64 * next_pow2(max(int(n), 1), start=512)


def as_float_array(x, name="x"):
    """Contiguous 1D float64 view of `x`."""
    arr = np.ascontiguousarray(x, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"`{name}` must be one-dimensional, got shape {arr.shape}.")
    return arr
