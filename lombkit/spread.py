# BSD 3-Clause License

# Copyright (c) 2025, Miguel Dovale

# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:

# 1. Redistributions of source code must retain the above copyright notice, this
#    list of conditions and the following disclaimer.

# 2. Redistributions in binary form must reproduce the above copyright notice,
#    this list of conditions and the following disclaimer in the documentation
#    and/or other materials provided with the distribution.

# 3. Neither the name of the copyright holder nor the names of its
#    contributors may be used to endorse or promote products derived from
#    this software without specific prior written permission.

# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
# DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE
# FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
# DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
# SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
# OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
# OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

# This software may be subject to U.S. export control laws. By accepting this
# software, the user agrees to comply with all applicable U.S. export laws and
# regulations. User has the responsibility to obtain export licenses, or other
# export authority as may be required before exporting such information to
# foreign countries or providing access to foreign persons.
#
"""
spread.py — extirpolation of irregular samples onto a regular grid
-----------------------------------------------------------------------------
A sample of weight y at the non-integer grid coordinate x is distributed over
the m grid points nearest to x with Lagrange interpolation weights

    w_j = prod_{i != j} (x - i) / prod_{i != j} (j - i),   j = ilo..ihi

so that any smooth function sampled on the grid (in particular the complex
exponentials of a subsequent DFT) sums back to its value at x. The weights
form a partition of unity.

Indexing is zero-based: x lies in [0, n). The numerator prod_j (x - j) is
formed once and each weight divides out its own factor (x - j). The
denominators are built from the top of the window downwards:

    nden(ihi) = (m - 1)!
    nden(j)   = nden(j + 1) / (j + 1 - ilo) * (j - ihi)

i.e. (j - ilo)! * (-1)**(ihi - j) * (ihi - j)!, keeping the cost per sample
at O(m). The integer division is exact at every step.
-----------------------------------------------------------------------------
"""
import numpy as np
from numba import njit

from .errors import InvalidParameter
from .utils import imin, imax, as_float_array

__all__ = ["MAX_SPREAD", "spread", "extirpolate"]

MAX_SPREAD = 10

# nfac[m] = (m - 1)!, the denominator of the top weight of an m-point window
_NFAC = np.array([0, 1, 1, 2, 6, 24, 120, 720, 5040, 40320, 362880], dtype=np.int64)


@njit(cache=True)
def spread(y, yy, x, m):
    """
    Add weight `y` at coordinate `x` onto grid `yy` over `m` points.

    Caller guarantees 1 <= m <= min(MAX_SPREAD, len(yy)) and 0 <= x < len(yy).
    """
    n = yy.shape[0]
    ix = int(x)
    if x == float(ix):
        # exact grid point: no smearing
        yy[ix] += y
        return
    # window [ilo, ihi] centred on x, clamped so that it stays inside [0, n - 1]
    ilo = imin(imax(int(x - 0.5 * m + 1.0), 0), n - m)
    ihi = ilo + m - 1
    nden = _NFAC[m]
    fac = x - ilo
    for j in range(ilo + 1, ihi + 1):
        fac *= x - j
    yy[ihi] += y * fac / (nden * (x - ihi))
    for j in range(ihi - 1, ilo - 1, -1):
        nden = (nden // (j + 1 - ilo)) * (j - ihi)
        yy[j] += y * fac / (nden * (x - j))


@njit(cache=True)
def _spread_all(yy, x, y, m):
    for i in range(x.shape[0]):
        spread(y[i], yy, x[i], m)


def extirpolate(yy: np.ndarray, x, y, m: int = 4) -> np.ndarray:
    """
    Spread every (x[i], y[i]) onto the grid `yy` in place.

    Parameters
    ----------
    yy : (n,) ndarray of float64
        Grid accumulated into. Must be contiguous float64 so that the update
        happens in place.
    x : array-like
        Grid coordinates in [0, n).
    y : array-like or float
        Weights; a scalar is applied to every coordinate.
    m : int, optional
        Number of grid points each sample is spread over (1..10). Defaults to 4.

    Returns
    -------
    yy : ndarray
        The same grid, for chaining.
    """
    if not isinstance(yy, np.ndarray) or yy.dtype != np.float64 or yy.ndim != 1 \
            or not yy.flags.c_contiguous:
        raise InvalidParameter("Grid must be a contiguous 1D float64 ndarray.")
    m = int(m)
    if m < 1 or m > MAX_SPREAD:
        raise InvalidParameter(
            f"Spread width m={m} outside 1..{MAX_SPREAD} (factorial table exhausted)."
        )
    n = yy.shape[0]
    if m > n:
        raise InvalidParameter(f"Spread width m={m} exceeds grid length {n}.")
    xs = as_float_array(x, "x")
    ys = np.ascontiguousarray(np.broadcast_to(np.asarray(y, dtype=np.float64), xs.shape))
    if xs.size and (not np.all(np.isfinite(xs)) or xs.min() < 0.0 or xs.max() >= n):
        raise InvalidParameter(f"Grid coordinates must lie in [0, {n}).")
    _spread_all(yy, xs, ys, m)
    return yy
