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
stats.py — mean and variance of the sample values
-----------------------------------------------------------------------------
Two-pass corrected sum of squares: the second pass accumulates the squared
deviations together with the raw deviations, whose squared sum (ideally zero)
absorbs the rounding error of the first-pass mean:

    var = (sum(s**2) - sum(s)**2 / n) / (n - 1),   s = data - mean

The variance is the normalisation of every periodogram bin, so a zero value
is reported as an error instead of propagating a division by zero.
-----------------------------------------------------------------------------
"""
from typing import NamedTuple, Tuple

import numpy as np
from numba import njit

from .errors import InsufficientData, DegenerateVariance
from .utils import as_float_array

__all__ = ["SeriesStats", "avevar", "series_stats"]


class SeriesStats(NamedTuple):
    """
    mean : float
        Arithmetic mean of the values.
    variance : float
        Unbiased (n - 1) variance of the values.
    """
    mean: float
    variance: float


@njit(cache=True)
def avevar(data: np.ndarray) -> Tuple[float, float]:
    """
    Mean and corrected two-pass variance of `data` (n >= 2 assumed).
    """
    n = data.shape[0]
    ave = 0.0
    for j in range(n):
        ave += data[j]
    ave /= n
    var = 0.0
    ep = 0.0
    for j in range(n):
        s = data[j] - ave
        ep += s
        var += s * s
    var = (var - ep * ep / n) / (n - 1)
    return ave, var


def series_stats(values) -> SeriesStats:
    """
    Validated mean/variance of the sample values.

    Raises
    ------
    InsufficientData
        Fewer than two values.
    DegenerateVariance
        All values identical, or the variance does not come out positive.
    """
    y = as_float_array(values, "values")
    n = y.shape[0]
    if n < 2:
        raise InsufficientData(f"At least 2 samples are required, got {n}.")
    if np.all(y == y[0]):
        raise DegenerateVariance(
            f"All {n} sample values equal {y[0]!r}; the variance is zero."
        )
    ave, var = avevar(y)
    if not var > 0.0:
        raise DegenerateVariance(f"Sample variance evaluated to {var!r}.")
    return SeriesStats(float(ave), float(var))
