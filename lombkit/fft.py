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
fft.py — radix-2 FFT engine
-----------------------------------------------------------------------------
Design notes
- Sign convention (Numerical Recipes): isign=+1 evaluates
      F_k = sum_j f_j exp(+2*pi*i*j*k/N)
  which is N * numpy.fft.ifft; isign=-1 evaluates numpy.fft.fft.
- Complex data are interleaved: data[2k] = Re z_k, data[2k+1] = Im z_k.
- Twiddle factors are advanced with the recurrence
      w <- w + w * (wpr + i*wpi),  wpr = -2 sin^2(theta/2), wpi = sin(theta)
  so that no trigonometric function is evaluated inside the butterflies.
- Real transforms use the half-complex layout:
      data[0] = F_0, data[1] = F_{N/2}, data[2k], data[2k+1] = Re F_k, Im F_k
  for k = 1..N/2-1.
- Kernels assume valid lengths; the public wrappers check them first.
-----------------------------------------------------------------------------
"""
import math

import numpy as np
from numba import njit

from .errors import InvalidParameter
from .utils import swap, is_power_of_two

__all__ = ["four1", "realft", "_four1", "_realft"]


@njit(cache=True)
def _four1(data, nn, isign):
    """
    In-place complex FFT of nn interleaved points (nn a power of two).
    """
    n = nn << 1

    # Bit-reversal permutation over complex slots. j walks the bit-reversed
    # counterpart of i (both as float offsets, step 2); each pair is swapped once.
    j = 0
    for i in range(0, n, 2):
        if j > i:
            swap(data, j, i)
            swap(data, j + 1, i + 1)
        m = nn
        while m >= 2 and j >= m:
            j -= m
            m >>= 1
        j += m

    # Danielson-Lanczos: transforms of length mmax/2 are combined into
    # length mmax (counted in floats) until the full length is reached.
    mmax = 2
    while n > mmax:
        istep = mmax << 1
        theta = isign * (2.0 * math.pi / mmax)
        wtemp = math.sin(0.5 * theta)
        wpr = -2.0 * wtemp * wtemp
        wpi = math.sin(theta)
        wr = 1.0
        wi = 0.0
        for m in range(0, mmax, 2):
            # i: even half element, k: its odd partner mmax floats ahead
            for i in range(m, n, istep):
                k = i + mmax
                tempr = wr * data[k] - wi * data[k + 1]
                tempi = wr * data[k + 1] + wi * data[k]
                data[k] = data[i] - tempr
                data[k + 1] = data[i + 1] - tempi
                data[i] += tempr
                data[i + 1] += tempi
            wtemp = wr
            wr = wr * wpr - wi * wpi + wr
            wi = wi * wpr + wtemp * wpi + wi
        mmax = istep


@njit(cache=True)
def _realft(data, n, isign):
    """
    In-place real FFT (isign=+1) or its inverse (isign=-1) of n points.

    The n reals are treated as n/2 complex values h_k = f_2k + i f_2k+1, one
    complex transform H is taken, and the two interleaved spectra are
    separated with
        F_k = 0.5 (H_k + conj H_{N/2-k}) - 0.5 i w^k (H_k - conj H_{N/2-k}).
    The inverse returns the input scaled by n/2.
    """
    c1 = 0.5
    theta = math.pi / (n >> 1)
    if isign == 1:
        c2 = -0.5
        _four1(data, n >> 1, 1)
    else:
        c2 = 0.5
        theta = -theta
    wtemp = math.sin(0.5 * theta)
    wpr = -2.0 * wtemp * wtemp
    wpi = math.sin(theta)
    wr = 1.0 + wpr
    wi = wpi
    # k runs over complex slots 1..n/4-1; (i1, i2) holds H_k and (i3, i4) its
    # mirror H_{N/2-k}. Slot 0 and the middle slot n/4 are handled outside.
    for k in range(1, n >> 2):
        i1 = 2 * k
        i2 = i1 + 1
        i3 = n - i1
        i4 = i3 + 1
        h1r = c1 * (data[i1] + data[i3])
        h1i = c1 * (data[i2] - data[i4])
        h2r = -c2 * (data[i2] + data[i4])
        h2i = c2 * (data[i1] - data[i3])
        data[i1] = h1r + wr * h2r - wi * h2i
        data[i2] = h1i + wr * h2i + wi * h2r
        data[i3] = h1r - wr * h2r + wi * h2i
        data[i4] = -h1i + wr * h2i + wi * h2r
        wtemp = wr
        wr = wr * wpr - wi * wpi + wr
        wi = wi * wpr + wtemp * wpi + wi
    if isign == 1:
        # F_0 and F_{N/2} are real; pack them into slot 0
        h1r = data[0]
        data[0] = h1r + data[1]
        data[1] = h1r - data[1]
    else:
        h1r = data[0]
        data[0] = c1 * (h1r + data[1])
        data[1] = c1 * (h1r - data[1])
        _four1(data, n >> 1, -1)


def _check_inplace(data, name="data"):
    if not isinstance(data, np.ndarray) or data.dtype != np.float64 or data.ndim != 1 \
            or not data.flags.c_contiguous or not data.flags.writeable:
        raise InvalidParameter(f"`{name}` must be a writeable contiguous 1D float64 ndarray.")


def _check_isign(isign):
    if isign not in (1, -1):
        raise InvalidParameter(f"`isign` must be +1 or -1, got {isign!r}.")
    return int(isign)


def four1(data: np.ndarray, isign: int = 1) -> np.ndarray:
    """
    In-place complex FFT of an interleaved real/imaginary array.

    Parameters
    ----------
    data : (2*nn,) ndarray of float64
        Interleaved complex samples; nn must be a power of two.
    isign : int
        +1 for exp(+2 pi i jk/nn), -1 for exp(-2 pi i jk/nn). No 1/nn scaling
        is applied in either direction.

    Returns
    -------
    data : ndarray
        The transformed array (same object).
    """
    _check_inplace(data)
    isign = _check_isign(isign)
    if data.shape[0] % 2:
        raise InvalidParameter(f"Interleaved complex data needs an even length, got {data.shape[0]}.")
    nn = data.shape[0] // 2
    if not is_power_of_two(nn):
        raise InvalidParameter(f"Number of complex points must be a power of two, got {nn}.")
    _four1(data, nn, isign)
    return data


def realft(data: np.ndarray, isign: int = 1) -> np.ndarray:
    """
    In-place FFT of a real series (isign=+1) into half-complex layout, or the
    inverse (isign=-1), which returns the series multiplied by n/2.

    Parameters
    ----------
    data : (n,) ndarray of float64
        n must be a power of two, at least 4.
    isign : int
        Direction, +1 (forward) or -1 (inverse).

    Returns
    -------
    data : ndarray
        The transformed array (same object).
    """
    _check_inplace(data)
    isign = _check_isign(isign)
    n = data.shape[0]
    if n < 4 or not is_power_of_two(n):
        raise InvalidParameter(f"Real FFT length must be a power of two >= 4, got {n}.")
    _realft(data, n, isign)
    return data
