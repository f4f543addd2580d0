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
core.py — fast Lomb-Scargle periodogram (Press & Rybicki extirpolation)
-----------------------------------------------------------------------------
Design notes
- The trigonometric sums of the Lomb-Scargle formula,
      sum_j (y_j - mean) exp(i w t_j)   and   sum_j exp(2 i w t_j),
  are evaluated for all frequencies at once: each sample is extirpolated onto
  a regular grid of ndim points at coordinate ck (data grid) and at the
  doubled coordinate 2*ck (window grid), and one real FFT of each grid yields
  every sum.
- Grid coordinates are zero-based: ck = ((t - tmin) * fac) mod ndim with
  fac = ndim / (span * ofac). Output bin j (1..nout, frequency j * df) reads
  the half-complex pair at indices (2j, 2j+1) of both grids.
- The window pair W gives the phase offset tau via tan(2 w tau) = Im W / Re W,
  written with half-angle identities so no arctangent is needed:
      cos(w tau) = sqrt(1/2 + Re W / (2|W|)),  sin(w tau) = +-sqrt(1/2 - ...)
- Grid sizing (ndim = 2 * nfreq, nfreq >= 64) and the false-alarm estimate
  follow Numerical Recipes' fasper.
- Kernels assume validated inputs; `plan_grid` and `fasper` validate first.
-----------------------------------------------------------------------------
"""
__all__ = [
    "MACC",
    "MIN_NFREQ",
    "DEFAULT_OFAC",
    "DEFAULT_HIFAC",
    "GridPlan",
    "FasperOutput",
    "plan_grid",
    "false_alarm_probability",
    "fasper",
    # jitted kernels
    "_extirpolate_grids",
    "_lomb_bins",
]

import math
import logging
from typing import NamedTuple, Optional, Tuple

import numpy as np
from numba import njit

from .errors import InsufficientData, InvalidParameter, WorkspaceOverflow
from .fft import _realft
from .spread import MAX_SPREAD, spread
from .stats import series_stats
from .utils import sign, next_pow2, default_capacity, as_float_array

logger = logging.getLogger(__name__)

MACC = 4             # extirpolation points per sample
MIN_NFREQ = 64       # smallest half-grid
DEFAULT_OFAC = 4.0
DEFAULT_HIFAC = 2.0


class GridPlan(NamedTuple):
    """
    FFT grid layout for one periodogram.

    n : int
        Number of samples.
    nout : int
        Number of output frequencies, floor(0.5 * ofac * hifac * n).
    nfreqt : int
        Minimum half-grid length, floor(ofac * hifac * n * macc).
    nfreq : int
        Half-grid length, a power of two >= max(64, nfreqt).
    ndim : int
        Grid length, 2 * nfreq.
    capacity : int
        Largest grid length the caller allowed.
    """
    n: int
    nout: int
    nfreqt: int
    nfreq: int
    ndim: int
    capacity: int


class FasperOutput(NamedTuple):
    """
    Raw output of `fasper`.

    f, power : (nout,) ndarray
        Frequencies j * df and normalised Lomb powers, j = 1..nout.
    jmax : int
        Zero-based index of the largest power.
    prob : float
        False-alarm probability of power[jmax].
    mean, variance : float
        Statistics of the sample values.
    df : float
        Frequency spacing, 1 / (span * ofac).
    span : float
        tmax - tmin.
    plan : GridPlan
        Grid layout used.
    """
    f: np.ndarray
    power: np.ndarray
    jmax: int
    prob: float
    mean: float
    variance: float
    df: float
    span: float
    plan: GridPlan


def _check_factor(value, name):
    try:
        v = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"`{name}` must be a positive float, got {value!r}.") from exc
    if not np.isfinite(v) or v <= 0.0:
        raise InvalidParameter(f"`{name}` must be a positive finite float, got {value!r}.")
    return v


def plan_grid(
    n: int,
    ofac: float = DEFAULT_OFAC,
    hifac: float = DEFAULT_HIFAC,
    capacity: Optional[int] = None,
    macc: int = MACC,
) -> GridPlan:
    """
    Size the FFT grids for n samples.

    Parameters
    ----------
    n : int
        Number of samples (>= 2).
    ofac : float
        Oversampling factor (> 0).
    hifac : float
        Highest frequency as a multiple of the mean Nyquist frequency (> 0).
    capacity : int, optional
        Largest acceptable grid length. Defaults to `default_capacity(n)`.
    macc : int
        Extirpolation points per sample (1..10).

    Returns
    -------
    GridPlan

    Raises
    ------
    InsufficientData
        n < 2.
    InvalidParameter
        Non-positive factors, bad `macc`/`capacity`, or no output frequency.
    WorkspaceOverflow
        The grid would exceed `capacity`.
    """
    n = int(n)
    if n < 2:
        raise InsufficientData(f"At least 2 samples are required, got {n}.")
    ofac = _check_factor(ofac, "ofac")
    hifac = _check_factor(hifac, "hifac")
    macc = int(macc)
    if macc < 1 or macc > MAX_SPREAD:
        raise InvalidParameter(f"`macc` must be in 1..{MAX_SPREAD}, got {macc}.")

    nout = int(0.5 * ofac * hifac * n)
    if nout < 1:
        raise InvalidParameter(
            f"ofac={ofac:g}, hifac={hifac:g} and n={n} give no output frequency."
        )
    nfreqt = int(ofac * hifac * n * macc)
    nfreq = next_pow2(nfreqt, start=MIN_NFREQ)
    ndim = nfreq << 1

    if capacity is None:
        cap = default_capacity(n)
    else:
        cap = int(capacity)
        if cap <= 0:
            raise InvalidParameter(f"`capacity` must be positive, got {capacity!r}.")
    if ndim > cap:
        raise WorkspaceOverflow(ndim, cap)

    return GridPlan(n, nout, nfreqt, nfreq, ndim, cap)


@njit(cache=True)
def _extirpolate_grids(t, y, ave, tmin, fac, wk1, wk2, macc):
    """
    Spread (y - ave) at ck onto wk1 and unit weights at 2*ck onto wk2.
    """
    fndim = float(wk1.shape[0])
    for j in range(t.shape[0]):
        ck = ((t[j] - tmin) * fac) % fndim
        ckk = (2.0 * ck) % fndim
        spread(y[j] - ave, wk1, ck, macc)
        spread(1.0, wk2, ckk, macc)


@njit(cache=True)
def _lomb_bins(wk1, wk2, n, nout, df, var, freq, power) -> Tuple[int, float]:
    """
    Evaluate the Lomb-Scargle formula from the transformed grids.

    Parameters
    ----------
    wk1, wk2 : (ndim,) ndarray
        Half-complex transforms of the data and window grids.
    n : int
        Number of samples.
    nout : int
        Number of output frequencies.
    df : float
        Frequency spacing.
    var : float
        Sample variance (normalisation).
    freq, power : (nout,) ndarray
        Output arrays, filled in place.

    Returns
    -------
    jmax, pmax : int, float
        Zero-based index and value of the largest power.
    """
    pmax = -1.0
    jmax = 0
    for j in range(1, nout + 1):
        k = 2 * j
        wre = wk2[k]
        wim = wk2[k + 1]
        hypo = math.sqrt(wre * wre + wim * wim)
        if hypo > 0.0:
            hc2wt = 0.5 * wre / hypo
            hs2wt = 0.5 * wim / hypo
        else:
            # no preferred phase: any rotation diagonalises the fit
            hc2wt = 0.0
            hs2wt = 0.0
        cwt = math.sqrt(max(0.5 + hc2wt, 0.0))
        swt = sign(math.sqrt(max(0.5 - hc2wt, 0.0)), hs2wt)
        # den = sum cos^2(w(t - tau)); n - den = sum sin^2(w(t - tau))
        den = 0.5 * n + hc2wt * wre + hs2wt * wim
        cproj = cwt * wk1[k] + swt * wk1[k + 1]
        sproj = cwt * wk1[k + 1] - swt * wk1[k]
        cterm = cproj * cproj / den if den > 0.0 else 0.0
        sterm = sproj * sproj / (n - den) if n - den > 0.0 else 0.0
        freq[j - 1] = j * df
        power[j - 1] = (cterm + sterm) / (2.0 * var)
        if power[j - 1] > pmax:
            pmax = power[j - 1]
            jmax = j - 1
    return jmax, pmax


def false_alarm_probability(pmax: float, nout: int, ofac: float) -> float:
    """
    Probability that noise alone yields a peak at least `pmax` high.

    The effective number of independent frequencies is 2 * nout / ofac
    (oversampled bins are correlated). The first-order estimate
    effm * exp(-pmax) is replaced by 1 - (1 - exp(-pmax))**effm once it
    exceeds 0.01.

    The result lies in [0, 1]. For very large `pmax`, exp(-pmax) underflows
    and exactly 0.0 is returned.
    """
    expy = math.exp(-pmax)
    effm = 2.0 * nout / ofac
    prob = effm * expy
    if prob > 0.01:
        prob = 1.0 - (1.0 - expy) ** effm
    return float(prob)


def fasper(
    t,
    y,
    ofac: float = DEFAULT_OFAC,
    hifac: float = DEFAULT_HIFAC,
    capacity: Optional[int] = None,
    macc: int = MACC,
) -> FasperOutput:
    """
    Fast Lomb-Scargle periodogram of irregularly sampled data.

    Parameters
    ----------
    t : (N,) array-like
        Sample times; need not be sorted, must span a non-zero interval.
    y : (N,) array-like
        Sample values.
    ofac : float, optional
        Oversampling factor. Defaults to 4.
    hifac : float, optional
        Highest frequency in units of the mean Nyquist frequency N / (2 span).
        Defaults to 2.
    capacity : int, optional
        Largest acceptable grid length (see `plan_grid`).
    macc : int, optional
        Extirpolation points per sample. Defaults to 4.

    Returns
    -------
    FasperOutput
    """
    t = as_float_array(t, "t")
    y = as_float_array(y, "y")
    if t.shape != y.shape:
        raise InvalidParameter(
            f"Times and values must have the same length, got {t.shape[0]} and {y.shape[0]}."
        )
    n = int(t.shape[0])
    if n < 2:
        raise InsufficientData(f"At least 2 samples are required, got {n}.")
    if not (np.all(np.isfinite(t)) and np.all(np.isfinite(y))):
        raise InvalidParameter("Input samples contain NaN/Inf.")
    tmin = float(t.min())
    span = float(t.max()) - tmin
    if not span > 0.0:
        raise InsufficientData(f"All {n} samples share the time {tmin!r}; the span is zero.")

    plan = plan_grid(n, ofac, hifac, capacity, macc)
    ofac = float(ofac)
    stats = series_stats(y)
    logger.debug(
        f"fasper: n={n} nout={plan.nout} ndim={plan.ndim} "
        f"mean={stats.mean:.6g} var={stats.variance:.6g}"
    )

    wk1 = np.zeros(plan.ndim, dtype=np.float64)
    wk2 = np.zeros(plan.ndim, dtype=np.float64)
    fac = plan.ndim / (span * ofac)
    _extirpolate_grids(t, y, stats.mean, tmin, fac, wk1, wk2, int(macc))
    _realft(wk1, plan.ndim, 1)
    _realft(wk2, plan.ndim, 1)

    df = 1.0 / (span * ofac)
    freq = np.empty(plan.nout, dtype=np.float64)
    power = np.empty(plan.nout, dtype=np.float64)
    jmax, pmax = _lomb_bins(wk1, wk2, n, plan.nout, df, stats.variance, freq, power)
    prob = false_alarm_probability(pmax, plan.nout, ofac)

    return FasperOutput(
        f=freq,
        power=power,
        jmax=int(jmax),
        prob=prob,
        mean=stats.mean,
        variance=stats.variance,
        df=df,
        span=span,
        plan=plan,
    )
