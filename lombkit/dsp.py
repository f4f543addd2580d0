""" This module contains presentation helpers for periodograms.

The periodogram is evaluated up to hifac times the mean Nyquist frequency, but
only the lower half of the bins (up to the mean Nyquist frequency for the
default hifac=2) is presented, so that results are comparable with
conventional FFT spectra.
Presented powers are normalised by nout / (2 * variance); with this scaling
the presented powers of a noise series sum (approximately) to its variance.
"""
import numpy as np

from .errors import InvalidParameter

MODES = ("amplitude", "power")
SMOOTH_WIDTH = 4


def crop_data(x, y, xmin, xmax):
    """ Crop data.

    Args:
        x: data in x
        y: data in y
        xmin: lower bound of x
        xmax: upper bound of x
    """
    x = np.asarray(x)
    y = np.asarray(y)

    mask = (x >= xmin) & (x <= xmax)
    return x[mask], y[mask]


def group_starts(maxout, size, width=SMOOTH_WIDTH):
    """
    First indices of the complete groups of `width` bins starting below `maxout`.

    Groups may reach past `maxout` but never past `size` (the number of bins
    actually computed).
    """
    starts = np.arange(0, int(maxout), width, dtype=np.int64)
    return starts[starts + width <= int(size)]


def present_spectrum(f, power, nout, variance, mode="amplitude", smooth=False):
    """
    Scale normalised Lomb powers for presentation.

    Args:
        f: frequencies of the nout computed bins
        power: normalised Lomb powers of the nout computed bins
        nout: number of computed bins
        variance: sample variance of the input
        mode: 'amplitude' (square root of the scaled power) or 'power'
        smooth: if True, sum groups of 4 adjacent bins

    Returns:
        (frequencies, magnitudes) up to the mean Nyquist frequency. Smoothed
        output reports the frequency of the first bin of each group.
    """
    if mode not in MODES:
        raise InvalidParameter(f"Presentation mode {mode!r} not recognized. Available: {list(MODES)}")
    f = np.asarray(f, dtype=np.float64)
    power = np.asarray(power, dtype=np.float64)
    maxout = int(nout) // 2

    if smooth:
        # four bins summed: the normalisation variance is quartered accordingly
        pwr = variance / SMOOTH_WIDTH
        starts = group_starts(maxout, power.shape[0])
        idx = starts[:, None] + np.arange(SMOOTH_WIDTH)
        vals = power[idx].sum(axis=1) / (nout / (8.0 * pwr))
        freqs = f[starts]
    else:
        vals = power[:maxout] / (nout / (2.0 * variance))
        freqs = f[:maxout]

    if mode == "amplitude":
        vals = np.sqrt(vals)
    return freqs, vals


def spectrum_rms(f, ps, pass_band=None):
    """ Compute the RMS as the square root of the summed presented power.

    Args:
        f: fourier frequency (Hz)
        ps: presented (raw, power mode) spectrum
        pass_band: [0] = min, [1] = max
    """
    if pass_band is None:
        pass_band = [-np.inf, np.inf]

    _, ps_tmp = crop_data(f, ps, pass_band[0], pass_band[1])
    return float(np.sqrt(np.sum(ps_tmp)))
