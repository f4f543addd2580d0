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
import time
import logging
import functools
from typing import List, Dict, Any, Union, Optional, Tuple, NamedTuple, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes
from tqdm import tqdm

from lombkit.dsp import MODES, present_spectrum, spectrum_rms
from lombkit.errors import InsufficientData, InvalidParameter
from lombkit.stats import series_stats
from .core import (
    MACC,
    DEFAULT_OFAC,
    DEFAULT_HIFAC,
    GridPlan,
    plan_grid,
    fasper,
)

logger = logging.getLogger(__name__)


class PeriodogramBin(NamedTuple):
    frequency: float
    power: float


class LombAnalyzer:
    """
    Configures and executes a Lomb-Scargle periodogram of irregular samples.

    The analyzer validates the samples and parameters and sizes the FFT grids
    eagerly, so that every caller error (too few samples, bad factors, grid
    larger than the allowed capacity) surfaces at construction. The
    computation itself is deferred until `.compute()` is called.
    """

    def __init__(
        self,
        data: Union[np.ndarray, pd.DataFrame, Sequence],
        *,
        ofac: float = DEFAULT_OFAC,
        hifac: float = DEFAULT_HIFAC,
        capacity: Optional[int] = None,
        macc: int = MACC,
        sort: bool = False,
        zero_mean: bool = False,
        verbose: bool = False,
    ):
        """
        Initializes the periodogram analyzer.

        Parameters
        ----------
        data : np.ndarray, pd.DataFrame or sequence
            Time/value pairs: a 2xN or Nx2 array (times first), a pair
            ``(t, y)`` of equal-length sequences, or a DataFrame whose first
            two columns are times and values.
        ofac : float, optional
            Oversampling factor; frequency spacing is 1 / (ofac * span).
            Defaults to 4.
        hifac : float, optional
            Highest computed frequency in units of the mean Nyquist
            frequency N / (2 * span). Defaults to 2.
        capacity : int, optional
            Largest FFT grid length (in float64 values) the computation may
            allocate. Defaults to 64 * max(512, next_pow2(N)).
        macc : int, optional
            Number of grid points each sample is extirpolated onto (1..10).
            Defaults to 4.
        sort : bool, optional
            If True, samples are sorted by time. Ordering does not change the
            result; it only affects the stored `t`/`y`. Defaults to False.
        zero_mean : bool, optional
            If True, the mean is subtracted from the stored values. The
            periodogram is the same either way. Defaults to False.
        verbose : bool, optional
            If True, logs progress and diagnostic information. Defaults to False.
        """
        self.verbose = bool(verbose)
        self.config: Dict[str, Any] = {
            "ofac": ofac,
            "hifac": hifac,
            "capacity": capacity,
            "macc": int(macc),
            "sort": bool(sort),
            "zero_mean": bool(zero_mean),
        }

        t, y = self._split_samples(data)

        if t.shape[0] < 2:
            raise InsufficientData(f"At least 2 samples are required, got {t.shape[0]}.")
        if not (np.all(np.isfinite(t)) and np.all(np.isfinite(y))):
            raise InvalidParameter("Input samples contain NaN/Inf.")

        if np.any(np.diff(t) < 0):
            if self.config["sort"]:
                order = np.argsort(t, kind="stable")
                t, y = t[order], y[order]
            elif self.verbose:
                logger.warning("Sample times are not sorted; proceeding (order does not affect the result).")

        if self.config["zero_mean"]:
            y = y - np.mean(y)

        self.t = np.ascontiguousarray(t)
        self.y = np.ascontiguousarray(y)
        self.nx = int(self.t.shape[0])
        self.config["N"] = self.nx

        span = float(self.t.max() - self.t.min())
        if not span > 0.0:
            raise InsufficientData(f"All {self.nx} samples share the same time; the span is zero.")
        self.stats = series_stats(self.y)

        # Size the grids now: parameter and capacity errors surface here
        self._plan_cache: GridPlan = plan_grid(
            self.nx,
            self.config["ofac"],
            self.config["hifac"],
            self.config["capacity"],
            self.config["macc"],
        )
        self.config["ofac"] = float(self.config["ofac"])
        self.config["hifac"] = float(self.config["hifac"])
        self.config["capacity"] = self._plan_cache.capacity

        if self.verbose:
            logger.info(
                f"LombAnalyzer: N={self.nx} | span={span:g} | "
                f"ofac={self.config['ofac']:g} | hifac={self.config['hifac']:g} | "
                f"nout={self._plan_cache.nout} | ndim={self._plan_cache.ndim} "
                f"(capacity {self._plan_cache.capacity})"
            )

    @staticmethod
    def _split_samples(data) -> Tuple[np.ndarray, np.ndarray]:
        """Return contiguous float64 (t, y) from the accepted input layouts."""
        if isinstance(data, pd.DataFrame):
            if data.shape[1] < 2:
                raise ValueError("DataFrame input needs a time column and a value column.")
            t = data.iloc[:, 0].to_numpy(dtype=np.float64)
            y = data.iloc[:, 1].to_numpy(dtype=np.float64)
            return t, y

        x = np.asarray(data, dtype=np.float64)
        if x.ndim != 2 or (x.shape[0] != 2 and x.shape[1] != 2):
            raise ValueError("Input data must be a 2xN/Nx2 array of (time, value) pairs.")
        if x.shape[0] == 2:
            # 2xN, or the ambiguous 2x2 case: prefer rows = (t, y)
            t, y = x[0], x[1]
        else:
            t, y = x[:, 0], x[:, 1]
        return (np.ascontiguousarray(t, dtype=np.float64),
                np.ascontiguousarray(y, dtype=np.float64))

    def plan(self) -> GridPlan:
        """
        Returns the grid layout (nout, ndim, ...) used by `compute()`.
        """
        return self._plan_cache

    def compute(self) -> "PeriodogramResult":
        """
        Executes the periodogram and returns a PeriodogramResult object.

        Returns
        -------
        PeriodogramResult
            An object containing the periodogram, its peak and false-alarm
            probability, and presentation helpers.
        """
        plan = self.plan()
        if self.verbose:
            logger.info(f"Computing {plan.nout} frequencies on a {plan.ndim}-point grid...")

        t0 = time.perf_counter()
        out = fasper(
            self.t,
            self.y,
            ofac=self.config["ofac"],
            hifac=self.config["hifac"],
            capacity=self.config["capacity"],
            macc=self.config["macc"],
        )
        t_total = time.perf_counter() - t0

        results = {
            "f": out.f,
            "power": out.power,
            "jmax": out.jmax,
            "fap": out.prob,
            "mean": out.mean,
            "variance": out.variance,
            "df": out.df,
            "span": out.span,
            "nout": out.plan.nout,
            "ndim": out.plan.ndim,
            "n": self.nx,
            "compute_t": t_total,
        }
        result = PeriodogramResult(results, self.config)

        if self.verbose:
            logger.info(
                f"Computation completed in {t_total:.3f} seconds: peak at "
                f"f={result.peak_frequency:.6g} (power {result.peak_power:.4g}, "
                f"false-alarm probability {result.fap:.3g})."
            )
            if out.jmax >= out.plan.nout // 2:
                logger.warning(
                    "Periodogram peak lies in the upper half of the computed bins; "
                    "it is not part of the presented spectrum."
                )
        return result


class PeriodogramResult:
    """
    An immutable container for the results of a Lomb-Scargle periodogram.

    Attributes
    ----------
    f : np.ndarray
        Frequencies j * df of the nout computed bins.
    power : np.ndarray
        Normalised Lomb power of each bin (unit mean for Gaussian noise).
    peak_index : int
        Zero-based index of the largest power.
    peak_frequency, peak_power : float
        Frequency and power at `peak_index`.
    fap : float
        False-alarm probability of the peak.
    variance : float
        Sample variance used for normalisation.
    fn : np.ndarray
        Frequencies up to the mean Nyquist frequency (the presented band).
    ps, amp : np.ndarray
        Presented power and amplitude over `fn`.
    f_smooth, ps_smooth, amp_smooth : np.ndarray
        4-bin smoothed presentation.
    ... and others. Use tab-completion to explore.
    """

    def __init__(self, results_dict: Dict[str, Any], config_dict: Dict[str, Any]):
        """Initializes the result object."""
        self._data = results_dict
        self._config = dict(config_dict)
        self._cache: Dict[str, Any] = {}

    def __getattr__(self, name: str) -> Any:
        """Lazy computation and caching of derived quantities."""
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._cache:
            return self._cache[name]

        val: Any = None
        # --- Peak ---
        if name == "peak_index":
            val = int(self._data["jmax"])
        elif name == "peak_frequency":
            val = float(self._data["f"][self.peak_index])
        elif name == "peak_power":
            val = float(self._data["power"][self.peak_index])
        elif name == "false_alarm_probability":
            val = self._data["fap"]

        # --- Derived per-bin quantities ---
        elif name == "period":
            val = 1.0 / self._data["f"]
        elif name == "bins":
            val = [PeriodogramBin(float(f), float(p))
                   for f, p in zip(self._data["f"], self._data["power"])]
        elif name == "maxout":
            val = int(self._data["nout"]) // 2
        elif name in ("ofac", "hifac", "capacity", "macc"):
            val = self._config[name]

        # --- Presentation (up to the mean Nyquist frequency) ---
        elif name in ("fn", "ps", "amp"):
            fn, ps = self.spectrum("power", smooth=False)
            self._cache["fn"] = fn
            self._cache["ps"] = ps
            self._cache["amp"] = np.sqrt(ps)
            val = self._cache[name]
        elif name in ("f_smooth", "ps_smooth", "amp_smooth"):
            fsm, pssm = self.spectrum("power", smooth=True)
            self._cache["f_smooth"] = fsm
            self._cache["ps_smooth"] = pssm
            self._cache["amp_smooth"] = np.sqrt(pssm)
            val = self._cache[name]

        elif name in self._data:
            val = self._data[name]
        else:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            )

        self._cache[name] = val
        return val

    def __dir__(self) -> List[str]:
        """Enhances tab-completion to include dynamic attributes."""
        default_attrs = super().__dir__()
        dynamic_attrs = [
            "peak_index",
            "peak_frequency",
            "peak_power",
            "false_alarm_probability",
            "period",
            "bins",
            "maxout",
            "ofac",
            "hifac",
            "capacity",
            "macc",
            "fn",
            "ps",
            "amp",
            "f_smooth",
            "ps_smooth",
            "amp_smooth",
        ]
        return sorted(
            list(set(default_attrs + list(self._data.keys()) + dynamic_attrs))
        )

    def __repr__(self) -> str:
        return (
            f"<PeriodogramResult n={self._data['n']} nout={self._data['nout']} "
            f"peak_frequency={self.peak_frequency:.6g} fap={self._data['fap']:.3g}>"
        )

    def spectrum(self, mode: str = "amplitude", smooth: bool = False) -> Tuple[np.ndarray, np.ndarray]:
        """
        Presented spectrum up to the mean Nyquist frequency.

        Parameters
        ----------
        mode : str, optional
            'amplitude' or 'power'. Defaults to 'amplitude'.
        smooth : bool, optional
            If True, adjacent groups of 4 bins are summed. Defaults to False.

        Returns
        -------
        tuple of np.ndarray
            (frequencies, magnitudes).
        """
        return present_spectrum(
            self._data["f"],
            self._data["power"],
            self._data["nout"],
            self._data["variance"],
            mode=mode,
            smooth=smooth,
        )

    def get_rms(self, pass_band: Optional[Tuple[float, float]] = None) -> float:
        """
        Computes the RMS of the signal from the presented power spectrum.

        Parameters
        ----------
        pass_band : tuple of (float, float), optional
            The frequency band `(f_min, f_max)` over which to compute the RMS.
            If None, the entire presented range is used. Defaults to None.

        Returns
        -------
        float
            The computed RMS value (approximately the standard deviation of
            the input for the full band).
        """
        return spectrum_rms(self.fn, self.ps, pass_band)

    def get_measurement(
        self, freq: Union[float, np.ndarray], which: str
    ) -> Union[float, np.ndarray]:
        """
        Evaluates a quantity at given frequencies via interpolation.

        Parameters
        ----------
        freq : float or np.ndarray
            The frequency or frequencies at which to evaluate the result.
        which : str
            The name of the quantity to retrieve (e.g., 'power', 'amp', 'ps').

        Returns
        -------
        float or np.ndarray
            The interpolated value(s).
        """
        target = getattr(self, which)
        if which in ("power", "period"):
            x = self.f
        elif which.endswith("_smooth"):
            x = self.f_smooth
        else:
            x = self.fn
        return np.interp(freq, x, target)

    def to_dataframe(self, presented: bool = False) -> pd.DataFrame:
        """
        Exports the periodogram to a pandas DataFrame indexed by frequency.

        Parameters
        ----------
        presented : bool, optional
            If False, all nout bins with their normalised power and period.
            If True, the presented band with power ('ps') and amplitude
            ('amp'). Defaults to False.

        Returns
        -------
        pd.DataFrame
        """
        if presented:
            df_dict = {"f": self.fn, "ps": self.ps, "amp": self.amp}
        else:
            df_dict = {"f": self.f, "power": self.power, "period": self.period}
        return pd.DataFrame(df_dict).set_index("f")

    def plot(
        self,
        which: str = "amp",
        *,
        ax: Optional[Axes] = None,
        ylabel: Optional[str] = None,
        logy: bool = False,
        mark_peak: bool = True,
        **kwargs,
    ) -> Tuple[Figure, Axes]:
        """
        Plots one of the periodogram quantities against frequency.

        Parameters
        ----------
        which : str, optional
            'power' (normalised, all bins), 'ps', 'amp', 'ps_smooth' or
            'amp_smooth'. Defaults to 'amp'.
        ax : matplotlib.axes.Axes, optional
            An existing Axes object to plot on. If None, a new Figure and Axes
            are created. Defaults to None.
        ylabel : str, optional
            Custom label for the y-axis. Defaults to None.
        logy : bool, optional
            Logarithmic y-axis. Defaults to False.
        mark_peak : bool, optional
            Annotate the periodogram peak if it lies in the plotted band.
            Defaults to True.
        **kwargs
            Additional keyword arguments passed to `Axes.plot`.

        Returns
        -------
        tuple
            The matplotlib Figure and Axes.
        """
        plot_options = {
            "power": (self.f, self.power, "Normalized Lomb power"),
            "ps": (self.fn, self.ps, "Power"),
            "amp": (self.fn, self.amp, "Amplitude"),
            "ps_smooth": (self.f_smooth, self.ps_smooth, "Power (smoothed)"),
            "amp_smooth": (self.f_smooth, self.amp_smooth, "Amplitude (smoothed)"),
        }
        if which not in plot_options:
            raise ValueError(
                f"Plot type '{which}' not recognized. Available options are: {list(plot_options.keys())}"
            )
        x, y, default_label = plot_options[which]

        fig, ax1 = (ax.get_figure(), ax) if ax is not None else plt.subplots()
        plot_func = ax1.semilogy if logy else ax1.plot
        plot_func(x, y, **kwargs)
        ax1.set_xlabel("Frequency (Hz)")
        ax1.set_ylabel(ylabel if ylabel is not None else default_label)

        if mark_peak and x.size and self.peak_frequency <= x[-1]:
            ax1.axvline(
                self.peak_frequency,
                linestyle="--",
                alpha=0.5,
                color=kwargs.get("color", "gray"),
                label=f"peak {self.peak_frequency:.4g} Hz (FAP {self.fap:.2g})",
            )
            ax1.legend()

        fig.tight_layout()
        return fig, ax1


def compute_periodogram(
    data: Union[np.ndarray, pd.DataFrame, Sequence], **kwargs
) -> PeriodogramResult:
    """
    Computes the Lomb-Scargle periodogram of irregular samples in a single call.

    Parameters
    ----------
    data : np.ndarray, pd.DataFrame or sequence
        Time/value pairs, in any layout accepted by `LombAnalyzer`.
    **kwargs :
        Additional keyword arguments passed directly to `LombAnalyzer`:
        - `ofac` (float): Oversampling factor.
        - `hifac` (float): Highest frequency factor.
        - `capacity` (int): Largest grid length allowed.
        - `macc` (int): Extirpolation points per sample.
        - `verbose` (bool): Enable verbose output.

    Returns
    -------
    PeriodogramResult
    """
    analyzer = LombAnalyzer(data, **kwargs)
    return analyzer.compute()


def lomb(t, y, **kwargs) -> PeriodogramResult:
    """Same as compute_periodogram, with times and values given separately."""
    t = np.asarray(t, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if t.ndim != 1 or t.shape != y.shape:
        raise ValueError(
            f"Times and values must be 1D arrays of the same length, got {t.shape} and {y.shape}."
        )
    return compute_periodogram(np.vstack([t, y]), **kwargs)


def _periodogram_task(data, **kwargs) -> PeriodogramResult:
    return compute_periodogram(data, **kwargs)


def compute_periodograms(
    datasets: Sequence[Any],
    *,
    pool=None,
    progress: bool = False,
    **kwargs,
) -> List[PeriodogramResult]:
    """
    Computes the periodograms of many independent series.

    Each series owns its own grids, so the work can be distributed freely.

    Parameters
    ----------
    datasets : sequence
        Time/value inputs, each in a layout accepted by `LombAnalyzer`.
    pool : multiprocessing.Pool-like, optional
        Pool whose `imap` distributes the series. Defaults to None (serial).
    progress : bool, optional
        Show a progress bar. Defaults to False.
    **kwargs :
        Passed to `LombAnalyzer` for every series.

    Returns
    -------
    list of PeriodogramResult
        In the order of `datasets`.
    """
    datasets = list(datasets)
    task = functools.partial(_periodogram_task, **kwargs)
    if pool is None:
        iterator = map(task, datasets)
    else:
        iterator = pool.imap(task, datasets)
    return list(tqdm(iterator, total=len(datasets), disable=not progress, desc="periodograms"))
