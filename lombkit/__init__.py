from . import _config  # noqa: F401  (environment defaults before numba loads)

from .analysis import (
    compute_periodogram,
    compute_periodograms,
    lomb,
    LombAnalyzer,
    PeriodogramResult,
    PeriodogramBin,
)
from .core import fasper, plan_grid, false_alarm_probability, GridPlan, MACC
from .errors import (
    LombError,
    InsufficientData,
    DegenerateVariance,
    InvalidParameter,
    WorkspaceOverflow,
)
from .fft import four1, realft
from .spread import extirpolate
from .stats import series_stats
