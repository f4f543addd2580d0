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
import pytest
from pytest import approx

import numpy as np

from lombkit.stats import avevar, series_stats, SeriesStats
from lombkit.errors import InsufficientData, DegenerateVariance, LombError


def test_series_stats_matches_numpy(rng):
    y = rng.normal(loc=3.0, scale=2.0, size=500)
    stats = series_stats(y)
    assert isinstance(stats, SeriesStats)
    assert stats.mean == approx(np.mean(y), rel=1e-12)
    assert stats.variance == approx(np.var(y, ddof=1), rel=1e-10)


def test_avevar_two_samples():
    ave, var = avevar(np.array([1.0, 3.0]))
    assert ave == approx(2.0)
    assert var == approx(2.0)


def test_large_offset_keeps_precision():
    """The corrected two-pass sum survives a large common offset."""
    y = 1e8 + np.array([0.0, 1.0, 2.0, 3.0])
    stats = series_stats(y)
    assert stats.variance == approx(np.var([0.0, 1.0, 2.0, 3.0], ddof=1), rel=1e-6)


@pytest.mark.parametrize(
    "values, exc",
    [
        ([], InsufficientData),
        ([1.0], InsufficientData),
        ([2.5, 2.5, 2.5], DegenerateVariance),
    ],
    ids=["empty", "single", "constant"],
)
def test_series_stats_errors(values, exc):
    with pytest.raises(exc):
        series_stats(values)
    # every engine error is also a LombError / ValueError
    with pytest.raises(LombError):
        series_stats(values)
    with pytest.raises(ValueError):
        series_stats(values)


def test_series_stats_rejects_2d():
    with pytest.raises(ValueError):
        series_stats(np.ones((2, 3)))
