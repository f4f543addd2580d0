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

from lombkit import dsp
from lombkit.errors import InvalidParameter


# --- Tests for crop_data ---


def test_crop_data():
    x = np.arange(10.0)
    y = x**2
    xc, yc = dsp.crop_data(x, y, 2.0, 5.0)
    np.testing.assert_array_equal(xc, [2.0, 3.0, 4.0, 5.0])
    np.testing.assert_array_equal(yc, [4.0, 9.0, 16.0, 25.0])


# --- Tests for group_starts ---


@pytest.mark.parametrize(
    "maxout, size, expected",
    [
        (8, 16, [0, 4]),
        (10, 20, [0, 4, 8]),
        (10, 11, [0, 4]),
        (3, 6, [0]),
        (3, 3, []),
    ],
    ids=["aligned", "group_crosses_maxout", "group_past_size", "short", "nothing_complete"],
)
def test_group_starts(maxout, size, expected):
    np.testing.assert_array_equal(dsp.group_starts(maxout, size), expected)


# --- Tests for present_spectrum ---


@pytest.fixture
def lomb_bins():
    rng = np.random.default_rng(seed=3)
    nout = 22
    f = 0.1 * np.arange(1, nout + 1)
    power = rng.exponential(size=nout)
    return {"f": f, "power": power, "nout": nout, "variance": 2.5}


def test_present_raw_power(lomb_bins):
    b = lomb_bins
    fn, ps = dsp.present_spectrum(b["f"], b["power"], b["nout"], b["variance"], mode="power")
    maxout = b["nout"] // 2
    assert fn.shape == ps.shape == (maxout,)
    np.testing.assert_allclose(fn, b["f"][:maxout])
    np.testing.assert_allclose(ps, b["power"][:maxout] * 2.0 * b["variance"] / b["nout"])


def test_present_amplitude_is_root_of_power(lomb_bins):
    b = lomb_bins
    _, ps = dsp.present_spectrum(b["f"], b["power"], b["nout"], b["variance"], mode="power")
    _, amp = dsp.present_spectrum(b["f"], b["power"], b["nout"], b["variance"], mode="amplitude")
    np.testing.assert_allclose(amp, np.sqrt(ps))


def test_present_smoothed_sums_four_bins(lomb_bins):
    b = lomb_bins
    fs, pss = dsp.present_spectrum(
        b["f"], b["power"], b["nout"], b["variance"], mode="power", smooth=True
    )
    # maxout = 11: groups start at 0, 4, 8 and the last one reaches bin 11
    assert fs.shape == (3,)
    np.testing.assert_allclose(fs, b["f"][[0, 4, 8]])
    scaled = b["power"] * 2.0 * b["variance"] / b["nout"]
    np.testing.assert_allclose(pss, [scaled[0:4].sum(), scaled[4:8].sum(), scaled[8:12].sum()])


def test_present_unknown_mode(lomb_bins):
    b = lomb_bins
    with pytest.raises(InvalidParameter):
        dsp.present_spectrum(b["f"], b["power"], b["nout"], b["variance"], mode="db")


# --- Tests for spectrum_rms ---


def test_spectrum_rms():
    f = np.array([1.0, 2.0, 3.0, 4.0])
    ps = np.array([1.0, 4.0, 4.0, 16.0])
    assert dsp.spectrum_rms(f, ps) == approx(5.0)
    assert dsp.spectrum_rms(f, ps, pass_band=(1.5, 3.5)) == approx(np.sqrt(8.0))
