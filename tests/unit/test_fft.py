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

import numpy as np
import scipy.fft

from lombkit.fft import four1, realft
from lombkit.errors import InvalidParameter


def interleave(z):
    out = np.empty(2 * z.size)
    out[0::2] = z.real
    out[1::2] = z.imag
    return out


def deinterleave(data):
    return data[0::2] + 1j * data[1::2]


@pytest.mark.parametrize("nn", [1, 2, 8, 64, 1024])
def test_four1_matches_numpy(rng, nn):
    z = rng.normal(size=nn) + 1j * rng.normal(size=nn)

    forward = four1(interleave(z), isign=1)
    np.testing.assert_allclose(deinterleave(forward), nn * np.fft.ifft(z), rtol=1e-10, atol=1e-10)

    backward = four1(interleave(z), isign=-1)
    np.testing.assert_allclose(deinterleave(backward), np.fft.fft(z), rtol=1e-10, atol=1e-10)


def test_four1_round_trip_scales_by_nn(rng):
    nn = 256
    z = rng.normal(size=nn) + 1j * rng.normal(size=nn)
    data = interleave(z)
    four1(data, 1)
    four1(data, -1)
    np.testing.assert_allclose(deinterleave(data), nn * z, rtol=1e-10, atol=1e-10)


def test_four1_works_in_place():
    data = np.zeros(8)
    data[0] = 1.0
    out = four1(data)
    assert out is data
    # delta at 0 transforms to ones
    np.testing.assert_allclose(deinterleave(data), np.ones(4))


@pytest.mark.parametrize("n", [4, 8, 16, 128, 4096])
def test_realft_half_complex_layout(rng, n):
    x = rng.normal(size=n)
    data = realft(x.copy(), isign=1)
    ref = scipy.fft.rfft(x)

    assert data[0] == pytest.approx(ref[0].real, abs=1e-9)
    assert data[1] == pytest.approx(ref[n // 2].real, abs=1e-9)
    # positive-exponent transform: conjugate of the numpy convention
    np.testing.assert_allclose(
        deinterleave(data)[1:], np.conj(ref[1:n // 2]), rtol=1e-9, atol=1e-9
    )


@pytest.mark.parametrize("n", [4, 32, 1024])
def test_realft_inverse_scales_by_half_n(rng, n):
    x = rng.normal(size=n)
    data = x.copy()
    realft(data, 1)
    realft(data, -1)
    np.testing.assert_allclose(data, x * n / 2, rtol=1e-10, atol=1e-10)


def test_realft_of_cosine_concentrates_in_one_bin():
    n, k0 = 64, 5
    x = np.cos(2 * np.pi * k0 * np.arange(n) / n)
    data = realft(x.copy())
    spectrum = np.abs(deinterleave(data))
    spectrum[0] = 0.0
    assert np.argmax(spectrum) == k0
    assert spectrum[k0] == pytest.approx(n / 2)


@pytest.mark.parametrize(
    "length",
    [0, 6, 12, 3],
    ids=["empty", "six", "twelve", "odd"],
)
def test_four1_rejects_bad_lengths(length):
    with pytest.raises(InvalidParameter):
        four1(np.zeros(length))


@pytest.mark.parametrize("length", [2, 6, 24], ids=["too_short", "six", "not_pow2"])
def test_realft_rejects_bad_lengths(length):
    with pytest.raises(InvalidParameter):
        realft(np.zeros(length))


@pytest.mark.parametrize("func", [four1, realft], ids=["four1", "realft"])
@pytest.mark.parametrize("isign", [0, 2, -2])
def test_rejects_bad_isign(func, isign):
    with pytest.raises(InvalidParameter):
        func(np.zeros(16), isign)


@pytest.mark.parametrize("func", [four1, realft], ids=["four1", "realft"])
def test_rejects_non_float64_or_readonly(func):
    with pytest.raises(InvalidParameter):
        func(np.zeros(16, dtype=np.float32))
    with pytest.raises(InvalidParameter):
        func(np.zeros(32)[::2])
    ro = np.zeros(16)
    ro.flags.writeable = False
    with pytest.raises(InvalidParameter):
        func(ro)
