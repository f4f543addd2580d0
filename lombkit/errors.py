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
errors.py — exceptions raised by the periodogram engine
-----------------------------------------------------------------------------
All errors derive from ``LombError`` (itself a ``ValueError``): every failure
of the computation is a problem with the caller's input or parameters, never
a transient condition, so retrying with the same arguments cannot succeed.
-----------------------------------------------------------------------------
"""
__all__ = [
    "LombError",
    "InsufficientData",
    "DegenerateVariance",
    "InvalidParameter",
    "WorkspaceOverflow",
]


class LombError(ValueError):
    """Base class for periodogram errors."""


class InsufficientData(LombError):
    """Fewer than two samples, or all samples share the same time."""


class DegenerateVariance(LombError):
    """The sample values have zero variance (constant series)."""


class InvalidParameter(LombError):
    """A parameter is out of range (ofac, hifac, spread width, FFT length...)."""


class WorkspaceOverflow(LombError):
    """
    The FFT grid required by (ofac, hifac, n) exceeds the declared capacity.

    Attributes
    ----------
    requested : int
        Grid length (number of float64 values) the computation needs.
    available : int
        Grid length the caller allowed.
    """

    def __init__(self, requested: int, available: int):
        self.requested = int(requested)
        self.available = int(available)
        super().__init__(
            f"Workspace too small: grid needs {self.requested} points but only "
            f"{self.available} are available. Lower `ofac`/`hifac` or raise `capacity`."
        )

    def __reduce__(self):
        return (type(self), (self.requested, self.available))
