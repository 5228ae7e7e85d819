r"""DFT primitive for one analysis window.

Provides a single forward transform with the conventions the rest of the
package relies on. It wraps :func:`numpy.fft.rfft`.

Functions
---------
forward
    Spectrum magnitudes plus cosine/sine components for orders ``0..N//2``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ac_waveform_analyzer.models.waveform import as_samples


@dataclass(frozen=True)
class DftResult:
    """Forward transform of a window of ``N`` samples.

    Attributes
    ----------
    spectrum:
        Amplitude per harmonic order ``k = 0..N//2``:
        ``2 * sqrt(real[k]**2 + imag[k]**2) / N``. A sinusoid of amplitude ``A``
        completing ``k`` cycles in the window gives ``spectrum[k] == A``.
    real:
        Cosine correlation ``sum_n x[n] * cos(2*pi*k*n/N)``.
    imag:
        Sine correlation ``sum_n x[n] * sin(2*pi*k*n/N)`` (note the sign: this is
        minus the imaginary part of the usual ``exp(-j...)`` DFT).
    """

    spectrum: np.ndarray
    real: np.ndarray
    imag: np.ndarray

    @property
    def n_orders(self) -> int:
        return int(self.spectrum.size)


def forward(samples: Sequence[float]) -> DftResult:
    r"""Compute the forward DFT of one window.

    Parameters
    ----------
    samples:
        1D window of ``N >= 1`` samples.

    Returns
    -------
    DftResult
        Arrays of length ``N//2 + 1``.

    Notes
    -----
    The transform does not use a sampling frequency. Order ``k`` means
    ``k`` cycles per window, so with a one-cycle window order 1 is the
    fundamental and order ``k`` the ``k``-th harmonic.
    """
    x = as_samples(samples)
    N = x.size

    fft = np.fft.rfft(x)
    real = np.real(fft)
    imag = -np.imag(fft)
    spectrum = 2.0 * np.hypot(real, imag) / float(N)

    return DftResult(spectrum=spectrum, real=real, imag=imag)
