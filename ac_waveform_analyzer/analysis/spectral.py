"""One-cycle spectral analysis: spectrum, phasor, RMS and THD."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

import numpy as np

from ac_waveform_analyzer.analysis.fourier import forward
from ac_waveform_analyzer.errors import DomainError
from ac_waveform_analyzer.models.phasor import Phasor
from ac_waveform_analyzer.models.waveform import as_samples, compute_peak_and_rms

HarmonicKey = Union[int, str]
HarmonicEntry = Tuple[HarmonicKey, float]
HarmonicSeries = List[HarmonicEntry]


def compute_phase_angle(real: float, imag: float) -> float:
    # Argument order (real first) is the established convention: with the sine
    # correlation in ``imag`` this returns phi for A*sin(theta + phi).
    return math.atan2(real, imag)


@dataclass(frozen=True)
class SpectralAnalysisResult:
    """Spectral analysis of one window.

    Attributes
    ----------
    rms, peak:
        RMS and peak of the analyzed window.
    spectrum:
        Amplitude per harmonic order; ``spectrum[0]`` is DC, ``spectrum[1]`` the
        fundamental.
    phasor:
        Magnitude is the window RMS (the value power engineers expect), angle
        is the fundamental phase.
    n_samples:
        Window length.
    """

    rms: float
    peak: float
    spectrum: np.ndarray
    phasor: Phasor
    n_samples: int

    def harmonics(self) -> HarmonicSeries:
        """Harmonic series ``[(order, amplitude), ...]`` for every spectrum order."""
        return [(i, float(v)) for i, v in enumerate(self.spectrum)]

    def thd(self) -> float:
        """Total harmonic distortion ``sqrt(sum(H_k**2, k >= 2)) / H_1``.

        DC is excluded.

        Raises
        ------
        DomainError
            If the window has no fundamental term or its amplitude is zero.
        """
        s = np.asarray(self.spectrum, dtype=float)
        if s.size < 2:
            raise DomainError(f"THD undefined: spectrum has no fundamental (window of {self.n_samples} samples)")
        fundamental = float(s[1])
        if fundamental == 0.0:
            raise DomainError("THD undefined: fundamental amplitude is zero")
        return float(np.sqrt(np.sum(s[2:] ** 2)) / fundamental)


def analyze_spectrum(samples: Sequence[float], label: str = "") -> SpectralAnalysisResult:
    """Run the spectral analysis over one window.

    Parameters
    ----------
    samples:
        Non-empty window, normally exactly one cycle.
    label:
        Copied onto the resulting phasor.

    Returns
    -------
    SpectralAnalysisResult
        Deterministic: the same window always yields identical arrays.

    Raises
    ------
    DomainError
        If ``samples`` is empty.
    """
    x = as_samples(samples)
    peak, rms = compute_peak_and_rms(x)

    dft = forward(x)
    if dft.n_orders > 1:
        angle = compute_phase_angle(float(dft.real[1]), float(dft.imag[1]))
    else:
        angle = 0.0

    phasor = Phasor(magnitude=rms, angle=angle, label=label or "")
    spectrum = dft.spectrum.copy()
    spectrum.setflags(write=False)
    return SpectralAnalysisResult(
        rms=rms,
        peak=peak,
        spectrum=spectrum,
        phasor=phasor,
        n_samples=int(x.size),
    )
