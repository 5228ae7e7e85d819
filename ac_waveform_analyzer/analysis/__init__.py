"""Analysis package.

Design principle:
  - Models (:mod:`ac_waveform_analyzer.models`) hold samples and values.
  - Analysis consumes sample windows and produces derived quantities
    (spectrum, phasor, THD, sliding RMS, scales).

The DFT has no notion of sampling frequency: harmonic order ``k`` means
``k`` cycles per analysis window, and the window is one cycle long.
"""

from .fourier import DftResult, forward
from .harmonics import HarmonicTransform, Label, Limit, Operation, PercentOf, Remove, display_operations
from .scaler import Scaler
from .spectral import HarmonicSeries, SpectralAnalysisResult, analyze_spectrum
from .waveform_set import (
    PhasorInfo,
    WaveformSet,
    analysis_window,
    estimate_samples_per_cycle,
    sliding_rms,
    waveform_cycle_range,
)

__all__ = [
    "DftResult",
    "forward",
    "HarmonicTransform",
    "Label",
    "Limit",
    "Operation",
    "PercentOf",
    "Remove",
    "display_operations",
    "Scaler",
    "HarmonicSeries",
    "SpectralAnalysisResult",
    "analyze_spectrum",
    "PhasorInfo",
    "WaveformSet",
    "analysis_window",
    "estimate_samples_per_cycle",
    "sliding_rms",
    "waveform_cycle_range",
]
