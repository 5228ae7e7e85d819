"""AC Waveform Analyzer -- spectral analysis and scaling of power-quality waveforms.

This package provides tools for:
- Holding voltage/current sample buffers with cached peak and RMS values
- Running a one-cycle DFT to obtain the harmonic spectrum, a phasor and THD
- Computing sliding (one-cycle window) RMS traces aligned to the samples
- Reshaping harmonic series for display (remove / limit / percent-of / relabel)
- Grouping many waveforms by unit and phase and tracking per-unit peak scales

Key principles:
- No rendering: style lookups are opaque values handed to the consumer
- Immutable samples: a Waveform never changes its buffer after construction
- Explicit configuration: options are passed in, never read from a global

Main subpackages:
- analysis: DFT primitive, spectral analysis, harmonic transforms, WaveformSet
- ingest: Dataset readers (dict / JSON / CSV / DataFrame)
- models: Data models (Waveform, Phasor, PlotStyle, AnalysisOptions)
- scripts: Command-line summary tool
"""

from .errors import ConfigurationError, DomainError, WaveformError

__all__ = [
    "ConfigurationError",
    "DomainError",
    "WaveformError",
]
