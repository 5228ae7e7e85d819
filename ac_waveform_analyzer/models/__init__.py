from .options import AnalysisOptions, HarmonicsOptions, PhasorOptions, PlotLabels, StyleDefinition, WaveformOptions
from .phasor import Phasor, deg2rad, rad2deg
from .style import PlotStyle
from .waveform import Waveform, compute_peak_and_rms

__all__ = [
    "AnalysisOptions",
    "HarmonicsOptions",
    "PhasorOptions",
    "PlotLabels",
    "StyleDefinition",
    "WaveformOptions",
    "Phasor",
    "deg2rad",
    "rad2deg",
    "PlotStyle",
    "Waveform",
    "compute_peak_and_rms",
]
