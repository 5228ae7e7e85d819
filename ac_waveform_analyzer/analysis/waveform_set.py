"""Collections of waveforms analyzed and scaled together.

A :class:`WaveformSet` groups waveforms by unit (scale) and phase (color),
tracks the per-unit peak through a :class:`~ac_waveform_analyzer.analysis.scaler.Scaler`,
runs the one-cycle spectral analysis and builds sliding-RMS companions.

Module-level helpers
--------------------
sliding_rms
    One-cycle moving RMS aligned to the input (NaN for the last cycle).
estimate_samples_per_cycle
    Cycle length from the dominant harmonic of the whole buffer.
waveform_cycle_range
    Valid start indices for a one-cycle analysis window.
analysis_window
    Start/stop of the one-cycle window, clamped to the buffer end.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from ac_waveform_analyzer.analysis.harmonics import HarmonicTransform
from ac_waveform_analyzer.analysis.scaler import Scaler
from ac_waveform_analyzer.analysis.spectral import HarmonicSeries, analyze_spectrum
from ac_waveform_analyzer.errors import DomainError
from ac_waveform_analyzer.models.options import AnalysisOptions
from ac_waveform_analyzer.models.phasor import Phasor
from ac_waveform_analyzer.models.style import PlotStyle
from ac_waveform_analyzer.models.waveform import Phase, Waveform, as_samples, check_samples_per_cycle

if TYPE_CHECKING:
    from ac_waveform_analyzer.ingest.dataset import WaveformDataset


DEFAULT_SCALE_NAME = "default"


@dataclass(frozen=True)
class PhasorInfo:
    """Grouping tags passed along with each phasor to the diagram."""

    unit: str
    phase: Union[str, int]


def estimate_samples_per_cycle(samples: Sequence[float]) -> int:
    """Estimate the cycle length of ``samples``.

    The whole buffer is analyzed and the largest harmonic above DC is taken
    as the fundamental: ``samples_per_cycle = N / order``, rounded to the
    nearest integer. Falls back to ``N`` (one cycle) if no harmonic above DC
    has a non-zero amplitude.

    Assumes the fundamental dominates and the buffer spans whole cycles.
    """
    x = as_samples(samples)
    n = int(x.size)
    result = analyze_spectrum(x)
    order, _ = HarmonicTransform(result.harmonics()).remove([0]).largest()
    if not isinstance(order, int) or order <= 0:
        return n
    return max(1, int(round(n / order)))


def sliding_rms(samples: Sequence[float], samples_per_cycle: Optional[int] = None) -> np.ndarray:
    """Moving one-cycle RMS aligned with ``samples``.

    Parameters
    ----------
    samples:
        Input buffer of length ``n``.
    samples_per_cycle:
        Window length; estimated with :func:`estimate_samples_per_cycle` if None.

    Returns
    -------
    numpy.ndarray
        Length ``n``. Entry ``i`` is the RMS of ``samples[i:i+samples_per_cycle]``
        for ``i < n - samples_per_cycle``; the last ``samples_per_cycle``
        entries are NaN (missing), so the trace lines up with the input samples.
    """
    x = as_samples(samples)
    if samples_per_cycle is None:
        spc = estimate_samples_per_cycle(x)
    else:
        spc = check_samples_per_cycle(samples_per_cycle)

    n = int(x.size)
    out = np.full(n, np.nan, dtype=np.float64)
    last_cycle_start = n - spc
    if last_cycle_start <= 0:
        return out

    windows = sliding_window_view(x, spc)[:last_cycle_start]
    out[:last_cycle_start] = np.sqrt(np.sum(windows * windows, axis=1) / spc)
    return out


def waveform_cycle_range(total_samples: int, samples_per_cycle: int) -> Tuple[int, int]:
    """Range ``(0, max_start)`` of start indices that still hold a full cycle."""
    return 0, max(0, int(total_samples) - int(samples_per_cycle))


def analysis_window(n_samples: int, samples_per_cycle: int, first_sample: int = 0) -> Tuple[int, int]:
    """Start/stop indices of a one-cycle analysis window.

    The window ``[first_sample, first_sample + samples_per_cycle)`` is moved
    back so that it ends at the buffer end when it would run past it; its
    length is always ``samples_per_cycle``. Negative starts are treated as 0.

    Raises
    ------
    DomainError
        If the buffer is shorter than one cycle.
    """
    if n_samples < samples_per_cycle:
        raise DomainError(
            f"Buffer of {n_samples} samples is shorter than one cycle ({samples_per_cycle} samples)"
        )
    start = max(0, int(first_sample or 0))
    stop = start + samples_per_cycle
    if stop > n_samples:
        stop = n_samples
        start = stop - samples_per_cycle
    return start, stop


class WaveformSet:
    """A set of waveforms to be analyzed and plotted together.

    Tracks scales by unit (peak of every waveform of that unit), base line
    styles by unit and colors by phase. Waveforms keep insertion order.

    Not thread-safe: do not call :meth:`add_waveform`, :meth:`compute_rms` or
    :meth:`analyze` while another thread iterates the set.
    """

    def __init__(self, samples_per_cycle: int) -> None:
        self._samples_per_cycle = check_samples_per_cycle(samples_per_cycle)
        self._waveforms: List[Waveform] = []
        self._rms_waveforms: List[Waveform] = []
        self._unit_styles: Dict[str, PlotStyle] = {}
        self._phase_colors: Dict[str, str] = {}
        self._unit_scales = Scaler()
        self.warnings: List[str] = []

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def samples_per_cycle(self) -> int:
        return self._samples_per_cycle

    @property
    def scales(self) -> Scaler:
        return self._unit_scales

    def __len__(self) -> int:
        return len(self._waveforms)

    def waveform(self, index: int) -> Waveform:
        return self._waveforms[index]

    def rms_waveform(self, index: int) -> Optional[Waveform]:
        """Sliding-RMS companion of waveform ``index`` (None before :meth:`compute_rms`)."""
        if not (-len(self._rms_waveforms) <= index < len(self._rms_waveforms)):
            return None
        return self._rms_waveforms[index]

    def phasor(self, index: int) -> Optional[Phasor]:
        """Phasor of waveform ``index``, None if it has not been analyzed."""
        if not (-len(self._waveforms) <= index < len(self._waveforms)):
            return None
        wf = self._waveforms[index]
        if wf.analysis is None:
            return None
        return wf.analysis.phasor

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add_unit_style(self, unit: str, style: PlotStyle) -> WaveformSet:
        self._unit_styles[str(unit)] = style
        return self

    def add_phase_color(self, phase: Phase, color: Optional[str]) -> WaveformSet:
        self._phase_colors[str(phase)] = color
        return self

    def add_waveform(self, waveform: Waveform, unit: Optional[str] = None, phase: Optional[Phase] = None) -> WaveformSet:
        """Tag ``waveform`` with unit/phase, append it and grow the unit scale."""
        waveform.unit = unit
        waveform.phase = phase
        self._waveforms.append(waveform)
        self._unit_scales.set_scale(self._scale_name(waveform), waveform.peak)
        return self

    def compute_rms(self) -> WaveformSet:
        """Build one sliding-RMS companion per waveform, labelled ``"<label> RMS"``.

        Replaces companions from an earlier call.
        """
        rms_waveforms = []
        for wf in self._waveforms:
            trace = sliding_rms(wf.samples, self._samples_per_cycle)
            rms_wf = Waveform(trace, f"{wf.label} RMS", unit=wf.unit, phase=wf.phase, allow_missing=True)
            rms_waveforms.append(rms_wf)
        self._rms_waveforms = rms_waveforms
        return self

    def analyze(self, first_sample: int = 0) -> WaveformSet:
        """Analyze one cycle of every waveform starting at ``first_sample``.

        Attaches a :class:`~ac_waveform_analyzer.analysis.spectral.SpectralAnalysisResult`
        as ``waveform.analysis``. Windows running past a buffer end are moved
        back (noted in :attr:`warnings`).

        The set is updated only if every waveform can be analyzed; on error
        all previous results and warnings are left as they were.

        Raises
        ------
        DomainError
            If a waveform holds fewer than ``samples_per_cycle`` samples.
        """
        spc = self._samples_per_cycle
        requested = max(0, int(first_sample or 0))
        windows = [analysis_window(wf.n_samples, spc, first_sample) for wf in self._waveforms]
        results = [
            analyze_spectrum(wf.samples[start:stop], wf.label)
            for wf, (start, stop) in zip(self._waveforms, windows)
        ]

        for wf, (start, _), result in zip(self._waveforms, windows, results):
            if start != requested:
                self.warnings.append(
                    f"{wf.label or '<unlabelled>'}: analysis window moved to start at {start} "
                    f"(requested {first_sample}, buffer has {wf.n_samples} samples)"
                )
            wf.analysis = result
        return self

    # ------------------------------------------------------------------
    # Style / scale lookup
    # ------------------------------------------------------------------

    @staticmethod
    def _scale_name(waveform: Waveform) -> str:
        return waveform.unit or DEFAULT_SCALE_NAME

    def plot_style(self, waveform: Waveform) -> PlotStyle:
        """Unit style (or the default style) with the phase color applied."""
        style = self._unit_styles.get(str(waveform.unit)) if waveform.unit is not None else None
        if style is None:
            style = PlotStyle.default()
        return style.with_color(self._phase_colors.get(str(waveform.phase)))

    # ------------------------------------------------------------------
    # Iteration (each call starts a fresh generator)
    # ------------------------------------------------------------------

    def iterate_scales(self) -> Iterator[Tuple[str, float]]:
        """``(unit, peak_scale)`` pairs in first-seen order."""
        return self._unit_scales.items()

    def iterate_waveforms(self) -> Iterator[Tuple[Waveform, PlotStyle, str]]:
        for wf in list(self._waveforms):
            yield wf, self.plot_style(wf), self._scale_name(wf)

    def iterate_rms(self) -> Iterator[Tuple[Waveform, PlotStyle, str]]:
        for wf in list(self._rms_waveforms):
            yield wf, self.plot_style(wf), self._scale_name(wf)

    def iterate_phasors(self) -> Iterator[Tuple[Phasor, PlotStyle, PhasorInfo]]:
        """Phasors of analyzed waveforms with their style and grouping tags."""
        for wf in list(self._waveforms):
            if wf.analysis is None:
                continue
            info = PhasorInfo(
                unit=wf.unit or DEFAULT_SCALE_NAME,
                phase=wf.phase if wf.phase not in (None, "") else -1,
            )
            yield wf.analysis.phasor, self.plot_style(wf), info

    def iterate_harmonics(self) -> Iterator[Tuple[str, HarmonicSeries, PlotStyle, str]]:
        """``(label, harmonic_series, style, unit)`` of analyzed waveforms."""
        for wf in list(self._waveforms):
            if wf.analysis is None:
                continue
            yield wf.label, wf.analysis.harmonics(), self.plot_style(wf), wf.unit or DEFAULT_SCALE_NAME

    def relative_phasors(self, reference: int = 0) -> Iterator[Tuple[Phasor, float]]:
        """Phasors with their angle relative to the phasor of waveform ``reference``.

        The reference angle is 0 if that waveform has not been analyzed.
        """
        ref = self.phasor(reference)
        ref_angle = ref.angle if ref is not None else 0.0
        for phasor, _, _ in self.iterate_phasors():
            yield phasor, phasor.relative(ref_angle)

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        dataset: Union["WaveformDataset", dict],
        options: Optional[AnalysisOptions] = None,
    ) -> WaveformSet:
        """Build a set from a dataset and options.

        ``dataset`` is a :class:`~ac_waveform_analyzer.ingest.dataset.WaveformDataset`
        or the equivalent dict (``{"samplesPerCycle": ..., "data": [...]}``).
        Sliding RMS is computed when ``options.waveform.show_rms`` is set.
        """
        from ac_waveform_analyzer.ingest.dataset import WaveformDataset

        if not isinstance(dataset, WaveformDataset):
            dataset = WaveformDataset.from_dict(dataset)
        options = options or AnalysisOptions()

        waveform_set = cls(dataset.samples_per_cycle)
        for defn in options.unit_styles:
            waveform_set.add_unit_style(defn.name, defn.style)
        for defn in options.phase_styles:
            waveform_set.add_phase_color(defn.name, defn.style.color)
        for rec in dataset.records:
            waveform_set.add_waveform(Waveform(rec.samples, rec.label), rec.unit, rec.phase)

        if options.waveform.show_rms:
            waveform_set.compute_rms()
        return waveform_set
