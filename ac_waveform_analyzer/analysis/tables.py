"""Tabular export of analyzed waveform sets (pandas).

Functions
---------
harmonic_rows
    One dict per (waveform, harmonic), ready for ``pd.DataFrame()``.
harmonics_frame
    Long-format harmonic table, optionally reshaped by a transform op list.
summary_frame
    One row per analyzed waveform: peak, RMS, phasor and THD.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ac_waveform_analyzer.analysis.harmonics import HarmonicTransform, Operation
from ac_waveform_analyzer.analysis.waveform_set import WaveformSet
from ac_waveform_analyzer.errors import DomainError
from ac_waveform_analyzer.models.phasor import rad2deg

HARMONIC_COLUMNS = ["label", "unit", "phase", "harmonic", "magnitude"]
SUMMARY_COLUMNS = [
    "label",
    "unit",
    "phase",
    "peak",
    "rms",
    "phasor_magnitude",
    "phasor_angle_deg",
    "thd",
]


def harmonic_rows(
    waveform_set: WaveformSet,
    operations: Optional[Sequence[Operation]] = None,
) -> List[dict]:
    """Build row-dicts for every harmonic of every analyzed waveform.

    Parameters
    ----------
    waveform_set:
        A set on which :meth:`WaveformSet.analyze` has been called. Waveforms
        without analysis are skipped.
    operations:
        Optional ordered transform applied to each series before export.
    """
    rows: List[dict] = []
    for wf, _, _ in waveform_set.iterate_waveforms():
        if wf.analysis is None:
            continue
        series = wf.analysis.harmonics()
        if operations:
            series = HarmonicTransform(series).transform(operations).harmonics
        for key, magnitude in series:
            rows.append(
                {
                    "label": wf.label,
                    "unit": wf.unit,
                    "phase": wf.phase,
                    "harmonic": key,
                    "magnitude": magnitude,
                }
            )
    return rows


def harmonics_frame(
    waveform_set: WaveformSet,
    operations: Optional[Sequence[Operation]] = None,
) -> pd.DataFrame:
    return pd.DataFrame(harmonic_rows(waveform_set, operations), columns=HARMONIC_COLUMNS)


def summary_frame(waveform_set: WaveformSet) -> Tuple[pd.DataFrame, List[str]]:
    """Per-waveform summary of the last analysis.

    Returns
    -------
    frame, warnings
        ``thd`` is NaN where the fundamental is zero; each such waveform adds
        a warning.
    """
    warnings: List[str] = []
    rows: List[dict] = []
    for wf, _, _ in waveform_set.iterate_waveforms():
        res = wf.analysis
        if res is None:
            continue
        try:
            thd = res.thd()
        except DomainError as e:
            thd = np.nan
            warnings.append(f"{wf.label or '<unlabelled>'}: {e}")
        rows.append(
            {
                "label": wf.label,
                "unit": wf.unit,
                "phase": wf.phase,
                "peak": res.peak,
                "rms": res.rms,
                "phasor_magnitude": res.phasor.magnitude,
                "phasor_angle_deg": rad2deg(res.phasor.angle),
                "thd": thd,
            }
        )
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS), warnings
