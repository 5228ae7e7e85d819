"""Ingest package - dataset readers.

This package turns external waveform data into validated
:class:`~ac_waveform_analyzer.ingest.dataset.WaveformDataset` objects:
- plain dicts in the ``{"samplesPerCycle", "data": [...]}`` layout
- JSON files with the same layout
- pandas DataFrames / CSV files with one column per waveform

Design principle:
- Readers fail fast on a missing cycle length or an empty sample list
- No resampling or interpolation happens during ingestion
"""

from .dataset import (
    WaveformDataset,
    WaveformRecord,
    dataset_from_frame,
    read_dataset_csv,
    read_dataset_json,
)

__all__ = [
    "WaveformDataset",
    "WaveformRecord",
    "dataset_from_frame",
    "read_dataset_csv",
    "read_dataset_json",
]
