"""Waveform dataset readers.

A dataset is the input of :meth:`WaveformSet.create`::

    {
      "samplesPerCycle": 32,
      "data": [
        {"samples": [...], "label": "Va", "unit": "Voltage", "phase": "1"},
        ...
      ]
    }

Readers validate this contract strictly and produce frozen
:class:`WaveformDataset` objects.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ac_waveform_analyzer.errors import ConfigurationError, DomainError
from ac_waveform_analyzer.models.waveform import Phase, as_samples, check_samples_per_cycle


@dataclass(frozen=True)
class WaveformRecord:
    """One waveform entry of a dataset."""

    samples: np.ndarray
    label: str = ""
    unit: Optional[str] = None
    phase: Optional[Phase] = None


@dataclass(frozen=True)
class WaveformDataset:
    """Validated dataset: a cycle length plus the waveform records, in file order."""

    samples_per_cycle: int
    records: Tuple[WaveformRecord, ...]

    @property
    def n_waveforms(self) -> int:
        return len(self.records)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> WaveformDataset:
        """Validate and convert the dict layout shown in the module docstring.

        Raises
        ------
        ConfigurationError
            ``samplesPerCycle`` missing or not a positive integral value, or ``data`` missing.
        DomainError
            A record has an empty ``samples`` list or a non-finite sample.
        """
        spc = check_samples_per_cycle(d.get("samplesPerCycle", d.get("samples_per_cycle")))

        data = d.get("data")
        if data is None:
            raise ConfigurationError("Dataset has no 'data' list.")

        records = []
        for i, item in enumerate(data):
            if "samples" not in item:
                raise ValueError(f"data[{i}] has no 'samples'")
            try:
                samples = as_samples(item["samples"])
            except DomainError as e:
                raise DomainError(f"data[{i}] ({item.get('label', '')!r}): {e}") from None
            records.append(
                WaveformRecord(
                    samples=samples,
                    label=str(item.get("label") or ""),
                    unit=item.get("unit"),
                    phase=item.get("phase"),
                )
            )
        return cls(samples_per_cycle=spc, records=tuple(records))

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict (arrays become lists)."""
        return {
            "samplesPerCycle": self.samples_per_cycle,
            "data": [
                {
                    "samples": r.samples.tolist(),
                    "label": r.label,
                    "unit": r.unit,
                    "phase": r.phase,
                }
                for r in self.records
            ],
        }


def read_dataset_json(path: Union[str, Path]) -> WaveformDataset:
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Dataset file not found: {p}")
    with p.open("r", encoding="utf-8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, dict):
        raise ValueError(f"{p.name}: expected a JSON object at top level, got {type(raw).__name__}")
    return WaveformDataset.from_dict(raw)


def dataset_from_frame(
    df: pd.DataFrame,
    samples_per_cycle: int,
    *,
    units: Optional[Mapping[str, str]] = None,
    phases: Optional[Mapping[str, Phase]] = None,
    columns: Optional[Sequence[str]] = None,
) -> WaveformDataset:
    """Build a dataset from a frame with one column per waveform.

    Parameters
    ----------
    df:
        Sample table; the column name becomes the waveform label.
    samples_per_cycle:
        Cycle length in samples.
    units, phases:
        Optional label -> unit / phase mappings. Unmapped columns get None.
    columns:
        Subset (and order) of columns to use. Defaults to all numeric columns.
    """
    if columns is None:
        columns = [c for c in df.columns if pd.api.types.is_numeric_dtype(df[c])]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"Missing columns in frame: {missing}")

    units = units or {}
    phases = phases or {}
    data = [
        {
            "samples": df[c].to_numpy(dtype=np.float64),
            "label": str(c),
            "unit": units.get(str(c)),
            "phase": phases.get(str(c)),
        }
        for c in columns
    ]
    return WaveformDataset.from_dict({"samplesPerCycle": samples_per_cycle, "data": data})


def read_dataset_csv(
    path: Union[str, Path],
    samples_per_cycle: int,
    *,
    units: Optional[Mapping[str, str]] = None,
    phases: Optional[Mapping[str, Phase]] = None,
) -> WaveformDataset:
    """Read a CSV with a header row and one column per waveform.

    Columns must all hold the same number of samples; a column that ends
    early leaves blank cells, which are rejected as non-finite samples.
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Dataset file not found: {p}")
    df = pd.read_csv(p)
    if df.empty:
        raise DomainError(f"{p.name}: no samples")
    return dataset_from_frame(df, samples_per_cycle, units=units, phases=phases)
