"""Command-line summary of a waveform dataset.

Reads a dataset JSON file, analyzes one cycle of every waveform and prints
peak, RMS, phasor and THD per waveform. Non-fatal diagnostics go to stderr.

Examples
--------
python -m ac_waveform_analyzer.scripts.summarize capture.json --first-sample 64
python -m ac_waveform_analyzer.scripts.summarize capture.json --csv summary.csv --harmonics harmonics.csv
"""

from __future__ import annotations

import argparse
import sys
import textwrap
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from ac_waveform_analyzer.analysis.harmonics import display_operations
from ac_waveform_analyzer.analysis.tables import harmonics_frame, summary_frame
from ac_waveform_analyzer.analysis.waveform_set import WaveformSet
from ac_waveform_analyzer.errors import WaveformError
from ac_waveform_analyzer.ingest.dataset import read_dataset_json
from ac_waveform_analyzer.models.options import AnalysisOptions


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="python -m ac_waveform_analyzer.scripts.summarize",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Analyze one cycle of every waveform in a dataset file.

            The file must be a JSON object with 'samplesPerCycle' and a 'data'
            list of {samples, label, unit, phase} entries.
            """
        ),
    )
    p.add_argument("dataset", help="Dataset JSON file")
    p.add_argument("--first-sample", type=int, default=0, help="First sample of the analyzed cycle")
    p.add_argument("--csv", default=None, help="Write the summary table to this CSV file")
    p.add_argument(
        "--harmonics",
        default=None,
        help="Write harmonics (percent of fundamental, DC removed) to this CSV file",
    )
    p.add_argument("--limit", type=int, default=None, help="Highest harmonic in --harmonics output")
    p.add_argument(
        "--show-first",
        action="store_true",
        help="Keep the fundamental (100%%) in --harmonics output",
    )

    ns = p.parse_args(list(argv) if argv is not None else None)

    options = AnalysisOptions()
    try:
        dataset = read_dataset_json(ns.dataset)
        waveform_set = WaveformSet.create(dataset, options).analyze(ns.first_sample)
    except (WaveformError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    frame, warnings = summary_frame(waveform_set)
    for msg in list(waveform_set.warnings) + warnings:
        print(f"warning: {msg}", file=sys.stderr)

    with pd.option_context("display.width", 160, "display.max_columns", None):
        print(frame.to_string(index=False))

    if ns.csv:
        frame.to_csv(Path(ns.csv), index=False)
    if ns.harmonics:
        limit = ns.limit if ns.limit is not None else options.harmonics.limit
        ops = display_operations(limit=limit, show_first=ns.show_first or options.harmonics.show_first)
        harmonics_frame(waveform_set, ops).to_csv(Path(ns.harmonics), index=False)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
