"""Harmonic-series post-processing for display.

A harmonic series is a list of ``(key, magnitude)`` pairs in display order.
Keys start out as harmonic orders and may be replaced by text labels.

Operations
----------
Remove(keys)
    Drop every entry whose key is in ``keys``.
Limit(max_key)
    Keep leading entries until a numeric key exceeds ``max_key``. Expects
    ascending numeric keys; on a reordered series it keeps the first entries only.
PercentOf(key)
    Rescale all magnitudes to percent of the entry with ``key``. Skipped (and
    recorded in ``HarmonicTransform.warnings``) if that entry is missing or zero.
Label(pairs)
    Replace the key of the first entry matching each ``(key, text)`` pair by
    ``text`` when ``text`` is non-empty.

Operations are applied strictly in the order given to
:meth:`HarmonicTransform.transform`.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ac_waveform_analyzer.analysis.spectral import HarmonicEntry, HarmonicKey, HarmonicSeries


@dataclass(frozen=True)
class Remove:
    keys: Tuple[HarmonicKey, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))


@dataclass(frozen=True)
class Limit:
    max_key: float


@dataclass(frozen=True)
class PercentOf:
    key: HarmonicKey


@dataclass(frozen=True)
class Label:
    pairs: Tuple[Tuple[HarmonicKey, str], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "pairs", tuple((k, t) for k, t in self.pairs))


Operation = Union[Remove, Limit, PercentOf, Label]

NO_HARMONIC: HarmonicEntry = (-1, 0.0)


def _is_number(key: object) -> bool:
    return isinstance(key, Real) and not isinstance(key, bool)


class HarmonicTransform:
    """Chainable in-place reshaping of one harmonic series.

    The input is copied; the caller's list is never modified. Every operation
    returns ``self``::

        pct = HarmonicTransform(result.harmonics()).remove([0]).percent_of(1).limit(31).harmonics
    """

    def __init__(self, harmonics: Iterable[Sequence]) -> None:
        self.harmonics: HarmonicSeries = [(h[0], float(h[1])) for h in harmonics]
        self.warnings: List[str] = []
        self.last_percent_applied: Optional[bool] = None

    def _find(self, key: HarmonicKey) -> Optional[int]:
        for i, (k, _) in enumerate(self.harmonics):
            if k == key:
                return i
        return None

    def remove(self, keys: Iterable[HarmonicKey]) -> HarmonicTransform:
        drop = list(keys)
        self.harmonics = [h for h in self.harmonics if not any(h[0] == k for k in drop)]
        return self

    def limit(self, max_key: float) -> HarmonicTransform:
        if not _is_number(max_key) or max_key < 0:
            self.warnings.append(f"limit({max_key!r}) ignored: expected a non-negative number")
            return self
        limited: HarmonicSeries = []
        for h in self.harmonics:
            # text labels never terminate the scan
            if _is_number(h[0]) and h[0] > max_key:
                break
            limited.append(h)
        self.harmonics = limited
        return self

    def percent_of(self, key: HarmonicKey) -> HarmonicTransform:
        idx = self._find(key)
        ref = self.harmonics[idx][1] if idx is not None else 0.0
        if idx is None or ref == 0.0:
            reason = "not found" if idx is None else "zero magnitude"
            self.warnings.append(f"percent_of({key!r}) skipped: reference harmonic {reason}")
            self.last_percent_applied = False
            return self
        self.harmonics = [(k, 100.0 * v / ref) for k, v in self.harmonics]
        self.last_percent_applied = True
        return self

    def label(self, pairs: Iterable[Tuple[HarmonicKey, str]]) -> HarmonicTransform:
        for key, text in pairs:
            if not text:
                continue
            idx = self._find(key)
            if idx is not None:
                self.harmonics[idx] = (str(text), self.harmonics[idx][1])
        return self

    def largest(self) -> HarmonicEntry:
        """Entry with the largest magnitude; ``(-1, 0.0)`` if none is positive."""
        best = NO_HARMONIC
        for h in self.harmonics:
            if h[1] > best[1]:
                best = h
        return best

    def apply(self, op: Operation) -> HarmonicTransform:
        if isinstance(op, Remove):
            return self.remove(op.keys)
        if isinstance(op, Limit):
            return self.limit(op.max_key)
        if isinstance(op, PercentOf):
            return self.percent_of(op.key)
        if isinstance(op, Label):
            return self.label(op.pairs)
        raise TypeError(f"Unknown harmonic operation: {op!r}")

    def transform(self, operations: Iterable[Operation]) -> HarmonicTransform:
        for op in operations:
            self.apply(op)
        return self

    @classmethod
    def batch(
        cls,
        series: Iterable[Iterable[Sequence]],
        operations: Sequence[Operation],
    ) -> List[HarmonicSeries]:
        """Apply the same operation list to each series independently."""
        ops = list(operations)
        return [cls(s).transform(ops).harmonics for s in series]


def display_operations(limit: int = 31, show_first: bool = False, percent: bool = True) -> List[Operation]:
    """Operation list for a percent-of-fundamental bar chart.

    Drops DC, rescales to the fundamental, truncates at ``limit`` and hides
    harmonic 1 unless ``show_first``.
    """
    ops: List[Operation] = [Remove([0])]
    if percent:
        ops.append(PercentOf(1))
    ops.append(Limit(limit))
    if not show_first:
        ops.append(Remove([1]))
    return ops
