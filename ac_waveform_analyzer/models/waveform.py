from __future__ import annotations

from dataclasses import InitVar, dataclass, field
from typing import TYPE_CHECKING, Optional, Sequence, Tuple, Union

import numpy as np

from ac_waveform_analyzer.errors import ConfigurationError, DomainError

if TYPE_CHECKING:
    from ac_waveform_analyzer.analysis.spectral import SpectralAnalysisResult


Phase = Union[str, int]


def as_samples(samples: Sequence[float], *, allow_missing: bool = False) -> np.ndarray:
    """Return ``samples`` as a 1D float64 array.

    Empty input is rejected. Non-finite samples are rejected unless
    ``allow_missing``, in which case NaN (the missing marker) is accepted;
    infinities are never accepted.
    """
    x = np.asarray(samples, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError(f"samples must be 1D, got shape {x.shape}")
    if x.size == 0:
        raise DomainError("samples must not be empty (peak/RMS are undefined)")
    bad = ~np.isfinite(x)
    if allow_missing:
        bad &= ~np.isnan(x)
    if np.any(bad):
        idx = np.flatnonzero(bad)
        raise DomainError(f"samples must be finite; {idx.size} non-finite value(s), first at index {int(idx[0])}")
    return x


def check_samples_per_cycle(samples_per_cycle: object) -> int:
    """Validate a cycle length: an integral value > 0 (``32`` or ``32.0``)."""
    if samples_per_cycle is None:
        raise ConfigurationError("Samples per cycle must be provided.")
    if isinstance(samples_per_cycle, bool):
        raise ConfigurationError(f"samples_per_cycle must be an integer, got {samples_per_cycle!r}")
    try:
        spc = int(samples_per_cycle)
    except (TypeError, ValueError, OverflowError):
        raise ConfigurationError(f"samples_per_cycle must be an integer, got {samples_per_cycle!r}") from None
    if spc != samples_per_cycle or spc <= 0:
        raise ConfigurationError(f"samples_per_cycle must be a positive integer, got {samples_per_cycle!r}")
    return spc


def compute_peak_and_rms(samples: Sequence[float]) -> Tuple[float, float]:
    """Peak (largest absolute value) and RMS of ``samples`` in one pass.

    NaN entries mark missing samples and are ignored. A buffer holding only
    missing samples yields ``(nan, nan)``.

    Raises
    ------
    DomainError
        If ``samples`` is empty or holds an infinity.
    """
    x = as_samples(samples, allow_missing=True)
    x = x[~np.isnan(x)]
    if x.size == 0:
        return float("nan"), float("nan")
    peak = float(np.max(np.abs(x)))
    rms = float(np.sqrt(np.sum(x * x) / x.size))
    return peak, rms


@dataclass(eq=False)
class Waveform:
    """One sampled AC quantity (voltage or current trace).

    The sample buffer is copied into a read-only array at construction and
    never changes afterwards. Peak and RMS are computed once, eagerly, so
    concurrent readers never race on a lazy cache; a new value needs a new
    instance.

    Attributes
    ----------
    samples:
        Read-only float64 array of shape ``(n,)``, ``n >= 1``.
    label:
        Display label.
    unit, phase:
        Grouping tags, attached by :class:`~ac_waveform_analyzer.analysis.waveform_set.WaveformSet`.
    analysis:
        Result of the last one-cycle spectral analysis, or None.

    Samples must be finite. Sliding-RMS traces pass ``allow_missing=True`` to
    keep their NaN (missing) tail.
    """

    samples: np.ndarray
    label: str = ""
    unit: Optional[str] = None
    phase: Optional[Phase] = None
    analysis: Optional["SpectralAnalysisResult"] = None
    allow_missing: InitVar[bool] = False

    _peak: float = field(init=False, repr=False)
    _rms: float = field(init=False, repr=False)

    def __post_init__(self, allow_missing: bool) -> None:
        x = np.array(as_samples(self.samples, allow_missing=allow_missing), dtype=np.float64, copy=True)
        x.setflags(write=False)
        self.samples = x
        self.label = self.label or ""
        self._peak, self._rms = compute_peak_and_rms(x)

    @property
    def n_samples(self) -> int:
        return int(self.samples.size)

    @property
    def peak(self) -> float:
        return self._peak

    @property
    def rms(self) -> float:
        return self._rms

    def get_peak(self) -> float:
        return self._peak

    def get_rms(self) -> float:
        return self._rms

    def __len__(self) -> int:
        return self.n_samples
