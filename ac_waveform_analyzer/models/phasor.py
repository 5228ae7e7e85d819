"""Phasor value type and angle helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union


def deg2rad(deg: float) -> float:
    return deg * math.pi / 180.0


def rad2deg(rad: float) -> float:
    """Convert radians to degrees folded into ``[-180, 180]``.

    The fold is a single +/-360 correction, which covers any angle in
    ``(-540, 540)`` degrees (e.g. the difference of two ``atan2`` results).
    """
    deg = rad * 180.0 / math.pi
    if deg > 180.0:
        deg -= 360.0
    if deg < -180.0:
        deg += 360.0
    return deg


@dataclass(frozen=True)
class Phasor:
    """Magnitude + angle summary of a waveform at the fundamental.

    Attributes
    ----------
    magnitude:
        Non-negative magnitude (the window RMS for analyzed waveforms).
    angle:
        Angle in radians, not normalized.
    label:
        Identifies the source waveform.
    """

    magnitude: float
    angle: float
    label: str = ""

    def relative(self, reference: Union["Phasor", float]) -> float:
        """Angle in radians relative to another phasor or to a raw angle.

        No wrapping to ``[-pi, pi]`` is applied; use :func:`rad2deg` for display.
        """
        if isinstance(reference, Phasor):
            return self.angle - reference.angle
        return self.angle - float(reference)

    @property
    def angle_deg(self) -> float:
        return rad2deg(self.angle)

    def __str__(self) -> str:
        return f"Phasor {self.label}: {self.magnitude} @ {rad2deg(self.angle)} deg"
