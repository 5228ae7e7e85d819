from __future__ import annotations

import math
from typing import Dict, Iterator, Optional, Tuple


class Scaler:
    """Running maximum per named scale (e.g. one per physical unit).

    A scale only ever grows: ``set_scale`` stores ``max(existing, value)``.
    Names are kept in first-seen order.
    """

    def __init__(self) -> None:
        self._scales: Dict[str, float] = {}

    def set_scale(self, name: str, value: float) -> None:
        if math.isnan(value):
            return
        current = self._scales.get(name, float("-inf"))
        self._scales[name] = max(current, float(value))

    def get_scale(self, name: str, default: Optional[float] = None) -> Optional[float]:
        return self._scales.get(name, default)

    def items(self) -> Iterator[Tuple[str, float]]:
        for name in list(self._scales):
            yield name, self._scales[name]

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        return self.items()

    def __contains__(self, name: object) -> bool:
        return name in self._scales

    def __len__(self) -> int:
        return len(self._scales)
