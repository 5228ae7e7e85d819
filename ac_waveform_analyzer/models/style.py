"""Plot style values handed to the presentation layer.

A :class:`PlotStyle` only describes a line (color, width, dash); nothing in
this package draws. Unset fields are None so that styles can be layered:
the unit style gives width/dash, the phase adds a color.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class PlotStyle:
    color: Optional[str] = None
    width: Optional[float] = None
    is_dashed: Optional[bool] = None

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> PlotStyle:
        """Build from ``{"color", "width", "isDashed"}``; unknown keys are ignored."""
        if not d:
            return cls()
        is_dashed = d.get("isDashed", d.get("is_dashed"))
        return cls(
            color=d.get("color"),
            width=d.get("width"),
            is_dashed=None if is_dashed is None else bool(is_dashed),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.color is not None:
            out["color"] = self.color
        if self.width is not None:
            out["width"] = self.width
        if self.is_dashed is not None:
            out["isDashed"] = self.is_dashed
        return out

    @classmethod
    def default(cls) -> PlotStyle:
        return cls(color="black", width=1, is_dashed=False)

    # Builders skip falsy arguments: with_width(0) leaves the width unset.
    def with_color(self, color: Optional[str]) -> PlotStyle:
        if not color:
            return self
        return replace(self, color=color)

    def with_width(self, width: Optional[float]) -> PlotStyle:
        if not width:
            return self
        return replace(self, width=width)

    def with_dashed(self, is_dashed: Optional[bool]) -> PlotStyle:
        return replace(self, is_dashed=is_dashed is True)

    def reset(self) -> PlotStyle:
        return PlotStyle()

    def merged(self, other: PlotStyle) -> PlotStyle:
        """Overlay the fields that ``other`` sets on top of this style."""
        out = self.with_color(other.color).with_width(other.width)
        if other.is_dashed is not None:
            out = out.with_dashed(other.is_dashed)
        return out

    def border_style(self) -> str:
        """CSS border shorthand, e.g. ``"2px dashed #AA4644 ;"``."""
        style = ""
        if self.width:
            style += f"{self.width}px "
        style += "dashed " if self.is_dashed else "solid "
        if self.color:
            style += f"{self.color} "
        return style + ";"

    def to_matplotlib_kwargs(self) -> Dict[str, Any]:
        kw: Dict[str, Any] = {}
        if self.color:
            kw["color"] = self.color
        if self.width:
            kw["linewidth"] = self.width
        if self.is_dashed is not None:
            kw["linestyle"] = "--" if self.is_dashed else "-"
        return kw
