"""Analysis options -- the explicit configuration value for a WaveformSet.

An AnalysisOptions groups every recognized setting into one frozen dataclass.
It can be:

- Built with defaults (``AnalysisOptions()``)
- Overridden field-by-field via ``dataclasses.replace()``
- Built from / serialized to the camelCase dict layout used by dataset files
  (``unitStyles``, ``phaseStyles``, ``waveform.showRms``, ``harmonics.limit``, ...)

Only ``waveform.show_rms`` is consumed by the analysis layer. The harmonics,
phasor and labels groups are carried through untouched for the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from ac_waveform_analyzer.models.style import PlotStyle


@dataclass(frozen=True)
class StyleDefinition:
    """Named style entry (unit name or phase name)."""

    name: str
    style: PlotStyle


@dataclass(frozen=True)
class WaveformOptions:
    show_rms: bool = True
    cycle_highlight_color: str = "rgba(180,180,180,0.2)"


@dataclass(frozen=True)
class PhasorOptions:
    show_grid: bool = True


@dataclass(frozen=True)
class HarmonicsOptions:
    """Defaults for harmonic bar plots.

    Attributes
    ----------
    limit:
        Highest harmonic to show; large bar counts render poorly.
    show_first:
        Whether to show harmonic 1 when plotting percent-of-fundamental
        (it is always 100 %).
    """

    limit: int = 31
    show_first: bool = False


@dataclass(frozen=True)
class PlotLabels:
    percent_harmonic: str = "% of Fundamental"
    harmonic_plot_title: str = "Harmonics"
    waveform_plot_title: str = "Waveforms"
    drag_to_zoom: str = "Drag to zoom"
    restore_zoom: str = "Click to zoom out"
    no_data: str = "No Data"


DEFAULT_UNIT_STYLES: Tuple[StyleDefinition, ...] = (
    StyleDefinition("Voltage", PlotStyle(width=2, is_dashed=False)),
    StyleDefinition("Current", PlotStyle(width=2, is_dashed=True)),
)

DEFAULT_PHASE_STYLES: Tuple[StyleDefinition, ...] = (
    StyleDefinition("1", PlotStyle(color="#AA4644")),
    StyleDefinition("2", PlotStyle(color="#89A54E")),
    StyleDefinition("3", PlotStyle(color="#4573A7")),
    StyleDefinition("4", PlotStyle(color="#93A9D0")),
    StyleDefinition("5", PlotStyle(color="#D09392")),
)

# camelCase <-> snake_case for the nested groups
_WAVEFORM_KEYS = {"showRms": "show_rms", "cycleHighlightColor": "cycle_highlight_color"}
_PHASOR_KEYS = {"showGrid": "show_grid"}
_HARMONICS_KEYS = {"limit": "limit", "showFirst": "show_first"}
_LABEL_KEYS = {
    "percentHarmonic": "percent_harmonic",
    "harmonicPlotTitle": "harmonic_plot_title",
    "waveformPlotTitle": "waveform_plot_title",
    "dragToZoom": "drag_to_zoom",
    "restoreZoom": "restore_zoom",
    "noData": "no_data",
}


def _group_from_dict(default: Any, d: Optional[Mapping[str, Any]], keys: Dict[str, str]) -> Any:
    if not d:
        return default
    updates = {}
    for k, v in d.items():
        attr = keys.get(k, k if k in keys.values() else None)
        if attr is not None:
            updates[attr] = v
    return replace(default, **updates)


def _group_to_dict(group: Any, keys: Dict[str, str]) -> Dict[str, Any]:
    return {k: getattr(group, attr) for k, attr in keys.items()}


def _styles_from_list(items: Any) -> Tuple[StyleDefinition, ...]:
    out = []
    for item in items:
        if "name" not in item:
            raise ValueError(f"Style definition without 'name': {item!r}")
        out.append(StyleDefinition(str(item["name"]), PlotStyle.from_dict(item.get("style"))))
    return tuple(out)


@dataclass(frozen=True)
class AnalysisOptions:
    """Frozen configuration for building and displaying a WaveformSet.

    Fields
    ------
    unit_styles : tuple of StyleDefinition
        Base line style per physical unit.
    phase_styles : tuple of StyleDefinition
        Color per phase; only the style color is used.
    waveform : WaveformOptions
        ``show_rms`` controls whether ``WaveformSet.create`` computes sliding RMS.
    phasor, harmonics, labels :
        Presentation settings, passed through.
    """

    unit_styles: Tuple[StyleDefinition, ...] = DEFAULT_UNIT_STYLES
    phase_styles: Tuple[StyleDefinition, ...] = DEFAULT_PHASE_STYLES
    waveform: WaveformOptions = field(default_factory=WaveformOptions)
    phasor: PhasorOptions = field(default_factory=PhasorOptions)
    harmonics: HarmonicsOptions = field(default_factory=HarmonicsOptions)
    labels: PlotLabels = field(default_factory=PlotLabels)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> AnalysisOptions:
        """Build from a (possibly partial) camelCase dict; absent keys keep defaults."""
        base = cls()
        if not d:
            return base
        updates: Dict[str, Any] = {}
        if d.get("unitStyles") is not None:
            updates["unit_styles"] = _styles_from_list(d["unitStyles"])
        if d.get("phaseStyles") is not None:
            updates["phase_styles"] = _styles_from_list(d["phaseStyles"])
        updates["waveform"] = _group_from_dict(base.waveform, d.get("waveform"), _WAVEFORM_KEYS)
        updates["phasor"] = _group_from_dict(base.phasor, d.get("phasor"), _PHASOR_KEYS)
        updates["harmonics"] = _group_from_dict(base.harmonics, d.get("harmonics"), _HARMONICS_KEYS)
        updates["labels"] = _group_from_dict(base.labels, d.get("labels"), _LABEL_KEYS)
        return replace(base, **updates)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict in the same layout ``from_dict`` reads."""
        return {
            "unitStyles": [{"name": s.name, "style": s.style.to_dict()} for s in self.unit_styles],
            "phaseStyles": [{"name": s.name, "style": s.style.to_dict()} for s in self.phase_styles],
            "waveform": _group_to_dict(self.waveform, _WAVEFORM_KEYS),
            "phasor": _group_to_dict(self.phasor, _PHASOR_KEYS),
            "harmonics": _group_to_dict(self.harmonics, _HARMONICS_KEYS),
            "labels": _group_to_dict(self.labels, _LABEL_KEYS),
        }
