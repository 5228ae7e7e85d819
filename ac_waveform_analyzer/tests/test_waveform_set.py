"""Tests for WaveformSet, sliding RMS and cycle estimation."""

from __future__ import annotations

import math

import numpy as np
import pytest

from ac_waveform_analyzer.analysis.spectral import analyze_spectrum
from ac_waveform_analyzer.analysis.waveform_set import (
    DEFAULT_SCALE_NAME,
    PhasorInfo,
    WaveformSet,
    analysis_window,
    estimate_samples_per_cycle,
    sliding_rms,
    waveform_cycle_range,
)
from ac_waveform_analyzer.errors import ConfigurationError, DomainError
from ac_waveform_analyzer.models.options import AnalysisOptions
from ac_waveform_analyzer.models.style import PlotStyle
from ac_waveform_analyzer.models.waveform import Waveform

SPC = 32


def _sine(amplitude: float, n_cycles: float, spc: int = SPC, phase: float = 0.0) -> np.ndarray:
    n = np.arange(int(n_cycles * spc))
    return amplitude * np.sin(2.0 * np.pi * n / spc + phase)


def _three_phase_dataset(n_cycles: int = 4) -> dict:
    data = []
    for i, name in enumerate(("1", "2", "3")):
        shift = -2.0 * np.pi * i / 3.0
        data.append({"samples": _sine(325.0, n_cycles, phase=shift).tolist(), "label": f"V{name}", "unit": "Voltage", "phase": name})
        data.append({"samples": _sine(10.0, n_cycles, phase=shift - 0.5).tolist(), "label": f"I{name}", "unit": "Current", "phase": name})
    return {"samplesPerCycle": SPC, "data": data}


# -----------------------------------------------------------------------
# Module-level helpers
# -----------------------------------------------------------------------


class TestSlidingRms:
    def test_length_and_trailing_missing(self) -> None:
        x = _sine(10.0, 5)
        out = sliding_rms(x, SPC)
        assert out.shape == x.shape
        assert np.all(np.isnan(out[-SPC:]))
        assert np.all(np.isfinite(out[:-SPC]))

    def test_values_are_one_cycle_rms(self) -> None:
        out = sliding_rms(_sine(10.0, 5, phase=0.2), SPC)
        np.testing.assert_allclose(out[:-SPC], 10.0 / math.sqrt(2.0), rtol=1e-12)

    def test_matches_window_rms(self) -> None:
        rng = np.random.default_rng(7)
        x = rng.normal(size=50)
        out = sliding_rms(x, 8)
        for i in (0, 13, 41):
            assert out[i] == pytest.approx(math.sqrt(np.mean(x[i : i + 8] ** 2)))

    def test_buffer_not_longer_than_cycle(self) -> None:
        assert np.all(np.isnan(sliding_rms(np.ones(SPC), SPC)))
        assert np.all(np.isnan(sliding_rms(np.ones(5), SPC)))

    def test_estimates_cycle_when_not_given(self) -> None:
        x = _sine(1.0, 4)
        out = sliding_rms(x)
        assert np.all(np.isnan(out[-SPC:]))
        assert np.isfinite(out[len(x) - SPC - 1])

    def test_invalid_cycle_length(self) -> None:
        with pytest.raises(ConfigurationError):
            sliding_rms(np.ones(10), 0)


class TestEstimateSamplesPerCycle:
    def test_four_cycles(self) -> None:
        x = _sine(230.0, 4)
        assert estimate_samples_per_cycle(x) == len(x) // 4

    def test_dominant_fundamental_with_harmonic(self) -> None:
        n = np.arange(5 * SPC)
        x = 230.0 * np.sin(2.0 * np.pi * n / SPC) + 30.0 * np.sin(6.0 * np.pi * n / SPC)
        assert estimate_samples_per_cycle(x) == SPC

    def test_fallback_to_whole_buffer(self) -> None:
        assert estimate_samples_per_cycle(np.zeros(100)) == 100


def test_waveform_cycle_range() -> None:
    assert waveform_cycle_range(128, 32) == (0, 96)
    assert waveform_cycle_range(10, 32) == (0, 0)


def test_analysis_window_clamps_to_end() -> None:
    assert analysis_window(100, 32, 0) == (0, 32)
    assert analysis_window(100, 32, 68) == (68, 100)
    assert analysis_window(100, 32, 90) == (68, 100)
    assert analysis_window(100, 32, -5) == (0, 32)
    assert analysis_window(32, 32, 10) == (0, 32)
    with pytest.raises(DomainError):
        analysis_window(31, 32, 0)


# -----------------------------------------------------------------------
# WaveformSet
# -----------------------------------------------------------------------


class TestWaveformSet:
    @pytest.mark.parametrize("bad", [None, 0, -4, 2.5, "32", True])
    def test_samples_per_cycle_required(self, bad) -> None:
        with pytest.raises(ConfigurationError):
            WaveformSet(bad)

    @pytest.mark.parametrize("value", [32, 32.0, np.int64(32)])
    def test_integral_samples_per_cycle_accepted(self, value) -> None:
        assert WaveformSet(value).samples_per_cycle == 32

    def test_add_waveform_tags_and_scales(self) -> None:
        ws = WaveformSet(SPC)
        va = Waveform(_sine(10.0, 2), "Va")
        vb = Waveform(_sine(7.0, 2), "Vb")
        ia = Waveform(_sine(2.0, 2), "Ia")
        assert ws.add_waveform(va, "V", 1).add_waveform(vb, "V", 2).add_waveform(ia, "A", 1) is ws

        assert (va.unit, va.phase) == ("V", 1)
        assert len(ws) == 3 and ws.waveform(1) is vb
        scales = dict(ws.iterate_scales())
        assert scales["V"] == pytest.approx(10.0, rel=1e-3)
        assert scales["A"] == pytest.approx(2.0, rel=1e-3)
        assert [name for name, _ in ws.iterate_scales()] == ["V", "A"]

    def test_waveform_without_unit_uses_default_scale(self) -> None:
        ws = WaveformSet(4).add_waveform(Waveform([1.0, -3.0, 2.0, 0.0], "x"))
        assert dict(ws.iterate_scales()) == {"default": 3.0}
        ((wf, style, scale_name),) = list(ws.iterate_waveforms())
        assert scale_name == "default"
        assert style == PlotStyle.default()

    def test_analyze_attaches_result(self) -> None:
        ws = WaveformSet(SPC).add_waveform(Waveform(_sine(10.0, 3, phase=0.5), "Va"), "V", 1)
        assert ws.phasor(0) is None
        ws.analyze()
        res = ws.waveform(0).analysis
        assert res.n_samples == SPC
        assert res.phasor.magnitude == pytest.approx(10.0 / math.sqrt(2.0))
        assert res.phasor.angle == pytest.approx(0.5)
        assert ws.phasor(0) is res.phasor
        assert ws.phasor(5) is None

    def test_analyze_window_offset(self) -> None:
        x = _sine(10.0, 3, phase=0.5)
        ws = WaveformSet(SPC).add_waveform(Waveform(x, "Va")).analyze(8)
        # 8 samples later is a quarter cycle later
        assert ws.phasor(0).angle == pytest.approx(0.5 + math.pi / 2)
        assert ws.warnings == []

    def test_analyze_clamps_and_warns(self) -> None:
        x = np.random.default_rng(1).normal(size=100)
        ws = WaveformSet(SPC).add_waveform(Waveform(x, "noise")).analyze(90)
        expected = analyze_spectrum(x[68:100], "noise")
        assert np.array_equal(ws.waveform(0).analysis.spectrum, expected.spectrum)
        assert len(ws.warnings) == 1

    def test_analyze_short_buffer(self) -> None:
        ws = WaveformSet(SPC).add_waveform(Waveform(np.ones(10), "short"))
        with pytest.raises(DomainError):
            ws.analyze()

    def test_failed_analyze_keeps_previous_results(self) -> None:
        ws = WaveformSet(SPC).add_waveform(Waveform(_sine(10.0, 3, phase=0.5), "Va"))
        before = ws.analyze().waveform(0).analysis
        ws.add_waveform(Waveform(np.ones(10), "short"))
        with pytest.raises(DomainError):
            ws.analyze(8)
        assert ws.waveform(0).analysis is before
        assert ws.phasor(0).angle == pytest.approx(0.5)
        assert ws.waveform(1).analysis is None
        assert ws.warnings == []

    def test_analyze_twice_is_deterministic(self) -> None:
        ws = WaveformSet(SPC).add_waveform(Waveform(_sine(5.0, 2, phase=1.0) + 0.3, "Va"))
        first = ws.analyze(3).waveform(0).analysis
        second = ws.analyze(3).waveform(0).analysis
        assert first is not second
        assert np.array_equal(first.spectrum, second.spectrum)
        assert first.phasor == second.phasor
        assert first.rms == second.rms

    def test_compute_rms(self) -> None:
        ws = WaveformSet(SPC).add_waveform(Waveform(_sine(10.0, 4), "Va"), "Voltage", "1")
        assert ws.rms_waveform(0) is None
        ws.compute_rms()
        rms = ws.rms_waveform(0)
        assert rms.label == "Va RMS"
        assert (rms.unit, rms.phase) == ("Voltage", "1")
        assert len(rms) == 4 * SPC
        assert np.all(np.isnan(rms.samples[-SPC:]))
        assert rms.peak == pytest.approx(10.0 / math.sqrt(2.0))

        # recomputing replaces rather than appends
        ws.compute_rms()
        assert len(list(ws.iterate_rms())) == 1

    def test_iterators_are_restartable(self) -> None:
        ws = WaveformSet.create(_three_phase_dataset()).analyze()
        assert len(list(ws.iterate_waveforms())) == 6
        assert len(list(ws.iterate_waveforms())) == 6
        assert len(list(ws.iterate_harmonics())) == 6
        assert len(list(ws.iterate_rms())) == 6
        assert len(list(ws.iterate_phasors())) == 6
        assert len(list(ws.iterate_phasors())) == 6

    def test_iterate_phasors_before_analyze(self) -> None:
        ws = WaveformSet.create(_three_phase_dataset())
        assert list(ws.iterate_phasors()) == []
        assert list(ws.iterate_harmonics()) == []

    def test_iterate_phasors_info(self) -> None:
        ws = WaveformSet(4)
        ws.add_waveform(Waveform([0.0, 1.0, 0.0, -1.0], "a"), "Voltage", "2")
        ws.add_waveform(Waveform([0.0, 1.0, 0.0, -1.0], "b"))
        ws.analyze()
        infos = [info for _, _, info in ws.iterate_phasors()]
        assert infos == [PhasorInfo("Voltage", "2"), PhasorInfo("default", -1)]

    def test_iterate_harmonics(self) -> None:
        ws = WaveformSet.create(_three_phase_dataset()).analyze()
        label, series, style, unit = next(ws.iterate_harmonics())
        assert label == "V1"
        assert unit == "Voltage"
        assert series[1][0] == 1
        assert series[1][1] == pytest.approx(325.0)

    def test_iterate_harmonics_untagged_unit_is_default_scale(self) -> None:
        ws = WaveformSet(4).add_waveform(Waveform([0.0, 2.0, 0.0, -2.0], "x")).analyze()
        ((_, _, _, unit),) = list(ws.iterate_harmonics())
        assert unit == DEFAULT_SCALE_NAME
        assert dict(ws.iterate_scales())[unit] == 2.0

    def test_relative_phasors(self) -> None:
        ws = WaveformSet.create(_three_phase_dataset()).analyze()
        rel = [r for _, r in ws.relative_phasors(0)]
        assert rel[0] == pytest.approx(0.0)
        assert rel[1] == pytest.approx(-0.5)
        assert rel[2] == pytest.approx(-2.0 * np.pi / 3.0)

    def test_styles_from_default_options(self) -> None:
        ws = WaveformSet.create(_three_phase_dataset())
        styles = {wf.label: style for wf, style, _ in ws.iterate_waveforms()}
        assert styles["V1"] == PlotStyle(color="#AA4644", width=2, is_dashed=False)
        assert styles["I3"] == PlotStyle(color="#4573A7", width=2, is_dashed=True)

    def test_unknown_unit_gets_default_style_with_phase_color(self) -> None:
        ws = WaveformSet(4).add_unit_style("Voltage", PlotStyle(width=3)).add_phase_color(1, "red")
        ws.add_waveform(Waveform([1.0, 2.0, 3.0, 4.0], "p"), "Power", 1)
        ((_, style, scale_name),) = list(ws.iterate_waveforms())
        assert style == PlotStyle(color="red", width=1, is_dashed=False)
        assert scale_name == "Power"

    def test_create_respects_show_rms(self) -> None:
        opts = AnalysisOptions.from_dict({"waveform": {"showRms": False}})
        ws = WaveformSet.create(_three_phase_dataset(), opts)
        assert ws.rms_waveform(0) is None
        assert list(ws.iterate_rms()) == []

    def test_create_requires_samples_per_cycle(self) -> None:
        ds = _three_phase_dataset()
        del ds["samplesPerCycle"]
        with pytest.raises(ConfigurationError):
            WaveformSet.create(ds)
