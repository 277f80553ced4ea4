from __future__ import annotations

import math

import numpy as np
import pytest

from common import settings
from common.errors import InvalidConfigurationError
from waves.functions import WaveComponent
from waves.modulation import ModulationKind, ModulationSpec
from waves.path import (
    PathSample,
    WaveSpec,
    exact_cycles,
    generate_wave_path,
    wave_angles,
    wave_turns,
)
from waves.taper import TaperKind, TaperSpec
from waves.transforms import TransformSpec


def _lateral(result, p1, p2) -> np.ndarray:  # noqa: ANN001
    """点列から線分法線方向の変位を逆算する。"""
    a = np.asarray(p1, dtype=np.float64)
    b = np.asarray(p2, dtype=np.float64)
    d = b - a
    length = float(np.hypot(*d))
    normal = np.array([d[1], -d[0]]) / length
    progress = np.linspace(0.0, 1.0, len(result))
    base = a + np.outer(progress, d)
    return (result.points - base) @ normal


@pytest.mark.parametrize("kind", ["sine", "cosine", "square", "triangle"])
@pytest.mark.parametrize("frequency", [0.01, 0.1, 0.37, 2.5])
@pytest.mark.parametrize("phase", [0.0, 1.0, -2.3, 17.0])
def test_loop_bidirectional_endpoints_match(kind: str, frequency: float, phase: float) -> None:
    p1, p2 = (12.5, -3.0), (211.0, 97.25)
    wave = WaveSpec(
        kind=kind,
        amplitude=7.3,
        frequency=frequency,
        phase=phase,
        loop_enabled=True,
        bidirectional_enabled=True,
    )
    r = generate_wave_path(p1, p2, 37, wave)
    assert abs(r.offsets[0] - r.offsets[-1]) <= 1e-9
    lat = _lateral(r, p1, p2)
    assert abs(lat[0] - lat[-1]) <= 1e-9


def test_exact_cycles_scenario() -> None:
    assert exact_cycles(0.1, 100.0, 30.0, True) == 1.0
    r = generate_wave_path((0, 0), (100, 0), 20, WaveSpec(frequency=0.1, loop_enabled=True))
    assert r.cycles == 1.0


@pytest.mark.parametrize(
    "frequency,length,loop,expected",
    [
        (0.1, 600.0, True, 2.0),
        (0.25, 300.0, True, 3.0),  # 2.5 は切り上げ
        (0.5, 45.0, True, 1.0),
        (0.37, 100.0, False, 0.37),
        (0.0, 100.0, True, 1.0),
        (-2.0, 100.0, False, 1.0),
        (float("nan"), 100.0, True, 1.0),
    ],
)
def test_exact_cycles_cases(frequency: float, length: float, loop: bool, expected: float) -> None:
    assert exact_cycles(frequency, length, 30.0, loop) == pytest.approx(expected)


def test_unit_length_defaults_to_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    wave = WaveSpec(frequency=0.3, loop_enabled=True)
    assert generate_wave_path((0, 0), (100, 0), 10, wave).cycles == 1.0
    monkeypatch.setenv("SG_WAVE_UNIT_LENGTH", "10")
    settings.reload_from_env()
    assert generate_wave_path((0, 0), (100, 0), 10, wave).cycles == 3.0
    assert generate_wave_path((0, 0), (100, 0), 10, wave, unit_length=30.0).cycles == 1.0


def test_zero_length_returns_single_point() -> None:
    r = generate_wave_path((3.0, 4.0), (3.0, 4.0), 50, WaveSpec(amplitude=10.0), base_width=2.5)
    assert len(r) == 1
    assert np.all(np.isfinite(r.points))
    assert list(r) == [PathSample((3.0, 4.0), 2.5)]


def test_segments_below_one_are_clamped() -> None:
    r = generate_wave_path((0, 0), (10, 0), 0, WaveSpec())
    assert len(r) == 2
    r = generate_wave_path((0, 0), (10, 0), -5, WaveSpec())
    assert len(r) == 2


def test_forward_wave_matches_closed_form() -> None:
    wave = WaveSpec(kind="sine", amplitude=4.0, frequency=0.75, phase=0.3)
    r = generate_wave_path((0, 0), (100, 0), 64, wave)
    p = np.linspace(0.0, 1.0, 65)
    expected = 4.0 * np.sin(p * 2 * math.pi * 0.75 + 0.3)
    np.testing.assert_allclose(r.offsets, expected, atol=1e-9)
    # 水平線の法線は (0, -1)
    np.testing.assert_allclose(r.points[:, 0], p * 100.0, atol=1e-9)
    np.testing.assert_allclose(r.points[:, 1], -expected, atol=1e-9)


def test_bidirectional_matches_blended_angle() -> None:
    c, phase = 3.0, 0.7
    p = np.linspace(0.0, 1.0, 101)
    forward = p * 2 * math.pi * c + phase
    reverse = (1 - p) * 2 * math.pi * c + phase + math.pi
    w = np.sin(p * math.pi)
    naive = forward * w + reverse * (1 - w)
    got = wave_angles(p, c, phase, bidirectional=True)
    np.testing.assert_allclose(np.sin(got), np.sin(naive), atol=1e-9)
    np.testing.assert_allclose(np.cos(got), np.cos(naive), atol=1e-9)
    assert got[0] == got[-1]


def test_animated_phase_uses_time() -> None:
    moving = WaveSpec(animated=True, speed=0.2, phase=0.1)
    still = WaveSpec(phase=0.1 + 1500.0 * 0.001 * 0.2)
    a = generate_wave_path((0, 0), (50, 50), 30, moving, time_ms=1500.0)
    b = generate_wave_path((0, 0), (50, 50), 30, still)
    np.testing.assert_allclose(a.points, b.points, atol=1e-9)


def test_square_wave_is_two_level() -> None:
    r = generate_wave_path((0, 0), (100, 0), 50, WaveSpec(kind="square", amplitude=3.0, frequency=2.0))
    assert set(np.round(np.abs(r.offsets), 9)) == {3.0}


def test_untapered_is_one_polyline() -> None:
    r = generate_wave_path((0, 0), (100, 0), 40, WaveSpec(), base_width=2.0)
    assert not r.is_tapered
    strokes = r.to_strokes()
    assert len(strokes) == 1
    assert strokes[0].points.shape == (41, 2)
    assert strokes[0].width == 2.0
    assert all(s.width == 2.0 for s in r)


def test_tapered_is_independent_segments() -> None:
    taper = TaperSpec(TaperKind.START, start_width_frac=0.2)
    r = generate_wave_path((0, 0), (100, 0), 10, WaveSpec(), taper, base_width=5.0)
    assert r.is_tapered
    strokes = r.to_strokes()
    assert len(strokes) == 10
    for i, s in enumerate(strokes):
        assert s.points.shape == (2, 2)
        np.testing.assert_array_equal(s.points[0], r.points[i])
        np.testing.assert_array_equal(s.points[1], r.points[i + 1])
        assert s.width == pytest.approx(5.0 * (0.2 + 0.8 * i / 10))
    assert r.widths[-1] == pytest.approx(5.0)


def test_taper_none_is_untapered() -> None:
    r = generate_wave_path((0, 0), (1, 1), 4, WaveSpec(), TaperSpec(TaperKind.NONE, 0.1, 0.1))
    assert r.widths is None


def test_unknown_waveform_rejected() -> None:
    with pytest.raises(InvalidConfigurationError):
        WaveSpec(kind="zigzag_nope")


def test_closure_survives_modulation_transform_and_components() -> None:
    p1, p2 = (0.0, 0.0), (173.0, 41.0)
    variants = [
        WaveSpec(modulation=ModulationSpec(ModulationKind.AMPLITUDE, frequency=0.5)),
        WaveSpec(modulation=ModulationSpec(ModulationKind.FREQUENCY, depth=0.8)),
        WaveSpec(modulation=ModulationSpec(ModulationKind.HARMONIC)),
        WaveSpec(transform=TransformSpec("fold")),
        WaveSpec(transform=TransformSpec("exponential", {"exponent": 3.0})),
        WaveSpec(components=(WaveComponent("sine", 1.0, 1.0), WaveComponent("triangle", 0.5, 3.0, 0.4))),
    ]
    for base in variants:
        wave = WaveSpec(
            kind=base.kind,
            amplitude=6.0,
            frequency=0.23,
            phase=1.1,
            loop_enabled=True,
            bidirectional_enabled=True,
            animated=True,
            modulation=base.modulation,
            transform=base.transform,
            components=base.components,
        )
        r = generate_wave_path(p1, p2, 33, wave, time_ms=2345.0)
        assert abs(r.offsets[0] - r.offsets[-1]) <= 1e-9


def test_fractional_component_frequency_is_continuous() -> None:
    wave = WaveSpec(amplitude=10.0, frequency=3.0, components=(WaveComponent("sine", 1.0, 0.25),))
    r = generate_wave_path((0, 0), (300, 0), 600, wave)
    p = np.linspace(0.0, 1.0, 601)
    expected = 10.0 * np.sin(0.25 * (2 * math.pi * 3.0 * p))
    np.testing.assert_allclose(r.offsets, expected, atol=1e-9)
    # 隣接点の差は 1 区間分の傾き程度に収まる（折り返しの段差なし）
    assert np.max(np.abs(np.diff(r.offsets))) < 0.5


def test_fractional_component_frequency_bidirectional_is_continuous() -> None:
    wave = WaveSpec(
        amplitude=10.0,
        frequency=3.0,
        phase=0.4,
        bidirectional_enabled=True,
        components=(WaveComponent("sine", 1.0, 0.25), WaveComponent("cosine", 0.5, 1.5, 0.2)),
    )
    r = generate_wave_path((0, 0), (300, 0), 600, wave)
    p = np.linspace(0.0, 1.0, 601)
    theta = 2 * math.pi * wave_turns(p, 3.0, bidirectional=True) + 0.4 + math.pi
    expected = 10.0 * (np.sin(0.25 * theta) + 0.5 * np.cos(1.5 * theta + 0.2)) / 1.5
    np.testing.assert_allclose(r.offsets, expected, atol=1e-9)
    assert np.max(np.abs(np.diff(r.offsets))) < 2.0


def test_wave_spec_from_mapping() -> None:
    wave = WaveSpec.from_mapping(
        {
            "type": "triangle",
            "amplitude": 2,
            "frequency": 0.2,
            "loop": True,
            "bidirectional": True,
            "modulation": {"type": "amplitude", "depth": 0.3},
            "transform": {"type": "clip", "threshold": 0.5},
            "components": [{"type": "sine", "weight": 2}],
            "unknown_key": 1,
        }
    )
    assert wave.kind == "triangle"
    assert wave.loop_enabled and wave.bidirectional_enabled
    assert wave.modulation is not None and wave.modulation.kind is ModulationKind.AMPLITUDE
    assert wave.transform == TransformSpec("clip", {"threshold": 0.5})
    assert wave.components == (WaveComponent("sine", 2.0),)

    with pytest.raises(InvalidConfigurationError):
        WaveSpec.from_mapping({"type": "sine", "amplitude": "loud"})
    with pytest.raises(InvalidConfigurationError):
        WaveSpec.from_mapping({"type": "nope"})
