from __future__ import annotations

import pytest

from engine.core.quality import (
    QualityParams,
    QualityState,
    QualityThresholds,
    QualityTier,
    classify_fps,
    quality_params,
    transition_quality,
)


def test_tier_parameter_bindings() -> None:
    assert quality_params(QualityTier.HIGH) == QualityParams(1000, 6, 10000, True)
    assert quality_params(QualityTier.MEDIUM) == QualityParams(100, 4, 5000, True)
    assert quality_params(QualityTier.LOW) == QualityParams(10, 3, 2000, False)


@pytest.mark.parametrize(
    "fps,tier",
    [
        (120.0, QualityTier.HIGH),
        (55.0, QualityTier.HIGH),
        (54.9, QualityTier.MEDIUM),
        (35.0, QualityTier.MEDIUM),
        (34.9, QualityTier.LOW),
        (0.0, QualityTier.LOW),
    ],
)
def test_classify_fps_thresholds(fps: float, tier: QualityTier) -> None:
    assert classify_fps(fps) is tier


def test_custom_thresholds() -> None:
    th = QualityThresholds(high_fps=100.0, medium_fps=50.0)
    assert th.classify(60.0) is QualityTier.MEDIUM
    assert classify_fps(60.0, th) is QualityTier.MEDIUM


def _run(fps_values: list[float], debounce: int = 8) -> list[QualityState]:
    state = QualityState()
    out = []
    for fps in fps_values:
        state = transition_quality(state, fps, debounce_samples=debounce)
        out.append(state)
    return out


def test_high_to_low_only_after_debounce_window() -> None:
    states = _run([60.0] * 10 + [20.0] * 10)
    tiers = [s.tier for s in states]
    assert tiers[:10] == [QualityTier.HIGH] * 10
    # 最初の閾値割れでは切り替わらない
    assert tiers[10] is QualityTier.HIGH
    assert tiers[16] is QualityTier.HIGH
    assert states[16].consecutive_low_samples == 7
    # 8 連続で Low へ（Medium を飛ばす）
    assert tiers[17] is QualityTier.LOW
    assert states[17].consecutive_low_samples == 0
    assert tiers[19] is QualityTier.LOW


def test_in_range_sample_resets_counters() -> None:
    states = _run([20.0] * 7 + [60.0] + [20.0] * 7)
    assert states[6].consecutive_low_samples == 7
    assert states[7] == QualityState(tier=QualityTier.HIGH)
    assert all(s.tier is QualityTier.HIGH for s in states)


def test_upward_transition_is_also_debounced() -> None:
    state = QualityState(tier=QualityTier.LOW)
    for _ in range(7):
        state = transition_quality(state, 60.0, debounce_samples=8)
        assert state.tier is QualityTier.LOW
    state = transition_quality(state, 60.0, debounce_samples=8)
    assert state == QualityState(tier=QualityTier.HIGH)


def test_oscillation_at_boundary_never_switches() -> None:
    states = _run([54.0, 56.0] * 50)
    assert all(s.tier is QualityTier.HIGH for s in states)


def test_debounce_is_clamped_to_one() -> None:
    state = transition_quality(QualityState(), 40.0, debounce_samples=0)
    assert state.tier is QualityTier.MEDIUM


def test_transition_is_pure() -> None:
    state = QualityState()
    transition_quality(state, 10.0, debounce_samples=8)
    assert state == QualityState()
