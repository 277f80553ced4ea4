from __future__ import annotations

import pytest

from common.errors import InvalidConfigurationError
from engine.animation.shape_params import AnimationMode
from engine.render.scene import SceneConfig
from waves.taper import TaperKind


def test_empty_mapping_uses_defaults() -> None:
    scene = SceneConfig.from_mapping({})
    assert scene.lines == ()
    assert scene.gradient.enabled is False
    assert scene.shape.fractal.depth == 1
    assert scene.clock.target_fps == 60.0
    assert SceneConfig.from_mapping(None) == scene


def test_full_mapping() -> None:
    scene = SceneConfig.from_mapping(
        {
            "clock": {"target_fps": 30, "debounce_samples": 4, "adaptive_quality": False},
            "animation": {"timing_correction": False, "speed": 0.5},
            "shape": {
                "sides": 5,
                "color": [255, 0, 0],
                "animation": {"mode": "breathe"},
                "fractal": {"depth": 4, "child_count": 5},
            },
            "gradient": {"enabled": True, "colors": ["#000", "#fff"], "easing": "easeInOutSine"},
            "lines": {
                "width": 2.0,
                "wave": {"type": "triangle", "loop": True},
                "taper": {"type": "both", "start_width": 0.1},
                "items": [
                    {"p1": [0, 0], "p2": [10, 0]},
                    {"p1": [0, 0], "p2": [0, 10], "width": 3, "wave": {"amplitude": 9}},
                    {"vertices": [[0, 0], [10, 0], [0, 10]], "taper": {"type": "none"}},
                ],
            },
            "ignored_section": {"x": 1},
        }
    )
    assert scene.clock.target_fps == 30.0
    assert scene.clock.debounce_samples == 4
    assert scene.clock.adaptive_quality is False
    assert scene.timing_correction is False and scene.animation_speed == 0.5
    assert scene.shape.sides == 5 and scene.shape.color == (255, 0, 0)
    assert scene.shape.animation.mode is AnimationMode.BREATHE
    assert scene.shape.fractal.child_count == 5
    assert scene.gradient.to_stop_set().colors == ("#000", "#fff")

    a, b, c = scene.lines
    assert a.wave.kind == "triangle" and a.wave.loop_enabled
    assert a.taper.kind is TaperKind.BOTH and a.width == 2.0
    # 行ごとの上書きは共通設定とマージされる
    assert b.wave.kind == "triangle" and b.wave.amplitude == 9.0 and b.width == 3.0
    assert c.vertices == ((0.0, 0.0), (10.0, 0.0), (0.0, 10.0))
    assert c.taper.kind is TaperKind.NONE


@pytest.mark.parametrize(
    "mapping",
    [
        {"gradient": {"easing": "wobbly"}},
        {"gradient": {"enabled": True, "colors": []}},
        {"gradient": {"enabled": True, "cycle_duration_ms": 0}},
        {"gradient": {"colors": "#fff"}},
        {"shape": {"animation": {"mode": "spin"}}},
        {"shape": {"fractal": {"child_count": 0}}},
        {"shape": {"center": 5}},
        {"lines": {"wave": {"type": "zigzag"}, "items": [{}]}},
        {"lines": {"items": [{"taper": {"type": "pointy"}}]}},
        {"lines": {"items": ["not-a-mapping"]}},
        {"clock": {"target_fps": "fast"}},
        {"clock": [1, 2]},
    ],
)
def test_invalid_configuration_raises(mapping) -> None:  # noqa: ANN001
    with pytest.raises(InvalidConfigurationError):
        SceneConfig.from_mapping(mapping)


def test_clock_defaults_come_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from common import settings

    monkeypatch.setenv("SG_TARGET_FPS", "24")
    settings.reload_from_env()
    assert SceneConfig.from_mapping({}).clock.target_fps == 24.0
    assert SceneConfig.from_mapping({"clock": {"target_fps": 48}}).clock.target_fps == 48.0
