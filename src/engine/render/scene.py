"""
どこで: `engine.render.scene`。
何を: 設定辞書（`configs/default.yaml` 等）を型付きのシーン設定へ変換する。
なぜ: ホストが保持する設定オブジェクトは不透明な辞書として受け取り、境界で一度だけ
      検証して以降は不変データクラスとして扱うため。

方針:
- 未知キーは無視、欠損キーは既定値。
- 列挙値（イージング名/波形名/テーパー種別/アニメーション種別）の誤りは
  `InvalidConfigurationError` を送出する。
- フレームクロックの既定値は `common.settings`（環境変数 `SG_*`）から取る。

想定するキー構成:

    clock:     {target_fps, max_delta_ms, smoothing_alpha, debounce_samples, adaptive_quality}
    animation: {timing_correction, speed}
    shape:     {sides, radius, center, color, opacity, thickness, rotation_deg,
                animation: {...}, fractal: {depth, child_count, scale, thickness_falloff}}
    gradient:  {enabled, colors, cycle_duration_ms, easing, apply_to_shapes, apply_to_lines}
    lines:     {color, width, segments, wave: {...}, taper: {...}, items: [{p1, p2} | {vertices}]}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Sequence

from common.errors import InvalidConfigurationError
from engine.animation.color_cycle import ColorStopSet
from engine.animation.easing import get_easing
from engine.animation.shape_params import ShapeAnimationConfig
from engine.core.frame_clock import FrameClockConfig
from waves.path import WaveSpec
from waves.taper import TaperSpec

logger = logging.getLogger(__name__)


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidConfigurationError(f"'{key}' must be a mapping: {value!r}")
    return value


def _point(value: Any, name: str) -> tuple[float, float]:
    try:
        x, y = value[0], value[1]
        return (float(x), float(y))
    except (TypeError, ValueError, IndexError, KeyError) as e:
        raise InvalidConfigurationError(f"'{name}' must be a 2D point: {value!r}") from e


@dataclass(frozen=True)
class GradientConfig:
    enabled: bool = False
    colors: tuple[Any, ...] = ("#ff0000", "#00ff00", "#0000ff")
    cycle_duration_ms: float = 5000.0
    easing: str = "linear"
    apply_to_shapes: bool = True
    apply_to_lines: bool = True

    def to_stop_set(self) -> ColorStopSet:
        return ColorStopSet(self.colors, self.cycle_duration_ms, self.easing)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GradientConfig":
        easing = str(data.get("easing", "linear"))
        get_easing(easing)
        colors = data.get("colors", cls.colors)
        if isinstance(colors, str) or not isinstance(colors, Sequence):
            raise InvalidConfigurationError(f"gradient colors must be a list: {colors!r}")
        enabled = bool(data.get("enabled", False))
        if enabled and len(colors) == 0:
            raise InvalidConfigurationError("gradient colors must not be empty")
        duration = float(data.get("cycle_duration_ms", 5000.0))
        if enabled and not duration > 0.0:
            raise InvalidConfigurationError(f"cycle_duration_ms must be positive: {duration!r}")
        return cls(
            enabled=enabled,
            colors=tuple(tuple(c) if isinstance(c, list) else c for c in colors),
            cycle_duration_ms=duration,
            easing=easing,
            apply_to_shapes=bool(data.get("apply_to_shapes", True)),
            apply_to_lines=bool(data.get("apply_to_lines", True)),
        )


@dataclass(frozen=True)
class FractalConfig:
    """入れ子形状の設定。`depth` は描画する段数（1 なら親のみ）。"""

    depth: int = 1
    child_count: int = 3
    scale: float = 0.5
    thickness_falloff: float = 0.8

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FractalConfig":
        child_count = int(data.get("child_count", 3))
        if child_count <= 0:
            raise InvalidConfigurationError(f"child_count must be positive: {child_count!r}")
        return cls(
            depth=max(1, int(data.get("depth", 1))),
            child_count=child_count,
            scale=float(data.get("scale", 0.5)),
            thickness_falloff=float(data.get("thickness_falloff", 0.8)),
        )


@dataclass(frozen=True)
class ShapeConfig:
    sides: int = 6
    radius: float = 100.0
    center: tuple[float, float] = (0.0, 0.0)
    color: Any = "#ffffff"
    opacity: float = 1.0
    thickness: float = 1.0
    rotation_deg: float = 0.0
    animation: ShapeAnimationConfig = field(default_factory=ShapeAnimationConfig)
    fractal: FractalConfig = field(default_factory=FractalConfig)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ShapeConfig":
        anim = _section(data, "animation")
        animation = ShapeAnimationConfig(
            mode=ShapeAnimationConfig.parse_mode(anim.get("mode", "none")),
            speed=float(anim.get("speed", 0.001)),
            intensity=float(anim.get("intensity", 0.5)),
            rotation=bool(anim.get("rotation", False)),
            rotation_speed=float(anim.get("rotation_speed", 0.1)),
        )
        color = data.get("color", "#ffffff")
        return cls(
            sides=max(3, int(data.get("sides", 6))),
            radius=float(data.get("radius", 100.0)),
            center=_point(data.get("center", (0.0, 0.0)), "shape.center"),
            color=tuple(color) if isinstance(color, list) else color,
            opacity=float(data.get("opacity", 1.0)),
            thickness=float(data.get("thickness", 1.0)),
            rotation_deg=float(data.get("rotation_deg", 0.0)),
            animation=animation,
            fractal=FractalConfig.from_mapping(_section(data, "fractal")),
        )


@dataclass(frozen=True)
class LineConfig:
    """変調線 1 本。`vertices` 指定時は閉じた多角形を 1 本の連続波線で描く。"""

    p1: tuple[float, float] = (0.0, 0.0)
    p2: tuple[float, float] = (100.0, 0.0)
    vertices: tuple[tuple[float, float], ...] | None = None
    segments: int = 40
    width: float = 1.0
    wave: WaveSpec = field(default_factory=WaveSpec)
    taper: TaperSpec = field(default_factory=TaperSpec)


@dataclass(frozen=True)
class SceneConfig:
    shape: ShapeConfig = field(default_factory=ShapeConfig)
    gradient: GradientConfig = field(default_factory=GradientConfig)
    lines: tuple[LineConfig, ...] = ()
    line_color: Any = "#ffffff"
    clock: FrameClockConfig = field(default_factory=FrameClockConfig.from_settings)
    timing_correction: bool = True
    animation_speed: float = 1.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "SceneConfig":
        """設定辞書からシーン設定を構築する。"""
        data = data or {}
        lines_section = _section(data, "lines")
        wave_defaults = dict(_section(lines_section, "wave"))
        taper_defaults = dict(_section(lines_section, "taper"))
        width = float(lines_section.get("width", 1.0))
        segments = int(lines_section.get("segments", 40))

        lines: list[LineConfig] = []
        for i, item in enumerate(lines_section.get("items") or ()):
            if not isinstance(item, Mapping):
                raise InvalidConfigurationError(f"lines.items[{i}] must be a mapping: {item!r}")
            # 行ごとの wave/taper は共通設定へ上書きする
            wave = WaveSpec.from_mapping({**wave_defaults, **_section(item, "wave")})
            taper = TaperSpec.from_mapping({**taper_defaults, **_section(item, "taper")})
            raw_vertices = item.get("vertices")
            vertices = (
                tuple(_point(v, f"lines.items[{i}].vertices") for v in raw_vertices)
                if raw_vertices is not None
                else None
            )
            lines.append(
                LineConfig(
                    p1=_point(item.get("p1", (0.0, 0.0)), f"lines.items[{i}].p1"),
                    p2=_point(item.get("p2", (100.0, 0.0)), f"lines.items[{i}].p2"),
                    vertices=vertices,
                    segments=int(item.get("segments", segments)),
                    width=float(item.get("width", width)),
                    wave=wave,
                    taper=taper,
                )
            )

        line_color = lines_section.get("color", "#ffffff")
        anim = _section(data, "animation")
        scene = cls(
            shape=ShapeConfig.from_mapping(_section(data, "shape")),
            gradient=GradientConfig.from_mapping(_section(data, "gradient")),
            lines=tuple(lines),
            line_color=tuple(line_color) if isinstance(line_color, list) else line_color,
            clock=_clock_config(_section(data, "clock")),
            timing_correction=bool(anim.get("timing_correction", True)),
            animation_speed=float(anim.get("speed", 1.0)),
        )
        logger.debug("scene loaded: %d line(s), fractal depth=%d", len(lines), scene.shape.fractal.depth)
        return scene


def _clock_config(data: Mapping[str, Any]) -> FrameClockConfig:
    base = FrameClockConfig.from_settings()
    overrides: dict[str, Any] = {}
    for key, cast in (
        ("target_fps", float),
        ("max_delta_ms", float),
        ("min_delta_ms", float),
        ("smoothing_alpha", float),
        ("debounce_samples", int),
        ("adaptive_quality", bool),
        ("history_size", int),
        ("stability_threshold_fps", float),
    ):
        if key in data:
            try:
                overrides[key] = cast(data[key])
            except (TypeError, ValueError) as e:
                raise InvalidConfigurationError(f"invalid clock.{key}: {data[key]!r}") from e
    return replace(base, **overrides)


__all__ = [
    "GradientConfig",
    "FractalConfig",
    "ShapeConfig",
    "LineConfig",
    "SceneConfig",
]
