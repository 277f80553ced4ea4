"""
どこで: `engine.render.orchestrator`。
何を: ホストのレンダーティックごとに クロック → 時刻 → 色 → フラクタル形状 → 変調線 の順で
      各部品を呼び出し、結果を `DrawingSink` へ流す `RenderTickOrchestrator`。
なぜ: 各部品は純関数/自前の状態だけで完結させ、呼び出し順序と時刻の受け渡しを
      この 1 箇所へ集約するため。

- クロックが描画不要と判定したティックでは sink を一切呼ばない（唯一のスキップ経路）。
- フラクタル段数は `min(設定段数, ティアの fractal_depth_limit)`。
- 時刻は常にこのクラスから各関数へ引数で渡す（グローバル時計は読まない）。
"""

from __future__ import annotations

import logging
import math

from engine.animation.color_cycle import ColorCycleInterpolator, Rgba
from engine.animation.shape_params import animate_shape
from engine.core.animation_timer import AnimationTimer
from engine.core.frame_clock import FrameClock, TickResult
from engine.core.quality import QualityParams
from engine.core.tickable import Tickable
from waves.continuous import generate_closed_path
from waves.path import WavePathResult, generate_wave_path

from .scene import LineConfig, SceneConfig
from .types import DrawingSink, FrameInfo, ShapeNode

logger = logging.getLogger(__name__)


class RenderTickOrchestrator(Tickable):
    """1 ティック分の処理順序を管理する。

    引数:
        scene: シーン設定。
        sink: 描画層。
        clock/interpolator/timer: 省略時はシーン設定から生成する（テストで差し替え可能）。
    """

    def __init__(
        self,
        scene: SceneConfig,
        sink: DrawingSink,
        *,
        clock: FrameClock | None = None,
        interpolator: ColorCycleInterpolator | None = None,
        timer: AnimationTimer | None = None,
    ) -> None:
        self._scene = scene
        self._sink = sink
        self._clock = clock if clock is not None else FrameClock(scene.clock)
        self._colors = interpolator if interpolator is not None else ColorCycleInterpolator()
        self._timer = (
            timer
            if timer is not None
            else AnimationTimer(
                timing_correction=scene.timing_correction, speed=scene.animation_speed
            )
        )
        self._frame_index = 0
        # 静的色はここで一度だけ解析し、不正値は構築時に送出する
        self._static_shape_color = self._static_color(scene.shape.color, scene.shape.opacity)
        self._static_line_color = self._static_color(scene.line_color, 1.0)

    def _static_color(self, value: object, alpha: float) -> Rgba:
        return self._colors.evaluate(0.0, [value], alpha)  # type: ignore[list-item]

    # ---- 公開 API -------------------------------------------------------
    @property
    def clock(self) -> FrameClock:
        return self._clock

    @property
    def timer(self) -> AnimationTimer:
        return self._timer

    @property
    def scene(self) -> SceneConfig:
        return self._scene

    @property
    def frame_index(self) -> int:
        """描画したフレーム数。"""
        return self._frame_index

    def tick(self, now_ms: float) -> TickResult:
        """ホスト時刻 `now_ms` で 1 ティック処理し、クロックの判定結果を返す。"""
        result = self._clock.tick(now_ms)
        if not result.should_render:
            return result

        time_ms = self._timer.advance(result)
        self._frame_index += 1
        info = FrameInfo(
            frame_index=self._frame_index,
            animation_time_ms=time_ms,
            fps=result.fps,
            tier=result.tier,
            params=result.params,
        )

        self._sink.begin_frame(info)
        for node in self.shape_nodes(time_ms, result.params):
            self._sink.draw_shape(node)
        line_color = self.line_color(time_ms)
        for line in self._scene.lines:
            path = self.line_path(line, time_ms)
            self._sink.draw_strokes(path.to_strokes(), line_color)
        self._sink.end_frame(info)
        return result

    # ---- 部品（単体でも呼べる） ------------------------------------------
    def shape_color(self, time_ms: float, opacity: float) -> Rgba:
        g = self._scene.gradient
        if g.enabled and g.apply_to_shapes:
            return self._colors.evaluate_set(time_ms, g.to_stop_set(), opacity)
        return self._static_shape_color._replace(a=min(max(float(opacity), 0.0), 1.0))

    def line_color(self, time_ms: float) -> Rgba:
        g = self._scene.gradient
        if g.enabled and g.apply_to_lines:
            return self._colors.evaluate_set(time_ms, g.to_stop_set())
        return self._static_line_color

    def line_path(self, line: LineConfig, time_ms: float) -> WavePathResult:
        if line.vertices is not None:
            return generate_closed_path(
                line.vertices, line.wave, base_width=line.width, time_ms=time_ms
            )
        return generate_wave_path(
            line.p1,
            line.p2,
            line.segments,
            line.wave,
            line.taper,
            base_width=line.width,
            time_ms=time_ms,
        )

    def shape_nodes(self, time_ms: float, params: QualityParams) -> list[ShapeNode]:
        """フラクタル形状のノード列（親 → 子の深さ優先順）を返す。"""
        shape = self._scene.shape
        levels = min(shape.fractal.depth, params.fractal_depth_limit)
        nodes: list[ShapeNode] = []
        if levels <= 0:
            return nodes
        base_rotation = math.radians(shape.rotation_deg)

        def emit(
            center: tuple[float, float],
            radius: float,
            thickness: float,
            opacity: float,
            depth: int,
            child_index: int,
            total: int,
        ) -> None:
            anim = animate_shape(
                time_ms,
                radius,
                opacity,
                shape.animation,
                depth=depth,
                child_index=child_index,
                total_children=total,
            )
            rotation = base_rotation + anim.rotation
            nodes.append(
                ShapeNode(
                    center=center,
                    radius=anim.size,
                    sides=shape.sides,
                    rotation=rotation,
                    thickness=thickness,
                    color=self.shape_color(anim.adjusted_time_ms, anim.opacity),
                    depth=depth,
                    child_index=child_index,
                    total_children=total,
                    adjusted_time_ms=anim.adjusted_time_ms,
                )
            )
            if depth + 1 >= levels:
                return
            n = shape.fractal.child_count
            falloff = shape.fractal.thickness_falloff
            for i in range(n):
                angle = i * 2.0 * math.pi / n + rotation
                emit(
                    (center[0] + radius * math.cos(angle), center[1] + radius * math.sin(angle)),
                    radius * shape.fractal.scale,
                    thickness * falloff,
                    opacity * falloff,
                    depth + 1,
                    i,
                    n,
                )

        emit(shape.center, shape.radius, shape.thickness, shape.opacity, 0, 0, 1)
        return nodes

    def reset(self) -> None:
        """クロック/タイマ/フレーム番号を初期化する。"""
        self._clock.reset()
        self._timer.reset()
        self._frame_index = 0
        logger.debug("orchestrator reset")


__all__ = ["RenderTickOrchestrator"]
