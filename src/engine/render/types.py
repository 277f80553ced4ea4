"""
どこで: `engine.render` 型定義。
何を: 1 フレームの要約 `FrameInfo`、フラクタル形状ノード `ShapeNode`、描画層との境界
      `DrawingSink` Protocol を定義する（`Stroke` は `waves.path` から再輸出）。
なぜ: 計算（clock/animation/waves）と描画（ホスト側）の責務を分離し、描画層を差し替え
      可能にするため。ラスタライズ/合成はホスト側の責務。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from engine.animation.color_cycle import Rgba
from engine.core.quality import QualityParams, QualityTier
from waves.path import Stroke


@dataclass(frozen=True)
class FrameInfo:
    """描画したフレーム 1 つ分の要約（テレメトリ/UI 表示向け）。"""

    frame_index: int
    animation_time_ms: float
    fps: float
    tier: QualityTier
    params: QualityParams


@dataclass(frozen=True)
class ShapeNode:
    """フラクタル木の 1 ノード（正多角形 1 つ分の描画指示）。"""

    center: tuple[float, float]
    radius: float
    sides: int
    rotation: float  # [rad]
    thickness: float
    color: Rgba
    depth: int
    child_index: int
    total_children: int
    adjusted_time_ms: float


class DrawingSink(Protocol):
    """描画層の受け口。呼び出し順は begin_frame → draw_* → end_frame。"""

    def begin_frame(self, info: FrameInfo) -> None: ...

    def draw_shape(self, node: ShapeNode) -> None: ...

    def draw_strokes(self, strokes: Sequence[Stroke], color: Rgba) -> None: ...

    def end_frame(self, info: FrameInfo) -> None: ...


__all__ = ["FrameInfo", "ShapeNode", "DrawingSink", "Stroke"]
