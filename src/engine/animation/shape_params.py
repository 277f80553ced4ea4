"""
どこで: `engine.animation.shape_params`。
何を: 形状アニメーション（pulse/grow/breathe と回転）のサイズ・不透明度・回転量を、
      対称フラクタルタイミングを通した時刻から計算する。
なぜ: 入れ子形状の各ノードを同一の決定的な時刻系で動かし、兄弟間の位相を揃えるため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from common.errors import InvalidConfigurationError

from .fractal_timing import compute_timing


class AnimationMode(Enum):
    NONE = "none"
    PULSE = "pulse"
    GROW = "grow"
    BREATHE = "breathe"


@dataclass(frozen=True)
class ShapeAnimationConfig:
    """形状アニメーション設定。

    引数:
        mode: アニメーション種別。
        speed: 位相速度 [rad/ms]。
        intensity: 変化量（0..1 目安）。
        rotation: 回転の有無。
        rotation_speed: 回転速度 [rad/s]。
    """

    mode: AnimationMode = AnimationMode.NONE
    speed: float = 0.001
    intensity: float = 0.5
    rotation: bool = False
    rotation_speed: float = 0.1

    @classmethod
    def parse_mode(cls, value: object) -> AnimationMode:
        try:
            return AnimationMode(str(value).lower())
        except ValueError as e:
            raise InvalidConfigurationError(f"unknown animation mode: {value!r}") from e


@dataclass(frozen=True)
class ShapeAnimation:
    size: float
    opacity: float
    rotation: float
    adjusted_time_ms: float


def animate_shape(
    time_ms: float,
    size: float,
    opacity: float,
    config: ShapeAnimationConfig,
    *,
    depth: int = 0,
    child_index: int = 0,
    total_children: int = 1,
) -> ShapeAnimation:
    """時刻 `time_ms` における形状のサイズ・不透明度・回転を返す。

    `depth > 0` のノードは `compute_timing` で時刻をずらす（兄弟は等間隔）。
    """
    adjusted = (
        compute_timing(time_ms, depth, child_index, total_children) if depth > 0 else float(time_ms)
    )
    s = float(size)
    o = float(opacity)
    phase = adjusted * config.speed
    k = config.intensity

    if config.mode is AnimationMode.PULSE:
        v = (math.sin(phase) + 1.0) / 2.0
        s *= 1.0 + v * k
        o *= 0.7 + v * 0.3
    elif config.mode is AnimationMode.GROW:
        v = (math.sin(phase) + 1.0) / 2.0
        s *= 0.5 + v * k
    elif config.mode is AnimationMode.BREATHE:
        v = (math.sin(phase * 0.5) + 1.0) / 2.0
        s *= 0.9 + v * k * 0.2
        o *= 0.8 + v * 0.2

    rotation = adjusted * 0.001 * config.rotation_speed if config.rotation else 0.0
    return ShapeAnimation(size=s, opacity=o, rotation=rotation, adjusted_time_ms=adjusted)


__all__ = ["AnimationMode", "ShapeAnimationConfig", "ShapeAnimation", "animate_shape"]
