"""
どこで: `engine.animation.fractal_timing`。
何を: 入れ子（フラクタル）形状の子ノードごとの時間オフセットを閉形式で計算する。
なぜ: 乱数由来のオフセットは再現性がなく非対称に見えるため。兄弟ノードは 1 周に等間隔、
      深さが 1 段増すごとにオフセット量は 1/φ 倍に縮む（自己相似性の維持）。

    phase      = (child_index / total_children) * 2π
    depth_scale = φ ** (-depth)
    offset_ms  = base_time_ms + phase * depth_scale * 1000
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from common.errors import InvalidConfigurationError

PHI = (1.0 + math.sqrt(5.0)) / 2.0
TAU = 2.0 * math.pi


def depth_scale(depth: int) -> float:
    """深さ `depth` のスケール φ^(-depth)。"""
    return PHI ** (-float(depth))


def turn_length_ms(depth: int) -> float:
    """深さ `depth` における 1 周ぶんのオフセット幅 [ms]（2π·φ^(-depth)·1000）。"""
    return TAU * depth_scale(depth) * 1000.0


def compute_timing(
    base_time_ms: float, depth: int, child_index: int, total_children: int
) -> float:
    """子ノードの時間オフセット込みの時刻 [ms] を返す（純関数・決定的）。

    例外:
    - InvalidConfigurationError: `total_children <= 0`。
    """
    if total_children <= 0:
        raise InvalidConfigurationError(
            f"total_children must be positive: {total_children!r}"
        )
    phase = (float(child_index) / float(total_children)) * TAU
    return float(base_time_ms) + phase * depth_scale(depth) * 1000.0


def sibling_offsets(base_time_ms: float, depth: int, total_children: int) -> list[float]:
    """同じ深さの全兄弟（0..total_children-1）の時刻を返す。"""
    return [compute_timing(base_time_ms, depth, i, total_children) for i in range(total_children)]


@dataclass(frozen=True)
class FractalTimingContext:
    """フラクタルノード 1 つ分のタイミング入力。"""

    base_time_ms: float
    depth: int
    child_index: int
    total_children: int

    def offset_ms(self) -> float:
        return compute_timing(self.base_time_ms, self.depth, self.child_index, self.total_children)


__all__ = [
    "PHI",
    "TAU",
    "depth_scale",
    "turn_length_ms",
    "compute_timing",
    "sibling_offsets",
    "FractalTimingContext",
]
