"""
どこで: `engine.core.quality`。
何を: 品質ティア（High/Medium/Low）とパラメータ束、FPS からのティア判定、
      ヒステリシス付きのティア遷移（純関数）を定義する。
なぜ: 境界付近の FPS でティアが振動しないよう、遷移規則を状態構造体と純関数に
      閉じ込めて単体で検証できるようにするため。

遷移規則（`transition_quality`）:
- `classify_fps(fps)` の結果が現ティアより低い/高いサンプルを連続カウントする。
- いずれかのカウントが `debounce_samples` に達した時点で、そのサンプルの判定ティアへ
  切り替える（High→Low のように 1 段飛ばしもあり得る）。切替後は両カウンタを 0 へ。
- 現ティアと同じ判定のサンプルが来たら両カウンタを 0 へ戻す。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class QualityTier(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """大きいほど高品質（LOW=0, MEDIUM=1, HIGH=2）。"""
        return _RANK[self]


_RANK = {QualityTier.LOW: 0, QualityTier.MEDIUM: 1, QualityTier.HIGH: 2}


@dataclass(frozen=True)
class QualityParams:
    """ティアに紐づく描画品質パラメータ（読み取り専用）。"""

    color_precision: int
    fractal_depth_limit: int
    particle_limit: int
    smoothing_enabled: bool


_PARAMS: dict[QualityTier, QualityParams] = {
    QualityTier.HIGH: QualityParams(1000, 6, 10000, True),
    QualityTier.MEDIUM: QualityParams(100, 4, 5000, True),
    QualityTier.LOW: QualityParams(10, 3, 2000, False),
}


def quality_params(tier: QualityTier) -> QualityParams:
    """ティアの固定パラメータを返す。"""
    return _PARAMS[tier]


@dataclass(frozen=True)
class QualityThresholds:
    """ティア判定の FPS 閾値。`high_fps` 以上で High、`medium_fps` 以上で Medium。"""

    high_fps: float = 55.0
    medium_fps: float = 35.0

    def classify(self, fps: float) -> QualityTier:
        if fps >= self.high_fps:
            return QualityTier.HIGH
        if fps >= self.medium_fps:
            return QualityTier.MEDIUM
        return QualityTier.LOW


DEFAULT_THRESHOLDS = QualityThresholds()


def classify_fps(fps: float, thresholds: QualityThresholds = DEFAULT_THRESHOLDS) -> QualityTier:
    """FPS 値から（ヒステリシス無しの）目標ティアを返す。"""
    return thresholds.classify(fps)


@dataclass(frozen=True)
class QualityState:
    """適応品質の状態。`transition_quality` だけが次状態を作る。"""

    tier: QualityTier = QualityTier.HIGH
    consecutive_low_samples: int = 0
    consecutive_high_samples: int = 0


def transition_quality(
    state: QualityState,
    fps: float,
    *,
    debounce_samples: int,
    thresholds: QualityThresholds = DEFAULT_THRESHOLDS,
) -> QualityState:
    """FPS サンプル 1 つ分だけ状態を進めた新しい `QualityState` を返す（純関数）。"""
    window = max(1, int(debounce_samples))
    target = thresholds.classify(fps)

    if target.rank < state.tier.rank:
        low = state.consecutive_low_samples + 1
        if low >= window:
            return QualityState(tier=target)
        return QualityState(tier=state.tier, consecutive_low_samples=low)

    if target.rank > state.tier.rank:
        high = state.consecutive_high_samples + 1
        if high >= window:
            return QualityState(tier=target)
        return QualityState(tier=state.tier, consecutive_high_samples=high)

    # 範囲内: 連続カウントを打ち切る
    if state.consecutive_low_samples == 0 and state.consecutive_high_samples == 0:
        return state
    return QualityState(tier=state.tier)


__all__ = [
    "QualityTier",
    "QualityParams",
    "QualityThresholds",
    "QualityState",
    "DEFAULT_THRESHOLDS",
    "quality_params",
    "classify_fps",
    "transition_quality",
]
