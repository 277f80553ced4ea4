"""
どこで: `engine.core` のフレームクロック（適応品質コントローラ）。
何を: ホストが渡すタイムスタンプ [ms] からフレーム間隔を測定・平滑化し、
      このティックで描画すべきか（FPS 上限）と品質ティアを決める `FrameClock`。
なぜ: バックグラウンド復帰などの巨大な間隔や逆行する時刻で下流のアニメーション計算を
      壊さず、目標 FPS を維持できる品質ティアを安定して選ぶため。

時刻は常に引数で受け取り、内部で時計を読まない（決定的・テスト容易）。
例外は送出しない。入力はすべて安全な範囲へ丸める。
"""

from __future__ import annotations

import logging
import math
import statistics
from collections import deque
from dataclasses import dataclass, field

from common.settings import get as get_settings

from .quality import (
    DEFAULT_THRESHOLDS,
    QualityParams,
    QualityState,
    QualityThresholds,
    QualityTier,
    quality_params,
    transition_quality,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameSample:
    """描画したティック 1 回分の計測値（保持されず毎ティック置き換わる）。"""

    timestamp_ms: float
    raw_delta_ms: float
    smoothed_delta_ms: float
    fps: float


@dataclass(frozen=True)
class TickResult:
    """`FrameClock.tick` の戻り値。"""

    should_render: bool
    smoothed_delta_ms: float
    fps: float
    tier: QualityTier
    params: QualityParams
    sample: FrameSample | None = None


@dataclass(frozen=True)
class FrameMetrics:
    """テレメトリ/UI 表示向けの集計値。"""

    current_fps: float
    average_fps: float
    frame_time_ms: float
    dropped_frames: int
    tier: QualityTier
    is_stable: bool
    frame_count: int


@dataclass(frozen=True)
class FrameClockConfig:
    """FrameClock の設定。

    Parameters
    ----------
    target_fps : float
        目標 FPS（描画間隔の下限 = 1000 / target_fps）。
    max_delta_ms : float
        生の間隔の上限 [ms]。ホスト停止などの大きな欠落を吸収する。
    min_delta_ms : float
        平滑化後の間隔の下限 [ms]（> 0 を保証し FPS を有界にする）。
    smoothing_alpha : float
        指数平滑化係数 α（`smoothed = smoothed*α + raw*(1-α)`）。
    debounce_samples : int
        ティア切替に必要な連続サンプル数。
    adaptive_quality : bool
        False の場合ティアは固定（手動設定のみ）。
    thresholds : QualityThresholds
        ティア判定の FPS 閾値。
    history_size : int
        平均 FPS / 安定度の算出に使う履歴長。
    stability_threshold_fps : float
        直近 FPS の標準偏差がこれ未満なら安定とみなす。
    """

    target_fps: float = 60.0
    max_delta_ms: float = 250.0
    min_delta_ms: float = 1.0
    smoothing_alpha: float = 0.9
    debounce_samples: int = 8
    adaptive_quality: bool = True
    thresholds: QualityThresholds = field(default_factory=lambda: DEFAULT_THRESHOLDS)
    history_size: int = 60
    stability_threshold_fps: float = 5.0

    @classmethod
    def from_settings(cls) -> "FrameClockConfig":
        s = get_settings()
        return cls(
            target_fps=s.TARGET_FPS,
            max_delta_ms=s.MAX_DELTA_MS,
            smoothing_alpha=s.SMOOTHING_ALPHA,
            debounce_samples=s.QUALITY_DEBOUNCE,
            adaptive_quality=s.ADAPTIVE_QUALITY,
        )

    @property
    def target_interval_ms(self) -> float:
        return 1000.0 / max(1e-6, float(self.target_fps))


class FrameClock:
    """フレーム間隔の平滑化・FPS 上限・適応品質ティアを管理するクロック。"""

    def __init__(self, config: FrameClockConfig | None = None) -> None:
        self._config = config or FrameClockConfig.from_settings()
        self._alpha = min(max(float(self._config.smoothing_alpha), 0.0), 0.999)
        self._max_delta = max(float(self._config.max_delta_ms), 1e-3)
        self._min_delta = min(max(float(self._config.min_delta_ms), 1e-6), self._max_delta)
        self._history: deque[float] = deque(maxlen=max(1, int(self._config.history_size)))
        self._adaptive = bool(self._config.adaptive_quality)
        self._reset_state()

    def _reset_state(self) -> None:
        interval = self._clamp_delta(self._config.target_interval_ms)
        self._last_now_ms: float | None = None
        self._last_render_ms: float | None = None
        self._smoothed = interval
        self._raw = interval
        self._state = QualityState()
        self._history.clear()
        self._average_fps = 1000.0 / interval
        self._dropped = 0
        self._frame_count = 0

    # ---- 内部ユーティリティ -------------------------------------------
    def _clamp_delta(self, delta: float) -> float:
        return min(max(float(delta), self._min_delta), self._max_delta)

    def _result(self, should_render: bool, sample: FrameSample | None = None) -> TickResult:
        tier = self._state.tier
        return TickResult(
            should_render=should_render,
            smoothed_delta_ms=self._smoothed,
            fps=1000.0 / self._smoothed,
            tier=tier,
            params=quality_params(tier),
            sample=sample,
        )

    # ---- 公開 API -------------------------------------------------------
    @property
    def config(self) -> FrameClockConfig:
        return self._config

    @property
    def state(self) -> QualityState:
        """現在の適応品質状態（不変オブジェクト）。"""
        return self._state

    @property
    def adaptive_quality(self) -> bool:
        return self._adaptive

    def tick(self, now_ms: float) -> TickResult:
        """ホスト時刻 `now_ms` で 1 ティック進め、描画可否と品質を返す。"""
        now = float(now_ms)
        interval = self._config.target_interval_ms

        if self._last_now_ms is None or self._last_render_ms is None:
            if not math.isfinite(now):
                return self._result(False)
            raw = interval
        elif not math.isfinite(now) or now < self._last_now_ms:
            # 逆行/非有限: 間隔 0 として扱い、基準を張り直す
            logger.debug("clock regression: now=%s last=%s", now, self._last_now_ms)
            if not math.isfinite(now):
                return self._result(False)
            raw = 0.0
        else:
            if now - self._last_render_ms < interval:
                return self._result(False)
            raw = now - self._last_now_ms
            if raw > self._max_delta:
                logger.debug("delta clamped: %.1fms -> %.1fms", raw, self._max_delta)
                raw = self._max_delta

        self._last_now_ms = now
        self._last_render_ms = now
        self._raw = raw

        # 平滑化は全ティアで適用する
        smoothed = self._smoothed * self._alpha + raw * (1.0 - self._alpha)
        self._smoothed = self._clamp_delta(smoothed)
        fps = 1000.0 / self._smoothed

        self._frame_count += 1
        if raw > interval * 1.5:
            self._dropped += 1
        self._history.append(self._clamp_delta(raw))
        avg_frame = sum(self._history) / len(self._history)
        self._average_fps = 1000.0 / avg_frame

        if self._adaptive:
            prev = self._state.tier
            self._state = transition_quality(
                self._state,
                fps,
                debounce_samples=self._config.debounce_samples,
                thresholds=self._config.thresholds,
            )
            if self._state.tier is not prev:
                logger.info(
                    "Quality adjusted %s -> %s (%.1f FPS)",
                    prev.value,
                    self._state.tier.value,
                    fps,
                )

        sample = FrameSample(
            timestamp_ms=now,
            raw_delta_ms=raw,
            smoothed_delta_ms=self._smoothed,
            fps=fps,
        )
        return self._result(True, sample)

    def quality(self) -> QualityParams:
        """現在ティアの品質パラメータを返す。"""
        return quality_params(self._state.tier)

    def is_stable(self) -> bool:
        """直近 30 フレームの FPS 標準偏差が閾値未満なら True（履歴不足時も True）。"""
        if len(self._history) < 30:
            return True
        recent = list(self._history)[-30:]
        fps_values = [1000.0 / d for d in recent]
        return statistics.pstdev(fps_values) < self._config.stability_threshold_fps

    def metrics(self) -> FrameMetrics:
        return FrameMetrics(
            current_fps=1000.0 / self._smoothed,
            average_fps=self._average_fps,
            frame_time_ms=self._raw,
            dropped_frames=self._dropped,
            tier=self._state.tier,
            is_stable=self.is_stable(),
            frame_count=self._frame_count,
        )

    def set_quality_level(self, tier: QualityTier) -> None:
        """ティアを手動設定する（連続カウンタはリセット）。"""
        self._state = QualityState(tier=QualityTier(tier))
        logger.info("Quality manually set to %s", self._state.tier.value)

    def set_adaptive_quality(self, enabled: bool) -> None:
        """適応品質の有効/無効。無効化時は High へ戻す。"""
        self._adaptive = bool(enabled)
        if not self._adaptive:
            self.set_quality_level(QualityTier.HIGH)
        logger.info("Adaptive quality %s", "enabled" if self._adaptive else "disabled")

    def reset(self) -> None:
        """計測履歴と状態を初期化する（適応品質の有効/無効は維持）。"""
        self._reset_state()
        logger.debug("frame clock reset")

    def performance_report(self) -> str:
        """人間向けの簡易レポート文字列を返す。"""
        m = self.metrics()
        return "\n".join(
            [
                "Frame Clock Report",
                "==================",
                f"Target FPS: {self._config.target_fps:.1f}",
                f"Current FPS: {m.current_fps:.1f}",
                f"Average FPS: {m.average_fps:.1f}",
                f"Frame Time: {m.frame_time_ms:.2f}ms",
                f"Quality Level: {m.tier.value}",
                f"Dropped Frames: {m.dropped_frames}",
                f"Stable: {'Yes' if m.is_stable else 'No'}",
                f"Adaptive Quality: {'Enabled' if self._adaptive else 'Disabled'}",
            ]
        )


__all__ = [
    "FrameClock",
    "FrameClockConfig",
    "FrameMetrics",
    "FrameSample",
    "TickResult",
]
