"""
どこで: `engine.core.animation_timer`。
何を: FrameClock の平滑化済み間隔を積算してアニメーション時刻 [ms] を得るタイマ。
なぜ: ホスト時刻のジッタや停止復帰の跳びをアニメーションへ持ち込まず、一定速度で
      進む時刻を下流（色/フラクタル/波形）へ明示的に渡すため。
"""

from __future__ import annotations

from .frame_clock import TickResult


class AnimationTimer:
    """描画ティックごとにアニメーション時刻を進める。

    引数:
        timing_correction: True なら平滑化済み間隔を積算、False ならホスト時刻をそのまま使う。
        speed: 時間倍率（0 で停止、負で逆再生）。
    """

    __slots__ = ("_correction", "_speed", "_time_ms", "_origin_ms")

    def __init__(self, *, timing_correction: bool = True, speed: float = 1.0) -> None:
        self._correction = bool(timing_correction)
        self._speed = float(speed)
        self._time_ms = 0.0
        self._origin_ms: float | None = None

    def advance(self, result: TickResult) -> float:
        """描画ティックの結果を受けて時刻を進め、現在のアニメーション時刻を返す。"""
        if not result.should_render:
            return self._time_ms
        if self._correction:
            self._time_ms += result.smoothed_delta_ms * self._speed
        elif result.sample is not None:
            ts = result.sample.timestamp_ms
            if self._origin_ms is None or ts < self._origin_ms:
                self._origin_ms = ts
            self._time_ms = (ts - self._origin_ms) * self._speed
        return self._time_ms

    @property
    def time_ms(self) -> float:
        return self._time_ms

    @property
    def time_s(self) -> float:
        return self._time_ms * 0.001

    def reset(self) -> None:
        self._time_ms = 0.0
        self._origin_ms = None


__all__ = ["AnimationTimer"]
