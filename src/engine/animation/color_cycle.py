"""
どこで: `engine.animation.color_cycle`。
何を: 色停止点の列を一定周期で巡回し、任意時刻の色を補間する `ColorCycleInterpolator`。
なぜ: グラデーションが段階的に「カクつく」現象を避けるため、チャネル値を浮動小数のまま
      最後まで保持し、最終段で 1 回だけ整数化する。

アルゴリズム（N 色、周期 D [ms]）:
    progress = (t mod D) / D
    scaled   = progress * N
    index    = floor(scaled),  next = (index + 1) mod N
    local_t  = scaled - index
    eased    = easing(local_t)
    value    = c1 + (c2 - c1) * eased        # float のまま
    channel  = clamp(round(value), 0, 255)   # 丸めはここだけ

解析済みの色はインスタンス所有の `ColorParseCache` に追記専用で保持する（ロック付き）。
構成エラーはキャッシュへ触れる前に送出する。
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Hashable, NamedTuple, Sequence

from common.errors import InvalidConfigurationError
from common.types import RGB
from util.color import parse_rgb255, to_css_rgba

from .easing import apply_easing, get_easing

logger = logging.getLogger(__name__)

ColorValue = str | Sequence[float]


class Rgba(NamedTuple):
    """整数 RGB（0–255）と不透明度（0–1）。"""

    r: int
    g: int
    b: int
    a: float

    def to_css(self) -> str:
        return to_css_rgba(self.r, self.g, self.b, self.a)

    def to_unit(self) -> tuple[float, float, float, float]:
        """RGBA(0–1) へ変換する。"""
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a)


@dataclass(frozen=True)
class ColorStopSet:
    """巡回順序つきの色停止点・周期・イージング。"""

    colors: tuple[ColorValue, ...]
    cycle_duration_ms: float
    easing: str = "linear"

    def __post_init__(self) -> None:
        # list を受け取っても順序を保ったまま不変化する
        object.__setattr__(self, "colors", tuple(self.colors))


def _cache_key(value: ColorValue) -> Hashable:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return tuple(value)
    raise InvalidConfigurationError(f"unsupported color value: {value!r}")


class ColorParseCache:
    """生の色値 → 解析済み RGB(float) の追記専用キャッシュ。

    - 読み取りは辞書参照のみ、追記時だけロックを取る。
    - 解析に失敗した値は登録しない。
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, RGB] = {}
        self._lock = threading.Lock()

    def get_or_parse(self, value: ColorValue) -> RGB:
        hit = self._entries.get(_cache_key(value))
        if hit is not None:
            return hit
        return self.get_many((value,))[0]

    def get_many(self, values: Sequence[ColorValue]) -> list[RGB]:
        """複数の色値をまとめて解決する。

        未登録値をすべて先に解析し、1 つでも失敗すれば何も追記せずに送出する。
        """
        keys = [_cache_key(v) for v in values]
        pending: dict[Hashable, RGB] = {}
        for key, value in zip(keys, values):
            if key in self._entries or key in pending:
                continue
            try:
                pending[key] = parse_rgb255(value)
            except ValueError as e:
                raise InvalidConfigurationError(str(e)) from e
        if pending:
            with self._lock:
                for key, parsed in pending.items():
                    self._entries.setdefault(key, parsed)
            logger.debug("colors parsed: %d new (cache=%d)", len(pending), len(self._entries))
        return [self._entries[k] for k in keys]

    def __contains__(self, value: object) -> bool:
        try:
            return _cache_key(value) in self._entries  # type: ignore[arg-type]
        except InvalidConfigurationError:
            return False

    def __len__(self) -> int:
        return len(self._entries)


def _round_channel(value: float) -> int:
    # 0.5 は切り上げ（math.floor(x + 0.5)）。非有限値は 0 扱い
    if not math.isfinite(value):
        return 0
    v = int(math.floor(value + 0.5))
    return 0 if v < 0 else 255 if v > 255 else v


class ColorCycleInterpolator:
    """周期的な多色補間器（インスタンスごとに独立したパースキャッシュを持つ）。"""

    def __init__(self, cache: ColorParseCache | None = None) -> None:
        self._cache = cache if cache is not None else ColorParseCache()

    @property
    def cache(self) -> ColorParseCache:
        return self._cache

    def evaluate_channels(
        self,
        time_ms: float,
        color_stops: Sequence[ColorValue],
        cycle_duration_ms: float,
        easing_kind: str = "linear",
    ) -> RGB:
        """丸め前の RGB（float）を返す。連続性検査やサブピクセル用途向け。"""
        n = len(color_stops)
        if n == 0:
            raise InvalidConfigurationError("color_stops must not be empty")
        duration = float(cycle_duration_ms)
        if not (duration > 0.0) or not math.isfinite(duration):
            raise InvalidConfigurationError(
                f"cycle_duration_ms must be positive: {cycle_duration_ms!r}"
            )
        # 未知のイージング名もキャッシュ更新前に弾く
        get_easing(easing_kind)

        if n == 1:
            return self._cache.get_or_parse(color_stops[0])

        t = float(time_ms)
        if not math.isfinite(t):
            t = 0.0
        progress = (t % duration) / duration
        scaled = progress * n
        index = int(math.floor(scaled))
        if index >= n:
            # 浮動小数誤差で progress*n == n となる場合
            index = n - 1
        next_index = (index + 1) % n
        local_t = scaled - index
        eased = apply_easing(easing_kind, local_t)

        c1, c2 = self._cache.get_many((color_stops[index], color_stops[next_index]))
        return (
            c1[0] + (c2[0] - c1[0]) * eased,
            c1[1] + (c2[1] - c1[1]) * eased,
            c1[2] + (c2[2] - c1[2]) * eased,
        )

    def evaluate(
        self,
        time_ms: float,
        color_stops: Sequence[ColorValue],
        alpha: float = 1.0,
        cycle_duration_ms: float = 1000.0,
        easing_kind: str = "linear",
    ) -> Rgba:
        """時刻 `time_ms` の色を返す。

        例外:
        - InvalidConfigurationError: 空の色リスト、非正の周期、未知のイージング、不正な色値。
        """
        r, g, b = self.evaluate_channels(time_ms, color_stops, cycle_duration_ms, easing_kind)
        a = float(alpha)
        a = 1.0 if not math.isfinite(a) else 0.0 if a < 0.0 else 1.0 if a > 1.0 else a
        return Rgba(_round_channel(r), _round_channel(g), _round_channel(b), a)

    def evaluate_set(self, time_ms: float, stops: ColorStopSet, alpha: float = 1.0) -> Rgba:
        """`ColorStopSet` を用いた `evaluate` の簡易版。"""
        return self.evaluate(time_ms, stops.colors, alpha, stops.cycle_duration_ms, stops.easing)


__all__ = [
    "Rgba",
    "ColorStopSet",
    "ColorParseCache",
    "ColorCycleInterpolator",
]
