"""
どこで: `engine.animation.easing`
何を: [0,1] → ℝ のイージング関数をレジストリ（`@easing`）で提供する。
なぜ: 色補間などで名前指定によりイージングを差し替えられるようにするため。

- 入力 t は [0,1] へ clamp してから評価する。
- elastic は一時的に [0,1] を外れ得る（最終 clamp は呼び出し側の責務）。
- 旧来の名前（"easeInOutCubic" 等）も別名として受理する。
"""

from __future__ import annotations

import math
from typing import Callable

from common.base_registry import BaseRegistry
from common.errors import InvalidConfigurationError

EasingFn = Callable[[float], float]

_easing_registry = BaseRegistry("easing")


def easing(arg: EasingFn | str | None = None, /):
    """イージング関数を登録するデコレータ（`@easing` / `@easing("name")`）。"""
    if callable(arg):
        return _easing_registry.register()(arg)
    return _easing_registry.register(arg)


@easing
def linear(t: float) -> float:
    return t


@easing
def quad_in_out(t: float) -> float:
    return 2.0 * t * t if t < 0.5 else 1.0 - ((-2.0 * t + 2.0) ** 2) / 2.0


@easing
def cubic_in_out(t: float) -> float:
    return 4.0 * t * t * t if t < 0.5 else 1.0 - ((-2.0 * t + 2.0) ** 3) / 2.0


@easing
def sine_in_out(t: float) -> float:
    return -(math.cos(math.pi * t) - 1.0) / 2.0


@easing
def exponential_in_out(t: float) -> float:
    if t == 0.0:
        return 0.0
    if t == 1.0:
        return 1.0
    if t < 0.5:
        return (2.0 ** (20.0 * t - 10.0)) / 2.0
    return (2.0 - 2.0 ** (-20.0 * t + 10.0)) / 2.0


_C5 = (2.0 * math.pi) / 4.5


@easing
def elastic_in_out(t: float) -> float:
    if t == 0.0:
        return 0.0
    if t == 1.0:
        return 1.0
    if t < 0.5:
        return -((2.0 ** (20.0 * t - 10.0)) * math.sin((20.0 * t - 11.125) * _C5)) / 2.0
    return ((2.0 ** (-20.0 * t + 10.0)) * math.sin((20.0 * t - 11.125) * _C5)) / 2.0 + 1.0


# 旧来名（camelCase）→ 正規名
for _alias, _target in (
    ("easeInOutQuad", "quad_in_out"),
    ("easeInOutCubic", "cubic_in_out"),
    ("easeInOutSine", "sine_in_out"),
    ("easeInOutExpo", "exponential_in_out"),
    ("easeInOutElastic", "elastic_in_out"),
    ("expo_in_out", "exponential_in_out"),
):
    _easing_registry.alias(_alias, _target)


def get_easing(name: str) -> EasingFn:
    """名前からイージング関数を解決する。

    例外:
    - InvalidConfigurationError: 未登録名。
    """
    try:
        return _easing_registry.get(name)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"unknown easing kind: {name!r}") from e


def apply_easing(kind: str, t: float) -> float:
    """`t` を [0,1] に clamp してイージングを適用する。"""
    fn = get_easing(kind)
    tt = 0.0 if t <= 0.0 else 1.0 if t >= 1.0 else float(t)
    return float(fn(tt))


def list_easings() -> list[str]:
    """登録済みイージング名（正規名）をソートして返す。"""
    return sorted(_easing_registry.list_all())


__all__ = [
    "EasingFn",
    "easing",
    "get_easing",
    "apply_easing",
    "list_easings",
    "linear",
    "quad_in_out",
    "cubic_in_out",
    "sine_in_out",
    "exponential_in_out",
    "elastic_in_out",
]
