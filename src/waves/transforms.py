"""
transforms（変位の整形）

変位値（振幅込み）に点ごとの整形を掛ける。いずれも純関数で、両端の変位が等しければ
整形後も等しい（ループ閉合を崩さない）。

- invert: 符号反転
- exponential: |v/A|^exponent で尖らせる/丸める
- clip: ±A·threshold で飽和
- fold: ±A を超えた分を折り返す
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import numpy as np

from common.errors import InvalidConfigurationError


def invert(values: np.ndarray, amplitude: float) -> np.ndarray:
    return -values


def exponential(values: np.ndarray, amplitude: float, exponent: float = 2.0) -> np.ndarray:
    if amplitude == 0.0:
        return np.zeros_like(values)
    normalized = values / amplitude
    return np.sign(normalized) * np.power(np.abs(normalized), float(exponent)) * amplitude


def clip(values: np.ndarray, amplitude: float, threshold: float = 0.8) -> np.ndarray:
    limit = abs(amplitude) * float(threshold)
    return np.clip(values, -limit, limit)


def fold(values: np.ndarray, amplitude: float) -> np.ndarray:
    if amplitude == 0.0:
        return np.zeros_like(values)
    normalized = values / amplitude
    folded = np.where(
        normalized > 1.0, 2.0 - normalized, np.where(normalized < -1.0, -2.0 - normalized, normalized)
    )
    return folded * amplitude


_TRANSFORMS: dict[str, Callable[..., np.ndarray]] = {
    "invert": invert,
    "exponential": exponential,
    "clip": clip,
    "fold": fold,
}


@dataclass(frozen=True)
class TransformSpec:
    kind: str
    params: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.kind not in _TRANSFORMS:
            raise InvalidConfigurationError(f"unknown wave transform: {self.kind!r}")


def apply_transform(values: np.ndarray, amplitude: float, spec: TransformSpec | None) -> np.ndarray:
    if spec is None:
        return values
    return _TRANSFORMS[spec.kind](values, amplitude, **spec.params)


__all__ = ["TransformSpec", "apply_transform", "invert", "exponential", "clip", "fold"]
