"""
波形関数（角度 [rad] → [-1, 1]）

- 基本: sine / cosine / square / triangle。
- 追加: sawtooth / pulse（パルス幅指定）/ noise（決定的な擬似ノイズ）/ none（平坦）。
- `compound_wave` は複数成分（種類・重み・周波数倍率・位相）を重み正規化して合成します。

すべて NumPy 配列をベクトル演算で処理します。振幅は呼び出し側で掛けます。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from .registry import get_waveform, waveform

_TWO_PI = 2.0 * np.pi


@waveform
def sine(angle: np.ndarray, **_: object) -> np.ndarray:
    return np.sin(angle)


@waveform
def cosine(angle: np.ndarray, **_: object) -> np.ndarray:
    return np.cos(angle)


@waveform
def square(angle: np.ndarray, **_: object) -> np.ndarray:
    # sin が正なら +1、それ以外（0 を含む）は -1
    return np.where(np.sin(angle) > 0.0, 1.0, -1.0)


@waveform
def triangle(angle: np.ndarray, **_: object) -> np.ndarray:
    s = np.clip(np.sin(angle), -1.0, 1.0)
    return (2.0 / np.pi) * np.arcsin(s)


@waveform
def sawtooth(angle: np.ndarray, **_: object) -> np.ndarray:
    normalized = np.mod(angle, _TWO_PI) / _TWO_PI
    return normalized * 2.0 - 1.0


@waveform
def pulse(angle: np.ndarray, *, pulse_width: float = 0.5, **_: object) -> np.ndarray:
    pw = min(max(float(pulse_width), 0.0), 1.0)
    normalized = np.mod(angle, _TWO_PI) / _TWO_PI
    return np.where(normalized < pw, 1.0, -1.0)


@waveform
def noise(angle: np.ndarray, **_: object) -> np.ndarray:
    return np.sin(angle * 100.0 + np.cos(angle * 50.0))


@waveform
def none(angle: np.ndarray, **_: object) -> np.ndarray:
    return np.zeros_like(np.asarray(angle, dtype=np.float64))


@dataclass(frozen=True)
class WaveComponent:
    """合成波の 1 成分。"""

    kind: str = "sine"
    weight: float = 1.0
    frequency: float = 1.0
    phase: float = 0.0


def _weighted_sum(
    component_angle: Callable[[WaveComponent], np.ndarray],
    components: Sequence[WaveComponent],
    pulse_width: float,
) -> np.ndarray:
    # components は空でないこと（呼び出し側で sine へ分岐済み）
    weights = [float(comp.weight) for comp in components]
    values = [
        get_waveform(comp.kind)(component_angle(comp), pulse_width=pulse_width) * w
        for comp, w in zip(components, weights)
    ]
    total = np.sum(values, axis=0)
    weight_sum = sum(weights)
    if weight_sum > 0.0:
        total = total / weight_sum
    return np.asarray(total, dtype=np.float64)


def compound_wave(
    angle: np.ndarray, components: Sequence[WaveComponent], *, pulse_width: float = 0.5
) -> np.ndarray:
    """成分の重み付き和を重み合計で正規化して返す。成分が空なら sine。"""
    a = np.asarray(angle, dtype=np.float64)
    if not components:
        return np.sin(a)
    return _weighted_sum(
        lambda comp: a * float(comp.frequency) + float(comp.phase), components, pulse_width
    )


def compound_wave_turns(
    turns: np.ndarray,
    phase: np.ndarray | float,
    components: Sequence[WaveComponent],
    *,
    pulse_width: float = 0.5,
) -> np.ndarray:
    """角度 `2π·turns + phase` に対する `compound_wave` を返す。

    成分ごとに周波数を掛けてから回転数の小数部へ還元する。非整数周波数でも
    `2π` での折り返しによる段差が出ず、整数周波数なら整数回転の両端が一致する。
    """
    u = np.asarray(turns, dtype=np.float64)
    ph = np.asarray(phase, dtype=np.float64)
    if not components:
        return np.sin(2.0 * np.pi * (u - np.floor(u)) + ph)

    def component_angle(comp: WaveComponent) -> np.ndarray:
        f = float(comp.frequency)
        scaled = u * f
        return 2.0 * np.pi * (scaled - np.floor(scaled)) + ph * f + float(comp.phase)

    return _weighted_sum(component_angle, components, pulse_width)


__all__ = [
    "sine",
    "cosine",
    "square",
    "triangle",
    "sawtooth",
    "pulse",
    "noise",
    "none",
    "WaveComponent",
    "compound_wave",
    "compound_wave_turns",
]
