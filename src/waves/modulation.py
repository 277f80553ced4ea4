"""
modulation（波形の時間変調）

- frequency: 角度へ `sin(t·f)·depth` を加算（全サンプル同量のため閉合は保たれる）。
- amplitude: 振幅へ `1 + sin(t·f)·depth` を乗算。
- phase: frequency と同形だが既定深さが π/2。
- harmonic: 基本波に整数倍音（重み列）を加算した変位を直接返す。

時刻 `time_s` [秒] は常に引数で受け取る。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from common.errors import InvalidConfigurationError


class ModulationKind(Enum):
    NONE = "none"
    FREQUENCY = "frequency"
    AMPLITUDE = "amplitude"
    PHASE = "phase"
    HARMONIC = "harmonic"


@dataclass(frozen=True)
class ModulationSpec:
    kind: ModulationKind = ModulationKind.NONE
    frequency: float = 0.1
    depth: float | None = None  # None なら種別ごとの既定値
    harmonics: tuple[float, ...] = (1.0, 0.5, 0.25)

    @classmethod
    def from_mapping(cls, data: dict) -> "ModulationSpec":
        try:
            kind = ModulationKind(str(data.get("type", data.get("kind", "none"))).lower())
        except ValueError as e:
            raise InvalidConfigurationError(f"unknown modulation kind: {data!r}") from e
        depth = data.get("depth")
        return cls(
            kind=kind,
            frequency=float(data.get("frequency", 0.1)),
            depth=None if depth is None else float(depth),
            harmonics=tuple(float(h) for h in data.get("harmonics", (1.0, 0.5, 0.25))),
        )

    def resolved_depth(self) -> float:
        if self.depth is not None:
            return float(self.depth)
        return math.pi / 2.0 if self.kind is ModulationKind.PHASE else 0.5


def modulate(
    angle: np.ndarray, amplitude: float, spec: ModulationSpec | None, time_s: float
) -> tuple[np.ndarray, float]:
    """角度/振幅に変調を適用して返す（harmonic はここでは何もしない）。"""
    if spec is None or spec.kind in (ModulationKind.NONE, ModulationKind.HARMONIC):
        return angle, amplitude
    shift = math.sin(float(time_s) * spec.frequency) * spec.resolved_depth()
    if spec.kind is ModulationKind.AMPLITUDE:
        return angle, amplitude * (1.0 + shift)
    return angle + shift, amplitude


def harmonic_offset(
    angle: np.ndarray, amplitude: float, spec: ModulationSpec, time_s: float
) -> np.ndarray:
    """倍音合成による変位（振幅込み）を返す。"""
    harmonics = spec.harmonics or (1.0,)
    out = np.sin(angle) * amplitude * harmonics[0]
    for i in range(1, len(harmonics)):
        order = i + 1
        out = out + np.sin(angle * order + float(time_s) * 0.1 * i) * amplitude * harmonics[i]
    return out


__all__ = ["ModulationKind", "ModulationSpec", "modulate", "harmonic_offset"]
