"""
taper（線幅プロファイル）

位置 progress∈[0,1] → 線幅係数（基準線幅に対する比）。s=始端比, e=終端比。

| kind   | 係数                                                          |
|--------|---------------------------------------------------------------|
| start  | s + (1-s)·p                                                   |
| end    | 1 - (1-e)·p                                                   |
| both   | p<0.5: s+(1-s)·2p         / それ以外: 1-(1-e)·2(p-0.5)        |
| middle | p<0.5: 1-(1-s)·2(0.5-p)   / それ以外: 1-(1-e)·2(p-0.5)        |
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from common.errors import InvalidConfigurationError


class TaperKind(Enum):
    NONE = "none"
    START = "start"
    END = "end"
    BOTH = "both"
    MIDDLE = "middle"

    @classmethod
    def parse(cls, value: "TaperKind | str | None") -> "TaperKind":
        if isinstance(value, TaperKind):
            return value
        if value is None:
            return cls.NONE
        try:
            return cls(str(value).lower())
        except ValueError as e:
            raise InvalidConfigurationError(f"unknown taper kind: {value!r}") from e


@dataclass(frozen=True)
class TaperSpec:
    kind: TaperKind = TaperKind.NONE
    start_width_frac: float = 1.0
    end_width_frac: float = 1.0

    @property
    def active(self) -> bool:
        return self.kind is not TaperKind.NONE

    @classmethod
    def from_mapping(cls, data: dict) -> "TaperSpec":
        try:
            return cls(
                kind=TaperKind.parse(data.get("type", data.get("kind"))),
                start_width_frac=float(data.get("start_width", data.get("start_width_frac", 1.0))),
                end_width_frac=float(data.get("end_width", data.get("end_width_frac", 1.0))),
            )
        except InvalidConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise InvalidConfigurationError(f"invalid taper settings: {data!r}") from e


def taper_profile(
    kind: TaperKind, progress: np.ndarray, start_frac: float, end_frac: float
) -> np.ndarray:
    """progress 配列に対する線幅係数を返す（負にはならない）。"""
    p = np.asarray(progress, dtype=np.float64)
    s = max(0.0, float(start_frac))
    e = max(0.0, float(end_frac))
    if kind is TaperKind.START:
        w = s + (1.0 - s) * p
    elif kind is TaperKind.END:
        w = 1.0 - (1.0 - e) * p
    elif kind is TaperKind.BOTH:
        w = np.where(p < 0.5, s + (1.0 - s) * 2.0 * p, 1.0 - (1.0 - e) * 2.0 * (p - 0.5))
    elif kind is TaperKind.MIDDLE:
        w = np.where(p < 0.5, 1.0 - (1.0 - s) * 2.0 * (0.5 - p), 1.0 - (1.0 - e) * 2.0 * (p - 0.5))
    else:
        w = np.ones_like(p)
    return np.maximum(w, 0.0)


__all__ = ["TaperKind", "TaperSpec", "taper_profile"]
