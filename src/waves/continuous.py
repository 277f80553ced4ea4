"""
continuous（閉じた多角形を 1 本の波線で描く）

多角形の各辺を個別に波打たせると、辺ごとに周期が揃わず頂点で波形が折れる。
ここでは周長全体を 1 本の線とみなし、周長に整数周期を載せて連続した波線を作る。

- 点数は `max(min_points, ceil(周長 / density))`（既定で 5 単位ごとに 1 点、最低 50 点）。
- 法線は各点が属する辺の向きから求める。
- 位相・双方向混合は `waves.path` と同じ角度計算を共有する。
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from common.errors import InvalidConfigurationError
from common.settings import get as get_settings

from .path import WavePathResult, WaveSpec, base_phase, exact_cycles, sample_wave, wave_turns


def generate_closed_path(
    vertices: Sequence[Sequence[float]] | np.ndarray,
    wave: WaveSpec,
    *,
    base_width: float = 1.0,
    time_ms: float = 0.0,
    density: float = 5.0,
    min_points: int = 50,
    unit_length: float | None = None,
) -> WavePathResult:
    """頂点列（暗黙に閉じる）に沿った連続波線を返す。

    頂点が 2 未満、または周長 0 の場合は頂点列をそのまま（変位 0 で）返す。
    """
    verts = np.asarray(vertices, dtype=np.float64)
    if verts.ndim != 2 or verts.shape[1] < 2:
        raise InvalidConfigurationError(f"vertices must be (N, 2): shape={verts.shape}")
    verts = verts[:, :2]
    bw = float(base_width)
    if verts.shape[0] < 2:
        return WavePathResult(
            points=verts.copy(), offsets=np.zeros(verts.shape[0]), base_width=bw, cycles=0.0
        )

    closed = np.vstack([verts, verts[:1]])
    seg_vec = np.diff(closed, axis=0)
    seg_len = np.hypot(seg_vec[:, 0], seg_vec[:, 1])
    cumulative = np.concatenate([[0.0], np.cumsum(seg_len)])
    total = float(cumulative[-1])
    if not (total > 0.0) or not math.isfinite(total):
        return WavePathResult(
            points=verts.copy(), offsets=np.zeros(verts.shape[0]), base_width=bw, cycles=0.0
        )

    step = float(density) if density and density > 0 else 5.0
    count = max(int(min_points), int(math.ceil(total / step)), 1)
    progress = np.arange(count + 1, dtype=np.float64) / count
    # 終点は始点と同じ辺・同じ法線で評価する（閉路の継ぎ目を作らない）
    distance = np.mod(progress * total, total)

    # 各点が属する辺（長さ 0 の辺は飛ばされる）
    index = np.searchsorted(cumulative[1:], distance, side="right")
    index = np.clip(index, 0, seg_len.shape[0] - 1)
    lengths = seg_len[index]
    safe = np.where(lengths > 0.0, lengths, 1.0)
    local = np.where(lengths > 0.0, (distance - cumulative[index]) / safe, 0.0)
    base = closed[index] + seg_vec[index] * local[:, None]
    normal = np.column_stack([seg_vec[index, 1], -seg_vec[index, 0]]) / safe[:, None]

    unit = float(get_settings().WAVE_UNIT_LENGTH if unit_length is None else unit_length)
    cycles = exact_cycles(wave.frequency, total, unit, loop_enabled=True)
    t = float(time_ms) if math.isfinite(float(time_ms)) else 0.0
    bidi = wave.bidirectional_enabled
    turns = wave_turns(progress, cycles, bidirectional=bidi)
    phase = base_phase(wave.effective_phase(t), bidirectional=bidi)
    offsets = sample_wave(turns, phase, wave, t * 0.001)
    points = base + normal * offsets[:, None]
    return WavePathResult(points=points, offsets=offsets, base_width=bw, cycles=cycles)


__all__ = ["generate_closed_path"]
