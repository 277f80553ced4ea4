"""
どこで: `waves.path`（2 点間の変調線パス生成）。
何を: 波形・振幅・周波数・位相・ループ/双方向フラグから、`p1→p2` の線分に沿った
      サンプル点（と線幅）を生成する `generate_wave_path`。
なぜ: 閉じた図形の 1 辺として使う線でも、始点と終点の横方向変位が一致し継ぎ目が
      出ないようにするため。

アルゴリズム（progress = i / segments, i = 0..segments）:
- ループ時は周期数を整数へ丸める（`exact_cycles`）。非ループ時は周波数をそのまま使う。
- 順方向角 `2π·p·c + φ`、逆方向角 `2π·(1-p)·c + φ + π` を重み `w = sin(πp)` で混合する。
- 混合角は「回転数」単位で小数部へ還元してから 2π を掛ける。`w(0) = w(1) = 0` を厳密に
  与えるため、ループ＋双方向では両端の角度がビット単位で一致する。
- 合成波は成分の周波数を掛けた後に還元する（非整数周波数でも段差なし）。
- 変位 `amplitude · f(angle)` を線分の法線方向 `(dy, -dx)/L` へ加える。

戻り値 `WavePathResult` は配列（float64）で点・変位・線幅を保持し、描画層へは
`to_strokes()` でストローク列として渡す。テーパー時は区間ごとに独立したストローク、
非テーパー時は 1 本の連続ポリラインになる。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterator, NamedTuple, Sequence

import numpy as np

from common.errors import InvalidConfigurationError
from common.settings import get as get_settings

from .functions import WaveComponent, compound_wave_turns
from .modulation import ModulationKind, ModulationSpec, harmonic_offset, modulate
from .registry import get_waveform
from .taper import TaperKind, TaperSpec, taper_profile
from .transforms import TransformSpec, apply_transform

TAU = 2.0 * math.pi


@dataclass(frozen=True)
class WaveSpec:
    """線 1 本分の波形設定。

    Parameters
    ----------
    kind : str
        波形名（`waves.registry` に登録済みの名前）。
    amplitude : float
        変位の振幅（座標単位）。
    frequency : float
        ループ時は単位長あたりの周期数、非ループ時は線全体の周期数。
    phase : float
        位相 [rad]。
    loop_enabled, bidirectional_enabled : bool
        整数周期化と双方向混合の有効化。
    animated, speed : bool, float
        有効時は位相へ `time_ms * 0.001 * speed` を加える。
    """

    kind: str = "sine"
    amplitude: float = 5.0
    frequency: float = 0.1
    phase: float = 0.0
    loop_enabled: bool = False
    bidirectional_enabled: bool = False
    animated: bool = False
    speed: float = 0.2
    pulse_width: float = 0.5
    modulation: ModulationSpec | None = None
    transform: TransformSpec | None = None
    components: tuple[WaveComponent, ...] = ()

    def __post_init__(self) -> None:
        # 未知の波形名は生成時ではなく構築時に弾く
        get_waveform(self.kind)
        object.__setattr__(self, "components", tuple(self.components))
        for comp in self.components:
            get_waveform(comp.kind)

    def effective_phase(self, time_ms: float) -> float:
        if not self.animated:
            return float(self.phase)
        t = float(time_ms)
        if not math.isfinite(t):
            t = 0.0
        return float(self.phase) + t * 0.001 * float(self.speed)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "WaveSpec":
        """設定辞書（YAML 由来）から構築する。未知キーは無視。"""
        modulation = data.get("modulation")
        transform = data.get("transform")
        components = data.get("components") or ()
        try:
            return cls(
                kind=str(data.get("type", data.get("kind", "sine"))),
                amplitude=float(data.get("amplitude", 5.0)),
                frequency=float(data.get("frequency", 0.1)),
                phase=float(data.get("phase", 0.0)),
                loop_enabled=bool(data.get("loop", data.get("loop_enabled", False))),
                bidirectional_enabled=bool(
                    data.get("bidirectional", data.get("bidirectional_enabled", False))
                ),
                animated=bool(data.get("animated", False)),
                speed=float(data.get("speed", 0.2)),
                pulse_width=float(data.get("pulse_width", 0.5)),
                modulation=(
                    ModulationSpec.from_mapping(modulation) if isinstance(modulation, dict) else None
                ),
                transform=(
                    TransformSpec(
                        kind=str(transform.get("type", transform.get("kind", ""))),
                        params={k: v for k, v in transform.items() if k not in ("type", "kind")},
                    )
                    if isinstance(transform, dict)
                    else None
                ),
                components=tuple(
                    WaveComponent(
                        kind=str(c.get("type", c.get("kind", "sine"))),
                        weight=float(c.get("weight", 1.0)),
                        frequency=float(c.get("frequency", 1.0)),
                        phase=float(c.get("phase", 0.0)),
                    )
                    for c in components
                ),
            )
        except InvalidConfigurationError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise InvalidConfigurationError(f"invalid wave settings: {data!r}") from e


class PathSample(NamedTuple):
    point: tuple[float, float]
    width: float


@dataclass(frozen=True)
class Stroke:
    """一定線幅で描く 1 本のポリライン（`points` は (M, 2) float64）。"""

    points: np.ndarray
    width: float


@dataclass(frozen=True)
class WavePathResult:
    points: np.ndarray
    offsets: np.ndarray
    widths: np.ndarray | None = None
    base_width: float = 1.0
    cycles: float = 1.0

    @property
    def is_tapered(self) -> bool:
        return self.widths is not None

    def __len__(self) -> int:
        return int(self.points.shape[0])

    def __iter__(self) -> Iterator[PathSample]:
        for i in range(len(self)):
            w = float(self.widths[i]) if self.widths is not None else self.base_width
            yield PathSample((float(self.points[i, 0]), float(self.points[i, 1])), w)

    def to_strokes(self) -> list[Stroke]:
        """描画層向けのストローク列を返す。"""
        if self.widths is None or len(self) < 2:
            return [Stroke(self.points, self.base_width)]
        return [
            Stroke(self.points[i : i + 2], float(self.widths[i])) for i in range(len(self) - 1)
        ]


def exact_cycles(
    frequency: float, length: float, unit_length: float = 30.0, loop_enabled: bool = True
) -> float:
    """線全体に載せる周期数を返す。

    - ループ時: `max(1, round(frequency * length / unit_length))`（0.5 は切り上げ）
    - 非ループ時: `frequency` をそのまま
    - 非正/非有限の周波数は 1
    """
    f = float(frequency)
    if not math.isfinite(f) or f <= 0.0:
        return 1.0
    if not loop_enabled:
        return f
    unit = float(unit_length)
    if not math.isfinite(unit) or unit <= 0.0:
        unit = 30.0
    return float(max(1, math.floor(f * float(length) / unit + 0.5)))


def _frac(u: np.ndarray) -> np.ndarray:
    return u - np.floor(u)


def wave_turns(progress: np.ndarray, cycles: float, *, bidirectional: bool) -> np.ndarray:
    """progress 配列に対する波形位置を回転数単位（未還元）で返す。"""
    p = np.asarray(progress, dtype=np.float64)
    c = float(cycles)
    if not bidirectional:
        return p * c
    # 両端は厳密に 0（sin(π) の丸め誤差を持ち込まない）
    w = np.where((p <= 0.0) | (p >= 1.0), 0.0, np.sin(np.pi * p))
    # w·forward + (1-w)·reverse を回転数単位で整理した形
    return (1.0 - p) * c + w * ((2.0 * p - 1.0) * c - 0.5)


def base_phase(phase: float, *, bidirectional: bool) -> float:
    """角度へ加える定数項。双方向時は逆方向成分の π を含む。"""
    return float(phase) + math.pi if bidirectional else float(phase)


def wave_angles(
    progress: np.ndarray, cycles: float, phase: float, *, bidirectional: bool
) -> np.ndarray:
    """progress 配列に対する波形角 [rad] を返す。"""
    u = wave_turns(progress, cycles, bidirectional=bidirectional)
    return TAU * _frac(u) + base_phase(phase, bidirectional=bidirectional)


def sample_wave(
    turns: np.ndarray, phase: float, wave: WaveSpec, time_s: float = 0.0
) -> np.ndarray:
    """回転数 `turns` と定数位相 `phase` から横方向の変位（振幅込み）を返す。

    単一波形は `2π·frac(turns) + phase` で評価する。合成波は成分の周波数を掛けた後に
    還元するため、非整数周波数の成分でも折り返し位置で段差が出ない。
    """
    u = np.asarray(turns, dtype=np.float64)
    reduced = TAU * _frac(u) + float(phase)
    angle, amplitude = modulate(reduced, float(wave.amplitude), wave.modulation, time_s)
    if wave.modulation is not None and wave.modulation.kind is ModulationKind.HARMONIC:
        values = harmonic_offset(angle, amplitude, wave.modulation, time_s)
    elif wave.components:
        # 変調による角度ずれは位相側へ渡す
        shifted_phase = float(phase) + (angle - reduced)
        values = (
            compound_wave_turns(u, shifted_phase, wave.components, pulse_width=wave.pulse_width)
            * amplitude
        )
    else:
        fn = get_waveform(wave.kind)
        values = fn(angle, pulse_width=wave.pulse_width) * amplitude
    return apply_transform(np.asarray(values, dtype=np.float64), amplitude, wave.transform)


def _as_point(p: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.asarray(p, dtype=np.float64).reshape(-1)
    if arr.shape[0] < 2:
        raise InvalidConfigurationError(f"point must have 2 coordinates: {p!r}")
    return arr[:2].copy()


def generate_wave_path(
    p1: Sequence[float] | np.ndarray,
    p2: Sequence[float] | np.ndarray,
    segments_count: int,
    wave: WaveSpec,
    taper: TaperSpec | None = None,
    *,
    base_width: float = 1.0,
    time_ms: float = 0.0,
    unit_length: float | None = None,
) -> WavePathResult:
    """`p1→p2` に沿った波形パスを生成する（純関数）。

    引数:
        segments_count: 区間数（1 未満は 1）。点数は `segments_count + 1`。
        taper: None または kind=none なら線幅は一定（`widths=None`）。
        time_ms: アニメーション時刻（`wave.animated` と変調で使用）。
        unit_length: 1 周期あたりの基準長。None なら設定値（既定 30）。
    """
    start = _as_point(p1)
    end = _as_point(p2)
    bw = float(base_width)
    delta = end - start
    length = float(math.hypot(float(delta[0]), float(delta[1])))

    if not (length > 0.0) or not math.isfinite(length):
        return WavePathResult(
            points=start.reshape(1, 2),
            offsets=np.zeros(1, dtype=np.float64),
            widths=None,
            base_width=bw,
            cycles=0.0,
        )

    n = max(1, int(segments_count))
    progress = np.arange(n + 1, dtype=np.float64) / n
    unit = float(get_settings().WAVE_UNIT_LENGTH if unit_length is None else unit_length)
    cycles = exact_cycles(wave.frequency, length, unit, wave.loop_enabled)

    t = float(time_ms) if math.isfinite(float(time_ms)) else 0.0
    bidi = wave.bidirectional_enabled
    turns = wave_turns(progress, cycles, bidirectional=bidi)
    phase = base_phase(wave.effective_phase(t), bidirectional=bidi)
    offsets = sample_wave(turns, phase, wave, t * 0.001)

    normal = np.array([delta[1], -delta[0]], dtype=np.float64) / length
    points = start + np.outer(progress, delta) + np.outer(offsets, normal)

    widths = None
    if taper is not None and taper.kind is not TaperKind.NONE:
        widths = bw * taper_profile(taper.kind, progress, taper.start_width_frac, taper.end_width_frac)

    return WavePathResult(
        points=points, offsets=offsets, widths=widths, base_width=bw, cycles=cycles
    )


__all__ = [
    "TAU",
    "WaveSpec",
    "PathSample",
    "Stroke",
    "WavePathResult",
    "exact_cycles",
    "wave_turns",
    "base_phase",
    "wave_angles",
    "sample_wave",
    "generate_wave_path",
]
