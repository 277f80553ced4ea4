"""
waves パッケージ: 変調線（波形パス）の生成。

- `functions`: 波形関数（`@waveform` で登録）と合成波
- `path`: 2 点間の波形パス `generate_wave_path`
- `continuous`: 閉じた多角形を 1 本の波線で描く `generate_closed_path`
- `taper` / `modulation` / `transforms`: 線幅プロファイルと変位の整形

波形関数はモジュール import 時に登録されるため、ここで副作用 import を行う。
"""

from . import functions  # noqa: F401
from .continuous import generate_closed_path
from .functions import WaveComponent, compound_wave
from .modulation import ModulationKind, ModulationSpec
from .path import (
    PathSample,
    Stroke,
    WavePathResult,
    WaveSpec,
    exact_cycles,
    generate_wave_path,
)
from .registry import get_waveform, list_waveforms, waveform
from .taper import TaperKind, TaperSpec, taper_profile
from .transforms import TransformSpec

__all__ = [
    "waveform",
    "get_waveform",
    "list_waveforms",
    "WaveComponent",
    "compound_wave",
    "ModulationKind",
    "ModulationSpec",
    "TransformSpec",
    "TaperKind",
    "TaperSpec",
    "taper_profile",
    "WaveSpec",
    "PathSample",
    "Stroke",
    "WavePathResult",
    "exact_cycles",
    "generate_wave_path",
    "generate_closed_path",
]
