"""
どこで: `api` 入口（高レベル公開 API）。
何を: フレームクロック・色補間・フラクタルタイミング・波形パス・オーケストレータを再輸出。
なぜ: 利用者が単一名前空間から設定解決→ティック駆動→描画層への出力まで完結できるようにするため。

Usage:
    from api import build_orchestrator

    class Sink:
        def begin_frame(self, info): ...
        def draw_shape(self, node): ...
        def draw_strokes(self, strokes, color): ...
        def end_frame(self, info): ...

    orchestrator = build_orchestrator(Sink())
    orchestrator.tick(now_ms)  # ホストのレンダーティックごとに呼ぶ
"""

from common.errors import InvalidConfigurationError
from engine.animation.color_cycle import ColorCycleInterpolator, ColorStopSet, Rgba
from engine.animation.easing import easing as easing  # 公開唯一経路（api.easing）
from engine.animation.fractal_timing import PHI, FractalTimingContext, compute_timing
from engine.core.frame_clock import FrameClock, FrameClockConfig, TickResult
from engine.core.quality import QualityParams, QualityTier, transition_quality
from engine.render.orchestrator import RenderTickOrchestrator
from engine.render.scene import SceneConfig
from engine.render.types import DrawingSink, FrameInfo, ShapeNode
from waves import (
    Stroke,
    TaperKind,
    TaperSpec,
    WavePathResult,
    WaveSpec,
    generate_closed_path,
    generate_wave_path,
)
from waves.registry import waveform as waveform  # 公開唯一経路（api.waveform）

from .runner import build_orchestrator, resolve_scene

__all__ = [
    # 入口
    "build_orchestrator",
    "resolve_scene",
    "RenderTickOrchestrator",
    "SceneConfig",
    "DrawingSink",
    "FrameInfo",
    "ShapeNode",
    # クロック/品質
    "FrameClock",
    "FrameClockConfig",
    "TickResult",
    "QualityTier",
    "QualityParams",
    "transition_quality",
    # 色/タイミング
    "ColorCycleInterpolator",
    "ColorStopSet",
    "Rgba",
    "PHI",
    "compute_timing",
    "FractalTimingContext",
    # 波形
    "WaveSpec",
    "TaperKind",
    "TaperSpec",
    "WavePathResult",
    "Stroke",
    "generate_wave_path",
    "generate_closed_path",
    # ユーザー拡張用デコレータ
    "easing",
    "waveform",
    # 例外
    "InvalidConfigurationError",
]

# バージョン情報
__version__ = "2026.10"
__api_version__ = "1.0"
