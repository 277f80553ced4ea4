"""
どこで: `api.runner`。
何を: 設定ファイル/辞書と環境変数からシーンを解決し、描画層を受け取って
      `RenderTickOrchestrator` を組み立てる `build_orchestrator`。
なぜ: ホスト（ウィンドウ/キャンバス/ヘッドレス）側はティックを呼ぶだけで済むよう、
      設定解決とロギング初期化を入口に集約するため。

設定解決の優先順:
1) 引数 `config`（辞書 or `SceneConfig`）
2) `util.utils.load_config()`（`configs/default.yaml` → ルート `config.yaml`）
クロック既定値は `common.settings`（`SG_*` 環境変数）から取る。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from common.logging import setup_default_logging
from engine.render.orchestrator import RenderTickOrchestrator
from engine.render.scene import SceneConfig
from engine.render.types import DrawingSink
from util.utils import load_config

logger = logging.getLogger(__name__)


def resolve_scene(
    config: SceneConfig | Mapping[str, Any] | None = None, *, root: Path | None = None
) -> SceneConfig:
    """引数または設定ファイルから `SceneConfig` を返す。"""
    if isinstance(config, SceneConfig):
        return config
    if config is None:
        config = load_config(root)
        if not config:
            logger.debug("no config file found; using built-in scene defaults")
    return SceneConfig.from_mapping(config)


def build_orchestrator(
    sink: DrawingSink,
    config: SceneConfig | Mapping[str, Any] | None = None,
    *,
    root: Path | None = None,
) -> RenderTickOrchestrator:
    """描画層 `sink` に結線済みのオーケストレータを返す。

    例外:
    - InvalidConfigurationError: 設定が不正な場合（空の色リスト、未知の波形名など）。
    """
    setup_default_logging()
    scene = resolve_scene(config, root=root)
    orchestrator = RenderTickOrchestrator(scene, sink)
    logger.info(
        "orchestrator ready: target %.1f FPS, %d line(s), adaptive=%s",
        scene.clock.target_fps,
        len(scene.lines),
        scene.clock.adaptive_quality,
    )
    return orchestrator


__all__ = ["resolve_scene", "build_orchestrator"]
