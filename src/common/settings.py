"""
どこで: `common.settings`
何を: プロジェクトの環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_int, env_str


@dataclass
class _Settings:
    # フレームクロック
    TARGET_FPS: float = 60.0
    MAX_DELTA_MS: float = 250.0
    SMOOTHING_ALPHA: float = 0.9

    # 品質ティア
    ADAPTIVE_QUALITY: bool = True
    QUALITY_DEBOUNCE: int = 8

    # 波形パス
    WAVE_UNIT_LENGTH: float = 30.0

    # Misc
    LOG_LEVEL: str = "INFO"


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - 数値は下限/上限丸めを適用し、不正値は既定値へフォールバック。
    """
    _settings.TARGET_FPS = env_float("SG_TARGET_FPS", 60.0, min_value=1.0, max_value=1000.0)
    _settings.MAX_DELTA_MS = env_float("SG_MAX_DELTA_MS", 250.0, min_value=1.0)
    _settings.SMOOTHING_ALPHA = env_float("SG_SMOOTHING_ALPHA", 0.9, min_value=0.0, max_value=0.999)

    _settings.ADAPTIVE_QUALITY = env_bool("SG_ADAPTIVE_QUALITY", True)
    _settings.QUALITY_DEBOUNCE = env_int("SG_QUALITY_DEBOUNCE", 8, min_value=1) or 1

    _settings.WAVE_UNIT_LENGTH = env_float("SG_WAVE_UNIT_LENGTH", 30.0, min_value=1e-6)

    _settings.LOG_LEVEL = env_str("SG_LOG_LEVEL", "INFO")


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
