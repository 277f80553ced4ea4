"""
どこで: `common` パッケージ。
何を: waves/engine 双方で使う軽量ユーティリティ（BaseRegistry・例外型など）。
なぜ: 共通基盤を分離し、依存の向きを単純化するため。
"""

from .base_registry import BaseRegistry
from .errors import InvalidConfigurationError

__all__ = [
    "BaseRegistry",
    "InvalidConfigurationError",
]
