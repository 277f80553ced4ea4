"""
どこで: `waves` のレジストリ層（波形関数専用）。
何を: `@waveform` デコレータによる登録と取得/一覧/検査を提供（キーは正規化）。
なぜ: 波形の種類を一貫 API で拡張し、`waves.path` から名前で安全に解決するため。

公開 API 概要:
- `waveform`（デコレータ）: 関数を登録
- `get_waveform(name)` / `list_waveforms()` / `is_waveform_registered(name)`
- `get_registry()`: 読み取り専用ビュー（テスト/診断用）

波形関数の契約:
- `fn(angle: np.ndarray, **params) -> np.ndarray`（角度 [rad] → 概ね [-1, 1]）
- 2π 周期であること（ループ閉合の前提）。
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Mapping

import numpy as np

from common.base_registry import BaseRegistry
from common.errors import InvalidConfigurationError

WaveformFn = Callable[..., np.ndarray]

# 共通レジストリ
_waveform_registry = BaseRegistry("waveform")


def waveform(arg: Any | None = None, /, name: str | None = None):
    """波形関数を登録するデコレータ。

    使用例:
    - `@waveform` / `@waveform()`                → 関数名から自動推論。
    - `@waveform("custom")` / `@waveform(name="custom")` → 明示名で登録。

    例外:
    - TypeError: 関数以外を登録しようとした場合。
    """

    def _register_checked(obj: Any, resolved_name: str | None = None):
        if not inspect.isfunction(obj):
            raise TypeError(f"@waveform は関数のみ登録可能です: got {obj!r}")
        return _waveform_registry.register(resolved_name)(obj)

    # 直付け (@waveform)
    if inspect.isfunction(arg) and name is None:
        return _register_checked(arg, None)

    # 位置引数で名前を渡した (@waveform("name"))
    if isinstance(arg, str) and name is None:

        def _decorator_named(obj: Any):
            return _register_checked(obj, arg)

        return _decorator_named

    def _decorator_generic(obj: Any):
        return _register_checked(obj, name)

    return _decorator_generic


def get_waveform(name: str) -> WaveformFn:
    """登録された波形関数を取得。

    例外:
    - InvalidConfigurationError: 未登録名の場合。
    """
    try:
        return _waveform_registry.get(name)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"unknown waveform kind: {name!r}") from e


def list_waveforms() -> list[str]:
    """登録済み波形名をソートして返す。"""
    return sorted(_waveform_registry.list_all())


def is_waveform_registered(name: str) -> bool:
    """名前が登録済みかを返す。"""
    return _waveform_registry.is_registered(name)


def unregister(name: str) -> None:
    """名前を指定して登録を解除（存在しない場合は無視）。"""
    _waveform_registry.unregister(name)


def get_registry() -> Mapping[str, Any]:
    """読み取り専用ビューとしてレジストリ辞書を返す。"""
    return _waveform_registry.registry


__all__ = [
    "WaveformFn",
    "waveform",
    "get_waveform",
    "list_waveforms",
    "is_waveform_registered",
    "unregister",
    "get_registry",
]
