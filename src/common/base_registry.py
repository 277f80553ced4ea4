"""
共通レジストリ基底クラス
waves/（波形）と engine.animation（イージング）の両方で使用する統一されたレジストリシステム
"""

import re
from typing import Any, Callable


class BaseRegistry:
    """名前付き関数のレジストリ。

    - 文字列キーは正規化されます（大文字小文字・キャメル→スネーク・ハイフンを吸収）。
    - デコレータは名前省略可。省略時は関数名から自動推論します。
    - 別名（alias）は登録済みキーへの参照として保持します。
    """

    def __init__(self, kind: str = "entry"):
        # 表示用の種別名（エラーメッセージに使用）
        self._kind = kind
        self._registry: dict[str, Any] = {}
        self._aliases: dict[str, str] = {}

    # === 内部ユーティリティ ===
    @staticmethod
    def _camel_to_snake(name: str) -> str:
        s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
        s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
        return s2.lower()

    @classmethod
    def _normalize_key(cls, name: str) -> str:
        """レジストリキーの正規化（例: "easeInOutCubic" -> "ease_in_out_cubic"）。"""
        if not isinstance(name, str):
            raise TypeError("レジストリキーは str である必要があります")
        name = name.strip().replace("-", "_")
        if not name:
            raise ValueError("レジストリキーは空であってはなりません")
        # 大文字を含む場合のみキャメル→スネーク変換
        return cls._camel_to_snake(name) if any(c.isupper() for c in name) else name.lower()

    def _resolve(self, name: str) -> str:
        key = self._normalize_key(name)
        return self._aliases.get(key, key)

    def register(self, name: str | None = None) -> Callable:
        """関数をレジストリに登録するデコレータ。"""

        def decorator(obj: Any) -> Any:
            key = self._normalize_key(name) if name else self._normalize_key(obj.__name__)
            if key in self._registry and self._registry[key] is not obj:
                raise ValueError(f"{self._kind} '{key}' は既に登録されています")
            self._registry[key] = obj
            return obj

        return decorator

    def alias(self, alias_name: str, target: str) -> None:
        """登録済み `target` に別名を付与する。"""
        target_key = self._normalize_key(target)
        if target_key not in self._registry:
            raise KeyError(f"{self._kind} '{target}' は登録されていません")
        self._aliases[self._normalize_key(alias_name)] = target_key

    def get(self, name: str) -> Any:
        """登録された関数を取得。"""
        key = self._resolve(name)
        if key not in self._registry:
            raise KeyError(f"{self._kind} '{name}' は登録されていません")
        return self._registry[key]

    def canonical_name(self, name: str) -> str:
        """別名・表記揺れを解決した正規キーを返す（未登録なら KeyError）。"""
        key = self._resolve(name)
        if key not in self._registry:
            raise KeyError(f"{self._kind} '{name}' は登録されていません")
        return key

    def list_all(self) -> list[str]:
        """登録されているすべての名前を取得（未ソート、別名は含まない）。"""
        return list(self._registry.keys())

    def is_registered(self, name: str) -> bool:
        """指定された名前（別名を含む）が登録されているかチェック"""
        return self._resolve(name) in self._registry

    def unregister(self, name: str) -> None:
        """レジストリから削除（名前が存在しない場合は無視）。関連する別名も外す。"""
        key = self._normalize_key(name)
        if key in self._registry:
            del self._registry[key]
            for a, t in list(self._aliases.items()):
                if t == key:
                    del self._aliases[a]

    @property
    def registry(self) -> dict[str, Any]:
        """レジストリの読み取り専用アクセス"""
        return self._registry.copy()
