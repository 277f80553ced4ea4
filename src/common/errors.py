"""
どこで: `common.errors`。
何を: 設定不備（プログラマ/構成エラー）を表す唯一の例外型を定義。
なぜ: 数値的な縁ケース（フォールバックで継続）と、呼び出し側で即座に失敗させるべき
      構成エラーを型で区別するため。
"""

from __future__ import annotations


class InvalidConfigurationError(ValueError):
    """構成値が不正（空の色リスト、非正の周期、子数 0 など）。

    `ValueError` を継承するため、既存の `except ValueError` でも捕捉できる。
    送出はキャッシュ等の状態を変更する前に行う。
    """


__all__ = ["InvalidConfigurationError"]
