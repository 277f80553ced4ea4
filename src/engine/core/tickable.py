"""
どこで: `engine.core` の更新インターフェース。
何を: ホスト時刻 [ms] を受け取る `tick(now_ms)` を持つ `Tickable` Protocol を定義。
なぜ: フレーム駆動のオブジェクト（クロック/オーケストレータ等）を一様に扱うため。
"""

from typing import Any, Protocol


class Tickable(Protocol):
    """1 フレーム分の更新を行うインターフェース。"""

    def tick(self, now_ms: float) -> Any:
        """ホスト時刻 `now_ms` [ms] で内部状態を 1 ティック進める。"""
