"""共通フィクスチャ。

- 乱数シード固定
- 設定（`SG_*` 環境変数）の分離
- 呼び出しを記録する DrawingSink
"""

from __future__ import annotations

import os
from typing import Any, Iterator

import numpy as np
import pytest

from common import settings as settings_mod


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """テストごとに `SG_*` を外した状態で設定を読み直す。"""
    for name in list(os.environ):
        if name.startswith("SG_"):
            monkeypatch.delenv(name, raising=False)
    settings_mod.reload_from_env()
    yield
    monkeypatch.undo()
    settings_mod.reload_from_env()


class RecordingSink:
    """DrawingSink の呼び出しを (種別, 引数) で記録する。"""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def begin_frame(self, info: Any) -> None:
        self.calls.append(("begin", info))

    def draw_shape(self, node: Any) -> None:
        self.calls.append(("shape", node))

    def draw_strokes(self, strokes: Any, color: Any) -> None:
        self.calls.append(("strokes", (list(strokes), color)))

    def end_frame(self, info: Any) -> None:
        self.calls.append(("end", info))

    def kinds(self) -> list[str]:
        return [k for k, _ in self.calls]

    def of(self, kind: str) -> list[Any]:
        return [v for k, v in self.calls if k == kind]


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()
