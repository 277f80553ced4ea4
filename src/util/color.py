"""
どこで: `util.color`。
何を: 色指定の解析/変換（Hex, RGB(A) 0–255, CSS rgba 文字列）を一元化。
なぜ: 色補間・描画シンク全体で同一の受理仕様とエラーメッセージを提供するため。
"""

from __future__ import annotations

from typing import Sequence


def _clamp255(x: float) -> float:
    return 0.0 if x < 0.0 else 255.0 if x > 255.0 else float(x)


def parse_hex_color_str(s: str) -> tuple[int, int, int, int]:
    """Hex 文字列から RGBA(0–255) を返す。

    受理形式: "#RRGGBB", "#RRGGBBAA", "0xRRGGBB", "0xRRGGBBAA", "RRGGBB", "RRGGBBAA",
    および短縮形 "#RGB"。大文字/小文字は不問。
    """
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    elif t.lower().startswith("0x"):
        t = t[2:]
    if len(t) == 3:
        t = "".join(ch * 2 for ch in t)
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RRGGBB or RRGGBBAA)")
    try:
        r = int(t[0:2], 16)
        g = int(t[2:4], 16)
        b = int(t[4:6], 16)
        a = int(t[6:8], 16) if len(t) == 8 else 255
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    return (r, g, b, a)


def _as_sequence(value: object) -> Sequence[float | int] | None:
    if isinstance(value, (list, tuple)):
        return value  # type: ignore[return-value]
    return None


def parse_rgb255(value: object) -> tuple[float, float, float]:
    """色値を RGB(0–255, float) の 3 要素タプルへ解析する。

    - 受理: Hex 文字列、(r,g,b[,a]) の 0–255 数値列（alpha は無視）
    - 範囲外のチャネルは [0,255] へ丸める（丸めは clamp のみ、整数化はしない）
    """
    if isinstance(value, str):
        r, g, b, _ = parse_hex_color_str(value)
        return (float(r), float(g), float(b))
    seq = _as_sequence(value)
    if seq is None:
        raise ValueError(f"unsupported color type: {type(value)!r}")
    if len(seq) not in (3, 4):
        raise ValueError("color tuple/list must be length 3 or 4")
    try:
        return (_clamp255(float(seq[0])), _clamp255(float(seq[1])), _clamp255(float(seq[2])))
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {value!r}") from e


def to_css_rgba(r: int, g: int, b: int, a: float) -> str:
    """CSS 互換の `rgba(r, g, b, a)` 文字列を返す。"""
    return f"rgba({int(r)}, {int(g)}, {int(b)}, {float(a):g})"


__all__ = [
    "parse_hex_color_str",
    "parse_rgb255",
    "to_css_rgba",
]
