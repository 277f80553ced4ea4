from __future__ import annotations

import math

import pytest

from common.errors import InvalidConfigurationError
from engine.animation.fractal_timing import (
    PHI,
    FractalTimingContext,
    compute_timing,
    sibling_offsets,
    turn_length_ms,
)


def test_phi_value() -> None:
    assert PHI == pytest.approx(1.618033988749895)


def test_root_child_has_no_offset() -> None:
    assert compute_timing(1234.5, 3, 0, 6) == 1234.5


def test_formula() -> None:
    value = compute_timing(100.0, 2, 1, 4)
    expected = 100.0 + (1 / 4) * 2 * math.pi * PHI**-2 * 1000
    assert value == pytest.approx(expected)


@pytest.mark.parametrize("n", [1, 3, 6, 12])
@pytest.mark.parametrize("depth", [0, 1, 4])
def test_siblings_evenly_spaced_over_one_turn(n: int, depth: int) -> None:
    base = 500.0
    offsets = [t - base for t in sibling_offsets(base, depth, n)]
    turn = turn_length_ms(depth)
    step = turn / n
    for i, off in enumerate(offsets):
        assert off == pytest.approx(i * step)
    # 次の兄弟（i = n）はちょうど 1 周先
    assert compute_timing(base, depth, n, n) - base == pytest.approx(turn)


@pytest.mark.parametrize("depth", [0, 1, 2, 5])
def test_depth_ratio_is_inverse_phi(depth: int) -> None:
    base = 42.0
    a = compute_timing(base, depth, 1, 5) - base
    b = compute_timing(base, depth + 1, 1, 5) - base
    assert b / a == pytest.approx(1.0 / PHI)


@pytest.mark.parametrize("total", [0, -3])
def test_non_positive_total_children_raises(total: int) -> None:
    with pytest.raises(InvalidConfigurationError):
        compute_timing(0.0, 1, 0, total)


def test_context_matches_function() -> None:
    ctx = FractalTimingContext(base_time_ms=10.0, depth=1, child_index=2, total_children=3)
    assert ctx.offset_ms() == compute_timing(10.0, 1, 2, 3)
