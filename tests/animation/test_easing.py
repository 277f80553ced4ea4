from __future__ import annotations

import pytest

from common.errors import InvalidConfigurationError
from engine.animation.easing import apply_easing, easing, get_easing, list_easings

BUILTIN = [
    "linear",
    "quad_in_out",
    "cubic_in_out",
    "sine_in_out",
    "exponential_in_out",
    "elastic_in_out",
]


def test_builtin_easings_registered() -> None:
    names = list_easings()
    for name in BUILTIN:
        assert name in names


@pytest.mark.parametrize("name", BUILTIN)
def test_endpoints(name: str) -> None:
    fn = get_easing(name)
    assert fn(0.0) == pytest.approx(0.0, abs=1e-9)
    assert fn(1.0) == pytest.approx(1.0, abs=1e-9)


@pytest.mark.parametrize("name", ["quad_in_out", "cubic_in_out", "sine_in_out"])
def test_symmetric_midpoint(name: str) -> None:
    assert get_easing(name)(0.5) == pytest.approx(0.5)


def test_elastic_may_overshoot() -> None:
    fn = get_easing("elastic_in_out")
    values = [fn(i / 200.0) for i in range(201)]
    assert min(values) < 0.0 or max(values) > 1.0


@pytest.mark.parametrize(
    "alias,canonical",
    [
        ("easeInOutCubic", "cubic_in_out"),
        ("easeInOutSine", "sine_in_out"),
        ("easeInOutExpo", "exponential_in_out"),
        ("easeInOutElastic", "elastic_in_out"),
        ("cubic-in-out", "cubic_in_out"),
    ],
)
def test_aliases(alias: str, canonical: str) -> None:
    assert get_easing(alias) is get_easing(canonical)


def test_unknown_easing_raises() -> None:
    with pytest.raises(InvalidConfigurationError):
        get_easing("bounce_in_out_nope")


def test_apply_easing_clamps_input() -> None:
    assert apply_easing("linear", -1.0) == 0.0
    assert apply_easing("linear", 2.0) == 1.0
    assert apply_easing("cubic_in_out", 0.25) == pytest.approx(4.0 * 0.25**3)


def test_user_registered_easing() -> None:
    from engine.animation.easing import _easing_registry

    @easing("step_half")
    def _step(t: float) -> float:
        return 0.0 if t < 0.5 else 1.0

    try:
        assert apply_easing("step_half", 0.75) == 1.0
    finally:
        _easing_registry.unregister("step_half")
