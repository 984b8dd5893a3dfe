import pytest

from quatmesh import config
from quatmesh.controls import (
    ControlState,
    apply_key,
    change_iterations,
    cycle_formula,
    cycle_kind,
    cycle_supersampling,
    nudge_c,
    scale_param_step,
    step_detail_threshold,
    toggle_adaptive,
    toggle_precision,
    zoom,
)
from quatmesh.params import FractalKind, FractalParameters, Formula, Precision


@pytest.fixture
def state():
    return ControlState(FractalParameters())


def test_nudge_c(state):
    moved = nudge_c(state, "x", 1)
    assert moved.params.c.x == pytest.approx(-0.19)
    moved = nudge_c(moved, "y", -1)
    assert moved.params.c.y == pytest.approx(0.79)
    assert state.params.c.x == pytest.approx(-0.2)


def test_iterations_clamped(state):
    s = state
    for _ in range(100):
        s = change_iterations(s, 1)
    assert s.params.max_iter == config.MAX_ITER_MAX
    for _ in range(100):
        s = change_iterations(s, -1)
    assert s.params.max_iter == config.MAX_ITER_MIN


def test_param_step_clamped(state):
    s = state
    for _ in range(20):
        s = scale_param_step(s, True)
    assert s.param_step == config.PARAM_STEP_MAX
    for _ in range(40):
        s = scale_param_step(s, False)
    assert s.param_step == config.PARAM_STEP_MIN


def test_cycle_kind(state):
    kinds = []
    s = state
    for _ in range(3):
        s = cycle_kind(s)
        kinds.append(s.params.kind)
    assert kinds == [FractalKind.MANDELBROT, FractalKind.HYBRID, FractalKind.JULIA]


def test_cycle_formula(state):
    s = state
    for _ in range(4):
        s = cycle_formula(s)
    assert s.params.formula == Formula.STANDARD
    assert cycle_formula(state).params.formula == Formula.CUBIC


def test_toggle_precision(state):
    s = toggle_precision(state)
    assert s.params.precision == Precision.DOUBLE
    assert toggle_precision(s).params.precision == Precision.SINGLE


def test_cycle_supersampling(state):
    seen = []
    s = state
    for _ in range(3):
        s = cycle_supersampling(s)
        seen.append(s.params.supersampling)
    assert seen == [2, 3, 1]


def test_zoom(state):
    assert zoom(state, True).params.zoom == 2.0
    assert zoom(state, False).params.zoom == 1.0
    s = state
    for _ in range(40):
        s = zoom(s, True)
    assert s.params.zoom == config.ZOOM_MAX


def test_adaptive_and_detail(state):
    assert toggle_adaptive(state).params.adaptive
    s = step_detail_threshold(state)
    assert s.params.detail_threshold == pytest.approx(0.15)
    s = ControlState(FractalParameters(detail_threshold=0.5))
    assert step_detail_threshold(s).params.detail_threshold == pytest.approx(0.05)


def test_apply_key(state):
    same, regenerate = apply_key(state, "F12")
    assert same is state
    assert not regenerate

    stepped, regenerate = apply_key(state, "bracketright")
    assert stepped.param_step > state.param_step
    assert not regenerate

    changed, regenerate = apply_key(state, "t")
    assert changed.params.kind == FractalKind.MANDELBROT
    assert regenerate

    _, regenerate = apply_key(state, "minus")
    assert regenerate


def test_clamped_key_does_not_regenerate():
    s = ControlState(FractalParameters(max_iter=config.MAX_ITER_MAX))
    _, regenerate = apply_key(s, "plus")
    assert not regenerate
