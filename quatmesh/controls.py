"""Interactive parameter adjustments.

Each control takes the current :class:`ControlState` and returns a new
one; nothing is mutated in place, so a regeneration in progress always
sees a consistent parameter set.
"""

import logging
from dataclasses import dataclass, replace

from . import config
from .params import FORMULA_NAMES, KIND_NAMES, FractalKind, Formula, Precision

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ControlState:
    params: object
    param_step: float = config.PARAM_STEP

    def with_params(self, **changes):
        return replace(self, params=self.params.with_changes(**changes))


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def nudge_c(state, axis, direction):
    """Move one component of the Julia constant by +/- ``param_step``."""
    c = state.params.c
    value = getattr(c, axis) + direction * state.param_step
    log.info("Julia C.%s: %.3f", axis, value)
    return state.with_params(c=c._replace(**{axis: value}))


def change_iterations(state, delta):
    max_iter = _clamp(state.params.max_iter + delta,
                      config.MAX_ITER_MIN, config.MAX_ITER_MAX)
    log.info("Iterations: %d", max_iter)
    return state.with_params(max_iter=max_iter)


def scale_param_step(state, up):
    if up:
        step = state.param_step * config.PARAM_STEP_FACTOR
    else:
        step = state.param_step / config.PARAM_STEP_FACTOR
    step = _clamp(step, config.PARAM_STEP_MIN, config.PARAM_STEP_MAX)
    log.info("Step size: %.4f", step)
    return replace(state, param_step=step)


def cycle_kind(state):
    kind = FractalKind((state.params.kind + 1) % len(FractalKind))
    log.info("Fractal Type: %s", KIND_NAMES[kind])
    return state.with_params(kind=kind)


def cycle_formula(state):
    formula = Formula((state.params.formula + 1) % len(Formula))
    log.info("Quaternion Formula: %s", FORMULA_NAMES[formula])
    return state.with_params(formula=formula)


def toggle_precision(state):
    if state.params.precision == Precision.DOUBLE:
        precision = Precision.SINGLE
    else:
        precision = Precision.DOUBLE
    log.info("Double Precision: %s",
             "ON" if precision == Precision.DOUBLE else "OFF")
    return state.with_params(precision=precision)


def cycle_supersampling(state):
    n = state.params.supersampling + 1
    if n > config.SUPERSAMPLING_MAX:
        n = 1
    log.info("Supersampling: %dx", n)
    if n > 1:
        log.info("Supersampling multiplies evaluation cost by %d", n ** 3)
    return state.with_params(supersampling=n)


def zoom(state, zoom_in):
    if zoom_in:
        level = state.params.zoom * config.ZOOM_FACTOR
    else:
        level = state.params.zoom / config.ZOOM_FACTOR
    level = _clamp(level, 1.0, config.ZOOM_MAX)
    log.info("Zoom Level: %.1fx", level)
    if level > config.DEEP_ZOOM_THRESHOLD and state.params.precision != Precision.DOUBLE:
        log.info("Deep zoom: enable double precision (p) to keep detail")
    return state.with_params(zoom=level)


def toggle_adaptive(state):
    adaptive = not state.params.adaptive
    log.info("Adaptive Grid: %s", "ON" if adaptive else "OFF")
    return state.with_params(adaptive=adaptive)


def step_detail_threshold(state):
    threshold = state.params.detail_threshold + config.DETAIL_THRESHOLD_STEP
    if threshold > config.DETAIL_THRESHOLD_MAX + 1e-9:
        threshold = config.DETAIL_THRESHOLD_STEP
    log.info("Detail Threshold: %.2f", threshold)
    return state.with_params(detail_threshold=threshold)


# key -> (control, args); every one of these changes the mesh except the
# parameter step keys
KEY_BINDINGS = {
    "Right": (nudge_c, ("x", 1)),
    "Left": (nudge_c, ("x", -1)),
    "Up": (nudge_c, ("y", 1)),
    "Down": (nudge_c, ("y", -1)),
    "plus": (change_iterations, (1,)),
    "equal": (change_iterations, (1,)),
    "minus": (change_iterations, (-1,)),
    "bracketright": (scale_param_step, (True,)),
    "bracketleft": (scale_param_step, (False,)),
    "t": (cycle_kind, ()),
    "m": (cycle_formula, ()),
    "p": (toggle_precision, ()),
    "o": (cycle_supersampling, ()),
    "g": (zoom, (True,)),
    "h": (zoom, (False,)),
    "j": (toggle_adaptive, ()),
    "k": (step_detail_threshold, ()),
}


def apply_key(state, key):
    """Apply the control bound to ``key``.

    Returns ``(new_state, regenerate)``; unknown keys leave the state alone.
    """
    binding = KEY_BINDINGS.get(key)
    if binding is None:
        return state, False
    control, args = binding
    new_state = control(state, *args)
    return new_state, new_state.params != state.params
