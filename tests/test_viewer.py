import pytest

from quatmesh.controls import ControlState
from quatmesh.generator import generate
from quatmesh.params import FractalParameters, GridSpec
from quatmesh.viewer import RENDER_MODES, build_actor, make_hud_text, next_render_mode


def test_hud_text():
    params = FractalParameters(adaptive=True)
    mesh = generate(params, GridSpec((-1, -1, -1), (1, 1, 1), 0.5))
    text = make_hud_text(ControlState(params), mesh)
    assert "C = (-0.200, 0.800, 0.000, 0.000)" in text
    assert "Julia / standard" in text
    assert "adaptive on" in text
    assert f"tris {len(mesh)}" in text


def test_build_actor():
    mesh = generate(FractalParameters(), GridSpec((-1, -1, -1), (1, 1, 1), 0.5))
    actor = build_actor(mesh)
    assert actor.ncells == len(mesh)


def test_render_modes_cycle():
    assert next_render_mode("colored") == "solid"
    assert next_render_mode("solid") == "wireframe"
    assert next_render_mode("wireframe") == "colored"


@pytest.mark.parametrize("mode", RENDER_MODES)
def test_build_actor_modes(mode):
    mesh = generate(FractalParameters(), GridSpec((-1, -1, -1), (1, 1, 1), 0.5))
    actor = build_actor(mesh, mode)
    assert actor.ncells == len(mesh)
    # VTK representation: 1 wireframe, 2 surface
    expected = 1 if mode == "wireframe" else 2
    assert actor.actor.GetProperty().GetRepresentation() == expected


def test_build_actor_unknown_mode():
    mesh = generate(FractalParameters(), GridSpec((-1, -1, -1), (1, 1, 1), 0.5))
    with pytest.raises(ValueError):
        build_actor(mesh, "points")
