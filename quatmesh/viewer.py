"""Interactive vedo viewer.

Arrow keys nudge the Julia constant, +/- change iterations, ] and [ scale
the nudge step, t/m cycle fractal type and formula, p toggles double
precision, o cycles supersampling, g/h deep zoom, j toggles the adaptive
grid, k steps the detail threshold, f forces a rebuild, i prints the
parameters, s saves the mesh, q or Escape quits. r cycles the render mode
(colored, solid, wireframe) and Space toggles auto-rotation.
"""

import logging

from vedo import Mesh, Plotter, Text2D

from . import config
from .controls import ControlState, apply_key
from .export import export_mesh
from .generator import MeshGenerator
from .params import describe_parameters
from .shading import face_colors, face_normals, to_rgb8

log = logging.getLogger(__name__)


RENDER_MODES = ("colored", "solid", "wireframe")


def next_render_mode(mode):
    return RENDER_MODES[(RENDER_MODES.index(mode) + 1) % len(RENDER_MODES)]


def build_actor(mesh, mode="colored"):
    if mode not in RENDER_MODES:
        raise ValueError(f"unknown render mode {mode!r}")
    actor = Mesh([mesh.vertices, mesh.faces])
    if mode == "colored" and len(mesh):
        normals = face_normals(mesh.triangles)
        actor.cellcolors = to_rgb8(face_colors(mesh.triangles, mesh.params, normals))
    elif mode != "colored":
        actor.c("cyan")
    if mode == "wireframe":
        actor.wireframe()
    actor.lighting("plastic")
    return actor


def make_hud_text(state, mesh):
    p = state.params
    return (f"C = ({p.c.x:.3f}, {p.c.y:.3f}, {p.c.z:.3f}, {p.c.w:.3f})"
            f"  iter {p.max_iter}  step {state.param_step:.4f}\n"
            f"{p.kind.name.title()} / {p.formula.name.lower()}"
            f"  zoom {p.zoom:.1f}x  ss {p.supersampling}x"
            f"  adaptive {'on' if p.adaptive else 'off'}"
            f"  tris {len(mesh)}")


def make_hud(state, mesh):
    return Text2D(make_hud_text(state, mesh), pos="top-left", s=0.8,
                  c="white", font="Courier")


def run(params, grid, output=config.OUTPUT_FILE):
    generator = MeshGenerator(pooled=True)
    state = {"controls": ControlState(params), "mode": RENDER_MODES[0],
             "timer": None}

    log.info("Warming up Numba...")
    mesh = generator.generate(params, grid)
    log.info("%s", describe_parameters(params, grid, len(mesh)))

    actor = build_actor(mesh, state["mode"])
    hud = make_hud(state["controls"], mesh)
    state.update(mesh=mesh, actor=actor, hud=hud)

    plt = Plotter(bg="black", title="Quaternion Julia Explorer")
    plt.show(actor, hud, resetcam=True, interactive=False)

    def refresh_hud():
        plt.remove(state["hud"])
        state["hud"] = make_hud(state["controls"], state["mesh"])
        plt.add(state["hud"])

    def replace_actor():
        new_actor = build_actor(state["mesh"], state["mode"])
        plt.remove(state["actor"])
        state["actor"] = new_actor
        plt.add(new_actor)

    def rebuild():
        controls = state["controls"]
        state["mesh"] = generator.generate(controls.params, grid)
        replace_actor()
        refresh_hud()
        plt.render()

    def on_timer(evt):
        plt.camera.Azimuth(config.ROTATE_DEGREES)
        plt.render()

    def toggle_rotation():
        if state["timer"] is None:
            state["timer"] = plt.timer_callback("create", dt=config.ROTATE_INTERVAL_MS)
        else:
            plt.timer_callback("destroy", state["timer"])
            state["timer"] = None

    def on_key(evt):
        key = evt.keypress
        if key in ("q", "Escape", "escape"):
            plt.close()
            return
        if key == "s":
            export_mesh(state["mesh"], output)
            return
        if key == "i":
            log.info("%s", describe_parameters(state["controls"].params, grid,
                                               len(state["mesh"])))
            return
        if key == "f":
            rebuild()
            return
        if key == "r":
            state["mode"] = next_render_mode(state["mode"])
            replace_actor()
            plt.render()
            return
        if key == "space":
            toggle_rotation()
            return

        state["controls"], changed = apply_key(state["controls"], key)
        if changed:
            rebuild()
        else:
            refresh_hud()
            plt.render()

    plt.add_callback("key press", on_key)
    plt.add_callback("timer", on_timer)
    plt.show(interactive=True)
