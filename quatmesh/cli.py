import argparse
import logging
import sys

from . import config
from .errors import OutOfMemoryError, QuatMeshError
from .export import export_mesh
from .generator import MeshGenerator
from .params import FractalParameters, GridSpec, describe_parameters

log = logging.getLogger("quatmesh")


def _triple(text):
    values = [float(v) for v in text.split(",")]
    if len(values) != 3:
        raise argparse.ArgumentTypeError(f"expected x,y,z, got {text!r}")
    return tuple(values)


def _quad(text):
    values = [float(v) for v in text.split(",")]
    if len(values) != 4:
        raise argparse.ArgumentTypeError(f"expected x,y,z,w, got {text!r}")
    return tuple(values)


def add_fractal_arguments(ap):
    ap.add_argument("--p0", type=_triple, default=config.P0, help="Bounding box min corner x,y,z")
    ap.add_argument("--p1", type=_triple, default=config.P1, help="Bounding box max corner x,y,z")
    ap.add_argument("--step", type=float, default=config.STEP, help="Lattice spacing")
    ap.add_argument("--c", type=_quad, default=config.C, help="Julia constant x,y,z,w")
    ap.add_argument("--w", type=float, default=config.W, help="Fourth coordinate of the 3D slice")
    ap.add_argument("--max-iter", type=int, default=config.MAX_ITER)
    ap.add_argument("--threshold", type=float, default=config.THRESHOLD, help="Escape radius")
    ap.add_argument("--kind", type=int, default=0, help="0=Julia, 1=Mandelbrot, 2=Hybrid")
    ap.add_argument("--formula", type=int, default=0,
                    help="0=z^2+c, 1=z^3+c, 2=z^2+z+c, 3=|z|^2-z^2+c")
    ap.add_argument("--double", action="store_true", help="Double precision for deep zoom")
    ap.add_argument("--zoom", type=float, default=config.ZOOM)
    ap.add_argument("--supersampling", type=int, default=config.SUPERSAMPLING)
    ap.add_argument("--adaptive", action="store_true", help="Refine high-detail cells")
    ap.add_argument("--detail-threshold", type=float, default=config.DETAIL_THRESHOLD)
    ap.add_argument("--max-depth", type=int, default=config.MAX_DEPTH)
    ap.add_argument("-v", "--verbose", action="store_true")


def parameters_from_args(args):
    params = FractalParameters(
        c=args.c,
        w=args.w,
        max_iter=args.max_iter,
        threshold=args.threshold,
        kind=args.kind,
        formula=args.formula,
        precision=1 if args.double else 0,
        zoom=args.zoom,
        supersampling=args.supersampling,
        adaptive=args.adaptive,
        detail_threshold=args.detail_threshold,
        max_depth=args.max_depth,
    )
    grid = GridSpec(args.p0, args.p1, args.step)
    return params, grid


def generate_main(args):
    params, grid = parameters_from_args(args)
    mesh = MeshGenerator().generate(params, grid)
    log.info("%s", describe_parameters(params, grid, len(mesh)))
    export_mesh(mesh, args.output)
    return 0


def view_main(args):
    from .viewer import run

    params, grid = parameters_from_args(args)
    run(params, grid, output=args.output)
    return 0


def main(argv=None):
    ap = argparse.ArgumentParser(
        prog="quatmesh",
        description="Triangulate 4D quaternion Julia / Mandelbrot sets")
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a mesh and save it")
    add_fractal_arguments(gen)
    gen.add_argument("-o", "--output", default=config.OUTPUT_FILE, help=".obj or .stl file")
    gen.set_defaults(func=generate_main)

    view = sub.add_parser("view", help="Open the interactive explorer")
    add_fractal_arguments(view)
    view.add_argument("-o", "--output", default=config.OUTPUT_FILE, help="File written by 's'")
    view.set_defaults(func=view_main)

    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="[%(levelname)s] %(message)s")
    try:
        return args.func(args)
    except OutOfMemoryError as exc:
        log.error("%s; retry with a larger --step", exc)
        return 1
    except QuatMeshError as exc:
        log.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
