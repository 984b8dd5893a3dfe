"""Default parameters and limits."""

# ----------------------------------------------------
# GRID
# ----------------------------------------------------
P0 = (-1.5, -1.5, -1.5)
P1 = (1.5, 1.5, 1.5)
STEP = 0.05

# Lattices with more points than this log a warning before sampling
LATTICE_WARNING_POINTS = 8_000_000

# ----------------------------------------------------
# FRACTAL
# ----------------------------------------------------
MAX_ITER = 6
THRESHOLD = 2.0          # escape radius, compared squared
C = (-0.2, 0.8, 0.0, 0.0)
W = 0.0

ZOOM = 1.0
DEEP_ZOOM_THRESHOLD = 1000.0

# Mandelbrot seeds z0 with a scaled copy of c
MANDELBROT_SEED_SCALE = 0.1

# ----------------------------------------------------
# SAMPLING
# ----------------------------------------------------
SUPERSAMPLING = 1
DETAIL_THRESHOLD = 0.1
MAX_DEPTH = 3

# ----------------------------------------------------
# MESH
# ----------------------------------------------------
MAX_TRIANGLES_PER_CUBE = 5

# ----------------------------------------------------
# INTERACTIVE CONTROLS
# ----------------------------------------------------
PARAM_STEP = 0.01
PARAM_STEP_FACTOR = 1.5
PARAM_STEP_MIN = 0.0001
PARAM_STEP_MAX = 0.1

MAX_ITER_MIN = 1
MAX_ITER_MAX = 50

SUPERSAMPLING_MAX = 3

ZOOM_FACTOR = 2.0
ZOOM_MAX = 1_000_000.0

DETAIL_THRESHOLD_STEP = 0.05
DETAIL_THRESHOLD_MAX = 0.5

# Viewer auto-rotation: degrees per tick, tick interval in ms
ROTATE_DEGREES = 1.0
ROTATE_INTERVAL_MS = 30

# ----------------------------------------------------
# EXPORT
# ----------------------------------------------------
OUTPUT_FILE = "fractal.obj"
OUTPUT_PRECISION = 3
