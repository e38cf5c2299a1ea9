# supersimplex_field/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the noise
field generator. These values are used if they are not explicitly provided by
the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC RENDER.
Instead, pass a configuration dictionary to the NoiseFieldGenerator instance.
================================================================================
"""

# --- Noise Sampling Parameters ---
DEFAULT_SEED = 12335.0
DEFAULT_FREQUENCY = 4.0
DEFAULT_LACUNARITY = 2.0
DEFAULT_PERSISTENCE = 0.5
DEFAULT_OCTAVES = 1
# 'improve_xy' keeps the X/Y plane isotropic and treats Z as time/vertical.
# 'conventional' treats all three axes the same.
DEFAULT_ORIENTATION = "improve_xy"

# --- Sampling Domain ---
# The two corners that are interpolated across the output grid.
DEFAULT_START = (1.0, 1.0, 1.0)
DEFAULT_NEXT = (1.0, 1.0, 1.0)
# Output grid extents (x, y, z). The first axis varies fastest in the buffer.
DEFAULT_TARGET_DIMS = (1280, 720, 1)
# Sign applied to each component of both corners before interpolation.
# Negating Y and Z maps the caller's image coordinates onto the noise space.
DEFAULT_AXIS_SIGNS = (1.0, -1.0, -1.0)

# --- Lattice Constants ---
# Modulus of the polynomial permutation hash and size of the gradient set.
HASH_MODULUS = 289.0
GRADIENT_COUNT = 48.0
# Squared radius at which a lattice vertex stops contributing.
FALLOFF_RADIUS_SQ = 0.75
# Offset that moves a sample onto the second cubic half of the BCC lattice.
SECOND_LATTICE_OFFSET = 144.5

# --- Output Format ---
BYTES_PER_CELL = 4
ALPHA_OPAQUE = 255

# --- Dispatch & Performance ---
# Cells per work tile (x, y, z). Any tile size produces identical output.
TILE_SIZE = (8, 8, 1)
DEFAULT_WORKERS = 1

# --- Animated Preview ---
# The demo animation slides a window through Z at a fixed rate.
PREVIEW_WIDTH = 640
PREVIEW_HEIGHT = 360
PREVIEW_FREQUENCY = 0.006
PREVIEW_OCTAVES = 8
# Milliseconds of wall-clock time per unit of Z.
PREVIEW_MS_PER_Z_UNIT = 10.0
PREVIEW_FPS = 30
