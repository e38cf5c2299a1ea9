# supersimplex_field/dispatch.py

"""
================================================================================
DOMAIN DISPATCHER
================================================================================
This module maps every cell of the output grid to a world position, evaluates
the fractal noise there, quantizes it and writes the RGBA cell into the
caller's buffer.

The grid is covered by fixed-size tiles. Tiles are rendered either in-process
(writing straight into the buffer) or by a pool of worker processes (each
tile is returned to the parent, which copies it into its region). Every cell
is independent and every tile owns a disjoint slice of the buffer, so the
output is byte-identical for any worker count or tile size.

Data Contract:
---------------
- Inputs:
    - config (FieldConfig): The immutable sampling parameters.
    - buffer: A writable bytes-like object (bytearray, uint8 NumPy array) of
      exactly config.buffer_size bytes, owned by the caller.
- Outputs:
    - The same buffer, fully populated. Cell (x, y, z) occupies bytes
      4 * (x + y * dimX + z * dimX * dimY) onward.
- Side Effects: Writes into the buffer. Never resizes it.
================================================================================
"""
import logging
import multiprocessing
import os

import numpy as np
from numba import njit
from tqdm import tqdm

from . import config as DEFAULTS
from .color_maps import quantize_cell
from .errors import InvalidParameter
from .field_config import FieldConfig
from .noise import fractal_noise_3d

BYTES_PER_CELL = DEFAULTS.BYTES_PER_CELL


@njit
def _mix(a, b, t):
    "Linear interpolation."
    return a * (1.0 - t) + b * t

@njit
def _world_position(ix, iy, iz, dims, start, end):
    return (
        _mix(start[0], end[0], ix / dims[0]),
        _mix(start[1], end[1], iy / dims[1]),
        _mix(start[2], end[2], iz / dims[2]),
    )

@njit
def render_region(region, origin, dims, start, end, seed, frequency, lacunarity, persistence, octaves, orientation):
    """
    Fills a (depth, height, width, 4) block of cells whose first cell sits at
    grid index `origin`. `start` and `end` are the sign-adjusted corners.
    """
    depth, height, width = region.shape[0], region.shape[1], region.shape[2]
    for lz in range(depth):
        for ly in range(height):
            for lx in range(width):
                px, py, pz = _world_position(
                    origin[0] + lx, origin[1] + ly, origin[2] + lz, dims, start, end
                )
                value = fractal_noise_3d(
                    px, py, pz, seed, frequency, lacunarity, persistence, octaves, orientation
                )
                r, g, b, a = quantize_cell(value)
                region[lz, ly, lx, 0] = r
                region[lz, ly, lx, 1] = g
                region[lz, ly, lx, 2] = b
                region[lz, ly, lx, 3] = a


def signed_corners(config: FieldConfig) -> tuple:
    """Returns (start, end) with the axis-sign convention applied to both corners."""
    start = tuple(c * s for c, s in zip(config.start, config.axis_signs))
    end = tuple(c * s for c, s in zip(config.next, config.axis_signs))
    return start, end

def world_position(config: FieldConfig, ix: int, iy: int, iz: int) -> tuple:
    """The world-space sampling position of grid cell (ix, iy, iz)."""
    start, end = signed_corners(config)
    return _world_position(ix, iy, iz, config.target_dims, start, end)

def cell_offset(config: FieldConfig, ix: int, iy: int, iz: int) -> int:
    """Byte offset of grid cell (ix, iy, iz) in the output buffer."""
    dx, dy, _ = config.target_dims
    return BYTES_PER_CELL * (ix + iy * dx + iz * dx * dy)

def evaluate_cell(config: FieldConfig, ix: int, iy: int, iz: int) -> float:
    """The un-quantized noise value of one grid cell."""
    for axis, index, extent in zip("xyz", (ix, iy, iz), config.target_dims):
        if not 0 <= index < extent:
            raise IndexError(f"Grid index {axis}={index} outside [0, {extent})")
    px, py, pz = world_position(config, ix, iy, iz)
    return fractal_noise_3d(px, py, pz, *config.kernel_args())

def iter_tiles(target_dims: tuple, tile_size: tuple = DEFAULTS.TILE_SIZE):
    """
    Yields (origin, extent) for every tile covering the grid. Tiles on the far
    edges are clipped so no extent reaches past the grid.
    """
    dx, dy, dz = target_dims
    tx, ty, tz = tile_size
    for z0 in range(0, dz, tz):
        for y0 in range(0, dy, ty):
            for x0 in range(0, dx, tx):
                origin = (x0, y0, z0)
                extent = (min(tx, dx - x0), min(ty, dy - y0), min(tz, dz - z0))
                yield origin, extent

def _validate_tile_size(tile_size) -> tuple:
    try:
        tile = tuple(int(t) for t in tile_size)
    except (TypeError, ValueError):
        raise InvalidParameter(f"tile_size must be 3 integers, got {tile_size!r}") from None
    if len(tile) != 3 or min(tile) < 1:
        raise InvalidParameter(f"tile_size must be 3 positive integers, got {tile_size!r}")
    return tile

def _grid_view(buffer, config: FieldConfig) -> np.ndarray:
    """A (dimZ, dimY, dimX, 4) uint8 view over the caller's buffer."""
    try:
        flat = np.frombuffer(buffer, dtype=np.uint8)
    except (TypeError, ValueError) as e:
        raise InvalidParameter(f"Output buffer is not a contiguous bytes-like object: {e}") from None
    if flat.size != config.buffer_size:
        raise InvalidParameter(
            f"Output buffer holds {flat.size} bytes, expected {config.buffer_size} "
            f"for target_dims {config.target_dims}"
        )
    if not flat.flags.writeable:
        raise InvalidParameter("Output buffer is read-only")
    dx, dy, dz = config.target_dims
    return flat.reshape((dz, dy, dx, BYTES_PER_CELL))

def _render_args(config: FieldConfig) -> tuple:
    start, end = signed_corners(config)
    return (config.target_dims, start, end) + config.kernel_args()

# --- Global variables for worker processes ---
worker_render_args = ()

def init_worker(config: FieldConfig):
    """Installs the shared, read-only configuration in each worker process."""
    global worker_render_args
    worker_render_args = _render_args(config)
    logging.getLogger(f"Worker-{os.getpid()}").debug(
        f"Worker ready for target_dims {config.target_dims}"
    )

def process_tile(task):
    """
    Renders a single tile into a fresh array. Returns (origin, cells) so the
    parent can copy it into the matching region of the output buffer.
    """
    origin, extent = task
    ex, ey, ez = extent
    cells = np.empty((ez, ey, ex, BYTES_PER_CELL), dtype=np.uint8)
    render_region(cells, origin, *worker_render_args)
    return origin, cells

def dispatch(
    config: FieldConfig,
    buffer,
    workers: int = DEFAULTS.DEFAULT_WORKERS,
    tile_size: tuple = DEFAULTS.TILE_SIZE,
    progress: bool = False,
    logger: logging.Logger = None,
):
    """
    Populates every cell of `buffer` for `config`.

    Args:
        config (FieldConfig): Validated sampling parameters.
        buffer: Writable bytes-like object of config.buffer_size bytes.
        workers (int): Worker processes. 1 or fewer renders in-process.
        tile_size (tuple): Cells per tile along (x, y, z).
        progress (bool): Show a tqdm progress bar over tiles.
        logger (logging.Logger, optional): Logger for runtime messages.

    Returns:
        The populated buffer (the same object that was passed in).
    """
    logger = logger or logging.getLogger(__name__)
    tile_size = _validate_tile_size(tile_size)
    grid = _grid_view(buffer, config)

    tasks = list(iter_tiles(config.target_dims, tile_size))
    logger.debug(
        f"Dispatching {config.cell_count} cells in {len(tasks)} tiles of {tile_size} "
        f"using {max(1, workers)} worker(s)."
    )

    if workers <= 1:
        render_args = _render_args(config)
        for origin, extent in tqdm(tasks, desc="Rendering Tiles", disable=not progress):
            x0, y0, z0 = origin
            ex, ey, ez = extent
            region = grid[z0:z0 + ez, y0:y0 + ey, x0:x0 + ex]
            render_region(region, origin, *render_args)
        return buffer

    with multiprocessing.Pool(processes=workers, initializer=init_worker, initargs=(config,)) as pool:
        results_iterator = pool.imap_unordered(process_tile, tasks, chunksize=max(1, len(tasks) // (workers * 8)))
        for origin, cells in tqdm(results_iterator, total=len(tasks), desc="Rendering Tiles", disable=not progress):
            x0, y0, z0 = origin
            ez, ey, ex = cells.shape[:3]
            grid[z0:z0 + ez, y0:y0 + ey, x0:x0 + ex] = cells

    return buffer
