# supersimplex_field/generator.py

"""
================================================================================
CORE NOISE FIELD GENERATOR
================================================================================
This module contains the main NoiseFieldGenerator class, responsible for
turning a user configuration into a validated FieldConfig and rendering the
RGBA noise buffer for it.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of sampling parameters which can override
      the internal defaults. Expected keys include 'seed', 'frequency',
      'octaves', 'target_dims', etc.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - A bytearray of 4 * dimX * dimY * dimZ bytes (R=G=B=intensity, A=255).
    - Pillow images of individual Z slices.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same configuration, the output is byte-identical.
================================================================================
"""

import logging
import time

import numpy as np
from PIL import Image

from . import config as DEFAULTS
from . import dispatch
from . import noise
from .field_config import FieldConfig

class NoiseFieldGenerator:
    """
    Generates fractal BCC noise fields into RGBA buffers.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, config: dict, logger: logging.Logger):
        """
        Initializes the generator. Raises a FieldConfigError subclass if the
        configuration can never be dispatched.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
        """
        self.logger = logger
        self.user_config = config
        self.logger.info("NoiseFieldGenerator initializing...")

        # --- Consolidate & Validate Configuration ---
        self.field_config = FieldConfig.from_dict(self.user_config)
        self.settings = self.field_config.to_dict()

        dx, dy, dz = self.field_config.target_dims
        self.logger.info(f"NoiseFieldGenerator initialized with seed: {self.field_config.seed}")
        self.logger.info(
            f"Field dimensions: {dx}x{dy}x{dz} cells ({self.field_config.buffer_size} bytes), "
            f"{self.field_config.octaves} octave(s), orientation "
            f"'{self.settings['orientation']}'"
        )

    @staticmethod
    def frame_config(elapsed_ms: float, width: int, height: int, seed: float) -> FieldConfig:
        """
        Builds the configuration for one frame of the animated preview: a
        width x height window sliding through Z as time passes.
        """
        z = elapsed_ms / DEFAULTS.PREVIEW_MS_PER_Z_UNIT
        return FieldConfig(
            seed=seed,
            start=(0.5, 0.5, z + 0.5),
            next=(width + 0.5, height + 0.5, z + 0.5),
            frequency=DEFAULTS.PREVIEW_FREQUENCY,
            lacunarity=DEFAULTS.DEFAULT_LACUNARITY,
            persistence=DEFAULTS.DEFAULT_PERSISTENCE,
            octaves=DEFAULTS.PREVIEW_OCTAVES,
            orientation=noise.Orientation.IMPROVE_XY,
            target_dims=(width, height, 1),
        )

    def allocate_buffer(self) -> bytearray:
        """A zeroed buffer of the right size for this field."""
        return bytearray(self.field_config.buffer_size)

    def generate(self, buffer=None, workers: int = DEFAULTS.DEFAULT_WORKERS, progress: bool = False):
        """
        Renders the whole field.

        Args:
            buffer (optional): Caller-owned destination. A new bytearray is
                allocated if omitted.
            workers (int): Number of worker processes for the dispatch.
            progress (bool): Show a progress bar.

        Returns:
            The populated buffer.
        """
        if buffer is None:
            buffer = self.allocate_buffer()

        start_time = time.perf_counter()
        dispatch.dispatch(
            self.field_config, buffer,
            workers=workers, progress=progress, logger=self.logger,
        )
        end_time = time.perf_counter()
        self.logger.info(
            f"Rendered {self.field_config.cell_count} cells in {end_time - start_time:.2f} seconds."
        )
        return buffer

    def sample(self, x: float, y: float, z: float) -> float:
        """The fractal noise value at a world position."""
        return noise.fractal_noise_3d(x, y, z, *self.field_config.kernel_args())

    def sample_with_derivative(self, x: float, y: float, z: float) -> tuple:
        """(value, d/dx, d/dy, d/dz) at a world position, e.g. for normal maps."""
        return noise.fractal_noise_3d_with_derivative(x, y, z, *self.field_config.kernel_args())

    def to_images(self, buffer) -> list:
        """
        Splits a rendered buffer into one RGBA Pillow image per Z slice.
        Image rows follow grid Y, image columns follow grid X.
        """
        dx, dy, dz = self.field_config.target_dims
        cells = np.frombuffer(buffer, dtype=np.uint8).reshape((dz, dy, dx, 4))
        return [Image.fromarray(np.ascontiguousarray(cells[z])) for z in range(dz)]
