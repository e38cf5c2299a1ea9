# supersimplex_field/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module converts raw noise values into 8-bit grayscale RGBA cells.

It is designed to be a pure, stateless utility with no dependencies on Pygame.
Both functions are JIT-compiled so the dispatch kernel can call them per cell.
================================================================================
"""
from numba import njit

from . import config as DEFAULTS

ALPHA_OPAQUE = DEFAULTS.ALPHA_OPAQUE

@njit
def quantize_intensity(value):
    """
    Maps a noise value to an 8-bit intensity. Values are clamped to [-1, 1]
    and rescaled to [0, 255], truncating toward zero.
    """
    clamped = min(max(value, -1.0), 1.0)
    return int(((clamped + 1.0) / 2.0) * 255.0)

@njit
def quantize_cell(value):
    """Returns the (R, G, B, A) cell for a noise value. A is always opaque."""
    intensity = quantize_intensity(value)
    return (intensity, intensity, intensity, ALPHA_OPAQUE)
