# supersimplex_field/__init__.py

# This file makes the 'supersimplex_field' directory a Python package.
# We also use it to define the public API of the package.

from .errors import FieldConfigError, InvalidDimension, InvalidParameter
from .noise import Orientation, fractal_noise_3d, fractal_noise_3d_with_derivative
from .field_config import FieldConfig
from . import dispatch
from .generator import NoiseFieldGenerator

__all__ = [
    "FieldConfigError", "InvalidDimension", "InvalidParameter",
    "Orientation", "fractal_noise_3d", "fractal_noise_3d_with_derivative",
    "FieldConfig", "dispatch", "NoiseFieldGenerator",
]
