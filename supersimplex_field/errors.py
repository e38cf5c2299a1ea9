# supersimplex_field/errors.py

"""
Exceptions raised while validating a noise field configuration. The kernels
themselves never raise; everything is rejected here, before dispatch.
"""


class FieldConfigError(ValueError):
    """Base class for configuration values that cannot be dispatched."""


class InvalidDimension(FieldConfigError):
    """A target dimension is zero, negative or not an integer."""


class InvalidParameter(FieldConfigError):
    """A sampling parameter or the output buffer is unusable."""
