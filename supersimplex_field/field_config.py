# supersimplex_field/field_config.py

"""
================================================================================
FIELD CONFIGURATION
================================================================================
The immutable parameter set shared by every cell of one dispatch.

Data Contract:
---------------
- Inputs:
    - Either explicit keyword values, or a user dictionary overlaid on the
      internal defaults via FieldConfig.from_dict().
- Outputs:
    - A frozen FieldConfig whose fields are normalized (tuples of floats,
      integer dims and octaves, an Orientation member).
- Side Effects: None.
- Invariants: A FieldConfig that constructs successfully can always be
  dispatched: every dimension is a positive integer, the octave count is a
  non-negative integer and every float is finite.
================================================================================
"""
import math
import numbers
from dataclasses import dataclass, field, asdict
from typing import Tuple

from . import config as DEFAULTS
from .errors import InvalidDimension, InvalidParameter
from .noise import Orientation

Vec3 = Tuple[float, float, float]


def _finite(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidParameter(f"{name} must be finite, got {number}")
    return number

def _vec3(name: str, value) -> Vec3:
    try:
        items = tuple(value)
    except TypeError:
        raise InvalidParameter(f"{name} must be a 3-component vector, got {value!r}") from None
    if len(items) != 3:
        raise InvalidParameter(f"{name} must have exactly 3 components, got {len(items)}")
    return tuple(_finite(f"{name}[{i}]", v) for i, v in enumerate(items))

def _whole(value) -> bool:
    "True for ints and integral floats, but not bools."
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Integral):
        return True
    return isinstance(value, float) and value.is_integer()


@dataclass(frozen=True)
class FieldConfig:
    """
    Sampling parameters and destination extents for one noise field.

    Attributes:
        seed: Hash seed. Any finite float.
        start, next: Domain corners interpolated across the grid.
        frequency: Spatial frequency of the first octave.
        lacunarity: Per-octave frequency multiplier.
        persistence: Per-octave amplitude multiplier.
        octaves: Number of fractal layers. Zero yields a flat 0.0 field.
        orientation: Coordinate pre-transform (see noise.Orientation).
        target_dims: Output grid extents (x, y, z).
        axis_signs: Sign applied to each corner component before interpolation.
    """
    seed: float
    start: Vec3
    next: Vec3
    frequency: float
    lacunarity: float
    persistence: float
    octaves: int
    orientation: Orientation
    target_dims: Tuple[int, int, int]
    axis_signs: Vec3 = field(default=DEFAULTS.DEFAULT_AXIS_SIGNS)

    def __post_init__(self):
        # Normalize in place; frozen dataclasses need object.__setattr__.
        set_ = object.__setattr__
        set_(self, 'seed', _finite('seed', self.seed))
        set_(self, 'start', _vec3('start', self.start))
        set_(self, 'next', _vec3('next', self.next))
        set_(self, 'frequency', _finite('frequency', self.frequency))
        set_(self, 'lacunarity', _finite('lacunarity', self.lacunarity))
        set_(self, 'persistence', _finite('persistence', self.persistence))
        set_(self, 'axis_signs', _vec3('axis_signs', self.axis_signs))

        if not _whole(self.octaves) or self.octaves < 0:
            raise InvalidParameter(f"octaves must be a non-negative integer, got {self.octaves!r}")
        set_(self, 'octaves', int(self.octaves))

        try:
            set_(self, 'orientation', Orientation.parse(self.orientation))
        except (KeyError, ValueError):
            raise InvalidParameter(f"Unknown orientation: {self.orientation!r}") from None

        try:
            dims = tuple(self.target_dims)
        except TypeError:
            raise InvalidDimension(f"target_dims must be 3 integers, got {self.target_dims!r}") from None
        if len(dims) != 3:
            raise InvalidDimension(f"target_dims must have exactly 3 components, got {len(dims)}")
        for axis, extent in zip("xyz", dims):
            if not _whole(extent):
                raise InvalidDimension(f"target_dims.{axis} must be an integer, got {extent!r}")
            if extent <= 0:
                raise InvalidDimension(f"target_dims.{axis} must be at least 1, got {extent}")
        set_(self, 'target_dims', tuple(int(d) for d in dims))

    @property
    def cell_count(self) -> int:
        dx, dy, dz = self.target_dims
        return dx * dy * dz

    @property
    def buffer_size(self) -> int:
        """Byte length of the RGBA output buffer."""
        return DEFAULTS.BYTES_PER_CELL * self.cell_count

    def kernel_args(self) -> tuple:
        """(seed, frequency, lacunarity, persistence, octaves, orientation) as plain scalars."""
        return (
            self.seed, self.frequency, self.lacunarity, self.persistence,
            self.octaves, int(self.orientation),
        )

    def to_dict(self) -> dict:
        """JSON-serializable form, accepted back by from_dict()."""
        data = asdict(self)
        data['orientation'] = self.orientation.name.lower()
        for key in ('start', 'next', 'target_dims', 'axis_signs'):
            data[key] = list(data[key])
        return data

    @classmethod
    def from_dict(cls, config: dict) -> "FieldConfig":
        """
        Overlays a user dictionary on the internal defaults.

        Args:
            config (dict): User-defined parameters. Missing keys fall back to
                the values in supersimplex_field.config.
        """
        return cls(
            seed=config.get('seed', DEFAULTS.DEFAULT_SEED),
            start=config.get('start', DEFAULTS.DEFAULT_START),
            next=config.get('next', DEFAULTS.DEFAULT_NEXT),
            frequency=config.get('frequency', DEFAULTS.DEFAULT_FREQUENCY),
            lacunarity=config.get('lacunarity', DEFAULTS.DEFAULT_LACUNARITY),
            persistence=config.get('persistence', DEFAULTS.DEFAULT_PERSISTENCE),
            octaves=config.get('octaves', DEFAULTS.DEFAULT_OCTAVES),
            orientation=config.get('orientation', DEFAULTS.DEFAULT_ORIENTATION),
            target_dims=config.get('target_dims', DEFAULTS.DEFAULT_TARGET_DIMS),
            axis_signs=config.get('axis_signs', DEFAULTS.DEFAULT_AXIS_SIGNS),
        )
