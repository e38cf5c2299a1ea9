# supersimplex_field/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides functions for evaluating 3D OpenSimplex2S ("SuperSimplex")
value noise on a body-centered-cubic (BCC) lattice, and for summing it into
fractal octaves. It is designed to be a pure, stateless utility.

The BCC lattice is split into two cubic lattices. A single call to
lattice_contribution() covers the four candidate vertices of one of them;
the octave compositor evaluates it a second time at SECOND_LATTICE_OFFSET to
complete the sum.

Data Contract:
---------------
- Inputs:
    - x, y, z: Scalar world coordinates (floats).
    - seed: Scalar hash seed (float, any finite value).
    - frequency, lacunarity, persistence, octaves, orientation: Standard
      fractal noise parameters.
- Outputs:
    - A scalar noise value (roughly in [-1, 1] per octave), optionally with
      its analytic gradient.
- Side Effects: None.
- Invariants: Identical inputs always produce bit-identical outputs.
================================================================================
"""

import enum

import numpy as np
from numba import njit

from . import config as DEFAULTS


class Orientation(enum.IntEnum):
    """Coordinate pre-transform applied before lattice evaluation."""
    IMPROVE_XY = 0
    CONVENTIONAL = 1

    @classmethod
    def parse(cls, value):
        """Accepts an Orientation, its integer value, or a name like 'improve_xy'."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls[value.strip().upper().replace("-", "_")]
        return cls(value)


# Plain ints so the compiled kernels can branch on them.
_IMPROVE_XY = int(Orientation.IMPROVE_XY)
_CONVENTIONAL = int(Orientation.CONVENTIONAL)

_HASH_MODULUS = DEFAULTS.HASH_MODULUS
_GRADIENT_COUNT = DEFAULTS.GRADIENT_COUNT
_FALLOFF_RADIUS_SQ = DEFAULTS.FALLOFF_RADIUS_SQ
_SECOND_LATTICE_OFFSET = DEFAULTS.SECOND_LATTICE_OFFSET

# Fourth component of the skewing 4-vector used to pick lattice vertices.
_SKEW_W = 2.5

# Gradient set constants (normalized expanded rhombic dodecahedron).
_CUBOCT_SCALE = 1.22474487139
_RHOMB_SHRINK = 0.042942436724648037
_NOISE_SCALE = 3.5946317686139184

# Entries of the orthonormal map used by the ImproveXY orientation. World Z
# maps onto the lattice main diagonal (1, 1, 1), world X/Y onto the plane
# perpendicular to it.
_XY_A = 0.788675134594813
_XY_B = -0.211324865405187
_XY_C = 0.577350269189626

_TWO_THIRDS = 2.0 / 3.0


@njit
def _mod(x, m):
    "Floored modulo; the result takes the sign of m."
    return x - m * np.floor(x / m)

@njit
def _permute(t):
    "t * (t * 34 + 133)"
    return t * (t * 34.0 + 133.0)

@njit
def hash_lattice_point(x, y, z, seed):
    """
    Hashes a lattice coordinate and seed to a gradient index in [0, 48).
    Each axis is folded into the running value through the permutation
    polynomial, reducing modulo 289 before every fold.
    """
    h = _permute(_mod(x + seed, _HASH_MODULUS))
    h = _permute(_mod(h + y, _HASH_MODULUS))
    return _mod(_permute(_mod(h + z, _HASH_MODULUS)), _GRADIENT_COUNT)

@njit
def gradient(h):
    """
    Decodes a hash in [0, 48) into one of 48 gradient directions, all of the
    same length, with the noise normalization folded in.
    """
    # Random vertex of a cube, +/- 1 on each axis.
    cx = _mod(np.floor(h), 2.0) * 2.0 - 1.0
    cy = _mod(np.floor(h / 2.0), 2.0) * 2.0 - 1.0
    cz = _mod(np.floor(h / 4.0), 2.0) * 2.0 - 1.0

    # One of the three edges at that vertex, i.e. a cuboctahedron vertex.
    ox, oy, oz = cx, cy, cz
    axis = int(np.floor(h / 16.0))
    if axis == 0:
        ox = 0.0
    elif axis == 1:
        oy = 0.0
    else:
        oz = 0.0

    # Pick between the cube corner and a point on the rhombic face.
    kind = _mod(np.floor(h / 8.0), 2.0)
    rx = (1.0 - kind) * cx + kind * (ox + (cy * oz - cz * oy))
    ry = (1.0 - kind) * cy + kind * (oy + (cz * ox - cx * oz))
    rz = (1.0 - kind) * cz + kind * (oz + (cx * oy - cy * ox))

    # Only the rhomb type needs shortening to equalize the lengths.
    scale = (1.0 - _RHOMB_SHRINK * kind) * _NOISE_SCALE
    gx = (ox * _CUBOCT_SCALE + rx) * scale
    gy = (oy * _CUBOCT_SCALE + ry) * scale
    gz = (oz * _CUBOCT_SCALE + rz) * scale
    return gx, gy, gz

def gradient_table() -> np.ndarray:
    """Returns all 48 gradients as a (48, 3) array, indexed by hash value."""
    table = np.empty((int(_GRADIENT_COUNT), 3))
    for h in range(int(_GRADIENT_COUNT)):
        table[h] = gradient(float(h))
    return table

@njit
def _vertex_contribution(x, y, z, vx, vy, vz, seed):
    """
    Falloff-weighted gradient extrapolation from one lattice vertex, plus the
    partial derivatives of that term.
    """
    dx = x - vx
    dy = y - vy
    dz = z - vz
    a = max(_FALLOFF_RADIUS_SQ - (dx * dx + dy * dy + dz * dz), 0.0)
    aa = a * a
    aaaa = aa * aa

    gx, gy, gz = gradient(hash_lattice_point(vx, vy, vz, seed))
    extrapolation = dx * gx + dy * gy + dz * gz

    value = aaaa * extrapolation
    k = -8.0 * aa * a * extrapolation
    return value, k * dx + aaaa * gx, k * dy + aaaa * gy, k * dz + aaaa * gz

@njit
def lattice_contribution_with_derivative(x, y, z, seed):
    """
    Sums the contributions of the four candidate vertices of one cubic half
    of the BCC lattice around (x, y, z). Returns (value, d/dx, d/dy, d/dz).
    """
    bx = np.floor(x)
    by = np.floor(y)
    bz = np.floor(z)
    fx = x - bx
    fy = y - by
    fz = z - bz

    # Pick between each pair of opposite corners in the cube.
    s1 = np.floor(fx * 0.25 + fy * 0.25 + fz * 0.25 + _SKEW_W * 0.25)
    s2 = np.floor(fx * -0.25 + fy * 0.25 + fz * 0.25 + _SKEW_W * 0.35)
    s3 = np.floor(fx * 0.25 + fy * -0.25 + fz * 0.25 + _SKEW_W * 0.35)
    s4 = np.floor(fx * 0.25 + fy * 0.25 + fz * -0.25 + _SKEW_W * 0.35)

    v, ddx, ddy, ddz = _vertex_contribution(x, y, z, bx + s1, by + s1, bz + s1, seed)
    total, tdx, tdy, tdz = v, ddx, ddy, ddz

    v, ddx, ddy, ddz = _vertex_contribution(x, y, z, bx + 1.0 - s2, by + s2, bz + s2, seed)
    total += v
    tdx += ddx
    tdy += ddy
    tdz += ddz

    v, ddx, ddy, ddz = _vertex_contribution(x, y, z, bx + s3, by + 1.0 - s3, bz + s3, seed)
    total += v
    tdx += ddx
    tdy += ddy
    tdz += ddz

    v, ddx, ddy, ddz = _vertex_contribution(x, y, z, bx + s4, by + s4, bz + 1.0 - s4, seed)
    total += v
    tdx += ddx
    tdy += ddy
    tdz += ddz

    return total, tdx, tdy, tdz

@njit
def lattice_contribution(x, y, z, seed):
    "Scalar value of lattice_contribution_with_derivative()."
    return lattice_contribution_with_derivative(x, y, z, seed)[0]

@njit
def orient(x, y, z, orientation):
    """Applies the Conventional or ImproveXY pre-transform to a position."""
    if orientation == _CONVENTIONAL:
        s = _TWO_THIRDS * (x + y + z)
        return s - x, s - y, s - z
    return (
        _XY_A * x + _XY_B * y + _XY_C * z,
        _XY_B * x + _XY_A * y + _XY_C * z,
        -_XY_C * x - _XY_C * y + _XY_C * z,
    )

@njit
def unorient(x, y, z, orientation):
    """
    Inverse of orient(). Both maps are orthonormal, so this is also the
    transpose that carries an oriented-space gradient back to world space.
    """
    if orientation == _CONVENTIONAL:
        s = _TWO_THIRDS * (x + y + z)
        return s - x, s - y, s - z
    return (
        _XY_A * x + _XY_B * y - _XY_C * z,
        _XY_B * x + _XY_A * y - _XY_C * z,
        _XY_C * x + _XY_C * y + _XY_C * z,
    )

@njit
def fractal_noise_3d(x, y, z, seed, frequency, lacunarity, persistence, octaves, orientation):
    """
    Multi-octave BCC noise at one world position. Each octave scales the
    untransformed position, orients it, and samples both cubic halves of the
    lattice. Zero octaves yields exactly 0.0.
    """
    total = 0.0
    amplitude = 1.0
    for _ in range(octaves):
        ox, oy, oz = orient(x * frequency, y * frequency, z * frequency, orientation)
        octave_noise = (
            lattice_contribution(ox, oy, oz, seed)
            + lattice_contribution(
                ox + _SECOND_LATTICE_OFFSET,
                oy + _SECOND_LATTICE_OFFSET,
                oz + _SECOND_LATTICE_OFFSET,
                seed,
            )
        )
        total += octave_noise * amplitude
        frequency *= lacunarity
        amplitude *= persistence
    return total

@njit
def fractal_noise_3d_with_derivative(x, y, z, seed, frequency, lacunarity, persistence, octaves, orientation):
    """
    Same value as fractal_noise_3d(), plus its gradient with respect to the
    untransformed world position. Returns (value, d/dx, d/dy, d/dz).
    """
    total = 0.0
    gx = 0.0
    gy = 0.0
    gz = 0.0
    amplitude = 1.0
    for _ in range(octaves):
        ox, oy, oz = orient(x * frequency, y * frequency, z * frequency, orientation)
        v1, dx1, dy1, dz1 = lattice_contribution_with_derivative(ox, oy, oz, seed)
        v2, dx2, dy2, dz2 = lattice_contribution_with_derivative(
            ox + _SECOND_LATTICE_OFFSET,
            oy + _SECOND_LATTICE_OFFSET,
            oz + _SECOND_LATTICE_OFFSET,
            seed,
        )
        wx, wy, wz = unorient(dx1 + dx2, dy1 + dy2, dz1 + dz2, orientation)
        total += (v1 + v2) * amplitude
        gx += wx * frequency * amplitude
        gy += wy * frequency * amplitude
        gz += wz * frequency * amplitude
        frequency *= lacunarity
        amplitude *= persistence
    return total, gx, gy, gz
