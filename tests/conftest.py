import logging

import pytest

from supersimplex_field.field_config import FieldConfig


@pytest.fixture
def logger():
    return logging.getLogger("TestNoiseField")


@pytest.fixture
def golden_config():
    """The 2x2x1 reference field whose bytes are pinned in test_dispatch."""
    return FieldConfig(
        seed=0.0,
        start=(0.0, 0.0, 0.0),
        next=(1.0, 1.0, 0.0),
        frequency=1.0,
        lacunarity=2.0,
        persistence=0.5,
        octaves=1,
        orientation="improve_xy",
        target_dims=(2, 2, 1),
    )


@pytest.fixture
def volume_config():
    """A small multi-slice field with extents that do not divide the 8x8x1 tile."""
    return FieldConfig(
        seed=12335.0,
        start=(3.5, 1.25, 0.0),
        next=(19.0, 11.0, 4.0),
        frequency=0.35,
        lacunarity=2.0,
        persistence=0.5,
        octaves=3,
        orientation="conventional",
        target_dims=(11, 9, 3),
    )
