import json
import math

import pytest

from supersimplex_field import config as DEFAULTS
from supersimplex_field.errors import FieldConfigError, InvalidDimension, InvalidParameter
from supersimplex_field.field_config import FieldConfig
from supersimplex_field.noise import Orientation


def _kwargs(**overrides):
    kwargs = dict(
        seed=1.0, start=(0, 0, 0), next=(1, 1, 1), frequency=1.0, lacunarity=2.0,
        persistence=0.5, octaves=2, orientation="conventional", target_dims=(4, 4, 1),
    )
    kwargs.update(overrides)
    return kwargs


def test_fields_are_normalized():
    config = FieldConfig(**_kwargs(start=[1, 2, 3], octaves=2.0, target_dims=[4, 3, 2], orientation=0))
    assert config.start == (1.0, 2.0, 3.0)
    assert config.octaves == 2 and isinstance(config.octaves, int)
    assert config.target_dims == (4, 3, 2)
    assert config.orientation is Orientation.IMPROVE_XY
    assert config.axis_signs == (1.0, -1.0, -1.0)
    assert config.cell_count == 24
    assert config.buffer_size == 96


def test_config_is_immutable():
    config = FieldConfig(**_kwargs())
    with pytest.raises(AttributeError):
        config.seed = 2.0


@pytest.mark.parametrize("dims", [(0, 4, 1), (4, 0, 1), (4, 4, 0), (-1, 4, 1), (4.5, 4, 1), (4, 4), ("4", 4, 1), None])
def test_unusable_dimensions_are_rejected(dims):
    with pytest.raises(InvalidDimension):
        FieldConfig(**_kwargs(target_dims=dims))


@pytest.mark.parametrize("octaves", [-1, 1.5, "3", None, True])
def test_unusable_octave_counts_are_rejected(octaves):
    with pytest.raises(InvalidParameter):
        FieldConfig(**_kwargs(octaves=octaves))


def test_zero_octaves_is_valid():
    assert FieldConfig(**_kwargs(octaves=0)).octaves == 0


@pytest.mark.parametrize("overrides", [
    {"seed": math.nan},
    {"frequency": math.inf},
    {"persistence": "high"},
    {"start": (0, 0)},
    {"next": (0, 0, math.nan)},
    {"axis_signs": 1.0},
    {"orientation": "sideways"},
    {"orientation": 7},
])
def test_unusable_parameters_are_rejected(overrides):
    with pytest.raises(InvalidParameter):
        FieldConfig(**_kwargs(**overrides))


def test_errors_share_a_value_error_base():
    assert issubclass(InvalidDimension, FieldConfigError)
    assert issubclass(InvalidParameter, FieldConfigError)
    assert issubclass(FieldConfigError, ValueError)


def test_from_dict_falls_back_to_defaults():
    config = FieldConfig.from_dict({"octaves": 4, "target_dims": [16, 8, 1]})
    assert config.octaves == 4
    assert config.target_dims == (16, 8, 1)
    assert config.seed == DEFAULTS.DEFAULT_SEED
    assert config.frequency == DEFAULTS.DEFAULT_FREQUENCY
    assert config.orientation is Orientation.IMPROVE_XY


def test_to_dict_survives_json_and_reloads():
    config = FieldConfig(**_kwargs(axis_signs=(1, 1, 1)))
    reloaded = FieldConfig.from_dict(json.loads(json.dumps(config.to_dict())))
    assert reloaded == config
    assert config.to_dict()["orientation"] == "conventional"


def test_kernel_args_are_plain_scalars():
    seed, frequency, lacunarity, persistence, octaves, orientation = FieldConfig(**_kwargs()).kernel_args()
    assert type(orientation) is int and orientation == 1
    assert (seed, frequency, lacunarity, persistence, octaves) == (1.0, 1.0, 2.0, 0.5, 2)
