import numpy as np
import pytest

from supersimplex_field import dispatch as dispatcher
from supersimplex_field.color_maps import quantize_cell
from supersimplex_field.errors import InvalidParameter
from supersimplex_field.field_config import FieldConfig

# dims=(2,2,1), start=(0,0,0), next=(1,1,0), frequency=1, lacunarity=2,
# persistence=0.5, octaves=1, seed=0, ImproveXY.
GOLDEN_2x2 = bytes([
    127, 127, 127, 255,
    197, 197, 197, 255,
    155, 155, 155, 255,
    175, 175, 175, 255,
])


def _replace(config, **overrides):
    data = config.to_dict()
    data.update(overrides)
    return FieldConfig.from_dict(data)


def test_golden_buffer(golden_config):
    buffer = bytearray(golden_config.buffer_size)
    result = dispatcher.dispatch(golden_config, buffer)
    assert result is buffer
    assert bytes(buffer) == GOLDEN_2x2


def test_golden_buffer_is_reproducible_across_runs(golden_config):
    runs = {bytes(dispatcher.dispatch(golden_config, bytearray(16))) for _ in range(3)}
    assert runs == {GOLDEN_2x2}


def test_world_position_negates_second_and_third_axes(golden_config):
    assert dispatcher.world_position(golden_config, 0, 0, 0) == (0.0, 0.0, 0.0)
    assert dispatcher.world_position(golden_config, 1, 0, 0) == (0.5, 0.0, 0.0)
    assert dispatcher.world_position(golden_config, 1, 1, 0) == (0.5, -0.5, 0.0)

    config = FieldConfig(
        seed=0.0, start=(2.0, 4.0, 6.0), next=(6.0, 8.0, 10.0), frequency=1.0,
        lacunarity=2.0, persistence=0.5, octaves=1, orientation="improve_xy",
        target_dims=(4, 4, 2),
    )
    assert dispatcher.world_position(config, 2, 1, 1) == pytest.approx((4.0, -5.0, -8.0))


def test_axis_signs_adapter_can_disable_the_flip(golden_config):
    unflipped = _replace(golden_config, axis_signs=[1.0, 1.0, 1.0])
    assert dispatcher.world_position(unflipped, 1, 1, 0) == (0.5, 0.5, 0.0)


def test_cell_offset_is_row_major_with_x_fastest(volume_config):
    dx, dy, _ = volume_config.target_dims
    assert dispatcher.cell_offset(volume_config, 0, 0, 0) == 0
    assert dispatcher.cell_offset(volume_config, 1, 0, 0) == 4
    assert dispatcher.cell_offset(volume_config, 0, 1, 0) == 4 * dx
    assert dispatcher.cell_offset(volume_config, 2, 3, 1) == 4 * (2 + 3 * dx + dx * dy)


def test_every_cell_matches_its_independent_evaluation(volume_config):
    buffer = dispatcher.dispatch(volume_config, bytearray(volume_config.buffer_size))
    dx, dy, dz = volume_config.target_dims
    for iz in range(dz):
        for iy in range(dy):
            for ix in range(dx):
                offset = dispatcher.cell_offset(volume_config, ix, iy, iz)
                expected = quantize_cell(dispatcher.evaluate_cell(volume_config, ix, iy, iz))
                assert tuple(buffer[offset:offset + 4]) == expected


def test_evaluate_cell_rejects_out_of_bounds_indices(volume_config):
    with pytest.raises(IndexError):
        dispatcher.evaluate_cell(volume_config, 11, 0, 0)
    with pytest.raises(IndexError):
        dispatcher.evaluate_cell(volume_config, 0, -1, 0)


def test_iter_tiles_clips_to_the_grid():
    tiles = list(dispatcher.iter_tiles((10, 9, 2), (8, 8, 1)))
    assert len(tiles) == 8
    assert tiles[0] == ((0, 0, 0), (8, 8, 1))
    assert tiles[1] == ((8, 0, 0), (2, 8, 1))
    assert tiles[3] == ((8, 8, 0), (2, 1, 1))
    covered = sum(ex * ey * ez for _, (ex, ey, ez) in tiles)
    assert covered == 10 * 9 * 2


@pytest.mark.parametrize("tile_size", [(1, 1, 1), (3, 5, 2), (8, 8, 1), (64, 64, 64)])
def test_output_does_not_depend_on_tile_size(volume_config, tile_size):
    reference = dispatcher.dispatch(volume_config, bytearray(volume_config.buffer_size))
    tiled = dispatcher.dispatch(volume_config, bytearray(volume_config.buffer_size), tile_size=tile_size)
    assert tiled == reference


def test_worker_pool_matches_in_process_dispatch(volume_config):
    reference = dispatcher.dispatch(volume_config, bytearray(volume_config.buffer_size))
    pooled = dispatcher.dispatch(volume_config, bytearray(volume_config.buffer_size), workers=2, tile_size=(4, 4, 1))
    assert pooled == reference


def test_every_cell_is_written(volume_config):
    buffer = dispatcher.dispatch(volume_config, bytearray(volume_config.buffer_size))
    cells = np.frombuffer(buffer, dtype=np.uint8).reshape(-1, 4)
    assert np.all(cells[:, 3] == 255)


def test_numpy_buffer_is_filled_in_place(golden_config):
    buffer = np.zeros(golden_config.buffer_size, dtype=np.uint8)
    dispatcher.dispatch(golden_config, buffer)
    assert buffer.tobytes() == GOLDEN_2x2


def test_zero_octaves_fill_mid_gray(golden_config):
    flat = _replace(golden_config, octaves=0, target_dims=[5, 3, 2])
    buffer = dispatcher.dispatch(flat, bytearray(flat.buffer_size))
    assert bytes(buffer) == bytes([127, 127, 127, 255]) * 30


def test_wrong_sized_buffer_is_rejected_before_writing(golden_config):
    buffer = bytearray(b"\x01" * 12)
    with pytest.raises(InvalidParameter):
        dispatcher.dispatch(golden_config, buffer)
    assert buffer == bytearray(b"\x01" * 12)


def test_read_only_buffer_is_rejected(golden_config):
    with pytest.raises(InvalidParameter):
        dispatcher.dispatch(golden_config, bytes(16))


@pytest.mark.parametrize("tile_size", [(0, 8, 1), (8, 8), ("a", 1, 1)])
def test_unusable_tile_sizes_are_rejected(golden_config, tile_size):
    with pytest.raises(InvalidParameter):
        dispatcher.dispatch(golden_config, bytearray(16), tile_size=tile_size)
