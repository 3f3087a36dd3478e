import math

import numpy as np
import pytest

import hilbert
import palette


@pytest.fixture(scope="module")
def full_palette():
    return palette.make_palette(hilbert.NUM_COLORS)


def test_make_palette_makes_all_colors(full_palette):
    assert full_palette.shape == (hilbert.NUM_COLORS, 3)
    assert palette.has_all_colors(full_palette)


def test_full_palette_is_in_curve_order(full_palette):
    indices = hilbert.encode(full_palette[:100_000])

    assert np.array_equal(indices, np.arange(100_000))


def test_has_all_colors_notices_a_changed_color(full_palette):
    corrupted = full_palette.copy()
    corrupted[0, 0] = (int(corrupted[0, 0]) + 1) % 256

    assert not palette.has_all_colors(corrupted)


def test_has_all_colors_needs_every_color():
    assert not palette.has_all_colors(palette.make_palette(10_000))


def test_make_palette_evenly_subsamples():
    num_samples = 10_000
    sample_distance = hilbert.NUM_COLORS / (num_samples - 1)
    small = math.floor(sample_distance)
    large = math.ceil(sample_distance)

    colors = palette.make_palette(num_samples)
    assert len(colors) == num_samples

    distances = np.diff(hilbert.encode(colors).astype(np.int64))
    assert np.all((distances == small) | (distances == large))

    assert tuple(colors[0]) == tuple(hilbert.decode(0))
    assert tuple(colors[-1]) == tuple(hilbert.decode(hilbert.NUM_COLORS - 1))


def test_smallest_palette_is_the_curve_ends():
    colors = palette.make_palette(2)

    assert colors.tolist() == [[0, 0, 0], [0, 0, 255]]


@pytest.mark.parametrize("palette_size", [-1, 0, 1])
def test_make_palette_needs_two_colors(palette_size):
    with pytest.raises(ValueError):
        palette.make_palette(palette_size)


def test_pack_colors():
    colors = np.array([[255, 0, 0], [0, 255, 0], [0, 0, 255], [1, 2, 3]])

    values = palette.pack_colors(colors)

    assert values.tolist() == [0xFF0000, 0x00FF00, 0x0000FF, 0x010203]
    assert np.array_equal(palette.unpack_colors(values), colors)


def test_transform_zero_is_identity():
    transform = palette.ColorTransform.from_index(0)
    colors = np.array([[1, 2, 3], [200, 100, 0]], dtype=np.uint8)

    assert np.array_equal(transform(colors), colors)


def test_transform_axis_order_and_inversion():
    transform = palette.ColorTransform((2, 0, 1), (True, False, False))

    assert transform(np.array([10, 20, 30], dtype=np.uint8)).tolist() == [30, 245, 20]


def test_there_are_48_distinct_transforms():
    color = np.array([1, 2, 4], dtype=np.uint8)

    images = set()
    for index in range(palette.TRANSFORM_COUNT):
        transform = palette.ColorTransform.from_index(index)
        assert transform.index == index

        images.add(tuple(transform(color).tolist()))

    assert len(images) == 48


@pytest.mark.parametrize("index", [-1, 48])
def test_transform_index_out_of_range(index):
    with pytest.raises(ValueError):
        palette.ColorTransform.from_index(index)


def test_transforms_permute_the_color_cube():
    # Multiples of 17 stay multiples of 17 when complemented
    levels = np.arange(0, 256, 17)
    colors = np.stack(np.meshgrid(levels, levels, levels), axis=-1).reshape(-1, 3)
    colors = colors.astype(np.uint8)

    expected = np.sort(palette.pack_colors(colors))
    for index in range(palette.TRANSFORM_COUNT):
        transform = palette.ColorTransform.from_index(index)
        transformed = np.sort(palette.pack_colors(transform(colors)))

        assert np.array_equal(transformed, expected)


def test_make_random_is_reproducible():
    first = palette.ColorTransform.make_random(np.random.default_rng(7))
    second = palette.ColorTransform.make_random(np.random.default_rng(7))

    assert first == second
    assert 0 <= first.index < palette.TRANSFORM_COUNT


def test_apply_symmetry_moves_the_curve_ends():
    colors = palette.make_palette(1000)
    # Complement blue
    transform = palette.ColorTransform((0, 1, 2), (False, False, True))

    transformed = palette.apply_symmetry(colors, transform)

    assert transformed[0].tolist() == [0, 0, 255]
    assert transformed[-1].tolist() == [0, 0, 0]
    assert np.array_equal(transformed, transform(colors))
