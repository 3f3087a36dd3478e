import numpy as np
import pytest

import hilbert
import palette


def test_curve_starts_at_black_and_ends_at_blue():
    assert tuple(hilbert.decode(0)) == (0, 0, 0)
    assert tuple(hilbert.decode(hilbert.NUM_COLORS - 1)) == (0, 0, 255)

    assert int(hilbert.encode((0, 0, 0))) == 0
    assert int(hilbert.encode((0, 0, 255))) == hilbert.NUM_COLORS - 1


def test_first_octant_order():
    # The top level octants get visited in the order 0, 2, 6, 4, 5, 7, 3, 1
    corners = np.array(
        [
            [(octant >> 2 & 1) * 128, (octant >> 1 & 1) * 128, (octant & 1) * 128]
            for octant in hilbert.OCTANT_FOR_ORDER
        ]
    )

    tops = hilbert.encode(corners) >> 21

    assert tops.tolist() == list(range(8))


def test_rotations_are_inverted_by_irotate():
    rng = np.random.default_rng(1)
    colors = rng.integers(0, 256, size=(1000, 3), dtype=np.uint8)

    for octant in range(8):
        octants = np.full(len(colors), octant, dtype=np.uint8)
        rotated = hilbert.rotate(colors, octants)

        assert np.array_equal(hilbert.irotate(rotated, octants), colors)


def test_round_trip_every_color():
    for start in range(0, hilbert.NUM_COLORS, 2**21):
        values = np.arange(start, start + 2**21, dtype=np.uint32)
        colors = palette.unpack_colors(values)

        indices = hilbert.encode(colors)

        assert np.array_equal(hilbert.decode(indices), colors)


def test_neighbors_on_the_curve_are_neighbors_in_the_cube():
    colors = hilbert.decode(np.arange(100_000)).astype(np.int16)

    steps = np.abs(np.diff(colors, axis=0)).sum(axis=1)

    assert np.all(steps == 1)


def test_compare_agrees_with_encode():
    rng = np.random.default_rng(2)
    lhs = rng.integers(0, 256, size=(2000, 3), dtype=np.uint8)
    rhs = rng.integers(0, 256, size=(2000, 3), dtype=np.uint8)

    lhs_indices = hilbert.encode(lhs)
    rhs_indices = hilbert.encode(rhs)

    for a, b, a_index, b_index in zip(
        lhs, rhs, lhs_indices.tolist(), rhs_indices.tolist()
    ):
        expected = (a_index > b_index) - (a_index < b_index)
        assert hilbert.compare(a, b) == expected


def test_compare_curve_neighbors():
    start = 123_456
    colors = hilbert.decode(np.arange(start, start + 500))

    for before, after in zip(colors, colors[1:]):
        assert hilbert.compare(before, after) == -1
        assert hilbert.compare(after, before) == 1
        assert hilbert.compare(before, before) == 0


def test_curve_sort():
    rng = np.random.default_rng(3)
    colors = rng.integers(0, 256, size=(500, 3), dtype=np.uint8)

    indices = hilbert.encode(hilbert.curve_sort(colors))

    assert np.all(np.diff(indices.astype(np.int64)) >= 0)


def test_decode_rejects_out_of_range_indices():
    with pytest.raises(ValueError):
        hilbert.decode(hilbert.NUM_COLORS)

    with pytest.raises(ValueError):
        hilbert.decode(-1)


def test_encode_rejects_out_of_range_channels():
    with pytest.raises(ValueError):
        hilbert.encode((0, 256, 0))
