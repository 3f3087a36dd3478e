import itertools

import numpy as np

import hilbert

# How many curve indices get decoded at once, to keep the temporary arrays of
# a full 2^24 palette from eating all memory
DECODE_CHUNK_SIZE = 2**20

AXIS_ORDERS = list(itertools.permutations((0, 1, 2)))
TRANSFORM_COUNT = len(AXIS_ORDERS) * 8


def pack_colors(colors):
    """Turn (..., 3) colors into their 24-bit web hex code, e.g. 0xFF0000 is red."""
    colors = np.asarray(colors, dtype=np.uint32)

    return colors[..., 0] << 16 | colors[..., 1] << 8 | colors[..., 2]


def unpack_colors(values):
    values = np.asarray(values, dtype=np.uint32)

    colors = np.empty(values.shape + (3,), dtype=np.uint8)
    colors[..., 0] = values >> 16
    colors[..., 1] = (values >> 8) & 255
    colors[..., 2] = values & 255

    return colors


def _decode_in_chunks(indices):
    return np.concatenate(
        [
            hilbert.decode(indices[start : start + DECODE_CHUNK_SIZE])
            for start in range(0, len(indices), DECODE_CHUNK_SIZE)
        ]
    )


def make_palette(palette_size):
    """
    Get palette_size colors, in curve order. If palette_size is 2^24 you get
    one of each color; otherwise the colors are evenly spaced along the curve,
    always starting and ending at its two extremes.
    """
    if palette_size < 2:
        raise ValueError(
            f"A palette needs at least 2 colors, but {palette_size} were requested"
        )

    if palette_size == hilbert.NUM_COLORS:
        return _decode_in_chunks(np.arange(hilbert.NUM_COLORS, dtype=np.int64))

    # Sampling along the curve instead of counting through the colors keeps
    # a small palette from only quantizing the blue channel.
    delta = hilbert.NUM_COLORS / (palette_size - 1)
    indices = (np.arange(palette_size - 1, dtype=np.float64) * delta).astype(np.int64)

    # Rounding never reaches the end of the curve, so the last color gets
    # picked by hand
    indices = np.append(indices, hilbert.NUM_COLORS - 1)

    return _decode_in_chunks(indices)


def has_all_colors(colors):
    """Check if all 2^24 RGB colors are present once, and only once."""
    colors = np.asarray(colors).reshape(-1, 3)

    if len(colors) != hilbert.NUM_COLORS:
        return False

    present = np.zeros(hilbert.NUM_COLORS, dtype=bool)
    present[pack_colors(colors)] = True

    return bool(present.all())


class ColorTransform:
    """
    One of the 48 symmetries of the RGB cube: the origin can be in any of the
    8 corners, with 6 possible axis orders at each.

    Output channel k is input channel axis_order[k], which gets complemented
    first if axis_inverted[axis_order[k]] is set.
    """

    def __init__(self, axis_order=(0, 1, 2), axis_inverted=(False, False, False)):
        assert sorted(axis_order) == [0, 1, 2], "❌ axis_order isn't a permutation!"

        self.axis_order = tuple(int(axis) for axis in axis_order)
        self.axis_inverted = tuple(bool(inverted) for inverted in axis_inverted)

    @classmethod
    def from_index(cls, index):
        if not 0 <= index < TRANSFORM_COUNT:
            raise ValueError(
                f"Transform index {index} doesn't lie in [0, {TRANSFORM_COUNT})"
            )

        axis_order = AXIS_ORDERS[index // 8]
        axis_inverted = [(index >> bit) & 1 == 1 for bit in (2, 1, 0)]

        return cls(axis_order, axis_inverted)

    @classmethod
    def make_random(cls, rng):
        axis_order = rng.permutation(3)
        axis_inverted = rng.integers(0, 2, size=3) == 1

        return cls(axis_order, axis_inverted)

    @property
    def index(self):
        inverted_bits = sum(
            1 << bit
            for bit, inverted in zip((2, 1, 0), self.axis_inverted)
            if inverted
        )

        return AXIS_ORDERS.index(self.axis_order) * 8 + inverted_bits

    def __call__(self, colors):
        colors = np.asarray(colors, dtype=np.uint8)

        flip_mask = np.array(
            [255 if inverted else 0 for inverted in self.axis_inverted], dtype=np.uint8
        )

        return (colors ^ flip_mask)[..., list(self.axis_order)]

    def __eq__(self, other):
        if not isinstance(other, ColorTransform):
            return NotImplemented

        return (self.axis_order, self.axis_inverted) == (
            other.axis_order,
            other.axis_inverted,
        )

    def __hash__(self):
        return hash((self.axis_order, self.axis_inverted))

    def __repr__(self):
        return (
            f"ColorTransform(axis_order={self.axis_order}"
            f", axis_inverted={self.axis_inverted})"
        )


def apply_symmetry(palette, transform):
    """Map every color of the palette through the same cube symmetry."""
    return transform(palette)
