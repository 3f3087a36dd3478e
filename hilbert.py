# Order RGB colors along a 3D Hilbert curve through the color cube.
#
# Each channel contributes one bit per subdivision step, most significant bit
# first, so the three bits (r, g, b) name one of the 8 octants of the current
# cube. The curve visits the octants in OCTANT_FOR_ORDER and, inside each octant,
# the channels get rotated/reflected so the next subdivision looks like the
# parent. This is curve A26.2b.b3 from Herman Haverkort's "An inventory of
# three-dimensional Hilbert space-filling curves".
#
# Everything here works on numpy arrays of shape (..., 3), so a single color
# and a whole palette go through the same code.

import numpy as np

NUM_COLORS = 256**3
STEPS = 8

# The order the curve visits the octants in, and its inverse
OCTANT_FOR_ORDER = np.array([0, 2, 6, 4, 5, 7, 3, 1], dtype=np.uint32)
ORDER_FOR_OCTANT = np.array([0, 7, 1, 6, 3, 4, 2, 5], dtype=np.uint32)

# Octants 2 & 6, 3 & 7 and 4 & 5 share a rotation
ROTATION_FOR_OCTANT = np.array([0, 1, 2, 3, 4, 4, 2, 3], dtype=np.uint8)

# Output channel k of a rotation is input channel CHANNEL_ORDER[k] ^ FLIP_MASK[k]
CHANNEL_ORDER = (
    (2, 0, 1),
    (0, 2, 1),
    (1, 2, 0),
    (1, 2, 0),
    (1, 0, 2),
)
FLIP_MASK = (
    (0, 0, 0),
    (0, 255, 255),
    (0, 0, 0),
    (0, 255, 255),
    (255, 255, 0),
)


def _invert(channel_order, flip_mask):
    inverse_order = [0, 0, 0]
    for k, channel in enumerate(channel_order):
        inverse_order[channel] = k

    inverse_mask = tuple(flip_mask[k] for k in inverse_order)

    return tuple(inverse_order), inverse_mask


INVERSE_CHANNEL_ORDER, INVERSE_FLIP_MASK = zip(
    *(_invert(order, mask) for order, mask in zip(CHANNEL_ORDER, FLIP_MASK))
)


def _as_colors(colors):
    colors = np.asarray(colors)

    assert colors.shape[-1] == 3, "❌ Colors need to be (..., 3) shaped!"

    if colors.dtype != np.uint8 and np.any((colors < 0) | (colors > 255)):
        raise ValueError("Channel values need to lie in [0, 255]")

    # Flattened, so a lone color still gets indexed like a palette
    return colors.astype(np.uint8).reshape(-1, 3), colors.shape[:-1]


def get_octant(colors, step):
    mask = 0b1000_0000 >> step

    octant = ((colors[..., 0] & mask) != 0).astype(np.uint8) << 2
    octant |= ((colors[..., 1] & mask) != 0).astype(np.uint8) << 1
    octant |= ((colors[..., 2] & mask) != 0).astype(np.uint8)

    return octant


def _apply_rotations(colors, octants, channel_orders, flip_masks):
    rotations = ROTATION_FOR_OCTANT[octants]

    rotated = np.empty_like(colors)
    for rotation, (channel_order, flip_mask) in enumerate(
        zip(channel_orders, flip_masks)
    ):
        selected = rotations == rotation
        rotated[selected] = colors[selected][:, list(channel_order)] ^ np.array(
            flip_mask, dtype=np.uint8
        )

    return rotated


def rotate(colors, octants):
    return _apply_rotations(colors, octants, CHANNEL_ORDER, FLIP_MASK)


def irotate(colors, octants):
    return _apply_rotations(
        colors, octants, INVERSE_CHANNEL_ORDER, INVERSE_FLIP_MASK
    )


def encode(colors):
    """Return the position of every color on the curve, in [0, 2**24)."""
    colors, shape = _as_colors(colors)

    index = np.zeros(len(colors), dtype=np.uint32)

    for step in range(STEPS):
        octant = get_octant(colors, step)
        index = (index << 3) | ORDER_FOR_OCTANT[octant]
        colors = rotate(colors, octant)

    return index.reshape(shape)


def decode(index):
    """The inverse of encode()."""
    index = np.asarray(index, dtype=np.int64)
    shape = index.shape
    index = index.reshape(-1)

    if np.any((index < 0) | (index >= NUM_COLORS)):
        raise ValueError(f"Curve indices need to lie in [0, {NUM_COLORS})")

    colors = np.zeros((len(index), 3), dtype=np.uint8)

    # The least significant digit belongs to the last step, so the color gets
    # built up from its least significant bit, undoing each step's rotation
    # before shifting in the octant bits of the step before it.
    # The rotations don't care where the bits are, and anything a reflection
    # sets below the built-up bits gets shifted out before the end.
    for _ in range(STEPS):
        octant = OCTANT_FOR_ORDER[index & 0b111].astype(np.uint8)

        colors = irotate(colors, octant)
        colors >>= 1
        colors[..., 0] |= (octant & 0b100) << 5
        colors[..., 1] |= (octant & 0b010) << 6
        colors[..., 2] |= (octant & 0b001) << 7

        index = index >> 3

    return colors.reshape(shape + (3,))


def compare(lhs, rhs):
    """
    Return -1, 0 or 1 depending on whether lhs lies before, on or after rhs
    on the curve, stopping at the first step where their octants differ.
    """
    lhs, _ = _as_colors(lhs)
    rhs, _ = _as_colors(rhs)

    for step in range(STEPS):
        lhs_octant = get_octant(lhs, step)
        rhs_octant = get_octant(rhs, step)

        if lhs_octant[0] != rhs_octant[0]:
            if ORDER_FOR_OCTANT[lhs_octant[0]] < ORDER_FOR_OCTANT[rhs_octant[0]]:
                return -1
            return 1

        lhs = rotate(lhs, lhs_octant)
        rhs = rotate(rhs, rhs_octant)

    return 0


def curve_sort(colors):
    """Sort an (n, 3) array of colors into curve order."""
    colors, _ = _as_colors(colors)

    return colors[np.argsort(encode(colors), kind="stable")]
