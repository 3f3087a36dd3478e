import argparse
from pathlib import Path

import numpy as np
from PIL import Image
from skimage import color


def mean_neighbor_distance(pixels):
    """
    The mean CIE76 difference between every pair of horizontally or vertically
    neighboring pixels. Lower means a smoother looking image.
    """
    rgb = np.asarray(pixels, dtype=np.float32) / 255

    # "The L* values range from 0 to 100; the a* and b* values range from -128 to 127."
    # https://scikit-image.org/docs/stable/api/skimage.color.html#skimage.color.rgb2lab
    lab = color.rgb2lab(rgb)

    distances = []
    if lab.shape[1] > 1:
        distances.append(color.deltaE_cie76(lab[:, 1:], lab[:, :-1]).ravel())
    if lab.shape[0] > 1:
        distances.append(color.deltaE_cie76(lab[1:, :], lab[:-1, :]).ravel())

    # A single pixel has no neighbors
    if not distances:
        return 0.0

    return float(np.concatenate(distances).mean())


def add_parser_arguments(parser):
    parser.add_argument(
        "input_image_path",
        type=Path,
        help="The path to the image to measure",
    )


def main():
    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    add_parser_arguments(parser)
    args = parser.parse_args()

    print("Loading input image...")
    pixels = np.array(Image.open(args.input_image_path).convert("RGB"))

    print("Running rgb2lab()...")
    distance = mean_neighbor_distance(pixels)

    print(f"Mean neighbor distance: {distance:.3f}")


if __name__ == "__main__":
    main()
