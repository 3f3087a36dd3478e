import argparse
from pathlib import Path

import numpy as np
from PIL import Image

import palette


def load_colors(image_path):
    img = Image.open(image_path).convert("RGB")

    # Arrange all pixels into a tall column of 3 RGB values
    return np.array(img).reshape(-1, 3)


def verify(image_path):
    print("Verifying...")

    colors = load_colors(image_path)

    assert (
        len(colors) == 256**3
    ), f"❌ The image has {len(colors)} pixels instead of one for each of the 2^24 colors!"

    assert palette.has_all_colors(
        colors
    ), "❌ The image doesn't have every color exactly once!"

    print("🎉 The image has every RGB color exactly once!")


def add_parser_arguments(parser):
    parser.add_argument(
        "image_path",
        type=Path,
        help="Path to the image that should be an allRGB image",
    )


def main():
    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    add_parser_arguments(parser)
    args = parser.parse_args()

    verify(args.image_path)


if __name__ == "__main__":
    main()
