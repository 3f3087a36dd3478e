import argparse
import time
from pathlib import Path

import humanize
import numpy as np
from PIL import Image

import palette
import smoothness
from grid import GridGraph

TRAVERSALS = {
    "sdfs": GridGraph.sdfs,
    "dfs": GridGraph.dfs,
    "bfs": GridGraph.bfs,
}


def generate(rows, cols, rng, traversal="sdfs", transform=None):
    """
    Give every pixel of a rows x cols image a color, by pairing colors sorted
    along the Hilbert curve with pixels sorted by a random spanning tree
    traversal. Returns a (rows, cols, 3) uint8 array.
    """
    if traversal not in TRAVERSALS:
        raise ValueError(
            f"Unknown traversal {traversal!r}, expected one of {list(TRAVERSALS)}"
        )

    graph = GridGraph(rows, cols)

    print("Building palette...")
    colors = palette.make_palette(graph.size)

    # The curve always goes from black (0, 0, 0) to blue (0, 0, 255), so the
    # color cube gets rotated and flipped to allow other orderings
    if transform is None:
        transform = palette.ColorTransform.make_random(rng)
    print(f"Using color transform {transform.index}")
    colors = palette.apply_symmetry(colors, transform)

    print("Spanning tree...")
    graph.span(rng)

    print(f"Traversing tree with {traversal}...")
    ordering = TRAVERSALS[traversal](graph)

    assert len(colors) == len(
        ordering
    ), "❌ The palette and the pixel ordering don't have the same length!"

    # Copy the curve-ordered colors to the pixels, in the tree traversal order
    output = np.empty((graph.size, 3), dtype=np.uint8)
    output[np.asarray(ordering, dtype=np.int64)] = colors

    return output.reshape(rows, cols, 3)


def save_image(pixels, output_image_path):
    Image.fromarray(pixels).save(output_image_path)


def print_status(pixels, start_time):
    print(
        f"Generated {humanize.intword(pixels.shape[0] * pixels.shape[1])} pixels"
        f" in {humanize.precisedelta(time.time() - start_time)}"
    )


def add_parser_arguments(parser):
    parser.add_argument(
        "rows",
        type=int,
        help="The height of the output image",
    )
    parser.add_argument(
        "cols",
        type=int,
        help="The width of the output image",
    )
    parser.add_argument(
        "output_image_path",
        type=Path,
        help="The path where to save the output image to",
    )
    parser.add_argument(
        "--traversal",
        choices=list(TRAVERSALS),
        default="sdfs",
        help="The random spanning tree traversal order: sdfs is shortest depth first, dfs is depth first, bfs is breadth first",
    )
    parser.add_argument(
        "-s",
        "--seed",
        type=int,
        default=None,
        help="The random seed; a fresh one gets picked and printed if it isn't passed",
    )
    parser.add_argument(
        "-t",
        "--transform",
        type=int,
        default=None,
        help="Which of the 48 color cube symmetries to apply, where 0 leaves the colors as they are; a random one is used if it isn't passed",
    )
    parser.add_argument(
        "-c",
        "--check",
        action="store_true",
        help="Check if the output is a valid allRGB image, with every color exactly once",
    )
    parser.add_argument(
        "--smoothness",
        action="store_true",
        help="Print the mean perceptual color difference between neighboring pixels",
    )


def main():
    start_time = time.time()

    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    add_parser_arguments(parser)
    args = parser.parse_args()

    seed = args.seed
    if seed is None:
        seed = np.random.SeedSequence().entropy
    print(f"Using seed {seed}")

    rng = np.random.default_rng(seed)

    transform = None
    if args.transform is not None:
        transform = palette.ColorTransform.from_index(args.transform)

    pixels = generate(args.rows, args.cols, rng, args.traversal, transform)

    print_status(pixels, start_time)

    if args.check:
        if palette.has_all_colors(pixels):
            print("🎉 Has all 2^24 RGB colors!")
        else:
            print("❌ Not one of each RGB color")

    if args.smoothness:
        distance = smoothness.mean_neighbor_distance(pixels)
        print(f"Mean neighbor distance: {distance:.3f}")

    print("Saving output image...")
    save_image(pixels, args.output_image_path)


if __name__ == "__main__":
    main()
