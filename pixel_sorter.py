import io
import operator
import os
import sys
from enum import Enum

import numpy as np
from PIL import Image

WHITE_THRESHOLD = 0x123456
BLACK_THRESHOLD = 0x345678
BRIGHT_THRESHOLD = 127
DARK_THRESHOLD = 223


class Mode(Enum):
    WHITE = "white"
    BLACK = "black"
    BRIGHT = "bright"
    DARK = "dark"

    @classmethod
    def parse(cls, name):
        """Look up a mode by name, ignoring case."""
        try:
            return cls(str(name).lower())
        except ValueError:
            raise ValueError(
                "Invalid mode. Must be one of: white, black, bright, dark"
            ) from None


class Direction(Enum):
    COLUMNS_FIRST = "h"
    ROWS_FIRST = "v"

    @classmethod
    def parse(cls, token):
        try:
            return cls(token)
        except ValueError:
            raise ValueError("Invalid direction. Must be one of: h, v") from None


def pixel_value(pixels):
    """Product of the RGB channels (r * g * b) of a pixel or a line of pixels."""
    rgb = np.asarray(pixels)[..., :3].astype(np.uint32)
    return rgb[..., 0] * rgb[..., 1] * rgb[..., 2]


def brightness(pixels):
    """Truncated mean of the RGB channels, 0-255."""
    rgb = np.asarray(pixels)[..., :3].astype(np.uint16)
    return ((rgb[..., 0] + rgb[..., 1] + rgb[..., 2]) // 3).astype(np.uint8)


# mode -> (classification metric, comparison, threshold, descending sort)
SORT_RULES = {
    Mode.WHITE: (pixel_value, operator.lt, WHITE_THRESHOLD, False),
    Mode.BLACK: (pixel_value, operator.gt, BLACK_THRESHOLD, True),
    Mode.BRIGHT: (brightness, operator.gt, BRIGHT_THRESHOLD, False),
    Mode.DARK: (brightness, operator.lt, DARK_THRESHOLD, True),
}

# direction -> (first pass, second pass)
PASS_ORDER = {
    Direction.COLUMNS_FIRST: ("columns", "rows"),
    Direction.ROWS_FIRST: ("rows", "columns"),
}


def metric_matches(value, mode):
    """Apply the threshold test of `mode` to an already computed metric value."""
    _, compare, threshold, _ = SORT_RULES[mode]
    return compare(value, threshold)


def should_sort(pixels, mode):
    """
    Decide whether pixels belong to a sortable run.

    Works on a single (r, g, b, a) pixel, returning a bool, or on a line of
    pixels, returning a boolean mask. Alpha is ignored.
    """
    metric, _, _, _ = SORT_RULES[mode]
    return metric_matches(metric(pixels), mode)


def get_sort_intervals(line, mode):
    """
    Find the maximal runs of sortable pixels along a line.

    Returns half-open (start, end) index pairs in line order.
    """
    mask = should_sort(line, mode)
    length = len(mask)
    intervals = []
    i = 0

    while i < length:
        while i < length and not mask[i]:
            i += 1
        start = i
        while i < length and mask[i]:
            i += 1
        if start < i:
            intervals.append((start, i))

    return intervals


def sort_section(section, mode):
    """
    Reorder a run of pixels by their r * g * b product.

    Ascending for white/bright, descending for black/dark. The product is the
    key for every mode, including the brightness-classified ones. Equal keys
    keep their original relative order.
    """
    _, _, _, descending = SORT_RULES[mode]
    values = pixel_value(section).astype(np.int64)
    if descending:
        values = -values
    order = np.argsort(values, kind="stable")
    return section[order]


def process_line(line, mode):
    """Sort every run of a single row or column view in place."""
    for start, end in get_sort_intervals(line, mode):
        line[start:end] = sort_section(line[start:end], mode)
    return line


def process_row(pixels, y, mode):
    return process_line(pixels[y], mode)


def process_column(pixels, x, mode):
    return process_line(pixels[:, x], mode)


def get_lines(pixels, pass_name):
    """Views of every row (top to bottom) or every column (left to right)."""
    if pass_name == "rows":
        return list(pixels)
    return list(np.transpose(pixels, (1, 0, 2)))


def check_pixels(pixels):
    if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint8:
        raise ValueError(
            f"Expected an (height, width, 4) uint8 RGBA array, "
            f"got shape {pixels.shape} with dtype {pixels.dtype}"
        )


def sort_image(pixels, mode, direction):
    """
    Pixel sort an RGBA array in place along both axes.

    Args:
        pixels: (height, width, 4) uint8 array, mutated and returned
        mode: Mode selecting which pixels are sorted and the sort order
        direction: Direction.COLUMNS_FIRST sorts every column, then every row;
            Direction.ROWS_FIRST does the opposite

    The second pass works on the output of the first.
    """
    check_pixels(pixels)

    for pass_name in PASS_ORDER[direction]:
        for line in get_lines(pixels, pass_name):
            process_line(line, mode)

    return pixels


def load_image(image_path=None):
    """Decode an image file (or stdin when no path is given) to an RGBA array."""
    if image_path is None:
        img = Image.open(io.BytesIO(sys.stdin.buffer.read()))
    else:
        img = Image.open(image_path)
    img = img.convert("RGBA")
    return np.array(img)


def save_image(pixels, output_path=None):
    """Encode an RGBA array to a file, or as PNG to stdout when no path is given."""
    result_img = Image.fromarray(pixels)

    if output_path is None:
        result_img.save(sys.stdout.buffer, format="PNG")
        sys.stdout.buffer.flush()
        return

    # JPEG has no alpha channel
    if os.path.splitext(output_path)[1].lower() in (".jpg", ".jpeg"):
        result_img = result_img.convert("RGB")

    result_img.save(output_path)
    print(f"Sorted image saved to {output_path}", file=sys.stderr)


def sort_pixels(image_path, output_path, mode=Mode.WHITE, direction=Direction.COLUMNS_FIRST):
    """
    Sort pixels in an image file to create glitch art effects.

    Args:
        image_path: Path to input image, None to read from stdin
        output_path: Path to save sorted image, None to write PNG to stdout
        mode: Mode.WHITE, Mode.BLACK, Mode.BRIGHT or Mode.DARK
        direction: Direction.COLUMNS_FIRST ('h') or Direction.ROWS_FIRST ('v')
    """
    pixels = load_image(image_path)
    sort_image(pixels, mode, direction)
    save_image(pixels, output_path)
    return output_path
