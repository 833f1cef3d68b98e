from concurrent.futures import ThreadPoolExecutor
import multiprocessing

from pixel_sorter import (
    PASS_ORDER,
    Direction,
    Mode,
    check_pixels,
    get_lines,
    load_image,
    process_line,
    save_image,
)


def process_line_task(args):
    """Process a single row or column - designed for parallel execution."""
    line_index, line, mode = args
    process_line(line, mode)
    return line_index


def sort_image_parallel(pixels, mode, direction, num_threads=None):
    """
    Pixel sort an RGBA array in place, spreading the lines of each pass over threads.

    Every task owns one row or column view, so no two tasks touch the same
    pixels. A pass is fully finished before the next one starts.

    Args:
        num_threads: Number of threads (None = auto-detect CPU cores)
    """
    check_pixels(pixels)

    # Auto-detect CPU cores
    if num_threads is None:
        num_threads = max(1, multiprocessing.cpu_count() - 1)  # Leave one core free

    with ThreadPoolExecutor(max_workers=num_threads) as executor:
        for pass_name in PASS_ORDER[direction]:
            work_items = [
                (i, line, mode) for i, line in enumerate(get_lines(pixels, pass_name))
            ]
            # list() blocks until the pass is done and re-raises worker errors
            list(executor.map(process_line_task, work_items))

    return pixels


def sort_pixels_parallel(image_path, output_path, mode=Mode.WHITE,
                         direction=Direction.COLUMNS_FIRST, num_threads=None):
    """Parallel variant of pixel_sorter.sort_pixels using multiple CPU cores."""
    pixels = load_image(image_path)
    sort_image_parallel(pixels, mode, direction, num_threads)
    save_image(pixels, output_path)
    return output_path
