import argparse
import sys

from pixel_sorter import Direction, Mode, sort_pixels
from pixel_sorter_parallel import sort_pixels_parallel
from project_file import SortSettings, load_project, save_project


def parse_mode(value):
    try:
        return Mode.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_direction(value):
    try:
        return Direction.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser():
    parser = argparse.ArgumentParser(
        prog="asdf-sort",
        description="Pixel Sorter - Create glitch art by sorting pixels",
    )
    parser.add_argument(
        "-i",
        "--input",
        help="Input image path (read from stdin if not provided)",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Output image path (PNG written to stdout if not provided)",
    )
    parser.add_argument(
        "-d",
        "--direction",
        type=parse_direction,
        metavar="{h,v}",
        help="Processing direction ('h' for columns first, 'v' for rows first)",
    )
    parser.add_argument(
        "-m",
        "--mode",
        type=parse_mode,
        metavar="{white,black,bright,dark}",
        help="Sorting mode (case-insensitive)",
    )
    parser.add_argument(
        "-t",
        "--threads",
        type=int,
        help="Sort the lines of each pass on N threads (0 = auto-detect)",
    )
    parser.add_argument(
        "-p",
        "--project",
        help="Load settings from a project file; explicit options take precedence",
    )
    parser.add_argument(
        "--save-project",
        metavar="FILE",
        help="Save the effective settings to a project file",
    )
    return parser


def resolve_settings(args, project):
    """Merge command line options over the values loaded from a project file."""
    return SortSettings(
        input_file=args.input if args.input is not None else project.input_file,
        mode=args.mode if args.mode is not None else project.mode,
        direction=args.direction if args.direction is not None else project.direction,
        threads=args.threads if args.threads is not None else project.threads,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.threads is not None and args.threads < 0:
        parser.error("argument -t/--threads: must be 0 or a positive integer")

    try:
        project = load_project(args.project) if args.project else SortSettings()
    except (OSError, ValueError) as e:
        print(f"Error loading project: {e}", file=sys.stderr)
        return 1

    settings = resolve_settings(args, project)

    missing = []
    if settings.direction is None:
        missing.append("-d/--direction")
    if settings.mode is None:
        missing.append("-m/--mode")
    if missing:
        parser.error(f"the following arguments are required: {', '.join(missing)}")

    try:
        if args.save_project:
            save_project(args.save_project, settings)
            print(f"Project saved: {args.save_project}", file=sys.stderr)

        print(f"Processing {settings.input_file or '<stdin>'}...", file=sys.stderr)

        if settings.threads is None:
            sort_pixels(
                settings.input_file,
                args.output,
                settings.mode,
                settings.direction,
            )
        else:
            sort_pixels_parallel(
                settings.input_file,
                args.output,
                settings.mode,
                settings.direction,
                num_threads=settings.threads or None,
            )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Done!", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
