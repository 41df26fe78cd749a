import argparse
import sys

import cv2

from moonmap.astro import phase_to_percent
from moonmap.config import ConfigError, build_projection_config
from moonmap.data_loader import DATA_DIRECTORY_PATH, CatalogFormatError, MoonFeatureCatalog
from moonmap.overlay import render

APP_NAME = "MoonMap"
VERSION = "0.0.1"
DEFAULT_OUTPUT_SUFFIX = "_overlay"

def parse_args(argv=None):

    parser = argparse.ArgumentParser(
        prog="moonmap",
        description=f"{APP_NAME} - selenographic grid and feature overlay for Moon photographs",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("files", metavar="FILES", nargs="*",
                        help="Image files to process")
    parser.add_argument("--version", action="store_true",
                        help="Print version and exit")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print the derived overlay parameters")
    parser.add_argument("-d", "--date", type=str, default="",
                        help="Time in ISO format with timezone information, used to calculate the phase if --phase is not given. "
                             "Examples: 2024-01-01T12:00:00Z, 2025-12-26T16:30:00+01:00. Default is now.")
    parser.add_argument("-x", "--center-x", type=str, default="",
                        help="Moon center pixel on x-axis. +N or -N is an offset from the image center. Default is the image center.")
    parser.add_argument("-y", "--center-y", type=str, default="",
                        help="Moon center pixel on y-axis. +N or -N is an offset from the image center. Default is the image center.")
    parser.add_argument("-r", "--radius", type=str, default="",
                        help="Moon radius in pixels, or NN%% of half the shorter image side. Default is 80%%.")
    parser.add_argument("-a", "--rotate", type=str, default="0",
                        help="Rotation in degrees")
    parser.add_argument("-b", "--libration-latitude", type=str, default="0",
                        help="Libration in latitude in degrees")
    parser.add_argument("-l", "--libration-longitude", type=str, default="0",
                        help="Libration in longitude in degrees")
    parser.add_argument("-p", "--phase", type=str, default="",
                        help="Moon phase as fraction in [-1, 1] or in percent (NN%%). Calculated from --date if not given.")
    parser.add_argument("-o", "--output-suffix", type=str, default=DEFAULT_OUTPUT_SUFFIX,
                        help="Suffix appended to the input file name for the output PNG file")
    parser.add_argument("--crater-min-diameter", type=float, default=None,
                        help="Label all craters larger than this diameter in km instead of the well known visible craters")
    parser.add_argument("--no-maria", action="store_true",
                        help="Do not label maria")
    parser.add_argument("--no-craters", action="store_true",
                        help="Do not label craters")
    parser.add_argument("--catalog-dir", type=str, default=DATA_DIRECTORY_PATH,
                        help="Directory with MoonMaria.csv and MoonCraters.csv")
    parser.add_argument("--strict-catalog", action="store_true",
                        help="Fail if a catalog file is missing instead of skipping it")
    return parser.parse_args(argv)

def load_catalog(args) -> MoonFeatureCatalog:
    catalog = MoonFeatureCatalog(args.catalog_dir, missing_ok=not args.strict_catalog)
    if not args.no_maria:
        catalog.load_maria()
    if not args.no_craters:
        if args.crater_min_diameter is None:
            catalog.load_visible_craters()
        else:
            min_diameter = args.crater_min_diameter
            catalog.load_craters(lambda point: point.diameter > min_diameter)
    return catalog

def output_file_name(filename: str, suffix: str) -> str:
    """Output PNG path, e.g. moon.jpg becomes moon.jpg_overlay.png."""
    return f"{filename}{suffix}.png"

def process_file(filename: str, args, catalog: MoonFeatureCatalog) -> bool:
    image = cv2.imread(filename, cv2.IMREAD_COLOR)
    if image is None:
        print(f"Error: Failed to read image file: {filename}")
        return False

    height, width = image.shape[:2]
    try:
        config = build_projection_config(width, height,
                                         center_x=args.center_x,
                                         center_y=args.center_y,
                                         radius=args.radius,
                                         rotation=args.rotate,
                                         libration_latitude=args.libration_latitude,
                                         libration_longitude=args.libration_longitude,
                                         phase=args.phase,
                                         date_time=args.date)
    except ConfigError as e:
        print(f"Error: {e}")
        return False

    print(f"Phase: {phase_to_percent(config.phase)}")
    if args.verbose:
        print(f"  Image: {filename} ({width}x{height})")
        print(f"  Center: {config.center_x}, {config.center_y}")
        print(f"  Radius: {config.radius}")
        print(f"  Rotation: {config.rotation:.2f}°")
        print(f"  Libration: L={config.libration_longitude:+.2f}° B={config.libration_latitude:+.2f}°")
        print(f"  Stroke width: {config.stroke_width:.2f}")
        print(f"  Points of interest: {len(catalog)}")

    overlay_image = render(image, config, catalog)

    output_file = output_file_name(filename, args.output_suffix)
    if not cv2.imwrite(output_file, overlay_image):
        print(f"Error: Failed to write image file: {output_file}")
        return False
    print(f"Saved: {output_file}")
    return True

def main(argv=None):

    args = parse_args(argv)

    if args.version:
        print(VERSION)
        return

    if args.crater_min_diameter is not None and args.crater_min_diameter < 0:
        print("Error: Invalid crater minimum diameter. Must not be negative.")
        sys.exit(1)

    try:
        catalog = load_catalog(args)
    except (CatalogFormatError, FileNotFoundError) as e:
        print(f"Error: Could not load catalog: {e}")
        sys.exit(1)

    failed = [filename for filename in args.files if not process_file(filename, args, catalog)]
    if failed:
        sys.exit(1)

if __name__ == "__main__":
    main()
