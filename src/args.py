"""Argument parsing functionality for brewcache."""

import argparse

from constants import Constants


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog=Constants.PROG_NAME,
        description=(
            "Display the download cache. If a formula or cask is provided, "
            "display the file or directory used to cache it."
        ),
        add_help=True,
    )

    parser.add_argument("NAMES",
                        help="Formula or cask names",
                        nargs="*",
                        metavar="formula|cask")

    parser.add_argument("--os",
                        dest="OS",
                        help="Show cache file for the given operating system. "
                             "(Pass `all` to show cache files for all operating systems.)",
                        action="store", type=str)
    parser.add_argument("--arch",
                        dest="ARCH",
                        help="Show cache file for the given CPU architecture. "
                             "(Pass `all` to show cache files for all architectures.)",
                        action="store", type=str)
    parser.add_argument("-s", "--build-from-source",
                        dest="BUILD_FROM_SOURCE",
                        help="Show the cache file used when building from source.",
                        action="store_true")
    parser.add_argument("--force-bottle",
                        dest="FORCE_BOTTLE",
                        help="Show the cache file used when pouring a bottle.",
                        action="store_true")
    parser.add_argument("--bottle-tag",
                        dest="BOTTLE_TAG",
                        help="Show the cache file used when pouring a bottle for the given tag.",
                        action="store", type=str)
    parser.add_argument("--HEAD",
                        dest="HEAD",
                        help="Show the cache file used when building from HEAD.",
                        action="store_true")
    parser.add_argument("--formula", "--formulae",
                        dest="FORMULA",
                        help="Only show cache files for formulae.",
                        action="store_true")
    parser.add_argument("--cask", "--casks",
                        dest="CASK",
                        help="Only show cache files for casks.",
                        action="store_true")

    parser.add_argument("--cache-dir",
                        dest="CACHE_DIR",
                        help=f"Cache root (overrides ${Constants.ENV_CACHE_DIR})",
                        action="store", type=str)
    parser.add_argument("--catalog",
                        dest="CATALOG",
                        help="Catalog file, directory or http(s) API base URL",
                        action="store", type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML or JSON)",
                        action="store", type=str)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV)",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or csv). If not specified, inferred from --output extension; defaults to json.",
                        action="store",
                        type=str.lower,
                        choices=['json', 'csv'])
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help=f"Set the logging level (default: ${Constants.ENV_LOG_LEVEL} or INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--error-on-warnings",
                        dest="ERROR_ON_WARNINGS",
                        help="Exit with a non-zero status code if any cache file is unavailable.",
                        action="store_true")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
