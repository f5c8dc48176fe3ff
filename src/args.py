"""Argument parsing functionality for hangar-resolve."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="hangar-resolve",
        description=(
            "Resolve Hangar platform dependency version patterns to concrete versions"
        ),
        add_help=True,
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("-d", "--dependencies",
                        dest="DEPENDENCIES_FILE",
                        help="YAML/JSON file mapping platforms to version patterns",
                        action="store", type=str)
    input_group.add_argument("-j", "--json",
                        dest="DEPENDENCIES_JSON",
                        help="Inline JSON mapping platforms to version patterns",
                        action="store", type=str)

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to YAML settings file (default: hangar-resolve.yml if present)",
                        action="store",
                        type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Write resolved JSON to this file instead of stdout",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        default=None)

    return parser.parse_args(argv)
