"""hangar-resolve: resolve Hangar platform dependency versions.

Reads a mapping of platform name to version patterns and prints the
versions Hangar accepts for each platform as JSON.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Dict, List

from args import parse_args
from common.config import Settings, load_platform_dependencies, load_settings, parse_platform_dependencies
from common.logging_utils import configure_logging
from constants import ExitCodes
from registry.http import HttpSession
from registry.profiles import build_resolver
from versioning.errors import ConfigError, UnrecognizedPlatformError, UpstreamFetchError

logger = logging.getLogger(__name__)


async def resolve_platform_dependencies(
    dependencies: Dict[str, List[str]], settings: Settings
) -> Dict[str, List[str]]:
    """Resolve all platform dependencies with a fresh resolver and session."""
    async with HttpSession(timeout=settings.request_timeout, user_agent=settings.user_agent) as http:
        resolver = build_resolver(http, settings)
        return await resolver.resolve_all(dependencies)


def _write_output(resolved: Dict[str, List[str]], path: str) -> None:
    payload = json.dumps(resolved, indent=2)
    if not path:
        print(payload)
        return
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(payload + "\n")
    logging.info("Resolved versions written to: %s", path)


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)

    try:
        settings = load_settings(args.CONFIG)
        if args.DEPENDENCIES_FILE:
            dependencies = load_platform_dependencies(args.DEPENDENCIES_FILE)
        else:
            dependencies = parse_platform_dependencies(args.DEPENDENCIES_JSON)
        logging.info("Resolving %d platform(s)", len(dependencies))
        resolved = asyncio.run(resolve_platform_dependencies(dependencies, settings))
    except UnrecognizedPlatformError as e:
        logging.error("%s", e)
        return ExitCodes.UNKNOWN_PLATFORM.value
    except UpstreamFetchError as e:
        logging.error("%s", e)
        logger.debug("Failed upstream URL: %s", e.url)
        return ExitCodes.CONNECTION_ERROR.value
    except ConfigError as e:
        logging.error("Invalid input: %s", e)
        return ExitCodes.CONFIG_ERROR.value

    for platform, versions in resolved.items():
        if not versions:
            logging.warning("No versions resolved for %s", platform)
    try:
        _write_output(resolved, args.OUTPUT)
    except OSError as e:
        logging.error("Output couldn't be written: %s", e)
        return ExitCodes.CONFIG_ERROR.value
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
