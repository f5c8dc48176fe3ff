"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    CONFIG_ERROR = 1
    CONNECTION_ERROR = 2
    UNKNOWN_PLATFORM = 3


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    MANIFEST_URL = "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"
    FILL_BASE_URL = "https://fill.papermc.io/v3/projects/"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    USER_AGENT = "hangar-resolve/1.0"

    # Release channel kept from the game version manifest
    MANIFEST_RELEASE_TYPE = "release"
    # Substrings marking pre-release builds in Fill version lists (case-sensitive)
    PRERELEASE_MARKERS = ("pre", "rc", "snapshot")
    # Fill project whose major-version keys are also valid targets
    MAJOR_KEY_PROJECT = "velocity"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVEL_ENV = "HANGAR_RESOLVE_LOG_LEVEL"
    CONFIG_FILE = "hangar-resolve.yml"
    CONFIG_ENV = "HANGAR_RESOLVE_CONFIG"
