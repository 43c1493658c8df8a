"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3
    INVALID_INPUT = 4


class PackageKinds(Enum):
    """Kinds of packages the catalog can describe.

    Args:
        Enum (string): Package kinds supported by the program.
    """

    FORMULA = "formula"
    CASK = "cask"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROG_NAME = "brewcache"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

    # Platform axes. macOS releases are listed newest first; "all" expansions
    # follow this order, with linux last.
    MACOS_RELEASES = ["tahoe", "sequoia", "sonoma", "ventura", "monterey", "big_sur"]
    MACOS_RELEASE_VERSIONS = {
        "26": "tahoe",
        "15": "sequoia",
        "14": "sonoma",
        "13": "ventura",
        "12": "monterey",
        "11": "big_sur",
    }
    LINUX = "linux"
    ARCHES = ["x86_64", "arm64"]
    OS_ALIASES = {"macos": MACOS_RELEASES[0], "mac": MACOS_RELEASES[0], "darwin": MACOS_RELEASES[0]}
    ARCH_ALIASES = {"intel": "x86_64", "amd64": "x86_64", "arm": "arm64", "aarch64": "arm64"}
    ALL = "all"

    # Cache layout
    DOWNLOADS_DIR = "downloads"
    BOTTLE_EXTENSION = "tar.gz"
    DEFAULT_SCM = "git"
    SUPPORTED_SCMS = ["git", "hg", "svn", "fossil", "bzr", "cvs"]

    # Configuration
    ENV_CACHE_DIR = "BREWCACHE_CACHE"
    ENV_CATALOG = "BREWCACHE_CATALOG"
    ENV_API_URL = "BREWCACHE_API_URL"
    ENV_BUILD_FROM_SOURCE = "BREWCACHE_BUILD_FROM_SOURCE"
    ENV_LOG_LEVEL = "BREWCACHE_LOG_LEVEL"
    CONFIG_FILE_NAME = "config.yml"
    DEFAULT_API_URL = "https://formulae.brew.sh/api"
    CATALOG_EXTENSIONS = [".yml", ".yaml", ".json"]

    # HTTP
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
