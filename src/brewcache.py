"""brewcache - display the download cache, or the cache file of a formula or cask.

    Returns:
        int: Exit code
"""
import logging
import sys

from args import parse_args
from catalog.provider import open_catalog
from cli_config import load_settings
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes, PackageKinds
from errors import (
    CatalogConnectionError,
    CatalogError,
    ConflictError,
    InvalidTagError,
    UnknownPackageError,
)
from export import export_csv, export_json, infer_format
from resolution.driver import ResolutionDriver
from resolution.locator import CacheLocator
from resolution.platform import PlatformTag, current_platform
from resolution.resolver import ArtifactResolver, BuildPolicy
from resolution.selector import CASK, FORMULA, VariantSelector

logger = logging.getLogger(__name__)


def build_selector(args):
    """Build a validated VariantSelector from parsed arguments.

    Raises:
        ConflictError: If mutually exclusive flags were combined.
        InvalidTagError: If --bottle-tag, --os or --arch is not recognised.
    """
    if getattr(args, "FORMULA", False) and getattr(args, "CASK", False):
        raise ConflictError([FORMULA, CASK])
    only_kind = None
    if getattr(args, "FORMULA", False):
        only_kind = PackageKinds.FORMULA
    elif getattr(args, "CASK", False):
        only_kind = PackageKinds.CASK

    bottle_tag = getattr(args, "BOTTLE_TAG", None)
    return VariantSelector(
        explicit_tag=PlatformTag.from_token(bottle_tag) if bottle_tag else None,
        os_filter=getattr(args, "OS", None),
        arch_filter=getattr(args, "ARCH", None),
        prefer_source=bool(getattr(args, "BUILD_FROM_SOURCE", False)),
        prefer_prebuilt=bool(getattr(args, "FORCE_BOTTLE", False)),
        prefer_head=bool(getattr(args, "HEAD", False)),
        only_kind=only_kind,
    )


def build_policy(settings):
    """Default prebuilt-vs-source policy from settings."""
    return BuildPolicy(
        prefer_prebuilt=settings.prefer_prebuilt,
        build_from_source=settings.build_from_source,
        build_all_from_source=settings.build_all_from_source,
    )


def unavailable_message(result):
    """Warning text for an unavailable result."""
    return f"{result.package} ({result.os}/{result.arch}): {result.outcome.reason}"


def run(args, host=None, out=None):
    """Run the command for parsed arguments.

    Args:
        args: Parsed CLI namespace.
        host (PlatformTag, optional): Platform used for unset --os/--arch.
        out: Stream receiving cache paths; defaults to stdout.

    Returns:
        int: Exit code
    """
    out = out or sys.stdout
    settings = load_settings(args)

    names = getattr(args, "NAMES", None) or []
    if not names:
        print(settings.cache_dir, file=out)
        return ExitCodes.SUCCESS.value

    try:
        selector = build_selector(args)
    except (ConflictError, InvalidTagError) as e:
        logging.error("%s", e)
        return ExitCodes.INVALID_INPUT.value

    host = host or current_platform()
    provider = open_catalog(settings.catalog_location)
    driver = ResolutionDriver(
        resolver=ArtifactResolver(build_policy(settings)),
        locator=CacheLocator(settings.cache_dir),
        host=host,
        provider=provider,
    )
    if is_debug_enabled(logger):
        logger.debug(
            "Resolving cache files",
            extra=extra_context(event="function_entry", component="cli", action="run",
                                count=len(names), platform=host.token)
        )

    results = []
    try:
        packages = provider.load_all(names, host, selector.only_kind)
        for result in driver.resolve_all(packages, selector):
            results.append(result)
            if result.available:
                print(result.path, file=out)
            else:
                logging.warning("%s", unavailable_message(result))
    except UnknownPackageError as e:
        logging.error("%s", e)
        return ExitCodes.INVALID_INPUT.value
    except CatalogConnectionError as e:
        logging.error("%s", e)
        return ExitCodes.CONNECTION_ERROR.value
    except CatalogError as e:
        logging.error("%s", e)
        return ExitCodes.FILE_ERROR.value

    if getattr(args, "OUTPUT", None):
        fmt = infer_format(args.OUTPUT, getattr(args, "OUTPUT_FORMAT", None))
        if fmt == "csv":
            export_csv(results, args.OUTPUT)
        else:
            export_json(results, args.OUTPUT)

    if any(not r.available for r in results):
        if getattr(args, "ERROR_ON_WARNINGS", False):
            logging.error("Warnings present, exiting with non-zero status code.")
            return ExitCodes.EXIT_WARNINGS.value
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(getattr(args, "LOG_LEVEL", None), getattr(args, "LOG_FILE", None))
    sys.exit(run(args))


if __name__ == "__main__":
    main()
