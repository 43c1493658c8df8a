"""Iterate packages over (os, arch) combinations and resolve each pair."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from catalog.models import PackageDescriptor
from catalog.provider import DescriptorProvider
from common.logging_utils import extra_context, is_debug_enabled
from resolution.locator import CacheLocator
from resolution.models import ResolutionResult, is_available
from resolution.platform import PlatformTag
from resolution.resolver import ArtifactResolver
from resolution.selector import VariantSelector

logger = logging.getLogger(__name__)


class ResolutionDriver:
    """Run resolver and locator over every requested combination.

    Args:
        resolver: Decision procedure.
        locator: Maps resolved artifacts to cache paths.
        host: Platform used for unset OS/arch filters.
        provider: When given, each package is reloaded for every
            combination, since its artifacts can differ per platform.
    """

    def __init__(self, resolver: ArtifactResolver, locator: CacheLocator,
                 host: PlatformTag, provider: Optional[DescriptorProvider] = None):
        self.resolver = resolver
        self.locator = locator
        self.host = host
        self.provider = provider

    def resolve_all(self, packages: Iterable[PackageDescriptor],
                    selector: VariantSelector) -> Iterator[ResolutionResult]:
        """Yield one ResolutionResult per supported (package, os, arch).

        Unsupported pairs are skipped without a result. Results follow the
        package order, then the combination order.
        """
        for package in packages:
            for os_name, arch in selector.expand_combinations(self.host, package.supports_linux):
                if not package.supports(os_name):
                    if is_debug_enabled(logger):
                        logger.debug(
                            "Skipping unsupported platform",
                            extra=extra_context(
                                event="skip",
                                component="driver",
                                action="resolve_all",
                                target=package.name,
                                platform=f"{os_name}/{arch}",
                            )
                        )
                    continue
                yield self.resolve_one(package, selector, os_name, arch)

    def resolve_one(self, package: PackageDescriptor, selector: VariantSelector,
                    os_name: str, arch: str) -> ResolutionResult:
        """Resolve and locate a single combination."""
        loaded = package
        if self.provider is not None:
            loaded = self.provider.load(package.name, PlatformTag(os=os_name, arch=arch),
                                        kind=package.kind)
        outcome = self.resolver.resolve(loaded, selector, os_name, arch)
        path = self.locator.locate(outcome) if is_available(outcome) else None
        return ResolutionResult(package=package.name, os=os_name, arch=arch,
                                outcome=outcome, path=path)
