"""Decision procedure picking the single artifact a cache query refers to."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from catalog.models import PackageDescriptor
from common.logging_utils import extra_context, is_debug_enabled
from constants import PackageKinds
from resolution.models import ArtifactRef, HeadCheckout, Prebuilt, Source, Unavailable
from resolution.platform import PlatformTag
from resolution.selector import VariantSelector

logger = logging.getLogger(__name__)

NO_DEVELOPMENT_VARIANT = "no development variant defined"
NO_SOURCE_ARCHIVE = "no source archive defined"


@dataclass(frozen=True)
class BuildPolicy:
    """Default prebuilt-vs-source policy applied when the selector is silent.

    Attributes:
        prefer_prebuilt: Pour a prebuilt by default when one exists.
        build_from_source: Package names that always build from source.
        build_all_from_source: Every package builds from source by default.
    """
    prefer_prebuilt: bool = True
    build_from_source: FrozenSet[str] = field(default_factory=frozenset)
    build_all_from_source: bool = False

    def pours(self, package: PackageDescriptor) -> bool:
        """Return True if the default for ``package`` is to pour a prebuilt."""
        if not self.prefer_prebuilt or self.build_all_from_source:
            return False
        if package.name in self.build_from_source:
            return False
        return package.pour_prebuilt


class ArtifactResolver:
    """Resolve a package, selector and platform to one ArtifactRef.

    Rules are applied in strict priority order and the first match wins:
    explicit tag, prebuilt (forced or by policy), HEAD, then source.
    Casks always resolve to their download.
    """

    def __init__(self, policy: Optional[BuildPolicy] = None):
        self.policy = policy or BuildPolicy()

    def resolve(self, package: PackageDescriptor, selector: VariantSelector,
                os: str, arch: str) -> ArtifactRef:  # pylint: disable=redefined-builtin
        """Return the artifact ``selector`` designates for ``package`` on (os, arch).

        Args:
            package: Descriptor already loaded for the (os, arch) context.
            selector: A validated selector.
            os: Operating system of the combination.
            arch: Architecture of the combination.

        Returns:
            Exactly one of Prebuilt, Source, HeadCheckout or Unavailable.
        """
        outcome = self._resolve(package, selector, os, arch)
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved artifact",
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="resolve",
                    target=package.name,
                    outcome=outcome.kind.value,
                    platform=f"{os}/{arch}",
                )
            )
        return outcome

    def _resolve(self, package, selector, os, arch):  # pylint: disable=redefined-builtin
        # Casks have a single download per platform; variant flags only apply to formulae.
        if package.kind is PackageKinds.CASK:
            return self._source(package)

        if selector.explicit_tag is not None:
            tag = selector.explicit_tag
            entry = package.prebuilt_for(tag)
            if entry is None:
                return Unavailable(f"no prebuilt for tag {tag.token}")
            return self._prebuilt(package, tag, entry)

        tag = PlatformTag(os=os, arch=arch)
        if selector.prefer_prebuilt:
            entry = package.prebuilt_for(tag)
            if entry is None:
                return Unavailable(f"no prebuilt for {os}/{arch}")
            return self._prebuilt(package, tag, entry)

        if not (selector.prefer_source or selector.prefer_head) and self.policy.pours(package):
            entry = package.prebuilt_for(tag)
            if entry is not None:
                return self._prebuilt(package, tag, entry)

        if selector.prefer_head:
            if package.head is None:
                return Unavailable(NO_DEVELOPMENT_VARIANT)
            return HeadCheckout(
                package=package.name,
                location=package.head.url,
                scm=package.head.scm,
                package_kind=package.kind,
            )

        return self._source(package)

    @staticmethod
    def _source(package):
        if package.source is None:
            return Unavailable(NO_SOURCE_ARCHIVE)
        return Source(
            package=package.name,
            version=package.package_version,
            location=package.source.url,
            package_kind=package.kind,
        )

    @staticmethod
    def _prebuilt(package, tag, entry):
        # A universal entry keeps its own "all" tag in the file name.
        return Prebuilt(
            package=package.name,
            version=package.package_version,
            tag=entry.tag if entry.tag.is_universal else tag,
            location=entry.url,
            rebuild=entry.rebuild,
            package_kind=package.kind,
        )
