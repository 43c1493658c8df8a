"""Variant selection criteria and (os, arch) combination expansion."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from typing import Iterator, List, Optional, Tuple

from constants import Constants, PackageKinds
from errors import ConflictError
from resolution.platform import (
    PlatformTag,
    known_arch_values,
    known_os_values,
    normalize_arch,
    normalize_os,
)

# Option names as they appear on the command line.
BUILD_FROM_SOURCE = "build-from-source"
FORCE_BOTTLE = "force-bottle"
BOTTLE_TAG = "bottle-tag"
HEAD = "HEAD"
FORMULA = "formula"
CASK = "cask"
OS = "os"
ARCH = "arch"

CONFLICT_GROUPS = (
    (BUILD_FROM_SOURCE, FORCE_BOTTLE, BOTTLE_TAG, HEAD, CASK),
    (OS, BOTTLE_TAG),
    (ARCH, BOTTLE_TAG),
)


class Combinations:
    """Lazy, re-iterable sequence of (os, arch) pairs."""

    def __init__(self, os_values: List[str], arch_values: List[str], supports_linux: bool = True):
        self._os_values = list(os_values)
        self._arch_values = list(arch_values)
        self._supports_linux = supports_linux

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        for os_name, arch in product(self._os_values, self._arch_values):
            if os_name == Constants.LINUX and not self._supports_linux:
                continue
            yield os_name, arch

    def __repr__(self) -> str:
        return f"Combinations(os={self._os_values!r}, arch={self._arch_values!r})"


@dataclass(frozen=True)
class VariantSelector:
    """The caller's resolution criteria.

    Validated once at construction; a selector that exists is always
    consistent, so resolution never re-checks it.

    Raises:
        ConflictError: If two mutually exclusive options are set.
        InvalidTagError: If an OS or architecture filter names no known value.
    """
    explicit_tag: Optional[PlatformTag] = None
    os_filter: Optional[str] = None
    arch_filter: Optional[str] = None
    prefer_source: bool = False
    prefer_prebuilt: bool = False
    prefer_head: bool = False
    only_kind: Optional[PackageKinds] = None

    def __post_init__(self):
        for name in ("os_filter", "arch_filter"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, str(value).strip().lower())
        self.validate()
        if self.os_filter is not None and self.os_filter != Constants.ALL:
            normalize_os(self.os_filter)
        if self.arch_filter is not None and self.arch_filter != Constants.ALL:
            normalize_arch(self.arch_filter)

    def _active_options(self) -> List[str]:
        active = []
        if self.prefer_source:
            active.append(BUILD_FROM_SOURCE)
        if self.prefer_prebuilt:
            active.append(FORCE_BOTTLE)
        if self.explicit_tag is not None:
            active.append(BOTTLE_TAG)
        if self.prefer_head:
            active.append(HEAD)
        if self.only_kind is PackageKinds.CASK:
            active.append(CASK)
        if self.os_filter is not None:
            active.append(OS)
        if self.arch_filter is not None:
            active.append(ARCH)
        return active

    def validate(self) -> None:
        """Raise ConflictError naming the first two conflicting options."""
        active = self._active_options()
        for group in CONFLICT_GROUPS:
            present = [name for name in group if name in active]
            if len(present) > 1:
                raise ConflictError(present[:2])

    def expand_combinations(self, host: PlatformTag, supports_linux: bool = True) -> Combinations:
        """Return the (os, arch) pairs this selector asks about.

        Args:
            host: Platform used for unset filters.
            supports_linux: False drops every linux pair.
        """
        if self.explicit_tag is not None:
            tag = host if self.explicit_tag.is_universal else self.explicit_tag
            return Combinations([tag.os], [tag.arch], supports_linux)

        if self.os_filter == Constants.ALL:
            os_values = known_os_values()
        elif self.os_filter is not None:
            os_values = [normalize_os(self.os_filter)]
        else:
            os_values = [host.os]

        if self.arch_filter == Constants.ALL:
            arch_values = known_arch_values()
        elif self.arch_filter is not None:
            arch_values = [normalize_arch(self.arch_filter)]
        else:
            arch_values = [host.arch]

        return Combinations(os_values, arch_values, supports_linux)
