"""Package descriptors: the read-only view of a formula or a cask."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

from constants import Constants, PackageKinds
from resolution.platform import PlatformTag, is_macos


@dataclass(frozen=True)
class PrebuiltEntry:
    """A bottle for one platform tag."""
    tag: PlatformTag
    url: str
    sha256: Optional[str] = None
    rebuild: int = 0


@dataclass(frozen=True)
class SourceArchive:
    """A release archive (formula) or application download (cask)."""
    url: str
    sha256: Optional[str] = None


@dataclass(frozen=True)
class DevelopmentBranch:
    """The repository a HEAD build checks out."""
    url: str
    scm: str = Constants.DEFAULT_SCM
    branch: Optional[str] = None


class PackageDescriptor(ABC):
    """Capability interface shared by formulae and casks.

    Resolution is written once against this interface; the attributes below
    are provided by the concrete dataclasses.
    """

    name: str
    version: str
    prebuilts: Dict[PlatformTag, PrebuiltEntry]
    source: Optional[SourceArchive]
    head: Optional[DevelopmentBranch]
    pour_prebuilt: bool

    @property
    @abstractmethod
    def kind(self) -> PackageKinds:
        """The package kind."""

    @property
    def package_version(self) -> str:
        """Version string used in cache file names."""
        return self.version

    @abstractmethod
    def supports(self, os_name: str) -> bool:
        """Return True if the package can be installed on ``os_name``."""

    @property
    def supports_linux(self) -> bool:
        return self.supports(Constants.LINUX)

    def prebuilt_for(self, tag: PlatformTag) -> Optional[PrebuiltEntry]:
        """Return the prebuilt for ``tag``, else the universal one, else None."""
        entry = self.prebuilts.get(tag)
        if entry is None:
            entry = self.prebuilts.get(PlatformTag.universal())
        return entry


@dataclass(frozen=True)
class FormulaDescriptor(PackageDescriptor):
    """A formula: built from source, poured from a bottle, or built from HEAD.

    ``supported_os`` restricts installation to ``"macos"`` or ``"linux"``;
    None means both.
    """
    name: str
    version: str
    revision: int = 0
    prebuilts: Dict[PlatformTag, PrebuiltEntry] = field(default_factory=dict)
    source: Optional[SourceArchive] = None
    head: Optional[DevelopmentBranch] = None
    supported_os: Optional[FrozenSet[str]] = None
    pour_prebuilt: bool = True

    @property
    def kind(self) -> PackageKinds:
        return PackageKinds.FORMULA

    @property
    def package_version(self) -> str:
        if self.revision:
            return f"{self.version}_{self.revision}"
        return self.version

    def supports(self, os_name: str) -> bool:
        if not self.supported_os:
            return True
        family = "macos" if is_macos(os_name) else os_name
        return family in self.supported_os


@dataclass(frozen=True)
class CaskDescriptor(PackageDescriptor):
    """A cask: a prebuilt macOS application download.

    The download for the loaded platform is exposed as ``source``; casks
    have no bottles and no development branch.
    """
    name: str
    version: str
    source: Optional[SourceArchive] = None
    prebuilts: Dict[PlatformTag, PrebuiltEntry] = field(default_factory=dict, init=False)
    head: Optional[DevelopmentBranch] = field(default=None, init=False)
    pour_prebuilt: bool = field(default=False, init=False)

    @property
    def kind(self) -> PackageKinds:
        return PackageKinds.CASK

    def supports(self, os_name: str) -> bool:
        return is_macos(os_name)
