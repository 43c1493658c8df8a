"""Data models for artifact resolution outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from constants import PackageKinds
from resolution.platform import PlatformTag


class OutcomeKind(Enum):
    """Enum for the variants an ArtifactRef can take."""
    PREBUILT = "prebuilt"
    SOURCE = "source"
    HEAD = "head"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Prebuilt:
    """A precompiled artifact (bottle) for one platform tag."""
    package: str
    version: str
    tag: PlatformTag
    location: str
    rebuild: int = 0
    package_kind: PackageKinds = PackageKinds.FORMULA
    kind: OutcomeKind = field(default=OutcomeKind.PREBUILT, init=False)


@dataclass(frozen=True)
class Source:
    """A source archive, or a cask's application download."""
    package: str
    version: str
    location: str
    package_kind: PackageKinds = PackageKinds.FORMULA
    kind: OutcomeKind = field(default=OutcomeKind.SOURCE, init=False)


@dataclass(frozen=True)
class HeadCheckout:
    """A working copy of the package's development branch."""
    package: str
    location: Optional[str]
    scm: str = "git"
    package_kind: PackageKinds = PackageKinds.FORMULA
    kind: OutcomeKind = field(default=OutcomeKind.HEAD, init=False)


@dataclass(frozen=True)
class Unavailable:
    """A resolvable combination whose artifact does not exist."""
    reason: str
    kind: OutcomeKind = field(default=OutcomeKind.UNAVAILABLE, init=False)


ArtifactRef = Union[Prebuilt, Source, HeadCheckout, Unavailable]


def is_available(ref: ArtifactRef) -> bool:
    """Return True when the ref points at an artifact with a cache location."""
    return ref.kind is not OutcomeKind.UNAVAILABLE


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome for one package on one (os, arch) combination."""
    package: str
    os: str
    arch: str
    outcome: ArtifactRef
    path: Optional[Path] = None

    @property
    def available(self) -> bool:
        return is_available(self.outcome)

    def to_dict(self) -> dict:
        """Flatten the result for JSON/CSV export."""
        outcome = self.outcome
        return {
            "package": self.package,
            "os": self.os,
            "arch": self.arch,
            "outcome": outcome.kind.value,
            "tag": getattr(getattr(outcome, "tag", None), "token", None),
            "location": getattr(outcome, "location", None),
            "path": str(self.path) if self.path is not None else None,
            "reason": getattr(outcome, "reason", None),
        }
