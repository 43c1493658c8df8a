"""Platform tags: (operating system, CPU architecture) pairs and their tokens.

Token grammar, mirroring bottle tags:

- ``all``                 the universal tag
- ``<arch>_<os>``         e.g. ``arm64_sonoma``, ``x86_64_linux``
- ``<macos-release>``     Intel macOS, e.g. ``sonoma`` == ``x86_64_sonoma``
"""

from __future__ import annotations

import platform as _host
from dataclasses import dataclass
from typing import List, Optional

from constants import Constants
from errors import InvalidTagError


def known_os_values() -> List[str]:
    """Every concrete OS value, in expansion order."""
    return list(Constants.MACOS_RELEASES) + [Constants.LINUX]


def known_arch_values() -> List[str]:
    """Every concrete architecture value, in expansion order."""
    return list(Constants.ARCHES)


def normalize_os(value: str) -> str:
    """Map an OS name or alias to its canonical value.

    Raises:
        InvalidTagError: If the value names no known operating system.
    """
    name = str(value).strip().lower()
    name = Constants.OS_ALIASES.get(name, name)
    if name not in known_os_values():
        raise InvalidTagError(f"Unknown operating system: {value!r}")
    return name


def normalize_arch(value: str) -> str:
    """Map an architecture name or alias to its canonical value.

    Raises:
        InvalidTagError: If the value names no known architecture.
    """
    name = str(value).strip().lower()
    name = Constants.ARCH_ALIASES.get(name, name)
    if name not in known_arch_values():
        raise InvalidTagError(f"Unknown CPU architecture: {value!r}")
    return name


def is_macos(os_name: str) -> bool:
    """Return True for a macOS release codename."""
    return os_name in Constants.MACOS_RELEASES


@dataclass(frozen=True)
class PlatformTag:
    """An (os, arch) pair. Construct through :meth:`from_pair` or :meth:`from_token`."""

    os: str
    arch: str

    @classmethod
    def from_pair(cls, os: str, arch: str) -> "PlatformTag":  # pylint: disable=redefined-builtin
        """Build a tag from an OS and an architecture, resolving aliases."""
        return cls(os=normalize_os(os), arch=normalize_arch(arch))

    @classmethod
    def universal(cls) -> "PlatformTag":
        """The ``all`` tag, matching prebuilts usable on every platform."""
        return cls(os=Constants.ALL, arch=Constants.ALL)

    @classmethod
    def from_token(cls, token: str) -> "PlatformTag":
        """Parse a tag token such as ``arm64_sonoma`` or ``x86_64_linux``.

        Raises:
            InvalidTagError: If the token does not follow the tag grammar.
        """
        if not isinstance(token, str) or not token.strip():
            raise InvalidTagError(f"Invalid platform tag: {token!r}")
        text = token.strip().lower()
        if text == Constants.ALL:
            return cls.universal()

        for arch in known_arch_values():
            prefix = f"{arch}_"
            if text.startswith(prefix):
                os_name = text[len(prefix):]
                if os_name not in known_os_values():
                    raise InvalidTagError(f"Invalid platform tag: {token!r} (unknown system {os_name!r})")
                return cls(os=os_name, arch=arch)

        if is_macos(text):
            return cls(os=text, arch="x86_64")
        raise InvalidTagError(f"Invalid platform tag: {token!r}")

    @property
    def is_universal(self) -> bool:
        return self.os == Constants.ALL and self.arch == Constants.ALL

    @property
    def token(self) -> str:
        """Render the tag in token form; inverse of :meth:`from_token`."""
        if self.is_universal:
            return Constants.ALL
        if is_macos(self.os) and self.arch == "x86_64":
            return self.os
        return f"{self.arch}_{self.os}"

    def __str__(self) -> str:
        return self.token


def current_platform(system: Optional[str] = None,
                     machine: Optional[str] = None,
                     mac_release: Optional[str] = None) -> PlatformTag:
    """Return the tag of the running host.

    Arguments override the values probed from :mod:`platform`, which keeps
    the function usable in tests. Unknown macOS releases map to the newest
    known release; non-macOS systems map to linux.
    """
    system = system if system is not None else _host.system()
    machine = machine if machine is not None else _host.machine()
    try:
        arch = normalize_arch(machine)
    except InvalidTagError:
        arch = Constants.ARCHES[0]

    if system == "Darwin":
        release = mac_release if mac_release is not None else _host.mac_ver()[0]
        major = release.split(".")[0] if release else ""
        os_name = Constants.MACOS_RELEASE_VERSIONS.get(major, Constants.MACOS_RELEASES[0])
        return PlatformTag(os=os_name, arch=arch)
    return PlatformTag(os=Constants.LINUX, arch=arch)
