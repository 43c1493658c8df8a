"""Deterministic cache paths for resolved artifacts.

Layout under the cache root:

- bottles:   ``downloads/<sha256(url)>--<name>--<version>.<tag>.bottle[.<rebuild>].tar.gz``
- archives:  ``downloads/<sha256(url)>--<basename of url>``
- HEAD:      ``<name>--<scm>``
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Union
from urllib.parse import unquote, urlsplit

from constants import Constants
from resolution.models import ArtifactRef, OutcomeKind


def url_digest(url: str) -> str:
    """Hex SHA-256 of a download URL, used to keep cache names unique."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


def url_basename(url: str) -> str:
    """Last path segment of a URL, percent-decoded and without a query."""
    path = urlsplit(url).path
    return unquote(path.rstrip("/").rsplit("/", 1)[-1])


def bottle_filename(name: str, version: str, tag_token: str, rebuild: int = 0) -> str:
    """File name a bottle is stored under, e.g. ``foo--1.0.arm64_sonoma.bottle.tar.gz``."""
    rebuild_part = f".{rebuild}" if rebuild else ""
    return f"{name}--{version}.{tag_token}.bottle{rebuild_part}.{Constants.BOTTLE_EXTENSION}"


class CacheLocator:
    """Map ArtifactRefs to paths below a cache root. Holds no other state."""

    def __init__(self, cache_root: Union[str, Path]):
        self.cache_root = Path(cache_root)

    @property
    def downloads(self) -> Path:
        return self.cache_root / Constants.DOWNLOADS_DIR

    def locate(self, ref: ArtifactRef) -> Path:
        """Return the cache path for ``ref``.

        Raises:
            ValueError: If ``ref`` is Unavailable; callers check first.
        """
        if ref.kind is OutcomeKind.PREBUILT:
            filename = bottle_filename(ref.package, ref.version, ref.tag.token, ref.rebuild)
            return self.downloads / f"{url_digest(ref.location)}--{filename}"
        if ref.kind is OutcomeKind.SOURCE:
            basename = url_basename(ref.location) or f"{ref.package}--{ref.version}"
            return self.downloads / f"{url_digest(ref.location)}--{basename}"
        if ref.kind is OutcomeKind.HEAD:
            return self.cache_root / f"{ref.package}--{ref.scm}"
        raise ValueError(f"Unavailable artifact has no cache location: {ref.reason}")
