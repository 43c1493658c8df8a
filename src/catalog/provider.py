"""Descriptor providers: where package documents come from.

``DescriptorProvider.load(name, context)`` returns a fresh descriptor for a
platform context on every call; raw documents are read once and memoised.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from catalog.loader import document_name, load_descriptor
from catalog.models import PackageDescriptor
from catalog.schema import is_cask_document
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from constants import Constants, PackageKinds
from errors import CatalogConnectionError, CatalogError, UnknownPackageError
from resolution.platform import PlatformTag

logger = logging.getLogger(__name__)


class DescriptorProvider(ABC):
    """Base class for catalogs that supply package descriptors by name."""

    @abstractmethod
    def document(self, name: str, kind: PackageKinds) -> Optional[Dict[str, Any]]:
        """Return the raw document for ``name`` of ``kind``, or None if absent."""

    def load(self, name: str, context: Optional[PlatformTag] = None,
             kind: Optional[PackageKinds] = None) -> PackageDescriptor:
        """Load ``name`` as seen from ``context``.

        Formulae take precedence over casks of the same name unless ``kind``
        restricts the lookup.

        Raises:
            UnknownPackageError: If no document matches.
            CatalogError: If the matching document is invalid.
        """
        kinds = [kind] if kind is not None else [PackageKinds.FORMULA, PackageKinds.CASK]
        for candidate in kinds:
            document = self.document(name, candidate)
            if document is not None:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Loading descriptor",
                        extra=extra_context(
                            event="load",
                            component="catalog",
                            action="load",
                            target=name,
                            kind=candidate.value,
                            platform=context.token if context is not None else None,
                        )
                    )
                return load_descriptor(document, context)
        raise UnknownPackageError(name, kind.value if kind is not None else None)

    def load_all(self, names: Iterable[str], context: Optional[PlatformTag] = None,
                 kind: Optional[PackageKinds] = None) -> List[PackageDescriptor]:
        """Load every name, failing on the first unknown one."""
        return [self.load(name, context, kind) for name in names]


class FileCatalog(DescriptorProvider):
    """Catalog backed by YAML/JSON files.

    ``path`` is either a directory whose ``*.yml``, ``*.yaml`` and ``*.json``
    files each hold one document or a list of documents, or one such file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._index: Optional[Dict[PackageKinds, Dict[str, Dict[str, Any]]]] = None

    def _files(self) -> List[Path]:
        if self.path.is_dir():
            return sorted(
                p for p in self.path.rglob("*")
                if p.is_file() and p.suffix.lower() in Constants.CATALOG_EXTENSIONS
            )
        if self.path.is_file():
            return [self.path]
        raise CatalogError(f"Catalog not found: {self.path}")

    @staticmethod
    def _read(path: Path) -> List[Dict[str, Any]]:
        try:
            with open(path, "r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle)
        except OSError as exc:
            raise CatalogError(f"Cannot read catalog file {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise CatalogError(f"Cannot parse catalog file {path}: {exc}") from exc
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        if isinstance(data, list):
            return data
        raise CatalogError(f"Catalog file {path} must hold a mapping or a list of mappings")

    def _build_index(self) -> Dict[PackageKinds, Dict[str, Dict[str, Any]]]:
        index: Dict[PackageKinds, Dict[str, Dict[str, Any]]] = {
            PackageKinds.FORMULA: {},
            PackageKinds.CASK: {},
        }
        for path in self._files():
            for document in self._read(path):
                if not isinstance(document, dict):
                    raise CatalogError(f"Catalog file {path} contains a non-mapping entry")
                kind = PackageKinds.CASK if is_cask_document(document) else PackageKinds.FORMULA
                name = document_name(document)
                if not name:
                    raise CatalogError(f"Catalog file {path} contains a document without a name")
                if name in index[kind]:
                    logger.warning("Duplicate %s %r in %s; keeping the first definition",
                                   kind.value, name, path)
                    continue
                index[kind][name] = document
        logger.debug("Indexed %d formulae and %d casks from %s",
                     len(index[PackageKinds.FORMULA]), len(index[PackageKinds.CASK]), self.path)
        return index

    def document(self, name: str, kind: PackageKinds) -> Optional[Dict[str, Any]]:
        if self._index is None:
            self._index = self._build_index()
        return self._index[kind].get(name)


class ApiCatalog(DescriptorProvider):
    """Catalog backed by the JSON API (``<base>/formula/<name>.json``, ``<base>/cask/<name>.json``)."""

    def __init__(self, base_url: str = Constants.DEFAULT_API_URL):
        self.base_url = base_url.rstrip("/")
        self._documents: Dict[tuple, Optional[Dict[str, Any]]] = {}

    def url_for(self, name: str, kind: PackageKinds) -> str:
        return f"{self.base_url}/{kind.value}/{name}.json"

    def document(self, name: str, kind: PackageKinds) -> Optional[Dict[str, Any]]:
        key = (kind, name)
        if key in self._documents:
            return self._documents[key]

        url = self.url_for(name, kind)
        status_code, _, data = get_json(url)
        if status_code == 0:
            raise CatalogConnectionError(f"Cannot reach catalog at {safe_url(url)}")
        if status_code == 404:
            document = None
        elif status_code != 200:
            raise CatalogError(f"Catalog request for {name!r} failed with HTTP {status_code}")
        elif not isinstance(data, dict):
            raise CatalogError(f"Catalog response for {name!r} is not a JSON object")
        else:
            document = data
        self._documents[key] = document
        return document


def open_catalog(location: Optional[str]) -> DescriptorProvider:
    """Return the provider for a catalog location: an http(s) URL, a file or a directory."""
    if not location:
        return ApiCatalog()
    if location.startswith(("http://", "https://")):
        return ApiCatalog(location)
    return FileCatalog(os.path.expanduser(location))
