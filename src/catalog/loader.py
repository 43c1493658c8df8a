"""Build package descriptors from catalog documents for a platform context.

A document may carry ``variations`` keyed by platform tag token. Loading for
a context deep-merges the matching variation over the document first, which
is how a package is "reloaded" as if the host were that platform.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Optional

from catalog.models import (
    CaskDescriptor,
    DevelopmentBranch,
    FormulaDescriptor,
    PackageDescriptor,
    PrebuiltEntry,
    SourceArchive,
)
from catalog.schema import is_cask_document, validate_document
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from errors import CatalogError, InvalidTagError
from resolution.platform import PlatformTag

logger = logging.getLogger(__name__)

_PLATFORM_REQUIREMENTS = ("macos", "linux")


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``base`` with ``override`` merged in, recursing into mappings."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def apply_variation(document: Dict[str, Any], context: Optional[PlatformTag]) -> Dict[str, Any]:
    """Merge the variation for ``context`` into ``document``, if one exists."""
    variations = document.get("variations") or {}
    if context is None or context.token not in variations:
        return document
    return deep_merge(document, variations[context.token])


def document_name(document: Dict[str, Any]) -> str:
    """Name of the package a document describes."""
    return document.get("token") if is_cask_document(document) else document.get("name")


def load_descriptor(document: Dict[str, Any], context: Optional[PlatformTag] = None) -> PackageDescriptor:
    """Validate ``document`` and build its descriptor as seen from ``context``.

    Raises:
        CatalogError: If the document is invalid.
    """
    validate_document(document)
    resolved = apply_variation(document, context)
    if is_cask_document(resolved):
        return _load_cask(resolved)
    return _load_formula(resolved)


def _load_cask(document: Dict[str, Any]) -> CaskDescriptor:
    return CaskDescriptor(
        name=document["token"],
        version=str(document["version"]),
        source=SourceArchive(url=document["url"], sha256=document.get("sha256")),
    )


def _load_formula(document: Dict[str, Any]) -> FormulaDescriptor:
    name = document["name"]
    urls = document.get("urls") or {}
    stable_version = (document.get("versions") or {}).get("stable")

    source = None
    stable = urls.get("stable")
    if stable:
        source = SourceArchive(url=stable["url"], sha256=stable.get("checksum"))

    head = None
    head_spec = urls.get("head")
    if head_spec:
        head = DevelopmentBranch(
            url=head_spec["url"],
            scm=_scm_for(name, head_spec.get("using")),
            branch=head_spec.get("branch"),
        )

    supported = {
        req["name"] for req in document.get("requirements") or []
        if req.get("name") in _PLATFORM_REQUIREMENTS
    }

    return FormulaDescriptor(
        name=name,
        version=str(stable_version) if stable_version else "HEAD",
        revision=int(document.get("revision") or 0),
        prebuilts=_load_bottles(name, (document.get("bottle") or {}).get("stable")),
        source=source,
        head=head,
        supported_os=frozenset(supported) or None,
        pour_prebuilt=bool(document.get("pour_bottle", True)),
    )


def _scm_for(name: str, using: Optional[str]) -> str:
    if not using:
        return Constants.DEFAULT_SCM
    scm = str(using).lower()
    if scm not in Constants.SUPPORTED_SCMS:
        raise CatalogError(f"Formula {name!r} uses unsupported download strategy {using!r}")
    return scm


def _load_bottles(name: str, bottle: Optional[Dict[str, Any]]) -> Dict[PlatformTag, PrebuiltEntry]:
    """Parse ``bottle.stable.files`` into entries keyed by tag, keeping file order."""
    if not bottle:
        return {}
    rebuild = int(bottle.get("rebuild") or 0)
    root_url = (bottle.get("root_url") or "").rstrip("/")
    entries: Dict[PlatformTag, PrebuiltEntry] = {}
    for token, file_info in (bottle.get("files") or {}).items():
        try:
            tag = PlatformTag.from_token(token)
        except InvalidTagError:
            # Bottles for releases this tool does not model are not addressable.
            if is_debug_enabled(logger):
                logger.debug(
                    "Ignoring bottle for unknown tag",
                    extra=extra_context(event="skip", component="catalog", action="load_bottles",
                                        target=name, tag=token)
                )
            continue
        url = file_info.get("url")
        if not url:
            if not root_url:
                raise CatalogError(f"Bottle {token!r} of {name!r} has neither url nor root_url")
            url = f"{root_url}/{name}/blobs/sha256:{file_info['sha256']}"
        entries[tag] = PrebuiltEntry(
            tag=tag,
            url=url,
            sha256=file_info.get("sha256"),
            rebuild=int(file_info.get("rebuild", rebuild)),
        )
    return entries
