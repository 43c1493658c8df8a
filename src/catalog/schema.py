"""JSON Schema validation for catalog documents.

Documents follow the shape of the formula and cask JSON API: formulae are
keyed by ``name``, casks by ``token``. Validation is structural only; the
loader interprets values.
"""

from __future__ import annotations

from typing import Any, Dict

from jsonschema import Draft7Validator

from errors import CatalogError

_URL_SPEC = {
    "type": ["object", "null"],
    "properties": {
        "url": {"type": "string", "minLength": 1},
        "checksum": {"type": ["string", "null"]},
        "branch": {"type": ["string", "null"]},
        "using": {"type": ["string", "null"]},
    },
    "required": ["url"],
}

_BOTTLE_FILE = {
    "type": "object",
    "properties": {
        "url": {"type": "string"},
        "sha256": {"type": "string"},
        "rebuild": {"type": "integer", "minimum": 0},
    },
    "anyOf": [{"required": ["url"]}, {"required": ["sha256"]}],
}

FORMULA_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "revision": {"type": "integer", "minimum": 0},
        "versions": {
            "type": "object",
            "properties": {"stable": {"type": ["string", "null"]}},
        },
        "urls": {
            "type": "object",
            "properties": {"stable": _URL_SPEC, "head": _URL_SPEC},
        },
        "bottle": {
            "type": "object",
            "properties": {
                "stable": {
                    "type": ["object", "null"],
                    "properties": {
                        "rebuild": {"type": "integer", "minimum": 0},
                        "root_url": {"type": "string"},
                        "files": {"type": "object", "additionalProperties": _BOTTLE_FILE},
                    },
                },
            },
        },
        "pour_bottle": {"type": "boolean"},
        "requirements": {
            "type": "array",
            "items": {"type": "object", "properties": {"name": {"type": "string"}}, "required": ["name"]},
        },
        "variations": {"type": "object", "additionalProperties": {"type": "object"}},
    },
    "required": ["name", "versions"],
}

CASK_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "token": {"type": "string", "minLength": 1},
        "version": {"type": "string", "minLength": 1},
        "url": {"type": "string", "minLength": 1},
        "sha256": {"type": ["string", "null"]},
        "variations": {"type": "object", "additionalProperties": {"type": "object"}},
    },
    "required": ["token", "version", "url"],
}


def is_cask_document(document: Dict[str, Any]) -> bool:
    """Casks are identified by their ``token`` key."""
    return isinstance(document, dict) and "token" in document


def validate_document(document: Dict[str, Any]) -> None:
    """Validate a catalog document strictly and raise on the first error.

    Raises:
        CatalogError: If the document does not match its schema.
    """
    if not isinstance(document, dict):
        raise CatalogError(f"Catalog document must be a mapping, got {type(document).__name__}")
    schema = CASK_SCHEMA if is_cask_document(document) else FORMULA_SCHEMA
    validator = Draft7Validator(schema)
    errs = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.path])
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        label = document.get("token") or document.get("name") or "<unnamed>"
        raise CatalogError(f"Invalid catalog document {label!r} at '{path}': {first.message}")
