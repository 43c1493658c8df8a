"""Exception hierarchy for cache resolution and catalog loading."""

from typing import Optional, Sequence


class BrewCacheError(Exception):
    """Base class for every error raised by brewcache."""


class ConflictError(BrewCacheError):
    """Raised when mutually exclusive selector options are combined."""

    def __init__(self, options: Sequence[str]):
        self.options = tuple(options)
        flags = " and ".join(f"--{name}" for name in self.options)
        super().__init__(f"Options {flags} are mutually exclusive.")


class InvalidTagError(BrewCacheError, ValueError):
    """Raised for a malformed platform tag or an unknown OS/architecture."""


class UnknownPackageError(BrewCacheError, LookupError):
    """Raised when a package name is not present in the catalog."""

    def __init__(self, name: str, kind: Optional[str] = None):
        self.name = name
        self.kind = kind
        label = kind or "formula or cask"
        super().__init__(f"No available {label} with the name \"{name}\".")


class CatalogError(BrewCacheError):
    """Raised when a catalog document cannot be read or fails validation."""


class CatalogConnectionError(CatalogError):
    """Raised when a remote catalog cannot be reached."""
