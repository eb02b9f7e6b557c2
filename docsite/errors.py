"""Errors raised while building and querying the content catalog."""

from __future__ import annotations


class CatalogError(RuntimeError):
    """Base class for conditions that make the generated site definitively wrong."""


class DuplicateResourceError(CatalogError):
    """Raised when two files map to the same coordinate tuple."""

    def __init__(self, family: str, qualified_id: str) -> None:
        super().__init__(f"Duplicate {family}: {qualified_id}")
        self.family = family
        self.qualified_id = qualified_id


class DuplicateComponentVersionError(CatalogError):
    """Raised when a component version is registered twice."""

    def __init__(self, component: str, version: str) -> None:
        super().__init__(f"Duplicate version detected for component {component}: {version}")
        self.component = component
        self.version = version


class InvalidComponentDescriptorError(CatalogError):
    """Raised when a component descriptor lacks its name or version."""


class StartPageNotFoundError(CatalogError):
    """Raised when an explicitly specified start page cannot be resolved."""

    def __init__(self, spec: str, owner: str | None = None) -> None:
        if owner:
            message = f"Start page specified for {owner} not found: {spec}"
        else:
            message = f"Start page specified for site not found: {spec}"
        super().__init__(message)
        self.spec = spec
        self.owner = owner


class PageAliasError(CatalogError):
    """Raised when a page alias cannot be registered."""


class InvalidSyntaxError(CatalogError, ValueError):
    """Raised when a page or resource ID spec does not match the ID grammar."""

    def __init__(self, spec: str, kind: str = "resource") -> None:
        super().__init__(f"Invalid {kind} ID syntax: {spec}")
        self.spec = spec
        self.kind = kind


class CatalogFrozenError(CatalogError):
    """Raised when a frozen catalog is asked to change."""


__all__ = [
    "CatalogError",
    "CatalogFrozenError",
    "DuplicateComponentVersionError",
    "DuplicateResourceError",
    "InvalidComponentDescriptorError",
    "InvalidSyntaxError",
    "PageAliasError",
    "StartPageNotFoundError",
]
