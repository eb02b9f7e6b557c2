"""Resolution of contextual resource ID specs to catalogued files."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Protocol

from ..errors import InvalidSyntaxError
from ..models import Component, Family, ResourceId, ROOT_MODULE, VirtualFile
from .resource_id import Coordinates, FamilyLike, parse_resource_id


class ResourceLookup(Protocol):
    """The slice of the catalog the resolver depends on."""

    def get_component(self, name: str) -> Optional[Component]:
        ...

    def get_by_id(self, resource_id: ResourceId) -> Optional[VirtualFile]:
        ...


def resolve_resource(
    spec: str,
    catalog: ResourceLookup,
    context: Optional[Coordinates] = None,
    allowed_families: Optional[Iterable[FamilyLike]] = None,
    default_family: Optional[FamilyLike] = Family.PAGE,
) -> Optional[VirtualFile]:
    """Resolve ``spec`` against ``catalog`` using ``context`` to fill in gaps.

    Raises :class:`InvalidSyntaxError` when ``spec`` cannot be parsed. Returns None
    when it is well formed but names no catalogued file, including when the
    family is not allowed or the component is unknown.
    """
    allowed = list(allowed_families) if allowed_families is not None else None
    resource_id = parse_resource_id(spec, context, allowed, default_family)
    if resource_id is None:
        page_only = allowed is not None and {Family.coerce(f) for f in allowed} == {Family.PAGE}
        raise InvalidSyntaxError(spec, "page" if page_only else "resource")
    if resource_id.family is None:
        return None

    resource_id = complete_resource_id(resource_id, catalog)
    if resource_id is None:
        return None
    return catalog.get_by_id(resource_id)


def resolve_page(
    spec: str,
    catalog: ResourceLookup,
    context: Optional[Coordinates] = None,
) -> Optional[VirtualFile]:
    """Resolve a page ID spec; the family is fixed to ``page``."""
    return resolve_resource(spec, catalog, context, [Family.PAGE], Family.PAGE)


def complete_resource_id(resource_id: ResourceId, catalog: ResourceLookup) -> Optional[ResourceId]:
    """Fill in the latest version and ROOT module; None when the component is unknown."""
    if resource_id.component is None:
        return None
    if resource_id.version is None:
        component = catalog.get_component(resource_id.component)
        if component is None:
            return None
        resource_id = replace(resource_id, version=component.latest.version)
    if resource_id.module is None:
        resource_id = replace(resource_id, module=ROOT_MODULE)
    return resource_id


__all__ = ["ResourceLookup", "complete_resource_id", "resolve_page", "resolve_resource"]
