"""Parsing of contextual resource ID specs.

A resource ID spec has the form ``[version@][[component:]module:][family$]relative[#fragment]``.
Coordinates missing from an ID spec are taken from the context (the ``src`` of the
referencing file) except for the family, which only ever comes from the ID spec or
from the caller-supplied default.
"""

from __future__ import annotations

import posixpath
import re
from typing import Iterable, Optional, Protocol, Union

from ..models import ASCIIDOC_EXTENSION, Family, ResourceId, ROOT_MODULE

_RESOURCE_ID_PATTERN = re.compile(
    r"^(?:(?P<version>[^@:$#]+)@)?"
    r"(?:(?:(?P<component>[^@:$#]+):)?(?P<module>[^@:$#]+)?:)?"
    r"(?:(?P<family>[^@:$#]+)\$)?"
    r"(?P<relative>[^@:$#]+)"
    r"(?:#(?P<fragment>[^#]*))?$"
)


class Coordinates(Protocol):
    component: Optional[str]
    version: Optional[str]
    module: Optional[str]


FamilyLike = Union[Family, str]


def parse_resource_id(
    spec: str,
    context: Optional[Coordinates] = None,
    allowed_families: Optional[Iterable[FamilyLike]] = None,
    default_family: Optional[FamilyLike] = Family.PAGE,
) -> Optional[ResourceId]:
    """Parse ``spec`` into a :class:`ResourceId`, filling gaps from ``context``.

    Returns None when ``spec`` does not match the grammar or names an unknown
    family. When the family named in ``spec`` (or the default family) is known but
    not allowed, the returned ID has no family, which callers treat as a miss.
    """
    if not spec:
        return None
    match = _RESOURCE_ID_PATTERN.match(spec)
    if match is None:
        return None
    if match.group("family") and Family.coerce(match.group("family")) is None:
        return None

    family = _select_family(match.group("family"), allowed_families, default_family)

    relative = match.group("relative")
    if family is Family.PAGE and not posixpath.splitext(relative)[1]:
        relative += ASCIIDOC_EXTENSION

    version = match.group("version")
    component = match.group("component")
    module = match.group("module")
    if component:
        if not module:
            module = ROOT_MODULE
    elif context is not None:
        component = getattr(context, "component", None)
        if not version:
            version = getattr(context, "version", None)
        if not module:
            module = getattr(context, "module", None)

    return ResourceId(
        component=component or None,
        version=version or None,
        module=module or None,
        family=family,
        relative=relative,
        fragment=match.group("fragment") or None,
    )


def format_resource_id(resource_id: ResourceId, *, include_family: bool = True) -> str:
    """Render a fully qualified spec for ``resource_id`` (used in messages)."""
    spec = f"{resource_id.version}@{resource_id.component}:{resource_id.module or ''}:"
    if include_family and resource_id.family is not None and resource_id.family is not Family.PAGE:
        spec += f"{resource_id.family.value}$"
    spec += resource_id.relative or ""
    if resource_id.fragment:
        spec += f"#{resource_id.fragment}"
    return spec


def _select_family(
    name: Optional[str],
    allowed_families: Optional[Iterable[FamilyLike]],
    default_family: Optional[FamilyLike],
) -> Optional[Family]:
    family = Family.coerce(name) if name else Family.coerce(default_family)
    if family is None:
        return None
    if allowed_families is not None:
        allowed = {Family.coerce(candidate) for candidate in allowed_families}
        if family not in allowed:
            return None
    return family


__all__ = ["Coordinates", "format_resource_id", "parse_resource_id"]
