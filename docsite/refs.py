"""Reference conversion helpers for the document conversion layer.

These turn xref, include and image targets found in a page into links, file
contents and URLs. Misses never raise: they produce an inert placeholder and a
warning so the rest of the site still builds.
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from typing import Optional, Protocol

from .catalog.paths import compute_relative_url_path
from .catalog.resolver import ResourceLookup, resolve_page, resolve_resource
from .errors import InvalidSyntaxError
from .logging import get_logger
from .models import Family, VirtualFile

_RESOURCE_ID_MARKERS = ("$", "@", ":")
_INCLUDE_FAMILIES = (Family.PARTIAL, Family.EXAMPLE, Family.PAGE)
UNRESOLVED_TARGET = "#"

logger = get_logger("refs")


class CatalogReader(ResourceLookup, Protocol):
    def get_by_path(self, *, component: str, version: str, path: str) -> Optional[VirtualFile]:
        ...


@dataclass(frozen=True)
class PageRef:
    """Link text and href for an xref to a page."""

    content: str
    target: str
    resolved: bool


@dataclass(frozen=True)
class IncludeResult:
    """Contents to splice in for an include directive."""

    path: str
    contents: str
    resolved: bool


def convert_page_ref(
    ref_spec: str,
    content: Optional[str],
    current_page: VirtualFile,
    catalog: ResourceLookup,
) -> PageRef:
    """Convert an xref target into link text and a URL relative to ``current_page``."""
    page_spec, _, fragment = ref_spec.partition("#")
    default_content = _default_link_text(page_spec, fragment)
    try:
        target_page = resolve_page(page_spec, catalog, current_page.src)
    except InvalidSyntaxError as exc:
        logger.warning("%s (in %s)", exc, current_page.path)
        return PageRef(content=ref_spec, target=UNRESOLVED_TARGET, resolved=False)

    if target_page is None or target_page.pub is None:
        logger.warning("Unresolved page reference: %s (in %s)", page_spec, current_page.path)
        return PageRef(content=default_content, target=UNRESOLVED_TARGET, resolved=False)

    if current_page.pub is not None:
        target = compute_relative_url_path(current_page.pub.url, target_page.pub.url)
    else:
        target = target_page.pub.url
    if fragment:
        target += "#" + fragment
    return PageRef(content=content or default_content, target=target, resolved=True)


def resolve_include(
    target: str,
    current_file: VirtualFile,
    catalog: CatalogReader,
    cursor_dir: Optional[str] = None,
) -> IncludeResult:
    """Resolve an include target to the contents of a catalogued file."""
    src = current_file.src
    included: Optional[VirtualFile] = None
    try:
        if is_resource_id(target):
            included = resolve_resource(target, catalog, src, _INCLUDE_FAMILIES, Family.PAGE)
        elif src is not None:
            base_dir = cursor_dir if cursor_dir is not None else posixpath.dirname(current_file.path)
            path = posixpath.normpath(posixpath.join(base_dir, target))
            included = catalog.get_by_path(component=src.component, version=src.version, path=path)
    except InvalidSyntaxError as exc:
        logger.warning("%s (in %s)", exc, current_file.path)

    if included is None:
        logger.warning("Unresolved include: %s (in %s)", target, current_file.path)
        return IncludeResult(path=current_file.path, contents=f"+include::{target}[]+", resolved=False)
    return IncludeResult(path=included.path, contents=included.text, resolved=True)


def resolve_image_ref(
    target: str,
    current_page: VirtualFile,
    catalog: ResourceLookup,
) -> Optional[str]:
    """Return the URL of an image resource relative to ``current_page``.

    Plain image paths and external URLs are left to the renderer (None).
    """
    if not is_resource_id(target) or "://" in target or target.startswith("data:"):
        return None
    try:
        image = resolve_resource(target, catalog, current_page.src, [Family.IMAGE], Family.IMAGE)
    except InvalidSyntaxError as exc:
        logger.warning("%s (in %s)", exc, current_page.path)
        return None
    if image is None or image.pub is None:
        logger.warning("Unresolved image reference: %s (in %s)", target, current_page.path)
        return None
    if current_page.pub is None:
        return image.pub.url
    return compute_relative_url_path(current_page.pub.url, image.pub.url)


def is_resource_id(target: str) -> bool:
    return any(marker in target for marker in _RESOURCE_ID_MARKERS)


def _default_link_text(page_spec: str, fragment: str) -> str:
    relative = re.split(r"[@:$]", page_spec)[-1]
    text = page_spec if posixpath.splitext(relative)[1] else page_spec + ".adoc"
    return f"{text}#{fragment}" if fragment else text


__all__ = [
    "IncludeResult",
    "PageRef",
    "compute_relative_url_path",
    "convert_page_ref",
    "is_resource_id",
    "resolve_image_ref",
    "resolve_include",
]
