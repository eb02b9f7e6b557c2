"""Classification of aggregated files into catalog coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from ..errors import InvalidComponentDescriptorError
from ..logging import get_logger
from ..mime import lookup_media_type
from ..models import (
    ASCIIDOC_MEDIA_TYPE,
    ComponentVersionBundle,
    Family,
    FileSrc,
    NavInfo,
    VirtualFile,
)
from .content_catalog import ContentCatalog

_ATTRIBUTES_FILE = "_attributes.adoc"
_ASSET_FAMILIES = {"images": Family.IMAGE, "attachments": Family.ATTACHMENT}

logger = get_logger("classifier")


@dataclass(frozen=True)
class Classification:
    """Coordinates derived from a file's location inside a component version."""

    family: Family
    module: Optional[str]
    relative: str
    module_root_path: str = "."
    nav_index: Optional[int] = None


def classify_path(
    path: str,
    nav: Optional[Sequence[str]] = None,
    media_type: Optional[str] = None,
) -> Optional[Classification]:
    """Classify a component-relative POSIX ``path``.

    Returns None for files outside the recognized content structure; they are
    dropped without error.
    """
    segments = path.split("/")
    if media_type is None:
        media_type = lookup_media_type(path)

    if nav and path in nav:
        index = list(nav).index(path)
        if segments[0] == "modules" and len(segments) > 2:
            return Classification(
                family=Family.NAVIGATION,
                module=segments[1],
                relative="/".join(segments[2:]),
                module_root_path=module_root_path(len(segments) - 3),
                nav_index=index,
            )
        return Classification(family=Family.NAVIGATION, module=None, relative=path, nav_index=index)

    if segments[0] != "modules" or len(segments) < 4 or not segments[1]:
        return None
    if segments[-1].startswith("."):
        return None

    module, container = segments[1], segments[2]
    if container == "pages":
        if segments[3] == "_partials":
            family, relative_segments = Family.PARTIAL, segments[4:]
        elif segments[-1] == _ATTRIBUTES_FILE or media_type != ASCIIDOC_MEDIA_TYPE:
            return None
        else:
            family, relative_segments = Family.PAGE, segments[3:]
    elif container == "assets":
        asset_family = _ASSET_FAMILIES.get(segments[3])
        if asset_family is None:
            return None
        family, relative_segments = asset_family, segments[4:]
    elif container == "examples":
        family, relative_segments = Family.EXAMPLE, segments[3:]
    else:
        return None

    relative = "/".join(relative_segments)
    if not relative:
        return None
    return Classification(
        family=family,
        module=module,
        relative=relative,
        module_root_path=module_root_path(len(segments) - 3),
    )


def module_root_path(depth: int) -> str:
    """``..`` repeated ``depth`` times, or ``.`` at the module root."""
    return "/".join([".."] * depth) if depth > 0 else "."


def classify_file(
    file: VirtualFile,
    component: str,
    version: str,
    nav: Optional[Sequence[str]] = None,
) -> bool:
    """Attach ``src`` (and ``nav`` for navigation files) to ``file``; False when dropped."""
    media_type = file.media_type or lookup_media_type(file.path)
    classification = classify_path(file.path, nav, media_type)
    if classification is None:
        return False
    file.src = FileSrc(
        component=component,
        version=version,
        module=classification.module,
        family=classification.family,
        relative=classification.relative,
        media_type=media_type,
        module_root_path=classification.module_root_path,
    )
    file.media_type = media_type
    if classification.nav_index is not None:
        file.nav = NavInfo(index=classification.nav_index)
    return True


def classify_content(
    playbook: Any,
    aggregate: Iterable[ComponentVersionBundle],
    catalog: Optional[ContentCatalog] = None,
) -> ContentCatalog:
    """Build a :class:`ContentCatalog` from the aggregated component versions.

    Files are added before their component version is registered so the start page
    can be resolved against them. The site start page is registered last.
    """
    if catalog is None:
        catalog = ContentCatalog.from_playbook(playbook) if playbook is not None else ContentCatalog()
    for bundle in aggregate:
        if not bundle.name or not bundle.version:
            raise InvalidComponentDescriptorError(
                f"Component descriptor requires a name and a version: {bundle.origin or bundle.name or '<unnamed>'}"
            )
        kept: List[VirtualFile] = []
        for file in bundle.files:
            if classify_file(file, bundle.name, bundle.version, bundle.nav):
                catalog.add_file(file)
                kept.append(file)
            else:
                logger.debug("Skipping unclassified file %s in %s@%s", file.path, bundle.version, bundle.name)
        catalog.add_component_version(
            bundle.name,
            bundle.version,
            bundle.title,
            bundle.start_page,
            display_version=bundle.display_version,
        )
        logger.debug("Classified %d of %d files for %s@%s", len(kept), len(bundle.files), bundle.version, bundle.name)

    start_page = getattr(getattr(playbook, "site", None), "start_page", None)
    if start_page:
        catalog.register_site_start_page(start_page)
    return catalog


__all__ = ["Classification", "classify_content", "classify_file", "classify_path", "module_root_path"]
