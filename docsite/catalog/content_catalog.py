"""In-memory registry of classified files, components and page aliases."""

from __future__ import annotations

from dataclasses import fields, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..errors import (
    CatalogFrozenError,
    DuplicateComponentVersionError,
    DuplicateResourceError,
    InvalidComponentDescriptorError,
    InvalidSyntaxError,
    PageAliasError,
    StartPageNotFoundError,
)
from ..models import (
    ASCIIDOC_MEDIA_TYPE,
    Component,
    ComponentVersion,
    Family,
    FileSrc,
    ResourceId,
    ROOT_MODULE,
    VirtualFile,
)
from .paths import HtmlExtensionStyle, resolve_out, resolve_pub
from .resolver import resolve_page, resolve_resource
from .resource_id import Coordinates, FamilyLike, format_resource_id, parse_resource_id
from .versions import version_compare_desc

START_PAGE_ID = ResourceId(component="", version="", module="", family=Family.ALIAS, relative="index.adoc")

_PUBLISHABLE_FAMILIES = {Family.PAGE, Family.IMAGE, Family.ATTACHMENT}
_SRC_FIELDS = {item.name for item in fields(FileSrc)}


class ContentCatalog:
    """Registry of every classified file and component version in a site.

    The catalog is built during classification and frozen before rendering; after
    :meth:`freeze` every mutator raises :class:`CatalogFrozenError`.
    """

    def __init__(
        self,
        *,
        html_extension_style: HtmlExtensionStyle | str = HtmlExtensionStyle.DEFAULT,
        site_url: Optional[str] = None,
    ) -> None:
        self.html_extension_style = HtmlExtensionStyle(html_extension_style)
        self.site_url = site_url.rstrip("/") if site_url else None
        self._components: Dict[str, Component] = {}
        self._files: Dict[Tuple[Any, ...], VirtualFile] = {}
        self._frozen = False

    @classmethod
    def from_playbook(cls, playbook: Any) -> "ContentCatalog":
        return cls(
            html_extension_style=playbook.urls.html_extension_style,
            site_url=playbook.site.url,
        )

    # ------------------------------------------------------------------
    # Mutators

    def add_file(self, file: VirtualFile) -> VirtualFile:
        """Register ``file`` and compute its ``out``/``pub`` unless already set."""
        self._ensure_mutable()
        src = file.src
        if src is None:
            raise ValueError(f"Cannot catalog file without src: {file.path}")
        key = src.id.key
        if key in self._files:
            raise DuplicateResourceError(src.family.value, format_resource_id(src.id, include_family=False))

        acting_family = src.family
        if src.family is Family.ALIAS:
            target = self.follow(file)
            if target is None or target.src is None:
                raise PageAliasError(f"Page alias target is not in the catalog: {src.relative}")
            acting_family = target.src.family
            if target.pub is None:
                # aliases of unpublished files stay unpublished
                self._files[key] = file
                return file

        publishable = file.out is not None
        if not publishable and acting_family in _PUBLISHABLE_FAMILIES and not _is_hidden(src.relative):
            file.out = resolve_out(src, self.html_extension_style, acting_family)
            publishable = True
        if file.pub is None and (publishable or acting_family is Family.NAVIGATION):
            file.pub = resolve_pub(src, file.out, self.html_extension_style, self.site_url, acting_family)

        self._files[key] = file
        return file

    def add_component_version(
        self,
        name: str,
        version: str,
        title: Optional[str] = None,
        start_page: Optional[str] = None,
        *,
        display_version: Optional[str] = None,
    ) -> ComponentVersion:
        """Register a version of a component, keeping versions newest first."""
        self._ensure_mutable()
        if not name:
            raise InvalidComponentDescriptorError("Component name is required")
        if not version:
            raise InvalidComponentDescriptorError(f"Version is required for component {name}")

        component = self._components.get(name)
        if component is not None and component.get_version(version) is not None:
            raise DuplicateComponentVersionError(name, version)

        entry = ComponentVersion(
            version=version,
            title=title or name,
            url=self._resolve_start_page_url(name, version, start_page),
            display_version=display_version or version,
        )
        if component is None:
            self._components[name] = Component(name=name, versions=[entry])
            return entry

        versions = component.versions
        for index, candidate in enumerate(versions):
            if version_compare_desc(candidate.version, version) > 0:
                versions.insert(index, entry)
                break
        else:
            versions.append(entry)
        return entry

    def register_page_alias(self, spec: str, target: VirtualFile) -> VirtualFile:
        """Register an alias that redirects ``spec`` to the ``target`` page."""
        self._ensure_mutable()
        if target.src is None or self.get_by_id(target.src.id) is not target:
            raise PageAliasError(f"Page alias target is not in the catalog: {target.path}")
        page_id = parse_resource_id(spec, target.src, [Family.PAGE], Family.PAGE)
        if page_id is None:
            raise InvalidSyntaxError(spec, "page")
        if page_id.family is None:
            raise PageAliasError(f"Page alias must name a page, not another resource family: {spec}")

        if page_id.version is None:
            component = self._components.get(page_id.component or "")
            if component is None:
                raise PageAliasError(
                    f"Page alias cannot reference an unknown component without a version: {spec}"
                )
            page_id = replace(page_id, version=component.latest.version)
        if page_id.module is None:
            page_id = replace(page_id, module=ROOT_MODULE)

        existing = self.get_by_id(page_id)
        if existing is not None:
            qualified = format_resource_id(page_id)
            if existing is target:
                raise PageAliasError(f"Page alias cannot reference itself: {qualified}")
            raise PageAliasError(f"Page alias cannot reference an existing page: {qualified}")

        alias_id = page_id.with_family(Family.ALIAS)
        if alias_id.key in self._files:
            raise PageAliasError(f"Page alias already registered: {format_resource_id(page_id)}")

        alias = VirtualFile(
            path=target.path,
            src=FileSrc.from_id(alias_id, family=Family.ALIAS),
            rel=target.src.id,
        )
        return self.add_file(alias)

    def register_site_start_page(self, spec: str) -> VirtualFile:
        """Publish an alias at the site root that points to the page named by ``spec``."""
        self._ensure_mutable()
        page = self.resolve_page(spec)
        if page is None or page.src is None:
            raise StartPageNotFoundError(spec)
        alias = VirtualFile(
            path=page.path,
            src=FileSrc.from_id(START_PAGE_ID, family=Family.ALIAS, media_type=ASCIIDOC_MEDIA_TYPE),
            rel=page.src.id,
        )
        return self.add_file(alias)

    def freeze(self) -> "ContentCatalog":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Queries

    def find_by(self, **criteria: Any) -> List[VirtualFile]:
        """Return files whose ``src`` matches every given attribute, in insertion order."""
        unknown = set(criteria) - _SRC_FIELDS
        if unknown:
            raise ValueError(f"Unknown file criteria: {', '.join(sorted(unknown))}")
        matches: List[VirtualFile] = []
        for candidate in self._files.values():
            src = candidate.src
            if all(getattr(src, name) == value for name, value in criteria.items()):
                matches.append(candidate)
        return matches

    def get_by_id(self, resource_id: ResourceId) -> Optional[VirtualFile]:
        return self._files.get(resource_id.key)

    def get_by_path(self, *, component: str, version: str, path: str) -> Optional[VirtualFile]:
        for candidate in self._files.values():
            src = candidate.src
            if candidate.path == path and src.component == component and src.version == version:
                return candidate
        return None

    def get_all(self) -> List[VirtualFile]:
        return list(self._files.values())

    get_files = get_all

    def get_pages(self) -> List[VirtualFile]:
        return self.find_by(family=Family.PAGE)

    def get_component(self, name: str) -> Optional[Component]:
        return self._components.get(name)

    def get_components(self) -> List[Component]:
        return list(self._components.values())

    def get_components_sorted_by(self, attribute: str) -> List[Component]:
        return sorted(self._components.values(), key=lambda component: getattr(component, attribute))

    def get_component_version(self, name: str, version: str) -> Optional[ComponentVersion]:
        component = self._components.get(name)
        if component is None:
            return None
        return component.get_version(version)

    def follow(self, file: VirtualFile) -> Optional[VirtualFile]:
        """Return the target of an alias (or None when ``file`` is not an alias)."""
        if file.rel is None:
            return None
        return self._files.get(file.rel.key)

    def get_site_start_page(self) -> Optional[VirtualFile]:
        page = self.get_by_id(START_PAGE_ID.with_family(Family.PAGE))
        if page is not None:
            return page
        alias = self.get_by_id(START_PAGE_ID)
        if alias is not None:
            return self.follow(alias)
        return None

    def resolve_page(self, spec: str, context: Optional[Coordinates] = None) -> Optional[VirtualFile]:
        return resolve_page(spec, self, context)

    def resolve_resource(
        self,
        spec: str,
        context: Optional[Coordinates] = None,
        allowed_families: Optional[Iterable[FamilyLike]] = None,
        default_family: Optional[FamilyLike] = Family.PAGE,
    ) -> Optional[VirtualFile]:
        return resolve_resource(spec, self, context, allowed_families, default_family)

    def export_to_model(self) -> "CatalogView":
        """Return a read-only view for rendering-stage consumers."""
        return CatalogView(self)

    def __len__(self) -> int:
        return len(self._files)

    # ------------------------------------------------------------------
    # Internal helpers

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise CatalogFrozenError("Content catalog is frozen; no further changes are allowed")

    def _resolve_start_page_url(self, name: str, version: str, start_page: Optional[str]) -> str:
        context = ResourceId(component=name, version=version, module=ROOT_MODULE)
        page = self.resolve_page(start_page or "index.adoc", context)
        if page is None and start_page:
            raise StartPageNotFoundError(start_page, f"{version}@{name}")
        if page is not None and page.pub is not None:
            return page.pub.url
        synthetic = FileSrc(
            component=name,
            version=version,
            module=ROOT_MODULE,
            family=Family.PAGE,
            relative="index.adoc",
            media_type=ASCIIDOC_MEDIA_TYPE,
        )
        out = resolve_out(synthetic, self.html_extension_style)
        return resolve_pub(synthetic, out, self.html_extension_style).url


class CatalogView:
    """Read-only facade over a :class:`ContentCatalog`."""

    def __init__(self, catalog: ContentCatalog) -> None:
        self._catalog = catalog

    def find_by(self, **criteria: Any) -> List[VirtualFile]:
        return self._catalog.find_by(**criteria)

    def get_all(self) -> List[VirtualFile]:
        return self._catalog.get_all()

    get_files = get_all

    def get_by_id(self, resource_id: ResourceId) -> Optional[VirtualFile]:
        return self._catalog.get_by_id(resource_id)

    def get_by_path(self, *, component: str, version: str, path: str) -> Optional[VirtualFile]:
        return self._catalog.get_by_path(component=component, version=version, path=path)

    def get_component(self, name: str) -> Optional[Component]:
        return self._catalog.get_component(name)

    def get_components(self) -> List[Component]:
        return self._catalog.get_components()

    def get_pages(self) -> List[VirtualFile]:
        return self._catalog.get_pages()

    def get_site_start_page(self) -> Optional[VirtualFile]:
        return self._catalog.get_site_start_page()

    def follow(self, file: VirtualFile) -> Optional[VirtualFile]:
        return self._catalog.follow(file)

    def resolve_page(self, spec: str, context: Optional[Coordinates] = None) -> Optional[VirtualFile]:
        return self._catalog.resolve_page(spec, context)

    def resolve_resource(
        self,
        spec: str,
        context: Optional[Coordinates] = None,
        allowed_families: Optional[Iterable[FamilyLike]] = None,
        default_family: Optional[FamilyLike] = Family.PAGE,
    ) -> Optional[VirtualFile]:
        return self._catalog.resolve_resource(spec, context, allowed_families, default_family)


def _is_hidden(relative: str) -> bool:
    return any(segment.startswith("_") for segment in relative.split("/"))


__all__ = ["CatalogView", "ContentCatalog", "START_PAGE_ID"]
