"""Core data models shared across docsite components."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

ROOT_MODULE = "ROOT"
MASTER_VERSION = "master"
ASCIIDOC_MEDIA_TYPE = "text/asciidoc"
ASCIIDOC_EXTENSION = ".adoc"


class Family(str, Enum):
    """Structural category of a catalogued file."""

    PAGE = "page"
    PARTIAL = "partial"
    IMAGE = "image"
    ATTACHMENT = "attachment"
    EXAMPLE = "example"
    NAVIGATION = "navigation"
    ALIAS = "alias"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, value: "Family | str | None") -> Optional["Family"]:
        """Return the member for ``value`` or None when it is not a known family."""
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class ResourceId:
    """Coordinate tuple addressing a resource in the content catalog.

    Any coordinate may be None while an ID is still partial (e.g. straight out of
    the parser). ``fragment`` is carried along for references but never takes part
    in identity.
    """

    component: Optional[str] = None
    version: Optional[str] = None
    module: Optional[str] = None
    family: Optional[Family] = None
    relative: Optional[str] = None
    fragment: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.family is not None and not isinstance(self.family, Family):
            family = Family.coerce(self.family)
            if family is None:
                raise ValueError(f"Unknown resource family: {self.family}")
            object.__setattr__(self, "family", family)

    @property
    def key(self) -> tuple:
        """Identity key used by the catalog (fragment excluded)."""
        family = self.family.value if self.family is not None else None
        return (family, self.version, self.component, self.module, self.relative)

    def with_family(self, family: Family | str) -> "ResourceId":
        return replace(self, family=Family(family))

    def __str__(self) -> str:
        family = self.family.value if self.family is not None else ""
        return f"{self.version}@{self.component}:{self.module or ''}:{family}${self.relative}"


@dataclass
class FileSrc:
    """Source descriptor of a catalogued file: its coordinates plus derived fields."""

    component: str
    version: str
    module: Optional[str]
    family: Family
    relative: str
    basename: str = ""
    stem: str = ""
    extname: str = ""
    media_type: Optional[str] = None
    module_root_path: str = "."

    def __post_init__(self) -> None:
        family = Family.coerce(self.family)
        if family is None:
            raise ValueError(f"Unknown file family: {self.family}")
        self.family = family
        if self.component is None or self.version is None:
            raise ValueError(f"{family.value} file requires a component and a version")
        if not self.relative:
            raise ValueError(f"{family.value} file requires a relative path")
        if self.module is None and family is not Family.NAVIGATION:
            raise ValueError(f"{family.value} file requires a module")
        if not self.basename:
            self.basename = posixpath.basename(self.relative)
        if not self.extname:
            self.extname = posixpath.splitext(self.basename)[1]
        if not self.stem:
            self.stem = self.basename[: len(self.basename) - len(self.extname)] if self.extname else self.basename

    @classmethod
    def from_id(
        cls,
        resource_id: ResourceId,
        *,
        family: Family | None = None,
        media_type: Optional[str] = ASCIIDOC_MEDIA_TYPE,
    ) -> "FileSrc":
        """Build a page-like source descriptor from a fully resolved resource ID."""
        return cls(
            component=resource_id.component,  # type: ignore[arg-type]
            version=resource_id.version,  # type: ignore[arg-type]
            module=resource_id.module,
            family=family or resource_id.family,  # type: ignore[arg-type]
            relative=resource_id.relative,  # type: ignore[arg-type]
            media_type=media_type,
        )

    @property
    def id(self) -> ResourceId:
        return ResourceId(
            component=self.component,
            version=self.version,
            module=self.module,
            family=self.family,
            relative=self.relative,
        )


@dataclass
class OutDescriptor:
    """Where a published file is written, relative to the site output directory."""

    dirname: str
    basename: str
    path: str
    module_root_path: str
    root_path: str


@dataclass
class PubDescriptor:
    """How a published file is addressed on the site."""

    url: str
    absolute_url: Optional[str] = None
    module_root_path: Optional[str] = None
    root_path: Optional[str] = None


@dataclass
class NavInfo:
    """Navigation metadata; ``index`` is the position in the component's nav list."""

    index: int


@dataclass
class VirtualFile:
    """A file moving through the pipeline.

    ``rel`` is only set on aliases and holds the ID of the target file; the catalog
    owns both records and resolves the reference via ``ContentCatalog.follow``.
    """

    path: str
    contents: bytes = b""
    src: Optional[FileSrc] = None
    out: Optional[OutDescriptor] = None
    pub: Optional[PubDescriptor] = None
    nav: Optional[NavInfo] = None
    rel: Optional[ResourceId] = None
    media_type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.media_type is None and self.src is not None:
            self.media_type = self.src.media_type

    @classmethod
    def at_site_root(
        cls,
        path: str,
        contents: bytes,
        media_type: Optional[str] = None,
        site_url: Optional[str] = None,
    ) -> "VirtualFile":
        """Build a generated file published at ``path`` relative to the site root."""
        dirname, basename = posixpath.split(path)
        depth = len([segment for segment in dirname.split("/") if segment])
        root_path = "/".join([".."] * depth) or "."
        url = "/" + path
        return cls(
            path=path,
            contents=contents,
            out=OutDescriptor(
                dirname=dirname, basename=basename, path=path, module_root_path=root_path, root_path=root_path
            ),
            pub=PubDescriptor(url=url, absolute_url=site_url + url if site_url else None, root_path=root_path),
            media_type=media_type,
        )

    @property
    def text(self) -> str:
        return self.contents.decode("utf-8")


@dataclass
class ComponentVersion:
    """A single version of a component."""

    version: str
    title: str
    url: str
    display_version: str = ""

    def __post_init__(self) -> None:
        if not self.display_version:
            self.display_version = self.version


@dataclass
class Component:
    """A documentation component; versions are kept newest first."""

    name: str
    versions: List[ComponentVersion] = field(default_factory=list)

    @property
    def latest(self) -> ComponentVersion:
        return self.versions[0]

    @property
    def title(self) -> str:
        return self.latest.title

    @property
    def url(self) -> str:
        return self.latest.url

    def get_version(self, version: str) -> Optional[ComponentVersion]:
        for candidate in self.versions:
            if candidate.version == version:
                return candidate
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "url": self.url,
            "versions": [
                {
                    "version": entry.version,
                    "display_version": entry.display_version,
                    "title": entry.title,
                    "url": entry.url,
                }
                for entry in self.versions
            ],
        }


@dataclass
class ComponentVersionBundle:
    """One component version as delivered by content aggregation."""

    name: str
    version: str
    title: Optional[str] = None
    nav: List[str] = field(default_factory=list)
    start_page: Optional[str] = None
    display_version: Optional[str] = None
    files: List[VirtualFile] = field(default_factory=list)
    origin: Optional[str] = None


__all__ = [
    "ASCIIDOC_EXTENSION",
    "ASCIIDOC_MEDIA_TYPE",
    "Component",
    "ComponentVersion",
    "ComponentVersionBundle",
    "Family",
    "FileSrc",
    "MASTER_VERSION",
    "NavInfo",
    "OutDescriptor",
    "PubDescriptor",
    "ROOT_MODULE",
    "ResourceId",
    "VirtualFile",
]
