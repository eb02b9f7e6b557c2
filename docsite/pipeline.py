"""Orchestration of one docsite generation run, up to (not including) rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .aliases import register_page_aliases
from .catalog.classifier import classify_content
from .catalog.content_catalog import ContentCatalog
from .catalog.resource_id import format_resource_id
from .config import Playbook
from .logging import get_logger
from .models import ComponentVersionBundle, Family, VirtualFile
from .redirects import produce_redirects
from .sitemap import generate_sitemaps
from .sources import ContentSourceReader


@dataclass
class SiteBuild:
    """Result of a generation run: the frozen catalog plus generated site files."""

    catalog: ContentCatalog
    extra_files: List[VirtualFile] = field(default_factory=list)

    def manifest(self, family: Optional[Family | str] = None) -> List[Dict[str, Optional[str]]]:
        """Describe every catalogued file (and, unfiltered, every generated file)."""
        entries: List[Dict[str, Optional[str]]] = []
        files = self.catalog.find_by(family=Family(family)) if family else self.catalog.get_all()
        for file in files:
            entries.append(
                {
                    "id": format_resource_id(file.src.id),
                    "family": file.src.family.value,
                    "path": file.path,
                    "out": file.out.path if file.out else None,
                    "url": file.pub.url if file.pub else None,
                }
            )
        if family is None:
            for file in self.extra_files:
                entries.append(
                    {
                        "id": None,
                        "family": None,
                        "path": file.path,
                        "out": file.out.path if file.out else None,
                        "url": file.pub.url if file.pub else None,
                    }
                )
        return entries


class SiteGenerator:
    """Coordinates reading, classification, aliasing, redirects and sitemaps."""

    def __init__(self, playbook: Playbook, reader: ContentSourceReader | None = None) -> None:
        self.playbook = playbook
        self.reader = reader or ContentSourceReader()
        self.logger = get_logger("pipeline")

    def build(self, aggregate: Optional[Iterable[ComponentVersionBundle]] = None) -> SiteBuild:
        """Run the pipeline; ``aggregate`` replaces reading the playbook's sources."""
        if aggregate is None:
            self.logger.info("Reading %d content sources", len(self.playbook.content.sources))
            aggregate = self.reader.read_all(self.playbook.content.sources)
        bundles = list(aggregate)

        catalog = classify_content(self.playbook, bundles)
        self.logger.info(
            "Classified %d files into %d components", len(catalog), len(catalog.get_components())
        )

        aliases = register_page_aliases(catalog)
        self.logger.debug("Registered %d page aliases", len(aliases))
        catalog.freeze()

        extra_files = produce_redirects(self.playbook, catalog)
        extra_files.extend(generate_sitemaps(self.playbook, catalog))
        self.logger.info("Site build ready with %d generated files", len(extra_files))
        return SiteBuild(catalog=catalog, extra_files=extra_files)


__all__ = ["SiteBuild", "SiteGenerator"]
