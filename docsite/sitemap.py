"""Sitemap generation for published pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Any, Dict, List, Optional

from .catalog.content_catalog import ContentCatalog
from .catalog.versions import version_compare_desc
from .logging import get_logger
from .models import Family, VirtualFile
from .templating import render_template

SITEMAP_STEM = "sitemap"
SITEMAP_PREFIX = "sitemap-"
XML_MEDIA_TYPE = "application/xml"

logger = get_logger("sitemap")


@dataclass
class SitemapEntry:
    url: str
    absolute_url: str
    version: str


@dataclass
class _ComponentSitemap:
    component: str
    entries: List[SitemapEntry] = field(default_factory=list)


def generate_sitemaps(
    playbook: Any,
    catalog: ContentCatalog,
    now: Optional[datetime] = None,
) -> List[VirtualFile]:
    """Generate ``sitemap.xml`` (and per-component sitemaps for multi-component sites).

    Nothing is generated unless the playbook defines ``site.url``. Entries are
    ordered by URL and then, when a component has several versions, newest first.
    """
    site_url = (playbook.site.url or "").rstrip("/")
    if not site_url:
        return []
    pages = [page for page in catalog.find_by(family=Family.PAGE) if page.pub is not None]
    if not pages:
        return []

    lastmod = _isoformat(now or datetime.now(timezone.utc))
    by_component: Dict[str, _ComponentSitemap] = {}
    for page in pages:
        sitemap = by_component.setdefault(page.src.component, _ComponentSitemap(page.src.component))
        sitemap.entries.append(
            SitemapEntry(
                url=page.pub.url,
                absolute_url=page.pub.absolute_url or site_url + page.pub.url,
                version=page.src.version,
            )
        )

    sitemaps: List[VirtualFile] = []
    for component in sorted(by_component):
        entries = sorted(by_component[component].entries, key=lambda entry: entry.url)
        if len({entry.version for entry in entries}) > 1:
            entries.sort(key=cmp_to_key(lambda a, b: version_compare_desc(a.version, b.version)))
        contents = render_template("sitemap.xml.j2", entries=entries, lastmod=lastmod)
        sitemaps.append(
            VirtualFile.at_site_root(
                f"{SITEMAP_PREFIX}{component}.xml", contents.encode("utf-8"), XML_MEDIA_TYPE, site_url
            )
        )

    basename = f"{SITEMAP_STEM}.xml"
    if len(sitemaps) == 1:
        single = sitemaps[0]
        index = VirtualFile.at_site_root(basename, single.contents, XML_MEDIA_TYPE, site_url)
        logger.debug("Generated sitemap with %d entries", len(pages))
        return [index]

    contents = render_template("sitemap-index.xml.j2", sitemaps=sitemaps)
    index = VirtualFile.at_site_root(basename, contents.encode("utf-8"), XML_MEDIA_TYPE, site_url)
    logger.debug("Generated sitemap index for %d components", len(sitemaps))
    return [index, *sitemaps]


def _isoformat(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    stamp = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


__all__ = ["SITEMAP_PREFIX", "SITEMAP_STEM", "SitemapEntry", "generate_sitemaps"]
