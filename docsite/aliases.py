"""Page alias discovery from AsciiDoc document headers."""

from __future__ import annotations

import re
from typing import List

from .catalog.content_catalog import ContentCatalog
from .logging import get_logger
from .models import ASCIIDOC_MEDIA_TYPE, VirtualFile

_ATTRIBUTE_ENTRY = re.compile(r"^:(?P<name>[A-Za-z0-9_][A-Za-z0-9_-]*):(?:[ \t]+(?P<value>.*))?$")
PAGE_ALIASES_ATTRIBUTE = "page-aliases"

logger = get_logger("aliases")


def read_page_aliases(contents: bytes | str) -> List[str]:
    """Return the alias specs declared by ``:page-aliases:`` in the document header."""
    text = contents.decode("utf-8") if isinstance(contents, bytes) else contents
    aliases: List[str] = []
    seen_content = False
    for raw_line in text.splitlines():
        line = raw_line.rstrip()
        if not line:
            if seen_content:
                break
            continue
        seen_content = True
        if line.startswith("//"):
            continue
        match = _ATTRIBUTE_ENTRY.match(line)
        if match is None or match.group("name") != PAGE_ALIASES_ATTRIBUTE:
            continue
        value = match.group("value") or ""
        aliases.extend(spec.strip() for spec in value.split(",") if spec.strip())
    return aliases


def register_page_aliases(catalog: ContentCatalog) -> List[VirtualFile]:
    """Register every alias declared by the pages in ``catalog``."""
    registered: List[VirtualFile] = []
    for page in catalog.get_pages():
        if page.media_type != ASCIIDOC_MEDIA_TYPE or not page.contents:
            continue
        for spec in read_page_aliases(page.contents):
            alias = catalog.register_page_alias(spec, page)
            logger.debug("Registered alias %s -> %s", alias.src.relative, page.path)
            registered.append(alias)
    return registered


__all__ = ["PAGE_ALIASES_ATTRIBUTE", "read_page_aliases", "register_page_aliases"]
