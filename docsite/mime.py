"""Media type lookup for aggregated content files."""

from __future__ import annotations

import mimetypes
import posixpath

from .models import ASCIIDOC_MEDIA_TYPE

_MEDIA_TYPE_BY_SUFFIX = {
    ".adoc": ASCIIDOC_MEDIA_TYPE,
    ".asciidoc": ASCIIDOC_MEDIA_TYPE,
    ".md": "text/markdown",
    ".yml": "text/yaml",
    ".yaml": "text/yaml",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".json": "application/json",
}

_REGISTRY = mimetypes.MimeTypes()
for _suffix, _media_type in _MEDIA_TYPE_BY_SUFFIX.items():
    _REGISTRY.add_type(_media_type, _suffix)


def lookup_media_type(path: str) -> str | None:
    """Return the media type for ``path`` based on its extension, if known."""
    suffix = posixpath.splitext(path)[1].lower()
    if not suffix:
        return None
    if suffix in _MEDIA_TYPE_BY_SUFFIX:
        return _MEDIA_TYPE_BY_SUFFIX[suffix]
    media_type, _ = _REGISTRY.guess_type(f"file{suffix}", strict=False)
    return media_type


__all__ = ["lookup_media_type"]
