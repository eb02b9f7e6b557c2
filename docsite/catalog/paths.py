"""Output path and published URL computation for catalogued files."""

from __future__ import annotations

import posixpath
from enum import Enum
from typing import List, Optional

from ..models import (
    ASCIIDOC_MEDIA_TYPE,
    Family,
    FileSrc,
    MASTER_VERSION,
    OutDescriptor,
    PubDescriptor,
    ROOT_MODULE,
)

_FAMILY_PATH_SEGMENTS = {
    Family.IMAGE: "_images",
    Family.ATTACHMENT: "_attachments",
}


class HtmlExtensionStyle(str, Enum):
    """Sitewide strategy for the extension of page URLs."""

    DEFAULT = "default"
    DROP = "drop"
    INDEXIFY = "indexify"

    def __str__(self) -> str:
        return self.value


def resolve_out(
    src: FileSrc,
    html_extension_style: HtmlExtensionStyle | str = HtmlExtensionStyle.DEFAULT,
    family: Optional[Family] = None,
) -> OutDescriptor:
    """Compute where ``src`` is written in the site output.

    ``family`` overrides the family that drives the rules; aliases pass the family
    of their target.
    """
    style = HtmlExtensionStyle(html_extension_style)
    family = family or src.family

    basename = src.stem + ".html" if src.media_type == ASCIIDOC_MEDIA_TYPE else src.basename
    indexify_segment = ""
    if family is Family.PAGE and style is HtmlExtensionStyle.INDEXIFY and src.stem != "index":
        basename = "index.html"
        indexify_segment = src.stem

    module_path = join_path(src.component, _version_segment(src.version), _module_segment(src.module))
    dirname = join_path(
        module_path,
        _FAMILY_PATH_SEGMENTS.get(family, ""),
        posixpath.dirname(src.relative),
        indexify_segment,
    )
    return OutDescriptor(
        dirname=dirname,
        basename=basename,
        path=join_path(dirname, basename),
        module_root_path=relative_path(dirname, module_path),
        root_path=relative_path(dirname, ""),
    )


def resolve_pub(
    src: FileSrc,
    out: Optional[OutDescriptor],
    html_extension_style: HtmlExtensionStyle | str = HtmlExtensionStyle.DEFAULT,
    site_url: Optional[str] = None,
    family: Optional[Family] = None,
) -> PubDescriptor:
    """Compute the root-relative (and optionally absolute) URL of ``src``."""
    style = HtmlExtensionStyle(html_extension_style)
    family = family or src.family

    if family is Family.NAVIGATION:
        # directory URL of the owning module, used to resolve references in the nav
        segments = [src.component, _version_segment(src.version), _module_segment(src.module)]
        module_dir = join_path(*segments)
        url = "/" + module_dir + "/" if module_dir else "/"
        pub = PubDescriptor(
            url=_encode_spaces(url),
            module_root_path=".",
            root_path=relative_path(module_dir, ""),
        )
    else:
        if out is None:
            raise ValueError(f"Cannot publish {family.value} without an output path: {src.relative}")
        if family is Family.PAGE:
            url = "/" + _page_url_path(out.path, style)
        else:
            url = "/" + out.path
        pub = PubDescriptor(
            url=_encode_spaces(url),
            module_root_path=out.module_root_path,
            root_path=out.root_path,
        )

    if site_url:
        pub.absolute_url = site_url + pub.url
    return pub


def join_path(*segments: str) -> str:
    """Join POSIX path segments, skipping empty ones and ``.``."""
    parts: List[str] = []
    for segment in segments:
        if not segment:
            continue
        parts.extend(part for part in segment.split("/") if part and part != ".")
    return "/".join(parts)


def relative_path(from_dir: str, to_dir: str) -> str:
    """Relative path from directory ``from_dir`` to ``to_dir`` (both site-relative)."""
    from_parts = [part for part in from_dir.split("/") if part]
    to_parts = [part for part in to_dir.split("/") if part]
    common = 0
    for left, right in zip(from_parts, to_parts):
        if left != right:
            break
        common += 1
    parts = [".."] * (len(from_parts) - common) + to_parts[common:]
    return "/".join(parts) or "."


def compute_relative_url_path(from_url: str, to_url: str) -> str:
    """Shortest relative path from one root-relative URL to another.

    A trailing slash on either URL marks a directory index and is preserved on the
    target.
    """
    if from_url.endswith("/"):
        from_dir = from_url[:-1]
    else:
        from_dir = posixpath.dirname(from_url)
    if to_url.endswith("/"):
        target = relative_path(from_dir, to_url)
        return "./" if target == "." else target + "/"
    return relative_path(from_dir, to_url)


def _page_url_path(out_path: str, style: HtmlExtensionStyle) -> str:
    dirname, basename = posixpath.split(out_path)
    if style is HtmlExtensionStyle.DROP:
        if basename == "index.html":
            basename = ""
        elif basename.endswith(".html"):
            basename = basename[: -len(".html")]
    elif style is HtmlExtensionStyle.INDEXIFY:
        basename = ""
    if not dirname:
        return basename
    return f"{dirname}/{basename}"


def _version_segment(version: Optional[str]) -> str:
    return "" if not version or version == MASTER_VERSION else version


def _module_segment(module: Optional[str]) -> str:
    return "" if not module or module == ROOT_MODULE else module


def _encode_spaces(url: str) -> str:
    return url.replace(" ", "%20")


__all__ = [
    "HtmlExtensionStyle",
    "compute_relative_url_path",
    "join_path",
    "relative_path",
    "resolve_out",
    "resolve_pub",
]
