"""Content catalog: resource IDs, classification, output paths and resolution."""

from .classifier import Classification, classify_content, classify_file, classify_path
from .content_catalog import START_PAGE_ID, CatalogView, ContentCatalog
from .paths import HtmlExtensionStyle, compute_relative_url_path, resolve_out, resolve_pub
from .resolver import resolve_page, resolve_resource
from .resource_id import format_resource_id, parse_resource_id
from .versions import sort_versions_desc, version_compare_desc

__all__ = [
    "CatalogView",
    "Classification",
    "ContentCatalog",
    "HtmlExtensionStyle",
    "START_PAGE_ID",
    "classify_content",
    "classify_file",
    "classify_path",
    "compute_relative_url_path",
    "format_resource_id",
    "parse_resource_id",
    "resolve_out",
    "resolve_page",
    "resolve_pub",
    "resolve_resource",
    "sort_versions_desc",
    "version_compare_desc",
]
