"""Redirect production for page aliases."""

from __future__ import annotations

from typing import Any, List, Optional, Tuple
from urllib.parse import urlsplit

from .catalog.content_catalog import ContentCatalog
from .catalog.paths import HtmlExtensionStyle, compute_relative_url_path
from .logging import get_logger
from .models import Family, VirtualFile
from .templating import render_template

NGINX_REWRITE_CONF = ".etc/nginx/rewrite.conf"
NETLIFY_REDIRECTS = "_redirects"

logger = get_logger("redirects")


def produce_redirects(playbook: Any, catalog: ContentCatalog) -> List[VirtualFile]:
    """Produce the redirect artifacts for every alias in ``catalog``.

    ``static`` turns each alias into a bounce page and returns nothing; ``nginx`` and
    ``netlify`` return a single server configuration file and unpublish the aliases;
    ``disabled`` only unpublishes them.
    """
    aliases = catalog.find_by(family=Family.ALIAS)
    if not aliases:
        return []
    site_url = playbook.site.url or ""
    if site_url == "/":
        site_url = ""
    site_url = site_url.rstrip("/")

    facility = playbook.urls.redirect_facility
    pairs = _alias_pairs(aliases, catalog)
    if not pairs:
        return []
    logger.debug("Producing %s redirects for %d aliases", facility, len(pairs))
    if facility == "static":
        for alias, target_url in pairs:
            alias.contents = _static_redirect_contents(alias, target_url, site_url)
            alias.media_type = "text/html"
        return []
    if facility == "netlify":
        include_directories = HtmlExtensionStyle(playbook.urls.html_extension_style) is HtmlExtensionStyle.DEFAULT
        return [_netlify_redirects(pairs, extract_url_path(site_url), include_directories)]
    if facility == "nginx":
        return [_nginx_rewrite_conf(pairs, extract_url_path(site_url))]
    _unpublish(aliases)
    return []


def extract_url_path(url: Optional[str]) -> str:
    """Path prefix of the site URL, or an empty string when it is served from the root."""
    if not url:
        return ""
    if url.startswith("/"):
        return url
    path = urlsplit(url).path
    return "" if path == "/" else path.rstrip("/")


def _alias_pairs(aliases: List[VirtualFile], catalog: ContentCatalog) -> List[Tuple[VirtualFile, str]]:
    pairs: List[Tuple[VirtualFile, str]] = []
    for alias in aliases:
        target = catalog.follow(alias)
        if alias.pub is None or target is None or target.pub is None:
            alias.out = None
            continue
        pairs.append((alias, target.pub.url))
    return pairs


def _static_redirect_contents(alias: VirtualFile, target_url: str, site_url: str) -> bytes:
    relative_url = compute_relative_url_path(alias.pub.url, target_url)
    canonical_url = site_url + target_url if site_url and not site_url.startswith("/") else None
    html = render_template("redirect.html.j2", relative_url=relative_url, canonical_url=canonical_url)
    return html.encode("utf-8")


def _netlify_redirects(
    pairs: List[Tuple[VirtualFile, str]], url_path: str, include_directories: bool
) -> VirtualFile:
    rules: List[str] = []
    for alias, target_url in pairs:
        alias.out = None
        source = url_path + alias.pub.url.replace(" ", "%20")
        target = url_path + target_url.replace(" ", "%20")
        rules.append(f"{source} {target} 301")
        if include_directories and source.endswith("/index.html"):
            rules.append(f"{source[: -len('index.html')]} {target} 301")
    return VirtualFile.at_site_root(NETLIFY_REDIRECTS, "\n".join(rules).encode("utf-8"), "text/plain")


def _nginx_rewrite_conf(pairs: List[Tuple[VirtualFile, str]], url_path: str) -> VirtualFile:
    rules: List[str] = []
    for alias, target_url in pairs:
        alias.out = None
        source = _nginx_location(url_path + alias.pub.url)
        target = _nginx_location(url_path + target_url)
        rules.append(f"location = {source} {{ return 301 {target}; }}")
    return VirtualFile.at_site_root(NGINX_REWRITE_CONF, "\n".join(rules).encode("utf-8"), "text/plain")


def _nginx_location(url: str) -> str:
    return f"'{url}'" if " " in url else url


def _unpublish(aliases: List[VirtualFile]) -> None:
    for alias in aliases:
        alias.out = None


__all__ = ["NETLIFY_REDIRECTS", "NGINX_REWRITE_CONF", "extract_url_path", "produce_redirects"]
