"""Playbook loading for docsite (docsite-playbook.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .catalog.paths import HtmlExtensionStyle

PLAYBOOK_FILENAME = "docsite-playbook.yml"
REDIRECT_FACILITIES = ("static", "nginx", "netlify", "disabled")


class ConfigError(RuntimeError):
    """Raised when the playbook cannot be read or holds invalid values."""


@dataclass
class SiteConfig:
    """Site-wide settings."""

    title: Optional[str] = None
    url: Optional[str] = None
    start_page: Optional[str] = None


@dataclass
class UrlsConfig:
    """How page URLs and alias redirects are produced."""

    html_extension_style: HtmlExtensionStyle = HtmlExtensionStyle.DEFAULT
    redirect_facility: str = "static"


@dataclass
class SourceConfig:
    """A local directory holding one component version."""

    path: Path
    start_path: str = ""


@dataclass
class ContentConfig:
    sources: List[SourceConfig] = field(default_factory=list)


@dataclass
class Playbook:
    """Represents the settings defined in a docsite playbook."""

    root: Path
    site: SiteConfig = field(default_factory=SiteConfig)
    urls: UrlsConfig = field(default_factory=UrlsConfig)
    content: ContentConfig = field(default_factory=ContentConfig)


def load_playbook(playbook_path: Path) -> Playbook:
    """Load a playbook from disk; a directory means ``<dir>/docsite-playbook.yml``."""
    playbook_file = _resolve_playbook_path(Path(playbook_path))
    if not playbook_file.exists():
        raise ConfigError(f"Playbook not found: {playbook_file}")
    root = playbook_file.parent

    data = _read_playbook(playbook_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{playbook_file.name} must contain a mapping at the root")
    return build_playbook(data, root)


def build_playbook(data: Dict[str, Any], root: Path) -> Playbook:
    """Build a :class:`Playbook` from already parsed data."""
    site_data = _as_dict(data.get("site"))
    url = _as_str(site_data.get("url"))
    if url is not None:
        url = url.rstrip("/")
    site = SiteConfig(
        title=_as_str(site_data.get("title")),
        url=url or None,
        start_page=_as_str(_get(site_data, "start_page", "startPage")),
    )

    urls_data = _as_dict(data.get("urls"))
    style = _as_str(_get(urls_data, "html_extension_style", "htmlExtensionStyle")) or "default"
    try:
        html_extension_style = HtmlExtensionStyle(style)
    except ValueError:
        allowed = ", ".join(member.value for member in HtmlExtensionStyle)
        raise ConfigError(f"urls.html_extension_style must be one of: {allowed} (got {style})") from None
    facility = _as_str(_get(urls_data, "redirect_facility", "redirectFacility")) or "static"
    if facility not in REDIRECT_FACILITIES:
        raise ConfigError(
            f"urls.redirect_facility must be one of: {', '.join(REDIRECT_FACILITIES)} (got {facility})"
        )
    urls = UrlsConfig(html_extension_style=html_extension_style, redirect_facility=facility)

    content_data = _as_dict(data.get("content"))
    sources: List[SourceConfig] = []
    for entry in _as_list(content_data.get("sources")):
        if isinstance(entry, str):
            entry = {"path": entry}
        entry = _as_dict(entry)
        raw_path = _as_str(entry.get("path") or entry.get("url"))
        if not raw_path:
            raise ConfigError("content.sources entries require a path")
        source_path = Path(raw_path).expanduser()
        if not source_path.is_absolute():
            source_path = root / source_path
        start_path = _as_str(_get(entry, "start_path", "startPath")) or ""
        sources.append(SourceConfig(path=source_path, start_path=start_path.strip("/")))

    return Playbook(
        root=root,
        site=site,
        urls=urls,
        content=ContentConfig(sources=sources),
    )


def _resolve_playbook_path(playbook_path: Path) -> Path:
    playbook_path = playbook_path.expanduser()
    if playbook_path.is_dir():
        return (playbook_path / PLAYBOOK_FILENAME).resolve()
    return playbook_path.resolve()


def _read_playbook(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _get(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    if isinstance(value, Sequence):
        return list(value)
    return []


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


__all__ = [
    "ConfigError",
    "ContentConfig",
    "PLAYBOOK_FILENAME",
    "Playbook",
    "REDIRECT_FACILITIES",
    "SiteConfig",
    "SourceConfig",
    "UrlsConfig",
    "build_playbook",
    "load_playbook",
]
