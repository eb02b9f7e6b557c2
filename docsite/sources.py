"""Local content sources: read a component version from a directory tree."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

import yaml

from .errors import InvalidComponentDescriptorError
from .logging import get_logger
from .mime import lookup_media_type
from .models import ComponentVersionBundle, VirtualFile

COMPONENT_DESCRIPTOR = "docsite.yml"

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

logger = get_logger("sources")


def _iter_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS and not name.startswith("."))
        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES or filename.startswith(".") or filename.endswith("~"):
                continue
            yield Path(dirpath) / filename


def _load_descriptor(path: Path) -> Dict[str, Any]:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise InvalidComponentDescriptorError(f"Failed to parse {path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise InvalidComponentDescriptorError(f"{path} must contain a mapping at the root")
    return loaded


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) and str(value) else None


class ContentSourceReader:
    """Reads one component version per local directory."""

    def read(self, path: str | Path, start_path: str = "") -> ComponentVersionBundle:
        """Return the component version bundle found at ``path``/``start_path``."""
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Content source not found: {path}")
        if not root.is_dir():
            raise NotADirectoryError(f"Content source is not a directory: {path}")
        base = root / start_path if start_path else root
        if not base.is_dir():
            raise FileNotFoundError(f"Start path not found in content source {root}: {start_path}")

        descriptor_path = base / COMPONENT_DESCRIPTOR
        if not descriptor_path.is_file():
            raise InvalidComponentDescriptorError(f"{COMPONENT_DESCRIPTOR} not found in {base}")
        descriptor = _load_descriptor(descriptor_path)

        name = _as_str(descriptor.get("name"))
        if name is None:
            raise InvalidComponentDescriptorError(f"{descriptor_path}: name is required")
        version = _as_str(descriptor.get("version"))
        if version is None:
            raise InvalidComponentDescriptorError(f"{descriptor_path}: version is required")
        nav = descriptor.get("nav") or []
        if not isinstance(nav, list):
            nav = [nav]

        files: List[VirtualFile] = []
        for file_path in _iter_files(base):
            if file_path == descriptor_path:
                continue
            rel_path = file_path.relative_to(base).as_posix()
            files.append(
                VirtualFile(
                    path=rel_path,
                    contents=file_path.read_bytes(),
                    media_type=lookup_media_type(rel_path),
                )
            )
        logger.debug("Read %d files for %s@%s from %s", len(files), version, name, base)

        return ComponentVersionBundle(
            name=name,
            version=version,
            title=_as_str(descriptor.get("title")),
            nav=[str(entry) for entry in nav if isinstance(entry, str)],
            start_page=_as_str(descriptor.get("start_page") or descriptor.get("startPage")),
            display_version=_as_str(descriptor.get("display_version") or descriptor.get("displayVersion")),
            files=files,
            origin=str(base),
        )

    def read_all(self, sources: Iterable[Any]) -> List[ComponentVersionBundle]:
        """Read every ``SourceConfig``-like entry (``path`` and ``start_path``)."""
        return [self.read(source.path, getattr(source, "start_path", "")) for source in sources]


__all__ = ["COMPONENT_DESCRIPTOR", "ContentSourceReader"]
