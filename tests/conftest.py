from __future__ import annotations

from pathlib import Path

import pytest

from docsite.catalog.content_catalog import ContentCatalog
from tests._fixtures.content_builder import ContentBuilder


@pytest.fixture
def content_builder(tmp_path: Path) -> ContentBuilder:
    """Provide a reusable content source builder rooted at the pytest tmp_path."""
    return ContentBuilder(tmp_path)


@pytest.fixture
def catalog() -> ContentCatalog:
    return ContentCatalog()
