"""Jinja2 environment for the files docsite generates itself."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).with_name("templates")


@lru_cache(maxsize=1)
def template_environment() -> Environment:
    loader = FileSystemLoader(str(TEMPLATES_DIR))
    return Environment(
        loader=loader,
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


def render_template(name: str, **context: Any) -> str:
    """Render the packaged template ``name`` with ``context``."""
    return template_environment().get_template(name).render(**context)


__all__ = ["TEMPLATES_DIR", "render_template", "template_environment"]
