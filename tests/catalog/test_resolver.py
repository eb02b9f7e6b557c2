"""Tests for docsite.catalog.resolver."""

from __future__ import annotations

import pytest

from docsite.catalog.content_catalog import ContentCatalog
from docsite.catalog.resolver import complete_resource_id, resolve_page, resolve_resource
from docsite.errors import InvalidSyntaxError
from docsite.models import Family, ResourceId
from tests._fixtures.content_builder import add_page


@pytest.fixture
def populated() -> ContentCatalog:
    catalog = ContentCatalog()
    for version in ("1.0", "2.0"):
        add_page(catalog, "modules/ROOT/pages/index.adoc", version=version)
        add_page(catalog, "modules/ROOT/pages/the-topic/page-b.adoc", version=version)
        add_page(catalog, "modules/admin/pages/users.adoc", version=version)
        add_page(catalog, "modules/ROOT/pages/_partials/intro.adoc", version=version)
        add_page(catalog, "modules/ROOT/assets/images/logo.png", version=version)
        catalog.add_component_version("the-component", version)
    add_page(catalog, "modules/ROOT/pages/index.adoc", component="other", version="master")
    catalog.add_component_version("other", "master")
    return catalog


def test_resolve_page_with_full_context(populated: ContentCatalog) -> None:
    context = ResourceId(component="the-component", version="1.0", module="ROOT")

    page = resolve_page("the-topic/page-b.adoc", populated, context)

    assert page is not None
    assert page.src.version == "1.0"
    assert page.src.relative == "the-topic/page-b.adoc"


def test_resolve_page_appends_adoc_extension(populated: ContentCatalog) -> None:
    context = ResourceId(component="the-component", version="1.0", module="ROOT")

    assert resolve_page("the-topic/page-b", populated, context) is not None


def test_module_in_spec_overrides_context(populated: ContentCatalog) -> None:
    context = ResourceId(component="the-component", version="1.0", module="ROOT")

    page = resolve_page("admin:users.adoc", populated, context)

    assert page is not None and page.src.module == "admin"


def test_component_without_version_resolves_latest(populated: ContentCatalog) -> None:
    context = ResourceId(component="other", version="master", module="ROOT")

    page = resolve_page("the-component::index.adoc", populated, context)

    assert page is not None
    assert page.src.version == "2.0"


def test_version_in_spec_wins_over_latest(populated: ContentCatalog) -> None:
    page = resolve_page("1.0@the-component:admin:users.adoc", populated)

    assert page is not None and page.src.version == "1.0"


def test_version_only_spec_keeps_context_component(populated: ContentCatalog) -> None:
    context = ResourceId(component="the-component", version="2.0", module="admin")

    page = resolve_page("1.0@users.adoc", populated, context)

    assert page is not None
    assert (page.src.version, page.src.module) == ("1.0", "admin")


def test_unknown_component_or_page_is_a_miss(populated: ContentCatalog) -> None:
    assert resolve_page("nope::index.adoc", populated) is None
    assert resolve_page("the-component::missing.adoc", populated) is None
    assert resolve_page("index.adoc", populated) is None


def test_resolve_resource_by_family(populated: ContentCatalog) -> None:
    context = ResourceId(component="the-component", version="1.0", module="ROOT")

    partial = resolve_resource("partial$intro.adoc", populated, context)
    image = resolve_resource("logo.png", populated, context, [Family.IMAGE], Family.IMAGE)

    assert partial is not None and partial.src.family is Family.PARTIAL
    assert image is not None and image.src.family is Family.IMAGE


def test_disallowed_family_is_a_miss(populated: ContentCatalog) -> None:
    context = ResourceId(component="the-component", version="1.0", module="ROOT")

    assert resolve_resource("partial$intro.adoc", populated, context, [Family.PAGE]) is None


def test_invalid_syntax_raises(populated: ContentCatalog) -> None:
    with pytest.raises(InvalidSyntaxError, match="Invalid page ID syntax"):
        resolve_page("the-component::", populated)
    with pytest.raises(InvalidSyntaxError, match="Invalid resource ID syntax"):
        resolve_resource("a@b@c.adoc", populated)


def test_unknown_family_is_a_syntax_error(populated: ContentCatalog) -> None:
    context = ResourceId(component="the-component", version="1.0", module="ROOT")

    with pytest.raises(InvalidSyntaxError, match=r"Invalid resource ID syntax: foo\$bar\.adoc"):
        resolve_resource("foo$bar.adoc", populated, context)
    with pytest.raises(InvalidSyntaxError, match="Invalid page ID syntax"):
        resolve_page("parital$intro.adoc", populated, context)


def test_complete_resource_id(populated: ContentCatalog) -> None:
    completed = complete_resource_id(
        ResourceId(component="the-component", family=Family.PAGE, relative="index.adoc"), populated
    )

    assert completed == ResourceId(
        component="the-component", version="2.0", module="ROOT", family=Family.PAGE, relative="index.adoc"
    )
    assert complete_resource_id(ResourceId(family=Family.PAGE, relative="index.adoc"), populated) is None
    assert complete_resource_id(ResourceId(component="nope", relative="index.adoc"), populated) is None
