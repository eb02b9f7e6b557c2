"""Tests for docsite.catalog.content_catalog."""

from __future__ import annotations

import pytest

from docsite.catalog.content_catalog import START_PAGE_ID, CatalogView, ContentCatalog
from docsite.errors import (
    CatalogFrozenError,
    DuplicateComponentVersionError,
    DuplicateResourceError,
    InvalidComponentDescriptorError,
    InvalidSyntaxError,
    PageAliasError,
    StartPageNotFoundError,
)
from docsite.models import ASCIIDOC_MEDIA_TYPE, Family, FileSrc, ResourceId, VirtualFile
from tests._fixtures.content_builder import add_page


def test_add_file_populates_out_and_pub(catalog: ContentCatalog) -> None:
    page = add_page(catalog, "modules/ROOT/pages/the-page.adoc")

    assert page.out is not None
    assert page.out.path == "the-component/1.2.3/the-page.html"
    assert page.out.root_path == "../.."
    assert page.pub is not None
    assert page.pub.url == "/the-component/1.2.3/the-page.html"


def test_add_file_rejects_duplicate_coordinates(catalog: ContentCatalog) -> None:
    def _file(path: str) -> VirtualFile:
        src = FileSrc(
            component="the-component",
            version="1.2.3",
            module="ROOT",
            family=Family.PAGE,
            relative="the-page.adoc",
            media_type=ASCIIDOC_MEDIA_TYPE,
        )
        return VirtualFile(path=path, src=src)

    catalog.add_file(_file("modules/ROOT/pages/the-page.adoc"))

    with pytest.raises(DuplicateResourceError) as excinfo:
        catalog.add_file(_file("elsewhere/the-page.adoc"))
    assert str(excinfo.value) == "Duplicate page: 1.2.3@the-component:ROOT:the-page.adoc"


def test_same_relative_in_different_families_does_not_collide(catalog: ContentCatalog) -> None:
    add_page(catalog, "modules/ROOT/pages/_partials/shared.adoc")
    add_page(catalog, "modules/ROOT/examples/shared.adoc")

    assert len(catalog) == 2


def test_partials_and_examples_are_not_published(catalog: ContentCatalog) -> None:
    partial = add_page(catalog, "modules/ROOT/pages/_partials/snippet.adoc")
    example = add_page(catalog, "modules/ROOT/examples/code.js")

    assert partial.out is None and partial.pub is None
    assert example.out is None and example.pub is None


def test_hidden_pages_are_catalogued_but_not_published(catalog: ContentCatalog) -> None:
    hidden = add_page(catalog, "modules/ROOT/pages/_drafts/idea.adoc")

    assert catalog.find_by(relative="_drafts/idea.adoc") == [hidden]
    assert hidden.out is None
    assert hidden.pub is None


def test_navigation_files_get_pub_without_out(catalog: ContentCatalog) -> None:
    nav = add_page(catalog, "modules/module-a/nav.adoc", nav=["modules/module-a/nav.adoc"])

    assert nav.out is None
    assert nav.pub is not None
    assert nav.pub.url == "/the-component/1.2.3/module-a/"
    assert nav.nav is not None and nav.nav.index == 0


def test_get_by_id_and_get_by_path(catalog: ContentCatalog) -> None:
    page = add_page(catalog, "modules/ROOT/pages/the-topic/the-page.adoc")

    found = catalog.get_by_id(
        ResourceId(
            component="the-component",
            version="1.2.3",
            module="ROOT",
            family="page",
            relative="the-topic/the-page.adoc",
        )
    )

    assert found is page
    assert catalog.get_by_path(
        component="the-component", version="1.2.3", path="modules/ROOT/pages/the-topic/the-page.adoc"
    ) is page
    assert catalog.get_by_path(component="the-component", version="9.9", path=page.path) is None


def test_find_by_matches_every_criterion_in_insertion_order(catalog: ContentCatalog) -> None:
    one_old = add_page(catalog, "modules/ROOT/pages/page-one.adoc", version="v1.2.3")
    add_page(catalog, "modules/ROOT/assets/images/foo.png", version="v1.2.3")
    one_new = add_page(catalog, "modules/ROOT/pages/page-one.adoc", version="v4.5.6")
    add_page(catalog, "modules/ROOT/pages/page-two.adoc", version="v4.5.6")

    assert catalog.find_by(relative="page-one.adoc") == [one_old, one_new]
    assert len(catalog.find_by(family=Family.PAGE)) == 3
    assert len(catalog.find_by(component="the-component", version="v4.5.6")) == 2
    assert [file.src.extname for file in catalog.find_by(extname=".png")] == [".png"]
    assert catalog.get_pages() == catalog.find_by(family="page")
    assert catalog.get_files() == catalog.get_all()


def test_find_by_rejects_unknown_criteria(catalog: ContentCatalog) -> None:
    with pytest.raises(ValueError):
        catalog.find_by(colour="blue")


def test_component_version_url_uses_root_index_page(catalog: ContentCatalog) -> None:
    add_page(catalog, "modules/ROOT/pages/index.adoc")

    entry = catalog.add_component_version("the-component", "1.2.3", "The Component")

    assert entry.url == "/the-component/1.2.3/index.html"
    assert entry.display_version == "1.2.3"
    component = catalog.get_component("the-component")
    assert component is not None
    assert component.title == "The Component"
    assert component.url == entry.url


def test_component_version_url_falls_back_to_synthetic_index() -> None:
    catalog = ContentCatalog(html_extension_style="drop")

    entry = catalog.add_component_version("the-component", "1.2.3", "The Component")

    assert entry.url == "/the-component/1.2.3/"


def test_component_version_url_uses_explicit_start_page(catalog: ContentCatalog) -> None:
    add_page(catalog, "modules/ROOT/pages/index.adoc")
    add_page(catalog, "modules/admin/pages/overview.adoc")

    entry = catalog.add_component_version("the-component", "1.2.3", start_page="admin:overview.adoc")

    assert entry.url == "/the-component/1.2.3/admin/overview.html"
    assert entry.title == "the-component"


def test_missing_explicit_start_page_is_fatal(catalog: ContentCatalog) -> None:
    with pytest.raises(StartPageNotFoundError) as excinfo:
        catalog.add_component_version("the-component", "1.0.0", "The Component", "home.adoc")

    assert str(excinfo.value) == "Start page specified for 1.0.0@the-component not found: home.adoc"


def test_versions_are_kept_newest_first(catalog: ContentCatalog) -> None:
    catalog.add_component_version("the-component", "1.0", "Component 1.0")
    catalog.add_component_version("the-component", "2.0", "Component 2.0")
    catalog.add_component_version("the-component", "1.1", "Component 1.1")
    catalog.add_component_version("the-component", "2.1-beta", "Component 2.1 beta", display_version="2.1 Beta")

    component = catalog.get_component("the-component")

    assert component is not None
    assert [entry.version for entry in component.versions] == ["2.1-beta", "2.0", "1.1", "1.0"]
    assert component.latest is component.versions[0]
    assert component.title == "Component 2.1 beta"
    assert component.latest.display_version == "2.1 Beta"


def test_duplicate_component_version_is_fatal(catalog: ContentCatalog) -> None:
    catalog.add_component_version("the-component", "1.0")

    with pytest.raises(DuplicateComponentVersionError) as excinfo:
        catalog.add_component_version("the-component", "1.0")

    assert str(excinfo.value) == "Duplicate version detected for component the-component: 1.0"


def test_component_version_requires_name_and_version(catalog: ContentCatalog) -> None:
    with pytest.raises(InvalidComponentDescriptorError):
        catalog.add_component_version("", "1.0")
    with pytest.raises(InvalidComponentDescriptorError):
        catalog.add_component_version("the-component", "")


def test_component_lookups(catalog: ContentCatalog) -> None:
    catalog.add_component_version("foo", "1.0", "Foo")
    catalog.add_component_version("bar", "1.0", "Bar")
    catalog.add_component_version("yin", "1.0", "Yin")

    assert [component.name for component in catalog.get_components()] == ["foo", "bar", "yin"]
    assert [component.title for component in catalog.get_components_sorted_by("title")] == ["Bar", "Foo", "Yin"]
    assert catalog.get_component_version("foo", "1.0") is not None
    assert catalog.get_component_version("foo", "2.0") is None
    assert catalog.get_component_version("nope", "1.0") is None


def test_register_page_alias(catalog: ContentCatalog) -> None:
    target = add_page(catalog, "modules/ROOT/pages/the-target.adoc")

    alias = catalog.register_page_alias("alias.adoc", target)

    found = catalog.get_by_id(
        ResourceId(
            component="the-component",
            version="1.2.3",
            module="ROOT",
            family="alias",
            relative="alias.adoc",
        )
    )
    assert found is alias
    assert alias.path == target.path
    assert alias.rel == target.src.id
    assert catalog.follow(alias) is target
    assert alias.out is not None and alias.out.path == "the-component/1.2.3/alias.html"
    assert alias.pub is not None and alias.pub.url == "/the-component/1.2.3/alias.html"


def test_register_page_alias_with_indexify_style() -> None:
    catalog = ContentCatalog(html_extension_style="indexify")
    target = add_page(catalog, "modules/ROOT/pages/the-target.adoc")

    alias = catalog.register_page_alias("alias.adoc", target)

    assert alias.out is not None and alias.out.path == "the-component/1.2.3/alias/index.html"
    assert alias.pub is not None and alias.pub.url == "/the-component/1.2.3/alias/"


def test_register_page_alias_in_other_component(catalog: ContentCatalog) -> None:
    add_page(catalog, "modules/ROOT/pages/index.adoc", component="other", version="3.0")
    catalog.add_component_version("other", "3.0")
    target = add_page(catalog, "modules/ROOT/pages/the-target.adoc")

    explicit = catalog.register_page_alias("2.0@other::old.adoc", target)
    latest = catalog.register_page_alias("other::older.adoc", target)

    assert explicit.out is not None and explicit.out.path == "other/2.0/old.html"
    assert latest.src.version == "3.0"


def test_register_page_alias_rejects_self_and_existing_pages(catalog: ContentCatalog) -> None:
    target = add_page(catalog, "modules/ROOT/pages/the-target.adoc")
    add_page(catalog, "modules/ROOT/pages/other.adoc")

    with pytest.raises(PageAliasError, match="itself"):
        catalog.register_page_alias("the-target.adoc", target)
    with pytest.raises(PageAliasError, match="existing page"):
        catalog.register_page_alias("other.adoc", target)


def test_register_page_alias_rejects_duplicate_alias(catalog: ContentCatalog) -> None:
    first = add_page(catalog, "modules/ROOT/pages/first.adoc")
    second = add_page(catalog, "modules/ROOT/pages/second.adoc")
    catalog.register_page_alias("old.adoc", first)

    with pytest.raises(PageAliasError, match="already registered"):
        catalog.register_page_alias("old.adoc", second)


def test_register_page_alias_rejects_unknown_component_without_version(catalog: ContentCatalog) -> None:
    target = add_page(catalog, "modules/ROOT/pages/the-target.adoc")

    with pytest.raises(PageAliasError, match="unknown component"):
        catalog.register_page_alias("nowhere::old.adoc", target)


def test_register_page_alias_rejects_non_page_family(catalog: ContentCatalog) -> None:
    target = add_page(catalog, "modules/ROOT/pages/the-target.adoc")

    with pytest.raises(PageAliasError, match="must name a page"):
        catalog.register_page_alias("image$logo.png", target)
    with pytest.raises(InvalidSyntaxError):
        catalog.register_page_alias("bogus$old.adoc", target)
    assert catalog.find_by(family=Family.ALIAS) == []


def test_alias_of_hidden_page_is_not_published(catalog: ContentCatalog) -> None:
    target = add_page(catalog, "modules/ROOT/pages/_hidden/draft.adoc")

    alias = catalog.register_page_alias("old.adoc", target)

    assert catalog.follow(alias) is target
    assert alias.out is None
    assert alias.pub is None


def test_register_page_alias_rejects_invalid_syntax(catalog: ContentCatalog) -> None:
    target = add_page(catalog, "modules/ROOT/pages/the-target.adoc")

    with pytest.raises(InvalidSyntaxError, match="Invalid page ID syntax"):
        catalog.register_page_alias("the-component::", target)


def test_site_start_page_is_registered_as_root_alias(catalog: ContentCatalog) -> None:
    index = add_page(catalog, "modules/ROOT/pages/index.adoc")
    catalog.add_component_version("the-component", "1.2.3")

    alias = catalog.register_site_start_page("the-component::index.adoc")

    assert catalog.get_by_id(START_PAGE_ID) is alias
    assert alias.out is not None and alias.out.path == "index.html"
    assert alias.pub is not None and alias.pub.url == "/index.html"
    assert catalog.get_site_start_page() is index


def test_site_start_page_with_drop_style_is_site_root() -> None:
    catalog = ContentCatalog(html_extension_style="drop")
    add_page(catalog, "modules/ROOT/pages/index.adoc")
    catalog.add_component_version("the-component", "1.2.3")

    alias = catalog.register_site_start_page("1.2.3@the-component::index.adoc")

    assert alias.pub is not None and alias.pub.url == "/"


def test_missing_site_start_page_is_fatal(catalog: ContentCatalog) -> None:
    with pytest.raises(StartPageNotFoundError) as excinfo:
        catalog.register_site_start_page("the-component::index.adoc")

    assert str(excinfo.value) == "Start page specified for site not found: the-component::index.adoc"
    assert catalog.get_site_start_page() is None


def test_frozen_catalog_rejects_mutation_but_serves_lookups(catalog: ContentCatalog) -> None:
    page = add_page(catalog, "modules/ROOT/pages/the-page.adoc")
    catalog.add_component_version("the-component", "1.2.3")
    catalog.freeze()

    assert catalog.frozen
    with pytest.raises(CatalogFrozenError):
        add_page(catalog, "modules/ROOT/pages/late.adoc")
    with pytest.raises(CatalogFrozenError):
        catalog.add_component_version("the-component", "2.0")
    with pytest.raises(CatalogFrozenError):
        catalog.register_page_alias("alias.adoc", page)
    assert catalog.resolve_page("the-component::the-page.adoc") is page


def test_export_to_model_is_read_only(catalog: ContentCatalog) -> None:
    page = add_page(catalog, "modules/ROOT/pages/the-page.adoc")
    catalog.add_component_version("the-component", "1.2.3")

    view = catalog.export_to_model()

    assert isinstance(view, CatalogView)
    assert not hasattr(view, "add_file")
    assert not hasattr(view, "register_page_alias")
    assert view.get_pages() == [page]
    assert view.resolve_page("the-component::the-page.adoc") is page
    assert [component.name for component in view.get_components()] == ["the-component"]


def test_site_url_produces_absolute_urls() -> None:
    catalog = ContentCatalog(site_url="https://docs.example.org/")

    page = add_page(catalog, "modules/ROOT/pages/the-page.adoc")

    assert page.pub is not None
    assert page.pub.absolute_url == "https://docs.example.org/the-component/1.2.3/the-page.html"
