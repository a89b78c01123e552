from datetime import datetime

import pytest

from bakehouse.exceptions import RenderingError
from bakehouse.rendering.renderer import Renderer
from bakehouse.rendering.tools import (
    ArchiveRenderer,
    Error404Renderer,
    FeedRenderer,
    IndexRenderer,
    RenderingTools,
    SitemapRenderer,
    TagsRenderer,
)
from bakehouse.templates.delegating import DelegatingTemplateEngine
from bakehouse.templates.engines import TemplateEngines


@pytest.fixture
def renderer(config, store, extractors):
    engine = DelegatingTemplateEngine(config, store, extractors, TemplateEngines(config, store, extractors))
    return Renderer(config, store, engine)


def _read(config, relative):
    return (config.destination_path / relative).read_text(encoding="utf-8")


def test_document_is_written_at_its_uri(renderer, config, make_record):
    renderer.render(make_record("Hello", body="<p>Hi</p>"))

    output = _read(config, "post/hello.html")
    assert "<h1>Hello</h1>" in output
    assert "<p>Hi</p>" in output


def test_drafts_get_the_draft_suffix_and_replace_stale_output(renderer, config, make_record):
    renderer.render(make_record("Hello"))
    assert (config.destination_path / "post/hello.html").exists()

    renderer.render(make_record("Hello", status="draft"))

    assert not (config.destination_path / "post/hello.html").exists()
    assert (config.destination_path / "post/hello-draft.html").exists()


def test_per_type_output_extension(renderer, config, make_record):
    config.output_extensions = {"page": ".htm"}

    renderer.render(make_record("About", doc_type="page"))

    assert (config.destination_path / "page/about.htm").exists()


def test_document_without_template_fails(renderer, make_record):
    with pytest.raises(RenderingError, match="No template configured for 'recipe'"):
        renderer.render(make_record("Soup", doc_type="recipe"))


def test_pagination_with_no_posts_renders_a_single_index(renderer, config):
    config.index_paginate = True
    config.index_posts_per_page = 1

    renderer.render_index_paging(config.index_file)

    files = sorted(p.relative_to(config.destination_path).as_posix() for p in config.destination_path.rglob("*"))
    assert files == ["index.html"]


def test_pagination_splits_posts_across_pages(renderer, config, store, make_record):
    config.index_posts_per_page = 2
    for day in range(1, 6):
        store.add_document(make_record(f"Post {day}", date=datetime(2024, 1, day)))

    renderer.render_index_paging(config.index_file)

    first, second, third = _read(config, "index.html"), _read(config, "2/index.html"), _read(config, "3/index.html")
    assert first.startswith("Post 5;Post 4;")
    assert "page=1 of=3 next=2/ prev=None root=" in first
    assert second.startswith("Post 3;Post 2;")
    assert "page=2 of=3 next=3/ prev= root=../" in second
    assert third.startswith("Post 1;")
    assert "next=None prev=2/ root=../" in third


def test_feed_is_capped(renderer, config, store, make_record):
    config.feed_max_posts = 2
    for day in range(1, 5):
        store.add_document(make_record(f"Post {day}", date=datetime(2024, 1, day)))

    renderer.render_feed(config.feed_file)

    feed = _read(config, "feed.xml")
    assert feed.count("<entry>") == 2
    assert "<entry>Post 4</entry><entry>Post 3</entry>" in feed


def test_tags_render_one_page_per_tag(renderer, config, store, make_record):
    config.render_tagsindex = True
    store.add_document(make_record("Py", tags=("python",)))
    store.add_document(make_record("Db", tags=("duckdb", "python")))

    count = renderer.render_tags(config.tag_path)

    assert count == 3
    assert _read(config, "tags/python.html").startswith("python:")
    assert "root=../" in _read(config, "tags/duckdb.html")
    assert _read(config, "tags/index.html").strip() == "duckdb=tags/duckdb.html;python=tags/python.html;"


def test_tag_pages_cannot_escape_the_destination(renderer, config, store, make_record, tmp_path):
    store.add_document(make_record("Sneaky", tags=("../../../escaped", "python")))

    with pytest.raises(RenderingError) as excinfo:
        renderer.render_tags(config.tag_path)

    assert len(excinfo.value.errors) == 1
    assert "outside of the destination folder" in excinfo.value.errors[0]
    assert excinfo.value.rendered_count == 1
    assert not any(tmp_path.rglob("escaped.html"))
    assert (config.destination_path / "tags/python.html").exists()


def test_tag_failures_are_aggregated(renderer, config, store, make_record, site):
    (site / "templates" / "tags.j2").write_text("{{ 1 / 0 }}", encoding="utf-8")
    store.add_document(make_record("Py", tags=("python", "duckdb")))

    with pytest.raises(RenderingError) as excinfo:
        renderer.render_tags(config.tag_path)

    assert str(excinfo.value).startswith("Failed to render tags. Cause(s):\n")
    assert len(excinfo.value.errors) == 2


@pytest.mark.parametrize(
    ("tool", "flag", "output"),
    [
        (IndexRenderer, "render_index", "index.html"),
        (ArchiveRenderer, "render_archive", "archive.html"),
        (FeedRenderer, "render_feed", "feed.xml"),
        (SitemapRenderer, "render_sitemap", "sitemap.xml"),
        (Error404Renderer, "render_error404", "404.html"),
    ],
)
def test_single_file_tools_respect_their_flag(tool, flag, output, renderer, config, store, document_types):
    setattr(config, flag, False)
    assert tool().render(renderer, store, config, document_types) == 0
    assert not (config.destination_path / output).exists()

    setattr(config, flag, True)
    assert tool().render(renderer, store, config, document_types) == 1
    assert (config.destination_path / output).exists()


def test_single_file_tool_wraps_failures(renderer, config, store, document_types, site):
    (site / "templates" / "archive.j2").unlink()

    with pytest.raises(RenderingError, match="Failed to render archive"):
        ArchiveRenderer().render(renderer, store, config, document_types)


def test_tags_tool_returns_rendered_count(renderer, config, store, document_types, make_record):
    store.add_document(make_record("Py", tags=("python",)))

    assert TagsRenderer().render(renderer, store, config, document_types) == 1
    config.render_tags = False
    assert TagsRenderer().render(renderer, store, config, document_types) == 0


def test_rendering_tools_come_from_descriptors():
    tools = RenderingTools()

    assert tools.keys() == {
        "documents",
        "index",
        "archive",
        "feed",
        "sitemap",
        "tags",
        "error404",
    }
    assert [type(tool).__name__ for tool in tools.tools()][:2] == ["DocumentsRenderer", "IndexRenderer"]
