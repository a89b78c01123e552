"""Shared fixtures: a throwaway site tree, an in-memory store and fresh registries."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import ibis
import pytest

from bakehouse.config import BakeConfig, load_config
from bakehouse.model.document import DocumentRecord
from bakehouse.model.document_types import DocumentTypeRegistry
from bakehouse.store.content_store import ContentStore
from bakehouse.templates.registry import ModelExtractors

SITE_TEMPLATES: dict[str, str] = {
    "index.j2": (
        "{% for post in published_posts %}{{ post.title }};{% endfor %}\n"
        "page={{ currentPageNumber }} of={{ numberOfPages }} "
        "next={{ nextFileName }} prev={{ previousFileName }} root={{ content.rootpath }}\n"
    ),
    "post.j2": (
        "<h1>{{ content.title }}</h1>\n"
        "{{ content.body }}\n"
        "next={{ content.next_content.title if content.next_content else '' }}\n"
        "previous={{ content.previous_content.title if content.previous_content else '' }}\n"
        "root={{ content.rootpath }}\n"
    ),
    "page.j2": "<h1>{{ content.title }}</h1>\n{{ content.body }}\n",
    "archive.j2": "{% for post in published_posts %}{{ post.uri }}\n{% endfor %}",
    "feed.j2": (
        '<feed updated="{{ published_date | isoformat }}">'
        "{% for post in published_posts %}<entry>{{ post.title }}</entry>{% endfor %}</feed>\n"
    ),
    "sitemap.j2": "{% for doc in published_content %}<url>{{ config.site_host }}/{{ doc.uri }}</url>\n{% endfor %}",
    "tags.j2": "{{ tag }}:{% for post in tag_posts %}{{ post.title }};{% endfor %} root={{ content.rootpath }}\n",
    "tagsindex.j2": "{% for t in tags %}{{ t.name }}={{ t.uri }};{% endfor %}\n",
    "error404.j2": "not found\n",
}


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("BAKEHOUSE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A site source tree with content, assets and a full set of templates."""
    source = tmp_path / "site"
    (source / "content").mkdir(parents=True)
    (source / "assets").mkdir()
    templates = source / "templates"
    templates.mkdir()
    for name, body in SITE_TEMPLATES.items():
        (templates / name).write_text(body, encoding="utf-8")
    return source


@pytest.fixture
def write_file() -> Callable[..., Path]:
    def _write(root: Path, relative: str, text: str) -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config(site: Path) -> BakeConfig:
    return load_config(site, site / "output")


@pytest.fixture
def store() -> Iterator[ContentStore]:
    content_store = ContentStore(ibis.duckdb.connect(":memory:"))
    content_store.update_schema()
    yield content_store
    content_store.close()


@pytest.fixture
def document_types() -> DocumentTypeRegistry:
    return DocumentTypeRegistry()


@pytest.fixture
def extractors(config: BakeConfig, document_types: DocumentTypeRegistry) -> ModelExtractors:
    return ModelExtractors(config, document_types)


@pytest.fixture
def make_record() -> Callable[..., DocumentRecord]:
    """Build a stored-looking record; the slug derives from the title."""

    def _make(
        title: str,
        *,
        doc_type: str = "post",
        status: str = "published",
        date: datetime | None = None,
        tags: tuple[str, ...] = (),
        **extra: Any,
    ) -> DocumentRecord:
        slug = title.lower().replace(" ", "-")
        return DocumentRecord(
            title=title,
            type=doc_type,
            status=status,
            date=date or datetime(2024, 1, 1),
            tags=list(tags),
            uri=f"{doc_type}/{slug}.html",
            source_uri=f"content/{doc_type}/{slug}.md",
            file=f"/nonexistent/{doc_type}/{slug}.md",
            **extra,
        )

    return _make
