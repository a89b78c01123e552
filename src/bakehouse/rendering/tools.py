"""Rendering tools run by the oven.

Each tool renders one kind of output and returns how many files it wrote.
Tools are looked up through the ``rendering_tools`` descriptor namespace, so
third-party packages can add their own.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bakehouse.engines.loader import DescriptorEngineLoader
from bakehouse.exceptions import RenderingError

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig
    from bakehouse.model.document import DocumentRecord, NavigationLink
    from bakehouse.model.document_types import DocumentTypeRegistry
    from bakehouse.rendering.renderer import Renderer
    from bakehouse.store.content_store import ContentStore

logger = logging.getLogger(__name__)


class RenderingTool:
    def render(
        self,
        renderer: Renderer,
        store: ContentStore,
        config: BakeConfig,
        document_types: DocumentTypeRegistry,
    ) -> int:
        raise NotImplementedError


class RenderingTools(DescriptorEngineLoader[RenderingTool]):
    namespace = "rendering_tools"

    def tools(self) -> list[RenderingTool]:
        """Distinct tools in registration order."""
        seen: dict[int, RenderingTool] = {}
        for _, tool in self.items():
            seen.setdefault(id(tool), tool)
        return list(seen.values())


def _key(document: DocumentRecord) -> str | None:
    return document.source_uri or document.uri


def _newer_published(documents: list[DocumentRecord], index: int) -> NavigationLink | None:
    for candidate in reversed(documents[:index]):
        if candidate.is_published:
            return candidate.navigation_link()
    return None


def _older_published(documents: list[DocumentRecord], index: int) -> NavigationLink | None:
    for candidate in documents[index + 1:]:
        if candidate.is_published:
            return candidate.navigation_link()
    return None


class DocumentsRenderer(RenderingTool):
    """Renders every unrendered document with next/previous navigation.

    Documents are handled per type, newest first. Neighbours are looked up
    in every stored document of the type, so documents added to an already
    baked site link to the ones rendered before. ``next_content`` points to
    the nearest newer published document and ``previous_content`` to the
    nearest older one; drafts are never linked. Failures don't stop the
    loop: they are raised together once every document was attempted.
    """

    def render(self, renderer, store, config, document_types):
        if not config.render_documents:
            return 0
        rendered = 0
        errors: list[str] = []
        for doc_type in document_types.get_document_types():
            timeline = store.get_all_content(doc_type)
            positions = {_key(doc): index for index, doc in enumerate(timeline)}
            for document in store.get_unrendered_content(doc_type):
                index = positions[_key(document)]
                document.next_content = _newer_published(timeline, index)
                document.previous_content = _older_published(timeline, index)
                try:
                    renderer.render(document)
                except Exception as exc:
                    errors.append(str(exc) or type(exc).__name__)
                    continue
                store.mark_content_as_rendered(document)
                rendered += 1

        if errors:
            raise RenderingError("\n".join(errors), errors, rendered)
        return rendered


class _SingleFileRenderer(RenderingTool):
    flag = ""

    def render(self, renderer, store, config, document_types):
        if not getattr(config, self.flag):
            return 0
        try:
            self.render_file(renderer, config)
        except RenderingError:
            raise
        except Exception as exc:
            raise RenderingError(str(exc)) from exc
        return 1

    def render_file(self, renderer: Renderer, config: BakeConfig) -> None:
        raise NotImplementedError


class IndexRenderer(_SingleFileRenderer):
    flag = "render_index"

    def render_file(self, renderer, config):
        if config.index_paginate:
            renderer.render_index_paging(config.index_file)
        else:
            renderer.render_index(config.index_file)


class ArchiveRenderer(_SingleFileRenderer):
    flag = "render_archive"

    def render_file(self, renderer, config):
        renderer.render_archive(config.archive_file)


class FeedRenderer(_SingleFileRenderer):
    flag = "render_feed"

    def render_file(self, renderer, config):
        renderer.render_feed(config.feed_file)


class SitemapRenderer(_SingleFileRenderer):
    flag = "render_sitemap"

    def render_file(self, renderer, config):
        renderer.render_sitemap(config.sitemap_file)


class Error404Renderer(_SingleFileRenderer):
    flag = "render_error404"

    def render_file(self, renderer, config):
        renderer.render_error404(config.error404_file)


class TagsRenderer(RenderingTool):
    def render(self, renderer, store, config, document_types):
        if not config.render_tags:
            return 0
        try:
            return renderer.render_tags(config.tag_path)
        except RenderingError:
            raise
        except Exception as exc:
            raise RenderingError(str(exc)) from exc
