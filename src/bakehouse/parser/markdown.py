"""Markdown content files."""

from __future__ import annotations

import logging

import frontmatter
from markdown_it import MarkdownIt

from bakehouse.parser.base import MarkupEngine, ParserContext

logger = logging.getLogger(__name__)

_FRONT_MATTER_FENCE = "---"


class MarkdownEngine(MarkupEngine):
    """Renders Markdown bodies with markdown-it.

    Besides the plain header, metadata may come from YAML front matter.
    """

    def __init__(self) -> None:
        self._renderers: dict[tuple[str, ...], MarkdownIt] = {}

    def _renderer(self, extensions: list[str]) -> MarkdownIt:
        key = tuple(extensions)
        md = self._renderers.get(key)
        if md is None:
            md = MarkdownIt("commonmark", {"html": True})
            for extension in extensions:
                try:
                    md.enable(extension)
                except ValueError:
                    logger.warning("Unknown markdown extension '%s'", extension)
            self._renderers[key] = md
        return md

    def process_header(self, context: ParserContext) -> None:
        if context.has_header or not context.body.lstrip().startswith(_FRONT_MATTER_FENCE):
            return
        post = frontmatter.loads(context.body)
        for key, value in post.metadata.items():
            self.store_header_value(context, str(key), value)
        context.body = post.content

    def process_body(self, context: ParserContext) -> None:
        context.body = self._renderer(context.config.markdown_extensions).render(context.body)
