"""Runs a full bake: crawl, render, copy assets."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from bakehouse.asset import Asset
from bakehouse.config.settings import BakeConfig
from bakehouse.context import BakeContext
from bakehouse.exceptions import BakeError, RenderingError

logger = logging.getLogger(__name__)


@dataclass
class BakeResult:
    rendered_count: int = 0
    errors: list[BaseException] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.errors


class Oven:
    """Bakes a site from its configuration."""

    def __init__(self, config_or_context: BakeConfig | BakeContext) -> None:
        if isinstance(config_or_context, BakeContext):
            self.context = config_or_context
        else:
            self.context = BakeContext.create(config_or_context)

    @property
    def config(self) -> BakeConfig:
        return self.context.config

    def _register_document_types(self) -> None:
        for doc_type in self.config.templates:
            self.context.document_types.add_document_type(doc_type)

    def _render_content(self, result: BakeResult) -> None:
        ctx = self.context
        for tool in ctx.rendering_tools.tools():
            try:
                result.rendered_count += tool.render(ctx.renderer, ctx.store, ctx.config, ctx.document_types)
            except RenderingError as exc:
                result.rendered_count += exc.rendered_count
                result.errors.append(exc)

    def bake(self, *, fail_on_error: bool = True) -> BakeResult:
        """Bake the site.

        Raises:
            BakeError: if any step failed and ``fail_on_error`` is set.
        """
        ctx = self.context
        result = BakeResult()
        start = time.perf_counter()

        ctx.store.startup()
        try:
            ctx.document_types.reset_document_types()
            ctx.extractors.reset()
            ctx.document_types.add_listener(ctx.listener)
            self._register_document_types()

            ctx.store.update_schema()
            ctx.store.update_and_clear_cache_if_needed(self.config.clear_cache, self.config.template_path)

            ctx.crawler.prune_removed_sources()
            ctx.crawler.crawl()
            ctx.crawler.crawl_data_files()

            self._render_content(result)

            asset = Asset(self.config)
            asset.copy()
            asset.copy_assets_from_content(ctx.markup_engines)
            result.errors.extend(asset.errors)
        finally:
            ctx.store.close()

        result.elapsed = time.perf_counter() - start
        logger.info("Baked %d items in %.0fms", result.rendered_count, result.elapsed * 1000)
        for error in result.errors:
            logger.error("%s", error)

        if result.errors and fail_on_error:
            raise BakeError(result.errors, result.rendered_count)
        return result
