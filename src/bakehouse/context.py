"""Explicit container for the collaborators of one bake."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from bakehouse.crawler import Crawler
from bakehouse.model.document_types import DocumentTypeRegistry
from bakehouse.parser.parser import Parser
from bakehouse.parser.registry import MarkupEngines
from bakehouse.rendering.renderer import Renderer
from bakehouse.rendering.tools import RenderingTools
from bakehouse.store.content_store import ContentStore
from bakehouse.templates.delegating import DelegatingTemplateEngine
from bakehouse.templates.engines import TemplateEngines
from bakehouse.templates.registry import ModelExtractors, ModelExtractorsDocumentTypeListener

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig


@dataclass
class BakeContext:
    """Registries, store and pipeline stages for a site.

    Registries live here instead of in module globals, so independent bakes
    in one process don't share state.
    """

    config: BakeConfig
    store: ContentStore
    document_types: DocumentTypeRegistry
    markup_engines: MarkupEngines
    extractors: ModelExtractors
    template_engines: TemplateEngines
    rendering_tools: RenderingTools
    listener: ModelExtractorsDocumentTypeListener
    parser: Parser
    crawler: Crawler
    renderer: Renderer

    @classmethod
    def create(
        cls,
        config: BakeConfig,
        store: ContentStore | None = None,
        *,
        extra_descriptors: dict[str, tuple[Path, ...]] | None = None,
    ) -> BakeContext:
        """Wire up every collaborator for ``config``.

        ``extra_descriptors`` maps a registry namespace (``markup_engines``,
        ``template_engines``, ``model_extractors``, ``rendering_tools``) to
        additional descriptor files.
        """
        extras = extra_descriptors or {}
        store = store or ContentStore.from_config(config)

        markup_engines = MarkupEngines(extra_descriptors=extras.get("markup_engines", ()))
        document_types = DocumentTypeRegistry()
        extractors = ModelExtractors(
            config, document_types, extra_descriptors=extras.get("model_extractors", ())
        )
        template_engines = TemplateEngines(
            config, store, extractors, extra_descriptors=extras.get("template_engines", ())
        )
        document_types.attach_loader(markup_engines)
        document_types.attach_loader(template_engines)
        document_types.attach_loader(extractors)
        rendering_tools = RenderingTools(extra_descriptors=extras.get("rendering_tools", ()))

        parser = Parser(config, markup_engines)
        engine = DelegatingTemplateEngine(config, store, extractors, template_engines)
        return cls(
            config=config,
            store=store,
            document_types=document_types,
            markup_engines=markup_engines,
            extractors=extractors,
            template_engines=template_engines,
            rendering_tools=rendering_tools,
            listener=ModelExtractorsDocumentTypeListener(extractors),
            parser=parser,
            crawler=Crawler(config, store, parser, markup_engines, document_types),
            renderer=Renderer(config, store, engine),
        )
