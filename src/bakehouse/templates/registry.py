"""Registry of model extractors keyed by template variable."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from bakehouse.engines.loader import DescriptorEngineLoader
from bakehouse.exceptions import NoModelExtractorError
from bakehouse.templates.extractors import (
    ExtractorEnvironment,
    ModelExtractor,
    PublishedCustomExtractor,
    TypedDocumentsExtractor,
)

if TYPE_CHECKING:
    from pathlib import Path

    from bakehouse.config.settings import BakeConfig
    from bakehouse.model.document_types import DocumentTypeRegistry
    from bakehouse.store.content_store import ContentStore
    from bakehouse.templates.base import ModelAdapter
    from bakehouse.templates.model import TemplateModel

logger = logging.getLogger(__name__)


class ModelExtractors(DescriptorEngineLoader[ModelExtractor]):
    """Extractors that cannot be loaded are skipped."""

    namespace = "model_extractors"

    def __init__(
        self,
        config: BakeConfig,
        document_types: DocumentTypeRegistry,
        *,
        extra_descriptors: tuple[Path, ...] = (),
    ) -> None:
        super().__init__(extra_descriptors=extra_descriptors)
        self.environment = ExtractorEnvironment(config, document_types)

    def extract_and_transform(
        self, store: ContentStore, key: str, model: TemplateModel, adapter: ModelAdapter
    ) -> Any:
        extractor = self.get(key)
        if extractor is None:
            raise NoModelExtractorError(key)
        return adapter.adapt(key, extractor.get(store, model, key, self.environment))

    def register_extractors_for_custom_types(self, doc_type: str) -> None:
        """Add ``<type>s`` and ``published_<type>s`` for a new document type."""
        self.ensure_loaded()
        plural = self.environment.document_types.pluralize(doc_type)
        # A plural that is already a key (the "tag" type vs "tags") keeps
        # the existing extractor and gets no published_<plural> either.
        if plural in self._engines:
            return
        logger.debug("Registering extractors for document type '%s'", doc_type)
        self.register(plural, TypedDocumentsExtractor())
        self.register(f"published_{plural}", PublishedCustomExtractor(doc_type))


class ModelExtractorsDocumentTypeListener:
    """Registers collection extractors whenever a document type is added."""

    def __init__(self, extractors: ModelExtractors) -> None:
        self.extractors = extractors

    def __call__(self, doc_type: str) -> None:
        self.extractors.register_extractors_for_custom_types(doc_type)
