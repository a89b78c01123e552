"""Template engine contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, TextIO

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig
    from bakehouse.store.content_store import ContentStore
    from bakehouse.templates.model import TemplateModel
    from bakehouse.templates.registry import ModelExtractors


class ModelAdapter(Protocol):
    """Converts extracted values into what a template engine can consume."""

    def adapt(self, key: str, value: Any) -> Any: ...


class IdentityAdapter:
    def adapt(self, key: str, value: Any) -> Any:
        return value


class TemplateEngine(ABC):
    """Renders a model through a named template into a writer."""

    adapter: ModelAdapter = IdentityAdapter()

    def __init__(self, config: BakeConfig, store: ContentStore, extractors: ModelExtractors) -> None:
        self.config = config
        self.store = store
        self.extractors = extractors

    @abstractmethod
    def render_document(self, model: TemplateModel, template_name: str, writer: TextIO) -> None:
        """Render ``template_name`` with ``model`` into ``writer``."""
