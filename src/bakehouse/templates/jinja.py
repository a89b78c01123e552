"""Jinja2 template engine."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, TextIO

from jinja2 import Environment, FileSystemLoader
from jinja2.runtime import Context, missing

from bakehouse.templates import filters
from bakehouse.templates.base import TemplateEngine

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig
    from bakehouse.store.content_store import ContentStore
    from bakehouse.templates.model import TemplateModel
    from bakehouse.templates.registry import ModelExtractors

_MODEL_KEY = "__bakehouse_model__"


class LazyModelContext(Context):
    """Context that falls back to the bound template model for unknown names."""

    def resolve_or_missing(self, key: str) -> Any:
        value = super().resolve_or_missing(key)
        if value is not missing:
            return value
        model = self.parent.get(_MODEL_KEY)
        if model is None:
            return missing
        try:
            return model[key]
        except KeyError:
            return missing


class JinjaModelAdapter:
    """Sets become sorted lists so templates iterate them deterministically."""

    def adapt(self, key: str, value: Any) -> Any:
        if isinstance(value, (set, frozenset)):
            return sorted(value)
        return value


class JinjaTemplateEngine(TemplateEngine):
    """Renders ``.j2`` templates from the site's template folder."""

    adapter = JinjaModelAdapter()

    def __init__(self, config: BakeConfig, store: ContentStore, extractors: ModelExtractors) -> None:
        super().__init__(config, store, extractors)
        self.env = Environment(
            loader=FileSystemLoader(config.template_path),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.context_class = LazyModelContext
        self._register_filters()
        # Lazy lookups query the shared store connection.
        self._lock = threading.Lock()

    def _register_filters(self) -> None:
        self.env.filters["format_date"] = filters.format_date
        self.env.filters["rfc822"] = filters.rfc822
        self.env.filters["isoformat"] = filters.isoformat

    def render_document(self, model: TemplateModel, template_name: str, writer: TextIO) -> None:
        model.bind(self.store, self.extractors, self.adapter)
        with self._lock:
            template = self.env.get_template(template_name)
            writer.write(template.render({**model.data, _MODEL_KEY: model}))
