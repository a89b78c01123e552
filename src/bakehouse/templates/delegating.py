"""Template engine that picks the real engine from the template's extension."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from bakehouse import __version__
from bakehouse.exceptions import RenderingError
from bakehouse.parser.parser import file_extension
from bakehouse.templates.base import TemplateEngine

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig
    from bakehouse.store.content_store import ContentStore
    from bakehouse.templates.engines import TemplateEngines
    from bakehouse.templates.model import TemplateModel
    from bakehouse.templates.registry import ModelExtractors

logger = logging.getLogger(__name__)


class DelegatingTemplateEngine(TemplateEngine):
    """Adds ``version`` and ``config`` to the model and dispatches by extension.

    A configured template that doesn't exist is looked up again with each
    recognized template extension (``post.j2`` -> ``post.jinja`` ...).
    """

    def __init__(
        self,
        config: BakeConfig,
        store: ContentStore,
        extractors: ModelExtractors,
        engines: TemplateEngines,
    ) -> None:
        super().__init__(config, store, extractors)
        self.engines = engines

    def resolve_template(self, template_name: str) -> str:
        template_folder = self.config.template_path
        if (template_folder / template_name).is_file():
            return template_name

        extension = file_extension(template_name)
        stem = template_name[: -len(extension) - 1] if extension else template_name
        for candidate_extension in sorted(self.engines.recognized_extensions()):
            candidate = f"{stem}.{candidate_extension}"
            if (template_folder / candidate).is_file():
                logger.debug("Using %s in place of missing template %s", candidate, template_name)
                return candidate
        return template_name

    def render_document(self, model: TemplateModel, template_name: str, writer: TextIO) -> None:
        model["version"] = __version__
        model["config"] = self.config.template_view()
        model.setdefault("renderer", self)

        resolved = self.resolve_template(template_name)
        if not (self.config.template_path / resolved).is_file():
            msg = f"Template {Path(template_name).name} not found in {self.config.template_path}"
            raise RenderingError(msg)

        extension = file_extension(resolved)
        engine = self.engines.get(extension)
        if engine is None:
            msg = f"Warning - No template engine found for template: {resolved}"
            raise RenderingError(msg)
        engine.render_document(model, resolved, writer)
