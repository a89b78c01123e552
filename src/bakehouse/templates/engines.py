"""Registry of template engines keyed by template file extension."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bakehouse.engines.loader import DescriptorEngineLoader
from bakehouse.templates.base import TemplateEngine

if TYPE_CHECKING:
    from pathlib import Path

    from bakehouse.config.settings import BakeConfig
    from bakehouse.store.content_store import ContentStore
    from bakehouse.templates.registry import ModelExtractors


class TemplateEngines(DescriptorEngineLoader[TemplateEngine]):
    """Engines are built with the site configuration, store and extractors."""

    namespace = "template_engines"

    def __init__(
        self,
        config: BakeConfig,
        store: ContentStore,
        extractors: ModelExtractors,
        *,
        extra_descriptors: tuple[Path, ...] = (),
    ) -> None:
        super().__init__(
            factory=lambda cls: cls(config, store, extractors),
            extra_descriptors=extra_descriptors,
        )

    def recognized_extensions(self) -> set[str]:
        return self.keys()
