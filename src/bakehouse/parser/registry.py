"""Registry of markup engines keyed by file extension."""

from __future__ import annotations

from bakehouse.engines.loader import DescriptorEngineLoader, EngineUnavailable
from bakehouse.parser.base import MarkupEngine
from bakehouse.parser.error import ErrorEngine


class MarkupEngines(DescriptorEngineLoader[MarkupEngine]):
    """Unavailable engines are replaced by an :class:`ErrorEngine`."""

    namespace = "markup_engines"

    def on_unavailable(self, unavailable: EngineUnavailable) -> None:
        sentinel = ErrorEngine(unavailable.identifier)
        for key in unavailable.keys:
            self.register(key, sentinel)

    def recognized_extensions(self) -> set[str]:
        return self.keys()
