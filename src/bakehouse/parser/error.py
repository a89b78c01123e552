"""Stand-in for markup engines that could not be loaded."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from bakehouse.exceptions import EngineUnavailableError
from bakehouse.parser.base import MarkupEngine

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig
    from bakehouse.model.document import DocumentRecord


class ErrorEngine(MarkupEngine):
    """Fails when a file that needs the missing engine is parsed."""

    def __init__(self, engine_name: str) -> None:
        self.engine_name = engine_name

    def parse(self, config: BakeConfig, file: Path, *, document_type: str | None = None) -> DocumentRecord | None:
        raise EngineUnavailableError(self.engine_name, str(file))
