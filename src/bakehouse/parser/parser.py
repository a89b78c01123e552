"""Dispatch of content files to markup engines."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from bakehouse.model.document import DocumentRecord
from bakehouse.parser.registry import MarkupEngines

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig

logger = logging.getLogger(__name__)


def file_extension(path: Path | str) -> str:
    """Text after the last dot of the file name; empty for dotfiles and bare names."""
    name = Path(path).name
    stem, dot, extension = name.rpartition(".")
    if not dot or not stem:
        return ""
    return extension


class Parser:
    """Parses a file with the markup engine registered for its extension."""

    def __init__(self, config: BakeConfig, engines: MarkupEngines) -> None:
        self.config = config
        self.engines = engines

    def process_file(self, file: Path, *, document_type: str | None = None) -> DocumentRecord | None:
        engine = self.engines.get(file_extension(file))
        if engine is None:
            logger.error("Unable to find a suitable markup engine for %s", file)
            return None
        return engine.parse(self.config, file, document_type=document_type)
