"""Copies static assets into the destination folder."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from bakehouse.parser.parser import file_extension
from bakehouse.util.files import is_hidden

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig
    from bakehouse.parser.registry import MarkupEngines

logger = logging.getLogger(__name__)


class Asset:
    """Copies the asset folder and non-content files of the content folder.

    Copy failures are collected in ``errors`` and don't stop the copy.
    """

    def __init__(self, config: BakeConfig) -> None:
        self.config = config
        self.errors: list[OSError] = []

    def copy(self, source: Path | None = None) -> int:
        """Copy ``source`` (the asset folder by default) into the destination."""
        source = source or self.config.asset_path
        if not source.is_dir():
            logger.warning("Skipping copying of assets: %s is not a folder", source)
            return 0
        return self._copy_tree(source, self.config.destination_path, lambda path: True)

    def copy_assets_from_content(self, engines: MarkupEngines) -> int:
        """Copy files of the content folder that no markup engine handles."""
        content = self.config.content_path
        if not content.is_dir():
            return 0
        return self._copy_tree(
            content,
            self.config.destination_path,
            lambda path: not engines.supports_extension(file_extension(path)),
        )

    def _copy_tree(self, source: Path, destination: Path, accept) -> int:
        copied = 0
        for entry in sorted(source.iterdir()):
            if is_hidden(entry):
                continue
            target = destination / entry.name
            if entry.is_dir():
                if (entry / self.config.ignore_file).exists():
                    continue
                copied += self._copy_tree(entry, target, accept)
            elif accept(entry):
                try:
                    target.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(entry, target)
                except OSError as exc:
                    logger.error("Failed to copy asset %s: %s", entry, exc)
                    self.errors.append(exc)
                    continue
                logger.debug("Copying [%s]... done!", entry)
                copied += 1
        return copied
