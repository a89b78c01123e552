"""YAML files, used for data files and YAML-described documents."""

from __future__ import annotations

from typing import Any

import yaml

from bakehouse.parser.base import MarkupEngine, ParserContext

_KEY_PREFIX = "bakehouse-"


class YamlEngine(MarkupEngine):
    """Top-level mapping keys become document fields; anything else goes under ``data``."""

    def process_header(self, context: ParserContext) -> None:
        loaded: Any = yaml.safe_load(context.text) or {}
        if isinstance(loaded, dict):
            for key, value in loaded.items():
                key = str(key)
                if key.startswith(_KEY_PREFIX):
                    key = key[len(_KEY_PREFIX):]
                self.store_header_value(context, key, value)
        else:
            context.document["data"] = loaded
        context.body = ""

    @staticmethod
    def has_header(lines: list[str], separator: str) -> bool:
        return False
