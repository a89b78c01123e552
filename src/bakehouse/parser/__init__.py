"""Markup engines and the file parser."""

from bakehouse.parser.base import MarkupEngine, ParserContext
from bakehouse.parser.parser import Parser
from bakehouse.parser.registry import MarkupEngines

__all__ = ["MarkupEngine", "MarkupEngines", "Parser", "ParserContext"]
