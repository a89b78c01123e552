"""HTML content files: the body is used as is."""

from bakehouse.parser.base import MarkupEngine


class RawMarkupEngine(MarkupEngine):
    pass
