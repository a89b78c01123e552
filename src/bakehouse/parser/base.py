"""Base class for markup engines.

A content file may start with a plain header of ``key=value`` lines closed by
the header separator (``~~~~~~`` by default)::

    title=Hello
    type=post
    status=published
    ~~~~~~
    Body text.

Engines can read their own metadata (front matter, YAML keys) in
:meth:`MarkupEngine.process_header` and turn the body into HTML in
:meth:`MarkupEngine.process_body`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from bakehouse.model.document import DocumentRecord, DocumentStatus

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


@dataclass
class ParserContext:
    """State shared by the parse steps of one file."""

    file: Path
    lines: list[str]
    config: BakeConfig
    has_header: bool
    body: str = ""
    document: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class MarkupEngine:
    """Parses one kind of content file into a :class:`DocumentRecord`."""

    def parse(self, config: BakeConfig, file: Path, *, document_type: str | None = None) -> DocumentRecord | None:
        """Parse ``file``; return None when it must be skipped."""
        text = file.read_text(encoding=config.render_encoding)
        if text.startswith(_BOM):
            text = text[len(_BOM):]
        lines = text.splitlines()
        separator = config.header_separator

        context = ParserContext(
            file=file,
            lines=lines,
            config=config,
            has_header=self.has_header(lines, separator),
        )
        if context.has_header:
            self.process_plain_header(context)
        else:
            context.body = text

        self.process_header(context)

        document = context.document
        if document_type is not None:
            document["type"] = document_type
            document.setdefault("status", DocumentStatus.PUBLISHED.value)
        if document.get("date") is None:
            document["date"] = datetime.fromtimestamp(file.stat().st_mtime)
        if not document.get("status") and config.default_status:
            document["status"] = config.default_status
        if not document.get("type") and config.default_type:
            document["type"] = config.default_type

        if not document.get("type") or not document.get("status"):
            logger.warning("Unable to parse the header of %s: type or status is missing", file)
            return None

        if not self.validate(context):
            logger.error("Incomplete source file (%s) for markup engine: %s", file, type(self).__name__)
            return None

        self.process_body(context)
        document["body"] = context.body
        document["tags"] = self._normalize_tags(document.get("tags"), config.tag_sanitize)
        try:
            return DocumentRecord(**document)
        except ValidationError as exc:
            logger.error("Invalid header in %s, file skipped: %s", file, exc)
            return None

    # -- header ----------------------------------------------------------------

    @staticmethod
    def has_header(lines: list[str], separator: str) -> bool:
        """A plain header needs the separator, ``=`` on every line, and type/status keys."""
        status_found = type_found = False
        for line in lines:
            stripped = line.strip()
            if stripped == separator:
                return status_found and type_found
            if not stripped:
                continue
            if "=" not in stripped:
                return False
            key = stripped.split("=", 1)[0].strip().lstrip(_BOM)
            if key == "status":
                status_found = True
            elif key == "type":
                type_found = True
        return False

    def process_plain_header(self, context: ParserContext) -> None:
        separator = context.config.header_separator
        for index, line in enumerate(context.lines):
            stripped = line.strip()
            if stripped == separator:
                context.body = "\n".join(context.lines[index + 1:])
                return
            if "=" not in stripped:
                continue
            key, value = stripped.split("=", 1)
            self.store_header_value(context, key.strip().lstrip(_BOM), value.strip())

    def store_header_value(self, context: ParserContext, key: str, value: Any) -> None:
        if key == "date" and isinstance(value, str):
            context.document[key] = self._parse_date(value, context)
        elif key == "tags" and isinstance(value, str):
            context.document[key] = [tag.strip() for tag in value.split(",")]
        elif isinstance(value, str) and value.startswith("{") and value.endswith("}"):
            try:
                context.document[key] = json.loads(value)
            except json.JSONDecodeError:
                logger.warning("Header value of '%s' in %s is not valid JSON", key, context.file)
                context.document[key] = value
        else:
            context.document[key] = value

    def _parse_date(self, value: str, context: ParserContext) -> datetime | None:
        try:
            return datetime.strptime(value, context.config.date_format)
        except ValueError:
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                logger.error("Unable to parse date '%s' in %s", value, context.file)
                return None

    @staticmethod
    def _normalize_tags(tags: Any, sanitize: bool) -> list[str]:
        if tags is None:
            return []
        if isinstance(tags, str):
            tags = tags.split(",")
        normalized = []
        for tag in tags:
            tag = str(tag).strip()
            if sanitize:
                tag = tag.replace(" ", "-")
            if tag:
                normalized.append(tag)
        return normalized

    # -- engine hooks ----------------------------------------------------------

    def process_header(self, context: ParserContext) -> None:
        """Read engine-specific metadata. No-op by default."""

    def validate(self, context: ParserContext) -> bool:
        return True

    def process_body(self, context: ParserContext) -> None:
        """Transform ``context.body`` in place. Passes it through by default."""
