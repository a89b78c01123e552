"""Walks the content and data folders and feeds parsed records to the store."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote

from bakehouse.model.document import PUBLISHED_DATE, DocumentRecord, DocumentStatus
from bakehouse.parser.parser import file_extension
from bakehouse.util.files import as_uri_path, is_hidden, path_to_root, sha1_digest
from bakehouse.util.html import fix_image_source_urls

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig
    from bakehouse.model.document_types import DocumentTypeRegistry
    from bakehouse.parser.parser import Parser
    from bakehouse.parser.registry import MarkupEngines
    from bakehouse.store.content_store import ContentStore

logger = logging.getLogger(__name__)


class SourceStatus(Enum):
    NEW = "new"
    UPDATED = "updated"
    IDENTICAL = "identical"


class Crawler:
    """Crawls the content folder and stores every parsable file."""

    def __init__(
        self,
        config: BakeConfig,
        store: ContentStore,
        parser: Parser,
        engines: MarkupEngines,
        document_types: DocumentTypeRegistry,
    ) -> None:
        self.config = config
        self.store = store
        self.parser = parser
        self.engines = engines
        self.document_types = document_types

    # -- walking ---------------------------------------------------------------

    def _walk(self, folder: Path) -> list[Path]:
        """Files under ``folder`` the markup engines can read, in sorted order."""
        if not folder.is_dir():
            return []
        files: list[Path] = []
        for entry in sorted(folder.iterdir()):
            if is_hidden(entry):
                continue
            if entry.is_dir():
                if (entry / self.config.ignore_file).exists():
                    logger.debug("Ignoring folder %s", entry)
                    continue
                files.extend(self._walk(entry))
            elif entry.is_file() and self.engines.supports_extension(file_extension(entry)):
                files.append(entry)
        return files

    def crawl(self) -> int:
        """Crawl the content folder. Returns the number of records stored."""
        stored = 0
        for file in self._walk(self.config.content_path):
            if self._crawl_file(file):
                stored += 1
        for doc_type in self.document_types.get_document_types():
            count = self.store.get_document_count(doc_type)
            if count:
                logger.info("Parsed %d files of type: %s", count, doc_type)
        return stored

    def crawl_data_files(self) -> int:
        """Crawl the data folder; data records are stored as already rendered."""
        data_folder = self.config.data_path
        stored = 0
        for file in self._walk(data_folder):
            source_uri = self._source_uri(file)
            sha1 = sha1_digest(file)
            status = self._source_status(source_uri, sha1)
            if status is SourceStatus.IDENTICAL:
                continue
            if status is SourceStatus.UPDATED:
                self.store.delete_source(source_uri)

            record = self.parser.process_file(file, document_type=self.config.data_file_doctype)
            if record is None:
                continue
            record.uri = as_uri_path(file.relative_to(data_folder))
            record.source_uri = source_uri
            record.file = str(file)
            record.sha1 = sha1
            record.rendered = True
            self.store.add_document(record)
            stored += 1
        if stored:
            logger.info("Parsed %d data files", stored)
        return stored

    def prune_removed_sources(self) -> int:
        """Delete records whose source file no longer exists."""
        removed = 0
        for source_uri, file in self.store.get_sources():
            if file and not Path(file).exists():
                logger.info("Source %s was removed", source_uri)
                self.store.delete_source(source_uri)
                removed += 1
        return removed

    # -- single files ----------------------------------------------------------

    def _source_uri(self, file: Path) -> str:
        return as_uri_path(file.relative_to(self.config.source_path))

    def _source_status(self, source_uri: str, sha1: str) -> SourceStatus:
        stored = self.store.get_document_status(source_uri)
        if stored is None:
            return SourceStatus.NEW
        stored_sha1, rendered = stored
        if stored_sha1 != sha1 or not rendered:
            return SourceStatus.UPDATED
        return SourceStatus.IDENTICAL

    def _crawl_file(self, file: Path) -> bool:
        source_uri = self._source_uri(file)
        sha1 = sha1_digest(file)
        status = self._source_status(source_uri, sha1)
        if status is SourceStatus.IDENTICAL:
            logger.debug("Skipping unchanged %s", source_uri)
            return False
        if status is SourceStatus.UPDATED:
            self.store.delete_source(source_uri)

        record = self.parser.process_file(file)
        if record is None:
            return False
        if not self.document_types.contains(record.type or ""):
            logger.warning(
                "%s has an unknown document type '%s' and has been ignored!", source_uri, record.type
            )
            return False

        self._complete_record(record, file, source_uri, sha1)
        self.store.add_document(record)
        return True

    def _complete_record(self, record: DocumentRecord, file: Path, source_uri: str, sha1: str) -> None:
        relative = file.relative_to(self.config.content_path)
        uri, no_extension = self._build_uri(relative, record.type or "")

        rootpath = path_to_root(relative)
        if no_extension:
            rootpath += "../"

        record.uri = uri
        record.no_extension_uri = self._no_extension_uri(uri, record.type or "")
        record.rootpath = rootpath
        record.source_uri = source_uri
        record.file = str(file)
        record.sha1 = sha1
        record.rendered = False
        record.cached = True
        record.status = self._normalize_status(record)

        if self.config.img_path_update:
            fix_image_source_urls(record, self.config)

    def _build_uri(self, relative: Path, doc_type: str) -> tuple[str, bool]:
        extension = self.config.output_extension_for(doc_type)
        parent = as_uri_path(relative.parent)
        prefix = "" if parent == "." else f"{parent}/"
        stem = relative.name.rsplit(".", 1)[0] if file_extension(relative) else relative.name

        base = f"/{prefix}{quote(stem)}"
        if self._use_no_extension_uri(f"/{as_uri_path(relative)}"):
            return f"{base}/index{extension}".lstrip("/"), True
        return f"{base}{extension}".lstrip("/"), False

    def _use_no_extension_uri(self, uri: str) -> bool:
        prefix = self.config.uri_no_extension_prefix
        return bool(self.config.uri_no_extension and prefix and uri.startswith(prefix))

    def _no_extension_uri(self, uri: str, doc_type: str) -> str | None:
        suffix = f"index{self.config.output_extension_for(doc_type)}"
        if self.config.uri_no_extension and uri.endswith(f"/{suffix}"):
            return uri[: -len(suffix)]
        return None

    @staticmethod
    def _normalize_status(record: DocumentRecord) -> str | None:
        if record.status != PUBLISHED_DATE:
            return record.status
        if record.date is not None and record.date <= datetime.now():
            return DocumentStatus.PUBLISHED.value
        return DocumentStatus.DRAFT.value
