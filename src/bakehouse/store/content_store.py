"""DuckDB-backed content store.

Records are kept as JSON next to the handful of columns the pipeline filters
and orders on. Writes go through raw SQL on the DuckDB connection; reads are
Ibis expressions.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Collection
from pathlib import Path
from typing import TYPE_CHECKING

import ibis
from ibis.expr.types import Table

from bakehouse.model.document import DocumentRecord, DocumentStatus

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig

logger = logging.getLogger(__name__)

_PUBLISHED = DocumentStatus.PUBLISHED.value
_TEMPLATE_SIGNATURE_KEY = "templates"


def folder_signature(folder: Path) -> str:
    """SHA-1 over the relative paths and bytes of every file under ``folder``."""
    digest = hashlib.sha1()  # noqa: S324
    if folder.is_dir():
        for path in sorted(p for p in folder.rglob("*") if p.is_file()):
            digest.update(path.relative_to(folder).as_posix().encode("utf-8"))
            digest.update(path.read_bytes())
    return digest.hexdigest()


class ContentStore:
    """Document storage for one site."""

    def __init__(self, conn: ibis.BaseBackend | None = None, *, database: str | Path = ":memory:") -> None:
        if conn is not None and not hasattr(conn, "con"):
            msg = "ContentStore requires a raw DuckDB connection via the '.con' attribute."
            raise ValueError(msg)
        self.conn = conn
        self.database = database
        self.table_name = "documents"
        self.signature_table = "signatures"
        self._seq = 0

    @classmethod
    def from_config(cls, config: BakeConfig) -> ContentStore:
        if config.db_store == "file":
            path = config.abs_db_path
            path.parent.mkdir(parents=True, exist_ok=True)
            return cls(database=path)
        return cls()

    # -- lifecycle -------------------------------------------------------------

    def startup(self) -> None:
        if self.conn is None:
            self.conn = ibis.duckdb.connect(str(self.database))
        self.update_schema()

    def close(self) -> None:
        if self.conn is not None:
            self.conn.disconnect()
            self.conn = None

    def update_schema(self) -> None:
        """Create the tables if they don't exist."""
        con = self._raw()
        con.execute(f"""
            CREATE TABLE IF NOT EXISTS {self.table_name} (
                source_uri VARCHAR PRIMARY KEY,
                uri VARCHAR,
                "type" VARCHAR,
                status VARCHAR,
                "date" TIMESTAMP,
                rendered BOOLEAN,
                cached BOOLEAN,
                sha1 VARCHAR,
                seq BIGINT,
                tags VARCHAR[],
                json_data JSON
            )
        """)
        con.execute(f"""
            CREATE TABLE IF NOT EXISTS {self.signature_table} (
                key VARCHAR PRIMARY KEY,
                sha1 VARCHAR
            )
        """)
        row = con.execute(f"SELECT coalesce(max(seq), 0) FROM {self.table_name}").fetchone()
        self._seq = int(row[0]) if row else 0

    def drop(self) -> None:
        con = self._raw()
        con.execute(f"DROP TABLE IF EXISTS {self.table_name}")
        con.execute(f"DROP TABLE IF EXISTS {self.signature_table}")

    def _raw(self):
        if self.conn is None:
            msg = "ContentStore has not been started"
            raise RuntimeError(msg)
        return self.conn.con

    def _table(self) -> Table:
        if self.conn is None:
            msg = "ContentStore has not been started"
            raise RuntimeError(msg)
        return self.conn.table(self.table_name)

    # -- writes ----------------------------------------------------------------

    def add_document(self, record: DocumentRecord) -> DocumentRecord:
        """Insert or replace a record, keyed by its source URI."""
        self._seq += 1
        self._upsert(record, self._seq)
        return record

    def _upsert(self, record: DocumentRecord, seq: int) -> None:
        key = record.source_uri or record.uri
        if key is None:
            msg = "A document needs a source_uri or uri to be stored"
            raise ValueError(msg)
        query = f"""
            INSERT OR REPLACE INTO {self.table_name}
                (source_uri, uri, "type", status, "date", rendered, cached, sha1, seq, tags, json_data)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """
        self._raw().execute(
            query,
            [
                key,
                record.uri,
                record.type,
                record.status,
                record.date,
                record.rendered,
                record.cached,
                record.sha1,
                seq,
                list(record.tags),
                record.model_dump_json(),
            ],
        )

    def mark_content_as_rendered(self, record: DocumentRecord) -> None:
        record.rendered = True
        key = record.source_uri or record.uri
        row = self._raw().execute(
            f"SELECT seq FROM {self.table_name} WHERE source_uri = ?", [key]
        ).fetchone()
        if row is None:
            self.add_document(record)
            return
        self._upsert(record, int(row[0]))

    def delete_content(self, uri: str) -> None:
        self._raw().execute(f"DELETE FROM {self.table_name} WHERE uri = ?", [uri])

    def delete_source(self, source_uri: str) -> None:
        self._raw().execute(f"DELETE FROM {self.table_name} WHERE source_uri = ?", [source_uri])

    def delete_all_by_doc_type(self, doc_type: str) -> None:
        self._raw().execute(f'DELETE FROM {self.table_name} WHERE "type" = ?', [doc_type])

    def delete_all(self) -> None:
        self._raw().execute(f"DELETE FROM {self.table_name}")

    def update_and_clear_cache_if_needed(self, clear_cache: bool, template_folder: Path) -> bool:
        """Drop cached documents when asked to or when the templates changed.

        Returns True when the cache was cleared.
        """
        signature = folder_signature(template_folder)
        row = self._raw().execute(
            f"SELECT sha1 FROM {self.signature_table} WHERE key = ?", [_TEMPLATE_SIGNATURE_KEY]
        ).fetchone()
        stored = row[0] if row else None

        needs_clear = clear_cache or stored != signature
        if needs_clear:
            if stored is not None and stored != signature:
                logger.info("Templates changed, clearing the content cache")
            self.delete_all()
            self._raw().execute(
                f"INSERT OR REPLACE INTO {self.signature_table} (key, sha1) VALUES (?, ?)",
                [_TEMPLATE_SIGNATURE_KEY, signature],
            )
        return needs_clear

    # -- reads -----------------------------------------------------------------

    def _hydrate(self, json_val: str | dict) -> DocumentRecord:
        validator = (
            DocumentRecord.model_validate
            if isinstance(json_val, dict)
            else DocumentRecord.model_validate_json
        )
        return validator(json_val)

    def _fetch(self, query: Table, *, offset: int = 0, limit: int | None = None) -> list[DocumentRecord]:
        query = query.order_by([ibis.desc(query["date"]), ibis.desc(query["seq"])])
        if limit is not None:
            query = query.limit(limit, offset=offset)
        elif offset:
            query = query.limit(None, offset=offset)
        result = query.select("json_data").execute()
        return [self._hydrate(row["json_data"]) for _, row in result.iterrows()]

    def get_all_content(self, doc_type: str) -> list[DocumentRecord]:
        t = self._table()
        return self._fetch(t.filter(t["type"] == doc_type))

    def get_published_content(self, doc_type: str) -> list[DocumentRecord]:
        t = self._table()
        return self._fetch(t.filter(t["type"] == doc_type, t.status == _PUBLISHED))

    def get_published_posts(self, offset: int = 0, limit: int | None = None) -> list[DocumentRecord]:
        t = self._table()
        query = t.filter(t["type"] == "post", t.status == _PUBLISHED)
        return self._fetch(query, offset=offset, limit=limit)

    def get_published_pages(self) -> list[DocumentRecord]:
        return self.get_published_content("page")

    def get_unrendered_content(self, doc_type: str) -> list[DocumentRecord]:
        t = self._table()
        return self._fetch(t.filter(t["type"] == doc_type, ~t.rendered))

    def get_published_posts_by_tag(self, tag: str) -> list[DocumentRecord]:
        t = self._table()
        query = t.filter(t["type"] == "post", t.status == _PUBLISHED, t.tags.contains(tag))
        return self._fetch(query)

    def get_published_documents_by_tag(
        self, tag: str, doc_types: Collection[str] | None = None
    ) -> list[DocumentRecord]:
        t = self._table()
        query = t.filter(t.status == _PUBLISHED, t.tags.contains(tag))
        if doc_types is not None:
            if not doc_types:
                return []
            query = query.filter(query["type"].isin(list(doc_types)))
        return self._fetch(query)

    def get_document_by_uri(self, uri: str) -> DocumentRecord | None:
        t = self._table()
        result = t.filter(t.uri == uri).select("json_data").limit(1).execute()
        if result.empty:
            return None
        return self._hydrate(result.iloc[0]["json_data"])

    def get_document_status(self, source_uri: str) -> tuple[str | None, bool] | None:
        """Return ``(sha1, rendered)`` for a stored source, or None."""
        t = self._table()
        result = t.filter(t.source_uri == source_uri).select("sha1", "rendered").limit(1).execute()
        if result.empty:
            return None
        row = result.iloc[0]
        return row["sha1"], bool(row["rendered"])

    def get_document_count(self, doc_type: str) -> int:
        t = self._table()
        return int(t.filter(t["type"] == doc_type).count().execute())

    def get_published_count(self, doc_type: str) -> int:
        t = self._table()
        return int(t.filter(t["type"] == doc_type, t.status == _PUBLISHED).count().execute())

    def get_all_tags(self, doc_types: Collection[str] | None = None) -> list[str]:
        """Distinct tags of published documents, sorted."""
        sql = f"SELECT DISTINCT unnest(tags) AS tag FROM {self.table_name} WHERE status = ?"
        params: list[object] = [_PUBLISHED]
        if doc_types is not None:
            if not doc_types:
                return []
            sql += ' AND list_contains(?::VARCHAR[], "type")'
            params.append(list(doc_types))
        sql += " ORDER BY tag"
        return [row[0] for row in self._raw().execute(sql, params).fetchall()]

    def get_tags(self) -> list[str]:
        """Distinct tags of published posts."""
        return self.get_all_tags(("post",))

    def get_sources(self) -> list[tuple[str, str | None]]:
        """Return ``(source_uri, file)`` for every stored document."""
        t = self._table()
        result = t.select("source_uri", "json_data").execute()
        sources = []
        for _, row in result.iterrows():
            record = self._hydrate(row["json_data"])
            sources.append((row["source_uri"], record.file))
        return sources
