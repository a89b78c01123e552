"""Writes output files by running models through the template engine."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from bakehouse.exceptions import RenderingError
from bakehouse.model.document import DocumentRecord
from bakehouse.templates.extractors import tag_uri
from bakehouse.templates.model import TemplateModel
from bakehouse.util.files import path_to_root, replace_extension
from bakehouse.util.paging import PagingHelper

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig
    from bakehouse.store.content_store import ContentStore
    from bakehouse.templates.base import TemplateEngine

logger = logging.getLogger(__name__)


class Renderer:
    """Renders documents and the index, archive, feed, sitemap, tag and 404 pages."""

    def __init__(self, config: BakeConfig, store: ContentStore, engine: TemplateEngine) -> None:
        self.config = config
        self.store = store
        self.engine = engine

    @property
    def destination(self) -> Path:
        return self.config.destination_path

    def _template(self, key: str) -> str:
        template = self.config.template_for(key)
        if not template:
            msg = f"No template configured for '{key}'"
            raise RenderingError(msg)
        return template

    def _check_inside_destination(self, output: Path) -> None:
        destination = self.destination.resolve()
        if not output.resolve().is_relative_to(destination):
            msg = f"Output {output} is outside of the destination folder {destination}"
            raise RenderingError(msg)

    def _write(self, model: TemplateModel, template_key: str, output: Path) -> None:
        self._check_inside_destination(output)
        buffer = io.StringIO()
        self.engine.render_document(model, self._template(template_key), buffer)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(buffer.getvalue(), encoding=self.config.render_encoding)

    def _page(self, doc_type: str, uri: str, **fields: object) -> DocumentRecord:
        """Synthetic content record for a site-level page."""
        return DocumentRecord(type=doc_type, uri=uri, rootpath=path_to_root(Path(uri)), **fields)

    def _render_page(self, model: TemplateModel, template_key: str, uri: str) -> None:
        output = self.destination / uri
        try:
            self._write(model, template_key, output)
        except Exception as exc:
            msg = f"Failed to render {template_key} [{output}]. Cause: {exc}"
            raise RenderingError(msg) from exc
        logger.info("Rendering %s [%s]... done!", template_key, output)

    # -- documents -------------------------------------------------------------

    def output_path(self, record: DocumentRecord) -> tuple[Path, Path]:
        """Published and draft output paths of a document."""
        extension = self.config.output_extension_for(record.type or "")
        published = replace_extension(record.uri or "", extension)
        stem = published[: -len(extension)] if extension and published.endswith(extension) else published
        draft = f"{stem}{self.config.draft_suffix}{extension}"
        return self.destination / published, self.destination / draft

    def render(self, record: DocumentRecord) -> None:
        published_path, draft_path = self.output_path(record)
        output = draft_path if record.is_draft else published_path

        for stale in (published_path, draft_path):
            if stale.exists():
                stale.unlink()

        model = TemplateModel({"content": record, "renderer": self.engine})
        try:
            self._write(model, record.type or "", output)
        except Exception as exc:
            msg = f"Failed to render file {output}. Cause: {exc}"
            raise RenderingError(msg) from exc
        logger.info("Rendering [%s]... done!", output)

    # -- site pages ------------------------------------------------------------

    def render_index(self, index_file: str) -> None:
        model = TemplateModel({"content": self._page("masterindex", index_file)})
        self._render_page(model, "masterindex", index_file)

    def render_index_paging(self, index_file: str) -> None:
        total = self.store.get_published_count("post")
        if total == 0:
            self.render_index(index_file)
            return

        paging = PagingHelper(total, self.config.index_posts_per_page)
        for page in range(1, paging.number_of_pages + 1):
            uri = paging.current_file_name(page, index_file)
            content = self._page("masterindex", uri)
            if page > 1:
                content.rootpath = "../"
            model = TemplateModel(
                {
                    "content": content,
                    "numberOfPages": paging.number_of_pages,
                    "currentPageNumber": page,
                    "previousFileName": paging.previous_file_name(page),
                    "nextFileName": paging.next_file_name(page),
                }
            )
            self._render_page(model, "masterindex", uri)

    def render_archive(self, archive_file: str) -> None:
        model = TemplateModel({"content": self._page("archive", archive_file)})
        self._render_page(model, "archive", archive_file)

    def render_feed(self, feed_file: str) -> None:
        model = TemplateModel(
            {
                "content": self._page("feed", feed_file),
                "published_posts": self.store.get_published_posts(limit=self.config.feed_max_posts),
            }
        )
        self._render_page(model, "feed", feed_file)

    def render_sitemap(self, sitemap_file: str) -> None:
        model = TemplateModel({"content": self._page("sitemap", sitemap_file)})
        self._render_page(model, "sitemap", sitemap_file)

    def render_error404(self, error404_file: str) -> None:
        model = TemplateModel({"content": self._page("error404", error404_file)})
        self._render_page(model, "error404", error404_file)

    def render_tags(self, tag_path: str) -> int:
        """Render one page per tag, plus the tag index when enabled."""
        rendered = 0
        errors: list[str] = []
        for tag in self.store.get_all_tags():
            uri = tag_uri(self.config, tag)
            model = TemplateModel({"tag": tag, "content": self._page("tag", uri, title=tag)})
            try:
                self._render_page(model, "tag", uri)
                rendered += 1
            except RenderingError as exc:
                errors.append(str(exc))

        if self.config.render_tagsindex:
            uri = f"{tag_path.strip('/')}/index{self.config.output_extension}"
            model = TemplateModel({"content": self._page("tagsindex", uri)})
            try:
                self._render_page(model, "tagsindex", uri)
                rendered += 1
            except RenderingError as exc:
                errors.append(str(exc))

        if errors:
            msg = "Failed to render tags. Cause(s):\n" + "\n".join(errors)
            raise RenderingError(msg, errors, rendered)
        return rendered
