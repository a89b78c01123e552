"""Settings model for a site bake.

Every output name, folder and toggle the pipeline uses lives here. Unknown keys
from ``bakehouse.toml`` are kept (``extra="allow"``) so sites can expose their own
values to templates through ``config``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TEMPLATES: dict[str, str] = {
    "masterindex": "index.j2",
    "archive": "archive.j2",
    "feed": "feed.j2",
    "sitemap": "sitemap.j2",
    "tag": "tags.j2",
    "tagsindex": "tagsindex.j2",
    "error404": "error404.j2",
    "page": "page.j2",
    "post": "post.j2",
}


class BakeConfig(BaseSettings):
    """Root configuration for a bake.

    Supports environment variable overrides with the pattern
    BAKEHOUSE_KEY (e.g., BAKEHOUSE_INDEX_PAGINATE=true).
    """

    # Folders, relative to source_folder unless absolute
    source_folder: Path = Field(default_factory=Path.cwd, description="Root of the site sources")
    destination_folder: Path = Field(default=Path("output"), description="Where baked files go")
    content_folder: Path = Field(default=Path("content"))
    template_folder: Path = Field(default=Path("templates"))
    asset_folder: Path = Field(default=Path("assets"))
    data_folder: Path = Field(default=Path("data"))

    # Crawling and parsing
    ignore_file: str = ".bakeignore"
    header_separator: str = "~~~~~~"
    date_format: str = "%Y-%m-%d"
    default_status: str | None = None
    default_type: str | None = None
    tag_sanitize: bool = False
    data_file_doctype: str = "data"
    markdown_extensions: list[str] = Field(default_factory=lambda: ["table", "strikethrough"])
    render_encoding: str = "utf-8"

    # Output naming
    output_extension: str = ".html"
    output_extensions: dict[str, str] = Field(default_factory=dict)
    draft_suffix: str = "-draft"
    uri_no_extension: bool = False
    uri_no_extension_prefix: str | None = None
    index_file: str = "index.html"
    archive_file: str = "archive.html"
    feed_file: str = "feed.xml"
    sitemap_file: str = "sitemap.xml"
    error404_file: str = "404.html"
    tag_path: str = "tags"

    # Rendering toggles
    render_documents: bool = True
    render_index: bool = True
    render_archive: bool = True
    render_feed: bool = True
    render_sitemap: bool = True
    render_tags: bool = True
    render_tagsindex: bool = False
    render_error404: bool = False
    index_paginate: bool = False
    index_posts_per_page: int = Field(default=5, ge=1)
    feed_max_posts: int = Field(default=10, ge=1)

    templates: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TEMPLATES))

    # Image source rewriting
    img_path_update: bool = False
    img_path_prepend_host: bool = False
    site_host: str = "http://www.example.org"

    # Content store
    db_store: Literal["memory", "file"] = "memory"
    db_path: Path = Field(default=Path(".bakehouse/cache.duckdb"))
    clear_cache: bool = False

    model_config = SettingsConfigDict(
        extra="allow",
        env_prefix="BAKEHOUSE_",
        env_nested_delimiter="__",
    )

    @field_validator("templates", mode="before")
    @classmethod
    def _merge_default_templates(cls, value: Any) -> Any:
        # Site tables extend the defaults instead of replacing them.
        if isinstance(value, dict):
            return {**DEFAULT_TEMPLATES, **value}
        return value

    @property
    def source_path(self) -> Path:
        return self.source_folder

    @property
    def destination_path(self) -> Path:
        return self._resolve(self.destination_folder)

    @property
    def content_path(self) -> Path:
        return self._resolve(self.content_folder)

    @property
    def template_path(self) -> Path:
        return self._resolve(self.template_folder)

    @property
    def asset_path(self) -> Path:
        return self._resolve(self.asset_folder)

    @property
    def data_path(self) -> Path:
        return self._resolve(self.data_folder)

    @property
    def abs_db_path(self) -> Path:
        return self._resolve(self.db_path)

    def _resolve(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.source_folder / path

    def template_for(self, doc_type: str) -> str | None:
        """Return the template file configured for a document type."""
        return self.templates.get(doc_type)

    def output_extension_for(self, doc_type: str) -> str:
        return self.output_extensions.get(doc_type, self.output_extension)

    def template_view(self) -> dict[str, Any]:
        """Return the configuration as the plain mapping templates see as ``config``."""
        view = self.model_dump(mode="json")
        return {key.replace(".", "_").replace("-", "_"): value for key, value in view.items()}
