"""HTML body post-processing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import lxml.html

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig
    from bakehouse.model.document import DocumentRecord


def _document_directory(record: DocumentRecord) -> str:
    uri = record.no_extension_uri.rstrip("/") if record.no_extension_uri else (record.uri or "")
    if "/" in uri:
        uri = uri[: uri.rindex("/") + 1]
    return uri


def _transform_source(source: str, directory: str, site_host: str, prepend_host: bool) -> str:
    if source.startswith(("http://", "https://")):
        return source
    relative = not source.startswith("/")
    if relative:
        source = directory + source.removeprefix("./")
    if prepend_host:
        prefix = f"{site_host}/" if relative and not site_host.endswith("/") else site_host
        source = prefix + source
    return source


def fix_image_source_urls(record: DocumentRecord, config: BakeConfig) -> None:
    """Rewrite relative ``<img src>`` values so they resolve from the output file.

    Sources starting with ``./`` are relative to the document; absolute URLs are
    left alone. With ``img_path_prepend_host`` the site host is prepended.
    """
    if not record.body or "<img" not in record.body:
        return

    wrapper = lxml.html.fragment_fromstring(record.body, create_parent="div")
    directory = _document_directory(record)
    changed = False
    for img in wrapper.iter("img"):
        source = img.get("src")
        if source is None:
            continue
        transformed = _transform_source(source, directory, config.site_host, config.img_path_prepend_host)
        if transformed != source:
            img.set("src", transformed)
            changed = True

    if changed:
        inner = wrapper.text or ""
        inner += "".join(lxml.html.tostring(child, encoding="unicode") for child in wrapper)
        record.body = inner
