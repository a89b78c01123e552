"""Model extractors: collections computed from the store on demand."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from bakehouse.exceptions import UnsupportedDocumentTypeError

if TYPE_CHECKING:
    from bakehouse.config.settings import BakeConfig
    from bakehouse.model.document import DocumentRecord
    from bakehouse.model.document_types import DocumentTypeRegistry
    from bakehouse.store.content_store import ContentStore
    from bakehouse.templates.model import TemplateModel


@dataclass(frozen=True, slots=True)
class ExtractorEnvironment:
    config: BakeConfig
    document_types: DocumentTypeRegistry


class ModelExtractor:
    """Computes the value of one template variable."""

    def get(self, store: ContentStore, model: TemplateModel, key: str, env: ExtractorEnvironment) -> Any:
        raise NotImplementedError


# -- documents by type --------------------------------------------------------


class TypedDocumentsExtractor(ModelExtractor):
    """``<type>s``: every document of the type, newest first."""

    def get(self, store, model, key, env):
        try:
            doc_type = env.document_types.unpluralize(key)
        except UnsupportedDocumentTypeError:
            return []
        return store.get_all_content(doc_type)


class PagesExtractor(TypedDocumentsExtractor):
    pass


class PostsExtractor(TypedDocumentsExtractor):
    pass


class IndexesExtractor(TypedDocumentsExtractor):
    pass


class ArchivesExtractor(TypedDocumentsExtractor):
    pass


class FeedsExtractor(TypedDocumentsExtractor):
    pass


class PublishedCustomExtractor(ModelExtractor):
    """``published_<type>s`` for a type registered at runtime."""

    def __init__(self, doc_type: str) -> None:
        self.doc_type = doc_type

    def get(self, store, model, key, env):
        return store.get_published_content(self.doc_type)


class PublishedPostsExtractor(ModelExtractor):
    """Published posts, newest first.

    On a paginated index page the model carries ``numberOfPages`` and
    ``currentPageNumber`` and only that page's posts are returned.
    """

    def get(self, store, model, key, env):
        number_of_pages = model.get("numberOfPages") or 0
        if number_of_pages > 0:
            page = model.get("currentPageNumber") or 1
            per_page = env.config.index_posts_per_page
            return store.get_published_posts(offset=(page - 1) * per_page, limit=per_page)
        return store.get_published_posts()


class PublishedPagesExtractor(ModelExtractor):
    def get(self, store, model, key, env):
        return store.get_published_pages()


class PublishedContentExtractor(ModelExtractor):
    def get(self, store, model, key, env):
        content: list[DocumentRecord] = []
        for doc_type in env.document_types.get_document_types():
            content.extend(store.get_published_content(doc_type))
        return content


class AllContentExtractor(ModelExtractor):
    """Every document of every type except data files."""

    def get(self, store, model, key, env):
        content: list[DocumentRecord] = []
        for doc_type in env.document_types.get_document_types():
            if doc_type == env.config.data_file_doctype:
                continue
            content.extend(store.get_all_content(doc_type))
        return content


class PublishedDateExtractor(ModelExtractor):
    def get(self, store, model, key, env):
        return datetime.now()


# -- tags ---------------------------------------------------------------------


class AllTagsExtractor(ModelExtractor):
    def get(self, store, model, key, env):
        return store.get_tags()


class TagPostsExtractor(ModelExtractor):
    def get(self, store, model, key, env):
        tag = model.get("tag")
        if not tag:
            return []
        return store.get_published_posts_by_tag(tag)


class TaggedDocumentsExtractor(ModelExtractor):
    def get(self, store, model, key, env):
        tag = model.get("tag")
        if not tag:
            return []
        return store.get_published_documents_by_tag(tag, env.document_types.get_document_types())


def tag_uri(config: BakeConfig, tag: str) -> str:
    """Site-relative URI of a tag page."""
    name = tag.replace(" ", "-") if config.tag_sanitize else tag
    return f"{config.tag_path.strip('/')}/{name}{config.output_extension}"


class TagsExtractor(ModelExtractor):
    """One entry per tag with its URI and tagged content."""

    def get(self, store, model, key, env):
        doc_types = env.document_types.get_document_types()
        return [
            {
                "name": tag,
                "uri": tag_uri(env.config, tag),
                "tagged_posts": store.get_published_posts_by_tag(tag),
                "tagged_documents": store.get_published_documents_by_tag(tag, doc_types),
            }
            for tag in store.get_all_tags()
        ]


# -- escape hatches -----------------------------------------------------------


class DBExtractor(ModelExtractor):
    def get(self, store, model, key, env):
        return store


class DataFiles:
    """Accessor for parsed files of the data folder: ``data.get("authors.yaml")``."""

    def __init__(self, store: ContentStore, doc_type: str) -> None:
        self._store = store
        self._doc_type = doc_type

    def get(self, path: str) -> DocumentRecord | None:
        record = self._store.get_document_by_uri(path)
        if record is None or record.type != self._doc_type:
            return None
        return record

    __getitem__ = get


class DataExtractor(ModelExtractor):
    def get(self, store, model, key, env):
        return DataFiles(store, env.config.data_file_doctype)
