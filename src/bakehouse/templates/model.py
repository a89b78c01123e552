"""The model handed to templates."""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from typing import TYPE_CHECKING, Any

from bakehouse.exceptions import NoModelExtractorError

if TYPE_CHECKING:
    from bakehouse.store.content_store import ContentStore
    from bakehouse.templates.base import ModelAdapter
    from bakehouse.templates.registry import ModelExtractors


class TemplateModel(MutableMapping[str, Any]):
    """Mapping of template variables with lazy fallback to model extractors.

    Explicit entries win. A key that is not set is computed on access by the
    extractor registered for it, so collections such as ``published_posts``
    are only queried when a template uses them.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})
        self._store: ContentStore | None = None
        self._extractors: ModelExtractors | None = None
        self._adapter: ModelAdapter | None = None

    def bind(self, store: ContentStore, extractors: ModelExtractors, adapter: ModelAdapter) -> TemplateModel:
        self._store = store
        self._extractors = extractors
        self._adapter = adapter
        return self

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    def __getitem__(self, key: str) -> Any:
        if key in self._data:
            return self._data[key]
        if self._extractors is None or self._store is None or self._adapter is None:
            raise KeyError(key)
        return self._extractors.extract_and_transform(self._store, key, self, self._adapter)

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __contains__(self, key: object) -> bool:
        if key in self._data:
            return True
        return isinstance(key, str) and self._extractors is not None and key in self._extractors

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except NoModelExtractorError:
            return default
        except KeyError:
            return default
