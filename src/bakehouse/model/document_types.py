"""Registry of known document type names."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Protocol

from bakehouse.exceptions import UnsupportedDocumentTypeError

logger = logging.getLogger(__name__)

BUILTIN_DOCUMENT_TYPES: tuple[str, ...] = ("page", "post", "masterindex", "archive", "feed")

DocumentTypeListener = Callable[[str], None]


class _Loadable(Protocol):
    def ensure_loaded(self) -> None: ...


class DocumentTypeRegistry:
    """Set of document type names with add-notifications.

    Listeners are called exactly once for each newly added type; adding a
    known type again is a no-op.
    """

    def __init__(self, loaders: Iterable[_Loadable] = ()) -> None:
        self._types: dict[str, None] = dict.fromkeys(BUILTIN_DOCUMENT_TYPES)
        self._listeners: dict[DocumentTypeListener, None] = {}
        self._loaders = list(loaders)

    def attach_loader(self, loader: _Loadable) -> None:
        """Make sure ``loader`` is loaded before types are listed."""
        self._loaders.append(loader)

    def add_listener(self, listener: DocumentTypeListener) -> None:
        self._listeners.setdefault(listener, None)

    def remove_listener(self, listener: DocumentTypeListener) -> None:
        self._listeners.pop(listener, None)

    def add_document_type(self, name: str) -> None:
        if name in self._types:
            return
        self._types[name] = None
        logger.debug("Registered document type '%s'", name)
        for listener in list(self._listeners):
            listener(name)

    def reset_document_types(self) -> None:
        self._types = dict.fromkeys(BUILTIN_DOCUMENT_TYPES)

    def get_document_types(self) -> tuple[str, ...]:
        for loader in self._loaders:
            loader.ensure_loaded()
        return tuple(self._types)

    def contains(self, name: str) -> bool:
        return name in self._types

    __contains__ = contains

    def pluralize(self, doc_type: str) -> str:
        """Return the collection key for a known document type."""
        if doc_type not in self._types:
            raise UnsupportedDocumentTypeError(doc_type)
        return f"{doc_type}s"

    def unpluralize(self, plural: str) -> str:
        """Return the document type a collection key names."""
        if not plural:
            msg = "cannot unpluralize an empty key"
            raise ValueError(msg)
        candidate = plural[:-1]
        if candidate not in self._types:
            raise UnsupportedDocumentTypeError(plural)
        return candidate
