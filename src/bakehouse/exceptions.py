"""Centralized exceptions for Bakehouse."""

from __future__ import annotations

from collections.abc import Sequence


class BakehouseError(Exception):
    """Base exception for all Bakehouse errors."""


class ConfigurationError(BakehouseError):
    """Raised when the site configuration is unusable."""


class EngineUnavailableError(BakehouseError):
    """Raised when content needs a markup engine that could not be loaded."""

    def __init__(self, engine_name: str, file: str) -> None:
        self.engine_name = engine_name
        self.file = file
        super().__init__(f"The markup engine [{engine_name}] for [{file}] couldn't be loaded")


class UnsupportedDocumentTypeError(BakehouseError):
    """Raised when a document type is not registered."""

    def __init__(self, doc_type: str) -> None:
        self.doc_type = doc_type
        super().__init__(f"unsupported document type: {doc_type!r}")


class NoModelExtractorError(BakehouseError, KeyError):
    """Raised when no model extractor is registered for a key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f'no model extractor for key "{key}"')

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return self.args[0]


class RenderingError(BakehouseError):
    """Raised when a rendering tool fails.

    Aggregated failures keep the individual messages in ``errors``.
    """

    def __init__(self, message: str, errors: Sequence[str] = (), rendered_count: int = 0) -> None:
        self.errors = list(errors)
        self.rendered_count = rendered_count
        super().__init__(message)


class BakeError(BakehouseError):
    """Raised when a bake finished with errors."""

    def __init__(self, errors: Sequence[BaseException], count: int) -> None:
        self.errors = list(errors)
        self.count = count
        details = "\n".join(str(error) for error in self.errors)
        super().__init__(f"Failed to bake {count} item(s):\n{details}")
