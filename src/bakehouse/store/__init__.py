"""Embedded document store."""

from bakehouse.store.content_store import ContentStore, folder_signature

__all__ = ["ContentStore", "folder_signature"]
