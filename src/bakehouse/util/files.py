"""File helpers shared by the crawler and the renderer."""

from __future__ import annotations

import hashlib
from pathlib import Path


def sha1_digest(path: Path) -> str:
    """SHA-1 hex digest of a file's bytes."""
    digest = hashlib.sha1()  # noqa: S324
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def as_uri_path(path: Path) -> str:
    return path.as_posix()


def path_to_root(relative: Path) -> str:
    """``../`` once per directory between ``relative`` and its root."""
    return "../" * (len(relative.parts) - 1)


def is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def replace_extension(uri: str, extension: str) -> str:
    """Swap the extension of the last path segment of ``uri``."""
    head, slash, name = uri.rpartition("/")
    stem, dot, _ = name.rpartition(".")
    base = stem if dot and stem else name
    return f"{head}{slash}{base}{extension}"
