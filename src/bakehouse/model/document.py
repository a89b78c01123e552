"""The document record stored and rendered by the pipeline."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date as calendar_date
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

PUBLISHED_DATE = "published-date"


class DocumentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class NavigationLink(BaseModel):
    """Projection of a neighbouring document used for next/previous links."""

    model_config = ConfigDict(frozen=True)

    uri: str | None = None
    no_extension_uri: str | None = None
    title: str | None = None

    def __getitem__(self, key: str) -> Any:
        if key not in type(self).model_fields:
            raise KeyError(key)
        return getattr(self, key)


class DocumentRecord(BaseModel):
    """A parsed content file.

    Well-known fields are typed; anything else a markup engine finds in the
    header (custom keys, JSON values) lands in the extension bag and is
    reachable by attribute or item access.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    uri: str | None = None
    source_uri: str | None = None
    file: str | None = None
    sha1: str | None = None
    type: str | None = None
    status: str | None = None
    date: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    title: str | None = None
    body: str = ""
    name: str | None = None
    rendered: bool = False
    cached: bool = True
    rootpath: str = ""
    no_extension_uri: str | None = None
    next_content: NavigationLink | None = None
    previous_content: NavigationLink | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        # Stored timestamps are naive local time.
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                return value.astimezone().replace(tzinfo=None)
            return value
        if isinstance(value, calendar_date):
            return datetime(value.year, value.month, value.day)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        if isinstance(value, DocumentStatus):
            return value.value
        return value

    @property
    def is_published(self) -> bool:
        return self.status == DocumentStatus.PUBLISHED.value

    @property
    def is_draft(self) -> bool:
        return self.status == DocumentStatus.DRAFT.value

    def navigation_link(self) -> NavigationLink:
        return NavigationLink(uri=self.uri, no_extension_uri=self.no_extension_uri, title=self.title)

    # Mapping-style access for templates and engines.

    def __getitem__(self, key: str) -> Any:
        if key in type(self).model_fields:
            return getattr(self, key)
        extra = self.__pydantic_extra__ or {}
        if key in extra:
            return extra[key]
        raise KeyError(key)

    def __setitem__(self, key: str, value: Any) -> None:
        setattr(self, key, value)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return key in type(self).model_fields or key in (self.__pydantic_extra__ or {})

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def keys(self) -> Iterator[str]:
        yield from type(self).model_fields
        yield from self.__pydantic_extra__ or {}

    @property
    def extras(self) -> dict[str, Any]:
        return dict(self.__pydantic_extra__ or {})
