"""Page arithmetic for the paginated index."""

from __future__ import annotations

import math


class PagingHelper:
    """Paging of ``total_documents`` across pages of ``posts_per_page``."""

    def __init__(self, total_documents: int, posts_per_page: int) -> None:
        if posts_per_page < 1:
            msg = "posts_per_page must be positive"
            raise ValueError(msg)
        self.total_documents = total_documents
        self.posts_per_page = posts_per_page

    @property
    def number_of_pages(self) -> int:
        return math.ceil(self.total_documents / self.posts_per_page)

    def next_file_name(self, current_page: int) -> str | None:
        if current_page < self.number_of_pages:
            return f"{current_page + 1}/"
        return None

    def previous_file_name(self, current_page: int) -> str | None:
        if current_page <= 1:
            return None
        if current_page == 2:
            return ""
        return f"{current_page - 1}/"

    def current_file_name(self, page: int, file_name: str) -> str:
        if page == 1:
            return file_name
        return f"{page}/{file_name}"

    def offset(self, page: int) -> int:
        return (page - 1) * self.posts_per_page
