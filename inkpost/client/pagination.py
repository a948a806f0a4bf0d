"""Page arithmetic for paginated lists (page numbers are 1-based)."""

import math


class Pagination:
    """
    Tracks the current page over `total` items split into `page_size` pages.

    >>> p = Pagination(total=25, page_size=10)
    >>> p.total_pages, p.start_index, p.end_index
    (3, 0, 10)
    >>> p.go_to_page(99); p.current_page
    3
    """

    def __init__(self, total: int, page_size: int, initial_page: int = 1):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.total = max(0, total)
        self.page_size = page_size
        self.current_page = initial_page

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def start_index(self) -> int:
        return (self.current_page - 1) * self.page_size

    @property
    def end_index(self) -> int:
        return min(self.start_index + self.page_size, self.total)

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1

    def go_to_page(self, page: int) -> None:
        """Jump to `page`, clamped to 1..total_pages (1 when there are no pages)."""
        self.current_page = max(1, min(page, self.total_pages))

    def go_to_next_page(self) -> None:
        if self.has_next_page:
            self.current_page += 1

    def go_to_previous_page(self) -> None:
        if self.has_previous_page:
            self.current_page -= 1

    def update_total(self, total: int) -> None:
        self.total = max(0, total)
