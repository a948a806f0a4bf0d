"""
Pagination Tests
================

Client-side page arithmetic and the server-side Pagination envelope.
"""

import pytest

from inkpost.client.pagination import Pagination
from inkpost.schemas import Pagination as PaginationEnvelope


class TestClientPagination:

    def test_indices_on_first_and_last_page(self):
        p = Pagination(total=25, page_size=10)

        assert (p.total_pages, p.start_index, p.end_index) == (3, 0, 10)
        p.go_to_page(3)
        assert (p.start_index, p.end_index) == (20, 25)

    def test_go_to_page_clamps(self):
        p = Pagination(total=25, page_size=10)

        p.go_to_page(99)
        assert p.current_page == 3
        p.go_to_page(-4)
        assert p.current_page == 1

    def test_next_and_previous_stop_at_bounds(self):
        p = Pagination(total=15, page_size=10)

        assert not p.has_previous_page
        p.go_to_previous_page()
        assert p.current_page == 1

        p.go_to_next_page()
        assert p.current_page == 2
        assert not p.has_next_page
        p.go_to_next_page()
        assert p.current_page == 2

    def test_empty_list(self):
        p = Pagination(total=0, page_size=10)

        assert p.total_pages == 0
        assert p.end_index == 0
        assert not p.has_next_page
        p.go_to_page(5)
        assert p.current_page == 1

    def test_update_total_never_negative(self):
        p = Pagination(total=10, page_size=5)

        p.update_total(-3)

        assert p.total == 0

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValueError):
            Pagination(total=10, page_size=0)


class TestPaginationEnvelope:

    @pytest.mark.parametrize(
        "total,limit,pages",
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2)],
    )
    def test_pages_is_ceiling(self, total, limit, pages):
        assert PaginationEnvelope.build(1, limit, total).pages == pages

    def test_offset(self):
        assert PaginationEnvelope.build(3, 20, 100).offset == 40
