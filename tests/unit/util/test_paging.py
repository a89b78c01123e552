import pytest

from bakehouse.util.paging import PagingHelper


def test_number_of_pages_rounds_up():
    assert PagingHelper(5, 2).number_of_pages == 3
    assert PagingHelper(4, 2).number_of_pages == 2
    assert PagingHelper(0, 2).number_of_pages == 0


def test_file_names():
    paging = PagingHelper(5, 2)

    assert paging.next_file_name(1) == "2/"
    assert paging.next_file_name(3) is None
    assert paging.previous_file_name(1) is None
    assert paging.previous_file_name(2) == ""
    assert paging.previous_file_name(3) == "2/"
    assert paging.current_file_name(1, "index.html") == "index.html"
    assert paging.current_file_name(3, "index.html") == "3/index.html"
    assert paging.offset(3) == 4


def test_posts_per_page_must_be_positive():
    with pytest.raises(ValueError, match="positive"):
        PagingHelper(3, 0)
