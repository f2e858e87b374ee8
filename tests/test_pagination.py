import pytest
from jobmatch.pagination import Page, calculate_pagination, paginate, validate_pagination


@pytest.mark.parametrize("page,limit,expected", [
    (1, 20, (1, 20)),
    (0, 20, (1, 20)),
    (-3, 20, (1, 20)),
    (2, 500, (2, 100)),
    (2, -5, (2, 1)),
    ("3", "10", (3, 10)),
    ("abc", None, (1, 20)),
])
def test_validate_pagination(page, limit, expected):
    assert validate_pagination(page, limit) == expected


def test_calculate_pagination():
    assert calculate_pagination(45, 2, 20) == {
        'page': 2,
        'limit': 20,
        'total': 45,
        'total_pages': 3,
        'has_next': True,
        'has_prev': True,
    }


def test_calculate_pagination_empty():
    meta = calculate_pagination(0, 1, 20)
    assert meta['total_pages'] == 0
    assert not meta['has_next']
    assert not meta['has_prev']


def test_paginate_slices_items():
    items = list(range(45))
    page = paginate(items, page=3, limit=20)
    assert page.data == list(range(40, 45))
    assert page.total == 45
    assert page.total_pages == 3
    assert not page.has_next
    assert page.has_prev


def test_paginate_past_the_end():
    page = paginate([1, 2, 3], page=5, limit=2)
    assert page.data == []
    assert page.total == 3


def test_page_to_dict():
    page = Page(data=[1, 2], page=1, limit=2, total=3, total_pages=2, has_next=True)
    assert page.to_dict(lambda n: n * 10) == {
        'data': [10, 20],
        'pagination': {
            'page': 1,
            'limit': 2,
            'total': 3,
            'total_pages': 2,
            'has_next': True,
            'has_prev': False,
        },
    }
