import pytest

from vidtube.core.exceptions import InvalidArgument, NotFound
from vidtube.db import aggregation as agg
from vidtube.services.base import is_valid_id


@pytest.mark.parametrize("page, limit, expected", [
    (None, None, (1, 10)),
    ("2", "5", (2, 5)),
    ("0", "-1", (1, 10)),
    ("abc", "1.5", (1, 1)),
    ("2.9", "7", (2, 7)),
    (3, 1000, (3, 100)),
])
def test_parse_pagination(page, limit, expected):
    pagination = agg.parse_pagination(page, limit, default_limit=10, max_limit=100)
    assert (pagination.page, pagination.limit) == expected


def test_pagination_skip():
    assert agg.Pagination(page=3, limit=20).skip == 40


def test_escape_like_treats_wildcards_literally():
    assert agg.escape_like("50%_off\\") == "50\\%\\_off\\\\"


def test_resolve_sort():
    allowed = {"createdAt": "created", "title": "title"}
    assert agg.resolve_sort(None, None, allowed) == ("created", True)
    assert agg.resolve_sort("title", "ASC", allowed) == ("title", False)
    with pytest.raises(InvalidArgument):
        agg.resolve_sort("password", "asc", allowed)
    with pytest.raises(InvalidArgument):
        agg.resolve_sort("title", "sideways", allowed)


def test_empty_result_is_not_found():
    with pytest.raises(NotFound) as exc:
        agg.require_results([], "Nothing here")
    assert exc.value.message == "Nothing here"
    assert agg.first_or_not_found(["a", "b"], "unused") == "a"


@pytest.mark.parametrize("value, valid", [
    ("7f1d1f9e-4f7b-4b0e-9a35-1f6f5a6f0c11", True),
    ("not-a-uuid", False),
    ("", False),
    (None, False),
    (42, False),
])
def test_is_valid_id(value, valid):
    assert is_valid_id(value) is valid
