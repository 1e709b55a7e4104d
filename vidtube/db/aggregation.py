# ============================================================================
# FILE: vidtube/db/aggregation.py
# ============================================================================
"""
Reusable stages for building read-only views.

Each stage takes a SQLAlchemy ``Query`` and returns a new one, so a view is
written as a short pipeline::

    q = match(db.query(Comment), Comment.video_id == video_id)
    q = lookup(q, Comment.owner, required=True)
    q = sort(q, Comment.created_at, descending=True, tiebreaker=Comment.id)
    rows = paginate(q, pagination).all()

Derived columns (``size_of``, ``sum_of``, ``is_member``) are correlated scalar
subqueries and can be added to any query with ``add_fields``.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import false, func, or_, select
from sqlalchemy.orm import Query, contains_eager

from vidtube.core.exceptions import InvalidArgument, NotFound

LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    limit: int = 10

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return number if number > 0 else default


def parse_pagination(page: Any = None, limit: Any = None, default_limit: int = 10,
                     max_limit: Optional[int] = None) -> Pagination:
    """Coerce raw page/limit values to positive integers, defaulting to (1, default_limit)"""
    page_number = _positive_int(page, 1)
    page_size = _positive_int(limit, default_limit)
    if max_limit:
        page_size = min(page_size, max_limit)
    return Pagination(page=page_number, limit=page_size)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally"""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def text_search(term: str, *columns):
    """Case-insensitive substring match against any of the columns"""
    pattern = f"%{escape_like(term)}%"
    return or_(*(column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns))


# -- stages ------------------------------------------------------------------

def match(query: Query, *criteria) -> Query:
    return query.filter(*criteria)


def lookup(query: Query, relationship, *criteria, required: bool = False) -> Query:
    """
    Attach a to-one related row and populate the relationship from the join.

    ``required=False`` keeps parents with no match (the relationship is None).
    ``required=True`` drops them, like a strict unwind. Extra criteria filter
    the joined side.
    """
    if required:
        query = query.join(relationship)
    else:
        query = query.outerjoin(relationship)
    if criteria:
        query = query.filter(*criteria)
    return query.options(contains_eager(relationship))


def add_fields(query: Query, *columns) -> Query:
    return query.add_columns(*columns)


def size_of(column, *criteria, label: str, join=None):
    """COUNT of related rows correlated to the outer query"""
    stmt = select(func.count(column))
    if join is not None:
        stmt = stmt.join(*join)
    return stmt.where(*criteria).scalar_subquery().label(label)


def sum_of(column, *criteria, label: str, join=None):
    stmt = select(func.coalesce(func.sum(column), 0))
    if join is not None:
        stmt = stmt.join(*join)
    return stmt.where(*criteria).scalar_subquery().label(label)


def is_member(column, *criteria, label: str):
    """Boolean: does at least one related row match"""
    return select(column).where(*criteria).exists().label(label)


def constant_false(label: str):
    return false().label(label)


def sort(query: Query, column, descending: bool = True, tiebreaker=None) -> Query:
    ordering = [column.desc() if descending else column.asc()]
    if tiebreaker is not None:
        ordering.append(tiebreaker.desc() if descending else tiebreaker.asc())
    return query.order_by(*ordering)


def paginate(query: Query, pagination: Pagination) -> Query:
    return query.offset(pagination.skip).limit(pagination.limit)


# -- helpers -----------------------------------------------------------------

def resolve_sort(sort_by: Optional[str], sort_type: Optional[str], allowed: Dict[str, Any],
                 default: str = "createdAt"):
    """Map a caller-provided sort field to a column from the whitelist"""
    key = sort_by or default
    if key not in allowed:
        raise InvalidArgument(f"Cannot sort by '{key}'. Allowed: {', '.join(sorted(allowed))}")
    direction = (sort_type or "desc").lower()
    if direction not in ("asc", "desc"):
        raise InvalidArgument("sortType must be 'asc' or 'desc'")
    return allowed[key], direction == "desc"


def require_results(rows: Sequence, message: str) -> List:
    """An empty result set is a failure, not an empty page"""
    if not rows:
        raise NotFound(message)
    return list(rows)


def first_or_not_found(rows: Sequence, message: str):
    return require_results(rows, message)[0]
