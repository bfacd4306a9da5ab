"""
pipeline.py
Client-side list pipeline: search/type/month filter -> date sort -> paginate.
Pure functions; callers recompute on every render.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TypeVar

import config
from models import ALL, SORT_DESC, UNKNOWN_MEMBER, Member, Payment
from utils import as_datetime, month_token

T = TypeVar("T")


@dataclass(frozen=True)
class PageResult:
    records: list
    total: int
    page: int
    page_count: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    @property
    def label(self) -> str:
        return f"Page {self.page} of {self.page_count}"


def _matches(value: str, wanted: str) -> bool:
    return wanted == ALL or value.lower() == wanted.lower()


# ---------- Member names ----------

def member_names(members: Iterable[Member]) -> dict[str, str]:
    """
    id -> "First Last", built once per members load. Keys are strings so form values
    ("3") and stored ids (3) resolve alike.
    """
    return {str(m.id): m.full_name for m in members}


def member_name(names: dict[str, str], member_id) -> str:
    return names.get(str(member_id), UNKNOWN_MEMBER)


# ---------- Filters ----------

def filter_members(members: Sequence[Member], search_term: str = "", filter_type: str = ALL) -> list[Member]:
    term = search_term.lower()
    return [
        m
        for m in members
        if (term in m.first_name.lower() or term in m.last_name.lower())
        and _matches(m.membership_type, filter_type)
    ]


def filter_payments(
    payments: Sequence[Payment],
    names: dict[str, str],
    search_term: str = "",
    filter_type: str = ALL,
    filter_month: str = ALL,
) -> list[Payment]:
    term = search_term.lower()
    out = []
    for p in payments:
        if term not in member_name(names, p.member_id).lower():
            continue
        if not _matches(p.type, filter_type):
            continue
        if filter_month != ALL and (month_token(p.date) or "").lower() != filter_month.lower():
            continue
        out.append(p)
    return out


# ---------- Sort + paginate ----------

def sort_by_date(records: Iterable[T], key: Callable[[T], str], sort_order: str = SORT_DESC) -> list[T]:
    # sorted() is stable in both directions, ties keep their incoming order
    return sorted(records, key=lambda r: as_datetime(key(r)), reverse=(sort_order == SORT_DESC))


def page_count(total: int, page_size: int | None = None) -> int:
    return math.ceil(total / (page_size or config.PAGE_SIZE))


def clamp_page(page: int, total: int, page_size: int | None = None) -> int:
    return max(1, min(page, max(page_count(total, page_size), 1)))


def paginate(records: Sequence[T], page: int = 1, page_size: int | None = None) -> PageResult:
    size = page_size or config.PAGE_SIZE
    page = clamp_page(page, len(records), size)
    start = (page - 1) * size
    return PageResult(
        records=list(records[start:start + size]),
        total=len(records),
        page=page,
        page_count=page_count(len(records), size),
    )


def member_page(
    members: Sequence[Member],
    search_term: str = "",
    filter_type: str = ALL,
    sort_order: str = SORT_DESC,
    page: int = 1,
    page_size: int | None = None,
) -> PageResult:
    filtered = filter_members(members, search_term, filter_type)
    ordered = sort_by_date(filtered, lambda m: m.created_at, sort_order)
    return paginate(ordered, page, page_size)


def payment_page(
    payments: Sequence[Payment],
    names: dict[str, str],
    search_term: str = "",
    filter_type: str = ALL,
    filter_month: str = ALL,
    sort_order: str = SORT_DESC,
    page: int = 1,
    page_size: int | None = None,
) -> PageResult:
    filtered = filter_payments(payments, names, search_term, filter_type, filter_month)
    ordered = sort_by_date(filtered, lambda p: p.date, sort_order)
    return paginate(ordered, page, page_size)
