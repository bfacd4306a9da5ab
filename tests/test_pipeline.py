# tests/test_pipeline.py
import pytest

from conftest import member_dict, payment_dict
from models import UNKNOWN_MEMBER, Member, Payment
from pipeline import (
    clamp_page,
    filter_members,
    filter_payments,
    member_name,
    member_names,
    member_page,
    page_count,
    paginate,
    payment_page,
    sort_by_date,
)


def make_members(n):
    return [Member.from_dict(member_dict(i)) for i in range(1, n + 1)]


def test_default_page_is_newest_first_and_truncated():
    members = make_members(12)
    result = member_page(members)
    assert [m.id for m in result.records] == list(range(12, 2, -1))
    assert result.total == 12
    assert result.label == "Page 1 of 2"


def test_sort_is_stable_for_equal_dates():
    members = [Member.from_dict(member_dict(i, created_at="2024-05-05T00:00:00")) for i in range(1, 6)]
    assert [m.id for m in sort_by_date(members, lambda m: m.created_at, "desc")] == [1, 2, 3, 4, 5]
    assert [m.id for m in sort_by_date(members, lambda m: m.created_at, "asc")] == [1, 2, 3, 4, 5]


def test_ascending_puts_oldest_first():
    members = make_members(3)
    assert [m.id for m in member_page(members, sort_order="asc").records] == [1, 2, 3]


def test_unparseable_dates_sort_as_oldest():
    members = [
        Member.from_dict(member_dict(1, created_at="garbage")),
        Member.from_dict(member_dict(2, created_at="2024-01-01T00:00:00Z")),
        Member.from_dict(member_dict(3, created_at="2023-01-01")),
    ]
    assert [m.id for m in member_page(members).records] == [2, 3, 1]


def test_member_search_matches_first_or_last_name_case_insensitive():
    members = [
        Member.from_dict(member_dict(1, firstName="Maria", lastName="Santos")),
        Member.from_dict(member_dict(2, firstName="Jose", lastName="Rizal")),
        Member.from_dict(member_dict(3, firstName="Andres", lastName="Bonifacio")),
    ]
    assert [m.id for m in filter_members(members, "SANT")] == [1]
    assert [m.id for m in filter_members(members, "jo")] == [2]
    assert len(filter_members(members, "")) == 3
    for term in ("a", "r", "io"):
        for m in filter_members(members, term):
            assert term.lower() in m.full_name.lower()


def test_member_type_filter():
    members = [
        Member.from_dict(member_dict(1, membershipType="Annual")),
        Member.from_dict(member_dict(2, membershipType="Monthly")),
        Member.from_dict(member_dict(3, membershipType="Walk-in")),
    ]
    assert [m.id for m in filter_members(members, filter_type="monthly")] == [2]
    assert [m.id for m in filter_members(members, filter_type="WALK-IN")] == [3]
    assert len(filter_members(members, filter_type="all")) == 3


@pytest.mark.parametrize("n", [0, 1, 9, 10, 11, 20, 25])
def test_page_sizes(n):
    records = list(range(n))
    pages = page_count(n, 10)
    assert pages == -(-n // 10)
    for p in range(1, pages + 1):
        shown = paginate(records, p, 10).records
        if p < pages:
            assert len(shown) == 10
        else:
            assert len(shown) == (n % 10 or 10)


def test_page_is_clamped_when_results_shrink():
    assert clamp_page(3, 5, 10) == 1
    assert clamp_page(0, 50, 10) == 1
    assert clamp_page(7, 50, 10) == 5
    result = paginate(list(range(5)), 3, 10)
    assert result.page == 1
    assert result.records == [0, 1, 2, 3, 4]


def test_empty_result_has_no_navigation():
    result = paginate([], 1, 10)
    assert result.page_count == 0
    assert not result.has_next
    assert not result.has_previous


def test_member_names_resolve_string_and_int_ids():
    names = member_names(make_members(2))
    assert member_name(names, 1) == "First1 Last1"
    assert member_name(names, "2") == "First2 Last2"
    assert member_name(names, 99) == UNKNOWN_MEMBER


def test_payment_search_uses_resolved_member_name():
    names = member_names(make_members(2))
    payments = [
        Payment.from_dict(payment_dict("a", 1, "2024-02-01")),
        Payment.from_dict(payment_dict("b", 2, "2024-02-02")),
        Payment.from_dict(payment_dict("c", 42, "2024-02-03")),
    ]
    assert [p.id for p in filter_payments(payments, names, "first1")] == ["a"]
    assert [p.id for p in filter_payments(payments, names, "unknown")] == ["c"]


def test_payment_month_filter():
    names = member_names(make_members(1))
    dates = ["2024-01-03", "2024-01-15", "2023-01-31", "2024-02-01", "2024-03-01",
             "2024-04-01", "2024-05-01", "2024-06-01", "2024-07-01", "2024-12-31"]
    payments = [Payment.from_dict(payment_dict(f"p{i}", 1, d)) for i, d in enumerate(dates)]
    result = payment_page(payments, names, filter_month="Jan")
    assert result.total == 3
    assert {p.id for p in result.records} == {"p0", "p1", "p2"}
    assert payment_page(payments, names, filter_month="dec").total == 1


def test_payment_sort_by_date_desc():
    names = member_names(make_members(1))
    payments = [
        Payment.from_dict(payment_dict("old", 1, "2023-06-01")),
        Payment.from_dict(payment_dict("new", 1, "2024-06-01T08:00:00.000Z")),
        Payment.from_dict(payment_dict("mid", 1, "2024-01-01")),
    ]
    assert [p.id for p in payment_page(payments, names).records] == ["new", "mid", "old"]


def test_payment_type_filter():
    names = member_names(make_members(1))
    payments = [
        Payment.from_dict(payment_dict("a", 1, "2024-02-01", type="Annual")),
        Payment.from_dict(payment_dict("b", 1, "2024-02-02", type="Monthly")),
        Payment.from_dict(payment_dict("c", 1, "2024-02-03", type="Walk-in")),
    ]
    assert [p.id for p in filter_payments(payments, names, filter_type="annual")] == ["a"]
    assert [p.id for p in filter_payments(payments, names, filter_type="Walk-In")] == ["c"]
    assert len(filter_payments(payments, names, filter_type="all")) == 3
