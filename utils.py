"""
utils.py
Dates, display formatting, table frames.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pandas as pd

from models import MONTHS, UNKNOWN_MEMBER, Member, Payment


def today_iso() -> str:
    return date.today().isoformat()


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def parse_iso(d: str) -> date:
    return date.fromisoformat(truncate_date(d))


def truncate_date(value) -> str:
    """
    Keep only the date portion of an ISO value ("2024-03-01T10:00:00Z" -> "2024-03-01").
    """
    if value is None:
        return ""
    text = str(value).strip()
    for sep in ("T", " "):
        if sep in text:
            text = text.split(sep, 1)[0]
    return text


def as_datetime(value) -> datetime:
    """
    Parse a date or timestamp for ordering. Unparseable values order as the oldest instant.
    """
    if not value:
        return datetime.min
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return datetime.min
    if parsed.tzinfo is not None:
        # compare everything as naive UTC
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def month_token(value) -> str | None:
    try:
        return MONTHS[parse_iso(value).month - 1]
    except ValueError:
        return None


def format_date(value) -> str:
    try:
        d = parse_iso(value)
    except ValueError:
        return "Invalid Date"
    return f"{d.month}/{d.day}/{d.year}"


def format_amount(amount: float) -> str:
    return f"₱{float(amount):.2f}"


def members_frame(members: list[Member]) -> pd.DataFrame:
    rows = [
        {
            "Name": m.full_name,
            "Membership Type": m.membership_type,
            "Expiry Date": format_date(m.membership_expiry_date),
        }
        for m in members
    ]
    return pd.DataFrame(rows, columns=["Name", "Membership Type", "Expiry Date"])


def payments_frame(payments: list[Payment], names: dict[str, str]) -> pd.DataFrame:
    rows = [
        {
            "Date": format_date(p.date),
            "Member": names.get(str(p.member_id), UNKNOWN_MEMBER),
            "Amount (₱)": format_amount(p.amount),
            "Payment Type": p.type,
            "Expiry Date": format_date(p.expiry),
        }
        for p in payments
    ]
    return pd.DataFrame(rows, columns=["Date", "Member", "Amount (₱)", "Payment Type", "Expiry Date"])
