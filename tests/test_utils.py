# tests/test_utils.py
from datetime import datetime

from models import Member, Payment
from utils import as_datetime, format_amount, format_date, members_frame, month_token, payments_frame, truncate_date


def test_truncate_date():
    assert truncate_date("2024-03-01T10:00:00.000Z") == "2024-03-01"
    assert truncate_date("2024-03-01 10:00") == "2024-03-01"
    assert truncate_date("2024-03-01") == "2024-03-01"
    assert truncate_date(None) == ""


def test_as_datetime_mixes_naive_and_aware():
    assert as_datetime("2024-01-01T00:00:00Z") == datetime(2024, 1, 1)
    assert as_datetime("2024-01-01T08:00:00+08:00") == datetime(2024, 1, 1)
    assert as_datetime("") == datetime.min
    assert as_datetime("not a date") == datetime.min


def test_month_token():
    assert month_token("2024-01-31") == "Jan"
    assert month_token("2024-12-01T00:00:00Z") == "Dec"
    assert month_token("") is None


def test_display_formatting():
    assert format_date("2024-03-05") == "3/5/2024"
    assert format_date("") == "Invalid Date"
    assert format_amount(1500) == "₱1500.00"


def test_frames():
    member = Member(1, "Ana", "Reyes", "Annual", "2025-06-30", "2024-06-30")
    df = members_frame([member])
    assert df.iloc[0].to_dict() == {"Name": "Ana Reyes", "Membership Type": "Annual", "Expiry Date": "6/30/2025"}
    assert list(members_frame([]).columns) == ["Name", "Membership Type", "Expiry Date"]

    payment = Payment(1, 9, 250.0, "2024-01-05", "Monthly", "2024-02-05")
    df = payments_frame([payment], {"1": "Ana Reyes"})
    assert df.iloc[0]["Member"] == "Unknown Member"
    assert df.iloc[0]["Amount (₱)"] == "₱250.00"
