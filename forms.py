"""
forms.py
Add/edit form state for members and payments, plus the required-field checks
that gate submission.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from models import MEMBERSHIP_TYPES, Member, Payment
from utils import parse_iso, today_iso, truncate_date


@dataclass(frozen=True)
class FormState:
    values: dict = field(default_factory=dict)
    target_id: int | None = None  # None = add mode

    @property
    def is_edit(self) -> bool:
        return self.target_id is not None

    def update(self, name: str, value) -> "FormState":
        # new object per change; the previous state is left untouched
        return replace(self, values={**self.values, name: value})

    def payload(self) -> dict:
        return dict(self.values)


# ---------- Members ----------

def member_defaults() -> dict:
    return {
        "firstName": "",
        "lastName": "",
        "membershipExpiryDate": "",
        "membershipRenewal": "",
        "membershipType": "Annual",
        "annualMembership": "No",
        "notes1": "",
        "notes2": "",
        "notes3": "",
        "length": 1,
    }


def member_form(member: Member | None = None) -> FormState:
    if member is None:
        return FormState(values=member_defaults())
    return FormState(
        values={
            "firstName": member.first_name,
            "lastName": member.last_name,
            "membershipExpiryDate": truncate_date(member.membership_expiry_date),
            "membershipRenewal": truncate_date(member.membership_renewal),
            "membershipType": member.membership_type,
            "annualMembership": member.annual_membership or "No",
            "notes1": member.notes1 or "",
            "notes2": member.notes2 or "",
            "notes3": member.notes3 or "",
            "length": member.length or 1,
        },
        target_id=member.id,
    )


def _check_date(values: dict, name: str, label: str, errors: list[str]) -> None:
    if not str(values.get(name) or "").strip():
        errors.append(f"{label} is required.")
        return
    try:
        parse_iso(values[name])
    except ValueError:
        errors.append(f"{label} must be a valid date (YYYY-MM-DD).")


def validate_member(values: dict) -> list[str]:
    errors: list[str] = []
    if not str(values.get("firstName") or "").strip():
        errors.append("First name is required.")
    if not str(values.get("lastName") or "").strip():
        errors.append("Last name is required.")
    if values.get("membershipType") not in MEMBERSHIP_TYPES:
        errors.append("Membership type must be Annual, Monthly or Walk-in.")
    _check_date(values, "membershipExpiryDate", "Expiry date", errors)
    _check_date(values, "membershipRenewal", "Renewal date", errors)
    try:
        if int(values.get("length")) < 1:
            errors.append("Length must be at least 1 month.")
    except (TypeError, ValueError):
        errors.append("Length must be a whole number of months.")
    return errors


# ---------- Payments ----------

def payment_defaults() -> dict:
    return {
        "memberId": "",
        "amount": "",
        "date": today_iso(),
        "type": "Annual",
        "expiry": "",
    }


def payment_form(payment: Payment | None = None) -> FormState:
    if payment is None:
        return FormState(values=payment_defaults())
    return FormState(
        values={
            "memberId": payment.member_id,
            "amount": payment.amount,
            "date": truncate_date(payment.date),
            "type": payment.type,
            "expiry": truncate_date(payment.expiry),
        },
        target_id=payment.id,
    )


def validate_payment(values: dict) -> list[str]:
    errors: list[str] = []
    if values.get("memberId") in (None, ""):
        errors.append("Member is required.")
    try:
        if float(values.get("amount")) < 0:
            errors.append("Amount cannot be negative.")
    except (TypeError, ValueError):
        errors.append("Amount must be numeric.")
    _check_date(values, "date", "Payment date", errors)
    if values.get("type") not in MEMBERSHIP_TYPES:
        errors.append("Payment type must be Annual, Monthly or Walk-in.")
    _check_date(values, "expiry", "Expiry date", errors)
    return errors
