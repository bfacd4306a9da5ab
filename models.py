"""
models.py
Domain records, result types and errors shared by the API, pipeline and views.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

MEMBERSHIP_TYPES = ("Annual", "Monthly", "Walk-in")
ANNUAL_OPTIONS = ("No", "Yes")
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

ALL = "all"
SORT_DESC = "desc"
SORT_ASC = "asc"
SORT_LABELS = {SORT_DESC: "Most Recent", SORT_ASC: "Oldest First"}

UNKNOWN_MEMBER = "Unknown Member"


@dataclass(frozen=True)
class Member:
    id: int | None
    first_name: str
    last_name: str
    membership_type: str
    membership_expiry_date: str
    membership_renewal: str
    annual_membership: str = "No"
    notes1: str = ""
    notes2: str = ""
    notes3: str = ""
    length: int = 1
    created_at: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_dict(cls, data: dict) -> "Member":
        return cls(
            id=data.get("id"),
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            membership_type=data.get("membershipType") or "",
            membership_expiry_date=data.get("membershipExpiryDate") or "",
            membership_renewal=data.get("membershipRenewal") or "",
            annual_membership=data.get("annualMembership") or "No",
            notes1=data.get("notes1") or "",
            notes2=data.get("notes2") or "",
            notes3=data.get("notes3") or "",
            length=int(data.get("length") or 1),
            created_at=data.get("createdAt") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "membershipType": self.membership_type,
            "membershipExpiryDate": self.membership_expiry_date,
            "membershipRenewal": self.membership_renewal,
            "annualMembership": self.annual_membership,
            "notes1": self.notes1,
            "notes2": self.notes2,
            "notes3": self.notes3,
            "length": self.length,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class Payment:
    id: int | None
    member_id: int | None
    amount: float
    date: str
    type: str
    expiry: str
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Payment":
        return cls(
            id=data.get("id"),
            member_id=data.get("memberId"),
            amount=float(data.get("amount") or 0),
            date=data.get("date") or "",
            type=data.get("type") or "",
            expiry=data.get("expiry") or "",
            created_at=data.get("createdAt") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "memberId": self.member_id,
            "amount": self.amount,
            "date": self.date,
            "type": self.type,
            "expiry": self.expiry,
            "createdAt": self.created_at,
        }


# ---------- Results at the API boundary ----------

@dataclass(frozen=True)
class Ok:
    payload: Any = None


@dataclass(frozen=True)
class Failure:
    message: str


Result = Union[Ok, Failure]


# ---------- Errors ----------

class LoadShapeError(Exception):
    """A read response did not carry `success` plus a list payload."""


class MutationError(Exception):
    """Create/update was rejected by the API or raised."""


class DeleteFailure(Exception):
    """Delete answered `success: false` or raised."""


class InvalidTransition(Exception):
    """A view operation was called in a state that does not allow it."""
