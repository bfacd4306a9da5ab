"""
api.py
Local members/payments API backed by SQLite. Every call answers with a plain
dict in the wire shape ({"success": bool, ...}); the read_list/check_mutation
helpers turn those dicts into Ok/Failure results for the views.
"""

from __future__ import annotations

import logging
import sqlite3

import db
from forms import validate_member, validate_payment
from models import Failure, Member, Ok, Payment, Result
from utils import now_iso, truncate_date

logger = logging.getLogger(__name__)


def _fail(message: str) -> dict:
    return {"success": False, "message": message}


# ---------- Boundary checks ----------

def read_list(response, field: str) -> Result:
    if isinstance(response, dict) and response.get("success") and isinstance(response.get(field), list):
        return Ok(response[field])
    return Failure(f"Invalid {field} response format")


def check_mutation(response, default_message: str) -> Result:
    if isinstance(response, dict) and response.get("success"):
        return Ok(response)
    message = response.get("message") if isinstance(response, dict) else None
    return Failure(message or default_message)


# ---------- Members ----------

def _member_to_dict(row: sqlite3.Row) -> dict:
    return Member(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        membership_type=row["membership_type"],
        membership_expiry_date=row["membership_expiry_date"],
        membership_renewal=row["membership_renewal"],
        annual_membership=row["annual_membership"],
        notes1=row["notes1"],
        notes2=row["notes2"],
        notes3=row["notes3"],
        length=row["length"],
        created_at=row["created_at"],
    ).to_dict()


def _member_values(data: dict) -> tuple:
    errors = validate_member(data)
    if errors:
        raise ValueError(" ".join(errors))
    return (
        str(data["firstName"]).strip(),
        str(data["lastName"]).strip(),
        data["membershipType"],
        truncate_date(data["membershipExpiryDate"]),
        truncate_date(data["membershipRenewal"]),
        data.get("annualMembership") or "No",
        data.get("notes1") or "",
        data.get("notes2") or "",
        data.get("notes3") or "",
        int(data["length"]),
    )


class MembersAPI:
    def _get(self, member_id) -> dict | None:
        row = db.fetch_one("SELECT * FROM members WHERE id = ?", (member_id,))
        return _member_to_dict(row) if row else None

    def get_members(self) -> dict:
        try:
            rows = db.fetch_all("SELECT * FROM members ORDER BY id ASC")
        except sqlite3.Error:
            logger.exception("Reading members failed")
            return _fail("Could not read members.")
        return {"success": True, "members": [_member_to_dict(r) for r in rows]}

    def add_member(self, data: dict) -> dict:
        try:
            values = _member_values(data)
            new_id = db.execute(
                """
                INSERT INTO members(first_name, last_name, membership_type, membership_expiry_date,
                    membership_renewal, annual_membership, notes1, notes2, notes3, length, created_at)
                VALUES(?,?,?,?,?,?,?,?,?,?,?)
                """,
                values + (now_iso(),),
            )
        except ValueError as e:
            return _fail(str(e))
        except sqlite3.Error as e:
            logger.exception("Adding member failed")
            return _fail(f"Could not save member: {e}")
        logger.info("Member %s added", new_id)
        return {"success": True, "member": self._get(new_id)}

    def update_member(self, member_id, data: dict) -> dict:
        try:
            values = _member_values(data)
            changed = db.execute_rowcount(
                """
                UPDATE members SET first_name=?, last_name=?, membership_type=?, membership_expiry_date=?,
                    membership_renewal=?, annual_membership=?, notes1=?, notes2=?, notes3=?, length=?
                WHERE id=?
                """,
                values + (member_id,),
            )
        except ValueError as e:
            return _fail(str(e))
        except sqlite3.Error as e:
            logger.exception("Updating member %s failed", member_id)
            return _fail(f"Could not save member: {e}")
        if not changed:
            return _fail("Member not found")
        logger.info("Member %s updated", member_id)
        return {"success": True, "member": self._get(member_id)}

    def delete_member(self, member_id) -> dict:
        try:
            changed = db.execute_rowcount("DELETE FROM members WHERE id = ?", (member_id,))
        except sqlite3.Error:
            logger.exception("Deleting member %s failed", member_id)
            return _fail("Could not delete member.")
        if not changed:
            return _fail("Member not found")
        logger.info("Member %s deleted", member_id)
        return {"success": True}


# ---------- Payments ----------

def _payment_to_dict(row: sqlite3.Row) -> dict:
    return Payment(
        id=row["id"],
        member_id=row["member_id"],
        amount=row["amount"],
        date=row["date"],
        type=row["type"],
        expiry=row["expiry"],
        created_at=row["created_at"],
    ).to_dict()


def _payment_values(data: dict) -> tuple:
    errors = validate_payment(data)
    if errors:
        raise ValueError(" ".join(errors))
    try:
        member_id = int(data["memberId"])
    except (TypeError, ValueError):
        raise ValueError("Member is required.")
    return (
        member_id,
        round(float(data["amount"]), 2),
        truncate_date(data["date"]),
        data["type"],
        truncate_date(data["expiry"]),
    )


class PaymentsAPI:
    def _get(self, payment_id) -> dict | None:
        row = db.fetch_one("SELECT * FROM payments WHERE id = ?", (payment_id,))
        return _payment_to_dict(row) if row else None

    def get_payments(self) -> dict:
        try:
            rows = db.fetch_all("SELECT * FROM payments ORDER BY id ASC")
        except sqlite3.Error:
            logger.exception("Reading payments failed")
            return _fail("Could not read payments.")
        return {"success": True, "payments": [_payment_to_dict(r) for r in rows]}

    def add_payment(self, data: dict) -> dict:
        try:
            values = _payment_values(data)
            new_id = db.execute(
                "INSERT INTO payments(member_id, amount, date, type, expiry, created_at) VALUES(?,?,?,?,?,?)",
                values + (now_iso(),),
            )
        except ValueError as e:
            return _fail(str(e))
        except sqlite3.Error as e:
            logger.exception("Adding payment failed")
            return _fail(f"Could not save payment: {e}")
        logger.info("Payment %s added", new_id)
        return {"success": True, "payment": self._get(new_id)}

    def update_payment(self, payment_id, data: dict) -> dict:
        try:
            values = _payment_values(data)
            changed = db.execute_rowcount(
                "UPDATE payments SET member_id=?, amount=?, date=?, type=?, expiry=? WHERE id=?",
                values + (payment_id,),
            )
        except ValueError as e:
            return _fail(str(e))
        except sqlite3.Error as e:
            logger.exception("Updating payment %s failed", payment_id)
            return _fail(f"Could not save payment: {e}")
        if not changed:
            return _fail("Payment not found")
        logger.info("Payment %s updated", payment_id)
        return {"success": True, "payment": self._get(payment_id)}

    def delete_payment(self, payment_id) -> dict:
        try:
            changed = db.execute_rowcount("DELETE FROM payments WHERE id = ?", (payment_id,))
        except sqlite3.Error:
            logger.exception("Deleting payment %s failed", payment_id)
            return _fail("Could not delete payment.")
        if not changed:
            return _fail("Payment not found")
        logger.info("Payment %s deleted", payment_id)
        return {"success": True}
