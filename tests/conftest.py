# tests/conftest.py
import pytest

import config
import db


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_FILE", tmp_path / "test.db")
    db.init_db()
    return config.DB_FILE


def member_dict(i, created_at=None, **overrides):
    data = {
        "id": i,
        "firstName": f"First{i}",
        "lastName": f"Last{i}",
        "membershipType": "Annual",
        "membershipExpiryDate": "2025-01-01",
        "membershipRenewal": "2024-01-01",
        "annualMembership": "No",
        "notes1": "",
        "notes2": "",
        "notes3": "",
        "length": 1,
        "createdAt": created_at or f"2024-01-{i:02d}T10:00:00",
    }
    data.update(overrides)
    return data


def payment_dict(pid, member_id, date, **overrides):
    data = {
        "id": pid,
        "memberId": member_id,
        "amount": 100.0,
        "date": date,
        "type": "Monthly",
        "expiry": "2025-12-31",
        "createdAt": "2024-01-01T00:00:00",
    }
    data.update(overrides)
    return data


class FakeMembersAPI:
    """In-memory stand-in for MembersAPI that records every call."""

    def __init__(self, members=None):
        self.members = [dict(m) for m in (members or [])]
        self.calls = []
        self.get_response = None
        self.add_response = None
        self.delete_response = None

    def get_members(self):
        self.calls.append(("get",))
        if self.get_response is not None:
            return self.get_response
        return {"success": True, "members": [dict(m) for m in self.members]}

    def add_member(self, data):
        self.calls.append(("add", data))
        if self.add_response is not None:
            return self.add_response
        new = dict(data, id=len(self.members) + 100, createdAt="2030-01-01T00:00:00")
        self.members.append(new)
        return {"success": True, "member": new}

    def update_member(self, member_id, data):
        self.calls.append(("update", member_id, data))
        for m in self.members:
            if m["id"] == member_id:
                m.update(data)
                return {"success": True, "member": m}
        return {"success": False, "message": "Member not found"}

    def delete_member(self, member_id):
        self.calls.append(("delete", member_id))
        if self.delete_response is not None:
            return self.delete_response
        self.members = [m for m in self.members if m["id"] != member_id]
        return {"success": True}


class FakePaymentsAPI:
    def __init__(self, payments=None):
        self.payments = [dict(p) for p in (payments or [])]
        self.calls = []
        self.get_response = None
        self.delete_response = None

    def get_payments(self):
        self.calls.append(("get",))
        if self.get_response is not None:
            return self.get_response
        return {"success": True, "payments": [dict(p) for p in self.payments]}

    def add_payment(self, data):
        self.calls.append(("add", data))
        new = dict(data, id=f"p{len(self.payments) + 100}")
        self.payments.append(new)
        return {"success": True, "payment": new}

    def update_payment(self, payment_id, data):
        self.calls.append(("update", payment_id, data))
        for p in self.payments:
            if p["id"] == payment_id:
                p.update(data)
                return {"success": True, "payment": p}
        return {"success": False, "message": "Payment not found"}

    def delete_payment(self, payment_id):
        self.calls.append(("delete", payment_id))
        if self.delete_response is not None:
            return self.delete_response
        self.payments = [p for p in self.payments if p["id"] != payment_id]
        return {"success": True}
