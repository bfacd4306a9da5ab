"""
app.py
Streamlit Membership Manager: Members and Payments screens.
Run: streamlit run app.py
"""

from __future__ import annotations

import logging

import streamlit as st

import config
import db
import utils
from api import MembersAPI, PaymentsAPI
from models import ALL, ANNUAL_OPTIONS, MEMBERSHIP_TYPES, MONTHS, SORT_LABELS
from pipeline import member_name
from views import CONFIRMING_DELETE, ERROR, IDLE, MODAL_OPEN, READY, MemberListView, PaymentListView

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Membership Manager", layout="wide")

PAGES = ["Members", "Payments"]


def init_once():
    db.init_db()


def _as_date(value):
    try:
        return utils.parse_iso(value)
    except (TypeError, ValueError):
        return None


def _iso(d) -> str:
    return d.isoformat() if d else ""


def _index(options, value) -> int:
    return list(options).index(value) if value in options else 0


# ---------- View lifecycle ----------

def get_view(page: str):
    # Leaving a screen disposes its view; coming back starts a fresh one
    for other in PAGES:
        key = f"{other.lower()}_view"
        if other != page and key in st.session_state:
            st.session_state.pop(key).dispose()

    key = f"{page.lower()}_view"
    if key not in st.session_state:
        logger.info("Opening %s screen", page)
        if page == "Members":
            st.session_state[key] = MemberListView(MembersAPI())
        else:
            st.session_state[key] = PaymentListView(PaymentsAPI(), MembersAPI())

    view = st.session_state[key]
    if view.status == IDLE:
        with st.spinner("Loading..."):
            view.load()
    return view


def show_notices(view):
    for notice in view.drain_notices():
        if notice.level == "success":
            st.success(notice.text)
        else:
            st.error(notice.text)


# ---------- Shared list widgets ----------

def list_controls(view, with_month: bool = False):
    entity = view.entity
    cols = st.columns([1, 1, 1, 2] if with_month else [1, 1, 2])

    with cols[0]:
        sort_order = st.selectbox(
            "Sort",
            options=list(SORT_LABELS),
            format_func=SORT_LABELS.get,
            index=_index(SORT_LABELS, view.sort_order),
            key=f"{entity}_sort",
        )
        view.set_sort_order(sort_order)

    with cols[1]:
        type_options = [ALL] + list(MEMBERSHIP_TYPES)
        filter_type = st.selectbox(
            "Type",
            options=type_options,
            format_func=lambda v: "All Types" if v == ALL else v,
            index=_index(type_options, view.filter_type),
            key=f"{entity}_type",
        )
        view.set_filter_type(filter_type)

    if with_month:
        with cols[2]:
            month_options = [ALL] + list(MONTHS)
            filter_month = st.selectbox(
                "Month",
                options=month_options,
                format_func=lambda v: "All Months" if v == ALL else v,
                index=_index(month_options, view.filter_month),
                key=f"{entity}_month",
            )
            view.set_filter_month(filter_month)

    with cols[-1]:
        search = st.text_input("Search", placeholder="Search by member name", key=f"{entity}_search")
        view.set_search(search)


def pagination(view, result):
    c1, c2, c3 = st.columns([1, 2, 1])
    with c1:
        if st.button("Previous", disabled=not result.has_previous, key=f"{view.entity}_prev"):
            view.previous_page()
            st.rerun()
    with c2:
        st.markdown(f"**{result.label}**")
    with c3:
        if st.button("Next", disabled=not result.has_next, key=f"{view.entity}_next"):
            view.next_page()
            st.rerun()


def record_actions(view, records, label_for):
    if not records:
        st.caption(f"No {view.entity}s to show.")
        return

    by_id = {r.id: r for r in records}
    selected_id = st.selectbox(
        f"Select {view.entity}",
        options=[None] + list(by_id),
        format_func=lambda i: "(none)" if i is None else label_for(by_id[i]),
        key=f"{view.entity}_selected",
    )
    if selected_id is None:
        return

    c1, c2 = st.columns(2)
    with c1:
        if st.button("✏️ Edit", disabled=view.status != READY, key=f"{view.entity}_edit"):
            view.open_edit(by_id[selected_id])
            st.rerun()
    with c2:
        if st.button("🗑️ Delete", disabled=view.status != READY, key=f"{view.entity}_delete"):
            view.request_delete(selected_id)
            st.rerun()


def delete_prompt(view):
    st.warning(f"Are you sure you want to delete this {view.entity}?")
    c1, c2 = st.columns(2)
    with c1:
        if st.button("Yes, delete", type="primary", key=f"{view.entity}_confirm_delete"):
            view.confirm_delete()
            st.rerun()
    with c2:
        if st.button("Cancel", key=f"{view.entity}_cancel_delete"):
            view.cancel_delete()
            st.rerun()


def submit_form(view, fields: dict):
    for name, value in fields.items():
        view.change(name, value)
    view.submit()
    st.rerun()


# ---------- Members ----------

def member_form_section(view):
    form = view.form
    values = form.values
    st.subheader("Edit Member" if form.is_edit else "Add New Member")

    with st.form("member_form"):
        c1, c2 = st.columns(2)
        with c1:
            first_name = st.text_input("First Name", value=values["firstName"])
            membership_type = st.selectbox(
                "Membership Type", MEMBERSHIP_TYPES, index=_index(MEMBERSHIP_TYPES, values["membershipType"])
            )
            expiry = st.date_input("Membership Expiry Date", value=_as_date(values["membershipExpiryDate"]))
            length = st.number_input("Length (months)", min_value=1, step=1, value=int(values["length"] or 1))
        with c2:
            last_name = st.text_input("Last Name", value=values["lastName"])
            annual = st.selectbox(
                "Annual Membership", ANNUAL_OPTIONS, index=_index(ANNUAL_OPTIONS, values["annualMembership"])
            )
            renewal = st.date_input("Membership Renewal", value=_as_date(values["membershipRenewal"]))

        notes1 = st.text_area("Notes 1", value=values["notes1"], height=68)
        notes2 = st.text_area("Notes 2", value=values["notes2"], height=68)
        notes3 = st.text_area("Notes 3", value=values["notes3"], height=68)

        b1, b2 = st.columns(2)
        cancel = b1.form_submit_button("Cancel")
        save = b2.form_submit_button("Update Member" if form.is_edit else "Add Member", type="primary")

    if cancel:
        view.close_modal()
        st.rerun()
    if save:
        submit_form(
            view,
            {
                "firstName": first_name,
                "lastName": last_name,
                "membershipType": membership_type,
                "annualMembership": annual,
                "membershipExpiryDate": _iso(expiry),
                "membershipRenewal": _iso(renewal),
                "length": int(length),
                "notes1": notes1,
                "notes2": notes2,
                "notes3": notes3,
            },
        )


def members_page(view):
    st.header("👥 Members")
    show_notices(view)

    if view.status == ERROR:
        st.error(view.error)
        return

    list_controls(view)
    result = view.current_page()

    c1, c2 = st.columns([3, 1])
    c1.metric("Total Members", result.total)
    with c2:
        if st.button("➕ Add Member", type="primary", disabled=view.status != READY):
            view.open_add()
            st.rerun()

    st.subheader("Member List")
    st.dataframe(utils.members_frame(result.records), use_container_width=True, hide_index=True)
    pagination(view, result)

    st.divider()

    if view.status == CONFIRMING_DELETE:
        delete_prompt(view)
    elif view.status == MODAL_OPEN:
        member_form_section(view)
    else:
        record_actions(view, result.records, lambda m: f"{m.full_name} ({m.membership_type})")


# ---------- Payments ----------

def payment_form_section(view):
    form = view.form
    values = form.values
    st.subheader("Edit Payment" if form.is_edit else "Add New Payment")

    options = dict(view.member_options(values["memberId"]))
    member_ids = [""] + list(options)

    with st.form("payment_form"):
        member_id = st.selectbox(
            "Member",
            options=member_ids,
            format_func=lambda i: "Select Member" if i == "" else options[i],
            index=_index(member_ids, str(values["memberId"])),
        )
        amount_value = values["amount"]
        amount = st.number_input(
            "Amount (₱)",
            min_value=0.0,
            step=0.01,
            format="%.2f",
            value=None if amount_value in ("", None) else float(amount_value),
        )
        pay_date = st.date_input("Payment Date", value=_as_date(values["date"]))
        pay_type = st.selectbox("Payment Type", MEMBERSHIP_TYPES, index=_index(MEMBERSHIP_TYPES, values["type"]))
        expiry = st.date_input("Expiry Date", value=_as_date(values["expiry"]))

        b1, b2 = st.columns(2)
        cancel = b1.form_submit_button("Cancel")
        save = b2.form_submit_button("Update Payment" if form.is_edit else "Add Payment", type="primary")

    if cancel:
        view.close_modal()
        st.rerun()
    if save:
        submit_form(
            view,
            {
                "memberId": member_id,
                "amount": "" if amount is None else amount,
                "date": _iso(pay_date),
                "type": pay_type,
                "expiry": _iso(expiry),
            },
        )


def payments_page(view):
    st.header("💳 Payments")
    show_notices(view)

    if view.status == ERROR:
        st.error(view.error)
        return

    list_controls(view, with_month=True)
    result = view.current_page()

    c1, c2 = st.columns([3, 1])
    c1.metric("Total Payments", result.total)
    with c2:
        if st.button("➕ Add Payment", type="primary", disabled=view.status != READY):
            view.open_add()
            st.rerun()

    st.subheader("Recent Payments")
    st.dataframe(utils.payments_frame(result.records, view.names), use_container_width=True, hide_index=True)
    pagination(view, result)

    st.divider()

    def label_for(p):
        return f"{utils.format_date(p.date)} · {member_name(view.names, p.member_id)} · {utils.format_amount(p.amount)}"

    if view.status == CONFIRMING_DELETE:
        delete_prompt(view)
    elif view.status == MODAL_OPEN:
        payment_form_section(view)
    else:
        record_actions(view, result.records, label_for)


def main_app():
    st.sidebar.title("🏋️ Membership Manager")
    page = st.sidebar.radio("Navigate", PAGES, key="page")

    view = get_view(page)
    if page == "Members":
        members_page(view)
    else:
        payments_page(view)


# --------- App entry ---------

def run():
    init_once()
    main_app()


if __name__ == "__main__":
    run()
