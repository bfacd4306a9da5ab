"""
views.py
Per-screen view state: data loading, list parameters, the add/edit modal and
delete confirmation. UI-agnostic; app.py renders whatever state these hold.

State machine:
    IDLE -> LOADING -> READY | ERROR
    READY -> MODAL_OPEN -> SUBMITTING -> READY (saved) | MODAL_OPEN (failed)
    READY -> CONFIRMING_DELETE -> READY
ERROR is terminal for a view instance.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

from api import check_mutation, read_list
from forms import FormState, member_form, payment_form, validate_member, validate_payment
from models import (
    ALL,
    SORT_DESC,
    DeleteFailure,
    Failure,
    InvalidTransition,
    LoadShapeError,
    Member,
    MutationError,
    UNKNOWN_MEMBER,
    Payment,
)
from pipeline import PageResult, member_names, member_page, payment_page

logger = logging.getLogger(__name__)

IDLE = "idle"
LOADING = "loading"
READY = "ready"
ERROR = "error"
MODAL_OPEN = "modal_open"
SUBMITTING = "submitting"
CONFIRMING_DELETE = "confirming_delete"


@dataclass(frozen=True)
class Notice:
    level: str  # 'success' or 'error'
    text: str


class DataSource:
    """
    Runs one or more list reads and waits for all of them. Any failed call or
    malformed response fails the whole load with LoadShapeError.
    """

    def __init__(self, reads: dict[str, tuple[Callable[[], dict], str]]):
        # name -> (read call, list field in its response)
        self.reads = reads

    def _check(self, name: str, response) -> list:
        result = read_list(response, self.reads[name][1])
        if isinstance(result, Failure):
            raise LoadShapeError(result.message)
        return result.payload

    def fetch(self) -> dict[str, list]:
        if len(self.reads) == 1:
            name, (call, _) = next(iter(self.reads.items()))
            try:
                response = call()
            except Exception as e:
                raise LoadShapeError(f"{name} read failed: {e}") from e
            return {name: self._check(name, response)}

        with ThreadPoolExecutor(max_workers=len(self.reads), thread_name_prefix="load") as pool:
            futures = {name: pool.submit(call) for name, (call, _) in self.reads.items()}

        results = {}
        for name, future in futures.items():
            try:
                response = future.result()
            except Exception as e:
                raise LoadShapeError(f"{name} read failed: {e}") from e
            results[name] = self._check(name, response)
        return results


class MutationDispatcher:
    """
    Sends create/update/delete calls and converts any rejection into
    MutationError / DeleteFailure.
    """

    def __init__(self, entity: str, create: Callable, update: Callable, delete: Callable):
        self.entity = entity
        self._create = create
        self._update = update
        self._delete = delete

    def save(self, form: FormState) -> dict:
        try:
            if form.is_edit:
                response = self._update(form.target_id, form.payload())
            else:
                response = self._create(form.payload())
        except Exception as e:
            raise MutationError(str(e)) from e
        result = check_mutation(response, f"Failed to save {self.entity}")
        if isinstance(result, Failure):
            raise MutationError(result.message)
        return result.payload

    def delete(self, record_id) -> None:
        try:
            response = self._delete(record_id)
        except Exception as e:
            raise DeleteFailure(str(e)) from e
        result = check_mutation(response, f"Failed to delete {self.entity}")
        if isinstance(result, Failure):
            raise DeleteFailure(result.message)


class ListView(ABC):
    entity = "record"
    load_error = "Failed to fetch data"

    def __init__(self, dispatcher: MutationDispatcher, page_size: int | None = None):
        self.dispatcher = dispatcher
        self.page_size = page_size
        self.status = IDLE
        self.error: str | None = None
        self.records: list = []

        self.search_term = ""
        self.filter_type = ALL
        self.sort_order = SORT_DESC
        self.page = 1

        self.form: FormState | None = None
        self.pending_delete = None
        self.notices: list[Notice] = []

        self._generation = 0
        self.disposed = False

    # ---------- lifecycle ----------

    def _require(self, *states: str) -> None:
        if self.status not in states:
            raise InvalidTransition(f"{self.entity} view is {self.status}, expected one of {states}")

    def _begin_request(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, token: int) -> bool:
        return not self.disposed and token == self._generation

    def dispose(self) -> None:
        """
        Drop the view; responses still in flight are ignored when they land.
        """
        self.disposed = True
        self._generation += 1

    @abstractmethod
    def _source(self) -> DataSource:
        ...

    @abstractmethod
    def _apply(self, data: dict[str, list]) -> None:
        ...

    def _apply_checked(self, data: dict[str, list]) -> None:
        try:
            self._apply(data)
        except (AttributeError, TypeError, ValueError) as e:
            raise LoadShapeError(f"Malformed {self.entity} record: {e}") from e

    def load(self) -> None:
        self._require(IDLE, READY)
        token = self._begin_request()
        self.status = LOADING
        try:
            data = self._source().fetch()
            stale = not self._is_current(token)
            if not stale:
                self._apply_checked(data)
        except LoadShapeError as e:
            logger.error("%s: %s", self.load_error, e)
            if self._is_current(token):
                self.status = ERROR
                self.error = self.load_error
            return
        if stale:
            logger.debug("Discarding stale %s load (token %s)", self.entity, token)
            return
        self.status = READY
        logger.info("Loaded %d %s records", len(self.records), self.entity)

    def _refresh(self) -> None:
        self.load()

    # ---------- list parameters ----------

    def set_search(self, term: str) -> None:
        if term != self.search_term:
            self.search_term = term
            self.page = 1

    def set_filter_type(self, value: str) -> None:
        if value != self.filter_type:
            self.filter_type = value
            self.page = 1

    def set_sort_order(self, value: str) -> None:
        if value != self.sort_order:
            self.sort_order = value
            self.page = 1

    @abstractmethod
    def _page(self) -> PageResult:
        ...

    def current_page(self) -> PageResult:
        result = self._page()
        self.page = result.page
        return result

    def next_page(self) -> None:
        result = self.current_page()
        if result.has_next:
            self.page = result.page + 1

    def previous_page(self) -> None:
        result = self.current_page()
        if result.has_previous:
            self.page = result.page - 1

    # ---------- notices ----------

    def _notify(self, level: str, text: str) -> None:
        self.notices.append(Notice(level, text))

    def drain_notices(self) -> list[Notice]:
        notices, self.notices = self.notices, []
        return notices

    # ---------- add / edit ----------

    @abstractmethod
    def _blank_form(self) -> FormState:
        ...

    @abstractmethod
    def _edit_form(self, record) -> FormState:
        ...

    @abstractmethod
    def _validate(self, values: dict) -> list[str]:
        ...

    def open_add(self) -> None:
        self._require(READY)
        self.form = self._blank_form()
        self.status = MODAL_OPEN

    def open_edit(self, record) -> None:
        self._require(READY)
        self.form = self._edit_form(record)
        self.status = MODAL_OPEN

    def change(self, name: str, value) -> None:
        self._require(MODAL_OPEN)
        self.form = self.form.update(name, value)

    def close_modal(self) -> None:
        self._require(MODAL_OPEN)
        self.form = None
        self.status = READY

    def submit(self) -> bool:
        self._require(MODAL_OPEN)
        errors = self._validate(self.form.values)
        if errors:
            for error in errors:
                self._notify("error", error)
            return False

        editing = self.form.is_edit
        self.status = SUBMITTING
        try:
            self.dispatcher.save(self.form)
        except MutationError as e:
            logger.error("Error saving %s: %s", self.entity, e)
            self.status = MODAL_OPEN
            self._notify("error", f"Failed to save {self.entity}: {e}")
            return False

        self._notify("success", f"{self.entity.capitalize()} {'updated' if editing else 'added'} successfully!")
        self.form = None
        self.status = READY
        self._refresh()
        return True

    # ---------- delete ----------

    def request_delete(self, record_id) -> None:
        self._require(READY)
        self.pending_delete = record_id
        self.status = CONFIRMING_DELETE

    def cancel_delete(self) -> None:
        self._require(CONFIRMING_DELETE)
        self.pending_delete = None
        self.status = READY

    def confirm_delete(self) -> bool:
        self._require(CONFIRMING_DELETE)
        record_id, self.pending_delete = self.pending_delete, None
        try:
            self.dispatcher.delete(record_id)
        except DeleteFailure as e:
            logger.error("Error deleting %s %s: %s", self.entity, record_id, e)
            self.status = READY
            self._notify("error", f"Failed to delete {self.entity}. Please try again.")
            return False
        # local splice, no refetch
        self.records = [r for r in self.records if r.id != record_id]
        self.status = READY
        self._notify("success", f"{self.entity.capitalize()} deleted successfully!")
        return True


class MemberListView(ListView):
    entity = "member"
    load_error = "Failed to fetch members"

    def __init__(self, members_api, page_size: int | None = None):
        super().__init__(
            MutationDispatcher("member", members_api.add_member, members_api.update_member, members_api.delete_member),
            page_size,
        )
        self.members_api = members_api

    def _source(self) -> DataSource:
        return DataSource({"members": (self.members_api.get_members, "members")})

    def _apply(self, data: dict[str, list]) -> None:
        self.records = [Member.from_dict(d) for d in data["members"]]

    def _page(self) -> PageResult:
        return member_page(
            self.records, self.search_term, self.filter_type, self.sort_order, self.page, self.page_size
        )

    def _blank_form(self) -> FormState:
        return member_form()

    def _edit_form(self, record: Member) -> FormState:
        return member_form(record)

    def _validate(self, values: dict) -> list[str]:
        return validate_member(values)


class PaymentListView(ListView):
    entity = "payment"
    load_error = "Failed to fetch data"

    def __init__(self, payments_api, members_api, page_size: int | None = None):
        super().__init__(
            MutationDispatcher(
                "payment", payments_api.add_payment, payments_api.update_payment, payments_api.delete_payment
            ),
            page_size,
        )
        self.payments_api = payments_api
        self.members_api = members_api
        self.members: list[Member] = []
        self.names: dict[str, str] = {}
        self.filter_month = ALL

    def _source(self) -> DataSource:
        return DataSource(
            {
                "payments": (self.payments_api.get_payments, "payments"),
                "members": (self.members_api.get_members, "members"),
            }
        )

    def _apply(self, data: dict[str, list]) -> None:
        payments = [Payment.from_dict(d) for d in data["payments"]]
        if "members" in data:
            self.members = [Member.from_dict(d) for d in data["members"]]
            self.names = member_names(self.members)
        self.records = payments

    def _refresh(self) -> None:
        # payments only; a failed refetch keeps the current list
        token = self._begin_request()
        try:
            data = DataSource({"payments": (self.payments_api.get_payments, "payments")}).fetch()
            if not self._is_current(token):
                logger.debug("Discarding stale payments refresh (token %s)", token)
                return
            self._apply_checked(data)
        except LoadShapeError as e:
            logger.error("Error fetching payments: %s", e)

    def set_filter_month(self, value: str) -> None:
        if value != self.filter_month:
            self.filter_month = value
            self.page = 1

    def member_options(self, current=None) -> list[tuple[str, str]]:
        options = [(str(m.id), m.full_name) for m in self.members]
        # keep an edited payment's deleted member selectable
        if current not in (None, "") and str(current) not in self.names:
            options.append((str(current), UNKNOWN_MEMBER))
        return options

    def _page(self) -> PageResult:
        return payment_page(
            self.records,
            self.names,
            self.search_term,
            self.filter_type,
            self.filter_month,
            self.sort_order,
            self.page,
            self.page_size,
        )

    def _blank_form(self) -> FormState:
        return payment_form()

    def _edit_form(self, record: Payment) -> FormState:
        return payment_form(record)

    def _validate(self, values: dict) -> list[str]:
        return validate_payment(values)
