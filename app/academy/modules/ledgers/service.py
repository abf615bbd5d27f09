from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from app.academy.api_client import AcademyApiClient
from app.academy.constants import CURRENCIES, EXPENSE_TYPES, RELATED_ENTITY_TYPE, REVENUE_TYPES, SORT_ORDERS
from app.academy.modules.courses.service import course_options
from app.academy.modules.instructors.service import instructor_options
from app.academy.utils import (
    format_amount,
    is_number,
    is_valid_date,
    iso_date_part,
    sort_by_amount,
    to_int,
    to_number,
)

FORM_FIELDS = ("type", "amount", "currency", "date", "description", "relatedEntityID")
PDF_HEADERS = ("Type", "Amount", "Currency", "Date", "Description", "Related Entity")
PDF_COL_WEIGHTS = (1.1, 1.0, 0.9, 1.1, 3.0, 1.9)


@dataclass(frozen=True)
class Ledger:
    key: str  # blueprint name and URL segment, e.g. "revenues"
    noun: str  # "revenue"
    title: str  # "Revenues"
    id_field: str  # "revenueID"
    date_field: str  # "revenueDate"
    type_field: str  # payload/filter key, "revenueType"
    row_type_id_field: str  # type code on list rows, "RevenueTypeId"
    row_type_name_field: str  # "revenueTypeName"
    types: dict[int, str]
    related_label: str  # "Course"
    default_currency: int
    list_rows: Callable[[AcademyApiClient, dict[str, Any]], list[dict[str, Any]]]
    save_row: Callable[[AcademyApiClient, dict[str, Any]], Any]
    delete_row: Callable[[AcademyApiClient, int], None]
    related_options: Callable[[AcademyApiClient], list[tuple[int, str]]]

    @property
    def filter_fields(self) -> tuple[str, ...]:
        return (self.type_field, "startDate", "endDate", "minAmount", "maxAmount", "sortOrder")


REVENUES = Ledger(
    key="revenues",
    noun="revenue",
    title="Revenues",
    id_field="revenueID",
    date_field="revenueDate",
    type_field="revenueType",
    row_type_id_field="RevenueTypeId",
    row_type_name_field="revenueTypeName",
    types=REVENUE_TYPES,
    related_label="Course",
    default_currency=2,
    list_rows=lambda api, filters: api.list_revenues(filters),
    save_row=lambda api, payload: api.save_revenue(payload),
    delete_row=lambda api, row_id: api.delete_revenue(row_id),
    related_options=lambda api: course_options(api.list_courses({})),
)

EXPENSES = Ledger(
    key="expenses",
    noun="expense",
    title="Expenses",
    id_field="expenseID",
    date_field="expenseDate",
    type_field="expenseType",
    row_type_id_field="expenseTypeId",
    row_type_name_field="expenseTypeName",
    types=EXPENSE_TYPES,
    related_label="Instructor",
    default_currency=1,
    list_rows=lambda api, filters: api.list_expenses(filters),
    save_row=lambda api, payload: api.save_expense(payload),
    delete_row=lambda api, row_id: api.delete_expense(row_id),
    related_options=lambda api: instructor_options(api.list_instructors()),
)


def normalize_filters(filters: dict[str, str]) -> dict[str, str]:
    out = dict(filters)
    if out.get("sortOrder") not in SORT_ORDERS:
        out["sortOrder"] = "asc"
    return out


def validate_filters(filters: dict[str, str]) -> list[str]:
    errors = []
    for field, label in (("minAmount", "Min amount"), ("maxAmount", "Max amount")):
        if filters.get(field) and not is_number(filters[field]):
            errors.append(f"{label} must be a number.")
    for field, label in (("startDate", "Start date"), ("endDate", "End date")):
        if not is_valid_date(filters.get(field)):
            errors.append(f"{label} must be a valid date (YYYY-MM-DD).")
    return errors


def fetch_rows(ledger: Ledger, api: AcademyApiClient, filters: dict[str, str]) -> list[dict[str, Any]]:
    """The API is asked for the chosen order, and rows are also sorted here by amount."""
    rows = ledger.list_rows(api, filters)
    return sort_by_amount(rows, filters.get("sortOrder") or "asc")


def empty_form(ledger: Ledger, today: date | None = None) -> dict[str, Any]:
    return {
        "id": 0,
        "type": 1,
        "amount": "",
        "currency": ledger.default_currency,
        "date": (today or date.today()).isoformat(),
        "description": "",
        "relatedEntityID": "",
        "isUpdate": False,
    }


def form_from_row(ledger: Ledger, row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row.get(ledger.id_field) or 0,
        "type": to_int(row.get(ledger.row_type_id_field)) or 1,
        "amount": row.get("amount") if row.get("amount") is not None else "",
        "currency": to_int(row.get("currency")) or ledger.default_currency,
        "date": iso_date_part(row.get(ledger.date_field)),
        "description": row.get("description") or "",
        "relatedEntityID": row.get("relatedEntityID") or "",
        "isUpdate": True,
    }


def validate_form(ledger: Ledger, form: dict[str, Any]) -> list[str]:
    errors = []
    if to_int(form.get("type")) not in ledger.types:
        errors.append(f"Please select the {ledger.noun} type.")
    if not is_number(form.get("amount")):
        errors.append("Amount must be a number.")
    if to_int(form.get("currency")) not in CURRENCIES:
        errors.append("Please select a currency.")
    if not (form.get("date") or "").strip() or not is_valid_date(form.get("date")):
        errors.append("Date must be a valid date (YYYY-MM-DD).")
    return errors


def build_payload(ledger: Ledger, form: dict[str, Any], *, row_id: int = 0) -> dict[str, Any]:
    entry_type = to_int(form.get("type"), default=1)
    related = to_int(form.get("relatedEntityID")) if entry_type == RELATED_ENTITY_TYPE else 0
    return {
        ledger.id_field: row_id,
        "amount": to_number(form.get("amount")),
        ledger.date_field: (form.get("date") or "").strip(),
        "description": (form.get("description") or "").strip(),
        "relatedEntityID": related or None,
        ledger.type_field: entry_type,
        "currency": to_int(form.get("currency"), default=ledger.default_currency),
        "isUpdate": bool(row_id),
    }


def pdf_rows(ledger: Ledger, rows: list[dict[str, Any]]) -> list[list[str]]:
    """Table body for the export, closed by a Total Amount row over the listed rows."""
    body = [
        [
            row.get(ledger.row_type_name_field) or "",
            format_amount(row.get("amount")),
            row.get("currencyName") or "",
            iso_date_part(row.get(ledger.date_field)),
            row.get("description") or "",
            row.get("relatedEntityName") or "N/A",
        ]
        for row in rows
    ]
    total = sum(to_number(row.get("amount")) for row in rows)
    body.append(["Total Amount", format_amount(total), "", "", "", ""])
    return body
