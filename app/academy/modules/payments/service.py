from __future__ import annotations

from datetime import date
from typing import Any

from app.academy.constants import CURRENCIES, PAYMENT_METHODS, currency_code, payment_method_code
from app.academy.utils import format_amount, is_number, is_valid_date, iso_date_part, to_int, to_number

FILTER_FIELDS = ("courseID", "studentID", "paymentMethod")
FORM_FIELDS = ("studentID", "amount", "currency", "paymentDate", "paymentMethod", "fileID", "courseID")


def empty_form(today: date | None = None) -> dict[str, Any]:
    return {
        "paymentID": 0,
        "studentID": 0,
        "amount": "",
        "currency": 1,
        "paymentDate": (today or date.today()).isoformat(),
        "paymentMethod": 1,
        "fileID": "",
        "fileName": "",
        "courseID": 0,
        "isUpdate": False,
    }


def _id_by_name(rows: list[dict[str, Any]], name_field: str, id_field: str, name: str | None) -> int:
    for row in rows:
        if name and row.get(name_field) == name:
            return to_int(row.get(id_field))
    return 0


def form_from_row(row: dict[str, Any], *, students: list[dict[str, Any]], courses: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Payment rows come back with display names only; map them back to the
    codes and ids the save endpoint expects.
    """
    return {
        "paymentID": row.get("paymentID") or 0,
        "studentID": _id_by_name(students, "fullName", "studentID", row.get("studentName")),
        "amount": row.get("amount") if row.get("amount") is not None else "",
        "currency": currency_code(row.get("currencyName")),
        "paymentDate": iso_date_part(row.get("paymentDate")),
        "paymentMethod": payment_method_code(row.get("paymentMethodName")),
        "fileID": row.get("fileID") or "",
        "fileName": row.get("fileName") or "",
        "courseID": _id_by_name(courses, "courseName", "courseID", row.get("courseName")),
        "isUpdate": True,
    }


def validate_payment_form(form: dict[str, Any]) -> list[str]:
    errors = []
    if to_int(form.get("studentID")) <= 0:
        errors.append("Please select a student.")
    amount = form.get("amount")
    if not is_number(amount) or float(amount) <= 0:
        errors.append("Amount must be a positive number.")
    if to_int(form.get("currency")) not in CURRENCIES:
        errors.append("Please select a currency.")
    if to_int(form.get("paymentMethod")) not in PAYMENT_METHODS:
        errors.append("Please select a payment method.")
    if not (form.get("paymentDate") or "").strip() or not is_valid_date(form.get("paymentDate")):
        errors.append("Payment date must be a valid date (YYYY-MM-DD).")
    return errors


def payment_payload(form: dict[str, Any], *, payment_id: int = 0, file_id: str | None = None) -> dict[str, Any]:
    """`file_id` is the freshly uploaded receipt, if any; otherwise the existing one is kept."""
    return {
        "paymentID": payment_id,
        "studentID": to_int(form.get("studentID")),
        "amount": to_number(form.get("amount")),
        "currency": to_int(form.get("currency"), default=1),
        "paymentDate": (form.get("paymentDate") or "").strip(),
        "paymentMethod": to_int(form.get("paymentMethod"), default=1),
        "fileID": file_id or (form.get("fileID") or "").strip() or None,
        "courseID": to_int(form.get("courseID")),
        "isUpdate": bool(payment_id),
    }


def receipt_values(payment: dict[str, Any]) -> dict[str, str]:
    """Text for each field printed on the receipt."""
    amount = format_amount(payment.get("amount"))
    return {
        "date": iso_date_part(payment.get("paymentDate")),
        "student": payment.get("studentName") or "",
        "amount": f"{amount} {payment.get('currencyName') or ''}".strip(),
        "method": payment.get("paymentMethodName") or "",
        "course": payment.get("courseName") or "",
    }
