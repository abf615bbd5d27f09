from __future__ import annotations

from typing import Any

from app.academy.utils import is_number, is_valid_date, iso_date_part, to_int, to_number

FILTER_FIELDS = ("search", "fee", "startDate", "endDate", "instructorId", "month", "year")
FORM_FIELDS = ("courseName", "courseDescription", "courseFee", "startDate", "endDate", "instructorID")


def empty_form() -> dict[str, Any]:
    return {
        "courseID": 0,
        "courseName": "",
        "courseDescription": "",
        "courseFee": "",
        "startDate": "",
        "endDate": "",
        "instructorID": 0,
        "isUpdate": False,
    }


def form_from_row(row: dict[str, Any]) -> dict[str, Any]:
    """Prefill the edit form; date inputs want the bare YYYY-MM-DD part."""
    return {
        "courseID": row.get("courseID") or 0,
        "courseName": row.get("courseName") or "",
        "courseDescription": row.get("courseDescription") or "",
        "courseFee": "" if not row.get("courseFee") else row.get("courseFee"),
        "startDate": iso_date_part(row.get("startDate")),
        "endDate": iso_date_part(row.get("endDate")),
        "instructorID": row.get("instructorID") or 0,
        "isUpdate": True,
    }


def validate_course_form(form: dict[str, Any]) -> list[str]:
    errors = []
    if not (form.get("courseName") or "").strip():
        errors.append("Course name is required.")
    fee = form.get("courseFee")
    if fee not in (None, "") and (not is_number(fee) or float(fee) < 0):
        errors.append("Course fee must be a non-negative number.")
    for field, label in (("startDate", "Start date"), ("endDate", "End date")):
        if not is_valid_date(form.get(field)):
            errors.append(f"{label} must be a valid date (YYYY-MM-DD).")
    return errors


def validate_course_filters(filters: dict[str, str]) -> list[str]:
    errors = []
    month = filters.get("month")
    if month and not (month.isdigit() and 1 <= int(month) <= 12):
        errors.append("Month must be between 1 and 12.")
    year = filters.get("year")
    if year and not year.isdigit():
        errors.append("Year must be a number.")
    return errors


def course_payload(form: dict[str, Any], *, course_id: int = 0) -> dict[str, Any]:
    return {
        "courseID": course_id,
        "courseName": (form.get("courseName") or "").strip(),
        "courseDescription": (form.get("courseDescription") or "").strip(),
        "courseFee": to_number(form.get("courseFee")),
        "startDate": (form.get("startDate") or "").strip(),
        "endDate": (form.get("endDate") or "").strip(),
        "instructorID": to_int(form.get("instructorID")),
        "isUpdate": bool(course_id),
    }


def course_options(courses: list[dict[str, Any]]) -> list[tuple[int, str]]:
    return [(int(c["courseID"]), c.get("courseName") or "") for c in courses if c.get("courseID") is not None]
