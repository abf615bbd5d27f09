from __future__ import annotations

from typing import Any

FILTER_FIELDS = ("fullName", "fullNameInArabic", "email", "address", "phoneNumber")
FORM_FIELDS = ("fullName", "fullNameInArabic", "address", "email", "phoneNumber")


def empty_form() -> dict[str, Any]:
    form: dict[str, Any] = {k: "" for k in FORM_FIELDS}
    form.update({"studentID": 0, "isUpdate": False})
    return form


def form_from_row(row: dict[str, Any]) -> dict[str, Any]:
    form = {k: row.get(k) or "" for k in FORM_FIELDS}
    form.update({"studentID": row.get("studentID") or 0, "isUpdate": True})
    return form


def validate_student_form(form: dict[str, Any]) -> list[str]:
    errors = []
    if not (form.get("fullName") or "").strip():
        errors.append("Full name is required.")
    email = (form.get("email") or "").strip()
    if email and "@" not in email:
        errors.append("Email address looks invalid.")
    return errors


def student_payload(form: dict[str, Any], *, student_id: int = 0) -> dict[str, Any]:
    payload: dict[str, Any] = {k: (form.get(k) or "").strip() for k in FORM_FIELDS}
    payload["studentID"] = student_id
    payload["isUpdate"] = bool(student_id)
    return payload


def student_options(students: list[dict[str, Any]]) -> list[tuple[int, str]]:
    return [(int(s["studentID"]), s.get("fullName") or "") for s in students if s.get("studentID") is not None]
