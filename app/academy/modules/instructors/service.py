from __future__ import annotations

from typing import Any

FORM_FIELDS = ("firstName", "lastName", "email", "phoneNumber")


def empty_form() -> dict[str, Any]:
    return {"instructorID": 0, "firstName": "", "lastName": "", "email": "", "phoneNumber": "", "isUpdate": False}


def form_from_row(row: dict[str, Any]) -> dict[str, Any]:
    form = empty_form()
    form.update({k: row.get(k) or "" for k in FORM_FIELDS})
    form["instructorID"] = row.get("instructorID") or 0
    form["isUpdate"] = True
    return form


def validate_instructor_form(form: dict[str, Any]) -> list[str]:
    errors = []
    if not (form.get("firstName") or "").strip():
        errors.append("First name is required.")
    if not (form.get("lastName") or "").strip():
        errors.append("Last name is required.")
    email = (form.get("email") or "").strip()
    if email and "@" not in email:
        errors.append("Email address looks invalid.")
    return errors


def instructor_payload(form: dict[str, Any], *, instructor_id: int = 0) -> dict[str, Any]:
    payload: dict[str, Any] = {k: (form.get(k) or "").strip() for k in FORM_FIELDS}
    payload["instructorID"] = instructor_id
    payload["isUpdate"] = bool(instructor_id)
    return payload


def instructor_name(row: dict[str, Any]) -> str:
    return f"{row.get('firstName') or ''} {row.get('lastName') or ''}".strip()


def instructor_options(instructors: list[dict[str, Any]]) -> list[tuple[int, str]]:
    """(id, "First Last") pairs for select boxes."""
    return [(int(i["instructorID"]), instructor_name(i)) for i in instructors if i.get("instructorID") is not None]
