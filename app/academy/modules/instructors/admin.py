from __future__ import annotations

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, url_for

from app.academy.api_client import AcademyApiError, api_client
from app.academy.audit import audit_action
from app.academy.guards import login_required
from app.academy.modules.instructors.service import (
    FORM_FIELDS,
    empty_form,
    form_from_row,
    instructor_payload,
    validate_instructor_form,
)
from app.academy.utils import find_by_id

bp = Blueprint("instructors", __name__)


# ---------- List ----------
@bp.get("/instructors")
@login_required
def instructors_list():
    error = None
    instructors = []
    try:
        instructors = api_client().list_instructors()
    except AcademyApiError as e:
        current_app.logger.error("Error fetching instructors: %s", e)
        error = "Failed to fetch instructors. Please try again."
    return render_template("admin/instructors/list.html", instructors=instructors, error=error)


# ---------- New / Edit ----------
@bp.get("/instructors/new")
@login_required
def instructor_new_get():
    return render_template("admin/instructors/form.html", form=empty_form())


@bp.post("/instructors/new")
@login_required
def instructor_new_post():
    return _save(instructor_id=0)


@bp.get("/instructors/<int:instructor_id>/edit")
@login_required
def instructor_edit_get(instructor_id: int):
    try:
        row = find_by_id(api_client().list_instructors(), "instructorID", instructor_id)
    except AcademyApiError as e:
        current_app.logger.error("Error fetching instructors: %s", e)
        flash("Failed to fetch instructors. Please try again.", "danger")
        return redirect(url_for("instructors.instructors_list"))
    if not row:
        abort(404)
    return render_template("admin/instructors/form.html", form=form_from_row(row))


@bp.post("/instructors/<int:instructor_id>/edit")
@login_required
def instructor_edit_post(instructor_id: int):
    return _save(instructor_id=instructor_id)


def _save(*, instructor_id: int):
    form = {k: request.form.get(k) or "" for k in FORM_FIELDS}
    errors = validate_instructor_form(form)
    if errors:
        for e in errors:
            flash(e, "danger")
        form.update({"instructorID": instructor_id, "isUpdate": bool(instructor_id)})
        return render_template("admin/instructors/form.html", form=form), 400

    payload = instructor_payload(form, instructor_id=instructor_id)
    try:
        api_client().save_instructor(payload)
    except AcademyApiError as e:
        current_app.logger.error("Error saving instructor: %s", e)
        flash("Failed to save instructor. Please try again.", "danger")
        form.update({"instructorID": instructor_id, "isUpdate": bool(instructor_id)})
        return render_template("admin/instructors/form.html", form=form), 502

    audit_action(
        "instructor.update" if instructor_id else "instructor.create",
        entity_type="Instructor",
        entity_id=instructor_id,
        metadata={"email": payload["email"]},
    )
    flash("Instructor updated." if instructor_id else "Instructor added.", "success")
    return redirect(url_for("instructors.instructors_list"))


# ---------- Delete ----------
@bp.post("/instructors/<int:instructor_id>/delete")
@login_required
def instructor_delete(instructor_id: int):
    try:
        api_client().delete_instructor(instructor_id)
    except AcademyApiError as e:
        current_app.logger.error("Error deleting instructor: %s", e)
        flash("Failed to delete instructor. Please try again.", "danger")
        return redirect(url_for("instructors.instructors_list"))

    audit_action("instructor.delete", entity_type="Instructor", entity_id=instructor_id)
    flash("Instructor deleted.", "success")
    return redirect(url_for("instructors.instructors_list"))
