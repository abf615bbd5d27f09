from __future__ import annotations

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, url_for

from app.academy.api_client import AcademyApiError, api_client
from app.academy.audit import audit_action
from app.academy.guards import login_required
from app.academy.modules.students.service import (
    FILTER_FIELDS,
    FORM_FIELDS,
    empty_form,
    form_from_row,
    student_payload,
    validate_student_form,
)
from app.academy.utils import active_filters, find_by_id, read_filters

bp = Blueprint("students", __name__)


def _back_to_list():
    """Return to the list keeping whatever filters the user had applied."""
    filters = active_filters(read_filters(request.args, FILTER_FIELDS))
    return redirect(url_for("students.students_list", **filters))


# ---------- List ----------
@bp.get("/students")
@login_required
def students_list():
    filters = read_filters(request.args, FILTER_FIELDS)
    error = None
    students = []
    try:
        students = api_client().list_students(filters)
    except AcademyApiError as e:
        current_app.logger.error("Error fetching students: %s", e)
        error = "Failed to fetch students. Please try again."
    return render_template(
        "admin/students/list.html",
        students=students,
        filters=filters,
        filter_args=active_filters(filters),
        error=error,
    )


# ---------- New / Edit ----------
@bp.get("/students/new")
@login_required
def student_new_get():
    return render_template("admin/students/form.html", form=empty_form())


@bp.post("/students/new")
@login_required
def student_new_post():
    return _save(student_id=0)


@bp.get("/students/<int:student_id>/edit")
@login_required
def student_edit_get(student_id: int):
    try:
        row = find_by_id(api_client().list_students({}), "studentID", student_id)
    except AcademyApiError as e:
        current_app.logger.error("Error fetching students: %s", e)
        flash("Failed to fetch students. Please try again.", "danger")
        return redirect(url_for("students.students_list"))
    if not row:
        abort(404)
    return render_template("admin/students/form.html", form=form_from_row(row))


@bp.post("/students/<int:student_id>/edit")
@login_required
def student_edit_post(student_id: int):
    return _save(student_id=student_id)


def _save(*, student_id: int):
    form = {k: request.form.get(k) or "" for k in FORM_FIELDS}
    form.update({"studentID": student_id, "isUpdate": bool(student_id)})
    errors = validate_student_form(form)
    if errors:
        for e in errors:
            flash(e, "danger")
        return render_template("admin/students/form.html", form=form), 400

    payload = student_payload(form, student_id=student_id)
    try:
        api_client().save_student(payload)
    except AcademyApiError as e:
        current_app.logger.error("Error saving student: %s", e)
        flash("Failed to save student. Please check the details and try again.", "danger")
        return render_template("admin/students/form.html", form=form), 502

    audit_action(
        "student.update" if student_id else "student.create",
        entity_type="Student",
        entity_id=student_id,
        metadata={"fullName": payload["fullName"]},
    )
    flash("Student updated." if student_id else "Student added.", "success")
    return redirect(url_for("students.students_list"))


# ---------- Delete ----------
@bp.post("/students/<int:student_id>/delete")
@login_required
def student_delete(student_id: int):
    try:
        api_client().delete_student(student_id)
    except AcademyApiError as e:
        current_app.logger.error("Error deleting student: %s", e)
        flash("Failed to delete student. Please try again.", "danger")
        return _back_to_list()

    audit_action("student.delete", entity_type="Student", entity_id=student_id)
    flash("Student deleted.", "success")
    return _back_to_list()
