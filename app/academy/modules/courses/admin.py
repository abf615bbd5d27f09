from __future__ import annotations

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, url_for

from app.academy.api_client import AcademyApiError, api_client
from app.academy.audit import audit_action
from app.academy.guards import login_required
from app.academy.modules.courses.service import (
    FILTER_FIELDS,
    FORM_FIELDS,
    course_payload,
    empty_form,
    form_from_row,
    validate_course_filters,
    validate_course_form,
)
from app.academy.modules.instructors.service import instructor_options
from app.academy.utils import find_by_id, read_filters

bp = Blueprint("courses", __name__)


def _instructor_options() -> list[tuple[int, str]]:
    try:
        return instructor_options(api_client().list_instructors())
    except AcademyApiError as e:
        current_app.logger.error("Error fetching instructors: %s", e)
        flash("Failed to fetch instructors. Please try again.", "danger")
        return []


def _render_form(form: dict, status: int = 200):
    return render_template("admin/courses/form.html", form=form, instructors=_instructor_options()), status


# ---------- List ----------
@bp.get("/courses")
@login_required
def courses_list():
    filters = read_filters(request.args, FILTER_FIELDS)
    error = None
    courses = []
    problems = validate_course_filters(filters)
    if problems:
        error = " ".join(problems)
    else:
        try:
            courses = api_client().list_courses(filters)
        except AcademyApiError as e:
            current_app.logger.error("Error fetching courses: %s", e)
            error = "Failed to fetch courses. Please try again."
    return render_template(
        "admin/courses/list.html",
        courses=courses,
        filters=filters,
        instructors=_instructor_options(),
        error=error,
    )


# ---------- New / Edit ----------
@bp.get("/courses/new")
@login_required
def course_new_get():
    return _render_form(empty_form())


@bp.post("/courses/new")
@login_required
def course_new_post():
    return _save(course_id=0)


@bp.get("/courses/<int:course_id>/edit")
@login_required
def course_edit_get(course_id: int):
    try:
        row = find_by_id(api_client().list_courses({}), "courseID", course_id)
    except AcademyApiError as e:
        current_app.logger.error("Error fetching courses: %s", e)
        flash("Failed to fetch courses. Please try again.", "danger")
        return redirect(url_for("courses.courses_list"))
    if not row:
        abort(404)
    return _render_form(form_from_row(row))


@bp.post("/courses/<int:course_id>/edit")
@login_required
def course_edit_post(course_id: int):
    return _save(course_id=course_id)


def _save(*, course_id: int):
    form = {k: request.form.get(k) or "" for k in FORM_FIELDS}
    form.update({"courseID": course_id, "isUpdate": bool(course_id)})
    errors = validate_course_form(form)
    if errors:
        for e in errors:
            flash(e, "danger")
        return _render_form(form, 400)

    payload = course_payload(form, course_id=course_id)
    try:
        api_client().save_course(payload)
    except AcademyApiError as e:
        current_app.logger.error("Error saving course: %s", e)
        flash("Failed to save course. Please try again.", "danger")
        return _render_form(form, 502)

    audit_action(
        "course.update" if course_id else "course.create",
        entity_type="Course",
        entity_id=course_id,
        metadata={"courseName": payload["courseName"], "courseFee": payload["courseFee"]},
    )
    flash("Course updated." if course_id else "Course added.", "success")
    return redirect(url_for("courses.courses_list"))


# ---------- Delete ----------
@bp.post("/courses/<int:course_id>/delete")
@login_required
def course_delete(course_id: int):
    try:
        api_client().delete_course(course_id)
    except AcademyApiError as e:
        current_app.logger.error("Error deleting course: %s", e)
        flash("Failed to delete course. Please try again.", "danger")
        return redirect(url_for("courses.courses_list"))

    audit_action("course.delete", entity_type="Course", entity_id=course_id)
    flash("Course deleted.", "success")
    return redirect(url_for("courses.courses_list"))
