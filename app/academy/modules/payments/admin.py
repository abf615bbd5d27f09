from __future__ import annotations

from io import BytesIO

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, send_file, url_for
from werkzeug.utils import secure_filename

from app.academy.api_client import AcademyApiError, api_client
from app.academy.audit import audit_action
from app.academy.constants import CURRENCIES, PAYMENT_METHODS
from app.academy.guards import login_required
from app.academy.modules.courses.service import course_options
from app.academy.modules.payments.service import (
    FILTER_FIELDS,
    FORM_FIELDS,
    empty_form,
    form_from_row,
    payment_payload,
    receipt_values,
    validate_payment_form,
)
from app.academy.modules.students.service import student_options
from app.academy.pdf import receipt_pdf
from app.academy.utils import find_by_id, read_filters

bp = Blueprint("payments", __name__)


def _lookup_rows() -> tuple[list[dict], list[dict]]:
    """Students and courses for the dropdowns. Failures only cost the dropdown."""
    api = api_client()
    students: list[dict] = []
    courses: list[dict] = []
    try:
        students = api.list_students({})
    except AcademyApiError as e:
        current_app.logger.error("Error fetching students: %s", e)
    try:
        courses = api.list_courses({})
    except AcademyApiError as e:
        current_app.logger.error("Error fetching courses: %s", e)
    return students, courses


def _render_form(form: dict, status: int = 200, lookups: tuple[list[dict], list[dict]] | None = None):
    students, courses = lookups or _lookup_rows()
    return (
        render_template(
            "admin/payments/form.html",
            form=form,
            students=student_options(students),
            courses=course_options(courses),
            currencies=CURRENCIES,
            payment_methods=PAYMENT_METHODS,
        ),
        status,
    )


def _find_payment(payment_id: int) -> dict | None:
    return find_by_id(api_client().list_payments({}), "paymentID", payment_id)


# ---------- List ----------
@bp.get("/payments")
@login_required
def payments_list():
    filters = read_filters(request.args, FILTER_FIELDS)
    students, courses = _lookup_rows()
    error = None
    payments = []
    try:
        payments = api_client().list_payments(filters)
    except AcademyApiError as e:
        current_app.logger.error("Error fetching payments: %s", e)
        error = "Failed to fetch payments. Please try again."
    return render_template(
        "admin/payments/list.html",
        payments=payments,
        filters=filters,
        students=student_options(students),
        courses=course_options(courses),
        payment_methods=PAYMENT_METHODS,
        error=error,
    )


# ---------- New / Edit ----------
@bp.get("/payments/new")
@login_required
def payment_new_get():
    return _render_form(empty_form())


@bp.post("/payments/new")
@login_required
def payment_new_post():
    return _save(payment_id=0)


@bp.get("/payments/<int:payment_id>/edit")
@login_required
def payment_edit_get(payment_id: int):
    try:
        row = _find_payment(payment_id)
    except AcademyApiError as e:
        current_app.logger.error("Error fetching payments: %s", e)
        flash("Failed to fetch payments. Please try again.", "danger")
        return redirect(url_for("payments.payments_list"))
    if not row:
        abort(404)
    lookups = _lookup_rows()
    students, courses = lookups
    return _render_form(form_from_row(row, students=students, courses=courses), lookups=lookups)


@bp.post("/payments/<int:payment_id>/edit")
@login_required
def payment_edit_post(payment_id: int):
    return _save(payment_id=payment_id)


def _save(*, payment_id: int):
    form = {k: request.form.get(k) or "" for k in FORM_FIELDS}
    form.update(
        {
            "paymentID": payment_id,
            "fileName": request.form.get("fileName") or "",
            "isUpdate": bool(payment_id),
        }
    )
    errors = validate_payment_form(form)
    if errors:
        for e in errors:
            flash(e, "danger")
        return _render_form(form, 400)

    api = api_client()
    uploaded_id = None
    f = request.files.get("file")
    try:
        # The receipt goes up first; the payment then references its id.
        if f and f.filename:
            filename = secure_filename(f.filename) or "receipt"
            content_type = (f.mimetype or "application/octet-stream").strip()
            uploaded_id = api.upload_file(filename, f.read(), content_type)
            audit_action("payment.receipt_upload", entity_type="File", entity_id=uploaded_id, metadata={"filename": filename})
        payload = payment_payload(form, payment_id=payment_id, file_id=uploaded_id)
        api.save_payment(payload)
    except AcademyApiError as e:
        current_app.logger.error("Error saving payment: %s", e)
        flash("Failed to save payment. Please try again.", "danger")
        return _render_form(form, 502)

    audit_action(
        "payment.update" if payment_id else "payment.create",
        entity_type="Payment",
        entity_id=payment_id,
        metadata={
            "studentID": payload["studentID"],
            "amount": payload["amount"],
            "currency": CURRENCIES.get(payload["currency"]),
            "fileID": payload["fileID"],
        },
    )
    flash("Payment updated." if payment_id else "Payment added.", "success")
    return redirect(url_for("payments.payments_list"))


# ---------- Delete ----------
@bp.post("/payments/<int:payment_id>/delete")
@login_required
def payment_delete(payment_id: int):
    try:
        api_client().delete_payment(payment_id)
    except AcademyApiError as e:
        current_app.logger.error("Error deleting payment: %s", e)
        flash("Failed to delete payment. Please try again.", "danger")
        return redirect(url_for("payments.payments_list"))

    audit_action("payment.delete", entity_type="Payment", entity_id=payment_id)
    flash("Payment deleted.", "success")
    return redirect(url_for("payments.payments_list"))


# ---------- Receipt files ----------
def _send_receipt_file(file_name: str, *, as_attachment: bool):
    api = api_client()
    try:
        data, content_type = api.download_file(file_name) if as_attachment else api.view_file(file_name)
    except AcademyApiError as e:
        current_app.logger.error("Error fetching file %s: %s", file_name, e)
        if e.status_code == 404:
            abort(404)
        flash("Failed to fetch the receipt file. Please try again.", "danger")
        return redirect(url_for("payments.payments_list"))
    return send_file(
        BytesIO(data),
        mimetype=content_type,
        as_attachment=as_attachment,
        download_name=file_name,
        max_age=0,
    )


@bp.get("/payments/files/<path:file_name>/download")
@login_required
def payment_file_download(file_name: str):
    return _send_receipt_file(file_name, as_attachment=True)


@bp.get("/payments/files/<path:file_name>/view")
@login_required
def payment_file_view(file_name: str):
    return _send_receipt_file(file_name, as_attachment=False)


# ---------- Printable receipt ----------
@bp.get("/payments/<int:payment_id>/receipt.pdf")
@login_required
def payment_receipt(payment_id: int):
    try:
        row = _find_payment(payment_id)
    except AcademyApiError as e:
        current_app.logger.error("Error fetching payments: %s", e)
        flash("Failed to fetch payments. Please try again.", "danger")
        return redirect(url_for("payments.payments_list"))
    if not row:
        abort(404)

    pdf_bytes = receipt_pdf(receipt_values(row), background_path=current_app.config.get("RECEIPT_BACKGROUND_PATH"))
    return send_file(
        BytesIO(pdf_bytes),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=f"Receipt_{payment_id}.pdf",
        max_age=0,
    )
