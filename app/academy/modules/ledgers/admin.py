from __future__ import annotations

from datetime import date
from io import BytesIO

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, send_file, url_for

from app.academy.api_client import AcademyApiError, api_client
from app.academy.audit import audit_action
from app.academy.constants import CURRENCIES, RELATED_ENTITY_TYPE
from app.academy.guards import login_required
from app.academy.modules.ledgers.service import (
    EXPENSES,
    FORM_FIELDS,
    PDF_COL_WEIGHTS,
    PDF_HEADERS,
    REVENUES,
    Ledger,
    build_payload,
    empty_form,
    fetch_rows,
    form_from_row,
    normalize_filters,
    pdf_rows,
    validate_filters,
    validate_form,
)
from app.academy.pdf import ledger_pdf
from app.academy.utils import active_filters, find_by_id, read_filters, toggle_sort_order


def make_blueprint(ledger: Ledger) -> Blueprint:
    bp = Blueprint(ledger.key, __name__)
    noun, plural = ledger.noun, ledger.key

    def _related_options() -> list[tuple[int, str]]:
        try:
            return ledger.related_options(api_client())
        except AcademyApiError as e:
            current_app.logger.error("Error fetching %s options: %s", ledger.related_label.lower(), e)
            return []

    def _render_form(form: dict, status: int = 200):
        return (
            render_template(
                "admin/ledgers/form.html",
                ledger=ledger,
                form=form,
                currencies=CURRENCIES,
                related_options=_related_options(),
                related_type=RELATED_ENTITY_TYPE,
            ),
            status,
        )

    def _filters() -> dict[str, str]:
        return normalize_filters(read_filters(request.args, ledger.filter_fields))

    def _load(filters: dict[str, str]) -> tuple[list[dict], str | None]:
        problems = validate_filters(filters)
        if problems:
            return [], " ".join(problems)
        try:
            return fetch_rows(ledger, api_client(), filters), None
        except AcademyApiError as e:
            current_app.logger.error("Error fetching %s: %s", plural, e)
            return [], f"Failed to fetch {plural}. Please try again."

    # ---------- List ----------
    @bp.get(f"/{plural}")
    @login_required
    def index():
        filters = _filters()
        rows, error = _load(filters)
        flipped = dict(active_filters(filters), sortOrder=toggle_sort_order(filters["sortOrder"]))
        return render_template(
            "admin/ledgers/list.html",
            ledger=ledger,
            rows=rows,
            filters=filters,
            sort_toggle_url=url_for(f"{ledger.key}.index", **flipped),
            export_url=url_for(f"{ledger.key}.export_pdf", **active_filters(filters)),
            error=error,
        )

    # ---------- PDF export ----------
    @bp.get(f"/{plural}/export.pdf")
    @login_required
    def export_pdf():
        filters = _filters()
        rows, error = _load(filters)
        if error:
            flash(error, "danger")
            return redirect(url_for(f"{ledger.key}.index", **active_filters(filters)))
        pdf_bytes = ledger_pdf(
            title=f"{current_app.config.get('ACADEMY_NAME') or 'Academy'} {ledger.title}",
            headers=PDF_HEADERS,
            col_weights=PDF_COL_WEIGHTS,
            rows=pdf_rows(ledger, rows),
            logo_path=current_app.config.get("BRAND_LOGO_PATH"),
            today=date.today(),
        )
        return send_file(
            BytesIO(pdf_bytes),
            mimetype="application/pdf",
            as_attachment=True,
            download_name=f"{plural}.pdf",
            max_age=0,
        )

    # ---------- New / Edit ----------
    @bp.get(f"/{plural}/new")
    @login_required
    def new_get():
        return _render_form(empty_form(ledger))

    @bp.post(f"/{plural}/new")
    @login_required
    def new_post():
        return _save(row_id=0)

    @bp.get(f"/{plural}/<int:row_id>/edit")
    @login_required
    def edit_get(row_id: int):
        try:
            row = find_by_id(ledger.list_rows(api_client(), {}), ledger.id_field, row_id)
        except AcademyApiError as e:
            current_app.logger.error("Error fetching %s: %s", plural, e)
            flash(f"Failed to fetch {plural}. Please try again.", "danger")
            return redirect(url_for(f"{ledger.key}.index"))
        if not row:
            abort(404)
        return _render_form(form_from_row(ledger, row))

    @bp.post(f"/{plural}/<int:row_id>/edit")
    @login_required
    def edit_post(row_id: int):
        return _save(row_id=row_id)

    def _save(*, row_id: int):
        form = {k: request.form.get(k) or "" for k in FORM_FIELDS}
        form.update({"id": row_id, "isUpdate": bool(row_id)})
        errors = validate_form(ledger, form)
        if errors:
            for e in errors:
                flash(e, "danger")
            return _render_form(form, 400)

        payload = build_payload(ledger, form, row_id=row_id)
        try:
            ledger.save_row(api_client(), payload)
        except AcademyApiError as e:
            current_app.logger.error("Error saving %s: %s", noun, e)
            flash(f"Failed to save {noun}. Please try again.", "danger")
            return _render_form(form, 502)

        audit_action(
            f"{noun}.update" if row_id else f"{noun}.create",
            entity_type=noun.capitalize(),
            entity_id=row_id,
            metadata={
                "type": ledger.types.get(payload[ledger.type_field]),
                "amount": payload["amount"],
                "currency": CURRENCIES.get(payload["currency"]),
            },
        )
        flash(f"{noun.capitalize()} {'updated' if row_id else 'added'}.", "success")
        return redirect(url_for(f"{ledger.key}.index"))

    # ---------- Delete ----------
    @bp.post(f"/{plural}/<int:row_id>/delete")
    @login_required
    def delete(row_id: int):
        try:
            ledger.delete_row(api_client(), row_id)
        except AcademyApiError as e:
            current_app.logger.error("Error deleting %s: %s", noun, e)
            flash(f"Failed to delete {noun}. Please try again.", "danger")
            return redirect(url_for(f"{ledger.key}.index"))

        audit_action(f"{noun}.delete", entity_type=noun.capitalize(), entity_id=row_id)
        flash(f"{noun.capitalize()} deleted.", "success")
        return redirect(url_for(f"{ledger.key}.index"))

    return bp


revenues_bp = make_blueprint(REVENUES)
expenses_bp = make_blueprint(EXPENSES)
