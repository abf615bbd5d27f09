import logging
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, flash, g, redirect, render_template, request, session, url_for
from sqlalchemy import inspect as sa_inspect

from app.academy.api_client import init_api_client
from app.academy.auth import bp as auth_bp, load_current_user
from app.academy.config import load_config
from app.academy.db import init_db, teardown_db_session
from app.academy.modules.courses.admin import bp as courses_bp
from app.academy.modules.dashboard.admin import bp as dashboard_bp
from app.academy.modules.instructors.admin import bp as instructors_bp
from app.academy.modules.ledgers.admin import expenses_bp, revenues_bp
from app.academy.modules.payments.admin import bp as payments_bp
from app.academy.modules.students.admin import bp as students_bp
from app.academy.routes import bp as routes_bp
from app.academy.utils import format_amount, iso_date_part

logger = logging.getLogger(__name__)

NAV_LINKS = (
    ("dashboard.index", "Dashboard"),
    ("expenses.index", "Expenses"),
    ("revenues.index", "Revenues"),
    ("payments.payments_list", "Payments"),
    ("students.students_list", "Students"),
    ("instructors.instructors_list", "Instructors"),
    ("courses.courses_list", "Courses"),
)

_UNGUARDED_PREFIXES = ("/static/", "/health", "/healthz")


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_mapping(load_config())
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=8)
    app.config["SESSION_REFRESH_EACH_REQUEST"] = True

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")
        if not str(app.config.get("ACADEMY_API_BASE_URL") or "").startswith("https://"):
            app.logger.warning("ACADEMY_API_BASE_URL is not https in production: %s", app.config.get("ACADEMY_API_BASE_URL"))

    from app.academy.security import ensure_csrf_token, validate_csrf

    @app.context_processor
    def _inject_layout() -> dict:
        return {
            "csrf_token": ensure_csrf_token(),
            "current_user": getattr(g, "current_user", None),
            "brand_name": app.config.get("BRAND_NAME"),
            "nav_links": NAV_LINKS,
        }

    @app.template_filter("isodate")
    def _isodate_filter(value) -> str:
        return iso_date_part(value) if value else ""

    @app.template_filter("amount")
    def _amount_filter(value) -> str:
        return format_amount(value) if value or value == 0 else ""

    @app.before_request
    def _csrf_guard():
        if request.path.startswith(_UNGUARDED_PREFIXES):
            return None
        ensure_csrf_token()
        session.permanent = True
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            # Auth endpoints (login/logout) pass through
            if (request.endpoint or "").startswith("auth."):
                return None
            # Signed-out posts fall through to login_required, which redirects to login
            if not session.get("user"):
                return None
            if not validate_csrf(request):
                return render_template("errors/400.html", message="CSRF token missing or invalid."), 400

    init_db(app)
    init_api_client(app)

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(instructors_bp)
    app.register_blueprint(courses_bp)
    app.register_blueprint(students_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(revenues_bp)
    app.register_blueprint(expenses_bp)

    app.before_request(load_current_user)
    app.teardown_appcontext(teardown_db_session)

    # Schema health (lean): the audit trail needs its table; checked once, on first request.
    app.config.setdefault("_schema_health_ok", None)

    @app.before_request
    def _schema_health_guardrail():
        if request.path.startswith(_UNGUARDED_PREFIXES):
            return None
        if app.config["_schema_health_ok"] is None:
            engine = app.extensions["sqlalchemy_engine"]
            ok = sa_inspect(engine).has_table("audit_events")
            if not ok:
                app.logger.error("DB schema out of date; run `alembic upgrade head`. Missing: audit_events (table)")
            app.config["_schema_health_ok"] = ok
        if not app.config["_schema_health_ok"]:
            return render_template("errors/schema_out_of_date.html", missing=["audit_events (table)"]), 500
        return None

    @app.errorhandler(404)
    def _err_404(e):  # type: ignore[no-redef]
        return redirect(url_for("routes.index"))

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        app.logger.exception("Unhandled 500 (request_id=%s)", getattr(g, "request_id", None))
        return render_template("errors/500.html"), 500

    @app.errorhandler(413)
    def _err_413(e):  # type: ignore[no-redef]
        flash("File too large. Maximum size is 25MB.", "danger")
        referrer = request.referrer
        if referrer and referrer.startswith(request.host_url):
            return redirect(referrer), 302
        return redirect(url_for("payments.payments_list")), 302

    logger.info("create_app() complete; app ready to serve")
    return app
