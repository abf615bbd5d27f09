from __future__ import annotations

from flask import Blueprint, current_app, render_template

from app.academy.api_client import AcademyApiError, api_client
from app.academy.guards import login_required
from app.academy.modules.dashboard.service import build_dashboard

bp = Blueprint("dashboard", __name__)


@bp.get("/dashboard")
@login_required
def index():
    try:
        stats = api_client().get_dashboard_statistics()
    except AcademyApiError as e:
        current_app.logger.error("Failed to fetch dashboard data: %s", e)
        return render_template("admin/dashboard.html", dashboard=None, error="Failed to fetch dashboard data.")
    if not stats:
        return render_template("admin/dashboard.html", dashboard=None, error="No data available.")
    return render_template("admin/dashboard.html", dashboard=build_dashboard(stats), error=None)
