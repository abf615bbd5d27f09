from flask import Blueprint, redirect, url_for

from app.academy.guards import login_required

bp = Blueprint("routes", __name__)


@bp.get("/")
@login_required
def index():
    return redirect(url_for("dashboard.index"))


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {"ok": True}


@bp.get("/healthz")
def healthz():
    """
    Fast health check for container probes. No DB or API access.
    """
    return "ok", 200
