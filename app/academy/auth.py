from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import datetime, timedelta

from flask import Blueprint, current_app, flash, g, redirect, render_template, request, session, url_for

from app.academy.api_client import AcademyApiError, AcademyApiUnavailable, api_client
from app.academy.audit import record_event
from app.academy.db import db_session
from app.academy.security import is_safe_next

bp = Blueprint("auth", __name__)
_LOGIN_RATE_LIMIT = 5
_LOGIN_RATE_WINDOW = 300  # seconds


def _attempts() -> dict[str, list[datetime]]:
    # Kept per app so separate app instances (tests, workers) don't share counters.
    return current_app.extensions.setdefault("login_attempts", defaultdict(list))


def _check_rate_limit(ip: str) -> bool:
    attempts = _attempts()
    cutoff = datetime.utcnow() - timedelta(seconds=_LOGIN_RATE_WINDOW)
    recent = [t for t in attempts.get(ip, ()) if t > cutoff]
    if not recent:
        attempts.pop(ip, None)
        return False
    attempts[ip] = recent
    return len(recent) >= _LOGIN_RATE_LIMIT


def _record_attempt(ip: str) -> None:
    _attempts()[ip].append(datetime.utcnow())


def is_authenticated() -> bool:
    return bool(session.get("user"))


def load_current_user() -> None:
    """
    Loads g.current_user from the signed session cookie.
    Also assigns a simple per-request request_id (for audit/log correlation).
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    user = session.get("user")
    g.current_user = user if isinstance(user, dict) and user.get("email") else None


def _audit_login(email: str, action: str, reason: str | None = None) -> None:
    s = db_session()
    record_event(
        s,
        actor_email=email or None,
        action=action,
        entity_type="User",
        entity_id=email or None,
        metadata={"reason": reason} if reason else None,
    )
    s.commit()


@bp.get("/login")
def login_get():
    if is_authenticated():
        return redirect(url_for("dashboard.index"))
    nxt = (request.args.get("next") or "").strip()
    return render_template("auth/login.html", next=nxt, email="")


@bp.post("/login")
def login_post():
    email = (request.form.get("email") or "").strip()
    password = request.form.get("password") or ""
    nxt = (request.form.get("next") or "").strip()
    ip = request.remote_addr or "unknown"

    def _fail(message: str):
        flash(message, "danger")
        return render_template("auth/login.html", next=nxt, email=email), 200

    if not email or not password:
        return _fail("Please enter both email and password")

    if _check_rate_limit(ip):
        return _fail("Too many login attempts. Please wait 5 minutes.")

    _record_attempt(ip)

    try:
        ok = api_client().login(email, password)
    except AcademyApiUnavailable:
        current_app.logger.warning("Login failed: academy API unreachable (request_id=%s)", g.request_id)
        return _fail("Network error or server unavailable. Please try again.")
    except AcademyApiError as e:
        message = e.api_message or "Login failed"
        _audit_login(email, "auth.login_failed", reason=message)
        return _fail(message)

    if not ok:
        _audit_login(email, "auth.login_failed", reason="Invalid credentials")
        return _fail("Invalid credentials")

    session.clear()
    session["user"] = {"email": email}
    _attempts().pop(ip, None)
    g.current_user = session["user"]
    _audit_login(email, "auth.login")
    current_app.logger.info("User signed in (email=%s request_id=%s)", email, g.request_id)
    if is_safe_next(nxt):
        return redirect(nxt)
    return redirect(url_for("dashboard.index"))


@bp.get("/logout")
def logout():
    user = getattr(g, "current_user", None)
    if user:
        _audit_login(user["email"], "auth.logout")
    session.pop("user", None)
    return redirect(url_for("auth.login_get"))
