import secrets

from flask import Request, session

CSRF_SESSION_KEY = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def ensure_csrf_token() -> str:
    """Return the session's CSRF token, minting one on first use."""
    token = session.get(CSRF_SESSION_KEY)
    if not token:
        token = session[CSRF_SESSION_KEY] = secrets.token_urlsafe(32)
    return token


def validate_csrf(req: Request) -> bool:
    """Accept the token from the X-CSRF-Token header or the posted `csrf_token` field."""
    sent = req.headers.get(CSRF_HEADER) or req.form.get("csrf_token") or ""
    expected = session.get(CSRF_SESSION_KEY) or ""
    return bool(sent and expected) and secrets.compare_digest(sent, expected)


def is_safe_next(target: str | None) -> bool:
    """Only local absolute paths are allowed as post-login redirects."""
    target = (target or "").strip()
    return target.startswith("/") and not target.startswith("//")
