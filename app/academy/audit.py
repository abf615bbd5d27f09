import json
from typing import Any

from flask import g, has_request_context, request
from sqlalchemy.orm import Session

from app.academy.db import db_session
from app.academy.models import AuditEvent


def record_event(
    s: Session,
    *,
    actor_email: str | None,
    action: str,
    entity_type: str | None = None,
    entity_id: str | None = None,
    metadata: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> AuditEvent:
    """
    Append-only audit event helper.
    """
    in_request = has_request_context()
    rid = request_id or (getattr(g, "request_id", None) if in_request else None)
    ev = AuditEvent(
        request_id=rid,
        actor_email=actor_email,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata_json=json.dumps(metadata, sort_keys=True, default=str) if metadata else None,
        client_ip=request.remote_addr if in_request else None,
    )
    s.add(ev)
    return ev


def audit_action(
    action: str,
    *,
    entity_type: str,
    entity_id: object | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """Record and commit one event for the signed-in user of the current request."""
    user = getattr(g, "current_user", None) or {}
    s = db_session()
    record_event(
        s,
        actor_email=user.get("email"),
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id not in (None, 0, "") else None,
        metadata=metadata,
    )
    s.commit()
