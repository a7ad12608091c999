from typing import Optional

from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from storefront.extensions import db
from storefront.models.audit_log import AuditLog


def current_actor() -> Optional[str]:
    verify_jwt_in_request(optional=True)
    identity = get_jwt_identity()
    return str(identity) if identity is not None else None


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    actor_id: Optional[str] = None,
    payload: dict | None = None
):
    log = AuditLog()

    log.actor_id = actor_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id
    log.payload = payload or {}

    db.session.add(log)
