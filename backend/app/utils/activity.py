from __future__ import annotations

import logging
from typing import Any, Optional

from ..database import async_session
from ..infrastructure.repositories import SqlAlchemyActivityLogRepository
from .audit_log import AuditAction, AuditEntity, emit_audit_log, to_json_value

logger = logging.getLogger(__name__)


async def record_activity(
    action: AuditAction,
    entity: AuditEntity,
    entity_id: Optional[int] = None,
    user_id: Optional[int] = None,
    metadata: Optional[dict[str, Any]] = None,
) -> None:
    """
    Best-effort audit trail: one activity_logs row in its own transaction plus a
    JSON audit line. Never raises; the triggering operation has already committed.
    """
    details = {k: to_json_value(v) for k, v in metadata.items()} if metadata else None
    try:
        emit_audit_log(action=action, entity=entity, entity_id=entity_id, user_id=user_id, metadata=details)
    except Exception:
        logger.exception("audit log failed: %s %s %s", action, entity, entity_id)

    try:
        async with async_session() as session:
            async with session.begin():
                await SqlAlchemyActivityLogRepository(session).add(
                    action=action,
                    entity=entity,
                    entity_id=entity_id,
                    user_id=user_id,
                    details=details,
                )
    except Exception:
        logger.exception("activity log failed: %s %s %s", action, entity, entity_id)
