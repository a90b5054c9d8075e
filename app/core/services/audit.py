"""Helper functions for writing audit logs."""
from typing import Optional, Mapping, Any

from app.core.models import AuditLog


def record_audit(*, actor_seid: str = "", action: str, object_id="", description: str = "", metadata: Optional[Mapping[str, Any]] = None) -> AuditLog:
    """Write one audit row; callers run it inside their own transaction."""
    return AuditLog.objects.create(
        actor_seid=(actor_seid or "").strip(),
        action=action,
        object_id=str(object_id or ""),
        description=description,
        metadata=dict(metadata or {}),
    )
