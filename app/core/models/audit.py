"""Audit logging primitives."""
from datetime import timezone

from django.db import models

from .base import CoreBaseModel


class AuditLog(CoreBaseModel):
    """Tracks assignment and organization changes made through the API."""

    actor_seid = models.CharField(max_length=5, blank=True, db_index=True)
    action = models.CharField(max_length=64)
    object_id = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "core_audit_logs"
        indexes = [
            models.Index(fields=["actor_seid", "action"], name="audit_actor_action_idx"),
            models.Index(fields=["created_at"], name="audit_created_idx"),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        ts = self.created_at.astimezone(timezone.utc) if self.created_at else ""
        return f"[{ts}] {self.actor_seid or 'system'} -> {self.action}"
