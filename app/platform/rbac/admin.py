"""
Django Admin for assignment records
"""

from django.contrib import admin

from app.core.models import AuditLog
from .models import Assignment, EntityUser


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ['roid', 'seid', 'name', 'title', 'access_level', 'area_code', 'position_code', 'org', 'eactive', 'primary_roid']
    list_filter = ['access_level', 'eactive', 'primary_roid', 'area_code', 'org']
    search_fields = ['roid', 'seid', 'name', 'title']
    readonly_fields = ['created_at', 'updated_at']
    fieldsets = (
        ('Employee', {
            'fields': ('roid', 'seid', 'name', 'title', 'grade')
        }),
        ('Position', {
            'fields': ('area_code', 'position_code', 'org', 'access_level')
        }),
        ('Status', {
            'fields': ('eactive', 'primary_roid')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )


@admin.register(EntityUser)
class EntityUserAdmin(admin.ModelAdmin):
    list_display = ['user_seid', 'is_locked']
    list_filter = ['is_locked']
    search_fields = ['user_seid']


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'actor_seid', 'action', 'object_id']
    list_filter = ['action']
    search_fields = ['actor_seid', 'object_id', 'description']
    readonly_fields = ['id', 'created_at', 'updated_at', 'actor_seid', 'action', 'object_id', 'description', 'metadata']
