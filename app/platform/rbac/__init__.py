"""
Hierarchical access control
Effective access levels, hierarchy codes, context switching, assignment
switching and menu permissions for field employees.
"""

# Models and services are imported lazily to keep app loading cheap:
#   from app.platform.rbac.models import Assignment, EntityUser
#   from app.platform.rbac.services import access_contexts, assignment_switcher, role_changes

from .constants import (
    AccessLevel,
    HierarchyTier,
    MenuId,
)

__all__ = [
    "AccessLevel",
    "HierarchyTier",
    "MenuId",
]
