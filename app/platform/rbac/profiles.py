"""User profile and per-user menu permissions."""

import logging

from .assignments import assignment_view
from .exceptions import UserNotFoundError
from .levels import access_level_name, resolve_access_level
from .menus import access_reason, accessible_menus, menu_description, menu_name, permissions_for
from .models import Assignment, EntityUser, normalize_seid
from .staff import is_staff
from .types import MenuItem, MenuPermissions, UserProfile

logger = logging.getLogger(__name__)


def user_exists(seid: str) -> bool:
    return Assignment.objects.count_valid(seid) > 0


def is_user_locked(seid: str) -> bool:
    return EntityUser.objects.filter(user_seid=normalize_seid(seid), is_locked=True).exists()


def user_profile(seid: str) -> UserProfile:
    """
    Profile built from the user's valid assignments.

    Raises:
        UserNotFoundError: No valid assignment exists for the seid
    """
    records = list(Assignment.objects.find_all_valid(seid))
    if not records:
        raise UserNotFoundError(f"User not found: {seid}")

    current = next((record for record in records if record.is_current), None)
    primary = current or Assignment.objects.find_by_priority(seid).first()
    level = resolve_access_level(seid)
    return UserProfile(
        seid=normalize_seid(seid),
        name=primary.name,
        title=primary.title,
        access_level=level,
        access_level_name=access_level_name(level),
        area_code=primary.area_code,
        position_code=primary.position_code,
        org=primary.org,
        is_staff=any(record.is_staff_assignment for record in records),
        is_locked=is_user_locked(seid),
        assignment_count=len(records),
        has_multiple_assignments=len(records) > 1,
        current_assignment=assignment_view(current) if current else None,
        assignments=[assignment_view(record) for record in records],
    )


def menu_permissions(seid: str) -> MenuPermissions:
    level = resolve_access_level(seid)
    staff = is_staff(seid)
    menus = [
        MenuItem(
            menu_id=menu.value,
            name=menu_name(menu),
            description=menu_description(menu),
            accessible=allowed,
            reason=access_reason(menu, level, staff),
        )
        for menu, allowed in permissions_for(level, staff).items()
    ]
    return MenuPermissions(
        seid=normalize_seid(seid),
        access_level=level,
        access_level_name=access_level_name(level),
        is_staff=staff,
        menus=menus,
        accessible_menus=[menu.value for menu in accessible_menus(level, staff)],
    )
