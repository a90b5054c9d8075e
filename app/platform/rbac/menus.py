"""
Menu permission matrix
Maps (access level, staff flag) to the feature menus a user may open.
"""

from typing import Dict, List

from .constants import MENU_CATALOG, AccessLevel, MenuId

ALWAYS_ON_MENUS = frozenset({
    MenuId.VIEWS,
    MenuId.REPORTS,
    MenuId.CHANGE_ACCESS,
    MenuId.END_OF_MONTH,
})
GROUP_MANAGER_MENUS = frozenset({MenuId.CASE_ASSIGNMENT, MenuId.TIME_VERIFICATION})
GROUP_MANAGER_LEVELS = frozenset({AccessLevel.GROUP_MANAGER, AccessLevel.ACTING_GROUP_MANAGER})


def is_menu_accessible(menu_id, access_level, is_staff=False) -> bool:
    """
    Args:
        menu_id: MenuId or its string value
        access_level: ELEVEL
        is_staff: Staff status of the user

    Returns:
        True when the menu is visible; blocked and unsupported levels see nothing
    """
    menu = MenuId(menu_id)
    if access_level is None or access_level < 0:
        return False
    if menu in ALWAYS_ON_MENUS:
        return True
    if menu in GROUP_MANAGER_MENUS:
        return access_level in GROUP_MANAGER_LEVELS
    if menu == MenuId.REALIGNMENT:
        return access_level <= AccessLevel.TERRITORY or is_staff
    if menu == MenuId.UTILITIES:
        return is_staff
    return False


def permissions_for(access_level, is_staff=False) -> Dict[MenuId, bool]:
    """Full matrix row, in catalog order."""
    return {menu: is_menu_accessible(menu, access_level, is_staff) for menu in MenuId}


def accessible_menus(access_level, is_staff=False) -> List[MenuId]:
    return [menu for menu, allowed in permissions_for(access_level, is_staff).items() if allowed]


def access_reason(menu_id, access_level, is_staff=False) -> str:
    """Human readable explanation shown next to a menu entry."""
    menu = MenuId(menu_id)
    if access_level is None or access_level < 0:
        return "No access for blocked or unsupported users"
    if menu in GROUP_MANAGER_MENUS:
        if access_level in GROUP_MANAGER_LEVELS:
            return "Group Manager access"
        return "Requires ELEVEL 6 or 7 (Group Manager)"
    if menu == MenuId.REALIGNMENT:
        if access_level <= AccessLevel.TERRITORY:
            return "Standard access"
        if is_staff:
            return "Staff access"
        return "Requires ELEVEL 0-4 or Staff status"
    if menu == MenuId.UTILITIES:
        return "Staff access" if is_staff else "Requires Staff status"
    return "Standard access"


def menu_name(menu_id) -> str:
    return MENU_CATALOG[MenuId(menu_id)][0]


def menu_description(menu_id) -> str:
    return MENU_CATALOG[MenuId(menu_id)][1]
