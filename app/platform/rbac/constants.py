"""
RBAC Constants - access levels, hierarchy tiers, menus and organization catalogs
Static tables shared by the entitlement engine.
"""

from enum import Enum, IntEnum


class AccessLevel(IntEnum):
    """ELEVEL values found on assignment records"""
    BLOCKED = -2  # Blocked or vacant position
    NOT_SUPPORTED = -1  # Title/ICS combination not supported
    NATIONAL = 0
    AREA = 2
    TERRITORY = 4
    GROUP_MANAGER = 6
    ACTING_GROUP_MANAGER = 7
    EMPLOYEE = 8

    @classmethod
    def from_value(cls, value):
        """Return the member for ``value`` or None when the level is unknown."""
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


class HierarchyTier(str, Enum):
    """Tiers of the hierarchy, coarsest to finest"""
    NATIONAL = "NATIONAL"
    AREA = "AREA"
    TERRITORY = "TERRITORY"
    GROUP = "GROUP"
    RO = "RO"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


class MenuId(str, Enum):
    """Feature menus, in display order"""
    VIEWS = "VIEWS"
    REPORTS = "REPORTS"
    CHANGE_ACCESS = "CHANGE_ACCESS"
    END_OF_MONTH = "END_OF_MONTH"
    CASE_ASSIGNMENT = "CASE_ASSIGNMENT"
    TIME_VERIFICATION = "TIME_VERIFICATION"
    REALIGNMENT = "REALIGNMENT"
    UTILITIES = "UTILITIES"


class StaffLevel(str, Enum):
    """Selectable levels in the staff role-change workflow"""
    NATIONAL = "NATIONAL"
    AREA = "AREA"
    TERRITORY = "TERRITORY"
    GROUP = "GROUP"
    EMPLOYEE = "EMPLOYEE"


class ChangeRoleMode(str, Enum):
    STAFF = "STAFF"
    GENERAL = "GENERAL"


# Assignment flags
ACTIVE_SESSION = "A"
ACTIVE_VALID = "Y"
PRIMARY_YES = "Y"
PRIMARY_NO = "N"

# Rows at or below this level are never valid assignments
BLOCKED_LEVEL = AccessLevel.BLOCKED.value

# Staff status is derived from the position id, never from a stored flag
STAFF_ROID_PREFIX = "859062"

CODE_LENGTH = 8
NATIONAL_CODE = "00000000"
SEARCH_MIN_LENGTH = 2
SEARCH_RESULT_LIMIT = 20

VALID_AREA_CODES = frozenset({21, 22, 23, 24, 25, 26, 27, 35})

AREA_NAMES = {
    21: "Northeast",
    22: "Mid-Atlantic",
    23: "Southeast",
    24: "Central",
    25: "Southwest",
    26: "Western",
    27: "Northwest",
    35: "Special Operations",
}

# level -> (name, description, data scope)
ACCESS_LEVEL_TABLE = {
    AccessLevel.NATIONAL: ("National", "Full system access", "All Areas, All PODs"),
    AccessLevel.AREA: ("Area", "Area-level access", "All PODs within assigned Area"),
    AccessLevel.TERRITORY: ("Territory", "Territory-level access", "All PODs within Territory"),
    AccessLevel.GROUP_MANAGER: (
        "Group Manager", "Group Manager access", "All employees within assigned Group/POD",
    ),
    AccessLevel.ACTING_GROUP_MANAGER: (
        "Acting Group Manager", "Acting GM access", "All employees within assigned Group/POD",
    ),
    AccessLevel.EMPLOYEE: ("Employee", "Standard employee access", "Own assigned cases only"),
    AccessLevel.NOT_SUPPORTED: (
        "Not Supported", "Title/ICS combination not supported", "No data access",
    ),
    AccessLevel.BLOCKED: (
        "Blocked/Vacant", "User is blocked or position is vacant", "No data access",
    ),
}

# Both group manager levels share the GROUP tier
ACCESS_LEVEL_TIERS = {
    AccessLevel.NATIONAL: HierarchyTier.NATIONAL,
    AccessLevel.AREA: HierarchyTier.AREA,
    AccessLevel.TERRITORY: HierarchyTier.TERRITORY,
    AccessLevel.GROUP_MANAGER: HierarchyTier.GROUP,
    AccessLevel.ACTING_GROUP_MANAGER: HierarchyTier.GROUP,
    AccessLevel.EMPLOYEE: HierarchyTier.RO,
}

TIER_ACCESS_LEVELS = {
    HierarchyTier.NATIONAL: AccessLevel.NATIONAL,
    HierarchyTier.AREA: AccessLevel.AREA,
    HierarchyTier.TERRITORY: AccessLevel.TERRITORY,
    HierarchyTier.GROUP: AccessLevel.GROUP_MANAGER,
    HierarchyTier.RO: AccessLevel.EMPLOYEE,
}

# Number of significant leading digits in a code at each tier
TIER_SIGNIFICANT_DIGITS = {
    HierarchyTier.NATIONAL: 0,
    HierarchyTier.AREA: 2,
    HierarchyTier.TERRITORY: 4,
    HierarchyTier.GROUP: 6,
    HierarchyTier.RO: 8,
}

MENU_CATALOG = {
    MenuId.VIEWS: ("Views", "View case data and reports"),
    MenuId.REPORTS: ("Reports & Queries", "Run reports and ad-hoc queries"),
    MenuId.CHANGE_ACCESS: ("Change Access", "Change the hierarchy level being viewed"),
    MenuId.END_OF_MONTH: ("End of Month", "End of month processing"),
    MenuId.CASE_ASSIGNMENT: ("Case Assignment", "Assign cases to group employees"),
    MenuId.TIME_VERIFICATION: ("Weekly Time Verification", "Verify weekly employee time"),
    MenuId.REALIGNMENT: ("Realignment", "Realign cases across the hierarchy"),
    MenuId.UTILITIES: ("Utilities", "Staff utilities"),
}

# Organizations selectable from a National context
CONTEXT_ORGANIZATIONS = {
    "CF": "Field Collection",
    "AD": "Advisory",
    "CP": "Compliance",
    "WI": "Wage & Investment",
}
DEFAULT_ORG = "CF"

# Organizations a staff user may be placed under
STAFF_ORGANIZATIONS = {
    "CF": "Field Collection",
    "CP": "Compliance",
    "WI": "Wage & Investment",
    "AD": "Advisory",
}

# Organization/function catalog of the staff role-change workflow: code -> (display name, description)
ORG_FUNCTIONS = {
    "FC": ("FC - Field Collection", "Field Collection"),
    "CCP": ("CCP - Collection Processing", "Collection Processing"),
    "WI": ("W&I - Taxpayer Services", "Taxpayer Services"),
}

# level -> (access level, required digits, hint)
STAFF_LEVEL_OPTIONS = {
    StaffLevel.NATIONAL: (AccessLevel.NATIONAL, 0, "0 - national"),
    StaffLevel.AREA: (AccessLevel.AREA, 2, "2-digit area"),
    StaffLevel.TERRITORY: (AccessLevel.TERRITORY, 4, "4-digit territory"),
    StaffLevel.GROUP: (AccessLevel.GROUP_MANAGER, 6, "6-digit Group"),
    StaffLevel.EMPLOYEE: (AccessLevel.EMPLOYEE, 8, "8-Digits RO"),
}

LEVEL_VALUE_HINT = "8-Digits RO, 6-digit Group, 4-digit territory, 2-digit area, 0-national"
