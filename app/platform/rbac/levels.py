"""
Access level resolution
Derives a user's effective ELEVEL from their assignment rows and names it.
"""

import logging
from typing import List, Optional

from .constants import ACCESS_LEVEL_TABLE, BLOCKED_LEVEL, AccessLevel
from .menus import accessible_menus
from .models import Assignment
from .types import AccessLevelDefinition

logger = logging.getLogger(__name__)


def resolve_access_level(seid: str) -> int:
    """
    Effective access level for a user.

    The single highest-priority valid row wins (active+primary, primary,
    active, valid, other). Users without a usable row are Blocked.

    Args:
        seid: User identifier

    Returns:
        ELEVEL of the winning row, or -2
    """
    record = Assignment.objects.find_by_priority(seid).first()
    if record is None or record.access_level is None:
        logger.debug(f"No valid assignment for seid={seid}; treating as blocked")
        return BLOCKED_LEVEL
    return record.access_level


def _table_entry(level):
    member = AccessLevel.from_value(level)
    if member is None:
        return None
    return ACCESS_LEVEL_TABLE[member]


def access_level_name(level: Optional[int]) -> str:
    if level is None:
        return "Unknown"
    entry = _table_entry(level)
    return entry[0] if entry else f"Unknown ({level})"


def access_level_description(level: Optional[int]) -> str:
    entry = _table_entry(level)
    return entry[1] if entry else "Unknown"


def access_level_data_scope(level: Optional[int]) -> str:
    entry = _table_entry(level)
    return entry[2] if entry else "Unknown"


def is_valid_access_level(level: Optional[int]) -> bool:
    return level is not None and level >= 0


def access_level_definition(level: int) -> AccessLevelDefinition:
    return AccessLevelDefinition(
        access_level=level,
        name=access_level_name(level),
        description=access_level_description(level),
        data_scope=access_level_data_scope(level),
        accessible_menus=[menu.value for menu in accessible_menus(level, is_staff=False)],
    )


def access_level_definitions() -> List[AccessLevelDefinition]:
    """Every known level, broadest first, sentinels last."""
    ordered = sorted(AccessLevel, key=lambda member: (member.value < 0, abs(member.value)))
    return [access_level_definition(member.value) for member in ordered]
