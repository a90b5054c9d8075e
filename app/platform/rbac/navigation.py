"""
Hierarchy navigation
Parent -> children listings with child counts from the record store aggregates.
Every listing is intersected with the caller's own branch of the hierarchy.
"""

import logging
from typing import List, Optional

from .codec import (
    access_level_to_tier,
    code_prefix,
    display_name,
    encode_position,
    normalize_to_digits,
)
from .constants import (
    NATIONAL_CODE,
    SEARCH_MIN_LENGTH,
    SEARCH_RESULT_LIMIT,
    TIER_SIGNIFICANT_DIGITS,
    AccessLevel,
    HierarchyTier,
)
from .levels import resolve_access_level
from .models import Assignment
from .types import HierarchyNode

logger = logging.getLogger(__name__)


def caller_scope(seid: str) -> Optional[str]:
    """
    Code prefix the caller is confined to.

    Returns:
        "" for National users, the significant digits of the caller's own
        position otherwise, or None when the caller may see nothing
    """
    level = resolve_access_level(seid)
    if level < 0:
        return None
    if level == AccessLevel.NATIONAL:
        return ""
    record = Assignment.objects.find_current_active(seid)
    if record is None:
        return None
    tier = access_level_to_tier(level)
    return code_prefix(encode_position(record.area_code, record.position_code, tier), tier)


def in_scope(node: HierarchyNode, scope: Optional[str]) -> bool:
    if scope is None:
        return False
    digits = min(TIER_SIGNIFICANT_DIGITS[HierarchyTier(node.level)], len(scope))
    return node.code[:digits] == scope[:digits]


def _restrict(nodes, seid):
    scope = caller_scope(seid)
    return [node for node in nodes if in_scope(node, scope)]


def list_areas(seid: str) -> List[HierarchyNode]:
    nodes = []
    for area_code, territory_count in Assignment.objects.area_counts_with_children():
        code = f"{area_code:02d}000000"
        nodes.append(HierarchyNode(
            code=code,
            level=HierarchyTier.AREA.value,
            display_name=display_name(code, HierarchyTier.AREA),
            parent_code=NATIONAL_CODE,
            child_count=territory_count,
        ))
    return _restrict(nodes, seid)


def list_territories(seid: str, area_code) -> List[HierarchyNode]:
    parent = normalize_to_digits(area_code, 2)
    nodes = []
    for territory, group_count in Assignment.objects.territory_counts_for_area(int(parent[:2])):
        code = parent[:2] + territory.ljust(2, "0") + "0000"
        nodes.append(HierarchyNode(
            code=code,
            level=HierarchyTier.TERRITORY.value,
            display_name=display_name(code, HierarchyTier.TERRITORY),
            parent_code=parent,
            child_count=group_count,
        ))
    return _restrict(sorted(nodes, key=lambda node: node.code), seid)


def list_groups(seid: str, territory_code) -> List[HierarchyNode]:
    parent = normalize_to_digits(territory_code, 4)
    nodes = []
    rows = Assignment.objects.group_counts_for_territory(int(parent[:2]), parent[2:4])
    for group, officer_count in rows:
        code = parent[:2] + group.ljust(4, "0") + "00"
        nodes.append(HierarchyNode(
            code=code,
            level=HierarchyTier.GROUP.value,
            display_name=display_name(code, HierarchyTier.GROUP),
            parent_code=parent,
            child_count=officer_count,
        ))
    return _restrict(sorted(nodes, key=lambda node: node.code), seid)


def _officer_node(record, parent_code=None, label=None):
    code = encode_position(record.area_code, record.position_code, HierarchyTier.RO)
    return HierarchyNode(
        code=code,
        level=HierarchyTier.RO.value,
        display_name=label or record.name or display_name(code, HierarchyTier.RO),
        parent_code=parent_code or code[:6] + "00",
        child_count=0,
        access_level_equivalent=record.access_level,
    )


def list_revenue_officers(seid: str, group_code) -> List[HierarchyNode]:
    parent = normalize_to_digits(group_code, 6)
    records = Assignment.objects.find_by_area_and_position_prefix(int(parent[:2]), parent[2:6])
    nodes = [_officer_node(record, parent) for record in records]
    return _restrict(sorted(nodes, key=lambda node: node.display_name), seid)


def child_count(code: str, tier) -> int:
    """Number of children one tier below ``code``."""
    tier = HierarchyTier.parse(tier)
    if tier == HierarchyTier.NATIONAL:
        return Assignment.objects.count_distinct_areas()
    area = int(code[:2])
    if tier == HierarchyTier.AREA:
        return Assignment.objects.count_territories_in_area(area)
    if tier == HierarchyTier.TERRITORY:
        return Assignment.objects.count_groups_in_territory(area, code[2:4])
    if tier == HierarchyTier.GROUP:
        return Assignment.objects.count_ros_in_group(area, code[2:6])
    return 0


def search(seid: str, term: Optional[str]) -> List[HierarchyNode]:
    """
    Case-insensitive name search returning RO nodes labelled "Name (Title)".
    Terms shorter than two characters return nothing.
    """
    term = (term or "").strip()
    if len(term) < SEARCH_MIN_LENGTH:
        return []
    scope = caller_scope(seid)
    if scope is None:
        return []

    results = []
    for record in Assignment.objects.search_by_name_contains(term).iterator():
        node = _officer_node(record, label=f"{record.name} ({record.title})")
        if in_scope(node, scope):
            results.append(node)
            if len(results) >= SEARCH_RESULT_LIMIT:
                break
    logger.debug(f"Search '{term}' by seid={seid} returned {len(results)} node(s)")
    return results
