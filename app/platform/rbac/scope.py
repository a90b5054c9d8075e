"""
Hierarchy access scope
Which areas and position codes (pods) a user's own access level reaches.
"""

import logging
from typing import List, Optional

from .constants import AREA_NAMES, AccessLevel
from .levels import access_level_name, resolve_access_level
from .models import Assignment
from .types import AreaSummary, HierarchyAccess

logger = logging.getLogger(__name__)


def area_name(area_code) -> str:
    code = f"{int(area_code):02d}"
    name = AREA_NAMES.get(int(area_code))
    return f"Area {code} - {name}" if name else f"Area {code}"


def all_areas() -> List[AreaSummary]:
    return [
        AreaSummary(area_code=f"{area:02d}", area_name=area_name(area), territory_count=count)
        for area, count in Assignment.objects.area_counts_with_children()
    ]


def pods_for_area(area_code) -> List[str]:
    if area_code is None:
        return []
    return [pod.strip() for pod in Assignment.objects.distinct_position_codes_for_area(int(area_code))]


def pods_for_territory(area_code, territory_prefix: Optional[str]) -> List[str]:
    """
    Pods of an area starting with ``territory_prefix``.
    Callers pass the 2-character territory prefix, while group grouping keys on 4.
    """
    if area_code is None or territory_prefix is None:
        return []
    return [pod for pod in pods_for_area(area_code) if pod.startswith(territory_prefix)]


def hierarchy_access(seid: str) -> HierarchyAccess:
    """
    Areas and pods reachable from the user's own position.

    Args:
        seid: User identifier

    Returns:
        HierarchyAccess; blocked or unknown users get empty lists
    """
    level = resolve_access_level(seid)
    record = Assignment.objects.find_current_active(seid)
    areas: List[str] = []
    pods: List[str] = []

    if level < 0:
        description = "No data access"
    elif level == AccessLevel.NATIONAL:
        areas = sorted(f"{code:02d}" for code in AREA_NAMES)
        description = "National access - All Areas"
    elif record is not None:
        area = f"{record.area_code:02d}" if record.area_code is not None else None
        pod = (record.position_code or "").strip() or None
        if area:
            areas.append(area)
        if level == AccessLevel.AREA:
            pods = pods_for_area(record.area_code)
            description = f"Area {area} - All PODs"
        elif level == AccessLevel.TERRITORY:
            if pod and len(pod) >= 2:
                pods = pods_for_territory(record.area_code, pod[:2])
            description = f"Territory access within Area {area}"
        elif level in (AccessLevel.GROUP_MANAGER, AccessLevel.ACTING_GROUP_MANAGER):
            pods = [pod] if pod else []
            description = f"Group {pod} in Area {area}"
        else:
            pods = [pod] if pod else []
            description = "Own assignments only"
    else:
        description = "Unknown access scope"

    return HierarchyAccess(
        seid=seid,
        access_level=level,
        access_level_name=access_level_name(level),
        accessible_area_codes=areas,
        accessible_pod_codes=pods,
        scope_description=description,
    )


def accessible_areas(seid: str) -> List[AreaSummary]:
    codes = set(hierarchy_access(seid).accessible_area_codes)
    return [area for area in all_areas() if area.area_code in codes]


def can_access_area(seid: str, area_code) -> bool:
    code = f"{int(area_code):02d}"
    return code in hierarchy_access(seid).accessible_area_codes


def can_access_pod(seid: str, pod_code: str) -> bool:
    access = hierarchy_access(seid)
    if access.access_level == AccessLevel.NATIONAL:
        return True
    return (pod_code or "").strip() in access.accessible_pod_codes
