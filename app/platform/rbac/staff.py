"""
Staff status and staff organization
A user is staff iff one of their valid assignments has a roid starting with 859062.
"""

import logging
from typing import List

from django.db import transaction

from app.core.services.audit import record_audit
from .constants import DEFAULT_ORG, STAFF_ORGANIZATIONS, STAFF_ROID_PREFIX, MenuId
from .exceptions import InvalidArgumentError, UnauthorizedError
from .menus import is_menu_accessible
from .models import Assignment
from .types import Organization, StaffInfo

logger = logging.getLogger(__name__)


def is_staff(seid: str) -> bool:
    return Assignment.objects.count_staff_assignments(seid) > 0


def is_staff_roid(roid) -> bool:
    return roid is not None and str(roid).startswith(STAFF_ROID_PREFIX)


def staff_assignment(seid: str):
    """First staff assignment of the user, or None."""
    return Assignment.objects.find_staff_assignments(seid).first()


def staff_org(seid: str) -> str:
    record = staff_assignment(seid)
    if record is None or not record.org:
        return DEFAULT_ORG
    return record.org


def available_staff_orgs(current=None) -> List[Organization]:
    return [
        Organization(code=code, name=name, is_current=(code == current))
        for code, name in STAFF_ORGANIZATIONS.items()
    ]


def staff_info(seid: str) -> StaffInfo:
    """
    Staff summary for a user.

    Args:
        seid: User identifier

    Returns:
        StaffInfo; non-staff users get an empty summary with the default org
    """
    record = staff_assignment(seid)
    if record is None:
        return StaffInfo(seid=seid, is_staff=False, staff_roid=None, current_org=DEFAULT_ORG)

    current = record.org or DEFAULT_ORG
    level = record.access_level
    return StaffInfo(
        seid=seid,
        is_staff=True,
        staff_roid=record.roid,
        current_org=current,
        available_orgs=available_staff_orgs(current),
        has_utilities_access=is_menu_accessible(MenuId.UTILITIES, level, True),
        has_realignment_access=is_menu_accessible(MenuId.REALIGNMENT, level, True),
    )


@transaction.atomic
def update_staff_org(seid: str, org_code: str) -> StaffInfo:
    """
    Move every staff assignment of a user under ``org_code``.

    Raises:
        InvalidArgumentError: Unknown org code
        UnauthorizedError: User holds no staff assignment
    """
    org = (org_code or "").strip().upper()
    if org not in STAFF_ORGANIZATIONS:
        raise InvalidArgumentError(f"Invalid organization code: {org_code}")

    roids = list(Assignment.objects.find_staff_assignments(seid).values_list("roid", flat=True))
    if not roids:
        logger.warning(f"Staff org update refused for non-staff seid={seid}")
        raise UnauthorizedError("Only staff users can change staff organization")

    for roid in roids:
        Assignment.objects.update_org(roid, org)

    record_audit(
        actor_seid=seid,
        action="staff.org_updated",
        object_id=",".join(str(roid) for roid in roids),
        description=f"Staff organization set to {org}",
        metadata={"org": org, "roids": roids},
    )
    logger.info(f"Staff org for seid={seid} set to {org} on {len(roids)} assignment(s)")
    return staff_info(seid)
