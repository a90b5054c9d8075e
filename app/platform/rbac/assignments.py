"""
Assignment switching
Changes which of a user's assignment rows is current (eactive='A', primary='Y').
"""

import logging
from typing import List, Optional

from django.db import transaction

from app.core.services.audit import record_audit
from .exceptions import (
    ActivationFailedError,
    AssignmentNotFoundError,
    InvalidArgumentError,
    InvalidAssignmentError,
)
from .levels import access_level_name
from .menus import accessible_menus
from .models import Assignment
from .session_store import SeidLockRegistry
from .staff import is_staff
from .types import AssignmentView, SwitchResult

logger = logging.getLogger(__name__)


def assignment_view(record: Assignment) -> AssignmentView:
    return AssignmentView(
        roid=record.roid,
        name=record.name,
        title=record.title,
        access_level=record.access_level,
        access_level_name=access_level_name(record.access_level),
        area_code=record.area_code,
        position_code=record.position_code,
        org=record.org,
        eactive=record.eactive,
        primary_roid=record.primary_roid,
        is_current=record.is_current,
        is_staff_assignment=record.is_staff_assignment,
    )


def parse_roid(value) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidArgumentError("Invalid ROID format")


class AssignmentSwitcher:
    """
    Two-step switch: demote every valid row of the seid, then promote the target.
    Both steps run in one transaction while holding the seid lock, with the
    seid's rows locked for update.
    """

    def __init__(self, locks: Optional[SeidLockRegistry] = None):
        self.locks = locks if locks is not None else SeidLockRegistry()

    def list_assignments(self, seid) -> List[AssignmentView]:
        return [assignment_view(record) for record in Assignment.objects.find_all_valid(seid)]

    def current_assignment(self, seid) -> Optional[AssignmentView]:
        record = Assignment.objects.find_current_active(seid)
        return assignment_view(record) if record else None

    def assignment_count(self, seid) -> int:
        return Assignment.objects.count_valid(seid)

    def has_multiple_assignments(self, seid) -> bool:
        return self.assignment_count(seid) > 1

    def switch_record(self, seid, target_roid) -> Assignment:
        """
        Make ``target_roid`` the current assignment of ``seid``.

        Raises:
            AssignmentNotFoundError: roid does not belong to the seid
            InvalidAssignmentError: target is blocked or vacant
            ActivationFailedError: activation touched no rows; the reset was rolled back
        """
        target_roid = parse_roid(target_roid)
        with self.locks.hold(seid), transaction.atomic():
            owned = list(Assignment.objects.for_seid(seid).select_for_update().order_by("roid"))
            target = next((row for row in owned if row.roid == target_roid), None)
            if target is None:
                raise AssignmentNotFoundError("Assignment not found or does not belong to you")
            if not target.is_valid_assignment:
                raise InvalidAssignmentError("Cannot switch to an invalid or blocked assignment")

            previous = next((row.roid for row in owned if row.is_current and row.is_valid_assignment), None)
            reset = Assignment.objects.reset_all_for_user(seid)
            activated = Assignment.objects.activate(target_roid, seid)
            if activated == 0:
                logger.error(f"Activation of roid={target_roid} for seid={seid} affected no rows")
                raise ActivationFailedError("Failed to activate assignment; please retry")

            record_audit(
                actor_seid=seid,
                action="assignment.switched",
                object_id=target_roid,
                description=f"Switched current assignment to {target_roid}",
                metadata={"previous_roid": previous, "new_roid": target_roid, "reset_rows": reset},
            )
            target.refresh_from_db()
            target.previous_roid = previous

        logger.info(f"seid={seid} switched assignment {previous} -> {target_roid}")
        return target

    def switch_to(self, seid, target_roid) -> SwitchResult:
        record = self.switch_record(seid, target_roid)
        return SwitchResult(
            success=True,
            message=f"Successfully switched to assignment: {record.title}",
            previous_roid=record.previous_roid,
            new_roid=record.roid,
            assignment=assignment_view(record),
            new_access_level=record.access_level,
            new_access_level_name=access_level_name(record.access_level),
            available_menus=[
                menu.value for menu in accessible_menus(record.access_level, is_staff(seid))
            ],
        )
