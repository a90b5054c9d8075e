"""
Change Role workflows
General users pick one of their assignments. Staff users pick a level and
value, optionally an assignment and an org/function, and may keep the choice
as their default.
"""

import logging
from typing import List, Optional

from django.db import DatabaseError, transaction

from app.core.services.audit import record_audit
from .assignments import AssignmentSwitcher, parse_roid
from .codec import access_level_to_tier, normalize_to_digits
from .constants import (
    DEFAULT_ORG,
    LEVEL_VALUE_HINT,
    NATIONAL_CODE,
    ORG_FUNCTIONS,
    STAFF_LEVEL_OPTIONS,
    VALID_AREA_CODES,
    ChangeRoleMode,
    HierarchyTier,
    StaffLevel,
)
from .context import data_scope
from .exceptions import (
    AssignmentNotFoundError,
    InternalError,
    InvalidArgumentError,
    UnauthorizedError,
)
from .menus import accessible_menus
from .models import Assignment
from .session_store import SeidStore
from .staff import is_staff
from .types import (
    ChangeRoleConfig,
    ChangeRoleResult,
    CurrentRole,
    GeneralRoleOptions,
    LevelOption,
    LevelValueValidation,
    OrgFunctionOption,
    RoleOption,
    StaffChangeRequest,
    StaffRoleOptions,
)

logger = logging.getLogger(__name__)

STAFF_LEVEL_TIERS = {
    StaffLevel.NATIONAL: HierarchyTier.NATIONAL,
    StaffLevel.AREA: HierarchyTier.AREA,
    StaffLevel.TERRITORY: HierarchyTier.TERRITORY,
    StaffLevel.GROUP: HierarchyTier.GROUP,
    StaffLevel.EMPLOYEE: HierarchyTier.RO,
}


def grade_label(record: Assignment) -> str:
    if record.grade is not None:
        return f"Grade {record.grade}"
    if record.access_level is not None:
        return f"Grade {10 + abs(record.access_level)}"
    return "Grade 11"


def role_display_text(record: Assignment) -> str:
    title = (record.title or "").strip() or "Unknown"
    return f"{title} - {grade_label(record)} - {record.roid}"


def level_options() -> List[LevelOption]:
    return [
        LevelOption(level=level.value, access_level=access.value, required_digits=digits, hint=hint)
        for level, (access, digits, hint) in STAFF_LEVEL_OPTIONS.items()
    ]


def org_function_options(current: Optional[str] = None) -> List[OrgFunctionOption]:
    return [
        OrgFunctionOption(code=code, display_name=label, description=description, is_current=(code == current))
        for code, (label, description) in ORG_FUNCTIONS.items()
    ]


def _level_display_name(level: StaffLevel, value: str) -> str:
    if level == StaffLevel.NATIONAL:
        return "National"
    if level == StaffLevel.EMPLOYEE:
        return f"Employee {value}"
    return f"{level.value.title()} {value}"


def validate_level_value(level, value) -> LevelValueValidation:
    """
    Check a staff level/value pair and normalize the value to an 8-digit code.

    Args:
        level: One of NATIONAL, AREA, TERRITORY, GROUP, EMPLOYEE
        value: Free-text digits; extra characters are ignored

    Returns:
        LevelValueValidation with the normalized code when valid
    """
    try:
        staff_level = StaffLevel(str(level or "").strip().upper())
    except ValueError:
        return LevelValueValidation(valid=False, level=level, error=f"Invalid level: {level}")

    required = STAFF_LEVEL_OPTIONS[staff_level][1]
    if required == 0:
        return LevelValueValidation(
            valid=True, level=staff_level.value, normalized_value=NATIONAL_CODE, display_name="National",
        )
    if value is None or not str(value).strip():
        return LevelValueValidation(
            valid=False, level=staff_level.value, error=f"Level value required for {staff_level.value}",
        )

    digits = "".join(ch for ch in str(value) if ch in "0123456789")
    if len(digits) < required:
        return LevelValueValidation(
            valid=False, level=staff_level.value, error=f"{staff_level.value} requires {required} digits",
        )
    significant = digits[:required]
    if int(significant[:2]) not in VALID_AREA_CODES:
        return LevelValueValidation(
            valid=False, level=staff_level.value, error="Invalid Area code. Valid: 21-27, 35",
        )
    return LevelValueValidation(
        valid=True,
        level=staff_level.value,
        normalized_value=normalize_to_digits(significant, required),
        display_name=_level_display_name(staff_level, significant),
    )


class RoleChangeOrchestrator:
    """Composes level resolution, codec checks, the switcher and the menu matrix."""

    def __init__(self, switcher: Optional[AssignmentSwitcher] = None, defaults: Optional[SeidStore] = None):
        self.switcher = switcher or AssignmentSwitcher()
        self.defaults = defaults or SeidStore(self.switcher.locks)
        self.locks = self.switcher.locks

    # ---------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------
    def current_role(self, seid) -> CurrentRole:
        record = Assignment.objects.find_current_active(seid)
        if record is None:
            record = Assignment.objects.find_all_valid(seid).first()
        if record is None:
            return CurrentRole(
                roid=None, name="Unknown", title="", grade="",
                display_text="No role assigned", access_level=None, org=DEFAULT_ORG,
            )
        return CurrentRole(
            roid=record.roid,
            name=(record.name or "").strip() or "Unknown",
            title=(record.title or "").strip() or "Unknown",
            grade=grade_label(record),
            display_text=role_display_text(record),
            access_level=record.access_level,
            org=(record.org or "").strip() or DEFAULT_ORG,
            area_code=f"{record.area_code:02d}" if record.area_code is not None else None,
            position_code=(record.position_code or "").strip() or None,
        )

    def general_options(self, seid) -> GeneralRoleOptions:
        current = self.current_role(seid)
        roles = sorted(
            (
                RoleOption(
                    roid=record.roid,
                    title=(record.title or "").strip() or "Unknown",
                    grade=grade_label(record),
                    display_text=role_display_text(record),
                    access_level=record.access_level,
                    is_current=record.roid == current.roid,
                )
                for record in Assignment.objects.find_all_valid(seid)
            ),
            key=lambda option: option.display_text,
        )
        can_change = len(roles) > 1
        return GeneralRoleOptions(
            current_role=current,
            roles=roles,
            can_change_role=can_change,
            disabled_reason="" if can_change else "You have only one role assigned",
        )

    def staff_options(self, seid) -> StaffRoleOptions:
        current = self.current_role(seid)
        assignments = sorted(
            (
                RoleOption(
                    roid=record.roid,
                    title=(record.title or "").strip(),
                    grade=grade_label(record),
                    display_text=str(record.roid),
                    access_level=record.access_level,
                    is_current=record.roid == current.roid,
                )
                for record in Assignment.objects.find_all_valid(seid)
            ),
            key=lambda option: str(option.roid),
        )
        return StaffRoleOptions(
            current_role=current,
            levels=level_options(),
            assignments=assignments,
            org_functions=org_function_options(current.org),
            level_value_hint=LEVEL_VALUE_HINT,
            current_default=self.defaults.get(seid),
        )

    def change_role_config(self, seid) -> ChangeRoleConfig:
        staff = is_staff(seid)
        config = ChangeRoleConfig(
            seid=seid,
            mode=(ChangeRoleMode.STAFF if staff else ChangeRoleMode.GENERAL).value,
            is_staff=staff,
            current_role=self.current_role(seid),
        )
        if staff:
            config.staff_options = self.staff_options(seid)
        else:
            config.general_options = self.general_options(seid)
        return config

    def user_default(self, seid) -> Optional[StaffChangeRequest]:
        return self.defaults.get(seid)

    def clear_user_default(self, seid) -> bool:
        removed = self.defaults.pop(seid) is not None
        if removed:
            logger.info(f"Cleared default role selection for seid={seid}")
        return removed

    # ---------------------------------------------------------------
    # Changes
    # ---------------------------------------------------------------
    def change_role_general(self, seid, roid) -> ChangeRoleResult:
        """
        Switch to another of the user's own assignments.

        Raises:
            InvalidArgumentError: roid is not numeric
            AssignmentNotFoundError: roid does not belong to the seid
            InternalError: record store failure
        """
        target = parse_roid(roid)
        try:
            if Assignment.objects.find_by_roid_and_seid(target, seid) is None:
                raise AssignmentNotFoundError("Assignment not found")
            record = self.switcher.switch_record(seid, target)
            staff = is_staff(seid)
        except DatabaseError as exc:
            logger.exception(f"Record store failure changing role for seid={seid}: {exc}")
            raise InternalError("An unexpected error occurred while changing role") from exc

        return ChangeRoleResult(
            success=True,
            message="Role changed successfully",
            new_role=self.current_role(seid),
            new_level=access_level_to_tier(record.access_level).value,
            new_access_level=record.access_level,
            new_org=(record.org or "").strip() or DEFAULT_ORG,
            available_menus=[menu.value for menu in accessible_menus(record.access_level, staff)],
        )

    def _validate_staff_request(self, seid, request: StaffChangeRequest) -> List[str]:
        errors = []
        if not request.level:
            errors.append("Level is required")
        else:
            validation = validate_level_value(request.level, request.level_value)
            if not validation.valid:
                errors.append(validation.error)

        if request.assignment_roid:
            try:
                roid = int(str(request.assignment_roid).strip())
            except ValueError:
                errors.append("Assignment Number must be numeric")
            else:
                record = Assignment.objects.find_by_roid_and_seid(roid, seid)
                if record is None or not record.is_valid_assignment:
                    errors.append("Invalid Assignment Number")

        if request.org_function and request.org_function not in ORG_FUNCTIONS:
            errors.append("Invalid Org/Function")
        return errors

    def change_role_staff(self, seid, request: StaffChangeRequest) -> ChangeRoleResult:
        """
        Apply a staff role change. Each sub-action runs only when its field is set.

        Raises:
            UnauthorizedError: Caller holds no staff assignment
            InvalidArgumentError: One or more fields failed validation; all problems are listed
            InternalError: record store failure
        """
        try:
            if not is_staff(seid):
                logger.warning(f"Staff role change refused for non-staff seid={seid}")
                raise UnauthorizedError("Staff role change is only available to staff users")

            errors = self._validate_staff_request(seid, request)
            if errors:
                raise InvalidArgumentError("; ".join(errors), error_code="VALIDATION_ERROR", errors=errors)

            with self.locks.hold(seid), transaction.atomic():
                if request.assignment_roid:
                    self.switcher.switch_record(seid, int(str(request.assignment_roid).strip()))

                if request.org_function:
                    current = Assignment.objects.find_current_active(seid)
                    if current is not None:
                        Assignment.objects.update_org(current.roid, request.org_function)
                        record_audit(
                            actor_seid=seid,
                            action="assignment.org_updated",
                            object_id=current.roid,
                            description=f"Org/function set to {request.org_function}",
                            metadata={"org": request.org_function},
                        )

                if request.keep_as_default:
                    self.defaults.put(seid, request)
                    logger.info(f"Kept role selection as default for seid={seid}")
        except DatabaseError as exc:
            logger.exception(f"Record store failure changing staff role for seid={seid}: {exc}")
            raise InternalError("An unexpected error occurred while changing role") from exc

        staff_level = StaffLevel(request.level.strip().upper())
        access_level = STAFF_LEVEL_OPTIONS[staff_level][0]
        validation = validate_level_value(request.level, request.level_value)
        new_role = self.current_role(seid)
        logger.info(f"seid={seid} changed staff role to {staff_level.value} {validation.normalized_value}")
        return ChangeRoleResult(
            success=True,
            message="Role changed successfully",
            new_role=new_role,
            new_level=staff_level.value,
            new_access_level=access_level.value,
            new_org=request.org_function or new_role.org,
            data_scope=data_scope(
                validation.normalized_value, STAFF_LEVEL_TIERS[staff_level], request.org_function,
            ),
            available_menus=[menu.value for menu in accessible_menus(access_level, is_staff=True)],
            default_saved=request.keep_as_default,
        )
