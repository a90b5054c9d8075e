"""Change Role workflows for general and staff users."""
import pytest

from app.core.models import AuditLog
from app.platform.rbac.exceptions import (
    AssignmentNotFoundError,
    InvalidArgumentError,
    UnauthorizedError,
)
from app.platform.rbac.models import Assignment
from app.platform.rbac.role_change import (
    RoleChangeOrchestrator,
    grade_label,
    level_options,
    org_function_options,
    validate_level_value,
)
from app.platform.rbac.types import StaffChangeRequest


@pytest.fixture
def roles():
    return RoleChangeOrchestrator()


class TestValidateLevelValue:
    def test_national_needs_no_value(self):
        result = validate_level_value("NATIONAL", None)
        assert result.valid
        assert result.normalized_value == "00000000"
        assert result.display_name == "National"

    def test_area(self):
        result = validate_level_value("area", "21")
        assert result.valid
        assert result.level == "AREA"
        assert result.normalized_value == "21000000"
        assert result.display_name == "Area 21"

    def test_employee_ignores_separators(self):
        result = validate_level_value("EMPLOYEE", "2111-1001")
        assert result.normalized_value == "21111001"
        assert result.display_name == "Employee 21111001"

    def test_too_few_digits(self):
        assert validate_level_value("TERRITORY", "21").error == "TERRITORY requires 4 digits"

    def test_invalid_area(self):
        assert validate_level_value("AREA", "99").error == "Invalid Area code. Valid: 21-27, 35"

    def test_missing_value(self):
        assert validate_level_value("GROUP", "").error == "Level value required for GROUP"

    def test_unknown_level(self):
        assert validate_level_value("BOGUS", "1").error == "Invalid level: BOGUS"

    @pytest.mark.parametrize("value", ["²1", "２１", "٢١"])
    def test_non_ascii_digits_are_not_counted(self, value):
        result = validate_level_value("AREA", value)
        assert not result.valid
        assert result.error == "AREA requires 2 digits"


class TestCatalogs:
    def test_level_options(self):
        options = level_options()
        assert [option.level for option in options] == ["NATIONAL", "AREA", "TERRITORY", "GROUP", "EMPLOYEE"]
        assert [option.required_digits for option in options] == [0, 2, 4, 6, 8]

    def test_org_functions(self):
        options = org_function_options("CCP")
        assert [option.code for option in options] == ["FC", "CCP", "WI"]
        assert [option.code for option in options if option.is_current] == ["CCP"]
        assert options[2].display_name == "W&I - Taxpayer Services"

    def test_grade_label_falls_back_to_level(self):
        assert grade_label(Assignment(roid=1, grade=13, access_level=8)) == "Grade 13"
        assert grade_label(Assignment(roid=1, grade=None, access_level=8)) == "Grade 18"
        assert grade_label(Assignment(roid=1, grade=None, access_level=-2)) == "Grade 12"
        assert grade_label(Assignment(roid=1)) == "Grade 11"


@pytest.mark.django_db
class TestRoleQueries:
    def test_current_role(self, hierarchy, roles):
        role = roles.current_role("MUL01")
        assert role.roid == 21111003
        assert role.display_text == "Revenue Officer - Grade 12 - 21111003"
        assert role.area_code == "21"
        assert role.position_code == "111003"

    def test_current_role_for_unknown_user(self, hierarchy, roles):
        role = roles.current_role("ZZZZZ")
        assert role.roid is None
        assert role.display_text == "No role assigned"

    def test_general_options_sorted_by_display_text(self, hierarchy, roles):
        options = roles.general_options("MUL01")
        assert [role.roid for role in options.roles] == [21112000, 21111003]
        assert [role.is_current for role in options.roles] == [False, True]
        assert options.can_change_role

    def test_single_role_cannot_change(self, hierarchy, roles):
        options = roles.general_options("RO001")
        assert not options.can_change_role
        assert options.disabled_reason == "You have only one role assigned"

    def test_config_mode(self, hierarchy, roles):
        staff = roles.change_role_config("STF01")
        assert staff.mode == "STAFF"
        assert staff.staff_options is not None
        assert staff.general_options is None

        general = roles.change_role_config("RO001")
        assert general.mode == "GENERAL"
        assert general.general_options is not None

    def test_staff_options(self, hierarchy, roles):
        options = roles.staff_options("STF01")
        assert [role.roid for role in options.assignments] == [85906201, 85906202]
        assert options.level_value_hint.startswith("8-Digits RO")
        assert options.current_default is None


@pytest.mark.django_db
class TestGeneralChange:
    def test_switches_role(self, hierarchy, roles):
        result = roles.change_role_general("MUL01", "21112000")
        assert result.success
        assert result.new_role.roid == 21112000
        assert result.new_level == "GROUP"
        assert result.new_access_level == 7
        assert "CASE_ASSIGNMENT" in result.available_menus

    def test_bad_roid(self, hierarchy, roles):
        with pytest.raises(InvalidArgumentError):
            roles.change_role_general("MUL01", "abc")

    def test_foreign_roid(self, hierarchy, roles):
        with pytest.raises(AssignmentNotFoundError) as excinfo:
            roles.change_role_general("MUL01", "21111001")
        assert excinfo.value.message == "Assignment not found"


@pytest.mark.django_db
class TestStaffChange:
    def test_full_change(self, hierarchy, roles):
        request = StaffChangeRequest(
            level="AREA", level_value="21", assignment_roid="85906202", org_function="CCP", keep_as_default=True,
        )
        result = roles.change_role_staff("STF01", request)

        assert result.new_level == "AREA"
        assert result.new_access_level == 2
        assert result.new_org == "CCP"
        assert result.default_saved
        assert result.data_scope.code == "21000000"
        assert result.data_scope.description == "All data in Area 21"
        assert "UTILITIES" in result.available_menus
        assert result.new_role.roid == 85906202

        current = Assignment.objects.find_current_active("STF01")
        assert current.roid == 85906202
        assert current.org == "CCP"
        assert AuditLog.objects.filter(action="assignment.org_updated").count() == 1

        assert roles.user_default("STF01") == request
        assert roles.staff_options("STF01").current_default == request

    def test_level_only_change_touches_no_rows(self, hierarchy, roles):
        result = roles.change_role_staff("STF01", StaffChangeRequest(level="NATIONAL"))
        assert result.new_access_level == 0
        assert result.new_org == "CF"
        assert not result.default_saved
        assert Assignment.objects.find_current_active("STF01").roid == 85906201
        assert roles.user_default("STF01") is None

    def test_all_problems_reported_together(self, hierarchy, roles):
        request = StaffChangeRequest(level="TERRITORY", level_value="21", assignment_roid="123", org_function="ZZ")
        with pytest.raises(InvalidArgumentError) as excinfo:
            roles.change_role_staff("STF01", request)

        assert excinfo.value.error_code == "VALIDATION_ERROR"
        assert excinfo.value.errors == [
            "TERRITORY requires 4 digits",
            "Invalid Assignment Number",
            "Invalid Org/Function",
        ]
        assert Assignment.objects.find_current_active("STF01").roid == 85906201

    def test_missing_level_and_non_numeric_assignment(self, hierarchy, roles):
        with pytest.raises(InvalidArgumentError) as excinfo:
            roles.change_role_staff("STF01", StaffChangeRequest(assignment_roid="abc"))
        assert excinfo.value.errors == ["Level is required", "Assignment Number must be numeric"]

    def test_blocked_assignment_reported_with_other_problems(self, hierarchy, make_assignment, roles):
        make_assignment(85906299, "STF01", level=-2, area=35, pod="510099", current=False)
        request = StaffChangeRequest(level="BOGUS", assignment_roid="85906299", org_function="ZZ")
        with pytest.raises(InvalidArgumentError) as excinfo:
            roles.change_role_staff("STF01", request)
        assert excinfo.value.errors == [
            "Invalid level: BOGUS",
            "Invalid Assignment Number",
            "Invalid Org/Function",
        ]

    def test_blocked_assignment_alone_is_a_validation_error(self, hierarchy, make_assignment, roles):
        make_assignment(85906299, "STF01", level=-2, area=35, pod="510099", current=False)
        request = StaffChangeRequest(level="NATIONAL", assignment_roid="85906299")
        with pytest.raises(InvalidArgumentError) as excinfo:
            roles.change_role_staff("STF01", request)
        assert excinfo.value.error_code == "VALIDATION_ERROR"
        assert excinfo.value.errors == ["Invalid Assignment Number"]
        assert Assignment.objects.find_current_active("STF01").roid == 85906201

    def test_non_staff_refused(self, hierarchy, roles):
        with pytest.raises(UnauthorizedError):
            roles.change_role_staff("RO001", StaffChangeRequest(level="NATIONAL"))

    def test_clear_default(self, hierarchy, roles):
        roles.change_role_staff("STF01", StaffChangeRequest(level="NATIONAL", keep_as_default=True))
        assert roles.clear_user_default("STF01")
        assert not roles.clear_user_default("STF01")
        assert roles.user_default("STF01") is None
