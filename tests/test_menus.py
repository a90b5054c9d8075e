"""Menu permission matrix."""
import pytest

from app.platform.rbac.constants import MenuId
from app.platform.rbac.menus import (
    access_reason,
    accessible_menus,
    is_menu_accessible,
    menu_name,
    permissions_for,
)

BASE_MENUS = [MenuId.VIEWS, MenuId.REPORTS, MenuId.CHANGE_ACCESS, MenuId.END_OF_MONTH]


class TestMenuMatrix:
    @pytest.mark.parametrize("level", [-2, -1, None])
    def test_blocked_levels_see_nothing(self, level):
        assert accessible_menus(level) == []
        assert accessible_menus(level, is_staff=True) == []

    def test_employee_sees_base_menus_only(self):
        assert accessible_menus(8) == BASE_MENUS

    @pytest.mark.parametrize("level", [6, 7])
    def test_group_managers_get_case_assignment(self, level):
        assert is_menu_accessible(MenuId.CASE_ASSIGNMENT, level)
        assert is_menu_accessible(MenuId.TIME_VERIFICATION, level)
        assert not is_menu_accessible(MenuId.REALIGNMENT, level)

    def test_case_assignment_not_open_to_national(self):
        assert not is_menu_accessible(MenuId.CASE_ASSIGNMENT, 0)

    @pytest.mark.parametrize("level", [0, 2, 4])
    def test_realignment_for_territory_and_above(self, level):
        assert is_menu_accessible(MenuId.REALIGNMENT, level)

    def test_staff_gets_realignment_and_utilities(self):
        assert accessible_menus(8, is_staff=True) == BASE_MENUS + [MenuId.REALIGNMENT, MenuId.UTILITIES]

    def test_utilities_is_staff_only(self):
        assert not is_menu_accessible(MenuId.UTILITIES, 0)
        assert is_menu_accessible("UTILITIES", 8, True)

    def test_full_row_covers_every_menu(self):
        row = permissions_for(4)
        assert list(row) == list(MenuId)
        assert row[MenuId.REALIGNMENT] is True
        assert row[MenuId.UTILITIES] is False


class TestMenuReasons:
    def test_reasons(self):
        assert access_reason(MenuId.CASE_ASSIGNMENT, 8) == "Requires ELEVEL 6 or 7 (Group Manager)"
        assert access_reason(MenuId.CASE_ASSIGNMENT, 7) == "Group Manager access"
        assert access_reason(MenuId.REALIGNMENT, 8, True) == "Staff access"
        assert access_reason(MenuId.REALIGNMENT, 8) == "Requires ELEVEL 0-4 or Staff status"
        assert access_reason(MenuId.VIEWS, -2) == "No access for blocked or unsupported users"

    def test_menu_name(self):
        assert menu_name(MenuId.TIME_VERIFICATION) == "Weekly Time Verification"
