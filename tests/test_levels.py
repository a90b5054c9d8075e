"""Effective access level resolution and level naming."""
import pytest

from app.platform.rbac.levels import (
    access_level_data_scope,
    access_level_definitions,
    access_level_description,
    access_level_name,
    is_valid_access_level,
    resolve_access_level,
)


@pytest.mark.django_db
class TestResolveAccessLevel:
    @pytest.mark.parametrize("seid, level", [
        ("NAT01", 0),
        ("ARE21", 2),
        ("TER21", 4),
        ("GRP21", 6),
        ("RO001", 8),
        ("STF01", 8),
    ])
    def test_level_of_current_assignment(self, hierarchy, seid, level):
        assert resolve_access_level(seid) == level

    def test_padded_seid_is_trimmed(self, hierarchy):
        assert resolve_access_level("GRP21 ") == 6

    def test_unknown_user_is_blocked(self, hierarchy):
        assert resolve_access_level("ZZZZZ") == -2

    def test_only_blocked_rows_is_blocked(self, hierarchy):
        assert resolve_access_level("BLK01") == -2

    def test_current_row_wins_over_others(self, hierarchy):
        # MUL01 holds an acting GM row (7) that is not current
        assert resolve_access_level("MUL01") == 8

    def test_primary_row_wins_when_none_current(self, make_assignment):
        make_assignment(30000001, "PRI01", level=8, current=False)
        make_assignment(30000002, "PRI01", level=4, current=False, primary_roid="Y")
        assert resolve_access_level("PRI01") == 4

    def test_lowest_roid_breaks_ties(self, make_assignment):
        make_assignment(30000012, "TIE01", level=4, current=False)
        make_assignment(30000011, "TIE01", level=8, current=False)
        assert resolve_access_level("TIE01") == 8

    def test_null_level_rows_are_ignored(self, make_assignment):
        make_assignment(30000021, "NUL01", level=None)
        assert resolve_access_level("NUL01") == -2


class TestLevelNames:
    def test_known_levels(self):
        assert access_level_name(0) == "National"
        assert access_level_name(7) == "Acting Group Manager"
        assert access_level_name(-2) == "Blocked/Vacant"

    def test_unknown_levels(self):
        assert access_level_name(3) == "Unknown (3)"
        assert access_level_name(None) == "Unknown"
        assert access_level_description(3) == "Unknown"
        assert access_level_data_scope(99) == "Unknown"

    def test_data_scope(self):
        assert access_level_data_scope(8) == "Own assigned cases only"

    def test_validity(self):
        assert is_valid_access_level(0)
        assert is_valid_access_level(8)
        assert not is_valid_access_level(-1)
        assert not is_valid_access_level(None)

    def test_definitions_broadest_first_sentinels_last(self):
        definitions = access_level_definitions()
        assert [item.access_level for item in definitions] == [0, 2, 4, 6, 7, 8, -1, -2]
        assert definitions[-1].accessible_menus == []
        assert "CASE_ASSIGNMENT" in definitions[3].accessible_menus
