"""Area and pod reach of a user's own position."""
import pytest

from app.platform.rbac.scope import (
    accessible_areas,
    all_areas,
    area_name,
    can_access_area,
    can_access_pod,
    hierarchy_access,
    pods_for_area,
    pods_for_territory,
)


class TestAreaName:
    def test_known_area(self):
        assert area_name(21) == "Area 21 - Northeast"

    def test_unknown_area(self):
        assert area_name("9") == "Area 09"


@pytest.mark.django_db
class TestPods:
    def test_pods_for_area_skip_blocked_rows(self, hierarchy):
        assert pods_for_area(21) == ["110000", "111000", "111001", "111002", "111003", "112000", "121001"]

    def test_pods_for_area_none(self, hierarchy):
        assert pods_for_area(None) == []

    def test_territory_pods_match_two_character_prefix(self, hierarchy):
        # Territory users pass the first two pod characters; groups key on four
        assert pods_for_territory(21, "11") == ["110000", "111000", "111001", "111002", "111003", "112000"]
        assert pods_for_territory(21, "1110") == ["111000", "111001", "111002", "111003"]
        assert pods_for_territory(21, None) == []


@pytest.mark.django_db
class TestHierarchyAccess:
    def test_national(self, hierarchy):
        access = hierarchy_access("NAT01")
        assert access.accessible_area_codes == ["21", "22", "23", "24", "25", "26", "27", "35"]
        assert access.accessible_pod_codes == []
        assert access.scope_description == "National access - All Areas"

    def test_area(self, hierarchy):
        access = hierarchy_access("ARE21")
        assert access.accessible_area_codes == ["21"]
        assert "121001" in access.accessible_pod_codes
        assert access.scope_description == "Area 21 - All PODs"

    def test_territory(self, hierarchy):
        access = hierarchy_access("TER21")
        assert "112000" in access.accessible_pod_codes
        assert "121001" not in access.accessible_pod_codes
        assert access.scope_description == "Territory access within Area 21"

    def test_group_manager(self, hierarchy):
        access = hierarchy_access("GRP21")
        assert access.accessible_pod_codes == ["111000"]
        assert access.scope_description == "Group 111000 in Area 21"

    def test_employee(self, hierarchy):
        access = hierarchy_access("RO001")
        assert access.accessible_pod_codes == ["111001"]
        assert access.scope_description == "Own assignments only"

    def test_blocked(self, hierarchy):
        access = hierarchy_access("BLK01")
        assert access.accessible_area_codes == []
        assert access.scope_description == "No data access"
        assert access.access_level_name == "Blocked/Vacant"


@pytest.mark.django_db
class TestAreaChecks:
    def test_all_areas(self, hierarchy):
        summaries = all_areas()
        assert [area.area_code for area in summaries] == ["21", "22", "35"]
        assert summaries[0].territory_count == 2

    def test_accessible_areas(self, hierarchy):
        areas = accessible_areas("ARE21")
        assert len(areas) == 1
        assert areas[0].area_name == "Area 21 - Northeast"

    def test_can_access_area(self, hierarchy):
        assert can_access_area("GRP21", 21)
        assert not can_access_area("GRP21", "22")
        assert can_access_area("NAT01", "23")

    def test_can_access_pod(self, hierarchy):
        assert can_access_pod("NAT01", "999999")
        assert can_access_pod("RO001", "111001")
        assert not can_access_pod("RO001", "111002")
        assert not can_access_pod("BLK01", "111009")
