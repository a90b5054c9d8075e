"""HTTP surface under /api/v1/rbac/, always wrapped in the api_response envelope."""
from dataclasses import fields

import pytest

from app.platform.rbac.models import Assignment, AssignmentQuerySet
from app.platform.rbac.serializers import AssignmentListSerializer, AssignmentViewSerializer
from app.platform.rbac.types import AssignmentView

BASE = "/api/v1/rbac"


def _body(response):
    assert response.status_code == 200
    return response.data


@pytest.mark.django_db
class TestUserEndpoints:
    def test_access_levels(self, api_client):
        body = _body(api_client.get(f"{BASE}/users/access-levels/"))
        assert body["statusCode"] == 200
        assert body["status"] == "success"
        assert body["data"][0]["name"] == "National"

    def test_profile(self, hierarchy, api_client):
        body = _body(api_client.get(f"{BASE}/users/MUL01/"))
        assert body["data"]["assignment_count"] == 2
        assert body["data"]["current_assignment"]["roid"] == 21111003

    def test_unknown_profile(self, hierarchy, api_client):
        body = _body(api_client.get(f"{BASE}/users/ZZZZZ/"))
        assert body["statusCode"] == 404
        assert body["status"] == "failure"
        assert body["errorCode"] == "USER_NOT_FOUND"

    def test_access_level(self, hierarchy, api_client):
        data = _body(api_client.get(f"{BASE}/users/TER21/access-level/"))["data"]
        assert data["access_level"] == 4
        assert data["access_level_name"] == "Territory"
        assert data["is_valid"]

    def test_accessible_menus(self, hierarchy, api_client):
        data = _body(api_client.get(f"{BASE}/users/GRP21/accessible-menus/"))["data"]
        assert "CASE_ASSIGNMENT" in data["menus"]

    def test_staff_org_update(self, hierarchy, api_client):
        body = _body(api_client.post(f"{BASE}/users/STF01/staff-org/", {"org": "CP"}, format="json"))
        assert body["data"]["current_org"] == "CP"

    def test_staff_org_update_refused(self, hierarchy, api_client):
        body = _body(api_client.post(f"{BASE}/users/RO001/staff-org/", {"org": "CP"}, format="json"))
        assert body["statusCode"] == 403
        assert body["errorCode"] == "UNAUTHORIZED"

    def test_area_and_pod_checks(self, hierarchy, api_client):
        assert _body(api_client.get(f"{BASE}/users/GRP21/areas/21/access/"))["data"]["can_access"]
        assert not _body(api_client.get(f"{BASE}/users/GRP21/pods/111001/access/"))["data"]["can_access"]


@pytest.mark.django_db
class TestAssignmentEndpoints:
    def test_list(self, hierarchy, api_client):
        data = _body(api_client.get(f"{BASE}/assignments/MUL01/"))["data"]
        assert data["count"] == 2
        assert data["has_multiple"]

    def test_list_matches_documented_shape(self, hierarchy, api_client):
        data = _body(api_client.get(f"{BASE}/assignments/MUL01/"))["data"]
        assert set(data) == set(AssignmentListSerializer().fields)
        assert set(data["assignments"][0]) == set(AssignmentViewSerializer().fields)
        assert data["assignments"][0]["access_level_name"]

    def test_assignment_serializer_covers_view_fields(self):
        assert set(AssignmentViewSerializer().fields) == {field.name for field in fields(AssignmentView)}

    def test_switch(self, hierarchy, api_client):
        data = _body(api_client.post(f"{BASE}/assignments/MUL01/switch/21112000/"))["data"]
        assert data["new_roid"] == 21112000
        assert data["previous_roid"] == 21111003

    def test_switch_to_foreign_roid(self, hierarchy, api_client):
        body = _body(api_client.post(f"{BASE}/assignments/MUL01/switch/21111001/"))
        assert body["statusCode"] == 404
        assert body["errorCode"] == "ASSIGNMENT_NOT_FOUND"

    def test_switch_with_bad_roid(self, hierarchy, api_client):
        body = _body(api_client.post(f"{BASE}/assignments/MUL01/switch/abc/"))
        assert body["statusCode"] == 400
        assert body["errorMessage"] == "Invalid ROID format"

    def test_activation_failure_is_retryable(self, hierarchy, api_client, monkeypatch):
        monkeypatch.setattr(AssignmentQuerySet, "activate", lambda self, roid, seid: 0)
        body = _body(api_client.post(f"{BASE}/assignments/MUL01/switch/21112000/"))
        assert body["statusCode"] == 409
        assert body["errorCode"] == "ACTIVATION_FAILED"
        assert body["data"] == {"retryable": True}
        assert Assignment.objects.find_current_active("MUL01").roid == 21111003


@pytest.mark.django_db
class TestContextEndpoints:
    def test_validate_code(self, hierarchy, api_client):
        data = _body(api_client.get(f"{BASE}/context/validate/21110000/"))["data"]
        assert data["valid"]
        assert data["level"] == "TERRITORY"

    def test_validate_code_with_superscript_digit(self, hierarchy, api_client):
        body = _body(api_client.get(f"{BASE}/context/validate/²1000000/"))
        assert body["statusCode"] == 200
        assert not body["data"]["valid"]
        assert body["data"]["error"] == "Code must contain only digits"

    def test_change_and_reset(self, hierarchy, api_client):
        body = _body(api_client.post(
            f"{BASE}/context/GRP21/change/", {"level": "RO", "code": "21111001"}, format="json",
        ))
        assert body["data"]["context"]["current_context"]["code"] == "21111001"

        current = _body(api_client.get(f"{BASE}/context/GRP21/"))["data"]
        assert current["current_context"]["code"] == "21111001"

        reset = _body(api_client.post(f"{BASE}/context/GRP21/reset/"))["data"]
        assert reset["current_context"]["code"] == "21111000"

    def test_change_denied(self, hierarchy, api_client):
        body = _body(api_client.post(
            f"{BASE}/context/GRP21/change/", {"level": "AREA", "code": "21000000"}, format="json",
        ))
        assert body["statusCode"] == 403
        assert body["errorCode"] == "ACCESS_DENIED"

    def test_change_with_unknown_level(self, hierarchy, api_client):
        body = _body(api_client.post(f"{BASE}/context/GRP21/change/", {"level": "REGION"}, format="json"))
        assert body["statusCode"] == 400
        assert body["errorCode"] == "VALIDATION_ERROR"

    def test_organizations(self, hierarchy, api_client):
        listed = _body(api_client.get(f"{BASE}/context/NAT01/organizations/"))["data"]
        assert [org["code"] for org in listed] == ["CF", "AD", "CP", "WI"]

        changed = _body(api_client.post(f"{BASE}/context/NAT01/organizations/", {"org": "AD"}, format="json"))
        assert changed["data"]["context"]["current_org"] == "AD"


@pytest.mark.django_db
class TestHierarchyEndpoints:
    def test_areas(self, hierarchy, api_client):
        data = _body(api_client.get(f"{BASE}/hierarchy/NAT01/areas/"))["data"]
        assert [node["code"] for node in data] == ["21000000", "22000000", "35000000"]

    def test_drill_down(self, hierarchy, api_client):
        territories = _body(api_client.get(f"{BASE}/hierarchy/ARE21/areas/21/territories/"))["data"]
        assert [node["code"] for node in territories] == ["21110000", "21120000"]

        officers = _body(api_client.get(f"{BASE}/hierarchy/GRP21/groups/211110/officers/"))["data"]
        assert len(officers) == 4

    def test_search(self, hierarchy, api_client):
        data = _body(api_client.get(f"{BASE}/hierarchy/NAT01/search/", {"q": "smith"}))["data"]
        assert data[0]["display_name"] == "SMITH, MARY (Revenue Officer)"

    def test_short_search_returns_empty_list(self, hierarchy, api_client):
        assert _body(api_client.get(f"{BASE}/hierarchy/NAT01/search/", {"q": "s"}))["data"] == []


@pytest.mark.django_db
class TestRoleEndpoints:
    def test_catalogs(self, api_client):
        levels = _body(api_client.get(f"{BASE}/roles/levels/"))["data"]
        assert len(levels) == 5
        functions = _body(api_client.get(f"{BASE}/roles/org-functions/"))["data"]
        assert [item["code"] for item in functions] == ["FC", "CCP", "WI"]

    def test_validate_level_value(self, api_client):
        data = _body(api_client.get(f"{BASE}/roles/validate-level-value/", {"level": "AREA", "value": "21"}))["data"]
        assert data["valid"]
        assert data["normalized_value"] == "21000000"

    def test_config(self, hierarchy, api_client):
        data = _body(api_client.get(f"{BASE}/roles/RO001/"))["data"]
        assert data["mode"] == "GENERAL"
        assert data["general_options"]["disabled_reason"] == "You have only one role assigned"

    def test_general_change(self, hierarchy, api_client):
        data = _body(api_client.post(f"{BASE}/roles/MUL01/general-change/", {"roid": "21112000"}, format="json"))["data"]
        assert data["new_access_level"] == 7

    def test_staff_change_validation_errors(self, hierarchy, api_client):
        body = _body(api_client.post(
            f"{BASE}/roles/STF01/staff-change/",
            {"level": "GROUP", "level_value": "21", "org_function": "XX"},
            format="json",
        ))
        assert body["statusCode"] == 400
        assert body["errorCode"] == "VALIDATION_ERROR"
        assert body["errors"] == ["GROUP requires 6 digits", "Invalid Org/Function"]

    def test_staff_change_keeps_default(self, hierarchy, api_client):
        body = _body(api_client.post(
            f"{BASE}/roles/STF01/staff-change/",
            {"level": "group", "level_value": "211110", "keep_as_default": True},
            format="json",
        ))
        assert body["data"]["new_level"] == "GROUP"
        assert body["data"]["default_saved"]

        kept = _body(api_client.get(f"{BASE}/roles/STF01/default/"))["data"]
        assert kept["default"]["level"] == "GROUP"
        assert kept["default"]["level_value"] == "211110"

        cleared = _body(api_client.delete(f"{BASE}/roles/STF01/default/"))["data"]
        assert cleared["cleared"]
