# app/platform/rbac/views.py

import logging
from dataclasses import asdict, is_dataclass

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.serializers import ValidationError as SerializerValidationError
from drf_spectacular.utils import OpenApiParameter, extend_schema

from app.platform.rbac import navigation, profiles, scope, staff
from app.platform.rbac.context import validate_hierarchy_code
from app.platform.rbac.exceptions import RbacError
from app.platform.rbac.levels import (
    access_level_data_scope,
    access_level_definitions,
    access_level_description,
    access_level_name,
    is_valid_access_level,
    resolve_access_level,
)
from app.platform.rbac.menus import accessible_menus
from app.platform.rbac.role_change import (
    level_options,
    org_function_options,
    validate_level_value,
)
from app.platform.rbac.serializers import (
    AssignmentListSerializer,
    ChangeAccessRequestSerializer,
    ChangeOrganizationRequestSerializer,
    GeneralChangeRoleRequestSerializer,
    HierarchyNodeSerializer,
    LevelOptionSerializer,
    OrgFunctionSerializer,
    StaffChangeRoleRequestSerializer,
    StaffOrgRequestSerializer,
)
from app.platform.rbac.services import access_contexts, assignment_switcher, role_changes
from app.utils.exception_handler import format_validation_error
from app.utils.response import api_response, error_response

logger = logging.getLogger(__name__)


def _plain(value):
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


class RbacViewSet(viewsets.ViewSet):
    """Shared plumbing: seid lookups and the api_response envelope."""

    permission_classes = [permissions.AllowAny]
    lookup_field = "seid"
    lookup_value_regex = r"[^/.]+"

    def _ok(self, data):
        return api_response(status.HTTP_200_OK, "success", _plain(data))

    # -------------------------------------------------------
    def _handle_exception(self, exc, where=""):
        if isinstance(exc, RbacError):
            logger.warning(f"{where}: {exc.error_code} {exc.message}")
            return error_response(exc)

        if isinstance(exc, (ValidationError, SerializerValidationError)):
            logger.warning(f"{where}: {exc}")
            return api_response(
                status_code=status.HTTP_400_BAD_REQUEST,
                status="failure",
                data={},
                error_code="VALIDATION_ERROR",
                error_message=format_validation_error(exc.detail),
            )

        logger.exception(f"{where}: {exc}")
        return api_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            status="failure",
            data={},
            error_code="INTERNAL_ERROR",
            error_message="An unexpected error occurred. Please try again later.",
        )


# =======================================================
# USERS: profile, access level, menus, staff, scope
# =======================================================
@extend_schema(tags=["Access Levels"])
class UserAccessViewSet(RbacViewSet):

    @extend_schema(summary="List every access level definition")
    @action(detail=False, methods=["get"], url_path="access-levels")
    def access_levels(self, request):
        return self._ok(access_level_definitions())

    @extend_schema(summary="Organizations a staff user may be placed under")
    @action(detail=False, methods=["get"], url_path="staff-orgs")
    def staff_orgs(self, request):
        return self._ok(staff.available_staff_orgs())

    @extend_schema(summary="User profile")
    def retrieve(self, request, seid=None):
        try:
            return self._ok(profiles.user_profile(seid))
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.retrieve")

    @extend_schema(summary="Effective access level")
    @action(detail=True, methods=["get"], url_path="access-level")
    def access_level(self, request, seid=None):
        try:
            level = resolve_access_level(seid)
            return self._ok({
                "seid": seid,
                "access_level": level,
                "access_level_name": access_level_name(level),
                "description": access_level_description(level),
                "data_scope": access_level_data_scope(level),
                "is_valid": is_valid_access_level(level),
            })
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.access_level")

    @extend_schema(summary="Full menu permission matrix for the user")
    @action(detail=True, methods=["get"], url_path="menu-permissions")
    def menu_permissions(self, request, seid=None):
        try:
            return self._ok(profiles.menu_permissions(seid))
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.menu_permissions")

    @extend_schema(summary="Menus the user can open")
    @action(detail=True, methods=["get"], url_path="accessible-menus")
    def menus(self, request, seid=None):
        try:
            level = resolve_access_level(seid)
            menus = accessible_menus(level, staff.is_staff(seid))
            return self._ok({"seid": seid, "menus": [menu.value for menu in menus]})
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.menus")

    @extend_schema(summary="Staff summary")
    @action(detail=True, methods=["get"], url_path="staff")
    def staff_info(self, request, seid=None):
        try:
            return self._ok(staff.staff_info(seid))
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.staff_info")

    @extend_schema(summary="Is the user staff")
    @action(detail=True, methods=["get"], url_path="is-staff")
    def is_staff(self, request, seid=None):
        try:
            return self._ok({"seid": seid, "is_staff": staff.is_staff(seid)})
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.is_staff")

    @extend_schema(summary="Move the user's staff assignments to another organization", request=StaffOrgRequestSerializer)
    @action(detail=True, methods=["post"], url_path="staff-org")
    def staff_org(self, request, seid=None):
        try:
            serializer = StaffOrgRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            return self._ok(staff.update_staff_org(seid, serializer.validated_data["org"]))
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.staff_org")

    @extend_schema(summary="Areas and pods reachable from the user's position")
    @action(detail=True, methods=["get"], url_path="hierarchy-access")
    def hierarchy_access(self, request, seid=None):
        try:
            return self._ok(scope.hierarchy_access(seid))
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.hierarchy_access")

    @extend_schema(summary="Areas the user can access")
    @action(detail=True, methods=["get"], url_path="accessible-areas")
    def accessible_areas(self, request, seid=None):
        try:
            return self._ok(scope.accessible_areas(seid))
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.accessible_areas")

    @extend_schema(summary="Can the user access an area")
    @action(detail=True, methods=["get"], url_path=r"areas/(?P<area_code>[0-9]{1,2})/access")
    def area_access(self, request, seid=None, area_code=None):
        try:
            return self._ok({
                "seid": seid,
                "area_code": area_code,
                "can_access": scope.can_access_area(seid, area_code),
            })
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.area_access")

    @extend_schema(summary="Can the user access a pod")
    @action(detail=True, methods=["get"], url_path=r"pods/(?P<pod_code>[0-9]{1,6})/access")
    def pod_access(self, request, seid=None, pod_code=None):
        try:
            return self._ok({
                "seid": seid,
                "pod_code": pod_code,
                "can_access": scope.can_access_pod(seid, pod_code),
            })
        except Exception as exc:
            return self._handle_exception(exc, "UserAccessViewSet.pod_access")


# =======================================================
# ASSIGNMENTS
# =======================================================
@extend_schema(tags=["Assignments"])
class AssignmentViewSet(RbacViewSet):

    @extend_schema(summary="All valid assignments of the user", responses={200: AssignmentListSerializer})
    def retrieve(self, request, seid=None):
        try:
            assignments = assignment_switcher.list_assignments(seid)
            payload = AssignmentListSerializer({
                "seid": seid,
                "count": len(assignments),
                "has_multiple": len(assignments) > 1,
                "assignments": assignments,
            })
            return self._ok(payload.data)
        except Exception as exc:
            return self._handle_exception(exc, "AssignmentViewSet.retrieve")

    @extend_schema(summary="Current assignment")
    @action(detail=True, methods=["get"], url_path="current")
    def current(self, request, seid=None):
        try:
            return self._ok({"seid": seid, "assignment": assignment_switcher.current_assignment(seid)})
        except Exception as exc:
            return self._handle_exception(exc, "AssignmentViewSet.current")

    @extend_schema(summary="Does the user hold more than one valid assignment")
    @action(detail=True, methods=["get"], url_path="has-multiple")
    def has_multiple(self, request, seid=None):
        try:
            count = assignment_switcher.assignment_count(seid)
            return self._ok({"seid": seid, "count": count, "has_multiple": count > 1})
        except Exception as exc:
            return self._handle_exception(exc, "AssignmentViewSet.has_multiple")

    @extend_schema(summary="Make another assignment current", request=None)
    @action(detail=True, methods=["post"], url_path=r"switch/(?P<roid>[^/.]+)")
    def switch(self, request, seid=None, roid=None):
        try:
            return self._ok(assignment_switcher.switch_to(seid, roid))
        except Exception as exc:
            return self._handle_exception(exc, "AssignmentViewSet.switch")


# =======================================================
# ACCESS CONTEXT
# =======================================================
@extend_schema(tags=["Change Access"])
class AccessContextViewSet(RbacViewSet):

    @extend_schema(
        summary="Validate an 8-digit hierarchy code",
        parameters=[OpenApiParameter("code", str, OpenApiParameter.PATH)],
    )
    @action(detail=False, methods=["get"], url_path=r"validate/(?P<code>[^/.]+)")
    def validate_code(self, request, code=None):
        try:
            return self._ok(validate_hierarchy_code(code))
        except Exception as exc:
            return self._handle_exception(exc, "AccessContextViewSet.validate_code")

    @extend_schema(summary="Current access context")
    def retrieve(self, request, seid=None):
        try:
            return self._ok(access_contexts.get_context(seid))
        except Exception as exc:
            return self._handle_exception(exc, "AccessContextViewSet.retrieve")

    @extend_schema(summary="Change the viewing context", request=ChangeAccessRequestSerializer)
    @action(detail=True, methods=["post"], url_path="change")
    def change(self, request, seid=None):
        try:
            serializer = ChangeAccessRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data
            result = access_contexts.change_access(seid, data["level"], data.get("code"), data.get("org"))
            return self._ok(result)
        except Exception as exc:
            return self._handle_exception(exc, "AccessContextViewSet.change")

    @extend_schema(summary="Return to the user's own position", request=None)
    @action(detail=True, methods=["post"], url_path="reset")
    def reset(self, request, seid=None):
        try:
            return self._ok(access_contexts.reset_context(seid))
        except Exception as exc:
            return self._handle_exception(exc, "AccessContextViewSet.reset")

    @extend_schema(summary="Should the Change Access menu be shown")
    @action(detail=True, methods=["get"], url_path="visibility")
    def visibility(self, request, seid=None):
        try:
            return self._ok(access_contexts.change_access_visibility(seid))
        except Exception as exc:
            return self._handle_exception(exc, "AccessContextViewSet.visibility")

    @extend_schema(summary="Organizations selectable from the context", request=ChangeOrganizationRequestSerializer)
    @action(detail=True, methods=["get", "post"], url_path="organizations")
    def organizations(self, request, seid=None):
        try:
            if request.method == "POST":
                serializer = ChangeOrganizationRequestSerializer(data=request.data)
                serializer.is_valid(raise_exception=True)
                return self._ok(access_contexts.change_organization(seid, serializer.validated_data["org"]))
            return self._ok(access_contexts.organizations(seid))
        except Exception as exc:
            return self._handle_exception(exc, "AccessContextViewSet.organizations")


# =======================================================
# HIERARCHY NAVIGATION
# =======================================================
@extend_schema(tags=["Hierarchy"])
class HierarchyViewSet(RbacViewSet):

    @extend_schema(summary="Areas", responses={200: HierarchyNodeSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="areas")
    def areas(self, request, seid=None):
        try:
            return self._ok(navigation.list_areas(seid))
        except Exception as exc:
            return self._handle_exception(exc, "HierarchyViewSet.areas")

    @extend_schema(summary="Territories of an area", responses={200: HierarchyNodeSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path=r"areas/(?P<area_code>[0-9]+)/territories")
    def territories(self, request, seid=None, area_code=None):
        try:
            return self._ok(navigation.list_territories(seid, area_code))
        except Exception as exc:
            return self._handle_exception(exc, "HierarchyViewSet.territories")

    @extend_schema(summary="Groups of a territory", responses={200: HierarchyNodeSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path=r"territories/(?P<territory_code>[0-9]+)/groups")
    def groups(self, request, seid=None, territory_code=None):
        try:
            return self._ok(navigation.list_groups(seid, territory_code))
        except Exception as exc:
            return self._handle_exception(exc, "HierarchyViewSet.groups")

    @extend_schema(summary="Revenue officers of a group", responses={200: HierarchyNodeSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path=r"groups/(?P<group_code>[0-9]+)/officers")
    def officers(self, request, seid=None, group_code=None):
        try:
            return self._ok(navigation.list_revenue_officers(seid, group_code))
        except Exception as exc:
            return self._handle_exception(exc, "HierarchyViewSet.officers")

    @extend_schema(
        summary="Search employees by name",
        parameters=[OpenApiParameter("q", str, OpenApiParameter.QUERY)],
        responses={200: HierarchyNodeSerializer(many=True)},
    )
    @action(detail=True, methods=["get"], url_path="search")
    def search(self, request, seid=None):
        try:
            return self._ok(navigation.search(seid, request.query_params.get("q")))
        except Exception as exc:
            return self._handle_exception(exc, "HierarchyViewSet.search")


# =======================================================
# CHANGE ROLE
# =======================================================
@extend_schema(tags=["Change Role"])
class RoleChangeViewSet(RbacViewSet):

    @extend_schema(summary="Staff level options", responses={200: LevelOptionSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="levels")
    def levels(self, request):
        return self._ok(level_options())

    @extend_schema(summary="Org/function catalog", responses={200: OrgFunctionSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="org-functions")
    def org_functions(self, request):
        return self._ok(org_function_options())

    @extend_schema(
        summary="Validate a staff level value",
        parameters=[
            OpenApiParameter("level", str, OpenApiParameter.QUERY),
            OpenApiParameter("value", str, OpenApiParameter.QUERY),
        ],
    )
    @action(detail=False, methods=["get"], url_path="validate-level-value")
    def validate_value(self, request):
        return self._ok(validate_level_value(
            request.query_params.get("level"), request.query_params.get("value"),
        ))

    @extend_schema(summary="Change Role screen configuration")
    def retrieve(self, request, seid=None):
        try:
            return self._ok(role_changes.change_role_config(seid))
        except Exception as exc:
            return self._handle_exception(exc, "RoleChangeViewSet.retrieve")

    @extend_schema(summary="Current role")
    @action(detail=True, methods=["get"], url_path="current")
    def current(self, request, seid=None):
        try:
            return self._ok(role_changes.current_role(seid))
        except Exception as exc:
            return self._handle_exception(exc, "RoleChangeViewSet.current")

    @extend_schema(summary="General user role options")
    @action(detail=True, methods=["get"], url_path="general-options")
    def general_options(self, request, seid=None):
        try:
            return self._ok(role_changes.general_options(seid))
        except Exception as exc:
            return self._handle_exception(exc, "RoleChangeViewSet.general_options")

    @extend_schema(summary="Change role (general user)", request=GeneralChangeRoleRequestSerializer)
    @action(detail=True, methods=["post"], url_path="general-change")
    def general_change(self, request, seid=None):
        try:
            serializer = GeneralChangeRoleRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            return self._ok(role_changes.change_role_general(seid, serializer.validated_data["roid"]))
        except Exception as exc:
            return self._handle_exception(exc, "RoleChangeViewSet.general_change")

    @extend_schema(summary="Staff user role options")
    @action(detail=True, methods=["get"], url_path="staff-options")
    def staff_options(self, request, seid=None):
        try:
            return self._ok(role_changes.staff_options(seid))
        except Exception as exc:
            return self._handle_exception(exc, "RoleChangeViewSet.staff_options")

    @extend_schema(summary="Change role (staff user)", request=StaffChangeRoleRequestSerializer)
    @action(detail=True, methods=["post"], url_path="staff-change")
    def staff_change(self, request, seid=None):
        try:
            serializer = StaffChangeRoleRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            return self._ok(role_changes.change_role_staff(seid, serializer.to_request()))
        except Exception as exc:
            return self._handle_exception(exc, "RoleChangeViewSet.staff_change")

    @extend_schema(summary="Read or clear the kept default selection", request=None)
    @action(detail=True, methods=["get", "delete"], url_path="default")
    def default(self, request, seid=None):
        try:
            if request.method == "DELETE":
                return self._ok({"seid": seid, "cleared": role_changes.clear_user_default(seid)})
            return self._ok({"seid": seid, "default": role_changes.user_default(seid)})
        except Exception as exc:
            return self._handle_exception(exc, "RoleChangeViewSet.default")
