# app/platform/rbac/serializers.py

from rest_framework import serializers

from app.platform.rbac.constants import (
    ORG_FUNCTIONS,
    HierarchyTier,
    StaffLevel,
)
from app.platform.rbac.types import StaffChangeRequest


# =======================================================
# ASSIGNMENT (read only)
# =======================================================
class AssignmentViewSerializer(serializers.Serializer):
    roid = serializers.IntegerField()
    name = serializers.CharField()
    title = serializers.CharField()
    access_level = serializers.IntegerField(allow_null=True)
    access_level_name = serializers.CharField()
    area_code = serializers.IntegerField(allow_null=True)
    position_code = serializers.CharField(allow_null=True)
    org = serializers.CharField()
    eactive = serializers.CharField()
    primary_roid = serializers.CharField()
    is_current = serializers.BooleanField()
    is_staff_assignment = serializers.BooleanField()


class AssignmentListSerializer(serializers.Serializer):
    seid = serializers.CharField()
    count = serializers.IntegerField()
    has_multiple = serializers.BooleanField()
    assignments = AssignmentViewSerializer(many=True)


# =======================================================
# CHANGE ACCESS
# =======================================================
class ChangeAccessRequestSerializer(serializers.Serializer):
    level = serializers.ChoiceField(choices=[tier.value for tier in HierarchyTier])
    code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=8)
    org = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=3)

    def validate_level(self, value):
        return value.strip().upper()


class ChangeOrganizationRequestSerializer(serializers.Serializer):
    org = serializers.CharField(max_length=3)


# =======================================================
# CHANGE ROLE
# =======================================================
class GeneralChangeRoleRequestSerializer(serializers.Serializer):
    roid = serializers.CharField(max_length=12)


class StaffChangeRoleRequestSerializer(serializers.Serializer):
    """
    Field-level checks are left to the orchestrator so every problem is
    reported together; this serializer only shapes the payload.
    """

    level = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    level_value = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    assignment_roid = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    org_function = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    keep_as_default = serializers.BooleanField(required=False, default=False)

    def to_request(self) -> StaffChangeRequest:
        data = self.validated_data
        return StaffChangeRequest(
            level=(data.get("level") or "").strip().upper() or None,
            level_value=(data.get("level_value") or "").strip() or None,
            assignment_roid=(data.get("assignment_roid") or "").strip() or None,
            org_function=(data.get("org_function") or "").strip().upper() or None,
            keep_as_default=data.get("keep_as_default", False),
        )


class StaffOrgRequestSerializer(serializers.Serializer):
    org = serializers.CharField(max_length=3)


# =======================================================
# DOCUMENTATION SHAPES
# =======================================================
class LevelOptionSerializer(serializers.Serializer):
    level = serializers.ChoiceField(choices=[level.value for level in StaffLevel])
    access_level = serializers.IntegerField()
    required_digits = serializers.IntegerField()
    hint = serializers.CharField()


class OrgFunctionSerializer(serializers.Serializer):
    code = serializers.ChoiceField(choices=list(ORG_FUNCTIONS))
    display_name = serializers.CharField()
    description = serializers.CharField()
    is_current = serializers.BooleanField()


class HierarchyNodeSerializer(serializers.Serializer):
    code = serializers.CharField()
    level = serializers.ChoiceField(choices=[tier.value for tier in HierarchyTier])
    display_name = serializers.CharField()
    parent_code = serializers.CharField(allow_null=True)
    child_count = serializers.IntegerField()
    access_level_equivalent = serializers.IntegerField(allow_null=True)
