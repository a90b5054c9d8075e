"""Result shapes returned by the engine; views serialize them with ``dataclasses.asdict``."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class HierarchyNode:
    code: str
    level: str
    display_name: str
    parent_code: Optional[str] = None
    child_count: int = 0
    access_level_equivalent: Optional[int] = None


@dataclass
class CodeValidation:
    valid: bool
    code: Optional[str] = None
    level: Optional[str] = None
    access_level: Optional[int] = None
    display_name: Optional[str] = None
    child_count: Optional[int] = None
    error: Optional[str] = None


@dataclass
class AccessLevelDefinition:
    access_level: int
    name: str
    description: str
    data_scope: str
    accessible_menus: List[str] = field(default_factory=list)


@dataclass
class MenuItem:
    menu_id: str
    name: str
    description: str
    accessible: bool
    reason: str = ""


@dataclass
class MenuPermissions:
    seid: str
    access_level: int
    access_level_name: str
    is_staff: bool
    menus: List[MenuItem] = field(default_factory=list)
    accessible_menus: List[str] = field(default_factory=list)


@dataclass
class AssignmentView:
    roid: int
    name: str
    title: str
    access_level: Optional[int]
    access_level_name: str
    area_code: Optional[int]
    position_code: Optional[str]
    org: str
    eactive: str
    primary_roid: str
    is_current: bool
    is_staff_assignment: bool


@dataclass
class SwitchResult:
    success: bool
    message: str
    previous_roid: Optional[int]
    new_roid: int
    assignment: AssignmentView
    new_access_level: Optional[int]
    new_access_level_name: str
    available_menus: List[str] = field(default_factory=list)


@dataclass
class DataScope:
    level: str
    code: str
    area_code: Optional[str] = None
    territory_code: Optional[str] = None
    group_code: Optional[str] = None
    org: Optional[str] = None
    description: str = ""


@dataclass
class AccessContext:
    seid: str
    user_name: str
    actual_access_level: int
    actual_access_level_name: str
    current_context: HierarchyNode
    current_org: str
    available_levels: List[str] = field(default_factory=list)
    can_change_access: bool = False


@dataclass
class ChangeAccessResult:
    success: bool
    message: str
    context: AccessContext
    original_access_level: int
    context_access_level: int
    data_scope: DataScope
    available_menus: List[str] = field(default_factory=list)


@dataclass
class Organization:
    code: str
    name: str
    is_current: bool = False


@dataclass
class ChangeAccessVisibility:
    visible: bool
    access_level: int
    available_levels: List[str] = field(default_factory=list)
    reason: str = ""


@dataclass
class StaffInfo:
    seid: str
    is_staff: bool
    staff_roid: Optional[int]
    current_org: str
    available_orgs: List[Organization] = field(default_factory=list)
    has_utilities_access: bool = False
    has_realignment_access: bool = False


@dataclass
class AreaSummary:
    area_code: str
    area_name: str
    territory_count: int = 0


@dataclass
class HierarchyAccess:
    seid: str
    access_level: int
    access_level_name: str
    accessible_area_codes: List[str] = field(default_factory=list)
    accessible_pod_codes: List[str] = field(default_factory=list)
    scope_description: str = ""


@dataclass
class UserProfile:
    seid: str
    name: str
    title: str
    access_level: int
    access_level_name: str
    area_code: Optional[int]
    position_code: Optional[str]
    org: str
    is_staff: bool
    is_locked: bool
    assignment_count: int
    has_multiple_assignments: bool
    current_assignment: Optional[AssignmentView] = None
    assignments: List[AssignmentView] = field(default_factory=list)


@dataclass
class CurrentRole:
    roid: Optional[int]
    name: str
    title: str
    grade: str
    display_text: str
    access_level: Optional[int]
    org: str
    area_code: Optional[str] = None
    position_code: Optional[str] = None


@dataclass
class RoleOption:
    roid: int
    title: str
    grade: str
    display_text: str
    access_level: Optional[int]
    is_current: bool


@dataclass
class GeneralRoleOptions:
    current_role: CurrentRole
    roles: List[RoleOption] = field(default_factory=list)
    can_change_role: bool = False
    disabled_reason: str = ""


@dataclass
class LevelOption:
    level: str
    access_level: int
    required_digits: int
    hint: str


@dataclass
class OrgFunctionOption:
    code: str
    display_name: str
    description: str
    is_current: bool = False


@dataclass
class StaffChangeRequest:
    level: Optional[str] = None
    level_value: Optional[str] = None
    assignment_roid: Optional[str] = None
    org_function: Optional[str] = None
    keep_as_default: bool = False


@dataclass
class StaffRoleOptions:
    current_role: CurrentRole
    levels: List[LevelOption] = field(default_factory=list)
    assignments: List[RoleOption] = field(default_factory=list)
    org_functions: List[OrgFunctionOption] = field(default_factory=list)
    level_value_hint: str = ""
    current_default: Optional[StaffChangeRequest] = None


@dataclass
class ChangeRoleConfig:
    seid: str
    mode: str
    is_staff: bool
    current_role: CurrentRole
    general_options: Optional[GeneralRoleOptions] = None
    staff_options: Optional[StaffRoleOptions] = None


@dataclass
class LevelValueValidation:
    valid: bool
    level: Optional[str]
    normalized_value: Optional[str] = None
    display_name: Optional[str] = None
    error: Optional[str] = None


@dataclass
class ChangeRoleResult:
    success: bool
    message: str
    new_role: CurrentRole
    new_level: Optional[str]
    new_access_level: Optional[int]
    new_org: str
    data_scope: Optional[DataScope] = None
    available_menus: List[str] = field(default_factory=list)
    default_saved: bool = False
