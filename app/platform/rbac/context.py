"""
Access context management
Holds the hierarchy position each user is currently viewing. A context starts
at the user's own position and may be moved to any node at or below the
user's actual access level.
"""

import logging
from typing import List, Optional

from .codec import (
    access_level_to_tier,
    display_name,
    encode_position,
    tier_to_access_level,
    validate,
)
from .constants import (
    CONTEXT_ORGANIZATIONS,
    DEFAULT_ORG,
    NATIONAL_CODE,
    AccessLevel,
    HierarchyTier,
)
from .exceptions import InvalidArgumentError, UnauthorizedError
from .levels import access_level_name, resolve_access_level
from .menus import accessible_menus
from .models import Assignment
from .navigation import child_count
from .session_store import SeidStore
from .types import (
    AccessContext,
    ChangeAccessResult,
    ChangeAccessVisibility,
    CodeValidation,
    DataScope,
    HierarchyNode,
    Organization,
)

logger = logging.getLogger(__name__)

# (highest access level allowed, tier) in coarsest-first order
_LEVEL_THRESHOLDS = (
    (AccessLevel.NATIONAL, HierarchyTier.NATIONAL),
    (AccessLevel.AREA, HierarchyTier.AREA),
    (AccessLevel.TERRITORY, HierarchyTier.TERRITORY),
    (AccessLevel.GROUP_MANAGER, HierarchyTier.GROUP),
)


def available_levels(access_level: int) -> List[str]:
    """Tiers a user may view: their own tier and everything finer. Blocked users get none."""
    if access_level is None or access_level < 0:
        return []
    levels = [tier.value for limit, tier in _LEVEL_THRESHOLDS if access_level <= limit]
    levels.append(HierarchyTier.RO.value)
    return levels


def data_scope(code: str, tier: HierarchyTier, org: Optional[str] = None) -> DataScope:
    scope = DataScope(level=tier.value, code=code, org=org)
    if tier == HierarchyTier.NATIONAL:
        scope.description = "All data nationwide"
        return scope
    scope.area_code = code[:2]
    if tier == HierarchyTier.AREA:
        scope.description = f"All data in Area {code[:2]}"
        return scope
    scope.territory_code = code[:4]
    if tier == HierarchyTier.TERRITORY:
        scope.description = f"All data in Territory {code[:4]}"
        return scope
    scope.group_code = code[:6]
    if tier == HierarchyTier.GROUP:
        scope.description = f"All data in Group {code[:6]}"
        return scope
    scope.description = f"Data for RO {code}"
    return scope


def validate_hierarchy_code(code: Optional[str]) -> CodeValidation:
    """Codec validation plus the number of children under a valid code."""
    result = validate(code)
    if result.valid:
        result.child_count = child_count(result.code, result.level)
    return result


class AccessContextManager:
    """
    Owns every AccessContext. Reads return snapshots; changes are applied
    to the held context in place while holding the seid lock.
    """

    def __init__(self, store: Optional[SeidStore] = None):
        self.store = store or SeidStore()

    # ---------------------------------------------------------------
    # State
    # ---------------------------------------------------------------
    def _build_default(self, seid) -> AccessContext:
        level = resolve_access_level(seid)
        record = Assignment.objects.find_current_active(seid)

        if record is not None:
            tier = access_level_to_tier(record.access_level)
            code = encode_position(record.area_code, record.position_code, tier)
            label = display_name(code, tier)
            user_name = record.name or "Unknown"
            org = record.org or DEFAULT_ORG
        else:
            tier = HierarchyTier.NATIONAL if level == AccessLevel.NATIONAL else HierarchyTier.RO
            code = NATIONAL_CODE
            label = "National" if tier == HierarchyTier.NATIONAL else "Unknown"
            user_name = "Unknown"
            org = DEFAULT_ORG

        levels = available_levels(level)
        logger.debug(f"Built default context for seid={seid} at {tier.value} {code}")
        return AccessContext(
            seid=seid,
            user_name=user_name,
            actual_access_level=level,
            actual_access_level_name=access_level_name(level),
            current_context=HierarchyNode(
                code=code,
                level=tier.value,
                display_name=label,
                child_count=child_count(code, tier) if record is not None or level == 0 else 0,
            ),
            current_org=org,
            available_levels=levels,
            can_change_access=len(levels) > 1,
        )

    def get_context(self, seid) -> AccessContext:
        return self.store.get_or_create(seid, lambda: self._build_default(seid))

    def reset_context(self, seid) -> AccessContext:
        with self.store.locks.hold(seid):
            self.store.pop(seid)
            logger.info(f"Access context reset for seid={seid}")
            return self.get_context(seid)

    # ---------------------------------------------------------------
    # Transitions
    # ---------------------------------------------------------------
    def change_access(self, seid, requested_level, requested_code=None, requested_org=None) -> ChangeAccessResult:
        """
        Move the viewing context to another node.

        Args:
            seid: User identifier
            requested_level: Target tier name (NATIONAL, AREA, TERRITORY, GROUP, RO)
            requested_code: 8-digit code; required for every tier but NATIONAL
            requested_org: Optional organization code

        Raises:
            InvalidArgumentError: Malformed level, code or org
            UnauthorizedError: Target is broader than the user's actual level
        """
        tier = HierarchyTier.parse(requested_level)
        if tier is None:
            raise InvalidArgumentError(f"Invalid level: {requested_level}")

        if tier == HierarchyTier.NATIONAL:
            code = NATIONAL_CODE
        else:
            if not requested_code:
                raise InvalidArgumentError(f"Code is required for {tier.value} level")
            validation = validate(requested_code.strip())
            if not validation.valid:
                raise InvalidArgumentError(validation.error)
            code = validation.code

        org = None
        if requested_org:
            org = requested_org.strip().upper()
            if org not in CONTEXT_ORGANIZATIONS:
                raise InvalidArgumentError(f"Invalid organization code: {requested_org}")

        target_level = tier_to_access_level(tier)
        with self.store.locks.hold(seid):
            actual = self.get_context(seid).actual_access_level
            if actual < 0 or actual > target_level:
                logger.warning(
                    f"seid={seid} with access level {actual} denied context {tier.value} {code}"
                )
                raise UnauthorizedError(
                    "You are not authorized to access this level", error_code="ACCESS_DENIED"
                )
            node = HierarchyNode(
                code=code,
                level=tier.value,
                display_name=display_name(code, tier),
                child_count=child_count(code, tier),
            )

            def apply(context):
                context.current_context = node
                if org:
                    context.current_org = org

            context = self.store.update(seid, apply)

        logger.info(f"seid={seid} changed access context to {tier.value} {code}")
        return ChangeAccessResult(
            success=True,
            message=f"Access changed to {node.display_name}",
            context=context,
            original_access_level=actual,
            context_access_level=target_level,
            data_scope=data_scope(code, tier, context.current_org),
            available_menus=[menu.value for menu in accessible_menus(target_level, is_staff=False)],
        )

    def change_organization(self, seid, org_code) -> ChangeAccessResult:
        org = (org_code or "").strip().upper()
        if org not in CONTEXT_ORGANIZATIONS:
            raise InvalidArgumentError(f"Invalid organization code: {org_code}")

        with self.store.locks.hold(seid):
            current = self.get_context(seid)
            if current.actual_access_level != AccessLevel.NATIONAL:
                logger.warning(f"Organization change refused for seid={seid}")
                raise UnauthorizedError("Only National level users can change organization")

            def apply(context):
                context.current_org = org

            context = self.store.update(seid, apply)

        logger.info(f"seid={seid} changed organization to {org}")
        code = context.current_context.code
        tier = HierarchyTier(context.current_context.level)
        scope = data_scope(code, tier, org)
        if tier == HierarchyTier.NATIONAL:
            scope.description = f"All data for {CONTEXT_ORGANIZATIONS[org]}"
        level = tier_to_access_level(tier)
        return ChangeAccessResult(
            success=True,
            message=f"Organization changed to {CONTEXT_ORGANIZATIONS[org]}",
            context=context,
            original_access_level=context.actual_access_level,
            context_access_level=level,
            data_scope=scope,
            available_menus=[menu.value for menu in accessible_menus(level, is_staff=False)],
        )

    # ---------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------
    def change_access_visibility(self, seid) -> ChangeAccessVisibility:
        context = self.get_context(seid)
        visible = len(context.available_levels) > 1
        return ChangeAccessVisibility(
            visible=visible,
            access_level=context.actual_access_level,
            available_levels=context.available_levels,
            reason="" if visible else "Only one access level is available",
        )

    def organizations(self, seid) -> List[Organization]:
        current = self.get_context(seid).current_org
        return [
            Organization(code=code, name=name, is_current=(code == current))
            for code, name in CONTEXT_ORGANIZATIONS.items()
        ]
