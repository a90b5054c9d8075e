from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    AccessContextViewSet,
    AssignmentViewSet,
    HierarchyViewSet,
    RoleChangeViewSet,
    UserAccessViewSet,
)

router = DefaultRouter()
router.register(r"rbac/users", UserAccessViewSet, basename="rbac-users")
router.register(r"rbac/assignments", AssignmentViewSet, basename="rbac-assignments")
router.register(r"rbac/context", AccessContextViewSet, basename="rbac-context")
router.register(r"rbac/hierarchy", HierarchyViewSet, basename="rbac-hierarchy")
router.register(r"rbac/roles", RoleChangeViewSet, basename="rbac-roles")

urlpatterns = [
    path("", include(router.urls)),
]
