"""Shared fixtures: the demo hierarchy, a row factory and clean per-seid state."""
from io import StringIO

import pytest
from django.core.management import call_command
from rest_framework.test import APIClient

from app.platform.rbac import services
from app.platform.rbac.constants import ACTIVE_SESSION, ACTIVE_VALID, PRIMARY_NO, PRIMARY_YES
from app.platform.rbac.models import Assignment


@pytest.fixture(autouse=True)
def clean_session_state():
    """Contexts and kept defaults live in process memory; drop them between tests."""
    services.access_contexts.store._values.clear()
    services.role_changes.defaults._values.clear()
    yield
    services.access_contexts.store._values.clear()
    services.role_changes.defaults._values.clear()


@pytest.fixture
def hierarchy(db):
    """
    Demo rows loaded by ``seed_assignments``:

    NAT01 national, ARE21 area 21, TER21 territory 2111, GRP21 group 211110,
    RO001/RO002 officers in group 211110, RO003 in territory 2112, RO004 in area 22,
    MUL01 two assignments (RO current, acting GM not current), STF01 staff, BLK01 blocked.
    """
    call_command("seed_assignments", stdout=StringIO())
    return Assignment.objects.all()


@pytest.fixture
def make_assignment(db):
    def factory(roid, seid, level=8, area=21, pod="111001", current=True, **extra):
        values = {
            "name": "TEST, USER",
            "title": "Revenue Officer",
            "grade": 12,
            "org": "CF",
            "access_level": level,
            "area_code": area,
            "position_code": pod,
            "eactive": ACTIVE_SESSION if current else ACTIVE_VALID,
            "primary_roid": PRIMARY_YES if current else PRIMARY_NO,
        }
        values.update(extra)
        return Assignment.objects.create(roid=roid, seid=seid, **values)
    return factory


@pytest.fixture
def api_client():
    return APIClient()
