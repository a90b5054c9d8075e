"""
RBAC Models - employee assignment records
The ENTEMP and ENTITYUSER tables are maintained by the personnel system;
this app only reads them and performs the controlled assignment mutations.
"""

from django.db import models
from django.db.models import Case, CharField, Count, IntegerField, Value, When
from django.db.models.functions import Cast, Substr
from django.utils import timezone

from app.core.models.base import TimestampedModel
from .constants import (
    ACTIVE_SESSION,
    ACTIVE_VALID,
    BLOCKED_LEVEL,
    PRIMARY_NO,
    PRIMARY_YES,
    STAFF_ROID_PREFIX,
)


def normalize_seid(seid):
    """Seids are compared trimmed; the source table pads them."""
    return (seid or "").strip()


class AssignmentQuerySet(models.QuerySet):
    """
    Record store operations over assignment rows.
    All seid lookups go through ``normalize_seid``.
    """

    # ---------------------------------------------------------------
    # Lookups
    # ---------------------------------------------------------------
    def valid(self):
        return self.filter(access_level__gt=BLOCKED_LEVEL)

    def for_seid(self, seid):
        return self.filter(seid=normalize_seid(seid))

    def find_by_seid(self, seid):
        return self.for_seid(seid)

    def find_by_roid_and_seid(self, roid, seid):
        return self.for_seid(seid).filter(roid=roid).first()

    def find_current_active(self, seid):
        return (
            self.for_seid(seid)
            .valid()
            .filter(eactive=ACTIVE_SESSION, primary_roid=PRIMARY_YES)
            .first()
        )

    def find_all_valid(self, seid):
        return self.for_seid(seid).valid().order_by("roid")

    def find_by_priority(self, seid):
        """
        Valid rows ordered: active+primary, primary, active, valid, rest.
        Ties fall back to roid order.
        """
        return (
            self.for_seid(seid)
            .valid()
            .annotate(
                priority=Case(
                    When(eactive=ACTIVE_SESSION, primary_roid=PRIMARY_YES, then=Value(1)),
                    When(primary_roid=PRIMARY_YES, then=Value(2)),
                    When(eactive=ACTIVE_SESSION, then=Value(3)),
                    When(eactive=ACTIVE_VALID, then=Value(4)),
                    default=Value(5),
                    output_field=IntegerField(),
                )
            )
            .order_by("priority", "roid")
        )

    def count_valid(self, seid):
        return self.for_seid(seid).valid().count()

    # ---------------------------------------------------------------
    # Mutations
    # ---------------------------------------------------------------
    def reset_all_for_user(self, seid):
        return self.for_seid(seid).valid().update(
            eactive=ACTIVE_VALID, primary_roid=PRIMARY_NO, updated_at=timezone.now()
        )

    def activate(self, roid, seid):
        return self.for_seid(seid).filter(roid=roid).update(
            eactive=ACTIVE_SESSION, primary_roid=PRIMARY_YES, updated_at=timezone.now()
        )

    def update_org(self, roid, org):
        return self.filter(roid=roid).update(org=org, updated_at=timezone.now())

    # ---------------------------------------------------------------
    # Staff
    # ---------------------------------------------------------------
    def staff(self):
        return (
            self.valid()
            .annotate(roid_text=Cast("roid", output_field=CharField()))
            .filter(roid_text__startswith=STAFF_ROID_PREFIX)
        )

    def count_staff_assignments(self, seid):
        return self.staff().filter(seid=normalize_seid(seid)).count()

    def find_staff_assignments(self, seid):
        return self.staff().filter(seid=normalize_seid(seid)).order_by("roid")

    def find_all_staff_users(self):
        return self.staff().order_by("roid")

    # ---------------------------------------------------------------
    # Hierarchy aggregates (read-only)
    # ---------------------------------------------------------------
    def count_distinct_areas(self):
        return (
            self.valid()
            .filter(area_code__isnull=False)
            .aggregate(total=Count("area_code", distinct=True))["total"]
        )

    def area_counts_with_children(self):
        """[(area_code, distinct territory count), ...] ordered by area."""
        rows = (
            self.valid()
            .filter(area_code__isnull=False)
            .values("area_code")
            .annotate(child_count=Count(Substr("position_code", 1, 2), distinct=True))
            .order_by("area_code")
        )
        return [(row["area_code"], row["child_count"]) for row in rows]

    def territory_counts_for_area(self, area_code):
        """[(2-digit territory, distinct group count), ...] ordered by territory."""
        rows = (
            self.valid()
            .filter(area_code=area_code, position_code__isnull=False)
            .annotate(territory=Substr("position_code", 1, 2))
            .values("territory")
            .annotate(child_count=Count(Substr("position_code", 1, 4), distinct=True))
            .order_by("territory")
        )
        return [(row["territory"], row["child_count"]) for row in rows]

    def group_counts_for_territory(self, area_code, territory_digits):
        """[(4-digit group prefix, row count), ...] ordered by group."""
        rows = (
            self.valid()
            .filter(area_code=area_code, position_code__isnull=False)
            .annotate(
                territory=Substr("position_code", 1, 2),
                group=Substr("position_code", 1, 4),
            )
            .filter(territory=territory_digits)
            .values("group")
            .annotate(child_count=Count("roid"))
            .order_by("group")
        )
        return [(row["group"], row["child_count"]) for row in rows]

    def count_territories_in_area(self, area_code):
        return (
            self.valid()
            .filter(area_code=area_code)
            .aggregate(total=Count(Substr("position_code", 1, 2), distinct=True))["total"]
        )

    def count_groups_in_territory(self, area_code, territory_digits):
        return (
            self.valid()
            .filter(area_code=area_code)
            .annotate(territory=Substr("position_code", 1, 2))
            .filter(territory=territory_digits)
            .aggregate(total=Count(Substr("position_code", 1, 4), distinct=True))["total"]
        )

    def count_ros_in_group(self, area_code, group_prefix):
        return (
            self.valid()
            .filter(area_code=area_code)
            .annotate(group=Substr("position_code", 1, 4))
            .filter(group=group_prefix)
            .count()
        )

    def find_by_area_and_position_prefix(self, area_code, prefix):
        return self.valid().filter(area_code=area_code, position_code__startswith=prefix)

    def find_by_area(self, area_code):
        return self.valid().filter(area_code=area_code)

    def distinct_position_codes_for_area(self, area_code):
        return list(
            self.valid()
            .filter(area_code=area_code, position_code__isnull=False)
            .order_by("position_code")
            .values_list("position_code", flat=True)
            .distinct()
        )

    def search_by_name_contains(self, term):
        return self.valid().filter(name__icontains=term).order_by("name", "roid")


class Assignment(TimestampedModel):
    """
    One row per employee x position ever granted (ENTEMP).
    The current assignment of a seid is the single row with eactive='A' and primary='Y'.
    """

    EACTIVE_CHOICES = [
        (ACTIVE_SESSION, "Active (session)"),
        (ACTIVE_VALID, "Valid"),
        ("N", "Inactive"),
    ]
    PRIMARY_CHOICES = [
        (PRIMARY_YES, "Primary"),
        (PRIMARY_NO, "Not primary"),
    ]

    roid = models.BigIntegerField(primary_key=True, help_text="8-digit position id")
    seid = models.CharField(max_length=5, db_index=True)
    name = models.CharField(max_length=100, blank=True)
    title = models.CharField(max_length=100, blank=True)
    grade = models.IntegerField(null=True, blank=True)

    area_code = models.IntegerField(null=True, blank=True, db_column="areacd")
    position_code = models.CharField(
        max_length=6,
        null=True,
        blank=True,
        db_column="podcd",
        help_text="Territory, group and officer digits (TTGGRR)",
    )
    org = models.CharField(max_length=3, blank=True, default="")

    eactive = models.CharField(max_length=1, choices=EACTIVE_CHOICES, default=ACTIVE_VALID)
    primary_roid = models.CharField(max_length=1, choices=PRIMARY_CHOICES, default=PRIMARY_NO)
    access_level = models.IntegerField(null=True, blank=True, db_column="elevel")

    objects = AssignmentQuerySet.as_manager()

    class Meta:
        db_table = "entemp"
        ordering = ["roid"]
        indexes = [
            models.Index(fields=["seid", "eactive", "primary_roid"], name="entemp_seid_current_idx"),
            models.Index(fields=["area_code", "position_code"], name="entemp_area_pod_idx"),
        ]

    def save(self, *args, **kwargs):
        self.seid = normalize_seid(self.seid)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.roid} {self.name} ({self.seid})"

    @property
    def is_current(self):
        return self.eactive == ACTIVE_SESSION and self.primary_roid == PRIMARY_YES

    @property
    def is_valid_assignment(self):
        return self.access_level is not None and self.access_level > BLOCKED_LEVEL

    @property
    def is_staff_assignment(self):
        return str(self.roid).startswith(STAFF_ROID_PREFIX)


class EntityUser(models.Model):
    """
    Per-user flags from ENTITYUSER.
    ``is_staff_flag`` is unreliable and kept only to mirror the table; staff
    status always comes from the assignment roid.
    """

    user_seid = models.CharField(max_length=5, primary_key=True)
    is_locked = models.BooleanField(default=False)
    is_staff_flag = models.BooleanField(default=False)

    class Meta:
        db_table = "entityuser"
        ordering = ["user_seid"]

    def __str__(self):
        return self.user_seid
