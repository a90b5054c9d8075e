"""
Management command to load a small demo hierarchy of assignment rows.
Run: python manage.py seed_assignments
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from app.platform.rbac.constants import ACTIVE_SESSION, ACTIVE_VALID, PRIMARY_NO, PRIMARY_YES, AccessLevel
from app.platform.rbac.models import Assignment, EntityUser


# (roid, seid, name, title, grade, area, pod, org, level, current)
DEMO_ASSIGNMENTS = [
    (21000000, "NAT01", "RIVERA, ANA", "Director Collection", 15, None, None, "CF", AccessLevel.NATIONAL, True),
    (21100000, "ARE21", "CHEN, DAVID", "Area Director", 14, 21, None, "CF", AccessLevel.AREA, True),
    (21110000, "TER21", "OKAFOR, GRACE", "Territory Manager", 14, 21, "110000", "CF", AccessLevel.TERRITORY, True),
    (21111000, "GRP21", "MILLER, JOHN", "Group Manager", 13, 21, "111000", "CF", AccessLevel.GROUP_MANAGER, True),
    (21111001, "RO001", "SMITH, MARY", "Revenue Officer", 12, 21, "111001", "CF", AccessLevel.EMPLOYEE, True),
    (21111002, "RO002", "JONES, PAUL", "Revenue Officer", 12, 21, "111002", "CF", AccessLevel.EMPLOYEE, True),
    (21121001, "RO003", "GARCIA, LUIS", "Revenue Officer", 11, 21, "121001", "CF", AccessLevel.EMPLOYEE, True),
    (22131001, "RO004", "BROWN, KIM", "Revenue Officer", 12, 22, "131001", "CF", AccessLevel.EMPLOYEE, True),
    # Multiple assignments for one employee
    (21111003, "MUL01", "DAVIS, ERIN", "Revenue Officer", 12, 21, "111003", "CF", AccessLevel.EMPLOYEE, True),
    (21112000, "MUL01", "DAVIS, ERIN", "Acting Group Manager", 13, 21, "112000", "CF", AccessLevel.ACTING_GROUP_MANAGER, False),
    # Staff assignments
    (85906201, "STF01", "NGUYEN, TOM", "Program Analyst", 13, 35, "510001", "CF", AccessLevel.EMPLOYEE, True),
    (85906202, "STF01", "NGUYEN, TOM", "Program Analyst", 13, 35, "510002", "CF", AccessLevel.EMPLOYEE, False),
    # Blocked
    (21111009, "BLK01", "WHITE, SAM", "Revenue Officer", 12, 21, "111009", "CF", AccessLevel.BLOCKED, False),
]

DEMO_LOCKED_USERS = ["BLK01"]


class Command(BaseCommand):
    help = 'Load a demo hierarchy of assignment rows (areas, territories, groups, officers and staff)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Overwrite demo rows that already exist',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        force = options['force']

        self.stdout.write(self.style.SUCCESS('Seeding assignment rows...'))
        created_count = 0
        updated_count = 0
        for roid, seid, name, title, grade, area, pod, org, level, current in DEMO_ASSIGNMENTS:
            values = {
                'seid': seid,
                'name': name,
                'title': title,
                'grade': grade,
                'area_code': area,
                'position_code': pod,
                'org': org,
                'access_level': int(level),
                'eactive': ACTIVE_SESSION if current else ACTIVE_VALID,
                'primary_roid': PRIMARY_YES if current else PRIMARY_NO,
            }
            if force:
                _, created = Assignment.objects.update_or_create(roid=roid, defaults=values)
            else:
                _, created = Assignment.objects.get_or_create(roid=roid, defaults=values)
            if created:
                created_count += 1
                self.stdout.write(f'  Created assignment: {roid} {name}')
            elif force:
                updated_count += 1
                self.stdout.write(f'  Updated assignment: {roid} {name}')

        seids = sorted({row[1] for row in DEMO_ASSIGNMENTS})
        for seid in seids:
            EntityUser.objects.update_or_create(
                user_seid=seid,
                defaults={'is_locked': seid in DEMO_LOCKED_USERS},
            )

        self.stdout.write(self.style.SUCCESS(
            f'Done: {created_count} created, {updated_count} updated, {len(seids)} users'
        ))
