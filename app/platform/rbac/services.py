"""
Process-wide instances of the stateful services.
The assignment switcher, access contexts and staff defaults share one
per-seid lock registry so a seid's context, default and switch serialize together.
"""

from .assignments import AssignmentSwitcher
from .context import AccessContextManager
from .role_change import RoleChangeOrchestrator
from .session_store import SeidLockRegistry, SeidStore

seid_locks = SeidLockRegistry()

assignment_switcher = AssignmentSwitcher(locks=seid_locks)
access_contexts = AccessContextManager(store=SeidStore(seid_locks))
role_changes = RoleChangeOrchestrator(switcher=assignment_switcher, defaults=SeidStore(seid_locks))
