"""Video reactions module.

Provides like/dislike toggles that keep each channel's reaction set and the
video counters consistent without cross-table transactions, plus counter
reconciliation.

Note: Router is not exported here to avoid circular imports.
Import directly from vidshare.reactions.router when needed.
"""

from .models import (
    REACTIONS_TABLES_CQL,
    EngagementCounts,
    ReactionKind,
    ReconciliationReport,
    ToggleAction,
    ToggleResult,
    plan_toggle,
)
from .service import EngagementService


__all__ = [
    "REACTIONS_TABLES_CQL",
    "EngagementCounts",
    "EngagementService",
    "ReactionKind",
    "ReconciliationReport",
    "ToggleAction",
    "ToggleResult",
    "plan_toggle",
]
