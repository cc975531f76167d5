# utils/delta.py
# Pure job lifecycle planner: which stored rows get inserted / refreshed / reactivated / removed.
from typing import Dict, Iterable, List

ACTIVE = "active"
REMOVED = "removed"
HIDDEN = "hidden"
FILLED = "filled"
EXPIRED = "expired"
JOB_STATUSES = (ACTIVE, REMOVED, HIDDEN, FILLED, EXPIRED)


def plan_reconciliation(
    stored: Dict[str, str],
    fetched_ids: Iterable[str],
    reactivate_only_removed: bool = False,
) -> Dict[str, List[str]]:
    """
    stored: {external_id: status} for every row the source already owns
    fetched_ids: external ids seen in this run (order kept, duplicates ignored)

    Returns external ids bucketed as:
      added       - never seen before
      updated     - active and seen again
      reactivated - non-active, non-hidden and seen again
      touched     - seen again but sticky (hidden, or filled/expired when gated)
      removed     - active but missing from this run
    """
    plan: Dict[str, List[str]] = {
        "added": [], "updated": [], "reactivated": [], "touched": [], "removed": [],
    }
    seen = set()
    for ext in fetched_ids:
        if ext in seen:
            continue
        seen.add(ext)
        status = stored.get(ext)
        if status is None:
            plan["added"].append(ext)
        elif status == HIDDEN:
            plan["touched"].append(ext)
        elif status == ACTIVE:
            plan["updated"].append(ext)
        elif reactivate_only_removed and status != REMOVED:
            plan["touched"].append(ext)
        else:
            plan["reactivated"].append(ext)

    plan["removed"] = [ext for ext, status in stored.items() if status == ACTIVE and ext not in seen]
    return plan


__all__ = ["plan_reconciliation", "JOB_STATUSES", "ACTIVE", "REMOVED", "HIDDEN", "FILLED", "EXPIRED"]
