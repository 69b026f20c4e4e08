from __future__ import annotations

import logging
from typing import Any, Dict, List

from src.relay.errors import SplitError

logger = logging.getLogger(__name__)

FIRING = "firing"
RESOLVED = "resolved"
_BUCKETS = (FIRING, RESOLVED)


def _group_shell(payload: Dict[str, Any], status: str) -> Dict[str, Any]:
    # Keeps payload field order; an existing "status" key keeps its position.
    group = {k: v for k, v in payload.items() if k != "alerts"}
    group["status"] = status
    return group


# PUBLIC_INTERFACE
def split_alerts(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Partition an Alertmanager-style payload into per-status groups.

    Every group is a shallow copy of the payload's top-level fields with
    ``status`` set to the bucket name and ``alerts`` holding only the alerts of
    that status, in input order. Alerts whose status is neither "firing" nor
    "resolved" (or that are not objects) are dropped.

    Returns the firing group then the resolved group, each only if non-empty;
    an empty list when neither bucket has alerts.

    Raises SplitError when ``alerts`` is missing or not a list.
    """
    alerts = payload.get("alerts")
    if not isinstance(alerts, list):
        raise SplitError("invalid alerts format")

    buckets: Dict[str, List[Any]] = {name: [] for name in _BUCKETS}
    dropped = 0
    for alert in alerts:
        status = alert.get("status") if isinstance(alert, dict) else None
        if isinstance(status, str) and status in buckets:
            buckets[status].append(alert)
        else:
            dropped += 1

    if dropped:
        logger.debug("Dropped %d alerts without a firing/resolved status", dropped)

    groups: List[Dict[str, Any]] = []
    for name in _BUCKETS:
        if buckets[name]:
            group = _group_shell(payload, name)
            group["alerts"] = buckets[name]
            groups.append(group)
    return groups
