from __future__ import annotations

import uuid
from collections import deque
from datetime import datetime, timezone
from typing import Any

from app.context import get_correlation_id


# Process-local trail of dealership scope decisions and tree writes. Bounded so a
# long-running worker does not grow without limit.
AUDIT_MAX_ENTRIES = 10_000

audit_entries: deque[dict[str, Any]] = deque(maxlen=AUDIT_MAX_ENTRIES)


def record(
    *,
    actor_dealership_id: str,
    entity_type: str,
    entity_id: str,
    action: str,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
    correlation_id: str | None = None,
) -> dict[str, Any]:
    entry = {
        "id": str(uuid.uuid4()),
        "actor_dealership_id": actor_dealership_id,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "action": action,
        "before": before,
        "after": after,
        "correlation_id": correlation_id or get_correlation_id(),
        "occurred_at": datetime.now(timezone.utc).isoformat(),
    }
    audit_entries.append(entry)
    return entry


def find_entries(*, action: str | None = None, entity_type: str | None = None) -> list[dict[str, Any]]:
    """Return recorded entries, oldest first, optionally narrowed by action and entity type."""

    return [
        entry
        for entry in audit_entries
        if (action is None or entry["action"] == action)
        and (entity_type is None or entry["entity_type"] == entity_type)
    ]
