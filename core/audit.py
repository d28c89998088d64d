"""
Change history for invoices.

Every mutation the store applies is recorded here: a bounded in-memory
buffer of recent changes, mirrored to the `invoice.audit` logger so
it ends up wherever the application's logs go.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from utils.timezone import now_utc

audit_logger = logging.getLogger("invoice.audit")


class AuditAction(Enum):
    """Type of change made to an entity."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class AuditEntry:
    """One recorded change."""

    entity_type: str
    entity_id: str
    action: AuditAction
    changes: dict[str, Any]
    created_at: datetime = field(default_factory=now_utc)


def compute_changes(
    old: dict[str, Any],
    new: dict[str, Any],
    exclude_fields: set[str] | None = None
) -> dict[str, dict[str, Any]]:
    """
    Compute changes between two entity states.

    Args:
        old: Previous state of entity
        new: New state of entity
        exclude_fields: Fields to ignore

    Returns:
        Dict of {field: {"old": old_val, "new": new_val}} for changed fields.
        Empty dict if no changes.
    """
    exclude = exclude_fields or set()
    changes = {}

    for key in sorted(set(old) | set(new)):
        if key in exclude:
            continue

        old_val = old.get(key)
        new_val = new.get(key)
        if old_val != new_val:
            changes[key] = {"old": old_val, "new": new_val}

    return changes


class AuditLogger:
    """
    Change log holding the most recent `max_entries` changes.

    Older entries fall off the in-memory buffer but remain in the
    `invoice.audit` log. Pass JSON-mode dumps (model.model_dump(mode="json"))
    as changes so entries stay serializable.

    Usage:
        audit = AuditLogger(max_entries=500)
        audit.log_change("invoice", invoice.id, AuditAction.CREATE,
                         {"created": invoice.model_dump(mode="json")})
        history = audit.get_entity_history("invoice", invoice.id)
    """

    def __init__(self, max_entries: int = 500):
        self._entries: deque[AuditEntry] = deque(maxlen=max_entries)

    def log_change(
        self,
        entity_type: str,
        entity_id: str,
        action: AuditAction,
        changes: dict[str, Any],
    ) -> AuditEntry:
        """
        Record an entity change.

        Changes format by action:
        - CREATE: {"created": {full entity data}}
        - UPDATE: {"field": {"old": old_val, "new": new_val}, ...}
        - DELETE: {"deleted": {full entity data at deletion}}
        """
        entry = AuditEntry(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            changes=changes,
        )
        self._entries.append(entry)
        audit_logger.info(
            "%s %s %s: %s", action.value, entity_type, entity_id, changes
        )
        return entry

    def get_entity_history(self, entity_type: str, entity_id: str) -> list[AuditEntry]:
        """Retained history for an entity, newest first."""
        return [
            e for e in reversed(self._entries)
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
