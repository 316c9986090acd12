"""In-process guidance history with active/superseded tracking."""

from __future__ import annotations

import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any

from smartfuel.domains.nutrition.domain_logic.signal_models import SmartFuelGuidance

logger = logging.getLogger(__name__)

STATUS_ACTIVE = "active"
STATUS_SUPERSEDED = "superseded"

DEFAULT_RETENTION = 100


@dataclass(frozen=True)
class GuidanceRecord:
    """A stored guidance result for one user."""

    id: str
    user_id: str
    generated_at: datetime
    guidance: SmartFuelGuidance
    status: str = STATUS_ACTIVE
    superseded_by: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "generatedAt": self.generated_at.isoformat(),
            "status": self.status,
            "supersededBy": self.superseded_by,
            "guidance": self.guidance.to_dict(),
        }


class GuidanceHistory:
    """Per-user guidance history; the newest record is the only active one.

    Records are immutable; superseding replaces the stored record. Each user
    keeps at most ``retention`` records, and the oldest (always superseded)
    are evicted first.
    """

    def __init__(self, retention: int = DEFAULT_RETENTION) -> None:
        if retention < 1:
            raise ValueError(f"retention must be at least 1, got {retention}")
        self.retention = retention
        self._records: dict[str, deque[GuidanceRecord]] = {}
        self._lock = threading.Lock()

    def record(self, user_id: str, guidance: SmartFuelGuidance) -> GuidanceRecord:
        """Store new guidance and supersede all previously active records."""
        new = GuidanceRecord(
            id=uuid.uuid4().hex,
            user_id=user_id,
            generated_at=datetime.now(timezone.utc),
            guidance=guidance,
        )
        with self._lock:
            records = self._records.setdefault(user_id, deque(maxlen=self.retention))
            superseded = 0
            for i in range(len(records)):
                old = records[i]
                if old.status == STATUS_ACTIVE:
                    records[i] = replace(old, status=STATUS_SUPERSEDED, superseded_by=new.id)
                    superseded += 1
            records.append(new)
        logger.info(
            "Recorded guidance %s for user %s (superseded %d)", new.id, user_id, superseded
        )
        return new

    def current(self, user_id: str) -> GuidanceRecord | None:
        """Newest active record, or None."""
        with self._lock:
            for rec in reversed(self._records.get(user_id, [])):
                if rec.status == STATUS_ACTIVE:
                    return rec
        return None

    def history(self, user_id: str, limit: int = 10) -> list[GuidanceRecord]:
        """Records newest first, capped at ``limit``."""
        if limit <= 0:
            return []
        with self._lock:
            records = list(self._records.get(user_id, []))
        return list(reversed(records))[:limit]

    def count(self) -> int:
        with self._lock:
            return sum(len(r) for r in self._records.values())
