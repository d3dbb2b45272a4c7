"""Audit record of a user action against a resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Action(Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    CANCEL = "CANCEL"


@dataclass(frozen=True)
class ActionLog:
    user_id: str
    action: Action
    resource: str
    resource_id: str
    details: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
