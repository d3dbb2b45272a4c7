"""Application services around the audit trail.

Every order mutation records who did it, mirroring the entry in the
structured log.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from storefront.domain.model.action_log import Action, ActionLog
from storefront.domain.repository.action_log_repository import ActionLogRepository

logger = structlog.get_logger(__name__)

ORDER_RESOURCE = "Order"


class ActionRecorder:

    def __init__(self, action_log_repo: ActionLogRepository) -> None:
        self._action_log_repo = action_log_repo

    def record(self, user_id: str, action: Action, resource_id: str, details: str) -> None:
        entry = ActionLog(
            user_id=user_id,
            action=action,
            resource=ORDER_RESOURCE,
            resource_id=resource_id,
            details=details,
        )
        self._action_log_repo.add(entry)
        logger.info(
            "Action recorded",
            user_id=user_id,
            action=action.value,
            resource=ORDER_RESOURCE,
            resource_id=resource_id,
            details=details,
        )


@dataclass(frozen=True)
class ActionLogDTO:
    timestamp: str
    user_id: str
    action: str
    resource: str
    resource_id: str
    details: str


class ShowActionLogHandler:

    def __init__(self, action_log_repo: ActionLogRepository) -> None:
        self._action_log_repo = action_log_repo

    def handle(self, user_id: str | None = None) -> list[ActionLogDTO]:
        """Entries for one user, or every order entry when *user_id* is None."""
        if user_id is not None:
            entries = self._action_log_repo.list_by_user(user_id)
        else:
            entries = self._action_log_repo.list_by_resource(ORDER_RESOURCE)
        return [
            ActionLogDTO(
                timestamp=entry.timestamp.isoformat(timespec="seconds"),
                user_id=entry.user_id,
                action=entry.action.value,
                resource=entry.resource,
                resource_id=entry.resource_id,
                details=entry.details,
            )
            for entry in entries
        ]
