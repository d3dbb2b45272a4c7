"""JSON-file-backed implementation of ActionLogRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from storefront.domain.model.action_log import Action, ActionLog
from storefront.domain.repository.action_log_repository import ActionLogRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonActionLogRepository(ActionLogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def add(self, entry: ActionLog) -> None:
        with self._file.locked():
            records = self._file.load()
            records.append(
                {
                    "user_id": entry.user_id,
                    "action": entry.action.value,
                    "resource": entry.resource,
                    "resource_id": entry.resource_id,
                    "details": entry.details,
                    "timestamp": entry.timestamp.isoformat(),
                }
            )
            self._file.persist(records)

    def list_by_user(self, user_id: str) -> list[ActionLog]:
        entries = [e for e in self._load() if e.user_id == user_id]
        return sorted(entries, key=lambda e: e.timestamp, reverse=True)

    def list_by_resource(self, resource: str) -> list[ActionLog]:
        return [e for e in self._load() if e.resource == resource]

    def _load(self) -> list[ActionLog]:
        return [
            ActionLog(
                user_id=raw["user_id"],
                action=Action(raw["action"]),
                resource=raw["resource"],
                resource_id=raw["resource_id"],
                details=raw["details"],
                timestamp=datetime.fromisoformat(raw["timestamp"]),
            )
            for raw in self._file.load()
        ]
