"""Abstract repository for the audit trail."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.action_log import ActionLog


class ActionLogRepository(ABC):

    @abstractmethod
    def add(self, entry: ActionLog) -> None:
        """Append an entry."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[ActionLog]:
        """Entries recorded for *user_id*, newest first."""

    @abstractmethod
    def list_by_resource(self, resource: str) -> list[ActionLog]:
        """Entries recorded against a resource type such as ``"Order"``."""
