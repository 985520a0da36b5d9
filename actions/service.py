from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from actions.catalog import ActionRegistry
from actions.history import ExecutionLog
from actions.models import Action, LogEntry
from configs import settings
from executor.dispatcher import Dispatcher, Sender
from storage.snapshot import SnapshotStore


class ActionRelay:
    """
    Registry, log, dispatcher and snapshot wired together for a front end.
    Every mutating call writes the snapshot before it returns.
    """

    def __init__(
        self,
        data_file: Optional[str] = None,
        timeout: Optional[float] = None,
        sender: Optional[Sender] = None,
    ):
        self.registry = ActionRegistry()
        self.history = ExecutionLog()
        self.dispatcher = Dispatcher(
            self.registry,
            self.history,
            timeout=settings.dispatch_timeout() if timeout is None else timeout,
            sender=sender,
        )
        self.store = SnapshotStore(data_file or settings.data_file(), self.registry, self.history)

    def load(self) -> bool:
        return self.store.load()

    def save(self) -> bool:
        return self.store.save()

    def create_action(
        self,
        name: str,
        url: str,
        method: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Action:
        action = self.registry.create(name, url, method=method, headers=headers, body=body)
        self.store.save()
        return action

    def get_action(self, action_id: str) -> Action:
        return self.registry.get(action_id)

    def find_action(self, name: str) -> Action:
        return self.registry.find_by_name(name)

    def list_actions(self) -> List[Action]:
        return self.registry.list()

    def update_action(self, action_id: str, **fields) -> Action:
        action = self.registry.update(action_id, **fields)
        self.store.save()
        return action

    def delete_action(self, action_id: str) -> None:
        self.registry.delete(action_id)
        self.store.save()

    def trigger_by_id(self, action_id: str) -> Tuple[bool, str]:
        return self._dispatch(self.registry.get(action_id))

    def trigger_by_name(self, name: str) -> Tuple[bool, str]:
        return self._dispatch(self.registry.find_by_name(name))

    def list_logs(self) -> List[LogEntry]:
        return self.history.list()

    def _dispatch(self, action: Action) -> Tuple[bool, str]:
        try:
            return self.dispatcher.execute(action)
        finally:
            self.store.save()
