# The action registry: the one place actions are created, changed or removed.
# Both the CLI and the HTTP API go through it, so the name rule lives here only.

from __future__ import annotations

import threading
from typing import Callable, Dict, List, Optional

from actions.errors import DuplicateName, InvalidInput, NotFound
from actions.ids import generate_id
from actions.models import DEFAULT_METHOD, Action

UPDATABLE_FIELDS = ("name", "url", "method", "headers", "body")


class ActionRegistry:
    """
    Thread-safe map of action id -> Action.

    Every call runs under a single lock, so a uniqueness check and the
    insert/update that follows it can never interleave with another writer.
    Callers only ever get copies back.
    """

    def __init__(self, id_factory: Callable[[], str] = generate_id):
        self._actions: Dict[str, Action] = {}
        self._lock = threading.Lock()
        self._new_id = id_factory

    def create(
        self,
        name: str,
        url: str,
        method: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Action:
        if not name:
            raise InvalidInput("Action name is required")
        if not url:
            raise InvalidInput("URL is required")
        with self._lock:
            self._check_name_free(name)
            action = Action(
                id=self._new_id(),
                name=name,
                url=url,
                method=method or DEFAULT_METHOD,
                headers=dict(headers or {}),
                body=body or "",
            )
            self._actions[action.id] = action
            return action.copy()

    def get(self, action_id: str) -> Action:
        with self._lock:
            action = self._actions.get(action_id)
            if action is None:
                raise NotFound(f"Action not found: {action_id}")
            return action.copy()

    def find_by_name(self, name: str) -> Action:
        with self._lock:
            for action in self._actions.values():
                if action.name == name:
                    return action.copy()
        raise NotFound(f"Action not found: {name}")

    def list(self) -> List[Action]:
        with self._lock:
            return [a.copy() for a in self._actions.values()]

    def update(self, action_id: str, **fields) -> Action:
        """
        Replace only the fields given (None means "not given").
        `headers` replaces the whole map, it is never merged.
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise InvalidInput(f"Unknown field(s): {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in fields.items() if v is not None}
        if "name" in changes and not changes["name"]:
            raise InvalidInput("Action name is required")
        if "url" in changes and not changes["url"]:
            raise InvalidInput("URL is required")
        if "method" in changes:
            changes["method"] = changes["method"] or DEFAULT_METHOD
        if "headers" in changes:
            changes["headers"] = dict(changes["headers"])

        with self._lock:
            current = self._actions.get(action_id)
            if current is None:
                raise NotFound(f"Action not found: {action_id}")
            if "name" in changes:
                self._check_name_free(changes["name"], exclude_id=action_id)
            updated = Action(**{**current.to_dict(), **changes})
            self._actions[action_id] = updated
            return updated.copy()

    def delete(self, action_id: str) -> None:
        with self._lock:
            if action_id not in self._actions:
                raise NotFound(f"Action not found: {action_id}")
            del self._actions[action_id]

    def snapshot(self) -> Dict[str, Action]:
        with self._lock:
            return {k: a.copy() for k, a in self._actions.items()}

    def replace_all(self, actions: Dict[str, Action]) -> None:
        with self._lock:
            self._actions = {k: a.copy() for k, a in actions.items()}

    def __len__(self) -> int:
        with self._lock:
            return len(self._actions)

    def _check_name_free(self, name: str, exclude_id: Optional[str] = None) -> None:
        # caller holds the lock
        for action in self._actions.values():
            if action.name == name and action.id != exclude_id:
                raise DuplicateName("Action name must be unique")
