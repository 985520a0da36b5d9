from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

import requests

from actions.catalog import ActionRegistry
from actions.errors import RequestConstructionError
from actions.history import ExecutionLog
from actions.models import Action
from executor.http_client import build_request, send_request, status_line

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0

Sender = Callable[[requests.PreparedRequest, float], requests.Response]


class Dispatcher:
    """
    Replays an action against its URL and records exactly one log entry per call.

    The registry is only touched for the lookup; the network call runs without
    holding any registry or log lock.
    """

    def __init__(
        self,
        registry: ActionRegistry,
        history: ExecutionLog,
        timeout: float = DEFAULT_TIMEOUT_S,
        sender: Optional[Sender] = None,
    ):
        self.registry = registry
        self.history = history
        self.timeout = timeout
        self._send = sender or send_request

    def execute(self, action: Action) -> Tuple[bool, str]:
        try:
            prepared = build_request(action.method, action.url, action.headers, action.body)
            response = self._send(prepared, self.timeout)
        except RequestConstructionError as e:
            self.history.append(action.id, False, f"Request creation error: {e}")
            logger.warning("Could not build request for action %s: %s", action.id, e)
            raise
        except (requests.exceptions.RequestException, UnicodeError) as e:
            # http.client encodes header names itself and can refuse them at send time
            success, message = False, f"Request failed: {e}"
        else:
            success = 200 <= response.status_code < 300
            message = f"Status: {status_line(response)}"

        self.history.append(action.id, success, message)
        logger.info("Dispatched %s %s (action %s): %s", action.method, action.url, action.id, message)
        return success, message

    def trigger_by_id(self, action_id: str) -> Tuple[bool, str]:
        return self.execute(self.registry.get(action_id))

    def trigger_by_name(self, name: str) -> Tuple[bool, str]:
        return self.execute(self.registry.find_by_name(name))
