from __future__ import annotations
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

TASKS_ENDPOINT = "/api/tasks"
DEFAULT_TIMEOUT_SEC = 5.0


@dataclass(frozen=True)
class WorkoutSummary:
    score: int
    total_hits: int
    total_misses: int
    best_combo: int

    def to_task(self) -> Dict[str, Any]:
        """Payload for the task tracker's create-task endpoint."""
        return {
            "title": f"Rep Challenge - Score: {self.score}",
            "description": (
                f"Reps: {self.total_hits}, Misses: {self.total_misses}, "
                f"Best Combo: {self.best_combo}"
            ),
            "category": "other",
            "priority": "medium",
            "status": "completed",
        }


class TaskClient(ABC):
    """Records a finished workout in the external task tracker."""

    @abstractmethod
    def create_task(self, summary: WorkoutSummary) -> None:
        pass


class HttpTaskClient(TaskClient):
    """
    POSTs the summary to <base_url>/api/tasks.

    With background=True (the default) the request runs on a daemon thread and
    failures are only logged, so the frame loop never waits on the network.
    With background=False errors propagate to the caller.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        session: Optional[requests.Session] = None,
        background: bool = True,
    ):
        self.url = base_url.rstrip("/") + TASKS_ENDPOINT
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.background = background

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def create_task(self, summary: WorkoutSummary) -> None:
        payload = summary.to_task()
        if not self.background:
            self._post(payload)
            return
        worker = threading.Thread(
            target=self._post_logged, args=(payload,), name="task-sync", daemon=True)
        worker.start()

    def _post(self, payload: Dict[str, Any]) -> None:
        resp = self.session.post(
            self.url, json=payload, headers=self._headers(), timeout=self.timeout)
        resp.raise_for_status()
        logger.info("Workout saved to tasks: %s", payload["title"])

    def _post_logged(self, payload: Dict[str, Any]) -> None:
        try:
            self._post(payload)
        except requests.RequestException as e:
            logger.warning("Error saving workout stats to %s: %s", self.url, e)
