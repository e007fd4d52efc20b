"""
In-process store of live workflow sessions.

Sessions idle for longer than ``ttl_seconds`` are dropped, and once
``max_sessions`` are live the least recently used one makes room for a new
one. A workflow with a merge in flight is marked busy and refuses other
writes until the merge finishes.
"""
import logging
import threading
import time
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from atelier.core.config import settings
from atelier.core.exceptions import InvalidTransition, NotFoundError
from atelier.workflow.state import WorkflowState

logger = logging.getLogger(__name__)


class WorkflowStore:
    """Maps workflow ids to ``(owner, state)``; one owner per workflow."""

    def __init__(
        self,
        max_sessions: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_sessions = max_sessions if max_sessions is not None else settings.WORKFLOW_MAX_SESSIONS
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.WORKFLOW_TTL_SECONDS
        self._clock = clock
        self._lock = threading.Lock()
        # workflow id -> (owner, state, last touched); least recently used first
        self._sessions: OrderedDict[str, tuple[str, WorkflowState, float]] = OrderedDict()
        self._busy: set[str] = set()

    def __len__(self) -> int:
        with self._lock:
            self._expire()
            return len(self._sessions)

    def _expire(self) -> None:
        cutoff = self._clock() - self.ttl_seconds
        for workflow_id, (_, _, touched) in list(self._sessions.items()):
            if touched > cutoff:
                break
            if workflow_id in self._busy:
                continue
            del self._sessions[workflow_id]
            logger.info(f"[WorkflowStore] Workflow {workflow_id} expired")

    def _entry(self, workflow_id: str, user_id: str) -> tuple[str, WorkflowState, float]:
        self._expire()
        entry = self._sessions.get(workflow_id)
        if entry is None or entry[0] != user_id:
            raise NotFoundError(f"Workflow not found: {workflow_id}")
        return entry

    def _put(self, workflow_id: str, user_id: str, state: WorkflowState) -> None:
        self._sessions[workflow_id] = (user_id, state, self._clock())
        self._sessions.move_to_end(workflow_id)

    def create(self, user_id: str) -> tuple[str, WorkflowState]:
        workflow_id = uuid.uuid4().hex
        state = WorkflowState()
        with self._lock:
            self._expire()
            idle = [key for key in self._sessions if key not in self._busy]
            while idle and len(self._sessions) >= self.max_sessions:
                evicted = idle.pop(0)
                del self._sessions[evicted]
                logger.info(f"[WorkflowStore] Workflow {evicted} evicted to make room")
            self._put(workflow_id, user_id, state)
        return workflow_id, state

    def get(self, workflow_id: str, user_id: str, for_update: bool = False) -> WorkflowState:
        with self._lock:
            _, state, _ = self._entry(workflow_id, user_id)
            if for_update and workflow_id in self._busy:
                raise InvalidTransition("A creation is still being generated for this workflow")
            self._put(workflow_id, user_id, state)
        return state

    def save(self, workflow_id: str, user_id: str, state: WorkflowState) -> None:
        with self._lock:
            self._entry(workflow_id, user_id)
            self._put(workflow_id, user_id, state)

    def update(self, workflow_id: str, user_id: str, state: WorkflowState) -> None:
        """Like :meth:`save`, but rejected while a merge is in flight."""
        with self._lock:
            self._entry(workflow_id, user_id)
            if workflow_id in self._busy:
                raise InvalidTransition("A creation is still being generated for this workflow")
            self._put(workflow_id, user_id, state)

    def discard(self, workflow_id: str, user_id: str) -> None:
        with self._lock:
            self._entry(workflow_id, user_id)
            if workflow_id in self._busy:
                raise InvalidTransition("A creation is still being generated for this workflow")
            del self._sessions[workflow_id]

    @contextmanager
    def generating(self, workflow_id: str, user_id: str) -> Iterator[WorkflowState]:
        """
        Mark the workflow busy for the duration of a merge.

        Yields:
            The state the merge starts from

        Raises:
            InvalidTransition: A merge is already running for this workflow
        """
        with self._lock:
            _, state, _ = self._entry(workflow_id, user_id)
            if workflow_id in self._busy:
                raise InvalidTransition("A creation is already being generated for this workflow")
            self._busy.add(workflow_id)
        try:
            yield state
        finally:
            with self._lock:
                self._busy.discard(workflow_id)


workflow_store = WorkflowStore()
