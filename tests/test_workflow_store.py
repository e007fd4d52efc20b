import pytest

from atelier.core.exceptions import InvalidTransition, NotFoundError
from atelier.workflow.state import Step, WorkflowState
from atelier.workflow.store import WorkflowStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_oldest_session_is_evicted_when_full() -> None:
    store = WorkflowStore(max_sessions=2, ttl_seconds=60)
    first, _ = store.create("user-1")
    second, _ = store.create("user-1")
    store.get(first, "user-1")

    third, _ = store.create("user-1")

    assert len(store) == 2
    with pytest.raises(NotFoundError):
        store.get(second, "user-1")
    store.get(first, "user-1")
    store.get(third, "user-1")


def test_idle_sessions_expire() -> None:
    clock = FakeClock()
    store = WorkflowStore(max_sessions=10, ttl_seconds=60, clock=clock)
    stale, _ = store.create("user-1")
    clock.now = 30
    fresh, _ = store.create("user-1")

    clock.now = 75

    with pytest.raises(NotFoundError):
        store.get(stale, "user-1")
    store.get(fresh, "user-1")
    assert len(store) == 1


def test_busy_workflow_refuses_other_writes() -> None:
    store = WorkflowStore(max_sessions=10, ttl_seconds=60)
    workflow_id, state = store.create("user-1")

    with store.generating(workflow_id, "user-1") as current:
        assert current == state
        with pytest.raises(InvalidTransition):
            with store.generating(workflow_id, "user-1"):
                pass
        with pytest.raises(InvalidTransition):
            store.update(workflow_id, "user-1", state)
        with pytest.raises(InvalidTransition):
            store.discard(workflow_id, "user-1")
        store.save(workflow_id, "user-1", WorkflowState(step=Step.RESULT))

    store.discard(workflow_id, "user-1")
    with pytest.raises(NotFoundError):
        store.get(workflow_id, "user-1")


def test_busy_workflow_is_not_evicted() -> None:
    store = WorkflowStore(max_sessions=1, ttl_seconds=60)
    workflow_id, _ = store.create("user-1")

    with store.generating(workflow_id, "user-1"):
        store.create("user-1")
        assert len(store) == 2

    store.get(workflow_id, "user-1")
