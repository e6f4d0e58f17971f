import weakref

import pytest

from core.events.domain_events import domain_events
from core.events.signal import Signal


def test_domain_event_signal_connect_emit_disconnect():
    seen: list[str] = []

    def _handler(project_id: str) -> None:
        seen.append(project_id)

    domain_events.project_changed.connect(_handler)
    domain_events.project_changed.emit("p-1")
    domain_events.project_changed.disconnect(_handler)
    domain_events.project_changed.emit("p-2")

    assert seen == ["p-1"]


def test_signal_connect_is_idempotent():
    signal: Signal[str] = Signal("test")
    seen: list[str] = []
    signal.connect(seen.append)
    signal.connect(seen.append)
    signal.emit("x")
    assert seen == ["x"]
    assert signal.subscriber_count() == 1


def test_signal_emit_prunes_dead_weakref_subscribers():
    signal: Signal[str] = Signal("test")
    seen: list[str] = []

    class _Listener:
        def __call__(self, payload: str) -> None:
            seen.append(payload)

    listener = _Listener()
    proxy = weakref.proxy(listener)
    signal.connect(proxy)
    signal.emit("p-1")

    del listener
    signal.emit("p-2")

    assert seen == ["p-1"]
    assert signal.subscriber_count() == 0


def test_signal_emit_keeps_other_errors_visible():
    signal: Signal[str] = Signal()

    def _boom(_payload: str) -> None:
        raise RuntimeError("boom")

    signal.connect(_boom)

    with pytest.raises(RuntimeError, match="boom"):
        signal.emit("x")


def test_service_emits_after_commit(services):
    ps = services["project_service"]
    changed: list[str] = []
    deleted: list[str] = []
    domain_events.project_changed.connect(changed.append)
    domain_events.project_deleted.connect(deleted.append)
    try:
        project = ps.create_project("Evented")
        ps.delete_project(project.id)
    finally:
        domain_events.project_changed.disconnect(changed.append)
        domain_events.project_deleted.disconnect(deleted.append)

    assert changed == [project.id]
    assert deleted == [project.id]
