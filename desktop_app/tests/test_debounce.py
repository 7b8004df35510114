from __future__ import annotations

from fieldpilot_desktop.controllers.debounce import Debouncer


def test_only_last_trigger_of_a_burst_fires(timers):
    received = []
    debouncer = Debouncer(received.append, 0.5, timers)

    debouncer.trigger("n")
    debouncer.trigger("no")
    debouncer.trigger("nor")

    assert received == []
    assert len(timers.active) == 1
    assert timers.active[0].delay == 0.5

    timers.fire_pending()

    assert received == ["nor"]
    assert not debouncer.pending


def test_cancel_drops_pending_call(timers):
    received = []
    debouncer = Debouncer(received.append, 0.5, timers)

    debouncer.trigger("north")
    debouncer.cancel()

    assert timers.active == []
    assert not debouncer.pending


def test_flush_runs_pending_call_immediately(timers):
    received = []
    debouncer = Debouncer(received.append, 0.5, timers)

    debouncer.flush()
    debouncer.trigger("north")
    debouncer.flush()

    assert received == ["north"]
    assert timers.active == []


def test_default_timer_is_a_daemon_thread():
    debouncer = Debouncer(lambda: None, 10)

    debouncer.trigger()
    timer = debouncer._timer
    debouncer.cancel()

    assert timer.daemon
