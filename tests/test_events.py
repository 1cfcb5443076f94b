from dndwheel.core.events import Event, EventBus, EventType, spin_request_event, tick_event


def test_subscribe_and_unsubscribe():
    bus = EventBus()
    seen = []
    unsubscribe = bus.subscribe(EventType.SPIN_SETTLED, seen.append)

    bus.emit(Event(EventType.SPIN_SETTLED, data={"entry_index": 1}))
    bus.emit(Event(EventType.SPIN_STARTED))
    unsubscribe()
    bus.emit(Event(EventType.SPIN_SETTLED))

    assert [e.data for e in seen] == [{"entry_index": 1}]


def test_global_handler_sees_everything():
    bus = EventBus()
    seen = []
    bus.subscribe_all(lambda e: seen.append(e.type))

    bus.emit(spin_request_event())
    bus.emit(tick_event(0.016, 3))

    assert seen == [EventType.SPIN_REQUESTED, EventType.TICK]


def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(EventType.BOUNDARY_CROSSED, broken)
    bus.subscribe(EventType.BOUNDARY_CROSSED, seen.append)
    bus.emit(Event(EventType.BOUNDARY_CROSSED))

    assert len(seen) == 1


def test_history_is_bounded():
    bus = EventBus(history_limit=5)
    for frame in range(12):
        bus.emit(tick_event(0.01, frame))

    history = bus.get_history(limit=100)
    assert len(history) == 5
    assert history[-1].data["frame"] == 11

    bus.clear_history()
    assert bus.get_history() == []


def test_history_filter_by_type():
    bus = EventBus()
    bus.emit(spin_request_event(source="mouse"))
    bus.emit(tick_event(0.01, 0))

    requests = bus.get_history(EventType.SPIN_REQUESTED)
    assert len(requests) == 1
    assert requests[0].source == "mouse"


def test_event_types():
    assert {e.name for e in EventType} == {
        "SPIN_REQUESTED",
        "CANCEL_REQUESTED",
        "RELOAD_REQUESTED",
        "SPIN_STARTED",
        "BOUNDARY_CROSSED",
        "SPIN_SETTLED",
        "SPIN_CANCELLED",
        "ENTRIES_CHANGED",
        "TICK",
    }
