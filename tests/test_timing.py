from n64bus.timing import Clock, Event, EventKind


def test_add_cycles_accumulates():
    clock = Clock()
    clock.add_cycles(20)
    clock.add_cycles(5)
    assert clock.count == 25


def test_nothing_due_before_time():
    clock = Clock()
    clock.add_event(EventKind.PI_DMA, 100)
    assert clock.pop_due() == []
    assert clock.pending == [Event(EventKind.PI_DMA, 100)]


def test_due_events_in_time_order():
    clock = Clock()
    clock.add_event(EventKind.AI_DMA, 50)
    clock.add_event(EventKind.SI_DMA, 10)
    clock.add_event(EventKind.RDP, 500)
    clock.add_cycles(60)
    due = clock.pop_due()
    assert [e.kind for e in due] == [EventKind.SI_DMA, EventKind.AI_DMA]
    assert clock.pending == [Event(EventKind.RDP, 500)]


def test_ties_keep_insertion_order():
    clock = Clock(count=10)
    clock.add_event(EventKind.VIDEO_INTERRUPT, 10)
    clock.add_event(EventKind.PIF_EXECUTE_COMMAND, 10)
    assert [e.kind for e in clock.pop_due()] == [
        EventKind.VIDEO_INTERRUPT,
        EventKind.PIF_EXECUTE_COMMAND,
    ]


def test_pop_due_empties_queue():
    clock = Clock()
    clock.add_event(EventKind.PI_DMA, 0)
    assert len(clock.pop_due()) == 1
    assert clock.pop_due() == []