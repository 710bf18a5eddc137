import pytest

from sand_cave.events import (
    EventDispatcher,
    GrainEvent,
    GrainLostEvent,
    GrainMovedEvent,
    GrainSettledEvent,
    SourceBlockedEvent,
    TickReport,
)
from sand_cave.model import SandCaveModel


@pytest.mark.parametrize("name, cls", [
    ("moved", GrainMovedEvent),
    ("settled", GrainSettledEvent),
    ("lost", GrainLostEvent),
    ("blocked", SourceBlockedEvent),
])
def test_create_event(name, cls):
    event = EventDispatcher().create_event(name, 7, (3, 4), 12)
    assert type(event) is cls
    assert (event.grain_id, event.position, event.tick) == (7, (3, 4), 12)


def test_unknown_event_type():
    with pytest.raises(ValueError, match="Unknown event type"):
        EventDispatcher().create_event("exploded", 1, (0, 0), 0)


def test_handlers_match_subclasses():
    dispatcher = EventDispatcher()
    everything, settles = [], []
    dispatcher.register_handler(GrainEvent, everything.append)
    dispatcher.register_handler(GrainSettledEvent, settles.append)

    assert dispatcher.dispatch(GrainMovedEvent(1, (0, 1))) == 1
    assert dispatcher.dispatch(GrainSettledEvent(1, (0, 1))) == 2
    assert len(everything) == 2
    assert len(settles) == 1


def test_dispatch_without_handlers():
    assert EventDispatcher().dispatch(GrainLostEvent(1, (0, 0))) == 0


def test_report_orders_events():
    report = TickReport(3, spawned=9)
    report.settled.append(GrainSettledEvent(1, (0, 5), 3))
    report.moved.append(GrainMovedEvent(9, (0, 1), 3))
    assert [type(e) for e in report.events()] == [GrainMovedEvent, GrainSettledEvent]
    assert str(report) == "Tick 3: 1 moved, 1 settled, 0 lost"


def test_model_dispatches_source_blocked_once():
    model = SandCaveModel()
    blocked = []
    model.events.register_handler(SourceBlockedEvent, blocked.append)
    model.run()
    assert len(blocked) == 1
    assert blocked[0].position == model.source
    assert blocked[0].tick == model.tick - 1


def test_model_dispatches_lost_grains():
    model = SandCaveModel(floor=False, halt_on_void=True)
    lost = []
    model.events.register_handler(GrainLostEvent, lost.append)
    model.run()
    assert len(lost) == 1
    assert "fell into the void" in str(lost[0])
