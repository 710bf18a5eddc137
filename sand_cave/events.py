from typing import Callable, Dict, List, Optional, Tuple, Type


class GrainEvent:
    """Base class for everything the model reports to a presentation layer"""

    def __init__(self, grain_id: int, position: Tuple[int, int], tick: int = 0):
        """
        Args:
            grain_id: Unique ID of the grain agent
            position: (column, row) of the grain after the tick
            tick: Tick in which the event happened
        """
        self.grain_id = grain_id
        self.position = position
        self.tick = tick

    def __eq__(self, other) -> bool:
        return (
            type(self) is type(other)
            and self.grain_id == other.grain_id
            and self.position == other.position
            and self.tick == other.tick
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(grain_id={self.grain_id}, position={self.position}, tick={self.tick})"


class GrainMovedEvent(GrainEvent):
    """A falling grain moved one cell"""

    def __str__(self) -> str:
        return f"Grain {self.grain_id} moved to {self.position}"


class GrainSettledEvent(GrainEvent):
    """A grain came to rest and is now part of the cave"""

    def __str__(self) -> str:
        return f"Grain {self.grain_id} settled at {self.position}"


class GrainLostEvent(GrainEvent):
    """A grain dropped out through the open bottom of a floorless cave"""

    def __str__(self) -> str:
        return f"Grain {self.grain_id} fell into the void from {self.position}"


class SourceBlockedEvent(GrainEvent):
    """The source cell is filled and no further grains can spawn"""

    def __str__(self) -> str:
        return f"Source {self.position} blocked by grain {self.grain_id} at tick {self.tick}"


class TickReport:
    """Everything that happened during one model step"""

    def __init__(self, tick: int, spawned: Optional[int] = None):
        self.tick = tick
        self.spawned = spawned
        self.moved: List[GrainMovedEvent] = []
        self.settled: List[GrainSettledEvent] = []
        self.lost: List[GrainLostEvent] = []
        self.source_blocked = False

    def events(self) -> List[GrainEvent]:
        """All grain events in reporting order."""
        return [*self.moved, *self.settled, *self.lost]

    def __str__(self) -> str:
        return (
            f"Tick {self.tick}: {len(self.moved)} moved, {len(self.settled)} settled, "
            f"{len(self.lost)} lost" + (", source blocked" if self.source_blocked else "")
        )


class EventDispatcher:
    """Routes model events to handlers registered by event type"""

    def __init__(self):
        self.handlers: Dict[Type[GrainEvent], List[Callable[[GrainEvent], None]]] = {}

    def register_handler(self, event_type: Type[GrainEvent], handler: Callable[[GrainEvent], None]) -> None:
        """
        Register a function to receive every event of a given type.

        Args:
            event_type: The event class to handle (subclasses match too)
            handler: Called with the event
        """
        self.handlers.setdefault(event_type, []).append(handler)

    def create_event(self, event_type: str, grain_id: int, position: Tuple[int, int], tick: int) -> GrainEvent:
        """
        Create an event of the named type.

        Raises:
            ValueError: If event_type is unknown
        """
        if event_type == "moved":
            return GrainMovedEvent(grain_id, position, tick)
        elif event_type == "settled":
            return GrainSettledEvent(grain_id, position, tick)
        elif event_type == "lost":
            return GrainLostEvent(grain_id, position, tick)
        elif event_type == "blocked":
            return SourceBlockedEvent(grain_id, position, tick)
        else:
            raise ValueError(f"Unknown event type: {event_type}")

    def dispatch(self, event: GrainEvent) -> int:
        """
        Deliver one event to every matching handler.

        Returns:
            Number of handlers that received the event
        """
        delivered = 0
        for event_type, handlers in self.handlers.items():
            if isinstance(event, event_type):
                for handler in handlers:
                    handler(event)
                    delivered += 1
        return delivered

    def dispatch_report(self, report: TickReport) -> None:
        for event in report.events():
            self.dispatch(event)
