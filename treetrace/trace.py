import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .snapshot import TreeSnapshot


class EventKind(enum.Enum):
    ADD_NODE = "add-node"
    CONNECT = "connect"
    HIGHLIGHT = "highlight"
    ROTATE_LEFT = "rotate-left"
    ROTATE_RIGHT = "rotate-right"
    RECOLOR = "recolor"
    VISIT = "visit"
    INFO = "info"
    ERROR = "error"


class Failure(enum.Enum):
    DUPLICATE_KEY = "duplicate-key"
    KEY_NOT_FOUND = "key-not-found"
    EMPTY_TREE = "empty-tree"


@dataclass(frozen=True)
class TraceEvent:
    kind: EventKind
    positions: Tuple[int, ...]
    snapshot: TreeSnapshot
    explanation: str
    failure: Optional[Failure] = field(default=None)


class Trace(list):
    """Ordered, append-only log of the steps taken by one tree operation.

    Events must be replayed in list order; each one carries the snapshot the
    player should show for that step.
    """

    def emit(self, kind: EventKind, positions: Iterable[int], snapshot: TreeSnapshot,
             explanation: str, failure: Optional[Failure] = None) -> TraceEvent:
        # absent nodes are looked up as -1, never show them
        event = TraceEvent(kind, tuple(i for i in positions if i >= 0), snapshot,
                           explanation, failure)
        self.append(event)
        return event

    @property
    def last(self) -> Optional[TraceEvent]:
        return self[-1] if self else None

    @property
    def failure(self) -> Optional[Failure]:
        return self.last.failure if self else None

    @property
    def succeeded(self) -> bool:
        if not self:
            return False
        return self.last.failure is None and self.last.kind != EventKind.ERROR

    def kinds(self) -> List[EventKind]:
        return [event.kind for event in self]

    def count_of(self, kind: EventKind) -> int:
        return sum(1 for event in self if event.kind == kind)
