"""
Lifecycle events

Events are appended once per successful call and never modified. Watchers
subscribe to the log and are notified after the call that produced the
events has committed.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from loguru import logger


class EventKind(Enum):
    """Kinds of vault events"""
    DEPOSIT = "Deposit"
    CONFIRMATION_NEEDED = "ConfirmationNeeded"
    CONFIRMATION = "Confirmation"
    REVOKE = "Revoke"
    SINGLE_TRANSACT = "SingleTransact"
    MULTI_TRANSACT = "MultiTransact"

    # Owner set
    OWNER_ADDED = "OwnerAdded"
    OWNER_REMOVED = "OwnerRemoved"
    OWNER_CHANGED = "OwnerChanged"
    REQUIREMENT_CHANGED = "RequirementChanged"

    # Daily limit
    DAILY_LIMIT_CHANGED = "DailyLimitChanged"
    SPENT_TODAY_RESET = "SpentTodayReset"

    FORWARDER_CREATED = "ForwarderCreated"


@dataclass(frozen=True)
class Event:
    """A single event with its position in the log"""

    index: int
    kind: EventKind
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'index': self.index,
            'event': self.kind.value,
            'payload': dict(self.payload),
        }


class EventLog:
    """Append-only event log"""

    def __init__(self):
        self._events: List[Event] = []
        self._subscribers: List[Callable[[Event], None]] = []

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(list(self._events))

    def subscribe(self, callback: Callable[[Event], None]):
        self._subscribers.append(callback)

    def append_all(self, pending: List[tuple]) -> List[Event]:
        """Append a committed batch of (kind, payload) pairs"""
        appended = []
        for kind, payload in pending:
            event = Event(index=len(self._events), kind=kind, payload=payload)
            self._events.append(event)
            appended.append(event)

        for event in appended:
            for callback in self._subscribers:
                try:
                    callback(event)
                except Exception as e:
                    logger.error(f"Event watcher failed on {event.kind.value}: {e}")

        return appended

    def of_kind(self, kind: EventKind) -> List[Event]:
        return [e for e in self._events if e.kind == kind]

    def last(self, kind: Optional[EventKind] = None) -> Optional[Event]:
        for event in reversed(self._events):
            if kind is None or event.kind == kind:
                return event
        return None

    def since(self, index: int) -> List[Event]:
        return self._events[index:]
