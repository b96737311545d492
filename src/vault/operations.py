"""
Pending multi-owner operations.

Each entry is keyed by its fingerprint and remembers who proposed it, which
owners have confirmed it and which owners were eligible to confirm it when it
was proposed. The log itself knows nothing about thresholds; the engine
decides when an entry has collected enough confirmations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional


@dataclass(frozen=True)
class Transfer:
    target: str
    value: int
    data: bytes = b""


@dataclass(frozen=True)
class AddOwner:
    owner: str


@dataclass(frozen=True)
class RemoveOwner:
    owner: str


@dataclass(frozen=True)
class ReplaceOwner:
    old_owner: str
    new_owner: str


@dataclass(frozen=True)
class ChangeRequirement:
    required: int


@dataclass(frozen=True)
class SetDailyLimit:
    ceiling: int


@dataclass(frozen=True)
class ResetSpentToday:
    ceiling: int


@dataclass
class PendingOperation:
    fingerprint: str
    initiator: str
    action: object
    eligible: frozenset
    created_at: int
    confirmers: set = field(default_factory=set)

    def has_confirmed(self, owner: str) -> bool:
        return owner in self.confirmers


@dataclass(frozen=True)
class OperationView:
    operation: str
    initiator: str
    action: object
    confirmations_needed: int
    signers: list
    awaiting: list


class OperationLog:
    def __init__(self):
        self._pending: dict[str, PendingOperation] = {}

    def __contains__(self, fingerprint: str) -> bool:
        return fingerprint in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def __iter__(self) -> Iterator[PendingOperation]:
        return iter(list(self._pending.values()))

    def get(self, fingerprint: str) -> Optional[PendingOperation]:
        return self._pending.get(fingerprint)

    def create(self, fingerprint: str, initiator: str, action, eligible, created_at: int) -> PendingOperation:
        if fingerprint in self._pending:
            raise ValueError(f'Operation {fingerprint} is already pending.')
        op = PendingOperation(
            fingerprint=fingerprint,
            initiator=initiator,
            action=action,
            eligible=frozenset(eligible),
            created_at=created_at,
        )
        self._pending[fingerprint] = op
        return op

    def add_confirmation(self, fingerprint: str, owner: str) -> int:
        op = self._pending[fingerprint]
        op.confirmers.add(owner)
        return len(op.confirmers)

    def remove(self, fingerprint: str) -> Optional[PendingOperation]:
        return self._pending.pop(fingerprint, None)

    def remove_where(self, predicate: Callable[[PendingOperation], bool]) -> list[PendingOperation]:
        removed = [op for op in self._pending.values() if predicate(op)]
        for op in removed:
            del self._pending[op.fingerprint]
        return removed

    def clear(self):
        self._pending.clear()

    def pending(self) -> list[PendingOperation]:
        return list(self._pending.values())

    def view(self, op: PendingOperation, required: int, current_owners: list[str]) -> OperationView:
        return OperationView(
            operation=op.fingerprint,
            initiator=op.initiator,
            action=op.action,
            confirmations_needed=max(required - len(op.confirmers), 0),
            signers=sorted(op.confirmers),
            awaiting=[o for o in current_owners if o in op.eligible and o not in op.confirmers],
        )
