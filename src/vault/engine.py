import secrets
import time

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from vault.constants import Constants as c
from vault.daily_limit import DailyLimitTracker
from vault.events import EventKind, EventLog
from vault.exceptions import (
    AlreadyConfirmed,
    NotEligible,
    NotOwner,
    OperationNotFound,
    RequestFormattingError,
    SequenceIdInvalid,
)
from vault.forwarder import Forwarder
from vault.ledger import Ledger
from vault.operations import (
    AddOwner,
    ChangeRequirement,
    RemoveOwner,
    ReplaceOwner,
    ResetSpentToday,
    SetDailyLimit,
    Transfer,
)
from vault.owners import OwnerRegistry
from vault.sequence import SequenceStorage
from vault.signatures import CoSignature, SignatureAuthorizer
from vault.state import WalletState
from vault.utils.encoding import data_to_hex
from vault.utils.hash import (
    action_fingerprint,
    operation_fingerprint,
    signing_fingerprint,
    vault_address,
)


class Status(Enum):
    EXECUTED = "executed"
    PENDING = "pending"
    REVOKED = "revoked"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Outcome:
    status: Status
    operation: Optional[str] = None
    result: object = None

    @property
    def executed(self) -> bool:
        return self.status == Status.EXECUTED


def check_amount(value):
    if type(value) != int or value < 0:
        raise RequestFormattingError(f'Amount {value!r} must be a non-negative integer.')


def check_data(data):
    if not isinstance(data, (bytes, bytearray)):
        raise RequestFormattingError('Call data must be bytes.')


def check_target(target):
    if not isinstance(target, str) or not target:
        raise RequestFormattingError(f'Target {target!r} must be a non-empty string.')


class Vault:
    """
    M-of-N owner vault with a single-owner daily allowance.

    Every public mutating method runs as one transaction: state, ledger
    balances and events are committed together, or not at all.
    """

    def __init__(
            self,
            owners: list[str],
            required: int,
            daily_limit: int = 0,
            ledger: Optional[Ledger] = None,
            clock: Optional[Callable[[], int]] = None,
            instance_id: Optional[str] = None,
            address: Optional[str] = None,
            seconds_per_day: int = c.SECONDS_PER_DAY,
            sequence_window: int = c.SEQUENCE_WINDOW,
    ):
        check_amount(daily_limit)
        self.clock = clock if clock is not None else lambda: int(time.time())
        self.instance_id = instance_id if instance_id is not None else secrets.token_hex(16)
        self.address = address if address is not None else vault_address(self.instance_id)
        self.ledger = ledger if ledger is not None else Ledger()
        self.events = EventLog()
        self.state = WalletState(
            registry=OwnerRegistry(owners, required),
            daily_limit=DailyLimitTracker(daily_limit, seconds_per_day, now=self.clock()),
            sequences=SequenceStorage(window=sequence_window),
        )
        self._pending_events = None

        logger.info(
            f"Vault {self.address} created with {len(owners)} owners, "
            f"{required} required, daily limit {daily_limit}"
        )

    @classmethod
    def from_config(cls, config, ledger: Optional[Ledger] = None, clock=None):
        return cls(
            owners=list(config.owners),
            required=config.required,
            daily_limit=config.daily_limit,
            ledger=ledger,
            clock=clock,
            instance_id=config.instance_id,
            seconds_per_day=config.seconds_per_day,
            sequence_window=config.sequence_window,
        )

    @contextmanager
    def _transaction(self):
        # A re-entrant call (from a called contract) is a savepoint inside the
        # outer transaction: its failure undoes only its own changes.
        outermost = self._pending_events is None
        state = self.state.snapshot()
        ledger = self.ledger.snapshot()
        if outermost:
            self._pending_events = []
        mark = len(self._pending_events)
        try:
            yield
        except Exception:
            self.state = state
            self.ledger.restore(ledger)
            if outermost:
                self._pending_events = None
            else:
                del self._pending_events[mark:]
            raise
        if outermost:
            pending, self._pending_events = self._pending_events, None
            self.events.append_all(pending)

    def _emit(self, kind: EventKind, payload: dict):
        self._pending_events.append((kind, payload))

    def _forwarded(self, address: str, value: int):
        # Value can reach a forwarder outside any vault call.
        event = (EventKind.DEPOSIT, {'from': address, 'value': value})
        if self._pending_events is None:
            self.events.append_all([event])
        else:
            self._pending_events.append(event)

    def _forwarder(self) -> Forwarder:
        return Forwarder(self.ledger, self.address, on_forward=self._forwarded)

    def _require_owner(self, sender: str):
        if not self.state.registry.is_owner(sender):
            raise NotOwner(sender)

    # Value movement

    def deposit(self, sender: str, value: int) -> Outcome:
        with self._transaction():
            check_amount(value)
            self.ledger.transfer(sender, self.address, value)
            if value > 0:
                self._emit(EventKind.DEPOSIT, {'from': sender, 'value': value})
            return Outcome(Status.EXECUTED)

    def execute(self, sender: str, target: str, value: int, data: bytes = b"") -> Outcome:
        with self._transaction():
            if not self.state.registry.is_owner(sender):
                logger.debug(f"Ignoring execute from non-owner {sender}")
                return Outcome(Status.IGNORED)

            check_amount(value)
            check_data(data)
            check_target(target)
            data = bytes(data)
            now = self.clock()

            # Calls never qualify for the single-owner allowance.
            is_call = len(data) > 0 or self.ledger.has_code(target)
            if not is_call and self.state.daily_limit.try_spend(value, now):
                self.ledger.transfer(self.address, target, value)
                self._emit(EventKind.SINGLE_TRANSACT, {'owner': sender, 'to': target, 'value': value})
                logger.info(f"{sender} sent {value} to {target} under the daily limit")
                return Outcome(Status.EXECUTED)

            logger.debug(f"Execute from {sender} to {target} requires confirmation")
            fingerprint = operation_fingerprint(self.instance_id, target, value, data)
            return self._propose(sender, fingerprint, Transfer(target, value, data), now)

    def confirm(self, sender: str, fingerprint: str) -> Outcome:
        with self._transaction():
            if not self.state.registry.is_owner(sender):
                logger.debug(f"Ignoring confirm from non-owner {sender}")
                return Outcome(Status.IGNORED, fingerprint)

            op = self.state.operations.get(fingerprint)
            if op is None:
                raise OperationNotFound(fingerprint)

            return self._confirm_and_check(op, sender)

    def revoke(self, sender: str, fingerprint: str) -> Outcome:
        with self._transaction():
            if not self.state.registry.is_owner(sender):
                logger.debug(f"Ignoring revoke from non-owner {sender}")
                return Outcome(Status.IGNORED, fingerprint)

            op = self.state.operations.remove(fingerprint)
            if op is None:
                return Outcome(Status.IGNORED, fingerprint)

            self._emit(EventKind.REVOKE, {'owner': sender, 'operation': fingerprint})
            logger.info(f"{sender} revoked {fingerprint}")
            return Outcome(Status.REVOKED, fingerprint)

    def execute_and_confirm(
            self,
            sender: str,
            target: str,
            value: int,
            data: bytes,
            expiry: int,
            sequence_id: int,
            cosignature: CoSignature,
    ) -> Outcome:
        with self._transaction():
            self._require_owner(sender)
            check_amount(value)
            check_data(data)
            check_target(target)
            check_amount(expiry)
            if type(sequence_id) != int or sequence_id < 0:
                raise SequenceIdInvalid(f"Sequence id {sequence_id!r} is not valid.")
            data = bytes(data)
            now = self.clock()

            fingerprint = signing_fingerprint(self.instance_id, target, value, data, expiry, sequence_id)
            authorizer = SignatureAuthorizer(self.state.registry)
            cosigner = authorizer.authorize(sender, fingerprint, cosignature, expiry, now)
            self.state.sequences.consume(sequence_id)

            operations = self.state.operations
            op = operations.create(fingerprint, sender, Transfer(target, value, data), self.state.registry.owners(), now)
            for owner in (sender, cosigner):
                operations.add_confirmation(fingerprint, owner)
                self._emit(EventKind.CONFIRMATION, {'owner': owner, 'operation': fingerprint})

            if len(op.confirmers) >= self.state.registry.required:
                operations.remove(fingerprint)
                result = self._perform(op, sender, cosigner=cosigner)
                return Outcome(Status.EXECUTED, fingerprint, result)

            self._emit_confirmation_needed(op)
            return Outcome(Status.PENDING, fingerprint)

    # Quorum-gated administration

    def add_owner(self, sender: str, owner: str) -> Outcome:
        with self._transaction():
            self._require_owner(sender)
            self.state.registry.check_add(owner)
            fingerprint = action_fingerprint(self.instance_id, 'add_owner', owner)
            return self._propose(sender, fingerprint, AddOwner(owner), self.clock())

    def remove_owner(self, sender: str, owner: str) -> Outcome:
        with self._transaction():
            self._require_owner(sender)
            self.state.registry.check_remove(owner)
            fingerprint = action_fingerprint(self.instance_id, 'remove_owner', owner)
            return self._propose(sender, fingerprint, RemoveOwner(owner), self.clock())

    def replace_owner(self, sender: str, old_owner: str, new_owner: str) -> Outcome:
        with self._transaction():
            self._require_owner(sender)
            self.state.registry.check_replace(old_owner, new_owner)
            fingerprint = action_fingerprint(self.instance_id, 'replace_owner', old_owner, new_owner)
            return self._propose(sender, fingerprint, ReplaceOwner(old_owner, new_owner), self.clock())

    def change_requirement(self, sender: str, required: int) -> Outcome:
        with self._transaction():
            self._require_owner(sender)
            self.state.registry.check_requirement(required)
            fingerprint = action_fingerprint(self.instance_id, 'change_requirement', required)
            return self._propose(sender, fingerprint, ChangeRequirement(required), self.clock())

    def set_daily_limit(self, sender: str, ceiling: int) -> Outcome:
        with self._transaction():
            self._require_owner(sender)
            check_amount(ceiling)
            fingerprint = action_fingerprint(self.instance_id, 'set_daily_limit', ceiling)
            return self._propose(sender, fingerprint, SetDailyLimit(ceiling), self.clock())

    def reset_spent_today(self, sender: str) -> Outcome:
        with self._transaction():
            self._require_owner(sender)
            ceiling = self.state.daily_limit.ceiling
            fingerprint = action_fingerprint(self.instance_id, 'reset_spent_today', ceiling)
            return self._propose(sender, fingerprint, ResetSpentToday(ceiling), self.clock())

    # Deposit forwarding

    def create_forwarder(self, sender: str) -> str:
        with self._transaction():
            self._require_owner(sender)
            nonce = self.state.forwarder_nonce
            address = self._forwarder().create(nonce)
            self.state.forwarder_nonce += 1
            self.state.forwarders.append(address)
            self._emit(EventKind.FORWARDER_CREATED, {'address': address, 'nonce': nonce})
            return address

    def forwarding_address(self, nonce: int) -> str:
        check_amount(nonce)
        return self._forwarder().address(nonce)

    def flush_forwarder(self, nonce: int) -> int:
        """
        Sweep whatever sits at the forwarding address for nonce into the
        vault. Only addresses derived from this vault can be swept, created
        or not.
        """
        with self._transaction():
            check_amount(nonce)
            address, amount = self._forwarder().sweep(nonce)
            if amount > 0:
                self._emit(EventKind.DEPOSIT, {'from': address, 'value': amount})
            return amount

    # Internals

    def _propose(self, sender: str, fingerprint: str, action, now: int) -> Outcome:
        operations = self.state.operations
        op = operations.get(fingerprint)
        created = op is None
        if created:
            op = operations.create(fingerprint, sender, action, self.state.registry.owners(), now)

        outcome = self._confirm_and_check(op, sender)
        if created and outcome.status == Status.PENDING and isinstance(action, Transfer):
            self._emit_confirmation_needed(op)
        return outcome

    def _confirm_and_check(self, op, owner: str) -> Outcome:
        if op.has_confirmed(owner):
            raise AlreadyConfirmed(f'{owner} already confirmed {op.fingerprint}')
        if owner not in op.eligible:
            raise NotEligible(f'{owner} cannot confirm {op.fingerprint}')

        count = self.state.operations.add_confirmation(op.fingerprint, owner)
        self._emit(EventKind.CONFIRMATION, {'owner': owner, 'operation': op.fingerprint})

        if count < self.state.registry.required:
            logger.debug(f"{op.fingerprint} has {count} of {self.state.registry.required} confirmations")
            return Outcome(Status.PENDING, op.fingerprint)

        self.state.operations.remove(op.fingerprint)
        result = self._perform(op, owner)
        return Outcome(Status.EXECUTED, op.fingerprint, result)

    def _emit_confirmation_needed(self, op):
        action = op.action
        self._emit(EventKind.CONFIRMATION_NEEDED, {
            'operation': op.fingerprint,
            'initiator': op.initiator,
            'to': action.target,
            'value': action.value,
            'data': data_to_hex(action.data),
        })

    def _perform(self, op, confirmed_by: str, cosigner: Optional[str] = None):
        action = op.action
        registry = self.state.registry

        if isinstance(action, Transfer):
            if action.data or self.ledger.has_code(action.target):
                result = self.ledger.call(self.address, action.target, action.value, action.data)
            else:
                result = self.ledger.transfer(self.address, action.target, action.value)
            payload = {
                'owner': op.initiator,
                'operation': op.fingerprint,
                'to': action.target,
                'value': action.value,
                'data': data_to_hex(action.data),
                'confirmed_by': confirmed_by,
            }
            if cosigner is not None:
                payload['cosigner'] = cosigner
            self._emit(EventKind.MULTI_TRANSACT, payload)
            logger.info(f"Executed {op.fingerprint}: {action.value} to {action.target}")
            return result

        if isinstance(action, AddOwner):
            registry.add(action.owner)
            self.state.operations.clear()
            self._emit(EventKind.OWNER_ADDED, {'new_owner': action.owner})
        elif isinstance(action, RemoveOwner):
            registry.remove(action.owner)
            self._emit(EventKind.OWNER_REMOVED, {'old_owner': action.owner})
        elif isinstance(action, ReplaceOwner):
            registry.replace(action.old_owner, action.new_owner)
            self._emit(EventKind.OWNER_CHANGED, {'old_owner': action.old_owner, 'new_owner': action.new_owner})
        elif isinstance(action, ChangeRequirement):
            registry.change_requirement(action.required)
            self.state.operations.clear()
            self._emit(EventKind.REQUIREMENT_CHANGED, {'new_requirement': action.required})
        elif isinstance(action, SetDailyLimit):
            self.state.daily_limit.set_ceiling(action.ceiling)
            self.state.operations.remove_where(lambda o: isinstance(o.action, ResetSpentToday))
            self._emit(EventKind.DAILY_LIMIT_CHANGED, {'new_limit': action.ceiling})
        elif isinstance(action, ResetSpentToday):
            self.state.daily_limit.reset()
            self._emit(EventKind.SPENT_TODAY_RESET, {})
        else:
            raise TypeError(f'Unknown action {action!r}')

        logger.info(f"Executed {type(action).__name__} {op.fingerprint}")
        return None

    # Queries

    def is_owner(self, owner: str) -> bool:
        return self.state.registry.is_owner(owner)

    def owner_count(self) -> int:
        return self.state.registry.owner_count()

    def owner_at(self, index: int) -> str:
        return self.state.registry.owner_at(index)

    def owners(self) -> list[str]:
        return self.state.registry.owners()

    @property
    def required(self) -> int:
        return self.state.registry.required

    def pending_operations(self) -> list:
        registry = self.state.registry
        operations = self.state.operations
        return [operations.view(op, registry.required, registry.owners()) for op in operations.pending()]

    def has_confirmed(self, fingerprint: str, owner: str) -> bool:
        op = self.state.operations.get(fingerprint)
        return op is not None and op.has_confirmed(owner)

    @property
    def daily_limit(self) -> int:
        return self.state.daily_limit.ceiling

    def spent_today(self) -> int:
        return self.state.daily_limit.spent(self.clock())

    def remaining_today(self) -> int:
        return self.state.daily_limit.remaining(self.clock())

    def next_sequence_id(self) -> int:
        return self.state.sequences.next_sequence_id

    def balance(self) -> int:
        return self.ledger.balance_of(self.address)

    def signing_fingerprint(self, target: str, value: int, data: bytes, expiry: int, sequence_id: int) -> str:
        return signing_fingerprint(self.instance_id, target, value, bytes(data), expiry, sequence_id)

    def operation_fingerprint(self, target: str, value: int, data: bytes = b"") -> str:
        return operation_fingerprint(self.instance_id, target, value, bytes(data))
