from typing import Callable, Optional

from loguru import logger

from vault.exceptions import InsufficientFunds

Handler = Callable[[str, int, bytes], object]
ForwardHook = Callable[[str, int], None]


class Ledger:
    """
    Single fungible balance per address, plus addresses that run code when
    called and forwarding addresses that pass incoming value to a parent.
    """

    def __init__(self):
        self.balances = {}
        self.contracts = {}
        self.forwards = {}

    def balance_of(self, address: str) -> int:
        return self.balances.get(address, 0)

    def credit(self, address: str, value: int):
        if value < 0:
            raise ValueError('Cannot credit a negative amount.')
        self._deliver(address, value)

    def transfer(self, sender: str, to: str, value: int):
        if value < 0:
            raise ValueError('Cannot transfer a negative amount.')
        balance = self.balance_of(sender)
        if balance < value:
            raise InsufficientFunds(f'{sender} holds {balance}, needs {value}.')
        self.balances[sender] = balance - value
        self._deliver(to, value)

    def _deliver(self, to: str, value: int):
        if value == 0 or to not in self.forwards:
            self.balances[to] = self.balance_of(to) + value
            return

        # Only incoming value is passed on; earlier balance waits for a sweep.
        parent, on_forward = self.forwards[to]
        logger.debug(f"Forwarding {value} from {to} to {parent}")
        self._deliver(parent, value)
        if on_forward is not None:
            on_forward(to, value)

    def forward(self, address: str, parent: str, on_forward: Optional[ForwardHook] = None):
        if address == parent:
            raise ValueError('An address cannot forward to itself.')
        self.forwards[address] = (parent, on_forward)

    def is_forwarding(self, address: str) -> bool:
        return address in self.forwards

    def deploy(self, address: str, handler: Handler):
        self.contracts[address] = handler

    def has_code(self, address: str) -> bool:
        return address in self.contracts

    def call(self, sender: str, to: str, value: int, data: bytes) -> Optional[object]:
        self.transfer(sender, to, value)
        handler = self.contracts.get(to)
        if handler is None:
            return None
        logger.debug(f"Calling {to} from {sender} with {len(data)} bytes of data")
        return handler(sender, value, data)

    def snapshot(self) -> dict:
        return {'balances': dict(self.balances), 'forwards': dict(self.forwards)}

    def restore(self, snapshot: dict):
        self.balances = dict(snapshot['balances'])
        self.forwards = dict(snapshot['forwards'])
