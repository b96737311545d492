from typing import Callable, Optional

from loguru import logger

from vault.utils.hash import forwarder_address


def derive_forwarding_address(parent: str, nonce: int) -> str:
    return forwarder_address(parent, nonce)


class Forwarder:
    """
    Deposit addresses derived from the parent address and a nonce.

    Once created, value arriving at a forwarding address goes straight to the
    parent. Anything sent there before creation stays put until swept.
    """

    def __init__(self, ledger, parent: str, on_forward: Optional[Callable[[str, int], None]] = None):
        self.ledger = ledger
        self.parent = parent
        self.on_forward = on_forward

    def address(self, nonce: int) -> str:
        return derive_forwarding_address(self.parent, nonce)

    def create(self, nonce: int) -> str:
        address = self.address(nonce)
        self.ledger.forward(address, self.parent, self.on_forward)
        logger.info(f"Forwarding {address} into {self.parent}")
        return address

    def sweep(self, nonce: int) -> tuple[str, int]:
        address = self.address(nonce)
        amount = self.ledger.balance_of(address)
        if amount > 0:
            self.ledger.transfer(address, self.parent, amount)
            logger.info(f"Swept {amount} from {address} into {self.parent}")
        return address, amount
