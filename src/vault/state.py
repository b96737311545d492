import copy
from dataclasses import dataclass, field

from vault.daily_limit import DailyLimitTracker
from vault.operations import OperationLog
from vault.owners import OwnerRegistry
from vault.sequence import SequenceStorage


@dataclass
class WalletState:
    registry: OwnerRegistry
    daily_limit: DailyLimitTracker
    operations: OperationLog = field(default_factory=OperationLog)
    sequences: SequenceStorage = field(default_factory=SequenceStorage)
    forwarder_nonce: int = 0
    forwarders: list = field(default_factory=list)

    def snapshot(self) -> 'WalletState':
        return copy.deepcopy(self)
