from vault.constants import Constants as c
from vault.exceptions import SequenceIdInvalid, SequenceIdReplayed


class SequenceStorage:
    """
    Replay guard for signature-authorized calls.

    Ids only have to be unused, not increasing. next_sequence_id is advisory:
    one more than the highest id ever accepted. With a non-zero window, ids
    at or below highest - window are refused and forgotten.
    """

    def __init__(self, window: int = c.SEQUENCE_WINDOW):
        self.window = window
        self.used = set()
        self.highest = c.FIRST_SEQUENCE_ID - 1

    @property
    def next_sequence_id(self) -> int:
        return self.highest + 1

    @property
    def floor(self) -> int:
        if not self.window:
            return c.FIRST_SEQUENCE_ID - 1
        return max(self.highest - self.window, c.FIRST_SEQUENCE_ID - 1)

    def is_used(self, sequence_id: int) -> bool:
        return sequence_id in self.used or sequence_id <= self.floor

    def check(self, sequence_id: int):
        if type(sequence_id) != int or sequence_id < c.FIRST_SEQUENCE_ID:
            raise SequenceIdInvalid(f'Sequence id {sequence_id} is not valid.')
        if self.is_used(sequence_id):
            raise SequenceIdReplayed(f'Sequence id {sequence_id} has already been used.')

    def consume(self, sequence_id: int):
        self.check(sequence_id)
        self.used.add(sequence_id)
        if sequence_id > self.highest:
            self.highest = sequence_id
            self._prune()

    def _prune(self):
        if self.window:
            floor = self.floor
            self.used = {s for s in self.used if s > floor}
