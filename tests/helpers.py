from vault import CoSignature, Ledger, Vault
from vault.signatures import generate_keypair, sign

DAY = 86400
START = 19676 * DAY + 3600
INSTANCE_ID = "test-vault"


class FakeClock:
    def __init__(self, now: int = START):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int):
        self.now += seconds


class Owner:
    def __init__(self):
        self.sk, self.vk = generate_keypair()

    def __repr__(self):
        return f"Owner({self.vk[:8]})"


def make_owners(n: int) -> list:
    return [Owner() for _ in range(n)]


def make_vault(owners, required=2, daily_limit=0, funds=2000, clock=None, **kwargs) -> Vault:
    vault = Vault(
        owners=[o.vk for o in owners],
        required=required,
        daily_limit=daily_limit,
        ledger=Ledger(),
        clock=clock if clock is not None else FakeClock(),
        instance_id=INSTANCE_ID,
        **kwargs
    )
    vault.ledger.credit(vault.address, funds)
    return vault


def cosign(vault, owner, target, value, data, expiry, sequence_id) -> CoSignature:
    fingerprint = vault.signing_fingerprint(target, value, data, expiry, sequence_id)
    return CoSignature(signer=owner.vk, signature=sign(owner.sk, fingerprint))


def event_names(vault) -> list:
    return [e.kind.value for e in vault.events]
