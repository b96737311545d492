from vault.engine import Outcome, Status, Vault
from vault.ledger import Ledger
from vault.signatures import CoSignature

__all__ = ['CoSignature', 'Ledger', 'Outcome', 'Status', 'Vault']
