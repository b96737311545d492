import hashlib

from vault.utils.encoding import pack

DOMAIN_OPERATION = "vault.operation.v1"
DOMAIN_SIGNING = "vault.signing.v1"
DOMAIN_ACTION = "vault.action.v1"
DOMAIN_FORWARDER = "vault.forwarder.v1"
DOMAIN_VAULT = "vault.address.v1"


def sha3_hex(raw: bytes) -> str:
    h = hashlib.sha3_256()
    h.update(raw)
    return h.hexdigest()


def operation_fingerprint(instance_id: str, target: str, value: int, data: bytes) -> str:
    return sha3_hex(pack(DOMAIN_OPERATION, instance_id, target, value, data))


def signing_fingerprint(instance_id: str, target: str, value: int, data: bytes, expiry: int, sequence_id: int) -> str:
    return sha3_hex(pack(DOMAIN_SIGNING, instance_id, target, value, data, expiry, sequence_id))


def action_fingerprint(instance_id: str, name: str, *args) -> str:
    return sha3_hex(pack(DOMAIN_ACTION, instance_id, name, *args))


def forwarder_address(parent: str, nonce: int) -> str:
    return sha3_hex(pack(DOMAIN_FORWARDER, parent, nonce))


def vault_address(instance_id: str) -> str:
    return sha3_hex(pack(DOMAIN_VAULT, instance_id))
