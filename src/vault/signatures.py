from dataclasses import dataclass

import nacl
import nacl.signing
import nacl.encoding
import nacl.exceptions
from loguru import logger

from vault.exceptions import (
    CosignerIsSender,
    CosignerNotOwner,
    SignatureExpired,
    SignatureInvalid,
)
from vault.formatting import signature_is_formatted, vk_is_formatted


@dataclass(frozen=True)
class CoSignature:
    signer: str
    signature: str


def generate_keypair() -> tuple[str, str]:
    """Returns (signing key hex, verify key hex)."""
    sk = nacl.signing.SigningKey.generate()
    return (
        sk.encode(encoder=nacl.encoding.HexEncoder).decode(),
        sk.verify_key.encode(encoder=nacl.encoding.HexEncoder).decode(),
    )


def verify_key_for(sk: str) -> str:
    signing_key = nacl.signing.SigningKey(bytes.fromhex(sk))
    return signing_key.verify_key.encode(encoder=nacl.encoding.HexEncoder).decode()


def sign(sk: str, msg: str) -> str:
    signing_key = nacl.signing.SigningKey(bytes.fromhex(sk))
    signed = signing_key.sign(msg.encode())
    return signed.signature.hex()


def verify(vk: str, msg: str, signature: str):
    if not vk_is_formatted(vk) or not signature_is_formatted(signature):
        return False
    vk = nacl.signing.VerifyKey(bytes.fromhex(vk))
    try:
        vk.verify(msg.encode(), bytes.fromhex(signature))
    except nacl.exceptions.BadSignatureError:
        return False
    return True


class SignatureAuthorizer:
    """
    Checks a co-signer's off-chain signature over a signing fingerprint.

    The signature must verify under the declared signer key, the signer must
    be a current owner distinct from the sender, and the signature must not
    have expired. Sequence ids are checked by the engine, which owns them.
    """

    def __init__(self, registry):
        self.registry = registry

    def authorize(self, sender: str, fingerprint: str, cosignature: CoSignature, expiry: int, now: int) -> str:
        if not verify(cosignature.signer, fingerprint, cosignature.signature):
            logger.warning(f"Rejected co-signature from {cosignature.signer} over {fingerprint}")
            raise SignatureInvalid("Signature does not match the signed fields")

        if not self.registry.is_owner(cosignature.signer):
            logger.warning(f"Co-signer {cosignature.signer} is not an owner")
            raise CosignerNotOwner(cosignature.signer)

        if cosignature.signer == sender:
            raise CosignerIsSender(sender)

        if expiry <= now:
            raise SignatureExpired(f"Signature expired at {expiry}, now {now}")

        return cosignature.signer
