import binascii

from loguru import logger

# Type tags for packed fields
TAG_INT = b"i"
TAG_STR = b"s"
TAG_BYTES = b"b"

UINT256_MAX = (1 << 256) - 1


def encode_str(value):
    return value.encode("utf-8")


def _u32(x: int) -> bytes:
    return x.to_bytes(4, "big")


def pack_field(value) -> bytes:
    if isinstance(value, bool):
        raise TypeError("Booleans cannot be packed.")
    if isinstance(value, int):
        if value < 0 or value > UINT256_MAX:
            raise ValueError(f"Integer {value} is out of uint256 range.")
        return TAG_INT + value.to_bytes(32, "big")
    if isinstance(value, str):
        raw = encode_str(value)
        return TAG_STR + _u32(len(raw)) + raw
    if isinstance(value, (bytes, bytearray)):
        return TAG_BYTES + _u32(len(value)) + bytes(value)
    raise TypeError(f"Cannot pack value of type {type(value).__name__}.")


def pack(*fields) -> bytes:
    """
    Order-sensitive, type-tagged, length-prefixed concatenation.
    Two different tuples never share an encoding.
    """
    return b"".join(pack_field(f) for f in fields)


def data_from_hex(value: str) -> bytes:
    if value.startswith("0x"):
        value = value[2:]
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        logger.error(f"Call data is not valid hex: {e}")
        raise


def data_to_hex(data: bytes) -> str:
    return binascii.hexlify(data).decode()
