import re


def _is_hex_of_length(s: str, length: int):
    try:
        return len(s) == length and re.fullmatch(r'[0-9a-fA-F]*', s) is not None
    except TypeError:
        return False


def vk_is_formatted(s: str):
    return _is_hex_of_length(s, 64)


def signature_is_formatted(s: str):
    return _is_hex_of_length(s, 128)


def fingerprint_is_formatted(s: str):
    return _is_hex_of_length(s, 64)


def identity_is_formatted(s: str):
    return isinstance(s, str) and len(s) > 0


def hex_data_is_formatted(s: str):
    if not isinstance(s, str):
        return False
    if s.startswith("0x"):
        s = s[2:]
    return re.fullmatch(r'([0-9a-fA-F]{2})*', s) is not None


def function_is_formatted(s: str):
    try:
        func = re.match(r'^[a-z][a-z0-9_]*$', s)
        if func is None:
            return False
        return True
    except TypeError:
        return False


def number_is_formatted(i: int):
    if type(i) != int:
        return False
    if i < 0:
        return False
    return True


def cosignature_is_formatted(d: dict):
    if not isinstance(d, dict) or set(d.keys()) != {'signer', 'signature'}:
        return False
    return vk_is_formatted(d['signer']) and signature_is_formatted(d['signature'])


REQUEST_RULES = {
    'sender': identity_is_formatted,
    'function': function_is_formatted,
    'kwargs': lambda k: isinstance(k, dict),
}

KWARG_RULES = {
    'target': identity_is_formatted,
    'value': number_is_formatted,
    'data': hex_data_is_formatted,
    'operation': fingerprint_is_formatted,
    'expiry': number_is_formatted,
    'sequence_id': number_is_formatted,
    'cosignature': cosignature_is_formatted,
    'owner': identity_is_formatted,
    'old_owner': identity_is_formatted,
    'new_owner': identity_is_formatted,
    'required': number_is_formatted,
    'ceiling': number_is_formatted,
    'nonce': number_is_formatted,
}
