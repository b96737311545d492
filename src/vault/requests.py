from dataclasses import dataclass

from vault.exceptions import RequestFormattingError
from vault.formatting import KWARG_RULES, REQUEST_RULES
from vault.signatures import CoSignature
from vault.utils.encoding import data_from_hex


@dataclass(frozen=True)
class Execute:
    sender: str
    target: str
    value: int
    data: bytes = b""


@dataclass(frozen=True)
class Confirm:
    sender: str
    operation: str


@dataclass(frozen=True)
class Revoke:
    sender: str
    operation: str


@dataclass(frozen=True)
class ExecuteAndConfirm:
    sender: str
    target: str
    value: int
    data: bytes
    expiry: int
    sequence_id: int
    cosignature: CoSignature


@dataclass(frozen=True)
class AddOwner:
    sender: str
    owner: str


@dataclass(frozen=True)
class RemoveOwner:
    sender: str
    owner: str


@dataclass(frozen=True)
class ReplaceOwner:
    sender: str
    old_owner: str
    new_owner: str


@dataclass(frozen=True)
class ChangeRequirement:
    sender: str
    required: int


@dataclass(frozen=True)
class SetDailyLimit:
    sender: str
    ceiling: int


@dataclass(frozen=True)
class ResetSpentToday:
    sender: str


@dataclass(frozen=True)
class CreateForwarder:
    sender: str


@dataclass(frozen=True)
class FlushForwarder:
    sender: str
    nonce: int


@dataclass(frozen=True)
class Deposit:
    sender: str
    value: int


# function name -> (request type, required kwargs, optional kwargs)
REQUEST_SHAPES = {
    'execute': (Execute, ('target', 'value'), ('data',)),
    'confirm': (Confirm, ('operation',), ()),
    'revoke': (Revoke, ('operation',), ()),
    'execute_and_confirm': (
        ExecuteAndConfirm,
        ('target', 'value', 'expiry', 'sequence_id', 'cosignature'),
        ('data',),
    ),
    'add_owner': (AddOwner, ('owner',), ()),
    'remove_owner': (RemoveOwner, ('owner',), ()),
    'replace_owner': (ReplaceOwner, ('old_owner', 'new_owner'), ()),
    'change_requirement': (ChangeRequirement, ('required',), ()),
    'set_daily_limit': (SetDailyLimit, ('ceiling',), ()),
    'reset_spent_today': (ResetSpentToday, (), ()),
    'create_forwarder': (CreateForwarder, (), ()),
    'flush_forwarder': (FlushForwarder, ('nonce',), ()),
    'deposit': (Deposit, ('value',), ()),
}


def check_request_keys(raw: dict):
    if not isinstance(raw, dict):
        raise RequestFormattingError("Request must be a dictionary")
    if set(raw.keys()) != set(REQUEST_RULES.keys()):
        raise RequestFormattingError("Request has unexpected or missing keys")
    for key, rule in REQUEST_RULES.items():
        if not rule(raw[key]):
            raise RequestFormattingError(f"Request key '{key}' is wrongly formatted")


def parse_request(raw: dict):
    """
    Validate a raw {"sender", "function", "kwargs"} request and build the
    matching request variant. Nothing is executed here.
    """
    check_request_keys(raw)

    function = raw['function']
    if function not in REQUEST_SHAPES:
        raise RequestFormattingError(f"Unknown function '{function}'")

    request_type, required, optional = REQUEST_SHAPES[function]
    kwargs = raw['kwargs']

    missing = [k for k in required if k not in kwargs]
    if missing:
        raise RequestFormattingError(f"Missing kwargs: {', '.join(missing)}")

    unexpected = set(kwargs.keys()) - set(required) - set(optional)
    if unexpected:
        raise RequestFormattingError(f"Unexpected kwargs: {', '.join(sorted(unexpected))}")

    for key, value in kwargs.items():
        if not KWARG_RULES[key](value):
            raise RequestFormattingError(f"Kwarg '{key}' is wrongly formatted")

    fields = dict(kwargs)
    if 'data' in fields:
        fields['data'] = data_from_hex(fields['data'])
    elif 'data' in optional:
        fields['data'] = b""
    if 'cosignature' in fields:
        fields['cosignature'] = CoSignature(**fields['cosignature'])

    return request_type(sender=raw['sender'], **fields)
