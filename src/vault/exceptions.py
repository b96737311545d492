class VaultException(Exception):
    pass


class NotOwner(VaultException):
    pass


class NotEligible(VaultException):
    pass


class OperationNotFound(VaultException):
    pass


class AlreadyConfirmed(VaultException):
    pass


class SignatureInvalid(VaultException):
    pass


class CosignerNotOwner(SignatureInvalid):
    pass


class CosignerIsSender(SignatureInvalid):
    pass


class SignatureExpired(VaultException):
    pass


class SequenceIdReplayed(VaultException):
    pass


class SequenceIdInvalid(VaultException):
    pass


class InvariantViolation(VaultException):
    pass


class OwnerAlreadyExists(InvariantViolation):
    pass


class OwnerNotFound(InvariantViolation):
    pass


class TooManyOwners(InvariantViolation):
    pass


class RequirementInvalid(InvariantViolation):
    pass


class OwnerRemovalInvalid(InvariantViolation):
    pass


class InsufficientFunds(VaultException):
    pass


class RequestFormattingError(VaultException):
    pass

EXCEPTION_MAP = {
    NotOwner: {"error": "Sender is not an owner of this vault."},
    NotEligible: {"error": "Owner joined after this operation was proposed."},
    OperationNotFound: {"error": "Operation is not pending."},
    AlreadyConfirmed: {"error": "Owner has already confirmed this operation."},
    SignatureInvalid: {"error": "Co-signer signature is invalid."},
    CosignerNotOwner: {"error": "Co-signer is not an owner of this vault."},
    CosignerIsSender: {"error": "Co-signer and sender must be different owners."},
    SignatureExpired: {"error": "Signature has expired."},
    SequenceIdReplayed: {"error": "Sequence id has already been used."},
    SequenceIdInvalid: {"error": "Sequence id must be a positive integer."},
    InvariantViolation: {"error": "Owner set invariant would be violated."},
    OwnerAlreadyExists: {"error": "Address is already an owner."},
    OwnerNotFound: {"error": "Address is not an owner."},
    TooManyOwners: {"error": "Owner limit reached."},
    RequirementInvalid: {"error": "Requirement must be between one and the number of owners."},
    OwnerRemovalInvalid: {"error": "Removing this owner would leave fewer owners than required."},
    InsufficientFunds: {"error": "Vault balance is too low for this transfer."},
    RequestFormattingError: {"error": "Request is not formatted properly."},
    VaultException: {"error": "Another error has occurred."},
}
