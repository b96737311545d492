from loguru import logger

from vault import requests as r
from vault.constants import Constants as c
from vault.engine import Outcome
from vault.exceptions import EXCEPTION_MAP, OperationNotFound, VaultException
from vault.operations import OperationView
from vault.utils.encoding import data_to_hex


def error_for(exc: Exception) -> dict:
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_MAP:
            return dict(EXCEPTION_MAP[cls])
    return dict(EXCEPTION_MAP[VaultException])


def view_to_dict(view: OperationView) -> dict:
    action = view.action
    action_dict = {'type': type(action).__name__}
    for key, value in vars(action).items():
        action_dict[key] = data_to_hex(value) if isinstance(value, bytes) else value
    return {
        'operation': view.operation,
        'initiator': view.initiator,
        'action': action_dict,
        'confirmations_needed': view.confirmations_needed,
        'signers': list(view.signers),
        'awaiting': list(view.awaiting),
    }


class RequestProcessor:
    def __init__(self, vault):
        self.vault = vault

    def dispatch(self, request):
        v = self.vault

        if isinstance(request, r.Execute):
            return v.execute(request.sender, request.target, request.value, request.data)
        if isinstance(request, r.Confirm):
            return v.confirm(request.sender, request.operation)
        if isinstance(request, r.Revoke):
            return v.revoke(request.sender, request.operation)
        if isinstance(request, r.ExecuteAndConfirm):
            return v.execute_and_confirm(
                request.sender,
                request.target,
                request.value,
                request.data,
                request.expiry,
                request.sequence_id,
                request.cosignature,
            )
        if isinstance(request, r.AddOwner):
            return v.add_owner(request.sender, request.owner)
        if isinstance(request, r.RemoveOwner):
            return v.remove_owner(request.sender, request.owner)
        if isinstance(request, r.ReplaceOwner):
            return v.replace_owner(request.sender, request.old_owner, request.new_owner)
        if isinstance(request, r.ChangeRequirement):
            return v.change_requirement(request.sender, request.required)
        if isinstance(request, r.SetDailyLimit):
            return v.set_daily_limit(request.sender, request.ceiling)
        if isinstance(request, r.ResetSpentToday):
            return v.reset_spent_today(request.sender)
        if isinstance(request, r.CreateForwarder):
            return v.create_forwarder(request.sender)
        if isinstance(request, r.FlushForwarder):
            return v.flush_forwarder(request.nonce)
        if isinstance(request, r.Deposit):
            return v.deposit(request.sender, request.value)

        raise TypeError(f'Unknown request {request!r}')

    def process(self, raw: dict) -> dict:
        """
        Parse and run one request. Engine errors come back as a failed
        result; the vault state is untouched in that case.
        """
        first_event = len(self.vault.events)

        try:
            request = r.parse_request(raw)
            output = self.dispatch(request)
        except OperationNotFound as e:
            logger.debug(f"Operation not pending: {e}")
            return {'status': c.NotFoundCode, 'result': None, 'events': [], **error_for(e)}
        except VaultException as e:
            logger.debug(f"Request rejected: {type(e).__name__}: {e}")
            return {'status': c.ErrorCode, 'result': None, 'events': [], **error_for(e)}
        except Exception as e:
            logger.error(f"Request failed: {e}")
            return {'status': c.ErrorCode, 'result': None, 'events': [], **error_for(e)}

        return {
            'status': c.OkCode,
            'result': self.format_output(output),
            'events': [e.to_dict() for e in self.vault.events.since(first_event)],
        }

    def format_output(self, output):
        if isinstance(output, Outcome):
            return {'status': output.status.value, 'operation': output.operation}
        return output
