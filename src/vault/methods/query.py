from loguru import logger

from vault.constants import Constants as c
from vault.exceptions import RequestFormattingError
from vault.processor import view_to_dict


def query(vault, path: str) -> dict:
    """
    Answer a read-only query
    Ex. "/is_owner/<address>", "/owner_at/0", "/pending"
    """

    logger.debug(path)
    path_parts = [part for part in path.split("/") if part]
    result = None
    try:
        if not path_parts:
            raise ValueError("Empty query path")

        # /is_owner/<address>
        elif path_parts[0] == "is_owner":
            result = vault.is_owner(path_parts[1])

        # /owner_count
        elif path_parts[0] == "owner_count":
            result = vault.owner_count()

        # /owner_at/<index>
        elif path_parts[0] == "owner_at":
            result = vault.owner_at(int(path_parts[1]))

        # /owners
        elif path_parts[0] == "owners":
            result = vault.owners()

        # /required
        elif path_parts[0] == "required":
            result = vault.required

        # /pending
        elif path_parts[0] == "pending":
            result = [view_to_dict(view) for view in vault.pending_operations()]

        # /has_confirmed/<operation>/<owner>
        elif path_parts[0] == "has_confirmed":
            result = vault.has_confirmed(path_parts[1], path_parts[2])

        # /daily_limit
        elif path_parts[0] == "daily_limit":
            result = vault.daily_limit

        # /spent_today
        elif path_parts[0] == "spent_today":
            result = vault.spent_today()

        # /remaining_today
        elif path_parts[0] == "remaining_today":
            result = vault.remaining_today()

        # /next_sequence_id
        elif path_parts[0] == "next_sequence_id":
            result = vault.next_sequence_id()

        # /balance
        elif path_parts[0] == "balance":
            result = vault.balance()

        # /forwarder/<nonce>
        elif path_parts[0] == "forwarder":
            result = vault.forwarding_address(int(path_parts[1]))

        # /ping
        elif path_parts[0] == "ping":
            result = {'status': 'online'}

        else:
            raise ValueError(f"Unknown query path {path}")

    except (IndexError, ValueError, RequestFormattingError) as err:
        logger.error(err)
        return {'code': c.ErrorCode, 'log': str(err), 'value': None}

    return {'code': c.OkCode, 'value': result}
