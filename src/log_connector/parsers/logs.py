from loguru import logger
from pydantic import TypeAdapter
from typing import Any, List, Tuple, Type

from ..data_types.filter_query import OPEN_CURSORS
from ..rpc_types import BaseLog, ConfluxLog, EthereumLog
from ..utils import decode_quantity, encode_quantity


def advance_cursor(cursor: str, block_number: str) -> str:
    """Return the cursor after seeing a log from `block_number`

    The next poll starts strictly after the newest block seen, so the
    candidate is block_number + 1. An open cursor ("latest" or "") always
    moves; a numeric cursor only moves forward. Anything undecodable leaves
    the cursor as it is.
    """
    try:
        candidate = decode_quantity(block_number) + 1
    except ValueError:
        return cursor

    if cursor in OPEN_CURSORS:
        return encode_quantity(candidate)

    try:
        current = decode_quantity(cursor)
    except ValueError:
        return cursor

    if candidate > current:
        return encode_quantity(candidate)
    return cursor


class BaseLogParser:
    log_class: Type[BaseLog] = BaseLog

    @classmethod
    def parse_raw(cls, result: Any) -> List[BaseLog]:
        # A null result is an empty batch; anything else must be a list of log objects
        if result is None:
            return []
        return TypeAdapter(List[cls.log_class]).validate_python(result)

    @staticmethod
    def to_events(logs: List[BaseLog], cursor: str) -> Tuple[List[bytes], str]:
        events = []
        for log in logs:
            try:
                event = log.to_event()
            except ValueError as e:
                logger.warning(f"Skipping log {log.transaction_hash}:{log.log_index}, failed to serialize: {e}")
                continue
            events.append(event)

            new_cursor = advance_cursor(cursor, log.block_number)
            if new_cursor == cursor:
                logger.debug(f"Cursor {cursor!r} unchanged by log in block {log.block_number!r}")
            cursor = new_cursor

        return events, cursor

class ConfluxLogParser(BaseLogParser):
    log_class = ConfluxLog

class EthereumLogParser(BaseLogParser):
    # Ethereum logs are identical to base logs
    log_class = EthereumLog
