from loguru import logger
from pydantic import ValidationError
from typing import Optional

from .data_types import CHAIN_PROFILES, ChainType, FilterQuery, TransportType
from .exceptions import ConflictingRangeError
from .rpc_types import JsonRpcMessage

REQUEST_ID = 1


def resolve_query(query: FilterQuery, transport: TransportType, chain: ChainType) -> FilterQuery:
    """Return the query a fetch request should actually carry

    Polling RPC with no cursor yet starts from the chain head. The input is
    never modified; a copy is returned when a default has to be filled in.
    """
    if transport == TransportType.RPC and query.from_block == "":
        return query.model_copy(update={"from_block": CHAIN_PROFILES[chain].head_tag})
    return query


def build_fetch_request(query: FilterQuery, chain: ChainType) -> Optional[bytes]:
    """Build a "<prefix>_getLogs" request for the query, or None if it cannot be encoded"""
    try:
        filter_arg = query.encode()
        msg = JsonRpcMessage(
            id=REQUEST_ID,
            method=CHAIN_PROFILES[chain].get_logs_method,
            params=[filter_arg],
        )
        return msg.to_bytes()
    except ConflictingRangeError as e:
        logger.warning(f"Invalid filter query: {e}")
        return None
    except (TypeError, ValueError, ValidationError) as e:
        logger.warning(f"Failed to serialize getLogs request: {type(e).__name__}: {e}")
        return None


def build_probe_request(chain: ChainType) -> Optional[bytes]:
    """Build a request for the chain's current height"""
    try:
        msg = JsonRpcMessage(
            id=REQUEST_ID,
            method=CHAIN_PROFILES[chain].height_method,
        )
        return msg.to_bytes()
    except (TypeError, ValueError) as e:
        logger.warning(f"Failed to serialize probe request: {e}")
        return None
