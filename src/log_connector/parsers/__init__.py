from .logs import (
    BaseLogParser,
    ConfluxLogParser,
    EthereumLogParser,
    advance_cursor,
)
from .responses import decode_envelope, parse_height_result
from ..rpc_types import (
    ConfluxLog,
    EthereumLog,
)

# Mapping to connect types with their parsers
LOG_PARSERS = {
    ConfluxLog: ConfluxLogParser,
    EthereumLog: EthereumLogParser,
}

__all__ = [
    "BaseLogParser",
    "ConfluxLogParser",
    "EthereumLogParser",
    "LOG_PARSERS",
    "advance_cursor",
    "decode_envelope",
    "parse_height_result",
]
