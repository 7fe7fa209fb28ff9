from .envelope import JSONRPC_VERSION, JsonRpcMessage
from .logs import BaseLog, ConfluxLog, EthereumLog

Log = ConfluxLog | EthereumLog

__all__ = [
    "JSONRPC_VERSION",
    "JsonRpcMessage",
    "BaseLog",
    "ConfluxLog",
    "EthereumLog",
    "Log",
]
