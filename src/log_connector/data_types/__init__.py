from dataclasses import dataclass
from enum import Enum
from typing import Type
from ..rpc_types.logs import BaseLog, ConfluxLog, EthereumLog
from .filter_query import FilterQuery

# Add new chains here. Applicable for all chains!
class ChainType(Enum):
    CONFLUX = "conflux"
    ETHEREUM = "ethereum"

# Add new transports here. Only RPC polling drives the cursor.
class TransportType(Enum):
    RPC = "rpc"
    WS = "ws"

@dataclass(frozen=True)
class ChainProfile:
    method_prefix: str
    height_method: str
    head_tag: str  # fromBlock used before the first poll resolves a cursor

    @property
    def get_logs_method(self) -> str:
        return f"{self.method_prefix}_getLogs"

# Mapping of ChainType to its JSON-RPC naming
# Add new chains here. Applicable for all chains!
CHAIN_PROFILES: dict[ChainType, ChainProfile] = {
    ChainType.CONFLUX: ChainProfile(
        method_prefix="cfx",
        height_method="cfx_epochNumber",
        head_tag="latest_state",
    ),
    ChainType.ETHEREUM: ChainProfile(
        method_prefix="eth",
        height_method="eth_blockNumber",
        head_tag="latest",
    ),
}

# Mapping of ChainType to Log class
# Add new chains here. Applicable for all chains!
# If the new chain does not fit an existing class, add a new class and add it to the mapping.
LOG_TYPE_MAPPING: dict[ChainType, Type[BaseLog]] = {
    ChainType.CONFLUX: ConfluxLog,
    ChainType.ETHEREUM: EthereumLog,
}

__all__ = [
    "ChainType",
    "TransportType",
    "ChainProfile",
    "CHAIN_PROFILES",
    "LOG_TYPE_MAPPING",
    "FilterQuery",
]
