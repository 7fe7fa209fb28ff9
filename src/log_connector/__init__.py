from .connector import (
    BaseLogConnector,
    ConnectorFactory,
    RpcLogConnector,
    WsLogConnector,
    build_connector,
)
from .data_types import ChainType, FilterQuery, TransportType
from .exceptions import ConflictingRangeError, ConnectorError, ResponseParseError

__all__ = [
    "BaseLogConnector",
    "ConnectorFactory",
    "RpcLogConnector",
    "WsLogConnector",
    "build_connector",
    "ChainType",
    "FilterQuery",
    "TransportType",
    "ConflictingRangeError",
    "ConnectorError",
    "ResponseParseError",
]
