from abc import ABC, abstractmethod
from loguru import logger
from pydantic import ValidationError
from threading import Lock
from typing import List, Optional, Tuple

from . import builders
from .data_types import CHAIN_PROFILES, LOG_TYPE_MAPPING, ChainType, FilterQuery, TransportType
from .exceptions import ResponseParseError
from .metrics import CURSOR_BLOCK, EVENTS_RECEIVED, PARSE_FAILURES
from .parsers import LOG_PARSERS, decode_envelope, parse_height_result
from .rpc_types import BaseLog
from .utils import decode_quantity, is_quantity


class BaseLogConnector(ABC):
    """Builds getLogs requests for one filter and tracks where the next poll starts

    The connector owns its FilterQuery. The query's `from_block` is the
    cursor and is only written while parsing a response, under `_lock`.
    """

    transport_type: TransportType

    def __init__(self, query: FilterQuery, chain_type: ChainType) -> None:
        logger.info(f"Initializing {type(self).__name__} for chain {chain_type.value}")
        self.query = query
        self.chain_type = chain_type
        self.profile = CHAIN_PROFILES[chain_type]
        self.log_class = LOG_TYPE_MAPPING[chain_type]
        self.log_parser = LOG_PARSERS[self.log_class]
        self._lock = Lock()

    @property
    def cursor(self) -> str:
        with self._lock:
            return self.query.from_block

    def effective_query(self) -> FilterQuery:
        with self._lock:
            return builders.resolve_query(self.query, self.transport_type, self.chain_type)

    def build_fetch_request(self) -> Optional[bytes]:
        """Return the getLogs request for the current cursor, or None if there is nothing to send"""
        return builders.build_fetch_request(self.effective_query(), self.chain_type)

    def decode_event(self, event: bytes) -> BaseLog:
        return self.log_class.model_validate_json(event)

    def _set_cursor(self, cursor: str) -> None:
        # Caller holds _lock
        if cursor == self.query.from_block:
            return
        logger.debug(f"Cursor moved from {self.query.from_block!r} to {cursor!r}")
        self.query.from_block = cursor
        if is_quantity(cursor):
            CURSOR_BLOCK.labels(chain=self.chain_type.value).set(decode_quantity(cursor))

    @abstractmethod
    def build_probe_request(self) -> Optional[bytes]:
        pass

    @abstractmethod
    def parse_probe_response(self, data: bytes) -> None:
        """Consume the probe response. Raises ResponseParseError if it cannot be decoded."""
        pass

    @abstractmethod
    def parse_fetch_response(self, data: bytes) -> Tuple[Optional[List[bytes]], bool]:
        """Return the events in a getLogs response and whether it could be parsed at all"""
        pass


class RpcLogConnector(BaseLogConnector):
    """Polls the node over request/response JSON-RPC"""

    transport_type = TransportType.RPC

    def build_probe_request(self) -> Optional[bytes]:
        return builders.build_probe_request(self.chain_type)

    def parse_probe_response(self, data: bytes) -> None:
        height = parse_height_result(data)
        with self._lock:
            self._set_cursor(height)
        logger.info(f"Seeded cursor for {self.chain_type.value} at {height}")

    def parse_fetch_response(self, data: bytes) -> Tuple[Optional[List[bytes]], bool]:
        try:
            msg = decode_envelope(data)
        except ResponseParseError as e:
            PARSE_FAILURES.labels(chain=self.chain_type.value).inc()
            logger.error(f"Failed parsing response: {e}")
            return None, False

        if not msg.has_result:
            PARSE_FAILURES.labels(chain=self.chain_type.value).inc()
            logger.error(f"Response carries no result: {msg.error}")
            return None, False

        try:
            logs = self.log_parser.parse_raw(msg.result)
        except ValidationError as e:
            PARSE_FAILURES.labels(chain=self.chain_type.value).inc()
            logger.error(f"Failed parsing logs in response: {e.error_count()} errors")
            return None, False

        with self._lock:
            events, cursor = self.log_parser.to_events(logs, self.query.from_block)
            self._set_cursor(cursor)

        EVENTS_RECEIVED.labels(chain=self.chain_type.value).inc(len(events))
        return events, True


class WsLogConnector(BaseLogConnector):
    """Subscription transport; the node pushes logs so there is no cursor to keep"""

    transport_type = TransportType.WS

    def build_probe_request(self) -> Optional[bytes]:
        return None

    def parse_probe_response(self, data: bytes) -> None:
        return None

    def parse_fetch_response(self, data: bytes) -> Tuple[Optional[List[bytes]], bool]:
        try:
            decode_envelope(data)
        except ResponseParseError as e:
            PARSE_FAILURES.labels(chain=self.chain_type.value).inc()
            logger.error(f"Failed parsing response: {e}")
            return None, False
        return [], True


class ConnectorFactory:
    _connectors = {
        TransportType.RPC: RpcLogConnector,
        TransportType.WS: WsLogConnector,
    }

    @classmethod
    def get_connector(cls, transport_type: str, chain_name: str, query: FilterQuery) -> BaseLogConnector:
        """
        Factory method to get the connector for a transport

        Args:
            transport_type (str): Transport from config ("rpc" or "ws")
            chain_name (str): Name of the chain
            query (FilterQuery): Initial filter, owned by the connector from here on
        Returns:
            BaseLogConnector: Instance of the appropriate connector
        """
        try:
            transport_enum = TransportType(transport_type.lower())
            chain_enum = ChainType(chain_name.lower())
        except ValueError:
            raise ValueError(
                f"Invalid transport/chain: {transport_type}/{chain_name}. "
                f"Supported transports: {[t.value for t in TransportType]}, "
                f"chains: {[c.value for c in ChainType]}"
            )
        return cls._connectors[transport_enum](query, chain_enum)


def build_connector(settings) -> BaseLogConnector:
    """Create a connector from validated settings (see utils.load_config)"""
    query = FilterQuery.from_settings(
        settings.get('filter.addresses') or [],
        settings.get('filter.topics') or [],
    )
    return ConnectorFactory.get_connector(
        transport_type=settings.get('connector.transport', TransportType.RPC.value),
        chain_name=settings.chain.name,
        query=query,
    )
