import asyncio
import time
from loguru import logger
from pydantic import ValidationError
from typing import Awaitable, Callable, List, Optional

from .connector import BaseLogConnector
from .exceptions import ResponseParseError
from .metrics import RPC_ERRORS, RPC_LATENCY, RPC_REQUESTS
from .transport import Transport

EventHandler = Callable[[List[bytes]], Awaitable[None]]


class LogPoller:
    """Drives a connector: probe once, then fetch on a fixed interval.

    Transport failures and unparsable responses end the current cycle only;
    the next cycle retries from the same cursor.
    """

    def __init__(
        self,
        connector: BaseLogConnector,
        transport: Transport,
        handler: Optional[EventHandler] = None,
        poll_interval: float = 5,
        strict_filter: bool = False,
    ) -> None:
        self.connector = connector
        self.transport = transport
        self.handler = handler
        self.poll_interval = poll_interval
        self.strict_filter = strict_filter
        self.chain = connector.chain_type.value

    async def _send(self, payload: bytes, method: str) -> bytes:
        start_time = time.time()
        try:
            response = await self.transport.send(payload)
        except Exception:
            RPC_ERRORS.labels(chain=self.chain, method=method).inc()
            raise
        RPC_REQUESTS.labels(chain=self.chain, method=method).inc()
        RPC_LATENCY.labels(chain=self.chain, method=method).observe(time.time() - start_time)
        return response

    async def probe(self) -> None:
        request = self.connector.build_probe_request()
        if request is None:
            return

        response = await self._send(request, self.connector.profile.height_method)
        try:
            self.connector.parse_probe_response(response)
        except ResponseParseError as e:
            logger.warning(f"Could not seed cursor from probe response, starting from chain head: {e}")

    def _filter_events(self, events: List[bytes]) -> List[bytes]:
        kept = []
        for event in events:
            try:
                log = self.connector.decode_event(event)
            except ValidationError as e:
                logger.warning(f"Dropping undecodable event: {e}")
                continue
            if self.connector.query.matches(log):
                kept.append(event)
            else:
                logger.debug(f"Dropping log {log.transaction_hash}:{log.log_index} outside the filter")
        return kept

    async def run_once(self) -> List[bytes]:
        """Run one fetch cycle and return the events it produced"""
        request = self.connector.build_fetch_request()
        if request is None:
            logger.warning("No fetch request to send for the current query")
            return []

        response = await self._send(request, self.connector.profile.get_logs_method)
        events, ok = self.connector.parse_fetch_response(response)
        if not ok:
            logger.error(f"Could not parse getLogs response, cursor stays at {self.connector.cursor!r}")
            return []

        if self.strict_filter:
            events = self._filter_events(events)

        if events:
            logger.info(f"Received {len(events)} events, next poll from {self.connector.cursor}")
            if self.handler is not None:
                await self.handler(events)
        return events

    async def run(self, max_cycles: Optional[int] = None) -> None:
        """Poll until cancelled, or for `max_cycles` cycles when given"""
        logger.info(f"Starting log poller for {self.chain} every {self.poll_interval}s")
        try:
            await self.probe()
        except Exception as e:
            logger.error(f"Probe failed: {type(e).__name__}: {str(e)}")

        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Poll cycle failed: {type(e).__name__}: {str(e)}")
            cycles += 1
            if max_cycles is None or cycles < max_cycles:
                await asyncio.sleep(self.poll_interval)
