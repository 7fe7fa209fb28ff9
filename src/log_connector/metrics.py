from prometheus_client import Counter, Gauge, Histogram, start_http_server
from loguru import logger

# Request metrics
RPC_REQUESTS = Counter(
    'connector_rpc_requests_total',
    'Total number of JSON-RPC requests sent',
    ['chain', 'method']
)

RPC_ERRORS = Counter(
    'connector_rpc_errors_total',
    'Total number of failed JSON-RPC round trips',
    ['chain', 'method']
)

RPC_LATENCY = Histogram(
    'connector_rpc_latency_seconds',
    'JSON-RPC round trip latency',
    ['chain', 'method'],
    buckets=[0.025, 0.05, 0.075, 0.1, 0.15, 0.2, 0.3, 0.5, 1.0, 5.0, 10.0]
)

# Response metrics
PARSE_FAILURES = Counter(
    'connector_parse_failures_total',
    'Total number of responses that could not be parsed',
    ['chain']
)

EVENTS_RECEIVED = Counter(
    'connector_events_received_total',
    'Total number of log events returned to the caller',
    ['chain']
)

CURSOR_BLOCK = Gauge(
    'connector_cursor_block_number',
    'Block number the next poll starts from',
    ['chain']
)

def start_metrics_server(port: int = 8000, addr: str = '0.0.0.0'):
    """Start Prometheus metrics server

    Args:
        port (int): Port to listen on
        addr (str): Address to bind to (default: all interfaces)
    """
    logger.info(f"Starting Prometheus metrics server on {addr}:{port}")
    start_http_server(port, addr)
