import asyncio
from dynaconf import Dynaconf, Validator
from eth_utils import is_0x_prefixed, is_hexstr, remove_0x_prefix
from functools import wraps
from hexbytes import HexBytes
from loguru import logger
from pathlib import Path
import random
from typing import Union

# Quantities are uint256 on the wire
MAX_QUANTITY_DIGITS = 64


def hex_to_str(hex_value: HexBytes) -> str:
    # Ensure input is HexBytes type
    if not isinstance(hex_value, HexBytes):
        raise TypeError(f"Expected HexBytes, got {type(hex_value)}")

    # Convert to hex string, maintaining '0x' prefix
    return '0x' + hex_value.hex().removeprefix('0x')

def _left_pad(value: str, size: int) -> str:
    raw = bytes(HexBytes(value))[-size:]
    return hex_to_str(HexBytes(raw.rjust(size, b'\x00')))

def hex_to_address(value: str) -> str:
    """Normalize a hex string to a 20-byte, lowercase, 0x-prefixed address.

    Longer input keeps its trailing 20 bytes, shorter input is left-padded
    with zeros.
    """
    return _left_pad(value, 20)

def hex_to_hash(value: str) -> str:
    """Normalize a hex string to a 32-byte, lowercase, 0x-prefixed hash."""
    return _left_pad(value, 32)

def decode_quantity(value: Union[str, None]) -> int:
    """Decode a JSON-RPC hex quantity into an unsigned integer

    Params:
        value (str): Quantity such as "0x64"

    Raises:
        ValueError: if the value is missing the 0x prefix, empty, has leading
            zeros, contains non-hex characters or exceeds 256 bits
    """
    if not isinstance(value, str) or not is_0x_prefixed(value):
        raise ValueError(f"Quantity {value!r} is missing the 0x prefix")
    digits = remove_0x_prefix(value)
    if not digits:
        raise ValueError(f"Quantity {value!r} is empty")
    if not is_hexstr(value):
        raise ValueError(f"Quantity {value!r} is not valid hex")
    if len(digits) > 1 and digits[0] == '0':
        raise ValueError(f"Quantity {value!r} has leading zero digits")
    if len(digits) > MAX_QUANTITY_DIGITS:
        raise ValueError(f"Quantity {value!r} is larger than 256 bits")
    return int(digits, 16)

def is_quantity(value: Union[str, None]) -> bool:
    try:
        decode_quantity(value)
    except ValueError:
        return False
    return True

def encode_quantity(value: int) -> str:
    return hex(value)

def setup_logging(log_file: str | None = None) -> None:
    """Add a rotating file sink to the loguru logger when a path is configured"""
    if log_file:
        logger.add(log_file, rotation="100 MB", retention="10 days")

def load_config(file_path: Union[str, Path]) -> Dynaconf:
    """Load and validate connector configuration from a chain config file

    Ensures that only one chain configuration is active.

    Params:
        file_path (str | Path): Path to the YAML config file

    Returns:
        Dynaconf: Validated configuration object
    """
    # Imported here to keep utils free of a data_types import cycle
    from .data_types import ChainType, TransportType

    config_path = Path(file_path)

    # Validate that only one 'chain' section is active
    active_chain_count = 0
    with config_path.open('r') as f:
        for line in f:
            stripped_line = line.strip()
            # Check if the line starts with 'chain:' and is not commented out
            if stripped_line.startswith('chain:') and not line.lstrip().startswith('#'):
                active_chain_count += 1
                if active_chain_count > 1:
                    raise ValueError(f"Configuration Error: Multiple active 'chain' sections found in {config_path.name}. Please ensure only one 'chain' configuration is active.")

    settings = Dynaconf(
        settings_files=[str(config_path)],
        envvar_prefix="LOG_CONNECTOR",
        validators=[
            # Validate structure and types
            Validator('chain.name', must_exist=True,
                     is_type_of=str,
                     condition=lambda x: x.islower() and x == x.strip(),
                     messages={"condition": "Chain name must be lowercase with no leading/trailing spaces"}
            ),
            Validator('chain.name', is_in=[c.value for c in ChainType]),
            Validator('chain.rpc_urls', must_exist=True, is_type_of=list),
            Validator('connector.transport', default=TransportType.RPC.value,
                     is_in=[t.value for t in TransportType]),
            Validator('connector.poll_interval', default=5,
                     is_type_of=(int, float),
                     condition=lambda x: x > 0,
                     messages={"condition": "Poll interval must be positive"}
            ),
            Validator('connector.strict_filter', default=False, is_type_of=bool),
            Validator('filter.addresses', default=[], is_type_of=list),
            Validator('filter.topics', default=[], is_type_of=list),
            Validator('metrics.enabled', default=False, is_type_of=bool),
            Validator('metrics.port', default=8000, is_type_of=int),
            Validator('logging.file', default=None),
        ]
    )
    # Validate all settings at once
    settings.validators.validate()

    return settings

# Decorator for implementing retry logic with exponential backoff for async functions
def async_retry(
    retries: int = 3,
    base_delay: float = 1,
    exponential_backoff: bool = True,
    jitter: bool = True,
):
    """
    Decorator for implementing retry logic with exponential backoff for async functions.

    :param retries: int, number of retry attempts
    :param base_delay: float, base delay between retries in seconds
    :param exponential_backoff: bool, whether to use exponential backoff
    :param jitter: bool, whether to add random jitter to the delay
    :return: function, decorated function
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            for attempt in range(1, retries + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if attempt == retries:
                        logger.error(
                            f"All retry attempts failed for {func.__name__}: {str(e)}"
                        )
                        raise

                    delay = (
                        base_delay * (2 ** (attempt - 1))
                        if exponential_backoff
                        else base_delay
                    )
                    if jitter:
                        delay *= random.uniform(1.0, 1.5)

                    logger.warning(
                        f"Attempt {attempt} failed for {func.__name__}. Retrying in {delay:.2f} seconds. Error: {str(e)}"
                    )
                    await asyncio.sleep(delay)

        return wrapper
    return decorator
