import asyncio

import pytest
from dynaconf.validator import ValidationError as ConfigValidationError

from log_connector.utils import (
    async_retry,
    decode_quantity,
    encode_quantity,
    hex_to_address,
    hex_to_hash,
    is_quantity,
    load_config,
)


@pytest.mark.parametrize("value, expected", [
    ("0x0", 0),
    ("0x64", 100),
    ("0xFF", 255),
    ("0X1a", 26),
])
def test_decode_quantity(value, expected):
    assert decode_quantity(value) == expected


@pytest.mark.parametrize("value", ["", "0x", "64", "0x0064", "0xzz", "0x1_0", None, "0x" + "1" * 65])
def test_decode_quantity_rejects(value):
    with pytest.raises(ValueError):
        decode_quantity(value)
    assert not is_quantity(value)


def test_encode_quantity():
    assert encode_quantity(0) == "0x0"
    assert encode_quantity(101) == "0x65"


def test_hex_to_address_truncates_and_pads():
    assert hex_to_address("0x" + "12" * 32) == "0x" + "12" * 20
    assert hex_to_address("0xABCDEF") == "0x" + "00" * 17 + "abcdef"


def test_hex_to_hash():
    assert hex_to_hash("0x1") == "0x" + "00" * 31 + "01"


CONFIG = """
chain:
  name: conflux
  rpc_urls:
    - http://127.0.0.1:12537

filter:
  addresses:
    - "0x{address}"
  topics:
    - "0x{topic}"
""".format(address="aa" * 20, topic="11" * 32)


def test_load_config_defaults(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(CONFIG)
    settings = load_config(path)
    assert settings.chain.name == "conflux"
    assert settings.get('connector.transport') == "rpc"
    assert settings.get('connector.poll_interval') == 5
    assert settings.get('connector.strict_filter') is False
    assert list(settings.get('filter.addresses')) == ["0x" + "aa" * 20]


def test_load_config_rejects_multiple_chains(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(CONFIG + "\nchain:\n  name: ethereum\n")
    with pytest.raises(ValueError, match="Multiple active 'chain' sections"):
        load_config(path)


def test_load_config_rejects_unknown_chain(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(CONFIG.replace("name: conflux", "name: solana"))
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_load_config_rejects_unknown_transport(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(CONFIG + "\nconnector:\n  transport: carrier-pigeon\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_async_retry_recovers():
    calls = []

    @async_retry(retries=3, base_delay=0, jitter=False)
    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise ConnectionError("boom")
        return "ok"

    assert asyncio.run(flaky()) == "ok"
    assert len(calls) == 3


def test_async_retry_gives_up():
    @async_retry(retries=2, base_delay=0, jitter=False)
    async def broken():
        raise ConnectionError("boom")

    with pytest.raises(ConnectionError):
        asyncio.run(broken())
