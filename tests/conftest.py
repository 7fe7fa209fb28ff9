import json

import pytest

from log_connector import ChainType, FilterQuery, RpcLogConnector, WsLogConnector

ADDRESS_A = "0x" + "aa" * 20
ADDRESS_B = "0x" + "bb" * 20
TOPIC_TRANSFER = "0x" + "11" * 32
TOPIC_APPROVAL = "0x" + "22" * 32


def rpc_response(**members) -> bytes:
    body = {"jsonrpc": "2.0", "id": 1, **members}
    return json.dumps(body).encode()


def conflux_log(epoch: str, address: str = ADDRESS_A, topics=None, log_index: str = "0x0") -> dict:
    return {
        "logIndex": log_index,
        "epochNumber": epoch,
        "blockHash": "0x" + "cd" * 32,
        "transactionHash": "0x" + "ef" * 32,
        "transactionIndex": "0x0",
        "address": address,
        "data": "0x",
        "topics": topics if topics is not None else [TOPIC_TRANSFER],
    }


@pytest.fixture
def rpc_connector():
    return RpcLogConnector(FilterQuery(), ChainType.CONFLUX)


@pytest.fixture
def ws_connector():
    return WsLogConnector(FilterQuery(), ChainType.CONFLUX)
