import json

from log_connector import ChainType, FilterQuery, TransportType
from log_connector.builders import build_fetch_request, build_probe_request, resolve_query

from conftest import ADDRESS_A, TOPIC_TRANSFER


def test_resolve_query_uses_head_tag_for_rpc():
    query = FilterQuery()
    resolved = resolve_query(query, TransportType.RPC, ChainType.CONFLUX)
    assert resolved.from_block == "latest_state"
    assert query.from_block == ""


def test_resolve_query_ethereum_head_tag():
    resolved = resolve_query(FilterQuery(), TransportType.RPC, ChainType.ETHEREUM)
    assert resolved.from_block == "latest"


def test_resolve_query_keeps_cursor():
    query = FilterQuery(from_block="0x64")
    assert resolve_query(query, TransportType.RPC, ChainType.CONFLUX) is query


def test_resolve_query_ignores_ws():
    query = FilterQuery()
    assert resolve_query(query, TransportType.WS, ChainType.CONFLUX).from_block == ""


def test_build_fetch_request_envelope():
    query = FilterQuery(addresses=[ADDRESS_A], topics=[[TOPIC_TRANSFER]], from_block="0x10")
    request = json.loads(build_fetch_request(query, ChainType.CONFLUX))
    assert request == {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "cfx_getLogs",
        "params": [{
            "address": [ADDRESS_A],
            "topics": [[TOPIC_TRANSFER]],
            "fromBlock": "0x10",
            "toBlock": "latest",
        }],
    }


def test_build_fetch_request_ethereum_method():
    request = json.loads(build_fetch_request(FilterQuery(), ChainType.ETHEREUM))
    assert request["method"] == "eth_getLogs"


def test_build_fetch_request_conflict_returns_none():
    query = FilterQuery(block_hash="0x" + "cd" * 32, from_block="0x1")
    assert build_fetch_request(query, ChainType.CONFLUX) is None


def test_build_probe_request():
    request = json.loads(build_probe_request(ChainType.CONFLUX))
    assert request == {"jsonrpc": "2.0", "id": 1, "method": "cfx_epochNumber"}


def test_build_probe_request_ethereum():
    request = json.loads(build_probe_request(ChainType.ETHEREUM))
    assert request["method"] == "eth_blockNumber"
    assert "params" not in request
