from pydantic import ValidationError

from ..exceptions import ResponseParseError
from ..rpc_types import JsonRpcMessage


def decode_envelope(data: bytes) -> JsonRpcMessage:
    try:
        return JsonRpcMessage.model_validate_json(data)
    except ValidationError as e:
        raise ResponseParseError(f"Malformed JSON-RPC envelope: {e}", data=data) from e


def parse_height_result(data: bytes) -> str:
    """Extract the string result of a height probe response, unmodified"""
    msg = decode_envelope(data)
    if msg.error is not None:
        raise ResponseParseError(f"Node returned an error: {msg.error}", data=data)
    if not msg.has_result or not isinstance(msg.result, str):
        raise ResponseParseError(f"Expected a string result, got {msg.result!r}", data=data)
    return msg.result
