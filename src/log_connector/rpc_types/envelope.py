from pydantic import BaseModel
from typing import Any, List, Optional

JSONRPC_VERSION = "2.0"

class JsonRpcMessage(BaseModel):
    """JSON-RPC 2.0 request or response envelope"""
    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    method: Optional[str] = None
    params: Optional[List[Any]] = None
    result: Any = None
    error: Optional[Any] = None

    @property
    def has_result(self) -> bool:
        # A null result is still a result; an error response carries none
        return "result" in self.model_fields_set

    def to_bytes(self) -> bytes:
        omitted = {
            name for name in ("method", "params", "result", "error")
            if getattr(self, name) is None
        }
        return self.model_dump_json(exclude=omitted).encode()
