from pydantic import BaseModel, Field
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import ConflictingRangeError
from ..rpc_types.logs import BaseLog
from ..utils import hex_to_address, hex_to_hash

# Cursor values that stand for "resolve dynamically" rather than a block number
OPEN_CURSORS = ("latest", "")


class FilterQuery(BaseModel):
    """Log filter criteria sent as the single param of a getLogs request.

    `from_block` doubles as the connector's cursor: the lower bound of the
    next poll.

    The topic list restricts matches to particular event topics. Each event
    has a list of topics and the filter matches a prefix of that list. An
    empty position matches any topic, a non-empty position is a set of
    alternatives:

        []                 matches any topic list
        [[A]]              matches topic A in first position
        [[], [B]]          matches any topic in first position AND B in second
        [[A], [B]]         matches A in first position AND B in second
        [[A, B], [C, D]]   matches (A OR B) in first position AND (C OR D) in second
    """
    model_config = {
        "validate_assignment": True,
    }

    block_hash: Optional[str] = None
    from_block: str = ""
    to_block: str = ""
    addresses: List[str] = Field(default_factory=list)
    topics: List[List[str]] = Field(default_factory=list)

    @classmethod
    def from_settings(cls, addresses: Iterable[str], topics: Iterable[str]) -> "FilterQuery":
        """Build a query from plain config strings.

        All non-empty topics are collected into a single first-position set.
        """
        first_position = [hex_to_hash(t) for t in topics if t]
        return cls(
            addresses=[hex_to_address(a) for a in addresses],
            topics=[first_position],
        )

    def encode(self) -> Dict[str, Any]:
        arg: Dict[str, Any] = {
            "address": list(self.addresses) or None,
            "topics": [list(position) or None for position in self.topics] or None,
        }
        if self.block_hash is not None:
            if self.from_block != "" or self.to_block != "":
                raise ConflictingRangeError()
            arg["blockHash"] = self.block_hash
        else:
            arg["fromBlock"] = self.from_block or "0x0"
            arg["toBlock"] = self.to_block or "latest"
        return arg

    def matches(self, log: BaseLog) -> bool:
        if self.block_hash is not None and log.block_hash.lower() != self.block_hash.lower():
            return False

        if self.addresses:
            wanted = {a.lower() for a in self.addresses}
            if log.address.lower() not in wanted:
                return False

        log_topics = log.topics or []
        if len(self.topics) > len(log_topics):
            return False
        for alternatives, topic in zip(self.topics, log_topics):
            if alternatives and topic.lower() not in {t.lower() for t in alternatives}:
                return False
        return True
