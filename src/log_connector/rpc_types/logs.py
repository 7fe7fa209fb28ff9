from pydantic import BaseModel, Field, StrictStr, field_validator
from typing import List, Optional

# Fields a node may send as null; treated the same as an absent string
STRING_FIELDS = (
    "log_index",
    "block_number",
    "block_hash",
    "transaction_hash",
    "transaction_index",
    "address",
    "data",
)

class BaseLog(BaseModel):
    """A log object from a getLogs result, kept as the node sent it.

    Quantities stay hex strings. Subclasses only differ in the key the node
    uses for the containing block's number.
    """
    model_config = {
        "arbitrary_types_allowed": False,
        "populate_by_name": True,
    }

    log_index: StrictStr = Field("", alias="logIndex")
    block_number: StrictStr = Field("", alias="blockNumber")
    block_hash: StrictStr = Field("", alias="blockHash")
    transaction_hash: StrictStr = Field("", alias="transactionHash")
    transaction_index: StrictStr = Field("", alias="transactionIndex")
    address: StrictStr = ""
    data: StrictStr = ""
    topics: Optional[List[StrictStr]] = None

    @field_validator(*STRING_FIELDS, mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value

    def to_event(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode()

# Conflux reports the epoch a log was executed in instead of a block number
class ConfluxLog(BaseLog):
    block_number: StrictStr = Field("", alias="epochNumber")

# Same as BaseLog, kept here for clarity and completeness
class EthereumLog(BaseLog):
    pass
