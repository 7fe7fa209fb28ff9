class ConnectorError(Exception):
    """Base class for errors raised by the log connector"""


class ConflictingRangeError(ConnectorError, ValueError):
    def __init__(self, message: str = "cannot specify both block_hash and from_block/to_block"):
        super().__init__(message)


class ResponseParseError(ConnectorError):
    def __init__(self, message: str, *, data: bytes | None = None):
        super().__init__(message)
        self.data = data
