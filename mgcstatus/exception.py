class ChunkStatusError(Exception):
    pass


class GatewayError(ChunkStatusError):
    """
    Reading cluster metadata failed. The underlying driver error is
    available through `__cause__`.
    """

    pass


class NoShardsError(ChunkStatusError):
    STANDARD_MESSAGE = "Cluster has no shards, unable to compute ideal chunks per shard"

    def __init__(self, message: str = None):
        if not message:
            message = self.STANDARD_MESSAGE
        super().__init__(message)


class DivisionUndefined(ChunkStatusError):
    STANDARD_MESSAGE = "Collection has no chunks, average chunk size is undefined"

    def __init__(self, message: str = None):
        if not message:
            message = self.STANDARD_MESSAGE
        super().__init__(message)
