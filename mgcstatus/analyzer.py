"""
Chunk Distribution Analysis for sharded MongoDB collections

Pure computations turning a collection's chunks, the cluster's shards, and
the collection's statistics into balance metrics.
"""

import logging
import math
from collections import Counter
from typing import Dict, Sequence

from mgcstatus.exception import DivisionUndefined, NoShardsError
from mgcstatus.model import Chunk, CollectionMetrics, CollectionStats, Shard

logger = logging.getLogger(__name__)


def average_chunk_size(objs_num: int, chunks_num: int, avg_obj_size: float, legacy: bool = False) -> float:
    """
    Estimate the average chunk size in bytes.

    The object count is divided by the chunk count first, truncating to an
    integer, then multiplied by the average object size. In legacy mode, the
    average object size is truncated as well.
    """
    if chunks_num == 0:
        raise DivisionUndefined()
    if legacy:
        return float(objs_num // chunks_num * int(avg_obj_size))
    return (objs_num // chunks_num) * avg_obj_size


def ideal_chunks_per_shard(chunks_num: int, shards_num: int) -> int:
    """Chunks each shard would hold if the collection was perfectly balanced"""
    if shards_num <= 0:
        raise NoShardsError()
    if chunks_num <= shards_num:
        return 1
    return math.ceil(chunks_num / shards_num)


def chunks_by_shard(chunks: Sequence[Chunk], shards: Sequence[Shard]) -> Dict[str, int]:
    """
    Count chunks per shard. Every shard of the cluster is present, including
    those holding no chunk of this collection.
    """
    counter = Counter(chunk.shard for chunk in chunks)
    return {shard.id: counter.get(shard.id, 0) for shard in shards}


def remain_chunks(shard_chunks: Dict[str, int], ideal: int) -> int:
    """Sum of chunks above the ideal on overloaded shards"""
    return sum(max(0, count - ideal) for count in shard_chunks.values())


def analyze_collection(
    ns: str,
    chunks: Sequence[Chunk],
    shards: Sequence[Shard],
    stats: CollectionStats,
    no_balance: bool = False,
    legacy_arithmetic: bool = False,
) -> CollectionMetrics:
    """
    Compute the chunk distribution metrics of a single collection.

    Raises `NoShardsError` when the cluster has no shards. A collection
    without chunks yields zero for its size metrics, flagged by
    `ave_chunk_size_defined=False`.
    """
    chunks_num = len(chunks)
    objs_num = stats.count

    ave_chunk_size_defined = True
    try:
        ave_chunk_size = average_chunk_size(objs_num, chunks_num, stats.avg_obj_size, legacy=legacy_arithmetic)
    except DivisionUndefined as ex:
        logger.warning(f"{ns}: {ex}")
        ave_chunk_size = 0.0
        ave_chunk_size_defined = False

    ideal = ideal_chunks_per_shard(chunks_num, len(shards))
    shard_chunks = chunks_by_shard(chunks, shards)
    remain_chunks_num = remain_chunks(shard_chunks, ideal)

    metrics = CollectionMetrics(
        ns=ns,
        chunks_num=chunks_num,
        objs_num=objs_num,
        ave_chunk_size=ave_chunk_size,
        ideal_chunks_per_shard=ideal,
        remain_chunks_num=remain_chunks_num,
        remain_chunks_size=remain_chunks_num * ave_chunk_size,
        jumbo_chunks_num=sum(1 for chunk in chunks if chunk.jumbo),
        balancer_enabled=not no_balance,
        all_data_size=stats.avg_obj_size * objs_num,
        shard_chunks=shard_chunks,
        ave_chunk_size_defined=ave_chunk_size_defined,
    )
    logger.debug(f"Analyzed {ns}: {metrics}")
    return metrics
