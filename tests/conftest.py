# Copyright (c) 2021-2023, Crate.io Inc.
# Distributed under the terms of the AGPLv3 license, see LICENSE.
import os
import typing as t
from unittest.mock import MagicMock

import pytest

from mgcstatus.gateway import MetadataGateway
from mgcstatus.model import Chunk, Collection, CollectionMetrics, CollectionStats, ReportRow, Shard


@pytest.fixture(scope="session", autouse=True)
def prune_environment():
    """
    Delete all environment variables starting with `MGCSTATUS_`,
    to prevent leaking from the developer's environment to the test suite.
    """
    envvars = []
    for envvar in os.environ.keys():
        if envvar.startswith("MGCSTATUS_"):
            envvars.append(envvar)
    for envvar in envvars:
        os.environ.pop(envvar, None)


def make_shards(count: int) -> t.List[Shard]:
    return [Shard(id=f"shard{index:02d}", host=f"rs{index}/mongod{index}:27018") for index in range(count)]


def make_chunks(ns: str, distribution: t.Dict[str, int], jumbo: int = 0) -> t.List[Chunk]:
    """
    Create chunks of a collection, `distribution` maps shard ids to chunk counts.
    The first `jumbo` chunks are flagged as jumbo.
    """
    chunks = []
    for shard_id, count in distribution.items():
        for _ in range(count):
            chunks.append(Chunk(id=f"{ns}-{len(chunks)}", ns=ns, shard=shard_id, jumbo=len(chunks) < jumbo))
    return chunks


def make_row(ns: str = "test.users", extended: bool = False) -> ReportRow:
    metrics = CollectionMetrics(
        ns=ns,
        chunks_num=10,
        objs_num=5000,
        ave_chunk_size=128000.0,
        ideal_chunks_per_shard=4,
        remain_chunks_num=4,
        remain_chunks_size=512000.0,
        jumbo_chunks_num=1,
        balancer_enabled=False,
        all_data_size=1280000.0,
        shard_chunks={"shard00": 8, "shard01": 2},
    )
    return ReportRow.from_metrics(metrics, extended=extended)


@pytest.fixture
def gateway() -> MagicMock:
    """
    A metadata gateway serving a small cluster: three shards, and the
    database `test` with two collections, one of them not balanced.
    """
    shards = make_shards(3)
    chunks = (
        make_chunks("test.users", {"shard00": 3, "shard01": 3, "shard02": 3})
        + make_chunks("test.logs", {"shard00": 8, "shard01": 2}, jumbo=1)
        + make_chunks("other.events", {"shard00": 4})
    )
    collections = [Collection(ns="test.users"), Collection(ns="test.logs", no_balance=True)]
    stats = {
        "users": CollectionStats(count=900, avg_obj_size=1024.0),
        "logs": CollectionStats(count=5000, avg_obj_size=256.0),
    }

    gateway = MagicMock(spec=MetadataGateway)
    gateway.list_shards.return_value = shards
    gateway.list_chunks.return_value = chunks
    gateway.list_collections.return_value = collections
    gateway.collection_stats.side_effect = lambda database, collection: stats[collection]
    return gateway
