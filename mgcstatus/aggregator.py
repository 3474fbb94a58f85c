import logging
import typing as t
from collections import defaultdict
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from mgcstatus.analyzer import analyze_collection
from mgcstatus.config import ErrorPolicy, ReportOptions
from mgcstatus.exception import ChunkStatusError
from mgcstatus.gateway import MetadataGateway
from mgcstatus.model import Chunk, Collection, ReportRow, Shard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterSnapshot:
    """Cluster metadata of one database, read once per run"""

    database: str
    shards: t.Tuple[Shard, ...]
    chunks: t.Tuple[Chunk, ...]
    collections: t.Tuple[Collection, ...]
    chunks_by_ns: t.Dict[str, t.Tuple[Chunk, ...]] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        grouped: t.Dict[str, t.List[Chunk]] = defaultdict(list)
        for chunk in self.chunks:
            grouped[chunk.ns].append(chunk)
        object.__setattr__(self, "chunks_by_ns", {ns: tuple(chunks) for ns, chunks in grouped.items()})

    def chunks_of(self, ns: str) -> t.Tuple[Chunk, ...]:
        return self.chunks_by_ns.get(ns, ())


class CollectionAggregator:
    """
    Run the chunk distribution analysis for all collections of a database,
    one worker per collection, and assemble the report rows in order of
    collection namespace.
    """

    def __init__(self, gateway: MetadataGateway, options: t.Optional[ReportOptions] = None):
        self.gateway = gateway
        self.options = options or ReportOptions()

    def snapshot(self) -> ClusterSnapshot:
        database = self.options.database
        logger.info(f"Reading cluster metadata for database '{database}'")
        shards = self.gateway.list_shards()
        chunks = self.gateway.list_chunks(database)
        collections = self.gateway.list_collections(database)

        # Exclude foreign databases, and chunks of unknown collections.
        collections = [collection for collection in collections if collection.database == database]
        known = {collection.ns for collection in collections}
        chunks = [chunk for chunk in chunks if chunk.database == database and chunk.ns in known]

        logger.info(f"Found {len(shards)} shards, {len(collections)} collections, {len(chunks)} chunks")
        return ClusterSnapshot(
            database=database,
            shards=tuple(sorted(shards, key=lambda shard: shard.id)),
            chunks=tuple(chunks),
            collections=tuple(sorted(collections, key=lambda collection: collection.ns)),
        )

    def report(self) -> t.List[ReportRow]:
        return self.assemble(self.snapshot())

    def assemble(self, snapshot: ClusterSnapshot) -> t.List[ReportRow]:
        """
        Fan out one analysis task per collection, and fan in results into
        slots indexed by the collection's position in the sorted snapshot.
        """
        slots: t.List[t.Optional[ReportRow]] = [None] * len(snapshot.collections)
        if not slots:
            logger.warning(f"Database '{snapshot.database}' has no sharded collections")
            return []

        executor = ThreadPoolExecutor(max_workers=self.options.max_workers, thread_name_prefix="mgcstatus")
        try:
            futures: t.List[Future] = [
                executor.submit(self.analyze, snapshot, collection) for collection in snapshot.collections
            ]
            if self.options.on_error is ErrorPolicy.ABORT:
                wait(futures, return_when=FIRST_EXCEPTION)
                failed = [index for index, future in enumerate(futures) if future.done() and future.exception()]
                if failed:
                    executor.shutdown(wait=False, cancel_futures=True)
                    logger.error(f"Analysis of {snapshot.collections[failed[0]].ns} failed, aborting report")
                    raise futures[failed[0]].exception()
            for index, future in enumerate(futures):
                try:
                    slots[index] = future.result()
                except ChunkStatusError as ex:
                    logger.warning(f"Skipping {snapshot.collections[index].ns}: {ex}")
        finally:
            executor.shutdown(wait=True)

        return [row for row in slots if row is not None]

    def analyze(self, snapshot: ClusterSnapshot, collection: Collection) -> ReportRow:
        stats = self.gateway.collection_stats(collection.database, collection.name)
        metrics = analyze_collection(
            ns=collection.ns,
            chunks=snapshot.chunks_of(collection.ns),
            shards=snapshot.shards,
            stats=stats,
            no_balance=collection.no_balance,
            legacy_arithmetic=self.options.legacy_arithmetic,
        )
        return ReportRow.from_metrics(metrics, extended=self.options.extended)
