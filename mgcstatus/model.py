import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional

from mgcstatus.util.data import split_namespace

KB = 1024
MB = 1024**2


@dataclass(frozen=True)
class Shard:
    """A document from `config.shards`"""

    id: str
    host: str

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Shard":
        return cls(id=doc["_id"], host=doc.get("host", ""))


@dataclass(frozen=True)
class Chunk:
    """A document from `config.chunks`"""

    id: str
    ns: str
    shard: str
    jumbo: bool = False
    lastmod: Optional[Any] = None  # informational only

    @classmethod
    def from_document(cls, doc: Dict[str, Any], ns: Optional[str] = None) -> "Chunk":
        return cls(
            id=str(doc["_id"]),
            ns=ns or doc.get("ns", ""),
            shard=doc["shard"],
            jumbo=bool(doc.get("jumbo", False)),
            lastmod=doc.get("lastmod"),
        )

    @property
    def database(self) -> str:
        return split_namespace(self.ns)[0]


@dataclass(frozen=True)
class Collection:
    """A document from `config.collections`"""

    ns: str
    no_balance: bool = False

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Collection":
        return cls(ns=doc["_id"], no_balance=bool(doc.get("noBalance", False)))

    @property
    def database(self) -> str:
        return split_namespace(self.ns)[0]

    @property
    def name(self) -> str:
        return split_namespace(self.ns)[1]


@dataclass(frozen=True)
class CollectionStats:
    """The relevant subset of a `collStats` command response"""

    count: int = 0
    avg_obj_size: float = 0.0

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "CollectionStats":
        return cls(count=int(doc.get("count", 0)), avg_obj_size=float(doc.get("avgObjSize", 0.0)))


@dataclass
class CollectionMetrics:
    """Chunk distribution metrics of a single collection, sizes in bytes"""

    ns: str
    chunks_num: int
    objs_num: int
    ave_chunk_size: float
    ideal_chunks_per_shard: int
    remain_chunks_num: int
    remain_chunks_size: float
    jumbo_chunks_num: int
    balancer_enabled: bool
    all_data_size: float
    shard_chunks: Dict[str, int] = dataclasses.field(default_factory=dict)
    ave_chunk_size_defined: bool = True


@dataclass
class ReportRow:
    """A presentation-ready report line, sizes converted to KB / MB"""

    name: str
    objs: int
    chunks: int
    ave_chunk_size_kb: str
    ideal_chunks_per_shard: int
    remain_chunks: int
    remain_chunks_size_kb: str
    jumbo_chunks: int
    balancer: int
    all_data_size_mb: Optional[str] = None
    shard_chunks: Dict[str, int] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_metrics(cls, metrics: CollectionMetrics, extended: bool = False) -> "ReportRow":
        return cls(
            name=metrics.ns,
            objs=metrics.objs_num,
            chunks=metrics.chunks_num,
            ave_chunk_size_kb=f"{metrics.ave_chunk_size / KB:.2f}",
            ideal_chunks_per_shard=metrics.ideal_chunks_per_shard,
            remain_chunks=metrics.remain_chunks_num,
            remain_chunks_size_kb=f"{metrics.remain_chunks_size / KB:.2f}",
            jumbo_chunks=metrics.jumbo_chunks_num,
            balancer=int(metrics.balancer_enabled),
            all_data_size_mb=f"{metrics.all_data_size / MB:.2f}" if extended else None,
            shard_chunks=dict(metrics.shard_chunks),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dataclasses.asdict(self)
        if data["all_data_size_mb"] is None:
            del data["all_data_size_mb"]
        return data
