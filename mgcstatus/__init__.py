# ruff: noqa: E402
from importlib.metadata import PackageNotFoundError, version

__appname__ = "mgcstatus"

try:
    __version__ = version(__appname__)
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"

from .aggregator import CollectionAggregator
from .analyzer import analyze_collection
from .config import ReportOptions
from .gateway import MetadataGateway

__all__ = [
    "CollectionAggregator",
    "MetadataGateway",
    "ReportOptions",
    "analyze_collection",
]
