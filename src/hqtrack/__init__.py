"""hqtrack - Async ingest server for *HQ protocol GPS terminals."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("hqtrack")
except PackageNotFoundError:
    __version__ = "0+local"
from hqtrack._transport import FrameReader
from hqtrack.config import HqConfig
from hqtrack.exceptions import (
    HqConfigError,
    HqDecodeError,
    HqError,
    HqStoreError,
    HqTransportError,
)
from hqtrack.ingestion.packet import decode_packet
from hqtrack.models import Neighbor, Packet, Position, Reading, StoredReading, UnknownPacket
from hqtrack.server import TrackerServer, open_store, run_server
from hqtrack.session import ConnectionSession
from hqtrack.state.events import MergeAction, MergePlan
from hqtrack.state.policy import decide_merge
from hqtrack.state.sql import SqlLocationStore
from hqtrack.state.store import InMemoryLocationStore, LocationStore

__all__ = [
    "__version__",
    "ConnectionSession",
    "FrameReader",
    "HqConfig",
    "HqConfigError",
    "HqDecodeError",
    "HqError",
    "HqStoreError",
    "HqTransportError",
    "InMemoryLocationStore",
    "LocationStore",
    "MergeAction",
    "MergePlan",
    "Neighbor",
    "Packet",
    "Position",
    "Reading",
    "SqlLocationStore",
    "StoredReading",
    "TrackerServer",
    "UnknownPacket",
    "decide_merge",
    "decode_packet",
    "open_store",
    "run_server",
]
