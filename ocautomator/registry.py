"""JSON-backed store of provisioned clusters, partitioned by platform."""
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jsonschema import ValidationError, validate

logger = logging.getLogger(__name__)

STORE_SCHEMA = {
    "type": "object",
    "properties": {
        "clusters": {
            "type": "object",
            "additionalProperties": {
                "type": ["array", "null"],
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "dir": {"type": "string"},
                        "platform": {"type": "string"},
                    },
                    "required": ["name", "dir", "platform"],
                },
            },
        }
    },
    "required": ["clusters"],
}


class StoreError(Exception):
    """Base class for cluster store failures."""


class StoreNotFoundError(StoreError, FileNotFoundError):
    """The cluster store file does not exist."""


class StoreParseError(StoreError, ValueError):
    """The cluster store file is not valid JSON or has the wrong shape."""


@dataclass(frozen=True)
class ClusterRecord:
    """Metadata for one provisioned cluster."""
    name: str
    directory: str
    platform: str

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ClusterRecord":
        return ClusterRecord(name=data["name"], directory=data["dir"], platform=data["platform"])

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "dir": self.directory, "platform": self.platform}


@dataclass
class ClusterStore:
    """All known clusters keyed by platform name, each list in insertion order."""
    clusters: Dict[str, List[ClusterRecord]] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ClusterStore":
        clusters = {
            platform: [ClusterRecord.from_dict(item) for item in (items or [])]
            for platform, items in data["clusters"].items()
        }
        return ClusterStore(clusters=clusters)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clusters": {
                platform: [record.to_dict() for record in records]
                for platform, records in self.clusters.items()
            }
        }

    def records(self, platform: str) -> List[ClusterRecord]:
        return list(self.clusters.get(platform, []))


def load_store(path: str) -> ClusterStore:
    """Read the cluster store at ``path``.

    Raises:
        StoreNotFoundError: if the file does not exist
        StoreParseError: if the file is not valid JSON or not a cluster store
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise StoreNotFoundError(f"file {path} does not exist") from e
    except json.JSONDecodeError as e:
        raise StoreParseError(f"unable to get cluster data from file {path}: {e}") from e

    try:
        validate(instance=data, schema=STORE_SCHEMA)
    except ValidationError as ve:
        raise StoreParseError(f"unable to get cluster data from file {path}: {ve.message}") from ve

    return ClusterStore.from_dict(data)


def save_store(store: ClusterStore, path: str) -> None:
    """Replace the file at ``path`` with the serialized store."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, mode=0o755, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".clusterinfo-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(store.to_dict(), f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    logger.debug(f"💾 Saved cluster store to {path}")


def append_record(store: ClusterStore, record: ClusterRecord) -> ClusterStore:
    store.clusters.setdefault(record.platform, []).append(record)
    return store


def remove_record(store: ClusterStore, record: ClusterRecord) -> ClusterStore:
    """Drop the first record equal to ``record``; absent records are ignored."""
    records = store.clusters.get(record.platform)
    if records and record in records:
        records.remove(record)
    else:
        logger.debug(f"🔍 {record.name} not present in store, nothing to remove")
    return store


def find_record(store: ClusterStore, platform: str, name: str) -> Optional[ClusterRecord]:
    """Most recently added record named ``name`` on ``platform``."""
    for record in reversed(store.clusters.get(platform, [])):
        if record.name == name:
            return record
    return None


def record_cluster(record: ClusterRecord, path: str) -> ClusterStore:
    """Add ``record`` to the store at ``path``, creating the store if needed."""
    try:
        store = load_store(path)
    except StoreNotFoundError:
        store = ClusterStore()
    append_record(store, record)
    save_store(store, path)
    return store


def forget_cluster(record: ClusterRecord, path: str) -> ClusterStore:
    """Remove ``record`` from the existing store at ``path``."""
    store = load_store(path)
    remove_record(store, record)
    save_store(store, path)
    return store
