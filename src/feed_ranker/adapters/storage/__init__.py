"""Storage adapters."""

from feed_ranker.adapters.serialization import SnapshotError
from feed_ranker.adapters.storage.yaml_snapshot import YamlSnapshotRepository

__all__ = ["SnapshotError", "YamlSnapshotRepository"]
