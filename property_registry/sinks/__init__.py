"""Output sinks for registry events and snapshot persistence."""

from property_registry.sinks.console import ConsoleSink
from property_registry.sinks.json_file import SnapshotFile
from property_registry.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "KafkaSink", "SnapshotFile"]
