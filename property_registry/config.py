"""Configuration management for property-registry."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from property_registry.exceptions import ConfigurationError


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class SnapshotConfig:
    """Where the registry snapshot lives between process restarts."""

    path: Path = field(default_factory=lambda: Path("state") / "registry.json")
    pretty: bool = False


@dataclass
class EventConfig:
    """Listing change event publication."""

    enabled: bool = False
    topic_prefix: str = "dev.registry"

    @property
    def listings_topic(self) -> str:
        """Topic receiving listing upsert/remove events."""
        return f"{self.topic_prefix}.listings"


@dataclass
class RegistryConfig:
    """Main configuration for property-registry."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)
    events: EventConfig = field(default_factory=EventConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Create config from environment variables."""
        import os

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
        )

        snapshot = SnapshotConfig(
            path=Path(os.getenv("SNAPSHOT_PATH", str(Path("state") / "registry.json"))),
            pretty=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        events = EventConfig(
            enabled=os.getenv("PUBLISH_EVENTS", "false").lower() == "true",
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.registry"),
        )

        seed_str = os.getenv("SEED")
        try:
            seed = int(seed_str) if seed_str else None
        except ValueError as e:
            raise ConfigurationError(f"SEED must be an integer, got {seed_str!r}") from e

        return cls(
            kafka=kafka,
            snapshot=snapshot,
            events=events,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
