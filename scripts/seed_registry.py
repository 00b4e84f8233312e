#!/usr/bin/env python3
"""Seed a property registry with synthetic data and persist it.

Starts a registry from the snapshot file (if one exists), creates
properties for a pool of generated owners, applies random owner updates,
then writes the snapshot back on shutdown. Listing events can be
published to Kafka or echoed to the console.

Usage::

    python scripts/seed_registry.py --properties 500 --owners 50 --seed 42
    python scripts/seed_registry.py --kafka-bootstrap localhost:9092
"""

import argparse
import logging
import random
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from property_registry.config import KafkaConfig, RegistryConfig
from property_registry.generators import PropertyGenerator
from property_registry.logging import setup_logging
from property_registry.registry import PropertyRegistry
from property_registry.sinks import ConsoleSink, KafkaSink, SnapshotFile

logger = logging.getLogger("seed_registry")


def seed(
    registry: PropertyRegistry,
    generator: PropertyGenerator,
    num_properties: int,
    num_owners: int,
    num_updates: int,
) -> None:
    """Create properties across owners, then apply owner updates."""
    owners = generator.generate_owners(num_owners)

    for submission in generator.generate_batch(num_properties):
        registry.create_property(
            address=submission.address,
            description=submission.description,
            price=submission.price,
            is_for_sale=submission.is_for_sale,
            is_for_rent=submission.is_for_rent,
            images=submission.images,
            caller=random.choice(owners),
        )
    logger.info("Created %d properties for %d owners", num_properties, num_owners)

    applied = 0
    for _ in range(num_updates):
        owner = random.choice(owners)
        mine = registry.get_my_properties(owner)
        if not mine:
            continue
        prop = random.choice(mine)
        if registry.update_property(prop.property_id, owner, generator.generate_patch(prop)):
            applied += 1
    logger.info("Applied %d/%d owner updates", applied, num_updates)


def main() -> None:
    """Run the seeding workflow."""
    config = RegistryConfig.from_env()

    parser = argparse.ArgumentParser(description="Seed a property registry with synthetic data")
    parser.add_argument("--properties", type=int, default=100, help="Properties to create (default: 100)")
    parser.add_argument("--owners", type=int, default=10, help="Distinct owners (default: 10)")
    parser.add_argument("--updates", type=int, default=50, help="Owner updates to attempt (default: 50)")
    parser.add_argument("--seed", type=int, default=config.seed, help="Random seed")
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=config.snapshot.path,
        help=f"Snapshot file (default: {config.snapshot.path})",
    )
    parser.add_argument(
        "--kafka-bootstrap",
        type=str,
        default=config.kafka.bootstrap_servers if config.events.enabled else None,
        help="Publish listing events to this Kafka cluster",
    )
    parser.add_argument("--echo-events", action="store_true", help="Print listing events to stdout")
    parser.add_argument("--search", type=str, help="Print properties matching this term at the end")
    parser.add_argument("--log-level", type=str, default=config.log_level, help="Log level")
    args = parser.parse_args()

    setup_logging(args.log_level, config.log_format)

    sinks = []
    if args.kafka_bootstrap:
        kafka_config = KafkaConfig(bootstrap_servers=args.kafka_bootstrap, acks=config.kafka.acks)
        sinks.append(KafkaSink(kafka_config))
    if args.echo_events:
        sinks.append(ConsoleSink(pretty=False))

    snapshot_file = SnapshotFile(args.snapshot, pretty=config.snapshot.pretty)
    registry = PropertyRegistry(sinks=sinks, listings_topic=config.events.listings_topic)
    registry.start(snapshot_file)

    generator = PropertyGenerator(seed=args.seed)
    seed(registry, generator, args.properties, args.owners, args.updates)

    if args.search:
        matches = registry.search_properties(args.search)
        ConsoleSink(pretty=True, max_records=10).write_batch(f"search:{args.search}", matches)

    registry.shutdown(snapshot_file)
    for sink in sinks:
        sink.close()

    print("\nRegistry summary:")
    for name, count in registry.summary().items():
        print(f"  {name}: {count:,}")


if __name__ == "__main__":
    main()
