"""Property registry service: the public operation surface."""

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Iterable, Protocol

from property_registry.exceptions import InvalidFieldError, RegistryStateError
from property_registry.models import Event, Listing, Property, PropertyPatch
from property_registry.store.property_store import PropertyStore, utc_now
from property_registry.store.snapshot import PersistenceSnapshot, RegistrySnapshot

if TYPE_CHECKING:
    from property_registry.sinks.json_file import SnapshotFile

logger = logging.getLogger(__name__)

DEFAULT_LISTINGS_TOPIC = "dev.registry.listings"


class EventSink(Protocol):
    """Anything listing events can be published to."""

    def send(self, topic: str, record: object, key: str | None = None) -> None: ...

    def flush(self) -> None: ...


class PropertyRegistry:
    """Owner-scoped property registry with a derived sale/rent view.

    All operations, reads included, run under one reentrant lock. That
    lock is the single serialization point: a reader sees the state
    before or after any mutation, never in between, and nothing runs
    while a snapshot or restore is in progress.

    Parameters
    ----------
    sinks : Iterable[EventSink]
        Receivers of ``listing.upserted`` / ``listing.removed`` events.
    listings_topic : str
        Topic name events are published under.
    clock : Callable[[], datetime]
        Time source for ``created_at``/``updated_at``/``listed_at``.
    """

    def __init__(
        self,
        sinks: Iterable[EventSink] = (),
        listings_topic: str = DEFAULT_LISTINGS_TOPIC,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = PropertyStore(clock=clock)
        self._persistence = PersistenceSnapshot(self._store)
        self._lock = threading.RLock()
        self.sinks = list(sinks)
        self.listings_topic = listings_topic

    # Public operations
    def create_property(
        self,
        address: str,
        description: str,
        price: int,
        is_for_sale: bool,
        is_for_rent: bool,
        images: Iterable[str],
        caller: str,
    ) -> int:
        """Register a new property owned by ``caller`` and return its id."""
        _check_text("address", address)
        _check_text("description", description)
        _check_price(price)
        _check_flag("is_for_sale", is_for_sale)
        _check_flag("is_for_rent", is_for_rent)
        images = _check_images(images)

        with self._lock:
            property_id = self._store.create(
                address=address,
                description=description,
                price=price,
                is_for_sale=is_for_sale,
                is_for_rent=is_for_rent,
                images=images,
                owner=caller,
            )
            self._publish(self._store.drain_events())
        return property_id

    def get_property(self, property_id: int) -> Property | None:
        """Get any property by id; reads are not restricted to the owner."""
        with self._lock:
            return self._store.get(property_id)

    def get_my_properties(self, caller: str) -> list[Property]:
        """Get the properties ``caller`` created, oldest first."""
        with self._lock:
            return self._store.list_by_owner(caller)

    def get_all_listings(self) -> list[Listing]:
        """Get every current sale and rent listing."""
        with self._lock:
            return self._store.listings.list_all()

    def update_property(self, property_id: int, caller: str, patch: PropertyPatch) -> bool:
        """Apply ``patch`` if ``caller`` owns the property.

        Returns False both when the property does not exist and when the
        caller is not its owner.
        """
        if patch.address is not None:
            _check_text("address", patch.address)
        if patch.description is not None:
            _check_text("description", patch.description)
        if patch.price is not None:
            _check_price(patch.price)
        if patch.is_for_sale is not None:
            _check_flag("is_for_sale", patch.is_for_sale)
        if patch.is_for_rent is not None:
            _check_flag("is_for_rent", patch.is_for_rent)
        if patch.images is not None:
            patch = replace(patch, images=_check_images(patch.images))

        with self._lock:
            updated = self._store.update(property_id, caller, patch)
            if updated:
                self._publish(self._store.drain_events())
        if not updated:
            logger.info("Rejected update of property %s by %s", property_id, caller)
        return updated

    def search_properties(self, term: str) -> list[Property]:
        """Find properties mentioning ``term`` in address or description."""
        with self._lock:
            return self._store.search(term)

    def summary(self) -> dict[str, int]:
        """Return summary counts of the registry."""
        with self._lock:
            return self._store.summary()

    # Lifecycle hooks
    def snapshot(self) -> RegistrySnapshot:
        """Flatten all state for persistence before teardown."""
        with self._lock:
            return self._persistence.snapshot()

    def restore(self, snapshot: RegistrySnapshot) -> None:
        """Rebuild all state from a snapshot at startup.

        Raises
        ------
        RegistryStateError
            If the registry already holds state.
        SnapshotError
            If the snapshot is inconsistent.
        """
        with self._lock:
            if not self._store.is_empty():
                raise RegistryStateError("Restore is only allowed on an empty registry")
            self._persistence.restore(snapshot)

    def start(self, snapshot_file: "SnapshotFile") -> bool:
        """Restore from ``snapshot_file`` if one was written.

        Returns True if state was restored.
        """
        snapshot = snapshot_file.load()
        if snapshot is None:
            logger.info("No snapshot at %s, starting empty", snapshot_file.path)
            return False
        self.restore(snapshot)
        return True

    def shutdown(self, snapshot_file: "SnapshotFile") -> None:
        """Flush sinks and persist a snapshot before teardown."""
        with self._lock:
            for sink in self.sinks:
                sink.flush()
            snapshot_file.save(self._persistence.snapshot())

    def _publish(self, events: list[Event]) -> None:
        # The mutation is already applied; a sink failure must not undo it
        for event in events:
            for sink in self.sinks:
                try:
                    sink.send(self.listings_topic, event, key=event.subject)
                except Exception:
                    logger.exception("Dropped %s for property %s", event.event_type, event.subject)


def _check_price(price: object) -> None:
    if isinstance(price, bool) or not isinstance(price, int) or price < 0:
        raise InvalidFieldError(f"price must be a non-negative integer, got {price!r}")


def _check_flag(name: str, value: object) -> None:
    if not isinstance(value, bool):
        raise InvalidFieldError(f"{name} must be a bool, got {value!r}")


def _check_text(name: str, value: object) -> None:
    if not isinstance(value, str):
        raise InvalidFieldError(f"{name} must be a string, got {value!r}")


def _check_images(images: object) -> tuple[str, ...]:
    # A bare string would otherwise be split into single characters
    if isinstance(images, (str, bytes)):
        raise InvalidFieldError(f"images must be a sequence of references, got {images!r}")
    try:
        refs = tuple(images)
    except TypeError as e:
        raise InvalidFieldError(f"images must be iterable, got {images!r}") from e
    for ref in refs:
        if not isinstance(ref, str):
            raise InvalidFieldError(f"image references must be strings, got {ref!r}")
    return refs
