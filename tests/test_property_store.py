"""Tests for PropertyStore, OwnerIndex and ListingView."""

from dataclasses import replace
from datetime import datetime, timezone

from property_registry.models import Listing, ListingType, Property, PropertyPatch, RentalPeriod
from property_registry.store.listing_view import LISTING_REMOVED, LISTING_UPSERTED, ListingView
from property_registry.store.owner_index import OwnerIndex
from property_registry.store.property_store import PropertyStore


def _create(store: PropertyStore, owner: str, **overrides) -> int:
    args = {
        "address": "1 Main St",
        "description": "Two bedroom flat",
        "price": 100000,
        "is_for_sale": False,
        "is_for_rent": False,
        "images": [],
        "owner": owner,
    }
    args.update(overrides)
    return store.create(**args)


class TestPropertyStoreCreate:
    """Tests for property creation."""

    def test_ids_start_at_one_and_increase(self, store: PropertyStore, alice: str) -> None:
        assert _create(store, alice) == 1
        assert _create(store, alice) == 2
        assert store.next_id == 3

    def test_stamps_timestamps(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice)
        prop = store.get(pid)

        assert prop is not None
        assert prop.created_at == prop.updated_at
        assert prop.created_at == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_images_kept_in_order_as_tuple(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice, images=["b.jpg", "a.jpg"])

        assert store.get(pid).images == ("b.jpg", "a.jpg")

    def test_records_owner(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice)

        assert store.get(pid).owner == alice
        assert store.owner_index.list_for(alice) == [pid]

    def test_unlisted_property_has_no_listing(self, store: PropertyStore, alice: str) -> None:
        _create(store, alice)

        assert store.listings.list_all() == []
        assert store.drain_events() == []

    def test_for_sale_property_is_listed(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice, is_for_sale=True)

        listing = store.listings.get(pid)
        assert listing.listing_type == ListingType.SALE
        assert listing.price == 100000
        assert listing.rental_period is None
        assert listing.featured_until is None


class TestPropertyStoreGet:
    """Tests for lookups."""

    def test_missing_returns_none(self, store: PropertyStore) -> None:
        assert store.get(42) is None


class TestPropertyStoreUpdate:
    """Tests for owner-only partial updates."""

    def test_owner_can_update(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice)

        assert store.update(pid, alice, PropertyPatch(address="2 Oak Rd")) is True
        assert store.get(pid).address == "2 Oak Rd"

    def test_unset_fields_are_kept(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice, images=["x.jpg"])
        before = store.get(pid)

        store.update(pid, alice, PropertyPatch(description="Updated"))
        after = store.get(pid)

        assert after.description == "Updated"
        assert after.address == before.address
        assert after.price == before.price
        assert after.images == before.images
        assert after.created_at == before.created_at
        assert after.updated_at > before.updated_at

    def test_zero_price_is_a_real_value(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice, is_for_sale=True)

        store.update(pid, alice, PropertyPatch(price=0))

        assert store.get(pid).price == 0
        assert store.listings.get(pid).price == 0

    def test_non_owner_is_rejected(self, store: PropertyStore, alice: str, bob: str) -> None:
        pid = _create(store, alice)
        before = store.get(pid)

        assert store.update(pid, bob, PropertyPatch(price=1)) is False
        assert store.get(pid) == before
        assert store.get(pid).owner == alice

    def test_missing_property_is_rejected(self, store: PropertyStore, alice: str) -> None:
        assert store.update(99, alice, PropertyPatch(price=1)) is False
        assert store.properties == {}

    def test_update_does_not_mutate_previous_record(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice)
        before = store.get(pid)

        store.update(pid, alice, PropertyPatch(address="Elsewhere"))

        assert before.address == "1 Main St"

    def test_non_listing_field_keeps_listed_at(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice, is_for_sale=True)
        listed_at = store.listings.get(pid).listed_at

        store.update(pid, alice, PropertyPatch(description="Fresh paint"))

        assert store.listings.get(pid).listed_at == listed_at

    def test_price_change_resyncs_listing(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice, is_for_rent=True, price=1500)

        store.update(pid, alice, PropertyPatch(price=1400))

        listing = store.listings.get(pid)
        assert listing.price == 1400
        assert listing.rental_period == RentalPeriod.MONTHLY


class TestPropertyStoreSearch:
    """Tests for case-insensitive search."""

    def test_matches_address_or_description(self, store: PropertyStore, alice: str) -> None:
        a = _create(store, alice, address="123 Park Ave", description="Corner unit")
        b = _create(store, alice, address="9 Elm St", description="Quiet, near the park")
        _create(store, alice, address="5 River Rd", description="Waterfront")

        results = store.search("park")

        assert [p.property_id for p in results] == [a, b]

    def test_term_case_is_ignored(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice, address="123 Park Ave")

        assert [p.property_id for p in store.search("PARK")] == [pid]

    def test_no_matches(self, store: PropertyStore, alice: str) -> None:
        _create(store, alice)

        assert store.search("castle") == []


class TestPropertyStoreListByOwner:
    """Tests for the per-owner view."""

    def test_creation_order_per_owner(self, store: PropertyStore, alice: str, bob: str) -> None:
        a1 = _create(store, alice)
        b1 = _create(store, bob)
        a2 = _create(store, alice)

        assert [p.property_id for p in store.list_by_owner(alice)] == [a1, a2]
        assert [p.property_id for p in store.list_by_owner(bob)] == [b1]

    def test_unknown_owner(self, store: PropertyStore) -> None:
        assert store.list_by_owner("nobody") == []

    def test_skips_missing_records(self, store: PropertyStore, alice: str) -> None:
        pid = _create(store, alice)
        store.owner_index.record_creation(alice, 77)

        assert [p.property_id for p in store.list_by_owner(alice)] == [pid]

    def test_summary(self, store: PropertyStore, alice: str, bob: str) -> None:
        _create(store, alice, is_for_sale=True)
        _create(store, bob)

        assert store.summary() == {"properties": 2, "owners": 2, "listings": 1, "next_id": 3}


class TestOwnerIndex:
    """Tests for OwnerIndex."""

    def test_list_for_returns_copy(self) -> None:
        index = OwnerIndex()
        index.record_creation("o", 1)

        index.list_for("o").append(2)

        assert index.list_for("o") == [1]

    def test_entries_round_trip(self) -> None:
        index = OwnerIndex()
        index.record_creation("o1", 1)
        index.record_creation("o2", 2)
        index.record_creation("o1", 3)

        rebuilt = OwnerIndex.from_entries(index.entries())

        assert rebuilt.entries() == [("o1", [1, 3]), ("o2", [2])]
        assert len(rebuilt) == 2


def _property(**overrides) -> Property:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    prop = Property(
        property_id=1,
        owner="o",
        address="1 Main St",
        description="",
        price=250000,
        is_for_sale=False,
        is_for_rent=False,
        images=(),
        created_at=now,
        updated_at=now,
    )
    return replace(prop, **overrides)


class TestListingView:
    """Tests for listing synchronization policy."""

    def test_sale_listing(self) -> None:
        view = ListingView()
        now = datetime(2024, 2, 1, tzinfo=timezone.utc)

        event = view.sync(_property(is_for_sale=True), now)

        assert view.get(1) == Listing(1, ListingType.SALE, 250000, None, now)
        assert event.event_type == LISTING_UPSERTED
        assert event.subject == "1"
        assert event.data["listing_type"] == "Sale"

    def test_rent_listing_defaults_to_monthly(self) -> None:
        view = ListingView()
        now = datetime(2024, 2, 1, tzinfo=timezone.utc)

        view.sync(_property(is_for_rent=True), now)

        listing = view.get(1)
        assert listing.listing_type == ListingType.RENT
        assert listing.rental_period == RentalPeriod.MONTHLY

    def test_sale_takes_priority_over_rent(self) -> None:
        view = ListingView()

        view.sync(_property(is_for_sale=True, is_for_rent=True), datetime.now(timezone.utc))

        assert view.get(1).listing_type == ListingType.SALE
        assert len(view) == 1

    def test_unlisting_removes(self) -> None:
        view = ListingView()
        view.sync(_property(is_for_sale=True), datetime.now(timezone.utc))

        event = view.sync(_property(), datetime.now(timezone.utc))

        assert view.get(1) is None
        assert event.event_type == LISTING_REMOVED

    def test_unlisting_without_listing_is_noop(self) -> None:
        view = ListingView()

        assert view.sync(_property(), datetime.now(timezone.utc)) is None
        assert view.list_all() == []

    def test_sync_is_idempotent(self) -> None:
        view = ListingView()
        prop = _property(is_for_rent=True)
        first_time = datetime(2024, 2, 1, tzinfo=timezone.utc)
        second_time = datetime(2024, 2, 2, tzinfo=timezone.utc)

        view.sync(prop, first_time)
        first = view.get(1)
        view.sync(prop, second_time)
        second = view.get(1)

        assert replace(first, listed_at=second_time) == second
        assert len(view) == 1

    def test_list_all_in_storage_order(self) -> None:
        view = ListingView()
        now = datetime.now(timezone.utc)
        view.sync(_property(property_id=3, is_for_sale=True), now)
        view.sync(_property(property_id=1, is_for_rent=True), now)

        assert [listing.property_id for listing in view.list_all()] == [3, 1]
