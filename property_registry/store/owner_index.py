"""Per-owner index of created property identifiers."""

from dataclasses import dataclass, field


@dataclass
class OwnerIndex:
    """Ordered identifiers of the properties each owner created.

    There is no removal: properties are never deleted, so an owner's
    list only grows.
    """

    _by_owner: dict[str, list[int]] = field(default_factory=dict)

    def record_creation(self, owner: str, property_id: int) -> None:
        """Append a newly created property to its owner's list."""
        self._by_owner.setdefault(owner, []).append(property_id)

    def list_for(self, owner: str) -> list[int]:
        """Get the identifiers created by an owner, oldest first."""
        return list(self._by_owner.get(owner, []))

    def entries(self) -> list[tuple[str, list[int]]]:
        """Flatten the index into ordered (owner, ids) pairs."""
        return [(owner, list(ids)) for owner, ids in self._by_owner.items()]

    @classmethod
    def from_entries(cls, entries: list[tuple[str, list[int]]]) -> "OwnerIndex":
        """Rebuild an index from flattened pairs."""
        return cls(_by_owner={owner: list(ids) for owner, ids in entries})

    def __len__(self) -> int:
        return len(self._by_owner)
