"""Property record and partial-update models."""

from dataclasses import dataclass, fields
from datetime import datetime


@dataclass(frozen=True)
class Property:
    """Real estate record submitted by a single owner.

    Records are immutable; an update re-stores a new instance so that
    readers holding an earlier one never see it change.
    """

    property_id: int
    owner: str  # Caller identity token, fixed at creation
    address: str
    description: str
    price: int
    is_for_sale: bool
    is_for_rent: bool
    images: tuple[str, ...]  # Opaque image references, in order
    created_at: datetime
    updated_at: datetime

    @property
    def is_listed(self) -> bool:
        """Whether the property should currently have a listing."""
        return self.is_for_sale or self.is_for_rent


@dataclass
class PropertyPatch:
    """Optional replacement values for the mutable fields of a property.

    ``None`` means the field is left unchanged. Falsy values such as
    ``price=0`` or ``is_for_sale=False`` are real replacements.
    """

    address: str | None = None
    description: str | None = None
    price: int | None = None
    is_for_sale: bool | None = None
    is_for_rent: bool | None = None
    images: tuple[str, ...] | list[str] | None = None

    # Fields whose change requires the listing to be recomputed
    LISTING_FIELDS = frozenset({"price", "is_for_sale", "is_for_rent"})

    def provided(self) -> dict[str, object]:
        """Return the fields that carry a replacement value."""
        values: dict[str, object] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            values[f.name] = tuple(value) if f.name == "images" else value
        return values

    def touches_listing(self) -> bool:
        """Whether any provided field affects the derived listing."""
        return any(name in self.LISTING_FIELDS for name in self.provided())
