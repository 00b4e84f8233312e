"""Property submission generator."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator

from property_registry.generators.base import BaseGenerator
from property_registry.models import Property, PropertyPatch


@dataclass
class PropertySubmission:
    """Arguments of a ``create_property`` call, minus the caller."""

    address: str
    description: str
    price: int
    is_for_sale: bool
    is_for_rent: bool
    images: list[str]


class PropertyGenerator(BaseGenerator):
    """Generate synthetic property submissions and owner updates."""

    # (is_for_sale, is_for_rent) and how often each combination shows up
    MARKET_FLAGS = [(True, False), (False, True), (True, True), (False, False)]
    MARKET_WEIGHTS = [0.50, 0.30, 0.05, 0.15]

    KINDS = ["apartment", "house", "townhouse", "condo", "studio", "loft"]
    FEATURES = [
        "near the park",
        "close to downtown",
        "with a renovated kitchen",
        "with off-street parking",
        "steps from public transit",
        "with a private garden",
    ]

    SALE_PRICE_RANGE = (80, 2500)  # thousands
    RENT_PRICE_RANGE = (600, 9000)  # monthly

    def generate(self) -> PropertySubmission:
        """Generate a single property submission.

        Returns
        -------
        PropertySubmission
            Generated submission.
        """
        return self._generate_one()

    def generate_batch(self, count: int) -> Iterator[PropertySubmission]:
        """Generate multiple property submissions.

        Parameters
        ----------
        count : int
            Number of submissions to generate.

        Yields
        ------
        PropertySubmission
            Generated submissions.
        """
        for _ in range(count):
            yield self._generate_one()

    def generate_owners(self, count: int) -> list[str]:
        """Generate distinct caller-identity tokens."""
        return [self.fake.unique.uuid4() for _ in range(count)]

    def generate_patch(self, prop: Property) -> PropertyPatch:
        """Generate a plausible partial update an owner might submit."""
        choice = random.random()
        if choice < 0.4:
            is_for_sale, is_for_rent = random.choices(self.MARKET_FLAGS, weights=self.MARKET_WEIGHTS, k=1)[0]
            return PropertyPatch(is_for_sale=is_for_sale, is_for_rent=is_for_rent)
        if choice < 0.7:
            # Price drop of up to 15%
            return PropertyPatch(price=int(prop.price * random.uniform(0.85, 1.0)))
        if choice < 0.9:
            return PropertyPatch(description=self._description())
        return PropertyPatch(images=self._images())

    def _generate_one(self) -> PropertySubmission:
        is_for_sale, is_for_rent = random.choices(self.MARKET_FLAGS, weights=self.MARKET_WEIGHTS, k=1)[0]

        if is_for_rent and not is_for_sale:
            price = random.randint(*self.RENT_PRICE_RANGE)
        else:
            price = random.randint(*self.SALE_PRICE_RANGE) * 1000

        return PropertySubmission(
            address=self.fake.street_address() + ", " + self.fake.city(),
            description=self._description(),
            price=price,
            is_for_sale=is_for_sale,
            is_for_rent=is_for_rent,
            images=self._images(),
        )

    def _description(self) -> str:
        bedrooms = random.randint(1, 5)
        return f"{bedrooms}-bedroom {random.choice(self.KINDS)} {random.choice(self.FEATURES)}"

    def _images(self) -> list[str]:
        return [f"images/{self.fake.uuid4()}.jpg" for _ in range(random.randint(0, 4))]
