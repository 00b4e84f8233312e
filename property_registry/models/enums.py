"""Enumeration types for registry entities."""

from enum import Enum


class ListingType(str, Enum):
    SALE = "Sale"
    RENT = "Rent"


class RentalPeriod(str, Enum):
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"
