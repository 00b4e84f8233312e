"""Synthetic property submissions for seeding and load testing."""

from property_registry.generators.property import PropertyGenerator, PropertySubmission

__all__ = ["PropertyGenerator", "PropertySubmission"]
