"""In-memory property registry with owner-scoped updates and derived listings."""

from property_registry.registry import PropertyRegistry

__all__ = ["PropertyRegistry"]
