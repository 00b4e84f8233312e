"""Custom exception hierarchy for property-registry."""


class RegistryError(Exception):
    """Base exception for all property-registry errors."""


class InvalidFieldError(RegistryError):
    """Raised when an argument does not satisfy its declared type."""


class RegistryStateError(RegistryError):
    """Raised when a lifecycle operation is invoked in the wrong state."""


class SnapshotError(RegistryError):
    """Raised when a snapshot cannot be read or is internally inconsistent."""


class ConfigurationError(RegistryError):
    """Raised when configuration is invalid or missing."""


class SinkError(RegistryError):
    """Raised when a sink operation fails."""
