"""Custom exception hierarchy for photovault."""

from __future__ import annotations


class PhotoVaultError(Exception):
    """Base class for all custom errors raised by photovault."""


# --- 3-layer hierarchy ---

class DomainError(PhotoVaultError):
    """Base class for domain-level errors."""


class InfrastructureError(PhotoVaultError):
    """Base class for infrastructure-level errors."""


class ApplicationError(PhotoVaultError):
    """Base class for application-level errors."""


# --- Domain errors ---

class AssetNotFoundError(DomainError):
    """Raised when a referenced asset is absent from the store."""


# --- Application errors ---

class InvalidRequestError(ApplicationError):
    """Raised when a request is missing a selection or carries bad values."""


class AccessDeniedError(ApplicationError):
    """Raised when the permission gate rejects an operation."""


# --- Infrastructure errors ---

class DatabaseError(InfrastructureError):
    """Raised when a database operation fails."""


class ConnectionPoolExhausted(InfrastructureError):
    """Raised when no connections are available in the pool."""


class ArchiveWriteError(InfrastructureError):
    """Raised when the archive writer rejects an entry."""


# --- DI-specific errors ---

class CircularDependencyError(PhotoVaultError):
    """Raised when a circular dependency is detected during resolution."""


class ResolutionError(PhotoVaultError):
    """Raised when a dependency cannot be resolved."""


# --- Settings ---

class SettingsError(PhotoVaultError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
