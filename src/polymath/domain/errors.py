"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested business unit does not exist."""


class StorageError(DomainError):
    """The storage medium could not be read or written."""


def business_not_found(business_id: str) -> str:
    """Return message for an id missing from the business registry."""
    return f"Business '{business_id}' not found"


def invalid_date(value: object) -> str:
    """Return message for an entry date that cannot be parsed."""
    return f"Invalid entry date {value!r}"


def storage_failure(operation: str, key: str, error: Exception) -> str:
    """Return message when the storage medium rejects an operation."""
    return f"Could not {operation} '{key}': {error}"
