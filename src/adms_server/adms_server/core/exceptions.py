class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StoreError(DomainError):
    """Raised when the relational store rejects or cannot serve a request."""


class StoreUnavailableError(StoreError):
    """Raised on connectivity loss or timeout talking to the store."""
