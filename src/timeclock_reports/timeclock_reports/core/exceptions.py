class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when caller input (dates, months, sort options) is invalid."""


class DataSourceError(DomainError):
    """Raised when the punch/session data source stays unavailable after retries."""
