"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """The caller supplied input that breaks a business rule."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidStateError(DomainException):
    """The entity is in a state that does not allow the requested operation."""


class CartEmptyError(DomainException):
    """Checkout was attempted with an empty shopping cart."""


class ConcurrencyError(DomainException):
    """The order changed in storage since it was loaded."""
