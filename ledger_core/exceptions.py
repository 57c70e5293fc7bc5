"""Domain-specific exceptions for the savings ledger core."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class InvalidAmountError(ValidationError):
    """Raised when a money amount is not a positive finite number."""


class InsufficientBalanceError(ValueError):
    """Raised when a category does not hold enough money for a withdrawal or expense."""


class NonZeroBalanceError(ValueError):
    """Raised when deleting a category that still holds money."""


class AccountNotFoundError(LookupError):
    """Raised when an account type or category reference cannot be resolved."""


class RecordNotFoundError(LookupError):
    """Raised when an expense record cannot be located."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""
