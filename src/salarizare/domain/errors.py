"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PersistenceError(DomainError):
    """The store reported that a write did not succeed."""


def employee_not_found(employee_id: int) -> str:
    """Return message for missing employee."""
    return f"Employee {employee_id} not found"


def tac_not_found(tac: int | str) -> str:
    """Return message for missing TAC by ID or name."""
    if isinstance(tac, int):
        return f"TAC {tac} not found"
    return f"TAC '{tac}' not found"


def duplicate_tac_name(name: str) -> str:
    """Return message for duplicate TAC name."""
    return f"TAC with name '{name}' already exists"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def unknown_setting(key: str) -> str:
    """Return message for a setting name that is not a known legal setting."""
    return f"Unknown legal setting '{key}'"


def store_write_failed(what: str) -> str:
    """Return message when the store rejects a write."""
    return f"Could not save {what}. Please try again."
