"""Transaction and account file entry domain service."""

import logging
import re
from datetime import date
from typing import Any, Mapping, Optional

from salarizare.database.base import Database
from salarizare.domain.entities import AccountFileEntry, Transaction
from salarizare.domain.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
    store_write_failed,
    tac_not_found,
    transaction_not_found,
)
from salarizare.domain.tac import apply_tac

logger = logging.getLogger(__name__)

VARIABLE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*")


def validate_variables(variables: Mapping[str, Any]) -> dict[str, Any]:
    """Check that every variable name can be referenced from a formula.

    Dotted names such as ``T.Moneda`` are allowed.

    Raises:
        ValidationError: If a name is not a valid reference
    """
    validated = {}
    for name, value in variables.items():
        name = str(name).strip()
        if not VARIABLE_NAME.fullmatch(name):
            raise ValidationError(f"Invalid variable name '{name}'")
        validated[name] = value
    return validated


class TransactionService:
    """Service for managing transactions and their account file entries."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        transaction_date: date,
        variables: Mapping[str, Any],
        tac_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a transaction and, when a TAC is given, post its entries.

        Args:
            transaction_date: Transaction date
            variables: Variable bag referenced by the TAC formulas
            tac_id: Optional TAC to apply
            description: Optional description

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If the TAC does not exist
            ValidationError: If a variable name is invalid
            PersistenceError: If the transaction could not be saved
        """
        if tac_id is not None and self.db.get_tac(tac_id) is None:
            raise NotFoundError(tac_not_found(tac_id))

        variables = validate_variables(variables)
        entries = apply_tac(self.db.get_tac_rows(tac_id), variables) if tac_id is not None else []

        transaction_id = self.db.create_transaction(
            tac_id=tac_id,
            transaction_date=transaction_date,
            description=(description or "").strip() or None,
            variables=variables,
            entries=entries,
        )
        if transaction_id is None:
            raise PersistenceError(store_write_failed("transaction"))
        logger.info("Created transaction %d dated %s", transaction_id, transaction_date.isoformat())
        if tac_id is not None:
            logger.info("Posted %d entries for transaction %d using TAC %d", len(entries), transaction_id, tac_id)
        return transaction_id

    def apply(self, transaction_id: int, tac_id: Optional[int] = None) -> list[AccountFileEntry]:
        """Apply a TAC to a transaction, replacing its existing entries.

        Args:
            transaction_id: Transaction ID
            tac_id: TAC to apply; defaults to the transaction's own TAC

        Returns:
            The newly posted entries

        Raises:
            NotFoundError: If the transaction or TAC does not exist
            ValidationError: If no TAC is given and the transaction has none
            PersistenceError: If the entries could not be saved
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        tac_id = tac_id if tac_id is not None else transaction.tac_id
        if tac_id is None:
            raise ValidationError(f"Transaction {transaction_id} has no TAC to apply")
        if self.db.get_tac(tac_id) is None:
            raise NotFoundError(tac_not_found(tac_id))

        entries = apply_tac(self.db.get_tac_rows(tac_id), transaction.variables)

        if not self.db.replace_account_file_entries(transaction_id, entries):
            raise PersistenceError(store_write_failed("account file entries"))
        logger.info("Posted %d entries for transaction %d using TAC %d", len(entries), transaction_id, tac_id)
        return self.db.list_account_file_entries(transaction_id)

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        tac_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions, newest date first.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            tac_id: Optional TAC filter

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must be before or equal to end date")
        return self.db.list_transactions(start_date=start_date, end_date=end_date, tac_id=tac_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction together with its entries.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self.db.delete_transaction(transaction_id)
        logger.info("Deleted transaction %d", transaction_id)

    def list_entries(self, transaction_id: Optional[int] = None) -> list[AccountFileEntry]:
        """List account file entries in posting order.

        Raises:
            NotFoundError: If a transaction ID is given and does not exist
        """
        if transaction_id is not None and self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return self.db.list_account_file_entries(transaction_id)
