"""Abstract database interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence

if TYPE_CHECKING:
    # Entities are only needed for annotations; importing them here at runtime
    # would cycle through domain/__init__.py.
    from salarizare.domain.entities import (
        TAC,
        AccountFileEntry,
        AccountFileEntryResult,
        Employee,
        LegalSetting,
        TACRow,
        Transaction,
    )

# Working days keyed by 4-digit year string, then month number (1-12).
WorkingDaysData = dict[str, dict[int, int]]


class Database(ABC):
    """Abstract database interface for salarizare.

    Write methods that report a success flag return False instead of raising
    when the store rejects the write; services decide what that means.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Employee operations
    @abstractmethod
    def list_employees(self) -> list[Employee]:
        """List all employees ordered by ID."""
        pass

    @abstractmethod
    def get_employee(self, employee_id: int) -> Optional[Employee]:
        """Get employee by ID."""
        pass

    @abstractmethod
    def add_employee(self, employee: Employee) -> bool:
        """Insert an employee. Returns success flag."""
        pass

    @abstractmethod
    def update_employee(self, employee: Employee) -> bool:
        """Overwrite an existing employee. Returns success flag."""
        pass

    @abstractmethod
    def replace_employees(self, employees: Sequence[Employee]) -> bool:
        """Replace the whole employee list. Returns success flag."""
        pass

    @abstractmethod
    def remove_employee(self, employee_id: int) -> bool:
        """Delete an employee. Returns success flag."""
        pass

    # Legal settings operations
    @abstractmethod
    def get_legal_settings(self) -> dict[str, LegalSetting]:
        """Get all legal settings keyed by display name."""
        pass

    @abstractmethod
    def put_legal_settings(self, settings: Mapping[str, LegalSetting]) -> bool:
        """Replace all legal settings. Returns success flag."""
        pass

    # Working days operations
    @abstractmethod
    def get_working_days(self) -> WorkingDaysData:
        """Get the working days calendar."""
        pass

    @abstractmethod
    def put_working_days(self, data: WorkingDaysData) -> bool:
        """Replace the working days calendar. Returns success flag."""
        pass

    # TAC operations
    @abstractmethod
    def create_tac(self, name: str, description: Optional[str], rows: Sequence[TACRow]) -> int:
        """Create a TAC with its rows. Returns TAC ID."""
        pass

    @abstractmethod
    def update_tac(
        self,
        tac_id: int,
        name: str,
        description: Optional[str],
        rows: Optional[Sequence[TACRow]] = None,
    ) -> None:
        """Update a TAC. When rows are given they replace all existing rows."""
        pass

    @abstractmethod
    def delete_tac(self, tac_id: int) -> None:
        """Delete a TAC and its rows; transactions lose their TAC reference."""
        pass

    @abstractmethod
    def get_tac(self, tac_id: int) -> Optional[TAC]:
        """Get TAC by ID."""
        pass

    @abstractmethod
    def get_tac_by_name(self, name: str) -> Optional[TAC]:
        """Get TAC by name."""
        pass

    @abstractmethod
    def list_tacs(self) -> list[TAC]:
        """List all TACs."""
        pass

    @abstractmethod
    def get_tac_rows(self, tac_id: int) -> list[TACRow]:
        """Get the rows of a TAC ordered by row_order."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        tac_id: Optional[int],
        transaction_date: date,
        description: Optional[str],
        variables: Mapping[str, Any],
        entries: Sequence[AccountFileEntryResult] = (),
    ) -> Optional[int]:
        """Create a transaction together with its ledger entries in one write.

        Returns:
            Transaction ID, or None if the store rejected the write
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        tac_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions, newest date first, with optional filters."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and its account file entries."""
        pass

    # Account file entry operations
    @abstractmethod
    def create_account_file_entries(
        self, transaction_id: int, entries: Sequence[AccountFileEntryResult]
    ) -> bool:
        """Persist ledger entries for a transaction. Returns success flag."""
        pass

    @abstractmethod
    def replace_account_file_entries(
        self, transaction_id: int, entries: Sequence[AccountFileEntryResult]
    ) -> bool:
        """Replace all ledger entries of a transaction in one write. Returns success flag."""
        pass

    @abstractmethod
    def delete_account_file_entries(self, transaction_id: int) -> None:
        """Delete all ledger entries of a transaction."""
        pass

    @abstractmethod
    def list_account_file_entries(self, transaction_id: Optional[int] = None) -> list[AccountFileEntry]:
        """List ledger entries in posting order, optionally for one transaction."""
        pass
