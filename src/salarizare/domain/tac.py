"""TAC (Transaction Allocation Template) domain service."""

import logging
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from salarizare.database.base import Database
from salarizare.domain.entities import TAC, AccountFileEntryResult, TACRow
from salarizare.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_tac_name,
    tac_not_found,
)
from salarizare.domain.formula import evaluate, formula_error

logger = logging.getLogger(__name__)

FORMULA_FIELDS = ("debit_formula", "credit_formula", "valuta_formula", "moneda_valuta_formula")


def apply_tac(rows: Sequence[TACRow], variables: Mapping[str, Any]) -> list[AccountFileEntryResult]:
    """Apply TAC rows to a transaction's variables.

    Produces exactly one entry per row, in row order. Debit and credit fall
    back to 0 when their formula does not give a number, valuta is kept only
    when numeric and the currency code only when it is a string.

    Args:
        rows: Ordered TAC rows
        variables: Transaction variable bag

    Returns:
        List of ledger entry candidates
    """
    entries = []
    for row in rows:
        debit = evaluate(row.debit_formula, variables)
        credit = evaluate(row.credit_formula, variables)
        valuta = evaluate(row.valuta_formula, variables)
        moneda_valuta = evaluate(row.moneda_valuta_formula, variables)

        entries.append(
            AccountFileEntryResult(
                fisa_cont=row.fisa_cont,
                cont_corespondent=row.cont_corespondent or None,
                debit=debit if isinstance(debit, Decimal) else Decimal(0),
                credit=credit if isinstance(credit, Decimal) else Decimal(0),
                valuta=valuta if isinstance(valuta, Decimal) else None,
                moneda_valuta=moneda_valuta if isinstance(moneda_valuta, str) else None,
            )
        )
    return entries


def normalize_rows(rows: Sequence[TACRow]) -> list[TACRow]:
    """Validate rows and number them in the given order.

    Blank optional fields become None. A formula that does not parse is
    kept as typed (it evaluates to nothing) and logged.

    Raises:
        ValidationError: If a row has no ledger account
    """
    normalized = []
    for index, row in enumerate(rows):
        fisa_cont = (row.fisa_cont or "").strip()
        if not fisa_cont:
            raise ValidationError(f"Row {index + 1}: Fisa cont is required")

        values = {}
        for name in FORMULA_FIELDS:
            text = getattr(row, name)
            text = text.strip() if text else None
            error = formula_error(text)
            if error:
                logger.warning("Row %d: %s %r does not parse: %s", index + 1, name, text, error)
            values[name] = text or None

        normalized.append(
            TACRow(
                fisa_cont=fisa_cont,
                cont_corespondent=(row.cont_corespondent or "").strip() or None,
                row_order=index,
                **values,
            )
        )
    return normalized


class TACService:
    """Service for managing TACs and their rows."""

    def __init__(self, db: Database):
        """Initialize TAC service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_tac(self, name: str, description: Optional[str], rows: Sequence[TACRow]) -> int:
        """Create a TAC with its rows.

        Args:
            name: TAC name (required, unique after trimming)
            description: Optional description
            rows: Ordered rows

        Returns:
            TAC ID

        Raises:
            ValidationError: If name is empty or a row is invalid
            ConflictError: If a TAC with the same name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("TAC name is required")
        if self.db.get_tac_by_name(name) is not None:
            raise ConflictError(duplicate_tac_name(name))

        tac_id = self.db.create_tac(
            name=name,
            description=(description or "").strip() or None,
            rows=normalize_rows(rows),
        )
        logger.info("Created TAC '%s' (ID: %d) with %d rows", name, tac_id, len(rows))
        return tac_id

    def update_tac(
        self,
        tac_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        rows: Optional[Sequence[TACRow]] = None,
    ) -> None:
        """Update a TAC. Rows, when given, replace all existing rows.

        Raises:
            NotFoundError: If the TAC does not exist
            ValidationError: If the name is empty or a row is invalid
            ConflictError: If the new name belongs to another TAC
        """
        tac = self.db.get_tac(tac_id)
        if tac is None:
            raise NotFoundError(tac_not_found(tac_id))

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("TAC name is required")
            other = self.db.get_tac_by_name(name)
            if other is not None and other.id != tac_id:
                raise ConflictError(duplicate_tac_name(name))

        self.db.update_tac(
            tac_id,
            name=name if name is not None else tac.name,
            description=(description.strip() or None) if description is not None else tac.description,
            rows=normalize_rows(rows) if rows is not None else None,
        )
        logger.info("Updated TAC %d", tac_id)

    def delete_tac(self, tac_id: int) -> None:
        """Delete a TAC and its rows.

        Raises:
            NotFoundError: If the TAC does not exist
        """
        if self.db.get_tac(tac_id) is None:
            raise NotFoundError(tac_not_found(tac_id))
        self.db.delete_tac(tac_id)
        logger.info("Deleted TAC %d", tac_id)

    def get_tac(self, tac_id: int) -> Optional[TAC]:
        """Get TAC by ID."""
        return self.db.get_tac(tac_id)

    def get_tac_by_name(self, name: str) -> Optional[TAC]:
        """Get TAC by name."""
        return self.db.get_tac_by_name(name.strip())

    def list_tacs(self) -> list[TAC]:
        """List all TACs ordered by ID."""
        return self.db.list_tacs()

    def get_rows(self, tac_id: int) -> list[TACRow]:
        """Get the ordered rows of a TAC.

        Raises:
            NotFoundError: If the TAC does not exist
        """
        if self.db.get_tac(tac_id) is None:
            raise NotFoundError(tac_not_found(tac_id))
        return self.db.get_tac_rows(tac_id)

    def resolve(self, tac: str | int) -> TAC:
        """Resolve a TAC by ID or name.

        Raises:
            NotFoundError: If no TAC matches
        """
        found = None
        if isinstance(tac, int) or str(tac).isdigit():
            found = self.db.get_tac(int(tac))
        if found is None:
            found = self.db.get_tac_by_name(str(tac).strip())
        if found is None:
            raise NotFoundError(tac_not_found(tac))
        return found
