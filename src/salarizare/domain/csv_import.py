"""CSV import of transactions."""

import csv
import logging
from pathlib import Path
from typing import Any

from salarizare.database.base import Database
from salarizare.domain.tac import TACService
from salarizare.domain.transaction import TransactionService
from salarizare.utils.amount_parser import coerce_variable
from salarizare.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

TAC_COLUMN = "TAC"
DATE_COLUMN = "Data"
DESCRIPTION_COLUMN = "Descriere"
RESERVED_COLUMNS = (TAC_COLUMN, DATE_COLUMN, DESCRIPTION_COLUMN)


class TransactionImportService:
    """Service for importing transactions from CSV files."""

    def __init__(self, db: Database):
        """Initialize transaction import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transaction_service = TransactionService(db)
        self.tac_service = TACService(db)

    def import_csv(self, csv_file_path: str) -> dict[str, Any]:
        """Import transactions from a CSV file.

        The file needs a ``TAC`` column (TAC name), a ``Data`` column and an
        optional ``Descriere`` column. Every other column is a transaction
        variable; empty cells are left out, numeric cells become numbers.

        Args:
            csv_file_path: Path to CSV file

        Returns:
            Dict with import statistics:
            - imported: number of transactions imported
            - entries: number of account file entries posted
            - errors: list of error messages

        Raises:
            ValueError: If required columns are missing
            FileNotFoundError: If CSV file doesn't exist
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        imported = 0
        entries = 0
        errors = []

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)

            csv_columns = reader.fieldnames
            if csv_columns is None:
                raise ValueError("CSV file has no columns")

            missing_columns = [col for col in (TAC_COLUMN, DATE_COLUMN) if col not in csv_columns]
            if missing_columns:
                raise ValueError(f"CSV file missing required columns: {', '.join(missing_columns)}")

            variable_columns = [col for col in csv_columns if col not in RESERVED_COLUMNS]

            for row_num, row in enumerate(reader, start=2):  # header is row 1
                tac_name = (row.get(TAC_COLUMN) or "").strip()
                if not tac_name:
                    errors.append(f"Row {row_num}: Missing TAC")
                    continue

                tac = self.tac_service.get_tac_by_name(tac_name)
                if tac is None:
                    errors.append(f"Row {row_num}: TAC '{tac_name}' not found")
                    continue

                date_str = (row.get(DATE_COLUMN) or "").strip()
                if not date_str:
                    errors.append(f"Row {row_num}: Missing date")
                    continue
                try:
                    txn_date = parse_date(date_str)
                except ValueError as e:
                    errors.append(f"Row {row_num}: {e}")
                    continue

                variables = {
                    col.strip(): coerce_variable(row[col])
                    for col in variable_columns
                    if row.get(col) is not None and row[col].strip()
                }

                try:
                    transaction_id = self.transaction_service.create_transaction(
                        transaction_date=txn_date,
                        variables=variables,
                        tac_id=tac.id,
                        description=row.get(DESCRIPTION_COLUMN),
                    )
                except ValueError as e:
                    errors.append(f"Row {row_num}: {e}")
                    continue

                imported += 1
                entries += len(self.transaction_service.list_entries(transaction_id))

        if errors:
            logger.warning("CSV import of %s skipped %d rows", csv_path.name, len(errors))
        logger.info("Imported %d transactions (%d entries) from %s", imported, entries, csv_path.name)
        return {
            "imported": imported,
            "entries": entries,
            "errors": errors,
        }
