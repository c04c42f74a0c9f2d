"""Tests for transactions and account file entries."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from salarizare.domain.entities import TACRow
from salarizare.domain.errors import NotFoundError, PersistenceError, ValidationError
from salarizare.domain.transaction import validate_variables


def test_create_transaction_posts_entries(transaction_service, sample_tac):
    """Applying B1_613 to 440 + 440 debits 628 with 880."""
    transaction_id = transaction_service.create_transaction(
        transaction_date=date(2025, 3, 15),
        variables={"Val_ded": Decimal("440"), "Val_neded": Decimal("440")},
        tac_id=sample_tac.id,
        description=" Comision ",
    )

    transaction = transaction_service.get_transaction(transaction_id)
    assert transaction.tac_id == sample_tac.id
    assert transaction.description == "Comision"
    assert transaction.variables == {"Val_ded": Decimal("440"), "Val_neded": Decimal("440")}

    entries = transaction_service.list_entries(transaction_id)
    assert [(e.fisa_cont, e.cont_corespondent, e.debit, e.credit) for e in entries] == [
        ("628", "5121", Decimal("880"), Decimal("0")),
        ("5121", "628", Decimal("0"), Decimal("880")),
    ]
    assert all(e.transaction_id == transaction_id for e in entries)


def test_create_transaction_without_tac(transaction_service):
    """A transaction without a TAC has no entries."""
    transaction_id = transaction_service.create_transaction(date(2025, 3, 1), {"Suma": Decimal("10")})
    assert transaction_service.list_entries(transaction_id) == []
    with pytest.raises(ValidationError, match="no TAC"):
        transaction_service.apply(transaction_id)


def test_create_transaction_unknown_tac(transaction_service):
    """An unknown TAC is rejected before anything is stored."""
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(date(2025, 3, 1), {}, tac_id=42)
    assert transaction_service.list_transactions() == []


def test_reapply_replaces_entries(transaction_service, tac_service, sample_tac):
    """Applying again replaces the previous entries."""
    transaction_id = transaction_service.create_transaction(
        date(2025, 3, 15), {"Val_ded": 1, "Val_neded": 2}, tac_id=sample_tac.id
    )
    other = tac_service.create_tac(
        name="SINGLE", description=None, rows=[TACRow(fisa_cont="627", debit_formula="Val_ded * 10")]
    )

    entries = transaction_service.apply(transaction_id, tac_id=other)

    assert [(e.fisa_cont, e.debit) for e in entries] == [("627", Decimal("10"))]
    assert len(transaction_service.list_entries()) == 1


def _fail_commits(db, monkeypatch):
    """Make every commit of the store session fail."""

    def commit():
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(db._get_session(), "commit", commit)


def test_failed_reapply_keeps_previous_entries(transaction_service, sample_tac, temp_db, monkeypatch):
    """A failed re-apply leaves the old entries in place."""
    transaction_id = transaction_service.create_transaction(
        date(2025, 3, 15), {"Val_ded": 1, "Val_neded": 2}, tac_id=sample_tac.id
    )
    before = transaction_service.list_entries(transaction_id)

    _fail_commits(temp_db, monkeypatch)
    with pytest.raises(PersistenceError):
        transaction_service.apply(transaction_id)
    monkeypatch.undo()

    assert transaction_service.list_entries(transaction_id) == before


def test_failed_create_leaves_no_transaction(transaction_service, sample_tac, temp_db, monkeypatch):
    """A failed write stores neither the transaction nor its entries."""
    _fail_commits(temp_db, monkeypatch)
    with pytest.raises(PersistenceError):
        transaction_service.create_transaction(
            date(2025, 3, 15), {"Val_ded": 1, "Val_neded": 2}, tac_id=sample_tac.id
        )
    monkeypatch.undo()

    assert transaction_service.list_transactions() == []
    assert temp_db.list_account_file_entries() == []


def test_currency_variables(transaction_service, tac_service):
    """Dotted variables feed the currency columns."""
    tac_id = tac_service.create_tac(
        name="FX_IN",
        description=None,
        rows=[
            TACRow(
                fisa_cont="5124",
                cont_corespondent="472",
                debit_formula="Suma * Curs",
                valuta_formula="Suma",
                moneda_valuta_formula="T.Moneda",
            )
        ],
    )
    transaction_id = transaction_service.create_transaction(
        date(2025, 3, 15),
        {"Suma": Decimal("100"), "Curs": Decimal("4.9750"), "T.Moneda": "EUR"},
        tac_id=tac_id,
    )

    (entry,) = transaction_service.list_entries(transaction_id)
    assert entry.debit == Decimal("497.50")
    assert entry.valuta == Decimal("100")
    assert entry.moneda_valuta == "EUR"
    assert transaction_service.get_transaction(transaction_id).variables["T.Moneda"] == "EUR"


def test_list_transactions_order_and_filters(transaction_service, sample_tac):
    """Newest date first; date and TAC filters apply."""
    first = transaction_service.create_transaction(date(2025, 3, 1), {}, tac_id=sample_tac.id)
    second = transaction_service.create_transaction(date(2025, 3, 20), {})
    third = transaction_service.create_transaction(date(2025, 3, 10), {}, tac_id=sample_tac.id)

    assert [t.id for t in transaction_service.list_transactions()] == [second, third, first]
    assert [t.id for t in transaction_service.list_transactions(start_date=date(2025, 3, 5))] == [second, third]
    assert [t.id for t in transaction_service.list_transactions(end_date=date(2025, 3, 10))] == [third, first]
    assert [t.id for t in transaction_service.list_transactions(tac_id=sample_tac.id)] == [third, first]


def test_list_transactions_rejects_inverted_range(transaction_service):
    """Start date must not be after end date."""
    with pytest.raises(ValidationError):
        transaction_service.list_transactions(start_date=date(2025, 4, 1), end_date=date(2025, 3, 1))


def test_delete_transaction_removes_entries(transaction_service, sample_tac):
    """Entries go with their transaction."""
    transaction_id = transaction_service.create_transaction(
        date(2025, 3, 15), {"Val_ded": 1, "Val_neded": 1}, tac_id=sample_tac.id
    )
    transaction_service.delete_transaction(transaction_id)

    assert transaction_service.get_transaction(transaction_id) is None
    assert transaction_service.list_entries() == []
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(transaction_id)


def test_deleting_tac_keeps_transactions(transaction_service, tac_service, sample_tac):
    """Transactions outlive their TAC, without a TAC reference."""
    transaction_id = transaction_service.create_transaction(
        date(2025, 3, 15), {"Val_ded": 1, "Val_neded": 1}, tac_id=sample_tac.id
    )
    tac_service.delete_tac(sample_tac.id)

    transaction = transaction_service.get_transaction(transaction_id)
    assert transaction is not None
    assert transaction.tac_id is None
    assert len(transaction_service.list_entries(transaction_id)) == 2


def test_list_entries_unknown_transaction(transaction_service):
    """Listing entries of a missing transaction fails."""
    with pytest.raises(NotFoundError):
        transaction_service.list_entries(99)


def test_validate_variables():
    """Identifiers and dotted names are accepted."""
    assert validate_variables({" Val_ded ": 1, "T.Moneda": "RON"}) == {"Val_ded": 1, "T.Moneda": "RON"}
    with pytest.raises(ValidationError, match="Invalid variable name"):
        validate_variables({"1abc": 1})
    with pytest.raises(ValidationError):
        validate_variables({"a-b": 1})
