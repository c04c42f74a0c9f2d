"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the services only ever see
frozen domain entities and never an ORM row.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from salarizare.domain import entities as domain
from salarizare.database.models import (
    TAC as ORMTAC,
    AccountFileEntry as ORMAccountFileEntry,
    Employee as ORMEmployee,
    LegalSetting as ORMLegalSetting,
    TACRow as ORMTACRow,
    Transaction as ORMTransaction,
)

EMPLOYEE_COLUMNS = (
    "id",
    "unique_id",
    "nume",
    "companie",
    "principal_loc_munca",
    "persoane_intretinere",
    "din_care_minori",
    "varsta",
    "tichete_de_masa",
    "valoare_tichet_de_masa",
    "zile_co_medical",
    "indemnizatie_zi_co_medical",
    "zile_co_odihna",
    "indemnizatie_zi_co_odihna",
    "salariu_cim",
    "sal_brut_cf_zile_lucrate_rounded",
    "indem_co_medical_rounded",
    "indem_co_odihna_rounded",
)


def _decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def employee_to_domain(orm_employee: ORMEmployee) -> domain.Employee:
    """Convert SQLAlchemy Employee model to domain Employee entity."""
    return domain.Employee(
        id=orm_employee.id,
        unique_id=orm_employee.unique_id,
        nume=orm_employee.nume,
        companie=orm_employee.companie,
        principal_loc_munca=bool(orm_employee.principal_loc_munca),
        persoane_intretinere=orm_employee.persoane_intretinere,
        din_care_minori=orm_employee.din_care_minori,
        varsta=orm_employee.varsta,
        tichete_de_masa=bool(orm_employee.tichete_de_masa),
        valoare_tichet_de_masa=_decimal(orm_employee.valoare_tichet_de_masa),
        zile_co_medical=orm_employee.zile_co_medical,
        indemnizatie_zi_co_medical=_decimal(orm_employee.indemnizatie_zi_co_medical),
        zile_co_odihna=orm_employee.zile_co_odihna,
        indemnizatie_zi_co_odihna=_decimal(orm_employee.indemnizatie_zi_co_odihna),
        salariu_cim=_decimal(orm_employee.salariu_cim),
        sal_brut_cf_zile_lucrate_rounded=orm_employee.sal_brut_cf_zile_lucrate_rounded,
        indem_co_medical_rounded=orm_employee.indem_co_medical_rounded,
        indem_co_odihna_rounded=orm_employee.indem_co_odihna_rounded,
    )


def employee_to_orm(employee: domain.Employee) -> ORMEmployee:
    """Convert domain Employee entity to a new SQLAlchemy Employee model."""
    return ORMEmployee(**{name: getattr(employee, name) for name in EMPLOYEE_COLUMNS})


def copy_employee_fields(employee: domain.Employee, orm_employee: ORMEmployee) -> None:
    """Overwrite an existing ORM row with the fields of a domain entity."""
    for name in EMPLOYEE_COLUMNS:
        setattr(orm_employee, name, getattr(employee, name))


def legal_setting_to_domain(orm_setting: ORMLegalSetting) -> domain.LegalSetting:
    """Convert SQLAlchemy LegalSetting model to domain LegalSetting entity."""
    return domain.LegalSetting(
        current_value=Decimal(orm_setting.current_value),
        history=tuple(
            domain.SettingHistoryEntry(
                value=_decimal(item["value"]),
                start_date=date.fromisoformat(item["startDate"]),
                end_date=date.fromisoformat(item["endDate"]) if item.get("endDate") else None,
            )
            for item in orm_setting.history or []
        ),
    )


def history_to_json(setting: domain.LegalSetting) -> list[dict[str, Any]]:
    """Convert a setting's history to the JSON list stored in the history column."""
    return [
        {
            "value": entry.value,
            "startDate": entry.start_date.isoformat(),
            "endDate": entry.end_date.isoformat() if entry.end_date else None,
        }
        for entry in setting.history
    ]


def tac_to_domain(orm_tac: ORMTAC) -> domain.TAC:
    """Convert SQLAlchemy TAC model to domain TAC entity."""
    return domain.TAC(
        id=orm_tac.id,
        name=orm_tac.name,
        description=orm_tac.description,
        created_at=orm_tac.created_at,
        updated_at=orm_tac.updated_at,
    )


def tac_row_to_domain(orm_row: ORMTACRow) -> domain.TACRow:
    """Convert SQLAlchemy TACRow model to domain TACRow entity."""
    return domain.TACRow(
        fisa_cont=orm_row.fisa_cont,
        cont_corespondent=orm_row.cont_corespondent,
        debit_formula=orm_row.debit_formula,
        credit_formula=orm_row.credit_formula,
        valuta_formula=orm_row.valuta_formula,
        moneda_valuta_formula=orm_row.moneda_valuta_formula,
        row_order=orm_row.row_order,
    )


def tac_row_to_orm(row: domain.TACRow) -> ORMTACRow:
    """Convert domain TACRow entity to a new SQLAlchemy TACRow model."""
    return ORMTACRow(
        fisa_cont=row.fisa_cont,
        cont_corespondent=row.cont_corespondent,
        debit_formula=row.debit_formula,
        credit_formula=row.credit_formula,
        valuta_formula=row.valuta_formula,
        moneda_valuta_formula=row.moneda_valuta_formula,
        row_order=row.row_order,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        tac_id=orm_transaction.tac_id,
        transaction_date=orm_transaction.transaction_date,
        description=orm_transaction.description,
        variables=dict(orm_transaction.variables or {}),
    )


def account_file_entry_to_domain(orm_entry: ORMAccountFileEntry) -> domain.AccountFileEntry:
    """Convert SQLAlchemy AccountFileEntry model to domain AccountFileEntry entity."""
    return domain.AccountFileEntry(
        id=orm_entry.id,
        transaction_id=orm_entry.transaction_id,
        fisa_cont=orm_entry.fisa_cont,
        cont_corespondent=orm_entry.cont_corespondent,
        debit=_decimal(orm_entry.debit),
        credit=_decimal(orm_entry.credit),
        valuta=_decimal(orm_entry.valuta),
        moneda_valuta=orm_entry.moneda_valuta,
    )


def account_file_entry_to_orm(
    entry: domain.AccountFileEntryResult, transaction_id: Optional[int] = None
) -> ORMAccountFileEntry:
    """Convert an evaluated TAC row to a SQLAlchemy AccountFileEntry model."""
    return ORMAccountFileEntry(
        transaction_id=transaction_id,
        fisa_cont=entry.fisa_cont,
        cont_corespondent=entry.cont_corespondent,
        debit=entry.debit,
        credit=entry.credit,
        valuta=entry.valuta,
        moneda_valuta=entry.moneda_valuta,
    )
