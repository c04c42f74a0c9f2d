"""Domain model entities for salarizare.

These are pure data classes representing business concepts, independent of
database schema. Services and the calculator only ever see these types;
the database layer maps its ORM rows to them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union

# Scalar values a transaction variable may hold. Nested dicts are allowed in
# formula contexts to model dotted namespaces such as ``T.Moneda``.
VariableValue = Union[int, float, Decimal, str, bool, None]


@dataclass(frozen=True)
class Employee:
    """Employee domain entity.

    The three ``*_rounded`` fields are cached results of the payroll
    calculator for the month last recalculated; they are only written
    through ``salarizare.domain.payroll.derive``.
    """

    id: int
    unique_id: str
    nume: str
    companie: str
    principal_loc_munca: bool
    persoane_intretinere: int
    din_care_minori: int
    varsta: int
    tichete_de_masa: bool = False
    valoare_tichet_de_masa: Optional[Decimal] = None
    zile_co_medical: Optional[int] = None
    indemnizatie_zi_co_medical: Optional[Decimal] = None
    zile_co_odihna: Optional[int] = None
    indemnizatie_zi_co_odihna: Optional[Decimal] = None
    salariu_cim: Optional[Decimal] = None
    sal_brut_cf_zile_lucrate_rounded: Optional[int] = None
    indem_co_medical_rounded: Optional[int] = None
    indem_co_odihna_rounded: Optional[int] = None


@dataclass(frozen=True)
class SettingHistoryEntry:
    """One effective-dated value of a legal setting.

    ``end_date`` is None for the currently active entry.
    """

    value: Decimal
    start_date: date
    end_date: Optional[date] = None

    @property
    def is_open(self) -> bool:
        return self.end_date is None


@dataclass(frozen=True)
class LegalSetting:
    """A named legal constant with its value history."""

    current_value: Decimal
    history: tuple[SettingHistoryEntry, ...] = ()


@dataclass(frozen=True)
class TAC:
    """Transaction Allocation Template domain entity."""

    id: int
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TACRow:
    """One row of a TAC: a ledger account and the formulas that fill it."""

    fisa_cont: str
    cont_corespondent: Optional[str] = None
    debit_formula: Optional[str] = None
    credit_formula: Optional[str] = None
    valuta_formula: Optional[str] = None
    moneda_valuta_formula: Optional[str] = None
    row_order: int = 0


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity with its variable bag."""

    id: int
    tac_id: Optional[int]
    transaction_date: date
    description: Optional[str]
    variables: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AccountFileEntryResult:
    """Ledger entry candidate produced by applying one TAC row."""

    fisa_cont: str
    cont_corespondent: Optional[str]
    debit: Decimal
    credit: Decimal
    valuta: Optional[Decimal] = None
    moneda_valuta: Optional[str] = None


@dataclass(frozen=True)
class AccountFileEntry:
    """Persisted ledger entry ("fișă cont") for a transaction."""

    id: int
    transaction_id: int
    fisa_cont: str
    cont_corespondent: Optional[str]
    debit: Decimal
    credit: Decimal
    valuta: Optional[Decimal] = None
    moneda_valuta: Optional[str] = None


@dataclass(frozen=True)
class DeductionTableRow:
    """One income band of the personal deduction table."""

    row: int
    income_from: int
    income_to: int
    percentages: tuple[Decimal, Decimal, Decimal, Decimal, Decimal]


@dataclass(frozen=True)
class DerivedFields:
    """The cached, rounded payroll figures persisted on an employee."""

    sal_brut_cf_zile_lucrate_rounded: Optional[int]
    indem_co_medical_rounded: int
    indem_co_odihna_rounded: int


@dataclass(frozen=True)
class PayrollResult:
    """Every figure of the monthly payroll chain for one employee."""

    zile_lucrate: int
    sal_brut_cf_zile_lucrate: Optional[int]
    indem_co_medical: int
    indem_co_odihna: int
    total_venituri_brute: int
    scutire_de_taxe: Decimal
    baza_de_calcul_contributii: int
    cas: int
    cass: int
    cam: int
    tichete_de_masa: int
    cass_tichete_de_masa: int
    venit_impozabil_inainte_de_deduceri: int
    venit_pt_calcul_deducere: Decimal
    deducere_procent: Optional[Decimal]
    deducere_personala: int
    deducere_minori: int
    deducere_pentru_tineri: int
    venit_impozabil_dupa_deduceri: int
    impozit_pe_venit: int
    salariu_net: int

    @property
    def cass_incl_tichete(self) -> int:
        return self.cass + self.cass_tichete_de_masa
