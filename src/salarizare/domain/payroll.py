"""Payroll calculator and payroll domain service.

The calculator is a pure function of (employee, settings, working days in
month). Each figure is rounded half away from zero at the same point the
payroll sheet rounds it, and later figures consume the rounded value.
"""

import logging
from dataclasses import replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from salarizare.database.base import Database
from salarizare.domain.deduction import lookup_deduction_percentage
from salarizare.domain.entities import DerivedFields, Employee, PayrollResult
from salarizare.domain.errors import PersistenceError, store_write_failed
from salarizare.domain.settings import LegalSettingsService, PayrollSettings
from salarizare.domain.working_days import WorkingDaysService, days_worked, validate_month

logger = logging.getLogger(__name__)

# Gross income up to and including this amount qualifies for the tax-exempt sum.
SCUTIRE_PRAG = Decimal("4300")
TINERI_VARSTA_MAX = 26


def round_amount(value: Decimal | int | float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).to_integral_value(rounding=ROUND_HALF_UP))


def scutire_de_taxe(total_venituri_brute: Decimal | int, principal_loc_munca: bool, suma_scutita: Decimal) -> Decimal:
    """Tax-exempt amount: only for the primary job and gross income up to the threshold."""
    if principal_loc_munca and total_venituri_brute <= SCUTIRE_PRAG:
        return suma_scutita
    return Decimal(0)


def derive(employee: Employee, settings: PayrollSettings, working_days_in_month: Optional[int]) -> DerivedFields:
    """Compute the three cached, rounded figures stored on an employee.

    Args:
        employee: Employee with raw inputs
        settings: Payroll settings snapshot
        working_days_in_month: Working days of the month, or None if undefined

    Returns:
        DerivedFields; the gross pay is None when the month has no working days
    """
    salariu_cim = employee.salariu_cim if employee.salariu_cim is not None else settings.salariu_cim_default
    zile_med = employee.zile_co_medical or 0
    zile_odihna = employee.zile_co_odihna or 0
    zile_lucrate = days_worked(working_days_in_month, zile_med, zile_odihna)

    sal_brut = None
    if working_days_in_month is not None and working_days_in_month > 0:
        sal_brut = round_amount(Decimal(salariu_cim) * zile_lucrate / working_days_in_month)

    return DerivedFields(
        sal_brut_cf_zile_lucrate_rounded=sal_brut,
        indem_co_medical_rounded=round_amount(zile_med * (employee.indemnizatie_zi_co_medical or Decimal(0))),
        indem_co_odihna_rounded=round_amount(zile_odihna * (employee.indemnizatie_zi_co_odihna or Decimal(0))),
    )


def apply_derived(employee: Employee, settings: PayrollSettings, working_days_in_month: Optional[int]) -> Employee:
    """Return the employee with its cached figures recomputed."""
    derived = derive(employee, settings, working_days_in_month)
    return replace(
        employee,
        sal_brut_cf_zile_lucrate_rounded=derived.sal_brut_cf_zile_lucrate_rounded,
        indem_co_medical_rounded=derived.indem_co_medical_rounded,
        indem_co_odihna_rounded=derived.indem_co_odihna_rounded,
    )


def calculate(employee: Employee, settings: PayrollSettings, working_days_in_month: Optional[int]) -> PayrollResult:
    """Run the monthly payroll chain for one employee.

    Args:
        employee: Employee with raw inputs
        settings: Payroll settings snapshot
        working_days_in_month: Working days of the month, or None if undefined

    Returns:
        PayrollResult with every intermediate figure
    """
    derived = derive(employee, settings, working_days_in_month)
    zile_lucrate = days_worked(
        working_days_in_month, employee.zile_co_medical or 0, employee.zile_co_odihna or 0
    )

    total_venituri_brute = (
        (derived.sal_brut_cf_zile_lucrate_rounded or 0)
        + derived.indem_co_medical_rounded
        + derived.indem_co_odihna_rounded
    )

    principal = employee.principal_loc_munca
    scutire = scutire_de_taxe(total_venituri_brute, principal, settings.suma_scutita_de_taxe)

    baza = round_amount(total_venituri_brute - scutire)
    cas = round_amount(baza * settings.cas)
    cass = round_amount(baza * settings.cass)
    cam = round_amount(baza * settings.cam)

    # Meal tickets: the taxable income uses the rounded value, the deduction
    # band lookup uses the unrounded one.
    tichete_brut = Decimal(0)
    if employee.tichete_de_masa and zile_lucrate > 0:
        valoare = (
            employee.valoare_tichet_de_masa
            if employee.valoare_tichet_de_masa is not None
            else settings.valoare_tichet_default
        )
        tichete_brut = zile_lucrate * Decimal(valoare)
    tichete_de_masa = round_amount(tichete_brut)
    cass_tichete_de_masa = round_amount(tichete_de_masa * settings.cass)

    venit_inainte = baza - cas - cass - cass_tichete_de_masa + tichete_de_masa

    venit_pt_calcul_deducere = total_venituri_brute + tichete_brut
    procent = lookup_deduction_percentage(venit_pt_calcul_deducere, employee.persoane_intretinere or 0)

    deducere_personala = 0
    deducere_minori = 0
    deducere_tineri = 0
    if principal:
        if procent is not None:
            deducere_personala = round_amount(procent / 100 * settings.salariul_minim)
        deducere_minori = round_amount((employee.din_care_minori or 0) * settings.deducere_minor)
        if (employee.varsta or 0) < TINERI_VARSTA_MAX:
            deducere_tineri = round_amount(settings.deducere_tineri)

    venit_dupa = venit_inainte - deducere_personala - deducere_minori - deducere_tineri
    impozit = round_amount(venit_dupa * settings.cota_impozit)
    salariu_net = total_venituri_brute - cas - cass - impozit - cass_tichete_de_masa

    return PayrollResult(
        zile_lucrate=zile_lucrate,
        sal_brut_cf_zile_lucrate=derived.sal_brut_cf_zile_lucrate_rounded,
        indem_co_medical=derived.indem_co_medical_rounded,
        indem_co_odihna=derived.indem_co_odihna_rounded,
        total_venituri_brute=total_venituri_brute,
        scutire_de_taxe=scutire,
        baza_de_calcul_contributii=baza,
        cas=cas,
        cass=cass,
        cam=cam,
        tichete_de_masa=tichete_de_masa,
        cass_tichete_de_masa=cass_tichete_de_masa,
        venit_impozabil_inainte_de_deduceri=venit_inainte,
        venit_pt_calcul_deducere=venit_pt_calcul_deducere,
        deducere_procent=procent,
        deducere_personala=deducere_personala,
        deducere_minori=deducere_minori,
        deducere_pentru_tineri=deducere_tineri,
        venit_impozabil_dupa_deduceri=venit_dupa,
        impozit_pe_venit=impozit,
        salariu_net=salariu_net,
    )


def summarize(results: Iterable[PayrollResult]) -> dict[str, int]:
    """Sum the summary columns over a list of payroll results."""
    totals = {"salariu_net": 0, "cas": 0, "cass_incl_tichete": 0, "impozit_pe_venit": 0, "cam": 0}
    for result in results:
        totals["salariu_net"] += result.salariu_net
        totals["cas"] += result.cas
        totals["cass_incl_tichete"] += result.cass_incl_tichete
        totals["impozit_pe_venit"] += result.impozit_pe_venit
        totals["cam"] += result.cam
    return totals


class PayrollService:
    """Service for monthly payroll runs over all employees."""

    def __init__(self, db: Database):
        """Initialize payroll service.

        Args:
            db: Database instance
        """
        self.db = db
        self.settings_service = LegalSettingsService(db)
        self.working_days_service = WorkingDaysService(db)

    def recalculate_employees(self, year: int, month: int) -> list[Employee]:
        """Recompute and persist every employee's cached figures for a month.

        Run this whenever the month's working days or the default contract
        salary change.

        Returns:
            The updated employees

        Raises:
            PersistenceError: If the store rejects the write
        """
        validate_month(month)
        employees = self.db.list_employees()
        if not employees:
            return []

        settings = self.settings_service.get_payroll_settings()
        working_days = self.working_days_service.get_days_for_month(year, month)
        updated = [apply_derived(emp, settings, working_days) for emp in employees]

        if not self.db.replace_employees(updated):
            raise PersistenceError(store_write_failed("employees"))
        logger.info("Recalculated %d employees for %04d-%02d", len(updated), year, month)
        return updated

    def compute_month(
        self, year: int, month: int, effective_dated: bool = False
    ) -> list[tuple[Employee, PayrollResult]]:
        """Compute the payroll table for a month.

        Args:
            year: Year
            month: Month number (1-12)
            effective_dated: If True, use the settings effective on the first
                day of the month instead of the current values

        Returns:
            List of (employee, result) pairs ordered by employee ID
        """
        validate_month(month)
        as_of = date(int(year), month, 1) if effective_dated else None
        settings = self.settings_service.get_payroll_settings(as_of=as_of)
        working_days = self.working_days_service.get_days_for_month(year, month)
        return [(emp, calculate(emp, settings, working_days)) for emp in self.db.list_employees()]
