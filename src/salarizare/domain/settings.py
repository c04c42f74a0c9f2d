"""Legal settings domain service.

Legal settings are named constants (tax rates, minimum wage, default meal
ticket value, ...) with an effective-dated history. The store keeps them
under their display names; in code they are addressed through
``SettingKey`` and consumed by the calculator as a typed
``PayrollSettings`` snapshot.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional

from salarizare.database.base import Database
from salarizare.domain.entities import LegalSetting, SettingHistoryEntry
from salarizare.domain.errors import (
    PersistenceError,
    ValidationError,
    store_write_failed,
    unknown_setting,
)

logger = logging.getLogger(__name__)


class SettingKey(str, Enum):
    """Known legal settings, valued by their stored display name."""

    SALARIUL_MINIM = "Salariul minim pe economie"
    VALOARE_TICHET_DEFAULT = "Valoare tichet de masa - default clienti BONO"
    DEDUCERE_MINOR = "Deducere / minor in intretinere"
    DEDUCERE_TINERI = "Deducere pentru tineri <26 ani"
    SALARIU_CIM_DEFAULT = "Salariul CIM clienti Bono"
    SUMA_SCUTITA_DE_TAXE = "Suma scutita de taxe"
    CASS = "CASS"
    CAS = "CAS"
    COTA_IMPOZIT = "Cota impozit"
    CAM = "CAM"
    ZILE_CO_ODIHNA_PE_AN = "Numar zile CO odihna / an - default clienti BONO"
    ZILE_CO_MEDICAL_NEPLATITE = "Primele x zile de CO medical neplatite, cf. legii"
    INDEMNIZATIE_CO_MEDICAL = "Indemnizatie CO medical"
    INDEMNIZATIE_CO_ODIHNA = "Indemnizatie CO odihna"

    @classmethod
    def from_name(cls, name: str) -> "SettingKey":
        """Resolve a display name or enum member name (case-insensitive)."""
        for key in cls:
            if name == key.value or name.upper() == key.name:
                return key
        raise ValidationError(unknown_setting(name))


LEGACY_TICHET_KEY = "Valoare tichet de masa"

DEFAULT_VALUES: dict[SettingKey, Decimal] = {
    SettingKey.SALARIUL_MINIM: Decimal("4050"),
    SettingKey.VALOARE_TICHET_DEFAULT: Decimal("40"),
    SettingKey.DEDUCERE_MINOR: Decimal("100"),
    SettingKey.DEDUCERE_TINERI: Decimal("607.5"),
    SettingKey.SALARIU_CIM_DEFAULT: Decimal("4050"),
    SettingKey.SUMA_SCUTITA_DE_TAXE: Decimal("300"),
    SettingKey.CASS: Decimal("0.1"),
    SettingKey.CAS: Decimal("0.25"),
    SettingKey.COTA_IMPOZIT: Decimal("0.1"),
    SettingKey.CAM: Decimal("0.0225"),
    SettingKey.ZILE_CO_ODIHNA_PE_AN: Decimal("0"),
    SettingKey.ZILE_CO_MEDICAL_NEPLATITE: Decimal("0"),
    SettingKey.INDEMNIZATIE_CO_MEDICAL: Decimal("0"),
    SettingKey.INDEMNIZATIE_CO_ODIHNA: Decimal("0"),
}

PERCENTAGE_KEYS = frozenset(
    {SettingKey.CASS, SettingKey.CAS, SettingKey.COTA_IMPOZIT, SettingKey.CAM}
)

SECTIONS: dict[str, tuple[SettingKey, ...]] = {
    "Salariu": (
        SettingKey.SALARIUL_MINIM,
        SettingKey.SALARIU_CIM_DEFAULT,
        SettingKey.VALOARE_TICHET_DEFAULT,
    ),
    "Deduceri": (
        SettingKey.SUMA_SCUTITA_DE_TAXE,
        SettingKey.DEDUCERE_MINOR,
        SettingKey.DEDUCERE_TINERI,
    ),
    "Taxe": (SettingKey.CASS, SettingKey.CAS, SettingKey.COTA_IMPOZIT, SettingKey.CAM),
    "Concedii": (
        SettingKey.ZILE_CO_ODIHNA_PE_AN,
        SettingKey.ZILE_CO_MEDICAL_NEPLATITE,
        SettingKey.INDEMNIZATIE_CO_MEDICAL,
        SettingKey.INDEMNIZATIE_CO_ODIHNA,
    ),
}


@dataclass(frozen=True)
class PayrollSettings:
    """Typed snapshot of the legal settings the payroll calculator reads."""

    salariul_minim: Decimal = DEFAULT_VALUES[SettingKey.SALARIUL_MINIM]
    valoare_tichet_default: Decimal = DEFAULT_VALUES[SettingKey.VALOARE_TICHET_DEFAULT]
    deducere_minor: Decimal = DEFAULT_VALUES[SettingKey.DEDUCERE_MINOR]
    deducere_tineri: Decimal = DEFAULT_VALUES[SettingKey.DEDUCERE_TINERI]
    salariu_cim_default: Decimal = DEFAULT_VALUES[SettingKey.SALARIU_CIM_DEFAULT]
    suma_scutita_de_taxe: Decimal = DEFAULT_VALUES[SettingKey.SUMA_SCUTITA_DE_TAXE]
    cas: Decimal = DEFAULT_VALUES[SettingKey.CAS]
    cass: Decimal = DEFAULT_VALUES[SettingKey.CASS]
    cota_impozit: Decimal = DEFAULT_VALUES[SettingKey.COTA_IMPOZIT]
    cam: Decimal = DEFAULT_VALUES[SettingKey.CAM]
    # None when the setting was never stored; employee edits then leave the
    # daily allowance untouched.
    indemnizatie_co_medical: Optional[Decimal] = None
    indemnizatie_co_odihna: Optional[Decimal] = None

    @classmethod
    def from_legal_settings(
        cls, settings: Mapping[str, LegalSetting], as_of: Optional[date] = None
    ) -> "PayrollSettings":
        """Build a snapshot from stored settings, falling back to defaults.

        Args:
            settings: Stored settings keyed by display name
            as_of: If given, use the value effective on this date instead of
                the current value

        Returns:
            PayrollSettings instance
        """

        def value(key: str) -> Optional[Decimal]:
            setting = settings.get(key)
            if setting is None:
                return None
            if as_of is not None:
                effective = value_on(setting, as_of)
                if effective is not None:
                    return effective
            return setting.current_value

        def value_or_default(key: SettingKey) -> Decimal:
            found = value(key.value)
            return found if found is not None else DEFAULT_VALUES[key]

        tichet = value(SettingKey.VALOARE_TICHET_DEFAULT.value)
        if tichet is None:
            tichet = value(LEGACY_TICHET_KEY)

        return cls(
            salariul_minim=value_or_default(SettingKey.SALARIUL_MINIM),
            valoare_tichet_default=tichet if tichet is not None else DEFAULT_VALUES[SettingKey.VALOARE_TICHET_DEFAULT],
            deducere_minor=value_or_default(SettingKey.DEDUCERE_MINOR),
            deducere_tineri=value_or_default(SettingKey.DEDUCERE_TINERI),
            salariu_cim_default=value_or_default(SettingKey.SALARIU_CIM_DEFAULT),
            suma_scutita_de_taxe=value_or_default(SettingKey.SUMA_SCUTITA_DE_TAXE),
            cas=value_or_default(SettingKey.CAS),
            cass=value_or_default(SettingKey.CASS),
            cota_impozit=value_or_default(SettingKey.COTA_IMPOZIT),
            cam=value_or_default(SettingKey.CAM),
            indemnizatie_co_medical=value(SettingKey.INDEMNIZATIE_CO_MEDICAL.value),
            indemnizatie_co_odihna=value(SettingKey.INDEMNIZATIE_CO_ODIHNA.value),
        )


def initial_setting(value: Decimal, today: date) -> LegalSetting:
    """Create a setting with a single open history entry."""
    return LegalSetting(
        current_value=value,
        history=(SettingHistoryEntry(value=value, start_date=today, end_date=None),),
    )


def value_on(setting: LegalSetting, on: date) -> Optional[Decimal]:
    """Return the value effective on a date, or None if no entry covers it.

    An entry covers ``start_date <= on < end_date``; the open entry covers
    every date from its start. When a value was replaced on the same day it
    started, the later entry wins.
    """
    found = None
    for entry in setting.history:
        if entry.start_date > on:
            continue
        if entry.end_date is None or on < entry.end_date or entry.start_date == entry.end_date == on:
            found = entry.value
    return found


def migrate_percentages(settings: Mapping[str, LegalSetting]) -> dict[str, LegalSetting]:
    """Convert percentage settings stored as whole numbers to decimals.

    A current value greater than 1 (e.g. 10 for 10%) is divided by 100,
    together with every history value greater than 1. Values already at or
    below 1 are left alone, so running this twice changes nothing.
    """
    migrated = dict(settings)
    for key in PERCENTAGE_KEYS:
        setting = migrated.get(key.value)
        if setting is None or setting.current_value <= 1:
            continue
        migrated[key.value] = LegalSetting(
            current_value=setting.current_value / 100,
            history=tuple(
                replace(entry, value=entry.value / 100) if entry.value > 1 else entry
                for entry in setting.history
            ),
        )
    return migrated


def migrate_legacy_keys(settings: Mapping[str, LegalSetting]) -> dict[str, LegalSetting]:
    """Rename the legacy meal ticket key to its current name."""
    migrated = dict(settings)
    new_key = SettingKey.VALOARE_TICHET_DEFAULT.value
    if LEGACY_TICHET_KEY in migrated and new_key not in migrated:
        migrated[new_key] = migrated.pop(LEGACY_TICHET_KEY)
    return migrated


def with_new_value(setting: LegalSetting, value: Decimal, today: date) -> LegalSetting:
    """Return a setting with ``value`` appended as the new open history entry.

    The previous open entry is closed on ``today``; history is never deleted.
    """
    history = list(setting.history)
    if history and history[-1].end_date is None:
        history[-1] = replace(history[-1], end_date=today)
    history.append(SettingHistoryEntry(value=value, start_date=today, end_date=None))
    return LegalSetting(current_value=value, history=tuple(history))


class LegalSettingsService:
    """Service for loading, migrating and editing legal settings."""

    def __init__(self, db: Database):
        """Initialize legal settings service.

        Args:
            db: Database instance
        """
        self.db = db

    def load_settings(self, today: Optional[date] = None) -> dict[str, LegalSetting]:
        """Load settings, initializing and migrating them as needed.

        Missing keys are created with their default value; legacy keys and
        percentage values are migrated. The result is written back when
        anything changed.

        Args:
            today: Start date for newly initialized entries (defaults to today)

        Returns:
            Settings keyed by display name
        """
        today = today or date.today()
        stored = self.db.get_legal_settings()

        settings = migrate_percentages(migrate_legacy_keys(stored))
        for key, default in DEFAULT_VALUES.items():
            if key.value not in settings:
                settings[key.value] = initial_setting(default, today)

        if settings != stored:
            logger.info("Initializing or migrating legal settings (%d keys)", len(settings))
            if not self.db.put_legal_settings(settings):
                raise PersistenceError(store_write_failed("legal settings"))
        return settings

    def get_payroll_settings(self, as_of: Optional[date] = None) -> PayrollSettings:
        """Return the typed settings snapshot used by the payroll calculator.

        Args:
            as_of: Optional date; use the values effective on that date

        Returns:
            PayrollSettings instance
        """
        return PayrollSettings.from_legal_settings(self.load_settings(), as_of=as_of)

    def get_setting(self, key: SettingKey) -> LegalSetting:
        """Get one setting with its history."""
        return self.load_settings()[key.value]

    def update_setting(
        self, key: SettingKey, value: Decimal, today: Optional[date] = None, as_percentage: bool = False
    ) -> LegalSetting:
        """Save a new value for a setting.

        Args:
            key: Setting to update
            value: New value
            today: Date of the change (defaults to today)
            as_percentage: If True and ``key`` is a percentage setting,
                ``value`` is a whole percentage (e.g. 10 for 10%)

        Returns:
            The updated setting

        Raises:
            ValidationError: If value is negative
            PersistenceError: If the store rejects the write
        """
        if value < 0:
            raise ValidationError("Please enter a valid positive number")
        if as_percentage and key in PERCENTAGE_KEYS:
            value = value / 100

        today = today or date.today()
        settings = self.load_settings(today=today)
        updated = with_new_value(settings[key.value], value, today)
        settings[key.value] = updated

        if not self.db.put_legal_settings(settings):
            raise PersistenceError(store_write_failed("legal settings"))
        logger.info("Setting '%s' changed to %s from %s", key.value, value, today.isoformat())
        return updated
