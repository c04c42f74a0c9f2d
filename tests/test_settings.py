"""Tests for legal settings."""

from datetime import date
from decimal import Decimal

import pytest

from salarizare.domain.entities import LegalSetting, SettingHistoryEntry
from salarizare.domain.errors import ValidationError
from salarizare.domain.settings import (
    DEFAULT_VALUES,
    LEGACY_TICHET_KEY,
    PayrollSettings,
    SettingKey,
    initial_setting,
    migrate_legacy_keys,
    migrate_percentages,
    value_on,
    with_new_value,
)


def test_setting_key_from_name():
    """Keys resolve from display names and member names."""
    assert SettingKey.from_name("CASS") is SettingKey.CASS
    assert SettingKey.from_name("Salariul minim pe economie") is SettingKey.SALARIUL_MINIM
    assert SettingKey.from_name("salariul_minim") is SettingKey.SALARIUL_MINIM
    with pytest.raises(ValidationError, match="Unknown legal setting"):
        SettingKey.from_name("Bonus")


def test_first_load_initializes_defaults(settings_service, settings_day):
    """Every missing key gets its default and a single open entry."""
    settings = settings_service.load_settings(today=settings_day)

    assert set(settings) == {key.value for key in SettingKey}
    cas = settings[SettingKey.CAS.value]
    assert cas.current_value == Decimal("0.25")
    assert cas.history == (SettingHistoryEntry(value=Decimal("0.25"), start_date=settings_day),)


def test_load_is_stable(settings_service, settings_day, temp_db):
    """Loading twice returns the same settings."""
    first = settings_service.load_settings(today=settings_day)
    second = settings_service.load_settings(today=date(2030, 1, 1))
    assert first == second
    assert temp_db.get_legal_settings() == first


def test_update_setting_closes_open_entry(settings_service, settings_day):
    """Saving closes the open entry on the save date and appends a new one."""
    settings_service.load_settings(today=settings_day)
    changed_on = date(2025, 7, 1)

    updated = settings_service.update_setting(SettingKey.SALARIUL_MINIM, Decimal("4325"), today=changed_on)

    assert updated.current_value == Decimal("4325")
    assert updated.history == (
        SettingHistoryEntry(value=Decimal("4050"), start_date=settings_day, end_date=changed_on),
        SettingHistoryEntry(value=Decimal("4325"), start_date=changed_on, end_date=None),
    )
    assert sum(1 for entry in updated.history if entry.is_open) == 1
    assert settings_service.get_setting(SettingKey.SALARIUL_MINIM) == updated


def test_update_setting_percentage_input(settings_service, settings_day):
    """Whole percentages are stored as decimals."""
    settings_service.load_settings(today=settings_day)
    updated = settings_service.update_setting(
        SettingKey.CASS, Decimal("10"), today=date(2025, 2, 1), as_percentage=True
    )
    assert updated.current_value == Decimal("0.1")


def test_update_setting_percentage_flag_ignored_for_amounts(settings_service, settings_day):
    """Amount settings are never divided."""
    settings_service.load_settings(today=settings_day)
    updated = settings_service.update_setting(
        SettingKey.DEDUCERE_MINOR, Decimal("100"), today=date(2025, 2, 1), as_percentage=True
    )
    assert updated.current_value == Decimal("100")


def test_update_setting_rejects_negative(settings_service):
    """Negative values are rejected."""
    with pytest.raises(ValidationError, match="positive number"):
        settings_service.update_setting(SettingKey.CAS, Decimal("-1"))


def test_with_new_value_on_empty_history():
    """A setting without history just gains an open entry."""
    setting = with_new_value(LegalSetting(current_value=Decimal("1")), Decimal("2"), date(2025, 1, 1))
    assert setting.history == (SettingHistoryEntry(value=Decimal("2"), start_date=date(2025, 1, 1)),)


def test_value_on():
    """Effective values follow the history; later same-day entries win."""
    setting = initial_setting(Decimal("4050"), date(2025, 1, 1))
    setting = with_new_value(setting, Decimal("4325"), date(2025, 7, 1))

    assert value_on(setting, date(2024, 12, 31)) is None
    assert value_on(setting, date(2025, 1, 1)) == Decimal("4050")
    assert value_on(setting, date(2025, 6, 30)) == Decimal("4050")
    assert value_on(setting, date(2025, 7, 1)) == Decimal("4325")
    assert value_on(setting, date(2030, 1, 1)) == Decimal("4325")

    same_day = with_new_value(setting, Decimal("4400"), date(2025, 7, 1))
    assert value_on(same_day, date(2025, 7, 1)) == Decimal("4400")


def test_migrate_percentages_is_idempotent():
    """10 becomes 0.10 once and stays there."""
    stored = {
        SettingKey.CASS.value: LegalSetting(
            current_value=Decimal("10"),
            history=(
                SettingHistoryEntry(value=Decimal("0.1"), start_date=date(2024, 1, 1), end_date=date(2025, 1, 1)),
                SettingHistoryEntry(value=Decimal("10"), start_date=date(2025, 1, 1)),
            ),
        ),
        SettingKey.SALARIUL_MINIM.value: initial_setting(Decimal("4050"), date(2025, 1, 1)),
    }

    once = migrate_percentages(stored)
    twice = migrate_percentages(once)

    cass = once[SettingKey.CASS.value]
    assert cass.current_value == Decimal("0.1")
    assert [entry.value for entry in cass.history] == [Decimal("0.1"), Decimal("0.1")]
    assert once[SettingKey.SALARIUL_MINIM.value].current_value == Decimal("4050")
    assert twice == once


def test_migrate_legacy_key():
    """The legacy meal ticket key is renamed, unless the new one already exists."""
    legacy = initial_setting(Decimal("35"), date(2024, 1, 1))
    migrated = migrate_legacy_keys({LEGACY_TICHET_KEY: legacy})

    assert LEGACY_TICHET_KEY not in migrated
    assert migrated[SettingKey.VALOARE_TICHET_DEFAULT.value] == legacy

    current = initial_setting(Decimal("40"), date(2025, 1, 1))
    both = {LEGACY_TICHET_KEY: legacy, SettingKey.VALOARE_TICHET_DEFAULT.value: current}
    assert migrate_legacy_keys(both) == both


def test_load_migrates_stored_settings(settings_service, temp_db, settings_day):
    """Loading migrates legacy keys and percentages and writes them back."""
    temp_db.put_legal_settings(
        {
            LEGACY_TICHET_KEY: initial_setting(Decimal("35"), settings_day),
            SettingKey.CAM.value: initial_setting(Decimal("2.25"), settings_day),
        }
    )

    settings = settings_service.load_settings(today=settings_day)

    assert settings[SettingKey.VALOARE_TICHET_DEFAULT.value].current_value == Decimal("35")
    assert settings[SettingKey.CAM.value].current_value == Decimal("0.0225")
    stored = temp_db.get_legal_settings()
    assert LEGACY_TICHET_KEY not in stored
    assert stored[SettingKey.CAM.value].current_value == Decimal("0.0225")


def test_payroll_settings_defaults():
    """An empty store gives the documented defaults."""
    settings = PayrollSettings.from_legal_settings({})

    assert settings.salariul_minim == DEFAULT_VALUES[SettingKey.SALARIUL_MINIM]
    assert settings.valoare_tichet_default == Decimal("40")
    assert settings.salariu_cim_default == Decimal("4050")
    assert settings.cam == Decimal("0.0225")
    assert settings.indemnizatie_co_medical is None


def test_payroll_settings_legacy_ticket_fallback():
    """The legacy ticket key is used when the current one is missing."""
    stored = {LEGACY_TICHET_KEY: initial_setting(Decimal("35"), date(2024, 1, 1))}
    assert PayrollSettings.from_legal_settings(stored).valoare_tichet_default == Decimal("35")


def test_payroll_settings_as_of():
    """as_of picks the historical value, falling back to the current one."""
    setting = with_new_value(initial_setting(Decimal("4050"), date(2025, 1, 1)), Decimal("4325"), date(2025, 7, 1))
    stored = {SettingKey.SALARIUL_MINIM.value: setting}

    assert PayrollSettings.from_legal_settings(stored, as_of=date(2025, 3, 1)).salariul_minim == Decimal("4050")
    assert PayrollSettings.from_legal_settings(stored, as_of=date(2020, 1, 1)).salariul_minim == Decimal("4325")
    assert PayrollSettings.from_legal_settings(stored).salariul_minim == Decimal("4325")
