"""SQLAlchemy models for salarizare database."""

import json
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker

Base = declarative_base()


class Employee(Base):
    """Employee model."""

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, autoincrement=False)
    unique_id = Column(String, nullable=False)
    nume = Column(String, nullable=False)
    companie = Column(String, nullable=False, default="")
    principal_loc_munca = Column(Boolean, nullable=False, default=True)
    persoane_intretinere = Column(Integer, nullable=False, default=0)
    din_care_minori = Column(Integer, nullable=False, default=0)
    varsta = Column(Integer, nullable=False, default=0)
    tichete_de_masa = Column(Boolean, nullable=False, default=False)
    valoare_tichet_de_masa = Column(Numeric(12, 2), nullable=True)
    zile_co_medical = Column(Integer, nullable=True)
    indemnizatie_zi_co_medical = Column(Numeric(12, 2), nullable=True)
    zile_co_odihna = Column(Integer, nullable=True)
    indemnizatie_zi_co_odihna = Column(Numeric(12, 2), nullable=True)
    salariu_cim = Column(Numeric(12, 2), nullable=True)
    sal_brut_cf_zile_lucrate_rounded = Column(Integer, nullable=True)
    indem_co_medical_rounded = Column(Integer, nullable=True)
    indem_co_odihna_rounded = Column(Integer, nullable=True)


class LegalSetting(Base):
    """Legal setting model; history is a JSON list of effective-dated values."""

    __tablename__ = "legal_settings"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False)
    # Stored as text to keep rates such as 0.0225 exact.
    current_value = Column(String, nullable=False)
    history = Column(JSON, nullable=False, default=list)


class WorkingDays(Base):
    """Working days for one month of one year."""

    __tablename__ = "working_days"

    id = Column(Integer, primary_key=True)
    year = Column(String(4), nullable=False)
    month = Column(Integer, nullable=False)
    days = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("year", "month", name="uq_working_days_year_month"),)


class TAC(Base):
    """Transaction Allocation Template model."""

    __tablename__ = "tacs"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    rows = relationship(
        "TACRow",
        back_populates="tac",
        cascade="all, delete-orphan",
        order_by="TACRow.row_order",
    )
    transactions = relationship("Transaction", back_populates="tac")


class TACRow(Base):
    """One row of a TAC."""

    __tablename__ = "tac_rows"

    id = Column(Integer, primary_key=True)
    tac_id = Column(Integer, ForeignKey("tacs.id", ondelete="CASCADE"), nullable=False)
    fisa_cont = Column(String, nullable=False)
    cont_corespondent = Column(String, nullable=True)
    debit_formula = Column(String, nullable=True)
    credit_formula = Column(String, nullable=True)
    valuta_formula = Column(String, nullable=True)
    moneda_valuta_formula = Column(String, nullable=True)
    row_order = Column(Integer, nullable=False, default=0)

    # Relationships
    tac = relationship("TAC", back_populates="rows")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    tac_id = Column(Integer, ForeignKey("tacs.id", ondelete="SET NULL"), nullable=True)
    transaction_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    variables = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    tac = relationship("TAC", back_populates="transactions")
    entries = relationship(
        "AccountFileEntry",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="AccountFileEntry.id",
    )


class AccountFileEntry(Base):
    """Ledger entry generated by applying a TAC row to a transaction."""

    __tablename__ = "account_file_entries"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False)
    fisa_cont = Column(String, nullable=False)
    cont_corespondent = Column(String, nullable=True)
    debit = Column(Numeric(14, 2), nullable=False, default=0)
    credit = Column(Numeric(14, 2), nullable=False, default=0)
    valuta = Column(Numeric(14, 2), nullable=True)
    moneda_valuta = Column(String, nullable=True)

    # Relationships
    transaction = relationship("Transaction", back_populates="entries")


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def json_dumps(value: Any) -> str:
    """Serialize JSON columns; Decimals are written as plain numbers."""
    return json.dumps(value, default=_json_default)


def json_loads(text: str) -> Any:
    """Deserialize JSON columns; fractional numbers come back as Decimal."""
    return json.loads(text, parse_float=Decimal)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(
        database_url,
        echo=False,
        json_serializer=json_dumps,
        json_deserializer=json_loads,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
