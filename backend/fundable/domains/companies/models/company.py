import uuid
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Optional, Tuple

from sqlalchemy import Column, Integer, String, Uuid
from sqlalchemy.orm import composite, relationship

from fundable.db.base_class import Base
from fundable.db.types import Money
from fundable.shared.exceptions import InvalidCompanyDataException
from .audit import AuditMixin, utcnow
from .identifier import CentralIndexKey
from .income_record import IncomeRecord

MAX_ENTITY_NAME_LENGTH = 500

# Fundable amount rules
REQUIRED_YEARS = frozenset({2018, 2019, 2020, 2021, 2022})
HIGH_INCOME_THRESHOLD = Decimal("10000000000")
HIGH_INCOME_PERCENTAGE = Decimal("0.1233")
STANDARD_PERCENTAGE = Decimal("0.2151")
VOWEL_NAME_MULTIPLIER = Decimal("1.15")
INCOME_DECREASE_MULTIPLIER = Decimal("0.75")
CENTS = Decimal("0.01")
VOWELS = frozenset("AEIOU")

ZERO = Decimal("0")


def round_currency(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_EVEN)


def starts_with_vowel(name: Optional[str]) -> bool:
    if not name or not name.strip():
        return False
    return name.lstrip()[0].upper() in VOWELS


def _validate_entity_name(entity_name: Optional[str]) -> None:
    if entity_name is None or not entity_name.strip():
        raise InvalidCompanyDataException("Entity name cannot be empty.")
    if len(entity_name) > MAX_ENTITY_NAME_LENGTH:
        raise InvalidCompanyDataException(
            f"Entity name cannot exceed {MAX_ENTITY_NAME_LENGTH} characters.",
            details={"length": len(entity_name)}
        )


class Company(AuditMixin, Base):
    """
    Company aggregate root.

    Owns its income records and the two derived fundable amounts. Income records
    are only added through ``add_income_record``, which keeps a single record per
    (year, form) pair.
    """
    __tablename__ = "companies"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    _cik_value = Column("cik", Integer, nullable=False, unique=True, index=True)
    cik = composite(CentralIndexKey, _cik_value)
    entity_name = Column(String(MAX_ENTITY_NAME_LENGTH), nullable=False)
    standard_fundable_amount = Column(Money, nullable=True)
    special_fundable_amount = Column(Money, nullable=True)

    # lazy="raise": async sessions cannot lazy load, repositories eager load explicitly
    _income_records = relationship(
        IncomeRecord,
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
        order_by=IncomeRecord.year,
    )

    @classmethod
    def create(cls, cik: CentralIndexKey, entity_name: str) -> "Company":
        """
        Create a new company with no income records and no calculated amounts.

        Raises:
            ValueError: If ``cik`` is missing.
            InvalidCompanyDataException: If ``entity_name`` is blank or too long.
        """
        if cik is None:
            raise ValueError("cik is required.")
        _validate_entity_name(entity_name)

        return cls(
            id=uuid.uuid4(),
            cik=cik,
            entity_name=entity_name,
            standard_fundable_amount=None,
            special_fundable_amount=None,
            created_at=utcnow(),
            is_deleted=False,
            _income_records=[],
        )

    @property
    def income_records(self) -> Tuple[IncomeRecord, ...]:
        return tuple(self._income_records)

    @property
    def has_fundable_amounts(self) -> bool:
        return self.standard_fundable_amount is not None

    def add_income_record(self, income_record: IncomeRecord) -> None:
        """
        Attach an income record, replacing any existing record with the same
        (year, form). The incoming record wins; fields are not merged.
        """
        if income_record is None:
            raise ValueError("income_record is required.")
        if income_record.company_id != self.id:
            raise InvalidCompanyDataException(
                "Income record belongs to a different company.",
                details={"company_id": str(self.id), "record_company_id": str(income_record.company_id)}
            )

        existing = next(
            (r for r in self._income_records
             if r.year == income_record.year and r.form == income_record.form),
            None,
        )
        if existing is not None:
            self._income_records.remove(existing)

        self._income_records.append(income_record)
        self.mark_updated()

    def calculate_fundable_amounts(self) -> None:
        """
        Derive the standard and special fundable amounts from the income records.

        Companies without income for every year 2018-2022, or without positive
        income in both 2021 and 2022, get zero for both amounts. Otherwise:

        * standard = highest 2018-2022 income x 12.33% (income >= $10B) or 21.51%
        * special = standard, +15% if the name starts with a vowel, -25% if
          2022 income is lower than 2021 income

        Both amounts are rounded to cents. Calling this repeatedly on unchanged
        data yields identical results.
        """
        available_years = {r.year for r in self._income_records}
        if not REQUIRED_YEARS.issubset(available_years):
            self._set_fundable_amounts(ZERO, ZERO)
            return

        income_2021 = self._income_for_year(2021)
        income_2022 = self._income_for_year(2022)
        if income_2021 <= 0 or income_2022 <= 0:
            self._set_fundable_amounts(ZERO, ZERO)
            return

        highest_income = max(
            r.amount for r in self._income_records if r.year in REQUIRED_YEARS
        )
        percentage = (
            HIGH_INCOME_PERCENTAGE if highest_income >= HIGH_INCOME_THRESHOLD
            else STANDARD_PERCENTAGE
        )
        standard_amount = round_currency(highest_income * percentage)

        special_amount = standard_amount
        if starts_with_vowel(self.entity_name):
            special_amount *= VOWEL_NAME_MULTIPLIER
        if income_2022 < income_2021:
            special_amount *= INCOME_DECREASE_MULTIPLIER

        self._set_fundable_amounts(standard_amount, round_currency(special_amount))

    def is_eligible_for_funding(self) -> bool:
        return self.standard_fundable_amount is not None and self.standard_fundable_amount > 0

    def update_entity_name(self, entity_name: str) -> bool:
        """
        Rename the company.

        The special amount depends on the name, so when amounts were already
        calculated they are recalculated right away. Names changed before the
        first calculation do not trigger one.

        Returns:
            True if the fundable amounts were recalculated.
        """
        _validate_entity_name(entity_name)

        self.entity_name = entity_name
        self.mark_updated()

        if self.has_fundable_amounts:
            self.calculate_fundable_amounts()
            return True
        return False

    def _income_for_year(self, year: int) -> Decimal:
        record = next((r for r in self._income_records if r.year == year), None)
        return record.amount if record is not None else ZERO

    def _set_fundable_amounts(self, standard_amount: Decimal, special_amount: Decimal) -> None:
        self.standard_fundable_amount = standard_amount
        self.special_fundable_amount = special_amount
        self.mark_updated()

    def __repr__(self) -> str:
        return f"<Company cik={self.cik} name={self.entity_name!r}>"
