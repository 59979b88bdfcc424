import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional, Union

from sqlalchemy import Column, Date, ForeignKey, Index, Integer, String, Uuid

from fundable.db.base_class import Base
from fundable.db.types import Money
from .audit import AuditMixin, utcnow

MIN_YEAR = 1900

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    # str() first so floats keep their printed value instead of binary noise
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class IncomeRecord(AuditMixin, Base):
    """Net income (or loss) reported for one fiscal year in one SEC filing."""
    __tablename__ = "income_records"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    year = Column(Integer, nullable=False, index=True)
    amount = Column(Money, nullable=False)
    form = Column(String(10), nullable=False)  # e.g. '10-K'
    frame = Column(String(20), nullable=True)  # e.g. 'CY2021', absent on many 10-K facts
    filed_date = Column(Date, nullable=False)
    accession_number = Column(String(100), nullable=False)

    __table_args__ = (
        Index("ix_income_records_company_id_year", "company_id", "year"),
    )

    @classmethod
    def create(
        cls,
        company_id: uuid.UUID,
        year: int,
        amount: Number,
        form: str,
        frame: Optional[str],
        filed_date: date,
        accession_number: str,
    ) -> "IncomeRecord":
        """
        Build a validated income record.

        Raises:
            ValueError: If the year is outside 1900..current year, or the form or
                accession number is missing.
        """
        current_year = datetime.now(timezone.utc).year
        if year < MIN_YEAR or year > current_year:
            raise ValueError(f"Invalid year: {year}")
        if form is None or not form.strip():
            raise ValueError("Form cannot be empty.")
        if accession_number is None or not accession_number.strip():
            raise ValueError("Accession number cannot be empty.")

        return cls(
            id=uuid.uuid4(),
            company_id=company_id,
            year=year,
            amount=to_decimal(amount),
            form=form,
            frame=frame,
            filed_date=filed_date,
            accession_number=accession_number,
            created_at=utcnow(),
            is_deleted=False,
        )

    def is_positive_income(self) -> bool:
        return self.amount > 0

    def update_amount(self, amount: Number) -> None:
        """Correct the reported amount in place."""
        self.amount = to_decimal(amount)
        self.mark_updated()

    def __repr__(self) -> str:
        return f"<IncomeRecord year={self.year} form={self.form} amount={self.amount}>"
