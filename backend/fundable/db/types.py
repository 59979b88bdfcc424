from decimal import Decimal, ROUND_HALF_EVEN

from sqlalchemy import BigInteger, Numeric
from sqlalchemy.types import TypeDecorator

MONEY_PRECISION = 18
MONEY_SCALE = 2
CENTS = Decimal("0.01")


class Money(TypeDecorator):
    """
    NUMERIC(18, 2) currency column.

    SQLite has no exact decimal storage (NUMERIC values come back as floats),
    so there the amount is kept as an integer number of cents instead.
    """

    impl = Numeric
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(BigInteger())
        return dialect.type_descriptor(Numeric(MONEY_PRECISION, MONEY_SCALE, asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        cents = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        return int((cents * 100).to_integral_value(rounding=ROUND_HALF_EVEN))

    def process_result_value(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return (Decimal(value) / 100).quantize(CENTS)
