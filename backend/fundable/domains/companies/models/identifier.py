"""SEC Central Index Key value object."""

from dataclasses import dataclass

CIK_WIDTH = 10


@dataclass(frozen=True)
class CentralIndexKey:
    """
    Positive integer CIK assigned by the SEC.

    Also used as the SQLAlchemy composite behind ``Company.cik``, so it must stay
    constructible from the single stored column value.

    Raises:
        ValueError: If the value is not a positive integer.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"CIK must be an integer, got {self.value!r}")
        if self.value <= 0:
            raise ValueError("CIK must be a positive integer.")

    @classmethod
    def create(cls, value: int) -> "CentralIndexKey":
        return cls(value)

    def to_formatted_string(self) -> str:
        """Zero-padded 10 digit form used by EDGAR URLs (longer values are left as-is)."""
        return str(self.value).zfill(CIK_WIDTH)

    def __str__(self) -> str:
        return str(self.value)
