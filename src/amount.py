from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import ClassVar, Union

from errors import AmountOverflowError, InvalidAmountError

SCALE = 10_000
DECIMAL_PLACES = 4

# Scaled values stay within a signed 64-bit integer.
MAX_SCALED = 2**63 - 1
MAX_VALUE = Decimal(MAX_SCALED) / SCALE

_QUANTUM = Decimal(1).scaleb(-DECIMAL_PLACES)


@dataclass(frozen=True, order=True)
class Amount:
    """
    Fixed-point currency value stored as an integer scaled by 10,000.

    Arithmetic never leaves the representable range: operations that would
    exceed MAX_SCALED in magnitude raise AmountOverflowError instead.
    """

    ZERO: ClassVar["Amount"]

    scaled: int = 0

    def __post_init__(self):
        if isinstance(self.scaled, bool) or not isinstance(self.scaled, int):
            raise InvalidAmountError(f"scaled amount must be an int, got {self.scaled!r}")
        if abs(self.scaled) > MAX_SCALED:
            raise AmountOverflowError(f"scaled amount {self.scaled} exceeds {MAX_SCALED}")

    @classmethod
    def from_decimal(cls, value: Union[str, int, float, Decimal]) -> "Amount":
        """
        Parse a human-readable value with up to 4 fractional digits.

        Raises:
            InvalidAmountError: not a finite number, or too many fractional digits
            AmountOverflowError: magnitude beyond MAX_VALUE
        """
        if isinstance(value, bool):
            raise InvalidAmountError(f"not an amount: {value!r}")
        try:
            number = Decimal(str(value).strip()) if isinstance(value, (str, float)) else Decimal(value)
        except (InvalidOperation, TypeError, ValueError) as e:
            raise InvalidAmountError(f"not an amount: {value!r}") from e

        if not number.is_finite():
            raise InvalidAmountError(f"amount must be finite, got {value!r}")

        if number.is_zero():
            return cls(0)
        if number.adjusted() > MAX_VALUE.adjusted():
            raise AmountOverflowError(f"amount {value!r} exceeds {MAX_VALUE}")
        if number.adjusted() < -DECIMAL_PLACES:
            raise InvalidAmountError(f"amount {value!r} has more than {DECIMAL_PLACES} decimal places")

        # enough precision that scaling never rounds away extra digits
        with localcontext() as ctx:
            ctx.prec = len(number.as_tuple().digits) + DECIMAL_PLACES + 1
            scaled = number * SCALE
        if scaled != scaled.to_integral_value():
            raise InvalidAmountError(f"amount {value!r} has more than {DECIMAL_PLACES} decimal places")
        if abs(scaled) > MAX_SCALED:
            raise AmountOverflowError(f"amount {value!r} exceeds {MAX_VALUE}")
        return cls(int(scaled))

    def checked_add(self, other: "Amount") -> "Amount":
        return Amount._from_result(self.scaled + other.scaled)

    def checked_sub(self, other: "Amount") -> "Amount":
        return Amount._from_result(self.scaled - other.scaled)

    @staticmethod
    def _from_result(scaled: int) -> "Amount":
        if abs(scaled) > MAX_SCALED:
            raise AmountOverflowError(f"result {scaled} exceeds {MAX_SCALED}")
        return Amount(scaled)

    def __add__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        return self.checked_add(other)

    def __sub__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        return self.checked_sub(other)

    def is_positive(self) -> bool:
        return self.scaled > 0

    def to_decimal(self) -> Decimal:
        """Exact decimal value, always carrying 4 fractional digits."""
        return (Decimal(self.scaled) / SCALE).quantize(_QUANTUM)

    def __str__(self) -> str:
        return f"{self.to_decimal():f}"

    def __repr__(self) -> str:
        return f"Amount({self})"


Amount.ZERO = Amount(0)
