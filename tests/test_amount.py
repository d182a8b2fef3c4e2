import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amount import Amount, MAX_SCALED, MAX_VALUE
from errors import AmountOverflowError, InvalidAmountError, RejectionReason


class TestParsing:
    @pytest.mark.parametrize(
        "text, scaled",
        [
            ("10", 100_000),
            ("10.0000", 100_000),
            ("1.2345", 12_345),
            ("0.0001", 1),
            ("  2.5 ", 25_000),
            ("1.23450000", 12_345),
            ("-3", -30_000),
        ],
    )
    def test_from_string(self, text, scaled):
        assert Amount.from_decimal(text).scaled == scaled

    def test_from_other_numbers(self):
        assert Amount.from_decimal(3) == Amount(30_000)
        assert Amount.from_decimal(Decimal("0.5")) == Amount(5_000)
        assert Amount.from_decimal(0.1) == Amount(1_000)

    @pytest.mark.parametrize("text", ["1.23456", "1.000000000000000000000000000001", "1e-999999999"])
    def test_too_many_decimal_places_rejected(self, text):
        with pytest.raises(InvalidAmountError):
            Amount.from_decimal(text)

    def test_huge_exponent_overflows(self):
        with pytest.raises(AmountOverflowError):
            Amount.from_decimal("1e999999999")

    def test_zero_with_extra_places_is_zero(self):
        assert Amount.from_decimal("0E-50") == Amount.ZERO

    @pytest.mark.parametrize("text", ["", "abc", "NaN", "Infinity", "1,5"])
    def test_garbage_rejected(self, text):
        with pytest.raises(InvalidAmountError) as excinfo:
            Amount.from_decimal(text)
        assert excinfo.value.reason == RejectionReason.INVALID_AMOUNT

    def test_bool_rejected(self):
        with pytest.raises(InvalidAmountError):
            Amount.from_decimal(True)

    def test_maximum_is_accepted(self):
        assert Amount.from_decimal(MAX_VALUE).scaled == MAX_SCALED

    def test_beyond_maximum_overflows(self):
        with pytest.raises(AmountOverflowError) as excinfo:
            Amount.from_decimal(MAX_VALUE + Decimal("0.0001"))
        assert excinfo.value.reason == RejectionReason.OVERFLOW

    def test_raw_constructor_checks_range(self):
        with pytest.raises(AmountOverflowError):
            Amount(MAX_SCALED + 1)
        with pytest.raises(InvalidAmountError):
            Amount(1.5)


class TestArithmetic:
    def test_add_and_subtract(self):
        a = Amount.from_decimal("1.2345")
        b = Amount.from_decimal("0.0001")
        assert a + b == Amount.from_decimal("1.2346")
        assert a - b == Amount.from_decimal("1.2344")

    def test_no_float_drift(self):
        total = Amount.ZERO
        for _ in range(10):
            total = total + Amount.from_decimal("0.1")
        assert total == Amount.from_decimal("1")

    def test_add_overflow(self):
        with pytest.raises(AmountOverflowError):
            Amount(MAX_SCALED).checked_add(Amount(1))

    def test_sub_overflow(self):
        with pytest.raises(AmountOverflowError):
            Amount(-MAX_SCALED).checked_sub(Amount(1))

    def test_comparison(self):
        assert Amount.from_decimal("5") >= Amount.from_decimal("5")
        assert Amount.from_decimal("5") < Amount.from_decimal("5.0001")
        assert Amount.from_decimal("100") > Amount.from_decimal("99.9999")

    def test_is_positive(self):
        assert Amount(1).is_positive()
        assert not Amount.ZERO.is_positive()
        assert not Amount(-1).is_positive()


class TestRendering:
    @pytest.mark.parametrize(
        "scaled, text",
        [
            (0, "0.0000"),
            (100_000, "10.0000"),
            (12_345, "1.2345"),
            (1, "0.0001"),
            (-25_000, "-2.5000"),
            (MAX_SCALED, "922337203685477.5807"),
        ],
    )
    def test_always_four_decimals(self, scaled, text):
        assert str(Amount(scaled)) == text

    def test_to_decimal_is_exact(self):
        assert Amount(12_345).to_decimal() == Decimal("1.2345")
