"""
Tests for `app/services/financials.py`.

Covers:
- sale_price = gross - discount, tax rounded half-up to cents, total = sale + tax.
- margin and margin_percent only exist when a cost is known.
- Out-of-range inputs raise InvalidFinancialInputError; nothing is clamped.
- recompute is pure: same inputs, same outputs.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from app.core.exceptions import InvalidFinancialInputError
from app.services import financials
from app.services.financials import FinancialInputs, recompute, recompute_from


def test_recompute_sale_tax_and_total() -> None:
    """1000.00 gross, 100.00 discount, 13% tax."""

    derived = recompute(
        FinancialInputs(
            gross_price=Decimal("1000.00"),
            discount=Decimal("100.00"),
            tax_rate=Decimal("0.13"),
        )
    )

    assert derived.sale_price == Decimal("900.00")
    assert derived.tax_amount == Decimal("117.00")
    assert derived.total_price == Decimal("1017.00")
    assert derived.margin is None
    assert derived.margin_percent is None


def test_recompute_margin_from_cost_of_goods() -> None:
    derived = recompute(
        FinancialInputs(
            gross_price=Decimal("1000.00"),
            discount=Decimal("100.00"),
            tax_rate=Decimal("0.13"),
            cost_of_goods=Decimal("600.00"),
        )
    )

    assert derived.margin == Decimal("300.00")
    assert derived.margin_percent.quantize(Decimal("0.0001")) == Decimal("0.3333")


def test_tax_rounds_half_up() -> None:
    """0.10 * 0.05 = 0.005 rounds up to 0.01 (banker's rounding would give 0.00)."""

    derived = recompute(FinancialInputs(gross_price=Decimal("0.10"), tax_rate=Decimal("0.05")))

    assert derived.tax_amount == Decimal("0.01")
    assert derived.total_price == Decimal("0.11")


def test_zero_sale_price_has_margin_but_no_percent() -> None:
    derived = recompute(
        FinancialInputs(
            gross_price=Decimal("100"),
            discount=Decimal("100"),
            cost_of_goods=Decimal("50"),
        )
    )

    assert derived.sale_price == Decimal("0")
    assert derived.margin == Decimal("-50")
    assert derived.margin_percent is None


def test_negative_margin_when_sold_below_cost() -> None:
    derived = recompute(FinancialInputs(gross_price=Decimal("500"), cost_of_goods=Decimal("600")))

    assert derived.margin == Decimal("-100")
    assert derived.margin_percent == Decimal("-0.2")


def test_tax_rate_bounds_are_inclusive() -> None:
    assert recompute(FinancialInputs(gross_price=Decimal("10"), tax_rate=Decimal("0"))).tax_amount == 0
    assert recompute(FinancialInputs(gross_price=Decimal("10"), tax_rate=Decimal("1"))).total_price == Decimal("20")


@pytest.mark.parametrize(
    "inputs",
    [
        FinancialInputs(gross_price=Decimal("-1")),
        FinancialInputs(gross_price=Decimal("100"), discount=Decimal("-5")),
        FinancialInputs(gross_price=Decimal("100"), discount=Decimal("100.01")),
        FinancialInputs(gross_price=Decimal("100"), tax_rate=Decimal("-0.01")),
        FinancialInputs(gross_price=Decimal("100"), tax_rate=Decimal("1.01")),
        FinancialInputs(gross_price=Decimal("100"), cost_of_goods=Decimal("-1")),
    ],
)
def test_out_of_range_inputs_raise(inputs: FinancialInputs) -> None:
    with pytest.raises(InvalidFinancialInputError):
        recompute(inputs)


def test_discount_above_gross_is_not_clamped() -> None:
    with pytest.raises(InvalidFinancialInputError) as excinfo:
        recompute(FinancialInputs(gross_price=Decimal("100"), discount=Decimal("150")))

    assert excinfo.value.code == "INVALID_FINANCIAL_INPUT"
    assert excinfo.value.status_code == 422


@pytest.mark.parametrize(
    "inputs",
    [
        FinancialInputs(gross_price=Decimal("10.006")),
        FinancialInputs(gross_price=Decimal("10.01"), discount=Decimal("0.003")),
        FinancialInputs(gross_price=Decimal("100"), cost_of_goods=Decimal("50.001")),
        FinancialInputs(gross_price=Decimal("1000000"), tax_rate=Decimal("0.1234567")),
    ],
)
def test_inputs_finer_than_their_columns_raise(inputs: FinancialInputs) -> None:
    """Amounts carry at most 2 decimal places and tax_rate at most 5; nothing is truncated."""

    with pytest.raises(InvalidFinancialInputError):
        recompute(inputs)


def test_trailing_zeros_are_not_extra_precision() -> None:
    derived = recompute(
        FinancialInputs(gross_price=Decimal("100.000"), tax_rate=Decimal("0.1300000"))
    )

    assert derived.total_price == Decimal("113.00")


def test_five_place_tax_rate_is_accepted() -> None:
    derived = recompute(FinancialInputs(gross_price=Decimal("1000000"), tax_rate=Decimal("0.12346")))

    assert derived.tax_amount == Decimal("123460.00")


def test_amounts_must_fit_the_money_columns() -> None:
    with pytest.raises(InvalidFinancialInputError):
        recompute(FinancialInputs(gross_price=financials.MAX_AMOUNT + 1))
    with pytest.raises(InvalidFinancialInputError):
        recompute(FinancialInputs(gross_price=financials.MAX_AMOUNT, tax_rate=Decimal("0.01")))


def test_margin_percent_is_rounded_to_six_places() -> None:
    derived = recompute(FinancialInputs(gross_price=Decimal("900"), cost_of_goods=Decimal("600")))

    assert derived.margin_percent == Decimal("0.333333")
    assert derived.margin_percent.as_tuple().exponent == -6


def test_recompute_is_pure() -> None:
    inputs = FinancialInputs(
        gross_price=Decimal("24999.99"),
        discount=Decimal("1500"),
        tax_rate=Decimal("0.13"),
        cost_of_goods=Decimal("19000"),
    )

    assert recompute(inputs) == recompute(inputs)
    assert inputs.gross_price == Decimal("24999.99")


class TestRecomputeFrom:
    """Mapping-based entry point used by the service."""

    def test_missing_discount_and_tax_default_to_zero(self):
        derived = recompute_from({"gross_price": "250.00"})

        assert derived.sale_price == Decimal("250.00")
        assert derived.tax_amount == Decimal("0.00")
        assert derived.total_price == Decimal("250.00")

    def test_floats_are_read_through_their_string_form(self):
        derived = recompute_from({"gross_price": 1000.0, "discount": 100, "tax_rate": 0.13})

        assert derived.tax_amount == Decimal("117.00")

    def test_gross_price_is_required(self):
        with pytest.raises(InvalidFinancialInputError):
            recompute_from({"discount": "10"})

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", True, [1]])
    def test_non_numeric_values_raise(self, value):
        with pytest.raises(InvalidFinancialInputError):
            recompute_from({"gross_price": value})

    def test_as_columns_lists_every_derived_field(self):
        columns = recompute_from({"gross_price": "10", "cost_of_goods": "4"}).as_columns()

        assert tuple(columns) == financials.DERIVED_FIELDS
        assert columns["margin"] == Decimal("6")
