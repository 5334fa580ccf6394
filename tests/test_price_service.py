from decimal import Decimal
from types import SimpleNamespace

import pytest

from menucom_shared.services.price_service import (
    calculate_surcharge_breakdown,
    calculate_transaction_amount,
    parse_price,
    parse_quantity,
)
from menucom_shared.validation import InvalidOrderError

RATE = Decimal("0.0992")


def test_surcharge_on_round_price():
    breakdown = calculate_surcharge_breakdown(Decimal("100"), RATE)

    assert breakdown["unit_price"] == Decimal("109.92")
    assert breakdown["surcharge_amount"] == Decimal("9.92")
    assert breakdown["price_base"] == Decimal("100")


def test_surcharge_rounds_half_up_to_cents():
    # 10.05 * 1.0992 = 11.04696
    assert calculate_surcharge_breakdown(Decimal("10.05"), RATE)["unit_price"] == Decimal("11.05")
    # 2.50 * 1.0992 = 2.748
    assert calculate_surcharge_breakdown(Decimal("2.50"), RATE)["unit_price"] == Decimal("2.75")
    # 1.15 * 1.10 = 1.265, a tie that banker's rounding would send to 1.26
    assert calculate_surcharge_breakdown(Decimal("1.15"), Decimal("0.10"))["unit_price"] == Decimal(
        "1.27"
    )


def test_surcharge_on_free_item():
    assert calculate_surcharge_breakdown(Decimal("0"), RATE)["unit_price"] == Decimal("0.00")


def test_transaction_amount_multiplies_quantities():
    items = [
        SimpleNamespace(unit_price=Decimal("109.92"), quantity=2),
        SimpleNamespace(unit_price=Decimal("5.50"), quantity=3),
    ]

    assert calculate_transaction_amount(items) == Decimal("236.34")


def test_surcharge_beyond_decimal_precision_is_an_invalid_order():
    with pytest.raises(InvalidOrderError):
        calculate_surcharge_breakdown(Decimal("1e30"), RATE)


def test_transaction_amount_beyond_decimal_precision_is_an_invalid_order():
    items = [SimpleNamespace(unit_price=Decimal("999999999999.99"), quantity=10**20)]

    with pytest.raises(InvalidOrderError):
        calculate_transaction_amount(items)


@pytest.mark.parametrize(
    "raw, expected",
    [(100, Decimal("100")), ("12.50", Decimal("12.50")), (" 7 ", Decimal("7")), (0, Decimal("0"))],
)
def test_parse_price_accepts_numbers(raw, expected):
    assert parse_price(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "abc",
        "",
        None,
        True,
        "NaN",
        float("nan"),
        "Infinity",
        "-1",
        -0.5,
        [100],
        "1e30",
        "1000000000000",
    ],
)
def test_parse_price_rejects_invalid_values(raw):
    with pytest.raises(InvalidOrderError):
        parse_price(raw)


def test_parse_price_reports_item_position():
    with pytest.raises(InvalidOrderError, match="item 3") as excinfo:
        parse_price("twelve", index=2)

    assert excinfo.value.index == 2


@pytest.mark.parametrize("raw, expected", [(2, 2), ("3", 3), (4.0, 4), (Decimal("5"), 5)])
def test_parse_quantity_accepts_positive_integers(raw, expected):
    assert parse_quantity(raw) == expected


@pytest.mark.parametrize("raw", [0, -1, 2.5, "x", "", None, True, float("inf"), Decimal("NaN")])
def test_parse_quantity_rejects_invalid_values(raw):
    with pytest.raises(InvalidOrderError):
        parse_quantity(raw)
