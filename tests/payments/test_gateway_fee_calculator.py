from decimal import Decimal

import pytest

from college_erp.core.exceptions import ValidationError
from college_erp.payments.calculator.gateway_fee_calculator import GatewayFeeCalculator
from college_erp.payments.methods import get_method
from college_erp.payments.resolver import quote_payment, resolve_payment_total


@pytest.mark.parametrize(
    "method, expected",
    [("upi", "10000"), ("card", "10250"), ("netbanking", "10150"), ("wallet", "10100")],
)
def test_total_per_method(method, expected):
    assert resolve_payment_total(10000, method) == Decimal(expected)


def test_fee_rounds_half_up_to_two_places():
    calc = GatewayFeeCalculator()

    # 0.30 * 2.5 % = 0.0075
    assert calc.processing_fee(Decimal("0.30"), get_method("card")) == Decimal("0.01")
    # 999.99 * 2.5 % = 24.99975
    assert resolve_payment_total("999.99", "card") == Decimal("1024.99")
    assert resolve_payment_total(10.10, "card") == Decimal("10.35")


def test_quote_breaks_down_total():
    quote = quote_payment(45000, "netbanking")

    assert quote.base_amount == Decimal("45000.00")
    assert quote.processing_fee == Decimal("675.00")
    assert quote.total_amount == Decimal("45675.00")
    assert quote.to_dict()["total_amount"] == 45675.0


def test_method_lookup_is_case_insensitive():
    assert resolve_payment_total(100, "UPI") == Decimal("100")


@pytest.mark.parametrize(
    "amount, method",
    [(100, "cash"), (-1, "upi"), ("abc", "upi"), ("NaN", "upi"), ("Infinity", "card"), (float("nan"), "upi"), (None, "upi")],
)
def test_invalid_quotes(amount, method):
    with pytest.raises(ValidationError):
        resolve_payment_total(amount, method)
