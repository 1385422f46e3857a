"""Fixed-point money handling.

Amounts travel through the domain as ``Decimal`` values quantized to the
currency's minor unit and are persisted as integer minor units, so no
binary floating point is ever involved in a balance.
"""

import re
from decimal import Decimal, InvalidOperation

from ledgerkit.domain.errors import (
    InvalidAmountError,
    InvalidCurrencyError,
    amount_not_positive,
)

DEFAULT_EXPONENT = 2

CURRENCY_EXPONENTS = {
    "CLP": 0,
    "ISK": 0,
    "JPY": 0,
    "KRW": 0,
    "UGX": 0,
    "VND": 0,
    "XAF": 0,
    "XOF": 0,
    "BHD": 3,
    "IQD": 3,
    "JOD": 3,
    "KWD": 3,
    "LYD": 3,
    "OMR": 3,
    "TND": 3,
}

# Largest amount accepted in minor units; fits a signed 64-bit column with
# plenty of headroom for summed balances.
MAX_MINOR_UNITS = 10**15

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


def normalize_currency(currency: str) -> str:
    """Return the canonical (upper-case) form of a currency code.

    Raises:
        InvalidCurrencyError: If the code is not three ASCII letters
    """
    if not isinstance(currency, str):
        raise InvalidCurrencyError(f"Invalid currency code: {currency!r}")
    code = currency.strip().upper()
    if not _CURRENCY_RE.match(code):
        raise InvalidCurrencyError(f"Invalid currency code: {currency!r}")
    return code


def currency_exponent(currency: str) -> int:
    """Number of decimal places of the currency's minor unit."""
    return CURRENCY_EXPONENTS.get(currency, DEFAULT_EXPONENT)


def _quantum(currency: str) -> Decimal:
    return Decimal(1).scaleb(-currency_exponent(currency))


def validate_amount(amount, currency: str) -> Decimal:
    """Validate a monetary amount and quantize it to the currency's minor unit.

    Accepts ``Decimal``, ``int`` or ``str``. Floats are refused outright since
    they cannot represent most decimal fractions exactly.

    Args:
        amount: Amount to validate
        currency: Normalized currency code

    Returns:
        The amount as a quantized Decimal

    Raises:
        InvalidAmountError: If the amount is not a finite positive value
            representable in the currency's minor unit
    """
    if isinstance(amount, (bool, float)):
        raise InvalidAmountError(
            f"Amount must be a Decimal, int or str, not {type(amount).__name__}"
        )
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(f"Could not parse amount {amount!r}")

    if not value.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {amount}")
    if value <= 0:
        raise InvalidAmountError(amount_not_positive(value))

    if value > from_minor_units(MAX_MINOR_UNITS, currency):
        raise InvalidAmountError(f"Amount {value} exceeds the maximum allowed")

    quantized = value.quantize(_quantum(currency))
    if quantized != value:
        raise InvalidAmountError(
            f"Amount {value} has more precision than {currency} allows "
            f"({currency_exponent(currency)} decimal places)"
        )
    return quantized


def to_minor_units(amount: Decimal, currency: str) -> int:
    """Convert a quantized amount into an integer count of minor units."""
    return int(amount.scaleb(currency_exponent(currency)))


def from_minor_units(units: int, currency: str) -> Decimal:
    """Convert an integer count of minor units back into a quantized amount."""
    return Decimal(units).scaleb(-currency_exponent(currency)).quantize(_quantum(currency))
