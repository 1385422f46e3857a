"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from ledgerkit.domain.errors import InvalidAmountError


def parse_amount(amount_str: str) -> Decimal:
    """Parse a human-entered amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "-123.45" and "(123.45)" (negative; rejected later by the ledger)

    The result is not validated against a currency; see
    ``ledgerkit.domain.money.validate_amount``.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        InvalidAmountError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise InvalidAmountError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    if amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[1:]

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥]", "", amount_str)

    # Remove thousands separators and inner whitespace
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise InvalidAmountError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise InvalidAmountError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount
