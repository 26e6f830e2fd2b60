"""Conversion between integer base units and decimal strings."""

from decimal import Decimal, InvalidOperation, localcontext


def format_units(value: int, decimals: int) -> str:
    """
    Format an integer amount of base units as a decimal string.

    Trailing fractional zeros are dropped and whole amounts carry no dot,
    so 1500000 with 6 decimals is "1.5" and 10**18 with 18 decimals is "1".

    Args:
        value: Amount in base units (wei, token units)
        decimals: Power-of-ten scale of the unit

    Returns:
        str: Decimal representation of the amount
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    negative = value < 0
    digits = str(abs(value)).rjust(decimals + 1, "0")
    integer = digits[: len(digits) - decimals] if decimals else digits
    fraction = digits[len(digits) - decimals :].rstrip("0") if decimals else ""

    text = f"{integer}.{fraction}" if fraction else integer
    return f"-{text}" if negative else text


def parse_units(text: str, decimals: int) -> int:
    """
    Parse a decimal string into integer base units.

    Raises:
        ValueError: If the string is not a number or has more fractional
            digits than the unit allows
    """
    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {text!r}")

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {text!r}")

    with localcontext() as ctx:
        ctx.prec = max(len(amount.as_tuple().digits) + decimals, 28)
        scaled = amount.scaleb(decimals)

    if scaled != scaled.to_integral_value():
        raise ValueError(f"{text!r} has more than {decimals} fractional digits")
    return int(scaled)
