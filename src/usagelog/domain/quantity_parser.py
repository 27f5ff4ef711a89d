"""Parser for Kubernetes resource quantity strings."""

from decimal import ROUND_CEILING, Decimal, InvalidOperation

_BINARY_SUFFIXES: dict[str, int] = {
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
    "Ti": 1024**4,
    "Pi": 1024**5,
    "Ei": 1024**6,
}

_DECIMAL_SUFFIXES: dict[str, Decimal] = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "k": Decimal(10) ** 3,
    "M": Decimal(10) ** 6,
    "G": Decimal(10) ** 9,
    "T": Decimal(10) ** 12,
    "P": Decimal(10) ** 15,
    "E": Decimal(10) ** 18,
}


def parse_quantity(quantity: str | int | float | None) -> int:
    """Parse a quantity and return its whole-unit value, rounded up.

    ``"500m"`` becomes 1 and ``"1Gi"`` becomes 1073741824. Empty or
    unparseable values return 0.
    """
    if quantity is None:
        return 0
    value = str(quantity).strip()
    if not value or value == "<none>":
        return 0

    multiplier: Decimal | int = 1
    if value[-2:] in _BINARY_SUFFIXES:
        multiplier = _BINARY_SUFFIXES[value[-2:]]
        value = value[:-2]
    elif value[-1] in _DECIMAL_SUFFIXES:
        multiplier = _DECIMAL_SUFFIXES[value[-1]]
        value = value[:-1]

    try:
        number = Decimal(value) * multiplier
    except InvalidOperation:
        return 0
    if not number.is_finite() or number <= 0:
        return 0
    return int(number.to_integral_value(rounding=ROUND_CEILING))
