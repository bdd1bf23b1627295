"""
BN254 scalar field helpers.

Version: 0.1.0
"""

# BN254 (bn128) scalar field order, shared with circom/snarkjs
FIELD_ORDER = 21888242871839275222246405745257275088548364400416034343698204186575808495617

# Largest comparator width that stays clear of wraparound: 2**(n+1) must stay
# below the field order with margin (circom's LessThan asserts n <= 252).
MAX_SAFE_BITS = 252


def to_field(value: int) -> int:
    """Reduce an integer into the field."""
    return value % FIELD_ORDER


def parse_field_element(value: int | str) -> int:
    """
    Parse an int or decimal string (as snarkjs emits) into a field element.

    Raises:
        ValueError: If the value is not an integer or decimal string.
        TypeError: If the value is a bool or another type.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not field elements")
    if isinstance(value, int):
        return to_field(value)
    if isinstance(value, str):
        text = value.strip()
        if not text or not text.lstrip("-").isdigit():
            raise ValueError("not a decimal integer string")
        return to_field(int(text))
    raise TypeError(f"unsupported field element type: {type(value).__name__}")


def field_to_str(value: int) -> str:
    """Render a field element as a decimal string."""
    return str(to_field(value))
