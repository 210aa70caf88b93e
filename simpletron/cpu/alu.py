"""
Simpletron - Accumulator Arithmetic

The machine works on signed decimal words in [-9999, 9999]. Results are
computed at full precision and are never wrapped or clamped here; the
caller checks the accumulator with in_word_range() after each step and
reports overflow as a fault.

Division and remainder truncate toward zero. Python's // and % floor
toward negative infinity, which gives a different answer whenever the
operands have opposite signs:

    -7 // 2  == -4      trunc_div(-7, 2) == -3
    -7 %  2  ==  1      trunc_mod(-7, 2) == -1
"""

WORD_MIN = -9999
WORD_MAX = 9999


def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero. b must be non-zero."""
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q


def trunc_mod(a: int, b: int) -> int:
    """Remainder matching trunc_div: takes the sign of the dividend."""
    return a - b * trunc_div(a, b)


def add(acc: int, value: int) -> int:
    return acc + value


def sub(acc: int, value: int) -> int:
    return acc - value


def mul(acc: int, value: int) -> int:
    return acc * value


def div(acc: int, value: int) -> int:
    """Truncating division. Raises ZeroDivisionError on a zero divisor."""
    if value == 0:
        raise ZeroDivisionError("division by zero")
    return trunc_div(acc, value)


def in_word_range(value: int) -> bool:
    """True if value fits in a signed four-digit word."""
    return WORD_MIN <= value <= WORD_MAX
