"""Arbitrary precision numeric helpers.

Integers are accumulated digit by digit in the matched base, so any
literal length is supported, and rendered back in decimal chunks so
that the interpreter's integer string conversion limit never applies.

Python integers already hold every width losslessly, so no value is
narrowed on load. `int_width` is a classification API only: it reports
the smallest signed native width (32-bit, 64-bit or arbitrary
precision) a loaded integer would need in a fixed width consumer.

Floats are rendered in a canonical form that every built-in schema's
float grammar accepts.
"""

from enum import StrEnum
from math import isinf, isnan

#: Digit values for bases up to sixteen.
DIGITS = {char: value for value, char in enumerate('0123456789abcdef')}

#: Inclusive bounds of signed native widths.
INT32_RANGE = (-(2 ** 31), 2 ** 31 - 1)
INT64_RANGE = (-(2 ** 63), 2 ** 63 - 1)

#: Decimal digits rendered per chunk of a large integer.
DECIMAL_CHUNK_DIGITS = 1000

#: Hex digits per two's complement word.
HEX_WORD_DIGITS = 8

#: Canonical spellings of non-finite floats.
POSITIVE_INFINITY = '.inf'
NEGATIVE_INFINITY = '-.inf'
NOT_A_NUMBER = '.nan'


class IntWidth(StrEnum):
    """Smallest native width holding an integer."""

    INT32 = 'int32'
    INT64 = 'int64'
    BIG = 'big'


def fold_digits(digits: str, base: int) -> int:
    """Accumulate unsigned digits into an integer.

    Underscore separators are skipped.

    Args:
        digits: Digit characters without sign or base prefix.
        base: Numeric base between 2 and 16.

    Returns:
        The accumulated value.

    Raises:
        ValueError: If there are no digits or a digit is out of range.
    """
    accumulator = 0
    seen = False

    for char in digits.lower():
        if char == '_':
            continue
        value = DIGITS.get(char)
        if value is None or value >= base:
            raise ValueError(f'Invalid digit {char!r} for base {base}')
        accumulator = accumulator * base + value
        seen = True

    if not seen:
        raise ValueError(f'No digits in {digits!r}')

    return accumulator


def split_sign(text: str) -> tuple[int, str]:
    """Split a leading sign from numeric text.

    Returns:
        A `(sign, rest)` pair where sign is `1` or `-1`.
    """
    if text[:1] == '-':
        return -1, text[1:]

    if text[:1] == '+':
        return 1, text[1:]

    return 1, text


def parse_signed(text: str, base: int, prefix: str = '') -> int:
    """Parse optionally signed text in the given base.

    Args:
        text: Numeric text, optionally signed.
        base: Numeric base of the digits.
        prefix: Base prefix following the sign, such as `0o`.

    Returns:
        The signed integer value.
    """
    sign, rest = split_sign(text)

    return sign * fold_digits(rest[len(prefix):], base)


def parse_hex_word(text: str) -> int:
    """Parse hex text using two's complement on padded words.

    The digits are left padded to a multiple of eight hex digits and the
    value is negative when the top bit of the padded word is set. A `+`
    sign forces an unsigned reading, a `-` sign negates a positive result.

    Args:
        text: Hex text with `0x` prefix, optionally signed.

    Returns:
        The decoded integer value.
    """
    sign, rest = split_sign(text)
    digits = rest[2:].replace('_', '')
    value = fold_digits(digits, 16)

    if text.startswith('+'):
        return value

    words = (len(digits) + HEX_WORD_DIGITS - 1) // HEX_WORD_DIGITS
    bits = words * HEX_WORD_DIGITS * 4
    if value >> (bits - 1):
        value -= 1 << bits

    if sign < 0 and value > 0:
        value = -value

    return value


def parse_sexagesimal(text: str) -> int:
    """Parse colon separated base 60 text such as `1:20`.

    Returns:
        The signed integer value.
    """
    sign, rest = split_sign(text)

    accumulator = 0
    for part in rest.split(':'):
        accumulator = accumulator * 60 + fold_digits(part, 10)

    return sign * accumulator


def int_width(value: int) -> IntWidth:
    """Classify the smallest signed width holding a value.

    Args:
        value: Any integer.

    Returns:
        `INT32`, `INT64`, or `BIG` for arbitrary precision.
    """
    if INT32_RANGE[0] <= value <= INT32_RANGE[1]:
        return IntWidth.INT32

    if INT64_RANGE[0] <= value <= INT64_RANGE[1]:
        return IntWidth.INT64

    return IntWidth.BIG


def int_text(value: int) -> str:
    """Render an integer of any size in decimal.

    Large values are split into fixed size chunks, each one short
    enough for the built-in conversion.

    Args:
        value: Integer to render.

    Returns:
        Signed decimal text.
    """
    sign = '-' if value < 0 else ''
    rest = abs(int(value))

    chunks = []
    chunk = 10 ** DECIMAL_CHUNK_DIGITS
    while rest >= chunk:
        rest, low = divmod(rest, chunk)
        chunks.append(f'{low:0{DECIMAL_CHUNK_DIGITS}d}')
    chunks.append(str(rest))

    return sign + ''.join(reversed(chunks))


def float_text(value: float) -> str:
    """Render a float in canonical YAML text.

    Non-finite values use the `.inf`, `-.inf` and `.nan` spellings.
    Finite values always carry a fractional part and an exponent, when
    present, is signed and stripped of padding (`1e+16` becomes
    `1.0e+16` and `1e-07` becomes `1.0e-7`).

    Args:
        value: Value to render.

    Returns:
        Canonical float text.
    """
    if isnan(value):
        return NOT_A_NUMBER

    if isinf(value):
        return NEGATIVE_INFINITY if value < 0 else POSITIVE_INFINITY

    mantissa, _, exponent = repr(float(value)).partition('e')

    if '.' not in mantissa:
        mantissa += '.0'

    if not exponent:
        return mantissa

    exponent_sign, exponent_digits = split_sign(exponent)
    exponent_digits = exponent_digits.lstrip('0') or '0'

    return f'{mantissa}e{"-" if exponent_sign < 0 else "+"}{exponent_digits}'
