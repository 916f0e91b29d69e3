"""Value model for the simple_db library."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

# Signed 64-bit range shared by Integer and ComplexInteger payloads
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class TypeTag(Enum):
    """Discriminant identifying which variant a Value holds.

    Declaration order is significant: it is the cross-tag sort order and
    the on-disk discriminant.
    """

    INTEGER = "int"
    REAL = "real"
    CHAR = "char"
    TEXT = "text"
    COMPLEX_REAL = "complex_real"
    COMPLEX_INTEGER = "complex_int"

    @property
    def ordinal(self) -> int:
        """Return the position of this tag in declaration order."""
        return _TAG_ORDINALS[self]

    @classmethod
    def from_ordinal(cls, ordinal: int) -> TypeTag:
        """Return the tag at the given declaration position."""
        if ordinal < 0 or ordinal >= len(_TAGS):
            raise ValueError(f"Unknown type tag discriminant: {ordinal}")
        return _TAGS[ordinal]

    @classmethod
    def from_name(cls, name: str) -> TypeTag:
        """Look up a tag by its short name or one of its aliases."""
        key = name.strip().lower()
        tag = TYPE_TAG_NAMES.get(key)
        if tag is None:
            raise ValueError(f"Unknown type name: {name!r}")
        return tag

    @property
    def is_complex(self) -> bool:
        return self in (TypeTag.COMPLEX_REAL, TypeTag.COMPLEX_INTEGER)


_TAGS: tuple[TypeTag, ...] = tuple(TypeTag)
_TAG_ORDINALS: dict[TypeTag, int] = {tag: i for i, tag in enumerate(_TAGS)}

# Mapping from type name strings to TypeTag values, including long-form aliases
TYPE_TAG_NAMES: dict[str, TypeTag] = {tag.value: tag for tag in TypeTag}
TYPE_TAG_NAMES.update(
    {
        "integer": TypeTag.INTEGER,
        "float": TypeTag.REAL,
        "character": TypeTag.CHAR,
        "string": TypeTag.TEXT,
        "complex_integer": TypeTag.COMPLEX_INTEGER,
    }
)


@dataclass(frozen=True)
class Value:
    """A single typed value stored in a row.

    ``data`` holds the payload for ``tag``:

    - INTEGER: int in signed 64-bit range
    - REAL: float
    - CHAR: str of exactly one code point
    - TEXT: str
    - COMPLEX_REAL: (float, float) as (real, imag)
    - COMPLEX_INTEGER: (int, int) as (real, imag)
    """

    tag: TypeTag
    data: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _check_payload(self.tag, self.data))

    @classmethod
    def integer(cls, value: int) -> Value:
        return cls(TypeTag.INTEGER, value)

    @classmethod
    def real(cls, value: float) -> Value:
        return cls(TypeTag.REAL, value)

    @classmethod
    def char(cls, value: str) -> Value:
        return cls(TypeTag.CHAR, value)

    @classmethod
    def text(cls, value: str) -> Value:
        return cls(TypeTag.TEXT, value)

    @classmethod
    def complex_real(cls, real: float, imag: float) -> Value:
        return cls(TypeTag.COMPLEX_REAL, (real, imag))

    @classmethod
    def complex_integer(cls, real: int, imag: int) -> Value:
        return cls(TypeTag.COMPLEX_INTEGER, (real, imag))

    @classmethod
    def from_python(cls, obj: Any) -> Value:
        """Wrap a plain Python value, choosing the tag from its type.

        Strings always become TEXT; use ``Value.char`` for characters.
        """
        if isinstance(obj, Value):
            return obj
        if isinstance(obj, bool):
            raise TypeError("bool values are not supported")
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.real(obj)
        if isinstance(obj, str):
            return cls.text(obj)
        if isinstance(obj, complex):
            return cls.complex_real(obj.real, obj.imag)
        raise TypeError(f"Cannot convert {type(obj).__name__} to a Value")

    def to_python(self) -> Any:
        """Return the payload as a natural Python value."""
        if self.tag == TypeTag.COMPLEX_REAL:
            return complex(*self.data)
        return self.data

    def sort_key(self) -> tuple[Any, ...]:
        """Return a key implementing the total order over all values."""
        tag = self.tag
        if tag == TypeTag.REAL:
            payload: Any = _real_key(self.data)
        elif tag == TypeTag.COMPLEX_REAL:
            payload = (_real_key(self.data[0]), _real_key(self.data[1]))
        else:
            payload = self.data
        return (tag.ordinal, payload)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __hash__(self) -> int:
        return hash(self.sort_key())

    def __lt__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.sort_key() >= other.sort_key()

    def __str__(self) -> str:
        return format_value(self)


def type_tag(value: Value) -> TypeTag:
    """Return the tag of a value."""
    return value.tag


def compare(a: Value, b: Value) -> int:
    """Compare two values, returning -1, 0 or 1.

    Values with different tags order by tag declaration position. Within a
    tag, payloads compare naturally; complex pairs compare real part first,
    then imaginary part. NaN sorts after every other real.
    """
    ka = a.sort_key()
    kb = b.sort_key()
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def format_value(value: Value) -> str:
    """Render a value for display."""
    tag = value.tag
    if tag == TypeTag.INTEGER:
        return str(value.data)
    elif tag == TypeTag.REAL:
        return _format_real(value.data)
    elif tag in (TypeTag.CHAR, TypeTag.TEXT):
        return value.data
    else:
        real, imag = value.data
        if imag >= 0:
            return f"{_number(real)} + {_number(imag)}i"
        return f"{_number(real)} - {_number(-imag)}i"


def _number(x: int | float) -> str:
    return _format_real(x) if isinstance(x, float) else str(x)


def _format_real(x: float) -> str:
    """Shortest round-tripping digits in positional notation.

    Integral values drop the fraction (``1``, ``100000000000000000000``),
    NaN prints as ``NaN`` and infinities as ``inf``/``-inf``.
    """
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    text = format(Decimal(repr(x)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _real_key(x: float) -> tuple[bool, float]:
    # NaN last and equal to itself
    if math.isnan(x):
        return (True, 0.0)
    return (False, x)


def _check_int(x: Any) -> int:
    if isinstance(x, bool) or not isinstance(x, int):
        raise TypeError(f"Expected int, got {type(x).__name__}")
    if x < INT64_MIN or x > INT64_MAX:
        raise ValueError(f"Integer {x} does not fit in 64 bits")
    return x


def _check_float(x: Any) -> float:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        raise TypeError(f"Expected float, got {type(x).__name__}")
    return float(x)


def _check_pair(x: Any) -> tuple[Any, Any]:
    if isinstance(x, complex):
        return (x.real, x.imag)
    if not isinstance(x, (tuple, list)) or len(x) != 2:
        raise TypeError(f"Expected a (real, imag) pair, got {x!r}")
    return (x[0], x[1])


def _check_payload(tag: TypeTag, data: Any) -> Any:
    """Validate and normalize a payload for the given tag."""
    if not isinstance(tag, TypeTag):
        raise TypeError(f"Expected TypeTag, got {type(tag).__name__}")
    if tag == TypeTag.INTEGER:
        return _check_int(data)
    elif tag == TypeTag.REAL:
        return _check_float(data)
    elif tag == TypeTag.CHAR:
        if not isinstance(data, str):
            raise TypeError(f"Expected str, got {type(data).__name__}")
        if len(data) != 1:
            raise ValueError(f"Char value must be a single character, got {data!r}")
        return data
    elif tag == TypeTag.TEXT:
        if not isinstance(data, str):
            raise TypeError(f"Expected str, got {type(data).__name__}")
        return data
    elif tag == TypeTag.COMPLEX_REAL:
        real, imag = _check_pair(data)
        return (_check_float(real), _check_float(imag))
    else:
        real, imag = _check_pair(data)
        return (_check_int(real), _check_int(imag))
