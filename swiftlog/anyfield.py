"""Pick the best typed field for an arbitrary value."""

from __future__ import annotations

import datetime as _dt
from typing import Any, Optional, Sequence

from swiftlog.array import (
    ArrayMarshaler,
    array,
    bools,
    complex128s,
    durations,
    float64s,
    ints,
    strings,
    times,
)
from swiftlog.error import errors, named_error
from swiftlog.field import (
    Field,
    ObjectMarshaler,
    binary,
    bool_,
    complex128,
    duration,
    float64,
    int_,
    nil_field,
    object_,
    reflect,
    string,
    stringer,
    time,
    uint64,
)

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1


def _integer(key: str, value: int) -> Field:
    if _INT64_MIN <= value <= _INT64_MAX:
        return int_(key, value)
    if 0 <= value <= _UINT64_MAX:
        return uint64(key, value)
    return reflect(key, value)


def _all(values: Sequence[Any], kind: type, *, exclude: tuple = ()) -> bool:
    return all(isinstance(v, kind) and not isinstance(v, exclude) for v in values)


def _sequence(key: str, values: Sequence[Any]) -> Optional[Field]:
    """A typed array field for a homogeneous sequence, or None if there is none."""
    if not values:
        return None
    if _all(values, bool):
        return bools(key, values)
    if _all(values, int, exclude=(bool,)):
        try:
            return ints(key, values)
        except OverflowError:
            return None
    if _all(values, float):
        return float64s(key, values)
    if _all(values, complex):
        return complex128s(key, values)
    if _all(values, str):
        return strings(key, values)
    if _all(values, _dt.datetime):
        return times(key, values)
    if _all(values, _dt.timedelta):
        return durations(key, values)
    if any(isinstance(v, BaseException) for v in values) and all(
        v is None or isinstance(v, BaseException) for v in values
    ):
        return errors(key, values)
    return None


def _has_own_str(value: Any) -> bool:
    return type(value).__str__ is not object.__str__


def any_field(key: str, value: Any) -> Field:
    """Choose the most specific field for value, falling back to reflect."""
    if isinstance(value, ObjectMarshaler):
        return object_(key, value)
    if isinstance(value, ArrayMarshaler):
        return array(key, value)
    if value is None:
        return nil_field(key)
    if isinstance(value, bool):
        return bool_(key, value)
    if isinstance(value, int):
        return _integer(key, value)
    if isinstance(value, float):
        return float64(key, value)
    if isinstance(value, complex):
        return complex128(key, value)
    if isinstance(value, str):
        return string(key, value)
    if isinstance(value, (bytes, bytearray)):
        return binary(key, bytes(value))
    if isinstance(value, _dt.datetime):
        return time(key, value)
    if isinstance(value, _dt.timedelta):
        try:
            return duration(key, value)
        except OverflowError:
            return reflect(key, value)
    if isinstance(value, BaseException):
        return named_error(key, value)
    if isinstance(value, (list, tuple)):
        field = _sequence(key, value)
        if field is not None:
            return field
        return reflect(key, value)
    if _has_own_str(value):
        return stringer(key, value)
    return reflect(key, value)