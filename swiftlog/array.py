"""Field constructors for sequences of values and of self-marshaling objects."""

from __future__ import annotations

import operator
import struct as _struct
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Protocol, runtime_checkable

from swiftlog.field import Field, FieldType, ObjectMarshaler


@runtime_checkable
class ArrayMarshaler(Protocol):
    """Anything that can write its elements into an array encoder."""

    def marshal_log_array(self, arr: Any) -> None: ...


@dataclass(frozen=True)
class _TypedArray:
    """A sequence of same-typed values, appended with one encoder method."""

    append_method: str
    values: tuple

    def marshal_log_array(self, arr: Any) -> None:
        append = getattr(arr, self.append_method)
        for value in self.values:
            append(value)


@dataclass(frozen=True)
class _ObjectArray:
    """A sequence of objects, each appended as a nested object."""

    values: tuple

    def marshal_log_array(self, arr: Any) -> None:
        for obj in self.values:
            arr.append_object(obj)


def _float32(x: float) -> float:
    return _struct.unpack("<f", _struct.pack("<f", float(x)))[0]


def _complex64(x: complex) -> complex:
    x = complex(x)
    return complex(_float32(x.real), _float32(x.imag))


def _checked_int(bits: int, signed: bool) -> Callable[[int], int]:
    low, high = (-(1 << (bits - 1)), (1 << (bits - 1)) - 1) if signed else (0, (1 << bits) - 1)
    kind = "signed" if signed else "unsigned"

    def check(val: int) -> int:
        val = operator.index(val)
        if not low <= val <= high:
            raise OverflowError(f"{val} does not fit in an {kind} {bits}-bit integer")
        return val

    return check


def _typed(
    key: str,
    method: str,
    values: Optional[Iterable[Any]],
    convert: Optional[Callable[[Any], Any]] = None,
) -> Field:
    items = () if values is None else tuple(values)
    if convert is not None:
        items = tuple(convert(v) for v in items)
    return array(key, _TypedArray(method, items))


def array(key: str, val: ArrayMarshaler) -> Field:
    """A field holding an array-like value that marshals itself lazily."""
    if not isinstance(val, ArrayMarshaler):
        raise TypeError(f"{type(val).__name__} has no marshal_log_array method")
    return Field(key=key, type=FieldType.ARRAY_MARSHALER, interface=val)


def bools(key: str, values: Optional[Iterable[bool]]) -> Field:
    return _typed(key, "append_bool", values, bool)


def byte_strings(key: str, values: Optional[Iterable[bytes]]) -> Field:
    """A sequence of UTF-8 encoded byte strings."""
    return _typed(key, "append_byte_string", values, bytes)


def complex128s(key: str, values: Optional[Iterable[complex]]) -> Field:
    return _typed(key, "append_complex128", values, complex)


def complex64s(key: str, values: Optional[Iterable[complex]]) -> Field:
    """Complex numbers whose parts are rounded to single precision."""
    return _typed(key, "append_complex64", values, _complex64)


def durations(key: str, values: Optional[Iterable[Any]]) -> Field:
    """Durations, given as timedeltas or integer nanoseconds."""
    return _typed(key, "append_duration", values)


def float64s(key: str, values: Optional[Iterable[float]]) -> Field:
    return _typed(key, "append_float64", values, float)


def float32s(key: str, values: Optional[Iterable[float]]) -> Field:
    """Floats rounded to single precision."""
    return _typed(key, "append_float32", values, _float32)


def ints(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_int", values, _checked_int(64, True))


def int64s(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_int64", values, _checked_int(64, True))


def int32s(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_int32", values, _checked_int(32, True))


def int16s(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_int16", values, _checked_int(16, True))


def int8s(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_int8", values, _checked_int(8, True))


def strings(key: str, values: Optional[Iterable[str]]) -> Field:
    return _typed(key, "append_string", values, str)


def times(key: str, values: Optional[Iterable[Any]]) -> Field:
    return _typed(key, "append_time", values)


def uints(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_uint", values, _checked_int(64, False))


def uint64s(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_uint64", values, _checked_int(64, False))


def uint32s(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_uint32", values, _checked_int(32, False))


def uint16s(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_uint16", values, _checked_int(16, False))


def uint8s(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_uint8", values, _checked_int(8, False))


def uintptrs(key: str, values: Optional[Iterable[int]]) -> Field:
    return _typed(key, "append_uintptr", values, _checked_int(64, False))


def _object_array(values: Optional[Iterable[Any]]) -> _ObjectArray:
    items = () if values is None else tuple(values)
    for obj in items:
        if not isinstance(obj, ObjectMarshaler):
            raise TypeError(f"{type(obj).__name__} has no marshal_log_object method")
    return _ObjectArray(items)


def objects(key: str, values: Optional[Iterable[ObjectMarshaler]]) -> Field:
    """A list of objects that marshal themselves.

    Marshaling stops at the first object that raises.
    """
    return array(key, _object_array(values))


def object_values(key: str, values: Optional[Iterable[ObjectMarshaler]]) -> Field:
    """A list of object values; behaves exactly like :func:`objects`."""
    return array(key, _object_array(values))