"""Strongly typed log fields and the constructors that build them."""

from __future__ import annotations

import datetime as _dt
import enum
import operator
import struct as _struct
from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_EPOCH = _dt.datetime(1970, 1, 1, tzinfo=_dt.timezone.utc)


class FieldType(enum.IntEnum):
    """How a field's payload is stored and how an encoder should read it."""

    UNKNOWN = 0
    ARRAY_MARSHALER = enum.auto()
    OBJECT_MARSHALER = enum.auto()
    BINARY = enum.auto()
    BOOL = enum.auto()
    BYTE_STRING = enum.auto()
    COMPLEX128 = enum.auto()
    COMPLEX64 = enum.auto()
    DURATION = enum.auto()
    FLOAT64 = enum.auto()
    FLOAT32 = enum.auto()
    INT64 = enum.auto()
    INT32 = enum.auto()
    INT16 = enum.auto()
    INT8 = enum.auto()
    STRING = enum.auto()
    TIME = enum.auto()
    TIME_FULL = enum.auto()
    UINT64 = enum.auto()
    UINT32 = enum.auto()
    UINT16 = enum.auto()
    UINT8 = enum.auto()
    UINTPTR = enum.auto()
    REFLECT = enum.auto()
    NAMESPACE = enum.auto()
    STRINGER = enum.auto()
    ERROR = enum.auto()
    SKIP = enum.auto()
    INLINE_MARSHALER = enum.auto()


@runtime_checkable
class ObjectMarshaler(Protocol):
    """Anything that can write itself into an object encoder."""

    def marshal_log_object(self, enc: Any) -> None: ...


@dataclass(frozen=True)
class Field:
    """A key and a typed value, encoded lazily by whatever encoder receives it."""

    key: str = ""
    type: FieldType = FieldType.UNKNOWN
    integer: int = 0
    string: str = ""
    interface: Any = None


def _signed(val: int, bits: int) -> int:
    val = operator.index(val)
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if not low <= val <= high:
        raise OverflowError(f"{val} does not fit in a signed {bits}-bit integer")
    return val


def _unsigned(val: int, bits: int) -> int:
    """Range-check an unsigned value and return it reinterpreted as int64."""
    val = operator.index(val)
    if not 0 <= val < (1 << bits):
        raise OverflowError(f"{val} does not fit in an unsigned {bits}-bit integer")
    return val - (1 << 64) if val > _INT64_MAX else val


def _to_float32(x: float) -> float:
    return _struct.unpack("<f", _struct.pack("<f", x))[0]


def _timedelta_nanos(delta: _dt.timedelta) -> int:
    return (delta.days * 86400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1000


def skip() -> Field:
    """A no-op field."""
    return Field(type=FieldType.SKIP)


def nil_field(key: str) -> Field:
    """A field that encodes explicitly as nil."""
    return reflect(key, None)


def binary(key: str, val: bytes) -> Field:
    """A field carrying an opaque binary blob."""
    return Field(key=key, type=FieldType.BINARY, interface=val)


def bool_(key: str, val: bool) -> Field:
    return Field(key=key, type=FieldType.BOOL, integer=1 if val else 0)


def boolp(key: str, val: Optional[bool]) -> Field:
    return nil_field(key) if val is None else bool_(key, val)


def byte_string(key: str, val: bytes) -> Field:
    """A field carrying UTF-8 encoded text as bytes."""
    return Field(key=key, type=FieldType.BYTE_STRING, interface=val)


def complex128(key: str, val: complex) -> Field:
    return Field(key=key, type=FieldType.COMPLEX128, interface=complex(val))


def complex128p(key: str, val: Optional[complex]) -> Field:
    return nil_field(key) if val is None else complex128(key, val)


def complex64(key: str, val: complex) -> Field:
    """A complex field whose parts are rounded to single precision."""
    val = complex(val)
    rounded = complex(_to_float32(val.real), _to_float32(val.imag))
    return Field(key=key, type=FieldType.COMPLEX64, interface=rounded)


def complex64p(key: str, val: Optional[complex]) -> Field:
    return nil_field(key) if val is None else complex64(key, val)


def float64(key: str, val: float) -> Field:
    """A float field; the IEEE-754 bits are kept as a signed 64-bit integer."""
    bits = _struct.unpack("<q", _struct.pack("<d", float(val)))[0]
    return Field(key=key, type=FieldType.FLOAT64, integer=bits)


def float64p(key: str, val: Optional[float]) -> Field:
    return nil_field(key) if val is None else float64(key, val)


def float32(key: str, val: float) -> Field:
    """A single-precision float field; the IEEE-754 bits are kept as an integer."""
    bits = _struct.unpack("<I", _struct.pack("<f", float(val)))[0]
    return Field(key=key, type=FieldType.FLOAT32, integer=bits)


def float32p(key: str, val: Optional[float]) -> Field:
    return nil_field(key) if val is None else float32(key, val)


def int_(key: str, val: int) -> Field:
    return int64(key, val)


def intp(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else int_(key, val)


def int64(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.INT64, integer=_signed(val, 64))


def int64p(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else int64(key, val)


def int32(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.INT32, integer=_signed(val, 32))


def int32p(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else int32(key, val)


def int16(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.INT16, integer=_signed(val, 16))


def int16p(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else int16(key, val)


def int8(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.INT8, integer=_signed(val, 8))


def int8p(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else int8(key, val)


def string(key: str, val: str) -> Field:
    return Field(key=key, type=FieldType.STRING, string=val)


def stringp(key: str, val: Optional[str]) -> Field:
    return nil_field(key) if val is None else string(key, val)


def uint(key: str, val: int) -> Field:
    return uint64(key, val)


def uintp(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else uint(key, val)


def uint64(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.UINT64, integer=_unsigned(val, 64))


def uint64p(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else uint64(key, val)


def uint32(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.UINT32, integer=_unsigned(val, 32))


def uint32p(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else uint32(key, val)


def uint16(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.UINT16, integer=_unsigned(val, 16))


def uint16p(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else uint16(key, val)


def uint8(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.UINT8, integer=_unsigned(val, 8))


def uint8p(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else uint8(key, val)


def uintptr(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.UINTPTR, integer=_unsigned(val, 64))


def uintptrp(key: str, val: Optional[int]) -> Field:
    return nil_field(key) if val is None else uintptr(key, val)


def reflect(key: str, val: Any) -> Field:
    """A field holding an arbitrary object, serialized generically by the encoder."""
    return Field(key=key, type=FieldType.REFLECT, interface=val)


def namespace(key: str) -> Field:
    """Open a named scope; later fields are nested inside it."""
    return Field(key=key, type=FieldType.NAMESPACE)


def stringer(key: str, val: Any) -> Field:
    """A field whose value is ``str(val)``, computed lazily."""
    return Field(key=key, type=FieldType.STRINGER, interface=val)


def time(key: str, val: _dt.datetime) -> Field:
    """A timestamp field.

    Times representable as int64 nanoseconds since the epoch are stored as
    that integer plus their tzinfo; others keep the whole datetime. Naive
    datetimes are taken as local time.
    """
    aware = val
    if val.tzinfo is None or val.utcoffset() is None:
        try:
            aware = val.astimezone()
        except (OverflowError, ValueError, OSError):
            return Field(key=key, type=FieldType.TIME_FULL, interface=val)
    try:
        nanos = _timedelta_nanos(aware - _EPOCH)
    except OverflowError:
        return Field(key=key, type=FieldType.TIME_FULL, interface=val)
    if not _INT64_MIN <= nanos <= _INT64_MAX:
        return Field(key=key, type=FieldType.TIME_FULL, interface=val)
    return Field(key=key, type=FieldType.TIME, integer=nanos, interface=aware.tzinfo)


def timep(key: str, val: Optional[_dt.datetime]) -> Field:
    return nil_field(key) if val is None else time(key, val)


def duration(key: str, val: _dt.timedelta | int) -> Field:
    """A duration field, stored as nanoseconds; an int is taken as nanoseconds."""
    nanos = _timedelta_nanos(val) if isinstance(val, _dt.timedelta) else val
    return Field(key=key, type=FieldType.DURATION, integer=_signed(nanos, 64))


def durationp(key: str, val: Optional[_dt.timedelta | int]) -> Field:
    return nil_field(key) if val is None else duration(key, val)


def object_(key: str, val: ObjectMarshaler) -> Field:
    """A field holding an object that marshals itself."""
    if not isinstance(val, ObjectMarshaler):
        raise TypeError(f"{type(val).__name__} has no marshal_log_object method")
    return Field(key=key, type=FieldType.OBJECT_MARSHALER, interface=val)


def inline(val: ObjectMarshaler) -> Field:
    """Like object_, but adds the object's members to the current namespace."""
    if not isinstance(val, ObjectMarshaler):
        raise TypeError(f"{type(val).__name__} has no marshal_log_object method")
    return Field(type=FieldType.INLINE_MARSHALER, interface=val)