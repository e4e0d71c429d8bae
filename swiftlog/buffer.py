"""A pooled, append-only byte buffer with number and time formatters."""

from __future__ import annotations

import datetime as _dt
import math
import operator
import re
import struct as _struct
import threading
from decimal import Decimal
from typing import Optional

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_LAYOUT_TOKENS = (
    "January", "Jan", "Monday", "Mon", "MST", "2006", "002", "__2", "_2006", "_2",
    "01", "02", "03", "04", "05", "06", "15", "1", "2", "3", "4", "5", "PM", "pm",
    "Z070000", "Z07:00:00", "Z0700", "Z07:00", "Z07",
    "-070000", "-07:00:00", "-0700", "-07:00", "-07",
)
_LAYOUT_RE = re.compile(
    r"[.,](?:0+|9+)(?!\d)|" + "|".join(re.escape(tok) for tok in _LAYOUT_TOKENS)
)


def _zone(token: str, secs: int) -> str:
    if token.startswith("Z") and secs == 0:
        return "Z"
    sign = "-" if secs < 0 else "+"
    hours, rem = divmod(abs(secs), 3600)
    minutes, seconds = divmod(rem, 60)
    body = token[1:]
    out = f"{sign}{hours:02d}"
    if body in ("0700", "070000"):
        out += f"{minutes:02d}"
    elif body in ("07:00", "07:00:00"):
        out += f":{minutes:02d}"
    if body == "070000":
        out += f"{seconds:02d}"
    elif body == "07:00:00":
        out += f":{seconds:02d}"
    return out


def _render(t: _dt.datetime, token: str) -> str:
    offset = t.utcoffset()
    secs = int(offset.total_seconds()) if offset is not None else 0
    hour12 = t.hour % 12 or 12
    yday = t.timetuple().tm_yday
    if token[0] in ".,":
        digits = f"{t.microsecond * 1000:09d}"[: len(token) - 1]
        if token[1] == "9":
            digits = digits.rstrip("0")
            if not digits:
                return ""
        return token[0] + digits
    if token[0] in "Z-" and token != "-":
        return _zone(token, secs)
    simple = {
        "January": lambda: _MONTHS[t.month - 1],
        "Jan": lambda: _MONTHS[t.month - 1][:3],
        "Monday": lambda: _WEEKDAYS[t.weekday()],
        "Mon": lambda: _WEEKDAYS[t.weekday()][:3],
        "MST": lambda: t.tzname() or _zone("-0700", secs),
        "2006": lambda: f"{t.year:04d}",
        "_2006": lambda: f"_{t.year:04d}",
        "06": lambda: f"{t.year % 100:02d}",
        "01": lambda: f"{t.month:02d}",
        "1": lambda: str(t.month),
        "02": lambda: f"{t.day:02d}",
        "2": lambda: str(t.day),
        "_2": lambda: f"{t.day:>2d}",
        "__2": lambda: f"{yday:>3d}",
        "002": lambda: f"{yday:03d}",
        "15": lambda: f"{t.hour:02d}",
        "03": lambda: f"{hour12:02d}",
        "3": lambda: str(hour12),
        "04": lambda: f"{t.minute:02d}",
        "4": lambda: str(t.minute),
        "05": lambda: f"{t.second:02d}",
        "5": lambda: str(t.second),
        "PM": lambda: "PM" if t.hour >= 12 else "AM",
        "pm": lambda: "pm" if t.hour >= 12 else "am",
    }
    return simple[token]()


def format_time(t: _dt.datetime, layout: str) -> str:
    """Format t using a reference-time layout ("2006-01-02T15:04:05Z07:00").

    Naive datetimes are taken as local time.
    """
    if t.tzinfo is None or t.utcoffset() is None:
        t = t.astimezone()
    return _LAYOUT_RE.sub(lambda m: _render(t, m.group()), layout)


def _to_float32(x: float) -> float:
    try:
        return _struct.unpack("<f", _struct.pack("<f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def _format_float(f: float, bit_size: int) -> str:
    if bit_size not in (32, 64):
        raise ValueError(f"invalid float bit size {bit_size}")
    f = float(f)
    if bit_size == 32:
        f = _to_float32(f)
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "+Inf" if f > 0 else "-Inf"
    if bit_size == 64:
        shortest = repr(f)
    else:
        shortest = next(
            s
            for s in (f"{f:.{p}g}" for p in range(1, 18))
            if _to_float32(float(s)) == f
        )
    return format(Decimal(shortest).normalize(), "f")


class Buffer:
    """A growable byte buffer, normally obtained from a :class:`Pool`."""

    __slots__ = ("_bs", "_pool")

    def __init__(self, pool: Optional["Pool"] = None) -> None:
        self._bs = bytearray()
        self._pool = pool

    def append_byte(self, v: int) -> None:
        self._bs.append(v)

    def append_string(self, s: str) -> None:
        self._bs += s.encode("utf-8")

    def append_int(self, i: int) -> None:
        i = operator.index(i)
        if not _INT64_MIN <= i <= _INT64_MAX:
            raise OverflowError(f"{i} does not fit in a signed 64-bit integer")
        self._bs += str(i).encode("ascii")

    def append_time(self, t: _dt.datetime, layout: str) -> None:
        self.append_string(format_time(t, layout))

    def append_uint(self, i: int) -> None:
        i = operator.index(i)
        if not 0 <= i <= _UINT64_MAX:
            raise OverflowError(f"{i} does not fit in an unsigned 64-bit integer")
        self._bs += str(i).encode("ascii")

    def append_bool(self, v: bool) -> None:
        self._bs += b"true" if v else b"false"

    def append_float(self, f: float, bit_size: int) -> None:
        """Append f in plain decimal notation; NaN and infinities are not quoted."""
        self._bs += _format_float(f, bit_size).encode("ascii")

    def bytes(self) -> bytes:
        return bytes(self._bs)

    def reset(self) -> None:
        self._bs.clear()

    def write(self, bs: bytes) -> int:
        data = bytes(bs)
        self._bs += data
        return len(data)

    def write_byte(self, v: int) -> None:
        self.append_byte(v)

    def write_string(self, s: str) -> int:
        """Append s and return the number of bytes written."""
        data = s.encode("utf-8")
        self._bs += data
        return len(data)

    def trim_newline(self) -> None:
        """Remove one trailing newline, if any."""
        if self._bs.endswith(b"\n"):
            del self._bs[-1]

    def free(self) -> None:
        """Return the buffer to its pool; it must not be used afterwards."""
        if self._pool is not None:
            self._pool._put(self)

    def __len__(self) -> int:
        return len(self._bs)

    def __bytes__(self) -> bytes:
        return bytes(self._bs)

    def __str__(self) -> str:
        return self._bs.decode("utf-8", errors="replace")

    def __enter__(self) -> "Buffer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.free()


class Pool:
    """A thread-safe free list of buffers."""

    def __init__(self) -> None:
        self._free: list[Buffer] = []
        self._lock = threading.Lock()

    def get(self) -> Buffer:
        """Take an empty buffer from the pool, creating one if necessary."""
        with self._lock:
            buf = self._free.pop() if self._free else None
        if buf is None:
            buf = Buffer()
        buf.reset()
        buf._pool = self
        return buf

    def _put(self, buf: Buffer) -> None:
        with self._lock:
            self._free.append(buf)