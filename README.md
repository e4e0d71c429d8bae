# swiftlog

swiftlog provides the building blocks for structured logging. It covers typed
key/value fields, array and error fields that are marshaled lazily, and a
pooled byte buffer with number and time formatters.

## Modules

### `swiftlog.field`

- `Field` is a frozen dataclass with the attributes `key`, `type`, `integer`,
  `string` and `interface`.
- `FieldType` is an `IntEnum` that says how the payload of a field is stored.

Each kind of value has its own constructor:

- Scalars:
  - Integers: `int_`, `int64`, `int32`, `int16`, `int8`, `uint`, `uint64`,
    `uint32`, `uint16`, `uint8` and `uintptr`.
  - Floats: `float64` and `float32`.
  - Complex numbers: `complex128` and `complex64`.
  - Others: `bool_` and `string`.
  - Each integer constructor checks that the value fits its width and raises
    `OverflowError` if it does not. An unsigned value above the int64 range is
    stored reinterpreted as int64.
  - `float64` and `float32` keep the IEEE-754 bits in `integer`.
  - `complex64` rounds both parts of the number to single precision.
- `binary` holds an opaque blob. `byte_string` holds UTF-8 text as bytes.
- `time` takes a `datetime`:
  - A time that fits in int64 nanoseconds since the epoch is stored as that
    number, with its tzinfo.
  - Any other time is kept whole, as `FieldType.TIME_FULL`.
  - A naive datetime is taken as local time.
- `duration` takes a `timedelta` or an int, and stores nanoseconds. An int is
  taken as nanoseconds.
- `object_` builds a field from an object that has a
  `marshal_log_object(enc)` method. `inline` does the same, but the object's
  members go into the current namespace. Both raise `TypeError` for any other
  value.
- `reflect` holds any value. `stringer` holds a value whose `str()` is the
  logged text. `namespace` opens a nested scope. `skip` returns a no-op field.
- Pointer-style variants take `None` as well as a value: `boolp`, `intp`,
  `int64p`, … `uintptrp`, `float64p`, `float32p`, `complex128p`,
  `complex64p`, `stringp`, `timep` and `durationp`. Given `None`, they return
  `nil_field(key)`, which is a reflect field that holds `None`.

### `swiftlog.array`

- `array(key, val)` wraps any object that has a `marshal_log_array(arr)`
  method.
- Typed sequence constructors:
  - `bools` and `strings`.
  - `ints`, `int64s`, `int32s`, `int16s` and `int8s`.
  - `uints`, `uint64s`, `uint32s`, `uint16s`, `uint8s` and `uintptrs`.
  - `float64s`, `float32s`, `complex128s` and `complex64s`.
  - `byte_strings`, `times` and `durations`.
- Each constructor copies its input and, for most element types, converts or
  range-checks each element. `None` stands for an empty list.
- When the field is encoded, each element is passed to the matching
  `append_*` method of the array encoder, for example `append_int`.
- `objects` and `object_values` take objects that have `marshal_log_object`.
  Each one is passed to `arr.append_object`. If one of them raises,
  marshaling stops there.

### `swiftlog.error`

- `named_error(key, err)` stores an exception under `key`. `error(err)` is
  the same as `named_error("error", err)`. A `None` error gives a `skip()`
  field.
- `errors(key, errs)` builds an array with one object per exception. `None`
  entries are left out.
  - Each object holds `"error": str(err)`.
  - When the exception carries a traceback, the object also holds
    `"errorVerbose"` with the formatted traceback.

### `swiftlog.anyfield`

`any_field(key, value)` picks the most specific constructor for `value`:

- Objects with `marshal_log_object` become object fields, and objects with
  `marshal_log_array` become array fields.
- `None` becomes a nil field.
- Scalars:
  - `bool` becomes a bool field.
  - `int` becomes `int_`, or `uint64` if it is too large for int64.
  - `float`, `complex` and `str` become the matching fields.
  - `bytes` and `bytearray` become binary fields.
  - `datetime` becomes a time field and `timedelta` a duration field.
- Exceptions become error fields.
- A non-empty `list` or `tuple` whose elements all have the same kind becomes
  the matching array field. The kinds are bool, int, float, complex, str,
  datetime, timedelta and exceptions (which may be mixed with `None`).
- Other values that define their own `__str__` become stringer fields.
- Anything else becomes a reflect field.

### `swiftlog.buffer`

- `Pool.get()` returns an empty `Buffer`. It reuses a freed buffer when the
  pool has one. The pool is thread-safe.
- `Buffer` has these methods:
  - Appending: `append_byte`, `append_string`, `append_int`, `append_uint`,
    `append_bool` and `append_float(f, bit_size)`.
    - `append_float` writes plain decimal notation, with unquoted `NaN`,
      `+Inf` and `-Inf`.
    - `bit_size` must be 32 or 64.
  - `append_time(t, layout)` uses reference-time layouts such as
    `"2006-01-02T15:04:05Z07:00"`. The same formatter is available as
    `format_time(t, layout)`.
  - Writing: `write`, `write_byte` and `write_string`. `write` and
    `write_string` return the number of bytes written.
  - Housekeeping: `trim_newline`, `reset`, `bytes`, and `free`, which returns
    the buffer to its pool.
- A `Buffer` supports `len()`, `bytes()` and `str()`. Used in a `with` block,
  it is freed on exit.

## Example

```python
from swiftlog.field import string, int64
from swiftlog.array import ints
from swiftlog.error import error
from swiftlog.anyfield import any_field
from swiftlog.buffer import Pool

fields = [
    string("url", "http://localhost/"),
    int64("attempt", 3),
    ints("ports", [80, 443]),
    error(ValueError("boom")),
    any_field("retry", True),
]

pool = Pool()
with pool.get() as buf:
    buf.append_string("attempt=")
    buf.append_int(3)
    print(buf.bytes().decode())
```

## What this package does not do

swiftlog has no logger, no log levels, no encoders (JSON or console), no
output sinks and no configuration loader.

Fields only describe values. To write anything, you supply an encoder object
that has the `add_*`/`append_*` methods that the marshalers call.

## Running the tests

```
pip install -e .[test]
pytest
```