import datetime as dt
import ipaddress
from dataclasses import dataclass

import pytest

from swiftlog.anyfield import any_field
from swiftlog.array import (
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
    FieldType,
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


@dataclass(frozen=True)
class Username:
    name: str

    def marshal_log_object(self, enc):
        enc.add_string("username", self.name)


@dataclass(frozen=True)
class BoolArray:
    values: tuple

    def marshal_log_array(self, arr):
        for v in self.values:
            arr.append_bool(v)


EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)
ADDR = ipaddress.ip_address("1.2.3.4")
NAME = Username("phil")
ARR = BoolArray((True,))


@pytest.mark.parametrize(
    "got, want",
    [
        (any_field("k", NAME), object_("k", NAME)),
        (any_field("k", ARR), array("k", ARR)),
        (any_field("k", ADDR), stringer("k", ADDR)),
        (any_field("k", True), bool_("k", True)),
        (any_field("k", [True]), bools("k", [True])),
        (any_field("k", b"\x01"), binary("k", b"\x01")),
        (any_field("k", bytearray(b"\x01")), binary("k", b"\x01")),
        (any_field("k", 1 + 2j), complex128("k", 1 + 2j)),
        (any_field("k", [1 + 2j]), complex128s("k", [1 + 2j])),
        (any_field("k", 3.14), float64("k", 3.14)),
        (any_field("k", [3.14]), float64s("k", [3.14])),
        (any_field("k", 1), int_("k", 1)),
        (any_field("k", [1]), ints("k", [1])),
        (any_field("k", "v"), string("k", "v")),
        (any_field("k", ["v"]), strings("k", ["v"])),
        (any_field("k", EPOCH), time("k", EPOCH)),
        (any_field("k", [EPOCH]), times("k", [EPOCH])),
        (any_field("k", dt.timedelta(seconds=1)), duration("k", dt.timedelta(seconds=1))),
        (
            any_field("k", [dt.timedelta(seconds=1)]),
            durations("k", [dt.timedelta(seconds=1)]),
        ),
        (any_field("k", None), nil_field("k")),
    ],
)
def test_any_picks_specific_constructor(got, want):
    assert got == want


def test_any_fallback_is_reflect():
    value = object()
    assert any_field("k", value) == reflect("k", value)


def test_any_dict_falls_back_to_reflect():
    value = {"a": 1}
    assert any_field("k", value) == Field(key="k", type=FieldType.REFLECT, interface=value)


def test_any_mixed_list_falls_back_to_reflect():
    value = [1, "a"]
    assert any_field("k", value).type == FieldType.REFLECT


def test_any_empty_list_falls_back_to_reflect():
    assert any_field("k", []) == reflect("k", [])


def test_any_error():
    err = ValueError("v")
    assert any_field("k", err) == named_error("k", err)


def test_any_errors():
    err = ValueError("v")
    assert any_field("k", [err]) == errors("k", [err])


def test_any_errors_with_none_entries():
    err = ValueError("v")
    assert any_field("k", [None, err]) == errors("k", [None, err])


def test_any_large_positive_int_is_uint64():
    assert any_field("k", 1 << 63) == uint64("k", 1 << 63)


def test_any_int_beyond_uint64_is_reflect():
    assert any_field("k", 1 << 64) == reflect("k", 1 << 64)


def test_any_bool_list_not_treated_as_ints():
    assert any_field("k", [True, False]).interface.append_method == "append_bool"


def test_any_time_field_integer():
    assert any_field("k", EPOCH).integer == 0