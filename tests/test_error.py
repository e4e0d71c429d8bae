import dataclasses

from swiftlog.error import error, errors, named_error
from swiftlog.field import Field, FieldType, skip


class _MapEncoder:
    def __init__(self):
        self.fields = {}

    def add_string(self, key, val):
        self.fields[key] = val


class _SliceEncoder:
    def __init__(self):
        self.elems = []

    def append_object(self, obj):
        enc = _MapEncoder()
        try:
            obj.marshal_log_object(enc)
        finally:
            self.elems.append(enc.fields)


def _encode(field):
    field = dataclasses.replace(field, key="k")
    assert field.type == FieldType.ARRAY_MARSHALER
    arr = _SliceEncoder()
    field.interface.marshal_log_array(arr)
    return {field.key: arr.elems}


def test_error_of_none_is_skip():
    assert error(None) == skip()


def test_error_uses_error_key():
    fail = ValueError("fail")
    assert error(fail) == Field(key="error", type=FieldType.ERROR, interface=fail)


def test_named_error_of_none_is_skip():
    assert named_error("foo", None) == skip()


def test_named_error_keeps_key_and_error():
    fail = ValueError("fail")
    assert named_error("foo", fail) == Field(key="foo", type=FieldType.ERROR, interface=fail)


def test_errors_with_same_items_are_equal():
    err = ValueError("v")
    assert errors("k", [err]) == errors("k", (err,))


def test_empty_errors_array():
    fields = _encode(errors("", []))
    assert fields == {"k": []}


def test_errors_array_skips_none():
    fields = _encode(errors("", [None, ValueError("foo"), None, ValueError("bar")]))
    assert fields["k"] == [{"error": "foo"}, {"error": "bar"}]
    assert len(fields) == 1


def test_errors_arrays_handle_rich_errors():
    try:
        raise RuntimeError("egad")
    except RuntimeError as exc:
        err = exc

    fields = _encode(errors("k", [err]))
    assert len(fields) == 1
    arr = fields["k"]
    assert len(arr) == 1
    err_map = arr[0]
    assert err_map["error"] == "egad"
    assert "egad" in err_map["errorVerbose"]
    assert "test_errors_arrays_handle_rich_errors" in err_map["errorVerbose"]