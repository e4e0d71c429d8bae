"""Field constructors for exceptions."""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from swiftlog.array import array
from swiftlog.field import Field, FieldType, skip


def _encode_error(key: str, err: BaseException, enc: Any) -> None:
    """Write ``str(err)`` under key and, when a traceback is attached, the
    formatted traceback under key + "Verbose"."""
    enc.add_string(key, str(err))
    if err.__traceback__ is not None:
        verbose = "".join(traceback.format_exception(type(err), err, err.__traceback__))
        enc.add_string(key + "Verbose", verbose)


def error(err: Optional[BaseException]) -> Field:
    """Shorthand for ``named_error("error", err)``."""
    return named_error("error", err)


def named_error(key: str, err: Optional[BaseException]) -> Field:
    """A field holding an exception under key; None gives a no-op field."""
    if err is None:
        return skip()
    return Field(key=key, type=FieldType.ERROR, interface=err)


@dataclass(frozen=True)
class _ErrorElement:
    err: BaseException

    def marshal_log_object(self, enc: Any) -> None:
        _encode_error("error", self.err, enc)


@dataclass(frozen=True)
class _ErrorArray:
    errs: tuple

    def marshal_log_array(self, arr: Any) -> None:
        for err in self.errs:
            if err is None:
                continue
            arr.append_object(_ErrorElement(err))


def errors(key: str, errs: Optional[Iterable[Optional[BaseException]]]) -> Field:
    """A list of exceptions, each encoded as an object with an "error" key.

    None entries are skipped.
    """
    return array(key, _ErrorArray(() if errs is None else tuple(errs)))