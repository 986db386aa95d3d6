"""Conversion between ledger dataclasses and JSON-safe store documents."""

import types
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

T = TypeVar("T")


def serialize_value(value: Any) -> Any:
    """Serialize a value for a JSON document."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_document(value)
    elif isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def to_document(obj: Any) -> dict:
    """Convert a dataclass record to a document.

    Uses ``dataclasses.fields()`` + ``getattr`` rather than ``asdict()`` so
    nested records go through :func:`serialize_value` exactly once.
    """
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def from_document(cls: type[T], data: dict) -> T:
    """Rebuild a dataclass record from a document.

    Unknown keys are ignored and missing keys fall back to field defaults,
    so documents written by older versions still load.
    """
    hints = get_type_hints(cls)
    kwargs = {}
    for f in fields(cls):
        if f.name in data:
            kwargs[f.name] = _decode(hints[f.name], data[f.name])
    return cls(**kwargs)


def _decode(tp: Any, value: Any) -> Any:
    if value is None:
        return None

    origin = get_origin(tp)
    if origin in (Union, types.UnionType):
        args = [a for a in get_args(tp) if a is not type(None)]
        return _decode(args[0], value)
    if origin is list:
        (item_type,) = get_args(tp)
        return [_decode(item_type, v) for v in value]
    if origin is dict:
        return dict(value)
    if is_dataclass(tp):
        return from_document(tp, value)

    if isinstance(tp, type):
        if issubclass(tp, Enum):
            return tp(value)
        if tp is Decimal:
            return Decimal(str(value))
        if tp is datetime:
            return value if isinstance(value, datetime) else datetime.fromisoformat(value)
        if tp is date:
            if isinstance(value, datetime):
                return value.date()
            return value if isinstance(value, date) else date.fromisoformat(value)
        if tp is bool:
            return bool(value)
        if tp is int:
            return int(value)
    return value
