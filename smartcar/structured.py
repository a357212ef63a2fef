"""Uniform, field-addressable representation of JSON API responses."""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Union


class Record:
    """
    Ordered set of named fields built from a JSON object.

    Fields are readable as attributes (``rec.distance``), as items
    (``rec["distance"]``) or through ``get``. Field names that are not valid
    identifiers (or collide with a method name) are only reachable by item.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Optional[Dict[str, Any]] = None, **kwargs: Any):
        data = dict(fields or {})
        data.update(kwargs)
        object.__setattr__(self, "_fields", data)

    def __getattr__(self, name: str) -> Any:
        if name == "_fields":
            raise AttributeError(name)
        try:
            return self._fields[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__} has no field '{name}'") from None

    def __setattr__(self, name: str, value: Any):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __reduce__(self):
        return type(self), (self._fields,)

    def __getitem__(self, name: str) -> Any:
        return self._fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        inner = ", ".join(f"{key}={value!r}" for key, value in self._fields.items())
        return f"{type(self).__name__}({inner})"

    def get(self, name: str, default: Any = None) -> Any:
        return self._fields.get(name, default)

    def field_names(self) -> List[str]:
        return list(self._fields)

    def with_fields(self, **fields: Any) -> "Record":
        """Copy of this record with ``fields`` added or replaced."""
        data = dict(self._fields)
        data.update(fields)
        return type(self)(data)

    def to_dict(self) -> Dict[str, Any]:
        return {key: _plain(value) for key, value in self._fields.items()}


StructuredValue = Union[None, bool, int, float, str, List[Any], Record]


def _plain(value: Any) -> Any:
    if isinstance(value, Record):
        return value.to_dict()
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def normalize(value: Any) -> StructuredValue:
    """Recursively convert decoded JSON into records and lists."""
    if isinstance(value, dict):
        return Record({key: normalize(item) for key, item in value.items()})
    if isinstance(value, list):
        return [normalize(item) for item in value]
    return value


def _shape(value: Any) -> str:
    if isinstance(value, Record):
        return "record"
    if isinstance(value, list):
        return "list"
    if value is None:
        return "null"
    return type(value).__name__


def as_record(value: Any) -> Record:
    if not isinstance(value, Record):
        raise TypeError(f"expected a record, got {_shape(value)}")
    return value


def as_list(value: Any) -> List[Any]:
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {_shape(value)}")
    return value


def as_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {_shape(value)}")
    return value


def as_number(value: Any) -> Union[int, float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {_shape(value)}")
    return value


def as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a bool, got {_shape(value)}")
    return value
