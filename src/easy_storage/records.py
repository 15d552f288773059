# src/easy_storage/records.py
from __future__ import annotations

"""
Projection of records to format-neutral data and back.

A "record" is anything the two helpers below understand:

- an object with ``to_dict()`` and a classmethod ``from_dict(data)``
  (see :class:`StoreableRecord`),
- a dataclass instance / dataclass type,
- a plain mapping (``dict`` and friends).

Dataclasses are rebuilt from their type hints, so nested dataclasses,
``Optional[...]``, ``List[...]``, ``Tuple[...]``, ``Dict[str, ...]`` and
``Enum`` fields survive a round trip. ``str``, ``int``, ``float`` and
``bool`` fields are type-checked (ints are accepted for floats). Keys without
a matching field are ignored; an absent field that allows ``None`` loads as
``None``; any other missing required field is an error.
"""

import dataclasses
import types
from collections.abc import Mapping as MappingABC
from enum import Enum
from typing import (
    Any,
    Dict,
    Mapping,
    Protocol,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    runtime_checkable,
)

T = TypeVar("T")

_UnionType = getattr(types, "UnionType", None)


@runtime_checkable
class StoreableRecord(Protocol):
    """Custom record types that control their own projection."""

    def to_dict(self) -> Dict[str, Any]:
        ...

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Any:
        ...


# ---------------------------------------------------------------------------
# record -> data
# ---------------------------------------------------------------------------


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return _plain(value.value)
    if isinstance(value, MappingABC):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def to_data(record: Any) -> Any:
    """
    Return the format-neutral representation of `record`.

    The record itself is never mutated.

    Raises
    ------
    TypeError
        If `record` is not a dataclass instance, mapping, or an object
        with a ``to_dict()`` method.
    """
    to_dict = getattr(record, "to_dict", None)
    if callable(to_dict) and not isinstance(record, type):
        return _plain(to_dict())
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return _plain(dataclasses.asdict(record))
    if isinstance(record, MappingABC):
        return _plain(record)
    raise TypeError(f"Object of type {type(record).__name__} is not a storeable record")


# ---------------------------------------------------------------------------
# data -> record
# ---------------------------------------------------------------------------


def _is_union(origin: Any) -> bool:
    return origin is Union or (_UnionType is not None and origin is _UnionType)


_SCALARS = (str, int, float, bool)


def _check_scalar(tp: type, value: Any) -> Any:
    # bool is an int subclass; ints are accepted for floats.
    if tp is bool:
        ok = isinstance(value, bool)
    elif tp is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif tp is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        if ok:
            return float(value)
    else:
        ok = isinstance(value, str)
    if not ok:
        raise TypeError(f"invalid type: expected {tp.__name__}, got {type(value).__name__}")
    return value


def _allows_none(tp: Any) -> bool:
    if tp is Any or tp is object or tp is type(None):
        return True
    return _is_union(get_origin(tp)) and type(None) in get_args(tp)


def _convert(tp: Any, value: Any) -> Any:
    """Coerce decoded `value` towards the annotation `tp`."""
    if tp is Any or tp is object:
        return value

    origin = get_origin(tp)
    args = get_args(tp)

    if _is_union(origin):
        if value is None and type(None) in args:
            return None
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1:
            return _convert(non_none[0], value)
        return value

    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return _build_dataclass(tp, value)
    if isinstance(tp, type) and issubclass(tp, Enum):
        return tp(value)
    if tp in _SCALARS:
        return _check_scalar(tp, value)

    if origin in (list, set, frozenset):
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"invalid type: expected a sequence, got {type(value).__name__}")
        if args:
            return origin(_convert(args[0], v) for v in value)
        return origin(value)

    if origin is tuple:
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"invalid type: expected a sequence, got {type(value).__name__}")
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(_convert(args[0], v) for v in value)
        if args:
            if len(args) != len(value):
                raise TypeError(
                    f"invalid length {len(value)}, expected a tuple of size {len(args)}"
                )
            return tuple(_convert(a, v) for a, v in zip(args, value))
        return tuple(value)

    if origin in (dict, MappingABC):
        if not isinstance(value, MappingABC):
            raise TypeError(f"invalid type: expected a map, got {type(value).__name__}")
        if len(args) == 2:
            return {k: _convert(args[1], v) for k, v in value.items()}
        return dict(value)

    if tp in (list, tuple, set, frozenset) and isinstance(value, (list, tuple)):
        return tp(value)

    return value


def _build_dataclass(cls: Type[T], data: Any) -> T:
    if not isinstance(data, MappingABC):
        raise TypeError(
            f"invalid type: expected a map for {cls.__name__}, got {type(data).__name__}"
        )

    try:
        hints = get_type_hints(cls)
    except NameError as e:
        raise TypeError(f"cannot resolve field types of {cls.__name__}: {e}") from e
    kwargs: Dict[str, Any] = {}
    for f in dataclasses.fields(cls):  # type: ignore[arg-type]
        if not f.init:
            continue
        if f.name in data:
            kwargs[f.name] = _convert(hints.get(f.name, Any), data[f.name])
        elif f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        elif _allows_none(hints.get(f.name, Any)):
            # Absent optional keys, e.g. None fields dropped from TOML.
            kwargs[f.name] = None
        else:
            raise TypeError(f"missing field `{f.name}` for {cls.__name__}")
    return cls(**kwargs)


def from_data(cls: Type[T], data: Any) -> T:
    """
    Build a fresh instance of `cls` from decoded data.

    Raises
    ------
    TypeError
        If `data` does not fit `cls` (wrong shape, missing fields) or
        `cls` is not a supported record type.
    ValueError
        If an ``Enum`` field holds an unknown value.
    """
    from_dict = getattr(cls, "from_dict", None)
    if callable(from_dict):
        return from_dict(data)
    if isinstance(cls, type) and dataclasses.is_dataclass(cls):
        return _build_dataclass(cls, data)
    if isinstance(cls, type) and issubclass(cls, MappingABC):
        if not isinstance(data, MappingABC):
            raise TypeError(f"invalid type: expected a map, got {type(data).__name__}")
        return cls(data)  # type: ignore[call-arg]
    raise TypeError(f"{cls!r} is not a storeable record type")
