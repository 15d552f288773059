# src/easy_storage/codecs.py
from __future__ import annotations

"""
Pretty text encoders / decoders for each :class:`Format`.

JSON goes through the standard library. TOML is read with ``tomllib``
(``tomli`` before Python 3.11) and written with ``tomli_w``.

Codec exceptions are raised unchanged; :mod:`easy_storage.api` maps them
onto the error taxonomy.
"""

import json
import sys
from collections.abc import Mapping
from typing import Any, Optional

import tomli_w

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover - version dependent
    import tomli as tomllib

from .config import StoreOptions
from .formats import Format


def encode_json(data: Any, options: StoreOptions) -> str:
    return json.dumps(
        data,
        indent=options.json_indent,
        ensure_ascii=options.ensure_ascii,
        sort_keys=options.sort_keys,
        allow_nan=False,
    )


def _drop_none(value: Any) -> Any:
    """Remove None-valued keys from every table; arrays keep their items."""
    if isinstance(value, Mapping):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_drop_none(v) for v in value]
    return value


def encode_toml(data: Any, options: StoreOptions) -> str:
    # A TOML document is always a table.
    if not isinstance(data, Mapping):
        raise TypeError(f"TOML documents must be tables, got {type(data).__name__}")
    # TOML has no null: absent keys stand for None and read back as such.
    return tomli_w.dumps(
        _drop_none(data),
        multiline_strings=options.toml_multiline_strings,
        indent=options.toml_indent,
    )


def decode_json(text: str) -> Any:
    return json.loads(text)


def decode_toml(text: str) -> Any:
    return tomllib.loads(text)


def encode(data: Any, format: Format, options: Optional[StoreOptions] = None) -> str:
    """
    Encode format-neutral `data` as pretty text in `format`.

    Raises
    ------
    TypeError, ValueError, RecursionError
        Whatever the underlying encoder raises.
    """
    options = options or StoreOptions()
    if Format(format) is Format.JSON:
        return encode_json(data, options)
    return encode_toml(data, options)


def decode(text: str, format: Format) -> Any:
    """
    Decode `text` written in `format`.

    Raises
    ------
    ValueError
        ``json.JSONDecodeError`` or ``tomllib.TOMLDecodeError``.
    """
    if Format(format) is Format.JSON:
        return decode_json(text)
    return decode_toml(text)
