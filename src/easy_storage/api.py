from __future__ import annotations

"""
Format-dispatching save / load functions.

Core functions:
- save(record, path, create_if_missing, format) -> None
- save_by_extension(record, path, create_if_missing) -> None
- load(cls, path, format) -> record
- load_by_extension(cls, path) -> record

Plus in-memory helpers sharing the same error mapping:
- dumps(record, format) -> str
- loads(cls, text, format) -> record

Design principles:
- One error type: every failure is a :class:`~easy_storage.exceptions.StorageError`.
- Short-circuit: encoding happens before the file is opened, and extension
  inference happens before any codec or filesystem work.
- No atomic swap: a failed write leaves the file as the filesystem left it.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Type, TypeVar, Union

from .codecs import decode, encode
from .config import OptionsLike, load_options
from .exceptions import (
    DecodeError,
    EncodeError,
    JsonDecodeError,
    JsonEncodeError,
    StorageIOError,
    TomlDecodeError,
    TomlEncodeError,
)
from .formats import Format, PathLike, path_to_format
from .records import from_data, to_data

logger = logging.getLogger(__name__)

T = TypeVar("T")

FormatLike = Union[Format, str]

_ENCODE_ERRORS: Dict[Format, Type[EncodeError]] = {
    Format.JSON: JsonEncodeError,
    Format.TOML: TomlEncodeError,
}

_DECODE_ERRORS: Dict[Format, Type[DecodeError]] = {
    Format.JSON: JsonDecodeError,
    Format.TOML: TomlDecodeError,
}

# Without O_CREAT, opening a missing file fails with FileNotFoundError.
_WRITE_FLAGS = os.O_WRONLY | os.O_TRUNC | getattr(os, "O_BINARY", 0)


# ---------------------------------------------------------------------------
# In-memory encode / decode
# ---------------------------------------------------------------------------


def dumps(record: Any, format: FormatLike, *, options: OptionsLike = None) -> str:
    """
    Encode `record` as pretty text in `format`.

    Raises
    ------
    JsonEncodeError / TomlEncodeError
        If the record cannot be projected or encoded.
    """
    fmt = Format(format)
    opts = load_options(options)
    try:
        return encode(to_data(record), fmt, opts)
    except (TypeError, ValueError, RecursionError) as e:
        raise _ENCODE_ERRORS[fmt](e) from e


def loads(cls: Type[T], text: str, format: FormatLike) -> T:
    """
    Decode `text` in `format` into a new `cls` instance.

    Raises
    ------
    JsonDecodeError / TomlDecodeError
        If the text is malformed or does not fit `cls`.
    """
    fmt = Format(format)
    try:
        return from_data(cls, decode(text, fmt))
    except (TypeError, ValueError, KeyError, RecursionError) as e:
        raise _DECODE_ERRORS[fmt](e) from e


# ---------------------------------------------------------------------------
# File persistence
# ---------------------------------------------------------------------------


def save(
    record: Any,
    path: PathLike,
    create_if_missing: bool,
    format: FormatLike,
    *,
    options: OptionsLike = None,
) -> None:
    """
    Save `record` to `path` in the given format.

    Parameters
    ----------
    record:
        Dataclass instance, mapping, or object with ``to_dict()``.
    path:
        Destination file. Existing content is truncated.
    create_if_missing:
        Create the file if it does not exist. If False and the file is
        missing, a StorageIOError is raised.
    format:
        :class:`Format` (or its string value) to write.
    options:
        Encoder options, see :func:`easy_storage.config.load_options`.

    Raises
    ------
    JsonEncodeError / TomlEncodeError
        Encoding failed; the file was not touched.
    StorageIOError
        Opening or writing the file failed.
    """
    fmt = Format(format)
    text = dumps(record, fmt, options=options)
    payload = text.encode("utf-8")

    flags = _WRITE_FLAGS | (os.O_CREAT if create_if_missing else 0)
    try:
        fd = os.open(path, flags, 0o666)
    except OSError as e:
        raise StorageIOError(e) from e

    try:
        with open(fd, "wb") as f:
            f.write(payload)
    except OSError as e:
        raise StorageIOError(e) from e

    logger.debug("saved %s (%s, %d bytes)", path, fmt, len(payload))


def save_by_extension(
    record: Any,
    path: PathLike,
    create_if_missing: bool,
    *,
    options: OptionsLike = None,
) -> None:
    """
    Save `record` to `path`, choosing the format from the extension.

    Supported extensions are ``json`` and ``toml``.

    Raises
    ------
    UnknownExtensionError
        The path has no or an unsupported extension; nothing was attempted.
    """
    fmt = path_to_format(path)
    save(record, path, create_if_missing, fmt, options=options)


def load(cls: Type[T], path: PathLike, format: FormatLike) -> T:
    """
    Load a new `cls` instance from `path` in the given format.

    Raises
    ------
    StorageIOError
        The file is missing, unreadable, or not valid UTF-8.
    JsonDecodeError / TomlDecodeError
        The content cannot be decoded into `cls`.
    """
    fmt = Format(format)
    try:
        text = Path(path).read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StorageIOError(e) from e

    record = loads(cls, text, fmt)
    logger.debug("loaded %s (%s) as %s", path, fmt, getattr(cls, "__name__", cls))
    return record


def load_by_extension(cls: Type[T], path: PathLike) -> T:
    """
    Load a new `cls` instance from `path`, choosing the format from the
    extension.

    Raises
    ------
    UnknownExtensionError
        The path has no or an unsupported extension; the file was not opened.
    """
    fmt = path_to_format(path)
    return load(cls, path, fmt)
