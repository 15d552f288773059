from __future__ import annotations

"""
Top-level package for easy_storage.

Save and load structured records as JSON or TOML files, with the format
given explicitly or inferred from the path's extension.

Typical usage
-------------

    from dataclasses import dataclass
    import easy_storage as es

    @dataclass
    class User(es.Storeable):
        name: str
        email: str

    user = User(name="Alice", email="alice@alice.com")
    try:
        user.save_by_extension("user.toml", True)
    except es.StorageError as e:
        print(f"Error: {e}")

    user = User.load_by_extension("user.toml")

Types that cannot inherit from :class:`Storeable` use the free functions:

- :func:`easy_storage.api.save` / :func:`easy_storage.api.save_by_extension`
- :func:`easy_storage.api.load` / :func:`easy_storage.api.load_by_extension`

All failures are raised as subclasses of :class:`StorageError`.
"""

import logging
from importlib.metadata import PackageNotFoundError, version

from .api import dumps, load, load_by_extension, loads, save, save_by_extension
from .config import StoreOptions, load_options
from .exceptions import (
    ConfigLoadError,
    DecodeError,
    EncodeError,
    JsonDecodeError,
    JsonEncodeError,
    StorageError,
    StorageIOError,
    TomlDecodeError,
    TomlEncodeError,
    UnknownExtensionError,
)
from .formats import Format, path_to_format
from .records import StoreableRecord
from .storeable import Storeable

# ---------------------------------------------------------------------------
# Package version
# ---------------------------------------------------------------------------

try:
    __version__ = version("easy-storage")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


__all__ = [
    "Format",
    "Storeable",
    "StoreableRecord",
    "StoreOptions",
    "path_to_format",
    "save",
    "save_by_extension",
    "load",
    "load_by_extension",
    "dumps",
    "loads",
    "load_options",
    "StorageError",
    "StorageIOError",
    "EncodeError",
    "DecodeError",
    "JsonEncodeError",
    "JsonDecodeError",
    "TomlEncodeError",
    "TomlDecodeError",
    "UnknownExtensionError",
    "ConfigLoadError",
    "__version__",
]
