# src/easy_storage/exceptions.py
from __future__ import annotations

"""
Error taxonomy for easy_storage.

Every persistence failure is raised as exactly one concrete subclass of
:class:`StorageError`:

- StorageIOError         : open / read / write failure
- JsonEncodeError        : record could not be encoded as JSON
- JsonDecodeError        : file content could not be decoded from JSON
- TomlEncodeError        : record could not be encoded as TOML
- TomlDecodeError        : file content could not be decoded from TOML
- UnknownExtensionError  : path extension is missing or unsupported

Wrapping variants render the message of the underlying exception and expose
it as ``cause``. The same exception is also chained as ``__cause__`` when
raised through :mod:`easy_storage.api`.
"""

from pathlib import PurePath
from typing import Optional, Union


class StorageError(Exception):
    """Base exception for easy_storage."""

    kind: str = "storage"
    # "json" / "toml" for codec variants; compares equal to Format members.
    format: Optional[str] = None

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(cause)
        self._cause = cause

    @property
    def cause(self) -> Optional[BaseException]:
        """The wrapped underlying exception, or None."""
        return self._cause

    def __str__(self) -> str:
        return str(self._cause)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._cause!r})"


class StorageIOError(StorageError):
    """Raised when the file cannot be opened, read or written."""

    kind = "io"


class EncodeError(StorageError):
    """A record could not be encoded in the requested format."""


class DecodeError(StorageError):
    """File content could not be decoded into a record."""


class JsonEncodeError(EncodeError):
    kind = "json_encode"
    format = "json"


class JsonDecodeError(DecodeError):
    kind = "json_decode"
    format = "json"


class TomlEncodeError(EncodeError):
    kind = "toml_encode"
    format = "toml"


class TomlDecodeError(DecodeError):
    kind = "toml_decode"
    format = "toml"


class UnknownExtensionError(StorageError):
    """
    Raised when a path has no extension or one other than ``json``/``toml``.

    Carries no underlying cause. The offending path, when known, is kept in
    ``path`` but is not part of the message.
    """

    kind = "unknown_extension"
    message = "extension does not exist."

    def __init__(self, path: Union[str, PurePath, None] = None):
        super().__init__(None)
        self.path = path

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r})"


class ConfigLoadError(StorageError):
    """Raised when storage options cannot be loaded."""

    kind = "config"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(cause)
        self.message = message

    def __str__(self) -> str:
        return self.message
