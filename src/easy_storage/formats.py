# src/easy_storage/formats.py
from __future__ import annotations

"""
Supported on-disk formats and extension-based inference.

Inference is a pure string operation on the final path segment: nothing is
checked on the filesystem.
"""

from enum import Enum
from pathlib import PurePath
from typing import Union

from .exceptions import UnknownExtensionError

PathLike = Union[str, PurePath]


class Format(str, Enum):
    """On-disk serialization format."""

    JSON = "json"
    TOML = "toml"

    def __str__(self) -> str:
        return self.value


def extension_of(path: PathLike) -> str:
    """
    Return the extension of the final path segment without the dot.

    ``""`` means the segment has no extension (``"user"``, ``".json"``).
    """
    return PurePath(path).suffix[1:]


def path_to_format(path: PathLike) -> Format:
    """
    Infer the format from the extension of `path`.

    Only the exact, case-sensitive extensions ``json`` and ``toml`` are
    recognized; ``a.tar.toml`` is TOML, ``a.JSON`` is not supported.

    Raises
    ------
    UnknownExtensionError
        If the path has no extension or an unsupported one.
    """
    ext = extension_of(path)
    for fmt in Format:
        if ext == fmt.value:
            return fmt
    raise UnknownExtensionError(path)
