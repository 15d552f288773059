from __future__ import annotations

"""
Mixin giving any record type save / load methods.

Typical usage
-------------

    from dataclasses import dataclass
    from easy_storage import Storeable

    @dataclass
    class User(Storeable):
        name: str
        email: str

    user = User(name="Alice", email="alice@alice.com")
    user.save_by_extension("user.toml", True)
    User.load_by_extension("user.toml")

The mixin holds no state; the same operations are available as free
functions in :mod:`easy_storage.api` for types that cannot inherit from it.
"""

from typing import Type, TypeVar

from . import api
from .config import OptionsLike
from .formats import PathLike

S = TypeVar("S", bound="Storeable")


class Storeable:
    """Adds JSON / TOML persistence to a dataclass, mapping or to_dict type."""

    __slots__ = ()

    def save(
        self,
        path: PathLike,
        create_if_missing: bool,
        format: api.FormatLike,
        *,
        options: OptionsLike = None,
    ) -> None:
        """Save to `path` in `format`. See :func:`easy_storage.api.save`."""
        api.save(self, path, create_if_missing, format, options=options)

    def save_by_extension(
        self,
        path: PathLike,
        create_if_missing: bool,
        *,
        options: OptionsLike = None,
    ) -> None:
        """Save to `path` in the format named by its ``json``/``toml`` extension."""
        api.save_by_extension(self, path, create_if_missing, options=options)

    @classmethod
    def load(cls: Type[S], path: PathLike, format: api.FormatLike) -> S:
        """Load a new instance from `path` in `format`."""
        return api.load(cls, path, format)

    @classmethod
    def load_by_extension(cls: Type[S], path: PathLike) -> S:
        """Load a new instance from `path`, format chosen by extension."""
        return api.load_by_extension(cls, path)
