from __future__ import annotations

"""
Storage options and their loading.

The design mirrors a small config layer:

- Accepts:
    * None          -> default StoreOptions
    * StoreOptions  -> returned as is
    * Mapping       -> validated StoreOptions
    * Path / str    -> JSON or TOML file (chosen by extension)
- Pretty printing cannot be switched off: indents must be positive.
"""

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Union

from .exceptions import ConfigLoadError, StorageError


@dataclass
class StoreOptions:
    """
    Knobs for the pretty encoders.

    Attributes
    ----------
    json_indent:
        Spaces per indentation level for JSON output.
    ensure_ascii:
        Escape non-ASCII characters in JSON output.
    sort_keys:
        Sort JSON object keys.
    toml_indent:
        Spaces used to indent TOML array items.
    toml_multiline_strings:
        Emit strings containing newlines as TOML multi-line strings.
    """

    json_indent: int = 2
    ensure_ascii: bool = False
    sort_keys: bool = False
    toml_indent: int = 4
    toml_multiline_strings: bool = False

    def __post_init__(self) -> None:
        for name in ("json_indent", "toml_indent"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise ValueError(f"{name} must be positive (pretty output is mandatory)")
        for name in ("ensure_ascii", "sort_keys", "toml_multiline_strings"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise TypeError(f"{name} must be a boolean, got {value!r}")


OptionsLike = Union[str, Path, Mapping[str, Any], StoreOptions, None]

_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(StoreOptions))


def _options_from_mapping(data: Mapping[str, Any], source: str) -> StoreOptions:
    unknown = sorted(set(data) - _FIELD_NAMES)
    if unknown:
        raise ConfigLoadError(f"Unknown storage option(s) in {source}: {', '.join(unknown)}")
    try:
        return StoreOptions(**data)
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"Invalid storage options in {source}: {e}", e) from e


def load_options(options: OptionsLike) -> StoreOptions:
    """
    Resolve storage options from various possible inputs.

    Parameters
    ----------
    options:
        - None -> defaults.
        - StoreOptions -> returned unchanged.
        - Mapping -> keys are StoreOptions field names.
        - str / Path -> ``.json`` or ``.toml`` file holding such a mapping.

    Returns
    -------
    StoreOptions

    Raises
    ------
    ConfigLoadError
        If the file cannot be read or decoded, or the values are invalid.
    """
    if options is None:
        return StoreOptions()

    if isinstance(options, StoreOptions):
        return options

    if isinstance(options, Mapping):
        return _options_from_mapping(options, "mapping")

    # Imported here: api itself resolves options through this module.
    from .api import load_by_extension

    path = Path(options)
    try:
        data = load_by_extension(dict, path)
    except StorageError as e:
        raise ConfigLoadError(f"Failed to load storage options: {path}: {e}", e) from e
    return _options_from_mapping(data, str(path))
