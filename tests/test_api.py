from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pytest

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover - version dependent
    import tomli as tomllib

from easy_storage import api
from easy_storage.api import dumps, load, load_by_extension, loads, save, save_by_extension
from easy_storage.exceptions import (
    JsonDecodeError,
    JsonEncodeError,
    StorageIOError,
    TomlDecodeError,
    TomlEncodeError,
    UnknownExtensionError,
)
from easy_storage.formats import Format


@dataclass
class User:
    name: str
    email: str


@dataclass
class Team:
    title: str
    members: List[User] = field(default_factory=list)
    lead: Optional[User] = None
    tags: Dict[str, int] = field(default_factory=dict)


@dataclass
class Profile:
    name: str
    nickname: Optional[str] = None


@dataclass
class Contact:
    name: str
    phone: Optional[str]
    address: Optional[Profile]


ALICE = User(name="Alice", email="alice@alice.com")


@pytest.mark.parametrize("ext", ["json", "toml"])
def test_round_trip_by_extension(tmp_path: Path, ext: str) -> None:
    path = tmp_path / f"team.{ext}"
    team = Team(
        title="core",
        members=[ALICE, User(name="Bob", email="bob@bob.com")],
        lead=ALICE,
        tags={"a": 1, "b": 2},
    )

    save_by_extension(team, path, True)
    loaded = load_by_extension(Team, path)

    assert loaded == team
    assert loaded is not team
    assert isinstance(loaded.members[0], User)


def test_user_toml_scenario(tmp_path: Path) -> None:
    path = tmp_path / "user.toml"
    save_by_extension(ALICE, path, True)

    text = path.read_text(encoding="utf-8")
    assert tomllib.loads(text) == {"name": "Alice", "email": "alice@alice.com"}
    assert 'name = "Alice"' in text
    assert 'email = "alice@alice.com"' in text

    assert load_by_extension(User, path) == ALICE


def test_json_output_is_pretty(tmp_path: Path) -> None:
    path = tmp_path / "user.json"
    save(ALICE, path, True, Format.JSON)

    text = path.read_text(encoding="utf-8")
    assert text == '{\n  "name": "Alice",\n  "email": "alice@alice.com"\n}'
    assert json.loads(text) == {"name": "Alice", "email": "alice@alice.com"}


def test_save_truncates_previous_content(tmp_path: Path) -> None:
    path = tmp_path / "team.json"
    big = Team(title="a much longer title", members=[ALICE] * 5, tags={"x": 1})
    small = Team(title="t")

    save(big, path, True, Format.JSON)
    save(small, path, True, Format.JSON)

    assert path.read_text(encoding="utf-8") == dumps(small, Format.JSON)
    assert load(Team, path, Format.JSON) == small


def test_save_without_create_on_missing_file_fails(tmp_path: Path) -> None:
    path = tmp_path / "user.toml"

    with pytest.raises(StorageIOError) as exc_info:
        save_by_extension(ALICE, path, False)
    assert isinstance(exc_info.value.cause, FileNotFoundError)
    assert exc_info.value.__cause__ is exc_info.value.cause
    assert not path.exists()

    save_by_extension(ALICE, path, True)
    assert path.exists()


def test_save_without_create_overwrites_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "user.json"
    path.write_text("stale content that is longer than the record itself" * 4, encoding="utf-8")

    save(ALICE, path, False, "json")

    assert load(User, path, "json") == ALICE


def test_save_into_missing_directory_is_io_error(tmp_path: Path) -> None:
    with pytest.raises(StorageIOError):
        save(ALICE, tmp_path / "nope" / "user.json", True, Format.JSON)


def test_toml_encode_error_leaves_file_untouched(tmp_path: Path) -> None:
    path = tmp_path / "user.toml"
    path.write_text("keep = true\n", encoding="utf-8")

    with pytest.raises(TomlEncodeError) as exc_info:
        save({"values": [1, None]}, path, True, Format.TOML)

    assert exc_info.value.format == Format.TOML
    assert isinstance(exc_info.value.cause, TypeError)
    assert path.read_text(encoding="utf-8") == "keep = true\n"


def test_json_encode_error_does_not_create_file(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"

    with pytest.raises(JsonEncodeError):
        save({"value": object()}, path, True, Format.JSON)
    assert not path.exists()


def test_unstoreable_record_is_encode_error(tmp_path: Path) -> None:
    with pytest.raises(JsonEncodeError):
        save(42, tmp_path / "x.json", True, Format.JSON)


def test_save_by_extension_unknown_extension_does_no_io(tmp_path: Path) -> None:
    path = tmp_path / "user.yaml"

    with pytest.raises(UnknownExtensionError):
        save_by_extension(ALICE, path, True)
    assert not path.exists()


def test_load_by_extension_unknown_extension_does_not_open(tmp_path: Path, monkeypatch) -> None:
    def _fail(*args, **kwargs):
        raise AssertionError("file must not be read")

    monkeypatch.setattr(Path, "read_bytes", _fail)

    with pytest.raises(UnknownExtensionError):
        load_by_extension(User, tmp_path / "config.yaml")


def test_load_missing_file_is_io_error(tmp_path: Path) -> None:
    with pytest.raises(StorageIOError) as exc_info:
        load(User, tmp_path / "missing.json", Format.JSON)
    assert isinstance(exc_info.value.cause, FileNotFoundError)


def test_load_invalid_utf8_is_io_error(tmp_path: Path) -> None:
    path = tmp_path / "user.json"
    path.write_bytes(b'{"name": "\xff"}')

    with pytest.raises(StorageIOError) as exc_info:
        load(User, path, Format.JSON)
    assert isinstance(exc_info.value.cause, UnicodeDecodeError)


@pytest.mark.parametrize(
    "ext, content, error",
    [
        ("json", '{"name": "Alice",', JsonDecodeError),
        ("toml", 'name = "Alice"\nemail = ', TomlDecodeError),
    ],
)
def test_malformed_content_is_decode_error(tmp_path: Path, ext, content, error) -> None:
    path = tmp_path / f"user.{ext}"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(error) as exc_info:
        load_by_extension(User, path)
    assert exc_info.value.format == Format(ext)
    assert str(exc_info.value) == str(exc_info.value.cause)


def test_load_with_wrong_declared_format_is_decode_error(tmp_path: Path) -> None:
    path = tmp_path / "user.json"
    save(ALICE, path, True, Format.JSON)

    with pytest.raises(TomlDecodeError):
        load(User, path, Format.TOML)


def test_missing_field_is_decode_error(tmp_path: Path) -> None:
    path = tmp_path / "user.toml"
    path.write_text('name = "Alice"\n', encoding="utf-8")

    with pytest.raises(TomlDecodeError) as exc_info:
        load_by_extension(User, path)
    assert "email" in str(exc_info.value)


def test_plain_dict_round_trip(tmp_path: Path) -> None:
    data = {"lr": 0.001, "epochs": 10, "model": {"depth": 3, "layers": [1, 2, 3]}}
    for ext in ("json", "toml"):
        path = tmp_path / f"config.{ext}"
        save_by_extension(data, path, True)
        assert load_by_extension(dict, path) == data


def test_dumps_and_loads() -> None:
    text = dumps(ALICE, "toml")
    assert loads(User, text, Format.TOML) == ALICE

    with pytest.raises(JsonDecodeError):
        loads(User, "[1, 2]", Format.JSON)


def test_options_change_json_layout(tmp_path: Path) -> None:
    path = tmp_path / "user.json"
    save(ALICE, path, True, Format.JSON, options={"json_indent": 4, "sort_keys": True})

    text = path.read_text(encoding="utf-8")
    assert text.startswith('{\n    "email"')


def test_non_ascii_written_as_utf8(tmp_path: Path) -> None:
    user = User(name="Zoë", email="zoe@example.com")
    for ext in ("json", "toml"):
        path = tmp_path / f"user.{ext}"
        save_by_extension(user, path, True)
        assert "Zoë" in path.read_bytes().decode("utf-8")
        assert load_by_extension(User, path) == user


def test_save_logs_at_debug(tmp_path: Path, caplog) -> None:
    with caplog.at_level("DEBUG", logger=api.__name__):
        save_by_extension(ALICE, tmp_path / "user.json", True)
    assert any("saved" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("ext", ["json", "toml"])
def test_none_fields_round_trip(tmp_path: Path, ext: str) -> None:
    path = tmp_path / f"profile.{ext}"
    profile = Profile(name="Alice", nickname=None)

    save_by_extension(profile, path, True)

    assert load_by_extension(Profile, path) == profile


def test_toml_omits_none_keys_at_every_level(tmp_path: Path) -> None:
    path = tmp_path / "contact.toml"
    contact = Contact(name="Alice", phone=None, address=Profile(name="home"))

    save_by_extension(contact, path, True)

    assert tomllib.loads(path.read_text(encoding="utf-8")) == {
        "name": "Alice",
        "address": {"name": "home"},
    }
    assert load_by_extension(Contact, path) == contact


def test_toml_non_table_record_is_encode_error() -> None:
    class Listish:
        def to_dict(self):
            return [1, 2]

    with pytest.raises(TomlEncodeError):
        dumps(Listish(), Format.TOML)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_json_rejects_non_finite_floats(tmp_path: Path, value: float) -> None:
    path = tmp_path / "values.json"

    with pytest.raises(JsonEncodeError) as exc_info:
        save_by_extension({"v": value}, path, True)
    assert isinstance(exc_info.value.cause, ValueError)
    assert not path.exists()


def test_toml_keeps_non_finite_floats(tmp_path: Path) -> None:
    path = tmp_path / "values.toml"
    save_by_extension({"v": float("inf")}, path, True)
    assert load_by_extension(dict, path) == {"v": float("inf")}


@pytest.mark.parametrize(
    "fmt, text, error",
    [
        (Format.JSON, "[" * 100000 + "]" * 100000, JsonDecodeError),
        (Format.TOML, "v = " + "[" * 100000 + "]" * 100000, TomlDecodeError),
    ],
)
def test_deeply_nested_input_is_decode_error(fmt, text, error) -> None:
    with pytest.raises(error):
        loads(dict, text, fmt)


def test_mistyped_scalar_is_decode_error(tmp_path: Path) -> None:
    path = tmp_path / "user.toml"
    path.write_text('name = 5\nemail = "alice@alice.com"\n', encoding="utf-8")

    with pytest.raises(TomlDecodeError) as exc_info:
        load_by_extension(User, path)
    assert "expected str" in str(exc_info.value)
