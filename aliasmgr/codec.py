"""Conversion between the on-disk TOML layout and the alias config.

The file is a flat mapping from names to one of three shapes::

    py = "python3"                          # simple alias
    js = { command = "node", enabled = false }   # detailed alias

    [git]                                   # group
    enabled = true
    ga = "git add"
    gc = { command = "git commit", global = true, enabled = true }

Groups cannot contain groups.
"""

import logging
from typing import Any, Dict, Optional, Union

import tomlkit
from tomlkit.exceptions import TOMLKitError

from aliasmgr.models import Alias, Config

logger = logging.getLogger(__name__)

DETAILED_KEYS = {"command", "enabled", "global"}


class ConfigDecodeError(ValueError):
    """The file cannot be turned into a config"""


class ConfigEncodeError(ValueError):
    """The config cannot be written in the file layout"""


def _is_detailed_entry(entry: Dict[str, Any]) -> bool:
    return isinstance(entry.get("command"), str) and set(entry) <= DETAILED_KEYS


def _read_flag(entry: Dict[str, Any], key: str, default: bool, where: str) -> bool:
    value = entry.get(key, default)
    if not isinstance(value, bool):
        raise ConfigDecodeError(f"'{key}' of '{where}' must be a boolean, got {value!r}")
    return value


def decode_alias(name: str, entry: Any, group: Optional[str] = None) -> Alias:
    """Turn a simple or detailed entry into an alias"""
    where = f"{group}.{name}" if group else name
    if isinstance(entry, str):
        return Alias(command=entry, group=group)
    if isinstance(entry, dict):
        if not _is_detailed_entry(entry):
            raise ConfigDecodeError(f"nested groups are not supported ('{where}')")
        return Alias(
            command=entry["command"],
            group=group,
            enabled=_read_flag(entry, "enabled", True, where),
            is_global=_read_flag(entry, "global", False, where),
        )
    raise ConfigDecodeError(f"unsupported value for alias '{where}': {entry!r}")


def decode_config(data: Dict[str, Any]) -> Config:
    """Build a config from the parsed file mapping"""
    config = Config()
    for name, entry in data.items():
        if isinstance(entry, dict) and not _is_detailed_entry(entry):
            config.groups[name] = _read_flag(entry, "enabled", True, name)
            for alias_name, alias_entry in entry.items():
                if alias_name == "enabled":
                    continue
                config.aliases[alias_name] = decode_alias(alias_name, alias_entry, group=name)
        else:
            config.aliases[name] = decode_alias(name, entry)
    return config


def encode_alias(alias: Alias) -> Union[str, Dict[str, Any]]:
    """Bare command string when possible, explicit fields otherwise"""
    if not alias.detailed:
        return alias.command
    data: Dict[str, Any] = {"command": alias.command, "enabled": alias.enabled}
    if alias.is_global:
        data["global"] = True
    return data


def encode_config(config: Config) -> Dict[str, Any]:
    """Ungrouped aliases first, then one block per group"""
    data: Dict[str, Any] = {}

    # An alias pointing at a missing group is written at the top level.
    for name, alias in config.aliases.items():
        if alias.group is not None and alias.group in config.groups:
            continue
        data[name] = encode_alias(alias)

    for group_name, enabled in config.groups.items():
        if group_name in data:
            # both would live at the top level of the file
            raise ConfigEncodeError(
                f"ungrouped alias '{group_name}' clashes with the group of the same name"
            )
        block: Dict[str, Any] = {"enabled": enabled}
        for name, alias in config.aliases.items():
            if alias.group != group_name:
                continue
            if name in DETAILED_KEYS:
                # would read back as the group flag or as a detailed alias
                raise ConfigEncodeError(
                    f"alias '{name}' in group '{group_name}' clashes with the group's own keys"
                )
            block[name] = encode_alias(alias)
        data[group_name] = block

    return data


def _inline(entry: Union[str, Dict[str, Any]]):
    if isinstance(entry, str):
        return entry
    table = tomlkit.inline_table()
    table.update(entry)
    return table


def dumps(config: Config) -> str:
    """Render the config as TOML text"""
    document = tomlkit.document()
    for name, entry in encode_config(config).items():
        if name in config.groups:
            table = tomlkit.table()
            for key, value in entry.items():
                table.add(key, value if key == "enabled" else _inline(value))
            document.add(name, table)
        else:
            document.add(name, _inline(entry))
    return tomlkit.dumps(document)


def loads(text: str) -> Config:
    """Parse TOML text into a config"""
    try:
        data = tomlkit.parse(text).unwrap()
    except TOMLKitError as e:
        raise ConfigDecodeError(f"invalid TOML: {e}") from e
    return decode_config(data)
