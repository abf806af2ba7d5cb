"""Mutations of the alias config.

Every function here changes ``config`` in place and returns an outcome
describing what the caller has to do with it:

- ``Command(text)``: save the config and send ``text`` to the shell,
- ``ConfigChanged()``: save the config only,
- ``NoChanges()``: nothing to do.

The outcome reflects the aliases a synced shell can see, so changing an
alias that is hidden (disabled itself, in a disabled group, or global under
bash) only yields ``ConfigChanged``. Rejected operations raise a subclass of
``AliasmgrError`` and leave ``config`` untouched.
"""

import logging
import re
from typing import Iterable, Optional

from aliasmgr.codec import DETAILED_KEYS
from aliasmgr.models import Alias, Config
from aliasmgr.outcomes import (
    AliasAlreadyExists,
    AliasDoesNotExist,
    Command,
    ConfigChanged,
    GroupAlreadyExists,
    GroupDoesNotExist,
    InvalidAliasName,
    NoChanges,
    Outcome,
    ReservedGroupMemberName,
    UnsupportedGlobalAlias,
)
from aliasmgr.shell import UNALIAS_ALL, alias_statement, unalias_statement
from aliasmgr.shell_detector import DEFAULT_SHELL, ShellType

logger = logging.getLogger(__name__)

INVALID_NAME = re.compile(r"[\s=]")


def validate_alias_name(name: str) -> None:
    if not name or INVALID_NAME.search(name):
        logger.error("Invalid alias name '%s'.", name)
        raise InvalidAliasName(name)


def _check_global(name: str, alias: Alias, shell: ShellType) -> None:
    if alias.is_global and not shell.supports_global_aliases:
        logger.error("Shell %s does not support global alias '%s'.", shell, name)
        raise UnsupportedGlobalAlias(name)


def _check_group(config: Config, group: Optional[str]) -> None:
    if group is not None and group not in config.groups:
        logger.error("Group '%s' does not exist.", group)
        raise GroupDoesNotExist(group)


def _check_member_name(name: str, group: Optional[str]) -> None:
    # group tables hold their own keys next to the member aliases
    if group is not None and name in DETAILED_KEYS:
        logger.error("Alias name '%s' cannot be used inside group '%s'.", name, group)
        raise ReservedGroupMemberName(name)


def _require_alias(config: Config, name: str) -> Alias:
    alias = config.aliases.get(name)
    if alias is None:
        logger.error("Alias '%s' does not exist.", name)
        raise AliasDoesNotExist(name)
    return alias


def _require_group(config: Config, name: str) -> bool:
    if name not in config.groups:
        logger.error("Group '%s' does not exist.", name)
        raise GroupDoesNotExist(name)
    return config.groups[name]


def _definition(config: Config, name: str, shell: ShellType) -> Outcome:
    if config.is_visible(name, shell):
        return Command(alias_statement(name, config.aliases[name]))
    return ConfigChanged()


# add


def add_alias(config: Config, name: str, alias: Alias, shell: ShellType = DEFAULT_SHELL) -> Outcome:
    """Insert a new alias at the end of the config"""
    validate_alias_name(name)
    _check_global(name, alias, shell)

    if name in config.aliases:
        logger.info("Alias '%s' already exists.", name)
        raise AliasAlreadyExists(name)

    _check_group(config, alias.group)
    _check_member_name(name, alias.group)

    config.aliases[name] = alias.copy()
    logger.info("Alias '%s' added with command '%s'.", name, alias.command)
    return _definition(config, name, shell)


def add_group(config: Config, name: str, enabled: bool = True) -> Outcome:
    """Groups alone are never visible to the shell"""
    if name in config.groups:
        logger.info("Group '%s' already exists.", name)
        raise GroupAlreadyExists(name)

    config.groups[name] = enabled
    logger.info("Group '%s' added with enabled status '%s'.", name, enabled)
    return ConfigChanged()


# edit / move


def edit_alias(config: Config, name: str, new_alias: Alias, shell: ShellType = DEFAULT_SHELL) -> Outcome:
    """Replace every field of an existing alias.

    Partial edits are done by copying the current alias and changing the
    fields of the copy before calling this.
    """
    _require_alias(config, name)
    _check_global(name, new_alias, shell)
    _check_group(config, new_alias.group)
    _check_member_name(name, new_alias.group)

    was_visible = config.is_visible(name, shell)
    config.aliases[name] = new_alias.copy()
    logger.info("Alias '%s' updated to %s.", name, new_alias)

    if config.is_visible(name, shell):
        return Command(alias_statement(name, new_alias))
    if was_visible:
        return Command(unalias_statement(name))
    return ConfigChanged()


def move_alias(config: Config, name: str, new_group: Optional[str]) -> Outcome:
    """Attribute an alias to ``new_group``, or to no group when ``None``.

    Moving never changes what the shell sees right away; group toggles and
    listings pick the new group up afterwards.
    """
    alias = _require_alias(config, name)
    _check_group(config, new_group)
    _check_member_name(name, new_group)

    alias.group = new_group
    logger.info("Alias '%s' moved to group '%s'.", name, new_group)
    return ConfigChanged()


# remove


def remove_alias(config: Config, name: str) -> Outcome:
    _require_alias(config, name)
    del config.aliases[name]
    logger.info("Alias '%s' removed.", name)
    return Command(unalias_statement(name))


def remove_aliases(config: Config, names: Iterable[str]) -> Outcome:
    """Remove several aliases, stopping at the first one that does not exist"""
    statements = []
    for name in names:
        outcome = remove_alias(config, name)
        statements.append(outcome.text)
    if not statements:
        return NoChanges()
    return Command("\n".join(statements))


def remove_group(config: Config, name: str) -> Outcome:
    """Drop the group entry only; its aliases keep pointing at it"""
    _require_group(config, name)
    del config.groups[name]
    logger.info("Group '%s' removed.", name)
    return ConfigChanged()


def remove_all(config: Config) -> Outcome:
    config.aliases.clear()
    config.groups.clear()
    logger.info("All aliases and groups removed.")
    return Command(UNALIAS_ALL)


# rename


def rename_alias(config: Config, old: str, new: str, shell: ShellType = DEFAULT_SHELL) -> Outcome:
    """Re-insert the alias under ``new``; it moves to the end of the config"""
    _require_alias(config, old)
    validate_alias_name(new)
    if new in config.aliases:
        logger.error("Alias '%s' already exists.", new)
        raise AliasAlreadyExists(new)
    _check_member_name(new, config.aliases[old].group)

    visible = config.is_visible(old, shell)
    alias = config.aliases.pop(old)
    config.aliases[new] = alias
    logger.info("Alias '%s' renamed to '%s'.", old, new)

    if visible:
        return Command(f"{unalias_statement(old)}\n{alias_statement(new, alias)}")
    return ConfigChanged()


def rename_group(config: Config, old: str, new: str) -> Outcome:
    """Rename a group in place and repoint its aliases"""
    _require_group(config, old)
    if new in config.groups:
        logger.error("Group '%s' already exists.", new)
        raise GroupAlreadyExists(new)

    config.groups = {
        (new if group == old else group): enabled for group, enabled in config.groups.items()
    }
    for alias in config.aliases.values():
        if alias.group == old:
            alias.group = new

    logger.info("Group '%s' renamed to '%s'.", old, new)
    return ConfigChanged()


# enable / disable


def enable_alias(config: Config, name: str, shell: ShellType = DEFAULT_SHELL) -> Outcome:
    alias = _require_alias(config, name)
    if alias.enabled:
        return NoChanges()

    alias.enabled = True
    logger.info("Alias '%s' enabled.", name)
    return _definition(config, name, shell)


def disable_alias(config: Config, name: str, shell: ShellType = DEFAULT_SHELL) -> Outcome:
    alias = _require_alias(config, name)
    if not alias.enabled:
        return NoChanges()

    was_visible = config.is_visible(name, shell)
    alias.enabled = False
    logger.info("Alias '%s' disabled.", name)

    # an alias in a disabled group was never defined in the shell
    if was_visible:
        return Command(unalias_statement(name))
    return ConfigChanged()


def _visible_members(config: Config, group: str, shell: ShellType):
    return [
        (name, alias)
        for name, alias in config.aliases.items()
        if alias.group == group and config.is_visible(name, shell)
    ]


def enable_group(config: Config, name: str, shell: ShellType = DEFAULT_SHELL) -> Outcome:
    if _require_group(config, name):
        return NoChanges()

    config.groups[name] = True
    logger.info("Group '%s' enabled.", name)

    members = _visible_members(config, name, shell)
    if not members:
        return ConfigChanged()
    return Command("\n".join(alias_statement(alias_name, alias) for alias_name, alias in members))


def disable_group(config: Config, name: str, shell: ShellType = DEFAULT_SHELL) -> Outcome:
    if not _require_group(config, name):
        return NoChanges()

    members = _visible_members(config, name, shell)
    config.groups[name] = False
    logger.info("Group '%s' disabled.", name)

    if not members:
        return ConfigChanged()
    return Command("\n".join(unalias_statement(alias_name) for alias_name, _ in members))


# sort


def sort_all_aliases(config: Config) -> Outcome:
    config.aliases = dict(sorted(config.aliases.items(), key=lambda item: item[0]))
    return ConfigChanged()


def sort_groups(config: Config) -> Outcome:
    config.groups = dict(sorted(config.groups.items(), key=lambda item: item[0]))
    return ConfigChanged()


def sort_aliases_in_group(config: Config, group: Optional[str]) -> Outcome:
    """Sort the aliases of ``group`` (ungrouped ones for ``None``) by name.

    Only the aliases in scope swap places, among the slots they already
    occupy. Every other alias keeps its exact position, so the sorted
    aliases do not become contiguous.
    """
    if group is not None:
        _require_group(config, group)

    items = list(config.aliases.items())
    slots = [index for index, (_, alias) in enumerate(items) if alias.group == group]
    in_scope = sorted((items[index] for index in slots), key=lambda item: item[0])
    for index, item in zip(slots, in_scope):
        items[index] = item

    config.aliases = dict(items)
    return ConfigChanged()
