"""Outcomes of config operations and the failures they can raise"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Command:
    """Shell-visible change: save the config and send ``text`` to the shell"""
    text: str


@dataclass(frozen=True)
class ConfigChanged:
    """Save the config, nothing changed in the shell"""


@dataclass(frozen=True)
class NoChanges:
    """Neither save nor notify the shell"""


Outcome = Union[Command, ConfigChanged, NoChanges]


def merge_outcomes(*outcomes: Outcome) -> Outcome:
    """Combine outcomes of consecutive operations into one"""
    commands = [o.text for o in outcomes if isinstance(o, Command) and o.text]
    if commands:
        return Command("\n".join(commands))
    if any(isinstance(o, (Command, ConfigChanged)) for o in outcomes):
        return ConfigChanged()
    return NoChanges()


class AliasmgrError(Exception):
    """Base class for rejected operations"""

    message = "Operation failed"

    def __init__(self, name: str = ""):
        self.name = name
        super().__init__(self.message.format(name=name))


class AliasDoesNotExist(AliasmgrError):
    message = "Alias '{name}' does not exist"


class AliasAlreadyExists(AliasmgrError):
    message = "Alias '{name}' already exists"


class GroupDoesNotExist(AliasmgrError):
    message = "Group '{name}' does not exist"


class GroupAlreadyExists(AliasmgrError):
    message = "Group '{name}' already exists"


class InvalidAliasName(AliasmgrError):
    message = "Invalid alias name '{name}': names cannot be empty or contain whitespace or '='"


class ReservedGroupMemberName(InvalidAliasName):
    message = "Alias name '{name}' is reserved inside groups: it clashes with the group's own keys"


class UnsupportedGlobalAlias(AliasmgrError):
    message = "Alias '{name}' is global, but the current shell does not support global aliases"


class ResolutionError(RuntimeError):
    """An operation reached a state its own outcomes do not allow"""
