"""Recovery from missing groups and name collisions.

The functions here wrap the operations in ``aliasmgr.operations`` and,
when one fails because a group is missing or a name is taken, ask a
``Confirmer`` what to do and retry the operation once. A second failure
is not recovered and propagates to the caller.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Confirm

from aliasmgr import operations
from aliasmgr.listing import UNGROUPED, get_single_group
from aliasmgr.models import Alias, Config
from aliasmgr.outcomes import (
    AliasAlreadyExists,
    AliasDoesNotExist,
    Command,
    ConfigChanged,
    GroupDoesNotExist,
    NoChanges,
    Outcome,
    ResolutionError,
    merge_outcomes,
)
from aliasmgr.shell import alias_statement, unalias_statement
from aliasmgr.shell_detector import DEFAULT_SHELL, ShellType

logger = logging.getLogger(__name__)

# Marks an edit that leaves the group of the alias as it is
KEEP = object()


class Confirmer(ABC):
    """Answers the questions asked while recovering from a failure"""

    @abstractmethod
    def confirm_overwrite(self, name: str) -> bool:
        """Whether the existing alias ``name`` may be overwritten"""
        ...

    @abstractmethod
    def confirm_create_group(self, name: str) -> bool:
        """Whether the missing group ``name`` may be created"""
        ...


class RichConfirmer(Confirmer):
    """Ask on the terminal"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def confirm_overwrite(self, name: str) -> bool:
        return Confirm.ask(
            f"Alias [cyan]{name}[/] already exists. Do you want to overwrite it?",
            default=True,
            console=self.console,
        )

    def confirm_create_group(self, name: str) -> bool:
        return Confirm.ask(
            f"Group [cyan]{name}[/] does not exist. Do you want to create it?",
            default=True,
            console=self.console,
        )


class StaticConfirmer(Confirmer):
    """Give the same answer to every question"""

    def __init__(self, answer: bool):
        self.answer = answer

    def confirm_overwrite(self, name: str) -> bool:
        return self.answer

    def confirm_create_group(self, name: str) -> bool:
        return self.answer


def create_group(config: Config, name: str, confirmer: Confirmer) -> bool:
    """Ask for and create a missing group; False when the user declines"""
    if not confirmer.confirm_create_group(name):
        logger.info("Group '%s' was not created.", name)
        return False

    logger.info("Creating group '%s'.", name)
    operations.add_group(config, name, True)
    if name not in config.groups:
        raise ResolutionError(f"group '{name}' was reported created but is missing")
    return True


def with_group_recovery(
    config: Config,
    group: Optional[str],
    operation: Callable[[], Outcome],
    confirmer: Confirmer,
) -> Outcome:
    """Run ``operation``, creating ``group`` and retrying once if it is missing"""
    try:
        return operation()
    except GroupDoesNotExist as e:
        if group is None or e.name != group:
            raise
        if not create_group(config, group, confirmer):
            return NoChanges()

    # the group exists now, a second failure is a bug in the caller
    return merge_outcomes(ConfigChanged(), operation())


def overwrite_alias(
    config: Config,
    name: str,
    alias: Alias,
    confirmer: Confirmer,
    shell: ShellType = DEFAULT_SHELL,
) -> Outcome:
    """Replace an existing alias after confirmation, moving it if needed"""
    if not confirmer.confirm_overwrite(name):
        logger.info("Not overwriting existing alias '%s'.", name)
        return NoChanges()

    was_visible = config.is_visible(name, shell)

    if alias.group != config.aliases[name].group:
        logger.info("Moving alias '%s' to group '%s'.", name, alias.group)
        moved = with_group_recovery(
            config,
            alias.group,
            lambda: operations.move_alias(config, name, alias.group),
            confirmer,
        )
        if isinstance(moved, NoChanges):
            logger.info("Alias '%s' was not overwritten, group '%s' is missing.", name, alias.group)
            return NoChanges()

    logger.info("Overwriting existing alias '%s'.", name)
    outcome = operations.edit_alias(config, name, alias, shell)

    # the move may already have hidden the alias before the edit looked at it
    if was_visible and not isinstance(outcome, Command):
        return Command(unalias_statement(name))
    return outcome


def add_or_overwrite_alias(
    config: Config,
    name: str,
    alias: Alias,
    confirmer: Confirmer,
    shell: ShellType = DEFAULT_SHELL,
) -> Outcome:
    """Add an alias, offering to overwrite it or to create its group"""
    try:
        return with_group_recovery(
            config,
            alias.group,
            lambda: operations.add_alias(config, name, alias, shell),
            confirmer,
        )
    except AliasAlreadyExists:
        return overwrite_alias(config, name, alias, confirmer, shell)


def move_alias(config: Config, name: str, group: Optional[str], confirmer: Confirmer) -> Outcome:
    """Move an alias, offering to create the target group"""
    return with_group_recovery(
        config,
        group,
        lambda: operations.move_alias(config, name, group),
        confirmer,
    )


def edit_alias(
    config: Config,
    name: str,
    confirmer: Confirmer,
    shell: ShellType = DEFAULT_SHELL,
    command: Optional[str] = None,
    group=KEEP,
    toggle_enable: bool = False,
    toggle_global: bool = False,
) -> Outcome:
    """Change some fields of an alias, keeping the others"""
    existing = config.aliases.get(name)
    if existing is None:
        raise AliasDoesNotExist(name)

    new_alias = existing.copy()
    if command is not None:
        new_alias.command = command
    if toggle_enable:
        new_alias.enabled = not existing.enabled
    if toggle_global:
        new_alias.is_global = not existing.is_global
    if group is not KEEP:
        new_alias.group = group

    if new_alias == existing:
        return NoChanges()

    return with_group_recovery(
        config,
        new_alias.group,
        lambda: operations.edit_alias(config, name, new_alias, shell),
        confirmer,
    )


def remove_group(config: Config, name: str, reassign: bool, shell: ShellType = DEFAULT_SHELL) -> Outcome:
    """Remove a group and either ungroup or remove its aliases"""
    members = get_single_group(config, name)
    hidden = [member for member in members if not config.is_visible(member, shell)]
    operations.remove_group(config, name)

    if not reassign:
        return merge_outcomes(ConfigChanged(), operations.remove_aliases(config, members))

    for member in members:
        operations.move_alias(config, member, UNGROUPED)

    # members of a disabled group show up once they are ungrouped
    revealed = [
        alias_statement(member, config.aliases[member])
        for member in hidden
        if config.is_visible(member, shell)
    ]
    if revealed:
        return Command("\n".join(revealed))
    return ConfigChanged()


def remove_ungrouped(config: Config) -> Outcome:
    return operations.remove_aliases(config, get_single_group(config, UNGROUPED))


def remove_everything(config: Config, confirm: Callable[[], bool]) -> Outcome:
    if not confirm():
        logger.info("Not removing all aliases and groups.")
        return NoChanges()
    return operations.remove_all(config)
