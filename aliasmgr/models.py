"""Data models for aliases and groups"""

from dataclasses import dataclass, field
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from aliasmgr.shell_detector import ShellType


@dataclass
class Alias:
    """Represents a shell alias"""
    command: str
    group: Optional[str] = None
    enabled: bool = True
    is_global: bool = False  # expands anywhere on the command line (zsh only)

    @property
    def detailed(self) -> bool:
        """Whether the alias needs the explicit table form on disk"""
        return not self.enabled or self.is_global

    def copy(self) -> "Alias":
        return Alias(
            command=self.command,
            group=self.group,
            enabled=self.enabled,
            is_global=self.is_global,
        )

    def __str__(self) -> str:
        flags = []
        if not self.enabled:
            flags.append("disabled")
        if self.is_global:
            flags.append("global")
        suffix = f" ({', '.join(flags)})" if flags else ""
        return f"'{self.command}'{suffix}"


@dataclass
class Config:
    """Aliases and groups, both kept in insertion order"""
    aliases: Dict[str, Alias] = field(default_factory=dict)
    groups: Dict[str, bool] = field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        # dict equality ignores order, but order is part of the config
        if not isinstance(other, Config):
            return NotImplemented
        return (
            list(self.aliases.items()) == list(other.aliases.items())
            and list(self.groups.items()) == list(other.groups.items())
        )

    def has_alias(self, name: str) -> bool:
        return name in self.aliases

    def has_group(self, name: str) -> bool:
        return name in self.groups

    def group_enabled(self, name: Optional[str]) -> bool:
        """Ungrouped aliases and aliases pointing at a missing group count as enabled"""
        if name is None:
            return True
        return self.groups.get(name, True)

    def is_visible(self, name: str, shell: "ShellType") -> bool:
        """Whether the alias is currently defined in a shell synced to this config"""
        alias = self.aliases.get(name)
        if alias is None or not alias.enabled:
            return False
        if not self.group_enabled(alias.group):
            return False
        if alias.is_global and not shell.supports_global_aliases:
            return False
        return True

    def copy(self) -> "Config":
        return Config(
            aliases={name: alias.copy() for name, alias in self.aliases.items()},
            groups=dict(self.groups),
        )
