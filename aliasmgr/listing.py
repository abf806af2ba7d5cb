"""Read-only views over the config: aliases by group, filters and search"""

from typing import Dict, List, Optional, Tuple

from rapidfuzz import fuzz

from aliasmgr.models import Config
from aliasmgr.outcomes import GroupDoesNotExist
from aliasmgr.shell_detector import ShellType

# Key of the ungrouped aliases in the mappings returned below
UNGROUPED = None

GroupedNames = Dict[Optional[str], List[str]]


def get_all_groups(config: Config) -> GroupedNames:
    """Alias names per group, ungrouped first, then groups in config order"""
    groups: GroupedNames = {UNGROUPED: []}
    for group_name in config.groups:
        groups[group_name] = []

    for alias_name, alias in config.aliases.items():
        # an alias pointing at a missing group is listed as ungrouped
        key = alias.group if alias.group in config.groups else UNGROUPED
        groups[key].append(alias_name)

    return groups


def get_single_group(config: Config, group: Optional[str]) -> List[str]:
    """Names of the aliases in ``group``, or of the ungrouped ones for ``None``"""
    if group is not UNGROUPED and group not in config.groups:
        raise GroupDoesNotExist(group)
    return get_all_groups(config)[group]


def get_enabled_aliases_grouped(config: Config) -> GroupedNames:
    """Enabled aliases of enabled groups; disabled groups are left out"""
    result: GroupedNames = {}
    for group, names in get_all_groups(config).items():
        if not config.group_enabled(group):
            continue
        result[group] = [name for name in names if config.aliases[name].enabled]
    return result


def get_disabled_aliases_grouped(config: Config) -> GroupedNames:
    """Every alias of a disabled group, plus disabled aliases elsewhere"""
    result: GroupedNames = {}
    for group, names in get_all_groups(config).items():
        if not config.group_enabled(group):
            result[group] = names
            continue
        disabled = [name for name in names if not config.aliases[name].enabled]
        if group is UNGROUPED or disabled:
            result[group] = disabled
    return result


def get_global_aliases(config: Config) -> GroupedNames:
    result: GroupedNames = {}
    for group, names in get_all_groups(config).items():
        global_names = [name for name in names if config.aliases[name].is_global]
        if global_names:
            result[group] = global_names
    return result


def get_visible_aliases(config: Config, shell: ShellType) -> List[str]:
    return [name for name in config.aliases if config.is_visible(name, shell)]


def search_aliases(config: Config, pattern: str, threshold: int = 60) -> List[Tuple[str, float]]:
    """Fuzzy match ``pattern`` against alias names and commands, best first"""
    pattern = pattern.lower()
    matches = []
    for name, alias in config.aliases.items():
        name_score = fuzz.partial_ratio(pattern, name.lower())
        cmd_score = fuzz.partial_ratio(pattern, alias.command.lower())
        score = max(name_score, cmd_score)
        if score >= threshold:
            matches.append((name, score))
    matches.sort(key=lambda match: match[1], reverse=True)
    return matches


def filter_grouped(grouped: GroupedNames, names: List[str]) -> GroupedNames:
    """Keep only ``names`` in ``grouped``, dropping groups left empty"""
    keep = set(names)
    result: GroupedNames = {}
    for group, members in grouped.items():
        selected = [name for name in members if name in keep]
        if selected:
            result[group] = selected
    return result
