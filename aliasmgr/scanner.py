"""Scanner for alias definitions in existing shell configuration files"""

import logging
import re
import shlex
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from aliasmgr.models import Alias, Config
from aliasmgr.outcomes import AliasmgrError, ConfigChanged, NoChanges, Outcome, merge_outcomes
from aliasmgr.resolution import Confirmer, add_or_overwrite_alias, create_group
from aliasmgr.shell_detector import DEFAULT_SHELL, ShellDetector, ShellType

logger = logging.getLogger(__name__)

ScannedAlias = Tuple[str, Alias]


class AliasScanner:
    """Scan shell configuration for alias definitions"""

    # Lines starting with the alias builtin
    ALIAS_LINE = re.compile(r"^\s*alias\s+(.+?)\s*$", re.MULTILINE)

    def __init__(self, detector: Optional[ShellDetector] = None):
        self.detector = detector or ShellDetector()

    def parse_line(self, arguments: str) -> List[ScannedAlias]:
        """Parse the arguments of one ``alias`` statement"""
        try:
            words = shlex.split(arguments, comments=True)
        except ValueError:
            logger.warning("Skipping unparsable alias statement: alias %s", arguments)
            return []

        is_global = False
        aliases = []
        for word in words:
            if word == "--":
                continue
            if word.startswith("-"):
                is_global = is_global or "g" in word[1:]
                continue
            name, sep, command = word.partition("=")
            if not sep or not name:
                # "alias name" only prints the alias
                continue
            aliases.append((name, Alias(command=command, is_global=is_global)))
        return aliases

    def scan_text(self, content: str) -> List[ScannedAlias]:
        aliases = []
        for arguments in self.ALIAS_LINE.findall(content):
            aliases.extend(self.parse_line(arguments))
        return aliases

    def scan_file(self, filepath: Path) -> List[ScannedAlias]:
        """Scan a single file for aliases"""
        if not filepath.exists():
            return []
        return self.scan_text(filepath.read_text(encoding="utf-8", errors="replace"))

    def scan_system(self, shell_type: Optional[ShellType] = None) -> Dict[str, List[ScannedAlias]]:
        """Scan the shell config files in the home directory"""
        config_files = self.detector.find_config_files(shell_type)

        results = {}
        for filename, filepath in config_files.items():
            aliases = self.scan_file(filepath)
            if aliases:
                results[filename] = aliases

        return results


def convert_aliases(
    config: Config,
    aliases: List[ScannedAlias],
    confirmer: Confirmer,
    group: Optional[str] = None,
    shell: ShellType = DEFAULT_SHELL,
) -> Tuple[Outcome, List[str]]:
    """Add scanned aliases to ``config``.

    Returns the merged outcome and the names that were rejected.
    """
    outcomes: List[Outcome] = []
    rejected = []

    if group is not None and group not in config.groups:
        if not create_group(config, group, confirmer):
            return NoChanges(), [name for name, _ in aliases]
        outcomes.append(ConfigChanged())

    for name, alias in aliases:
        alias = alias.copy()
        alias.group = group
        try:
            outcomes.append(add_or_overwrite_alias(config, name, alias, confirmer, shell))
        except AliasmgrError as e:
            logger.warning("Skipping alias '%s': %s", name, e)
            rejected.append(name)

    return merge_outcomes(*outcomes), rejected
