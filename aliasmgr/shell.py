"""Shell statements, full resync script, init script and delta transport"""

import logging
import os
from pathlib import Path
from typing import Optional

from aliasmgr.models import Alias, Config
from aliasmgr.shell_detector import SHELL_ENV_VAR, ShellType

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "ALIASMGR_CONFIG_PATH"

# The shell function reads alias deltas from this descriptor
DELTA_FD = 3

UNALIAS_ALL = "unalias -a"


def quote(text: str) -> str:
    """Single-quote ``text`` for POSIX shells"""
    return "'" + text.replace("'", "'\\''") + "'"


def alias_statement(name: str, alias: Alias) -> str:
    """Statement that defines ``name`` in the shell"""
    flag = "-g " if alias.is_global else ""
    return f"alias {flag}-- {quote(name)}={quote(alias.command)}"


def unalias_statement(name: str) -> str:
    return f"unalias {quote(name)}"


def generate_alias_script_content(config: Config, shell: ShellType) -> str:
    """Statements that make a live shell match ``config`` exactly.

    Starts by dropping every alias, then defines each alias that is
    enabled, belongs to an enabled group (or none) and that ``shell`` can
    represent, in config order.
    """
    lines = [UNALIAS_ALL]
    for name, alias in config.aliases.items():
        if config.is_visible(name, shell):
            lines.append(alias_statement(name, alias))
    return "\n".join(lines)


SHELL_FUNCTION = r"""
# Define the aliasmgr shell function
# This function captures alias deltas from file descriptor 3

__aliasmgr_cmd="$(command -v aliasmgr)"

aliasmgr() {
    # Run aliasmgr and capture deltas from FD3
    local deltas

    # Capture output from FD3 without interfering with standard output
    {
        deltas="$("$__aliasmgr_cmd" "$@" 3>&1 1>&4)"
    } 4>&1

    # Apply alias deltas if any
    if [ -n "$deltas" ]; then
        eval "$deltas"
    fi
}
"""


def generate_init_script(shell: ShellType, config_path: Optional[Path] = None) -> str:
    """Initialization script to ``eval`` from the shell rc file"""
    content = "# Alias Manager Initialization Script\n"
    content += f"export {SHELL_ENV_VAR}={shell.value}\n"
    if config_path is not None:
        content += f"export {CONFIG_PATH_ENV_VAR}={quote(str(config_path))}\n"

    content += SHELL_FUNCTION

    content += "\n# Sync aliases on shell startup\n"
    content += "aliasmgr sync\n"
    return content


def send_alias_deltas_to_shell(deltas: str, fd: int = DELTA_FD) -> bool:
    """Write ``deltas`` to the side channel read by the shell function"""
    try:
        os.write(fd, deltas.encode("utf-8"))
    except OSError as e:
        logger.error(
            "Failed to send alias deltas to shell. Make sure to use aliasmgr init in your shell configuration."
        )
        logger.error("%s", e)
        return False
    logger.debug("Sent alias deltas to shell: %s", deltas)
    return True
