"""Shell detection and configuration file handling"""

import logging
import os
import pwd
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

SHELL_ENV_VAR = "ALIASMGR_SHELL"


class ShellType(Enum):
    """Supported shell dialects"""

    BASH = "bash"
    ZSH = "zsh"

    @property
    def supports_global_aliases(self) -> bool:
        return self is ShellType.ZSH

    def __str__(self) -> str:
        return self.value.upper()


DEFAULT_SHELL = ShellType.BASH


def _shell_from_path(path: str) -> Optional[ShellType]:
    path = path.lower()
    if "zsh" in path:
        return ShellType.ZSH
    elif "bash" in path:
        return ShellType.BASH
    return None


class ShellDetector:
    """Detect the active shell dialect and its configuration files"""

    CONFIG_FILES = {
        ShellType.BASH: [".bashrc", ".bash_profile", ".bash_aliases", ".profile"],
        ShellType.ZSH: [".zshrc", ".zshenv", ".zprofile", ".zsh_aliases"],
    }

    def __init__(self, home_dir: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        self.home_dir = home_dir or Path.home()
        self.environ = os.environ if environ is None else environ

    def detect_current_shell(self) -> ShellType:
        """Detect the shell, preferring the value exported by ``aliasmgr init``"""
        configured = self.environ.get(SHELL_ENV_VAR)
        if configured:
            try:
                return ShellType(configured.lower())
            except ValueError:
                logger.warning(
                    "Invalid %s value: %s. Falling back to shell detection.", SHELL_ENV_VAR, configured
                )
        else:
            logger.warning(
                "%s environment variable not set. Please set it using the init command.", SHELL_ENV_VAR
            )

        # Method 1: SHELL environment variable
        detected = _shell_from_path(self.environ.get("SHELL", ""))
        if detected:
            return detected

        # Method 2: user's login shell from /etc/passwd
        try:
            detected = _shell_from_path(pwd.getpwuid(os.getuid()).pw_shell)
            if detected:
                return detected
        except (KeyError, AttributeError, OSError):
            pass

        # Method 3: shell-specific environment variables
        if self.environ.get("ZSH_NAME") or self.environ.get("ZSH_VERSION"):
            return ShellType.ZSH
        elif self.environ.get("BASH_VERSION"):
            return ShellType.BASH

        logger.warning("Using %s as default shell.", DEFAULT_SHELL)
        return DEFAULT_SHELL

    def find_config_files(self, shell_type: Optional[ShellType] = None) -> Dict[str, Path]:
        """Find existing configuration files for shell"""
        if shell_type is None:
            shell_type = self.detect_current_shell()

        config_files = {}
        for pattern in self.CONFIG_FILES.get(shell_type, []):
            config_path = self.home_dir / pattern
            if config_path.exists() and config_path.is_file():
                config_files[pattern] = config_path

        return config_files
