import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from aliasmgr.shell import CONFIG_PATH_ENV_VAR
from aliasmgr.shell_detector import ShellDetector, ShellType

NO_BACKUP_ENV_VAR = "ALIASMGR_NO_BACKUP"
MAX_BACKUPS_ENV_VAR = "ALIASMGR_MAX_BACKUPS"


class Settings:
    """Resolve aliasmgr settings from options and the environment"""

    DEFAULT_SETTINGS = {
        "max_backups": 10,
        "backups": True,
        "fuzzy_threshold": 60,
    }

    def __init__(self, config_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self.explicit_path = config_path
        self.settings = self.load()

    def load(self) -> Dict[str, Any]:
        """Defaults overridden by environment variables"""
        settings = self.DEFAULT_SETTINGS.copy()
        if self.environ.get(NO_BACKUP_ENV_VAR):
            settings["backups"] = False
        max_backups = self.environ.get(MAX_BACKUPS_ENV_VAR)
        if max_backups and max_backups.isdigit():
            settings["max_backups"] = int(max_backups)
        return settings

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    @property
    def env_config_path(self) -> Optional[Path]:
        value = self.environ.get(CONFIG_PATH_ENV_VAR)
        return Path(value).expanduser() if value else None

    @property
    def default_config_path(self) -> Path:
        config_home = self.environ.get("XDG_CONFIG_HOME")
        base = Path(config_home) if config_home else Path.home() / ".config"
        return base / "aliasmgr" / "aliases.toml"

    @property
    def config_path(self) -> Path:
        """Explicit option first, then the environment, then the XDG default"""
        if self.explicit_path is not None:
            return self.explicit_path
        return self.env_config_path or self.default_config_path

    @property
    def needs_path_confirmation(self) -> bool:
        """A path set through the environment that does not exist yet"""
        if self.explicit_path is not None:
            return False
        path = self.env_config_path
        return path is not None and not path.exists()

    def shell(self) -> ShellType:
        return ShellDetector(environ=self.environ).detect_current_shell()
