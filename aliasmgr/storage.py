import logging
import shutil
from pathlib import Path
from typing import Optional
from datetime import datetime

from aliasmgr import codec
from aliasmgr.models import Config

logger = logging.getLogger(__name__)


class AliasStorage:
    """Handle storage and retrieval of the alias config file"""

    def __init__(self, storage_path: Path, max_backups: int = 10, backups_enabled: bool = True):
        self.storage_path = storage_path
        self.backup_dir = self.storage_path.parent / "backups"
        self.max_backups = max_backups
        self.backups_enabled = backups_enabled

    def create_backup(self) -> Optional[Path]:
        """Create timestamped backup of the current file"""
        if not self.backups_enabled or not self.storage_path.exists():
            return None

        self.backup_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = self.backup_dir / f"aliases_{timestamp}.toml"

        try:
            shutil.copy2(self.storage_path, backup_path)
        except OSError as e:
            logger.warning("Could not back up %s: %s", self.storage_path, e)
            return None

        self.cleanup_old_backups(keep=self.max_backups)
        logger.debug("Backed up %s to %s", self.storage_path, backup_path)
        return backup_path

    def cleanup_old_backups(self, keep: int = 10) -> None:
        """Remove old backups, keeping only the most recent ones"""
        backups = sorted(self.backup_dir.glob("aliases_*.toml"))
        if len(backups) > keep:
            for backup in backups[:-keep]:
                backup.unlink()

    def list_backups(self):
        if not self.backup_dir.exists():
            return []
        return sorted(self.backup_dir.glob("aliases_*.toml"))

    def load(self) -> Config:
        """Load the config, an empty one if the file does not exist yet.

        Raises ``codec.ConfigDecodeError`` for malformed files and ``OSError``
        when the file cannot be read.
        """
        logger.info("Loading config from %s", self.storage_path)
        if not self.storage_path.exists():
            logger.info("Config file %s does not exist, using empty config", self.storage_path)
            return Config()

        content = self.storage_path.read_text(encoding="utf-8")
        return codec.loads(content)

    def save(self, config: Config) -> None:
        """Write the config, backing up the previous file first"""
        content = codec.dumps(config)

        if self.storage_path.exists():
            logger.debug("Overwriting existing config at %s", self.storage_path)
            self.create_backup()
        else:
            logger.warning("Config file %s does not exist, creating it", self.storage_path)

        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        self.storage_path.write_text(content, encoding="utf-8")

    def restore_latest_backup(self) -> bool:
        """Restore from the most recent backup"""
        backups = self.list_backups()
        if backups:
            shutil.copy2(backups[-1], self.storage_path)
            logger.info("Restored %s from %s", self.storage_path, backups[-1])
            return True
        return False
