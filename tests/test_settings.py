"""Tests for settings resolution"""

from pathlib import Path
from unittest.mock import patch

from aliasmgr.settings import Settings
from aliasmgr.shell_detector import ShellType


class TestSettings:
    """Config path, backup and shell settings"""

    def test_defaults(self):
        settings = Settings(environ={})

        assert settings.get("max_backups") == 10
        assert settings.get("backups") is True
        assert settings.get("fuzzy_threshold") == 60
        assert settings.get("missing", "fallback") == "fallback"

    def test_env_overrides(self):
        settings = Settings(environ={"ALIASMGR_NO_BACKUP": "1", "ALIASMGR_MAX_BACKUPS": "3"})

        assert settings.get("backups") is False
        assert settings.get("max_backups") == 3

    def test_env_max_backups_not_a_number(self):
        settings = Settings(environ={"ALIASMGR_MAX_BACKUPS": "lots"})

        assert settings.get("max_backups") == 10

    def test_default_config_path__xdg(self, tmp_path):
        settings = Settings(environ={"XDG_CONFIG_HOME": str(tmp_path)})

        assert settings.config_path == tmp_path / "aliasmgr" / "aliases.toml"

    def test_default_config_path__home(self):
        with patch("pathlib.Path.home", return_value=Path("/mock/home")):
            settings = Settings(environ={})

            assert settings.config_path == Path("/mock/home/.config/aliasmgr/aliases.toml")

    def test_config_path__precedence(self, tmp_path):
        explicit = tmp_path / "explicit.toml"
        environ = {"ALIASMGR_CONFIG_PATH": str(tmp_path / "env.toml"), "XDG_CONFIG_HOME": str(tmp_path)}

        assert Settings(config_path=explicit, environ=environ).config_path == explicit
        assert Settings(environ=environ).config_path == tmp_path / "env.toml"

    def test_needs_path_confirmation(self, tmp_path):
        env_path = tmp_path / "env.toml"
        environ = {"ALIASMGR_CONFIG_PATH": str(env_path)}

        assert Settings(environ=environ).needs_path_confirmation
        assert not Settings(config_path=env_path, environ=environ).needs_path_confirmation

        env_path.write_text("")
        assert not Settings(environ=environ).needs_path_confirmation

    def test_no_confirmation_for_default_path(self, tmp_path):
        assert not Settings(environ={"XDG_CONFIG_HOME": str(tmp_path)}).needs_path_confirmation

    def test_shell(self):
        assert Settings(environ={"ALIASMGR_SHELL": "zsh"}).shell() == ShellType.ZSH
