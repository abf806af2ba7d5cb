import pytest

from aliasmgr.models import Alias, Config
from aliasmgr.shell_detector import ShellType


@pytest.mark.parametrize(
    "enabled,is_global,expected",
    [
        (True, False, False),
        (False, False, True),
        (True, True, True),
        (False, True, True),
    ],
)
def test_alias_detailed(enabled, is_global, expected):
    alias = Alias(command="cmd", group="g", enabled=enabled, is_global=is_global)
    assert alias.detailed is expected


def test_alias_detailed__follows_mutation():
    alias = Alias(command="cmd")
    assert not alias.detailed

    alias.enabled = False
    assert alias.detailed

    alias.enabled = True
    alias.is_global = True
    assert alias.detailed


def test_alias_copy__independent():
    alias = Alias(command="ls", group="g")
    copied = alias.copy()
    copied.command = "ls -la"

    assert copied == Alias(command="ls -la", group="g")
    assert alias.command == "ls"


def test_alias_str():
    assert str(Alias(command="ls")) == "'ls'"
    assert str(Alias(command="ls", enabled=False, is_global=True)) == "'ls' (disabled, global)"


def test_config_eq__order_matters():
    first = Config(aliases={"a": Alias("1"), "b": Alias("2")})
    second = Config(aliases={"b": Alias("2"), "a": Alias("1")})

    assert first != second
    assert first == Config(aliases={"a": Alias("1"), "b": Alias("2")})


def test_config_group_enabled(sample_config):
    assert sample_config.group_enabled(None)
    assert sample_config.group_enabled("git")
    assert not sample_config.group_enabled("foo")
    # dangling references count as enabled
    assert sample_config.group_enabled("missing")


@pytest.mark.parametrize(
    "name,visible",
    [
        ("py", True),
        ("js", False),
        ("ga", True),
        ("bar", False),
        ("ll", False),
        ("nope", False),
    ],
)
def test_config_is_visible(sample_config, name, visible):
    assert sample_config.is_visible(name, ShellType.BASH) is visible


def test_config_is_visible__global_depends_on_shell():
    config = Config(aliases={"G": Alias("| grep", is_global=True)})

    assert config.is_visible("G", ShellType.ZSH)
    assert not config.is_visible("G", ShellType.BASH)


def test_config_copy__deep(sample_config):
    copied = sample_config.copy()
    copied.aliases["py"].command = "python2"
    copied.groups["git"] = False

    assert sample_config.aliases["py"].command == "python3"
    assert sample_config.groups["git"] is True
