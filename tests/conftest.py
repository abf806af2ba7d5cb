import pytest

from aliasmgr.models import Alias, Config
from aliasmgr.resolution import Confirmer


SAMPLE_TOML = """\
py = "python3"
js = { command = "node", enabled = false }

[git]
enabled = true
ga = "git add"
gc = "git commit"

[foo]
enabled = false
bar = "echo bar"
ll = { command = "ls -la", enabled = false }
"""


class ScriptedConfirmer(Confirmer):
    """Replays canned answers and records the questions asked"""

    def __init__(self, overwrite=(), create_group=()):
        self.overwrite_answers = list(overwrite)
        self.create_group_answers = list(create_group)
        self.asked = []

    def confirm_overwrite(self, name):
        self.asked.append(("overwrite", name))
        return self.overwrite_answers.pop(0)

    def confirm_create_group(self, name):
        self.asked.append(("create_group", name))
        return self.create_group_answers.pop(0)


@pytest.fixture
def sample_toml() -> str:
    return SAMPLE_TOML


@pytest.fixture
def sample_config() -> Config:
    return Config(
        aliases={
            "py": Alias(command="python3"),
            "js": Alias(command="node", enabled=False),
            "ga": Alias(command="git add", group="git"),
            "gc": Alias(command="git commit", group="git"),
            "bar": Alias(command="echo bar", group="foo"),
            "ll": Alias(command="ls -la", group="foo", enabled=False),
        },
        groups={"git": True, "foo": False},
    )


@pytest.fixture
def empty_config() -> Config:
    return Config()


@pytest.fixture
def config_file(tmp_path, sample_toml):
    path = tmp_path / "aliases.toml"
    path.write_text(sample_toml, encoding="utf-8")
    return path


@pytest.fixture
def shell_file_data() -> str:
    return """\
# my aliases
alias ll='ls -la'
alias gs="git status"
export PATH="$HOME/bin:$PATH"
  alias -g G='| grep'
alias la=ls l='ls -CF'
"""


@pytest.fixture
def make_confirmer():
    return ScriptedConfirmer
