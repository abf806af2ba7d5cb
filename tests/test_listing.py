"""Tests for grouped views and fuzzy search"""

import pytest

from aliasmgr.listing import (
    UNGROUPED,
    filter_grouped,
    get_all_groups,
    get_disabled_aliases_grouped,
    get_enabled_aliases_grouped,
    get_global_aliases,
    get_single_group,
    get_visible_aliases,
    search_aliases,
)
from aliasmgr.models import Alias, Config
from aliasmgr.outcomes import GroupDoesNotExist
from aliasmgr.shell_detector import ShellType


def test_get_all_groups(sample_config):
    assert get_all_groups(sample_config) == {
        UNGROUPED: ["py", "js"],
        "git": ["ga", "gc"],
        "foo": ["bar", "ll"],
    }


def test_get_all_groups__ungrouped_first_and_empty_groups(sample_config):
    sample_config.groups["empty"] = True

    grouped = get_all_groups(sample_config)

    assert list(grouped) == [UNGROUPED, "git", "foo", "empty"]
    assert grouped["empty"] == []


def test_get_all_groups__dangling_reference():
    config = Config(aliases={"ga": Alias("git add", group="gone")})

    assert get_all_groups(config) == {UNGROUPED: ["ga"]}


def test_get_single_group(sample_config):
    assert get_single_group(sample_config, "git") == ["ga", "gc"]
    assert get_single_group(sample_config, UNGROUPED) == ["py", "js"]

    with pytest.raises(GroupDoesNotExist):
        get_single_group(sample_config, "nope")


def test_get_enabled_aliases_grouped(sample_config):
    assert get_enabled_aliases_grouped(sample_config) == {
        UNGROUPED: ["py"],
        "git": ["ga", "gc"],
    }


def test_get_disabled_aliases_grouped(sample_config):
    assert get_disabled_aliases_grouped(sample_config) == {
        UNGROUPED: ["js"],
        "foo": ["bar", "ll"],
    }


def test_get_global_aliases():
    config = Config(
        aliases={"G": Alias("| grep", is_global=True), "L": Alias("| less", group="g", is_global=True), "l": Alias("ls")},
        groups={"g": True},
    )

    assert get_global_aliases(config) == {UNGROUPED: ["G"], "g": ["L"]}


def test_get_visible_aliases(sample_config):
    assert get_visible_aliases(sample_config, ShellType.BASH) == ["py", "ga", "gc"]


class TestSearch:
    """Fuzzy search over alias names and commands"""

    def test_search__by_command(self, sample_config):
        names = [name for name, _ in search_aliases(sample_config, "commit")]

        assert names[0] == "gc"

    def test_search__typo(self, sample_config):
        names = [name for name, _ in search_aliases(sample_config, "comit")]

        assert "gc" in names

    def test_search__by_name(self, sample_config):
        names = [name for name, _ in search_aliases(sample_config, "py")]

        assert names[0] == "py"

    def test_search__best_first(self, sample_config):
        scores = [score for _, score in search_aliases(sample_config, "git")]

        assert scores == sorted(scores, reverse=True)

    def test_search__no_match(self, sample_config):
        assert search_aliases(sample_config, "zxqw") == []

    def test_search__case_insensitive(self, sample_config):
        assert search_aliases(sample_config, "PYTHON") == search_aliases(sample_config, "python")


def test_filter_grouped(sample_config):
    grouped = get_all_groups(sample_config)

    assert filter_grouped(grouped, ["gc", "py"]) == {UNGROUPED: ["py"], "git": ["gc"]}
