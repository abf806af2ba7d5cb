import functools
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm
from rich.table import Table

from aliasmgr import __version__
from aliasmgr import operations, resolution
from aliasmgr.codec import ConfigDecodeError, ConfigEncodeError
from aliasmgr.listing import (
    UNGROUPED,
    filter_grouped,
    get_all_groups,
    get_disabled_aliases_grouped,
    get_enabled_aliases_grouped,
    get_global_aliases,
    get_single_group,
    search_aliases,
)
from aliasmgr.models import Alias, Config
from aliasmgr.outcomes import AliasmgrError, Command, ConfigChanged, NoChanges, Outcome
from aliasmgr.scanner import AliasScanner, convert_aliases
from aliasmgr.settings import Settings
from aliasmgr.shell import generate_alias_script_content, generate_init_script, send_alias_deltas_to_shell
from aliasmgr.shell_detector import ShellType
from aliasmgr.storage import AliasStorage

logger = logging.getLogger(__name__)

console = Console()


class App:
    """State shared by the commands of one invocation"""

    def __init__(self, settings: Settings, assume_yes: bool = False):
        self.settings = settings
        self.assume_yes = assume_yes
        self.storage = AliasStorage(
            settings.config_path,
            max_backups=settings.get("max_backups"),
            backups_enabled=settings.get("backups"),
        )
        if assume_yes:
            self.confirmer: resolution.Confirmer = resolution.StaticConfirmer(True)
        else:
            self.confirmer = resolution.RichConfirmer(console)
        self._shell: Optional[ShellType] = None

    @property
    def shell(self) -> ShellType:
        if self._shell is None:
            self._shell = self.settings.shell()
            logger.debug("Determined shell: %s", self._shell)
        return self._shell

    def confirm(self, prompt: str) -> bool:
        if self.assume_yes:
            return True
        return Confirm.ask(prompt, default=False, console=console)

    def load(self) -> Config:
        path = self.settings.config_path
        if self.settings.needs_path_confirmation and not self.assume_yes:
            if not Confirm.ask(
                f"Configuration file '{path}' does not exist. Do you want to use this path anyway?",
                default=True,
                console=console,
            ):
                raise click.ClickException(
                    f"Configuration file '{path}' does not exist and user chose not to use it."
                )
        logger.debug("Using config path: %s", path)

        try:
            return self.storage.load()
        except (ConfigDecodeError, OSError) as e:
            raise click.ClickException(f"Failed to load configuration {path}: {e}")

    def save(self, config: Config) -> None:
        try:
            self.storage.save(config)
        except (ConfigEncodeError, OSError) as e:
            raise click.ClickException(f"Failed to save configuration {self.storage.storage_path}: {e}")

    def apply(self, config: Config, outcome: Outcome) -> None:
        """Persist and forward the outcome of an operation"""
        if isinstance(outcome, Command):
            logger.debug("Generated command output: %s", outcome.text)
            self.save(config)
            send_alias_deltas_to_shell(outcome.text)
        elif isinstance(outcome, ConfigChanged):
            self.save(config)
            logger.debug("New configuration saved.")
        else:
            logger.debug("No changes made to configuration or shell.")


def handle_failures(f):
    """Report rejected operations instead of crashing"""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except AliasmgrError as e:
            console.print(f"[red]✗[/] {e}")
            click.get_current_context().exit(1)

    return wrapper


def setup_logging(verbose: bool, debug: bool, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
        force=True,
    )


def report(outcome: Outcome, done: str, unchanged: str) -> None:
    if isinstance(outcome, NoChanges):
        console.print(f"[yellow]⚠[/] {unchanged}")
    else:
        console.print(f"[green]✔[/] {done}")


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Alias file to use instead of the default",
)
@click.option("--yes", "-y", is_flag=True, help="Answer yes to every question")
@click.option("--verbose", "-v", is_flag=True, help="Show what is being changed")
@click.option("--debug", is_flag=True, help="Show debug output")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors")
@click.version_option(version=__version__, prog_name="aliasmgr")
@click.pass_context
def main(ctx, config_path, yes, verbose, debug, quiet):
    """aliasmgr - manage your shell aliases in groups

    Run 'eval "$(aliasmgr init bash)"' from your shell rc file to keep
    every shell in sync.
    """
    setup_logging(verbose, debug, quiet)
    ctx.obj = App(Settings(config_path=config_path), assume_yes=yes)


@main.command()
@click.argument("name")
@click.argument("command")
@click.option("--group", "-g", help="Add alias to GROUP")
@click.option("--disabled", is_flag=True, help="Add the alias disabled")
@click.option("--global", "is_global", is_flag=True, help="Expand anywhere on the line (zsh only)")
@click.pass_obj
@handle_failures
def add(app, name, command, group, disabled, is_global):
    """Add a new alias, or overwrite an existing one"""
    config = app.load()
    existed = name in config.aliases
    alias = Alias(command=command, group=group, enabled=not disabled, is_global=is_global)

    outcome = resolution.add_or_overwrite_alias(config, name, alias, app.confirmer, app.shell)
    app.apply(config, outcome)

    action = "Overwrote" if existed else "Added"
    report(outcome, f"{action} alias: [cyan]{name}[/] = '{command}'", f"Alias '{name}' was not changed")


@main.command()
@click.argument("name")
@click.argument("command", required=False)
@click.option("--group", "-g", help="Move the alias to GROUP")
@click.option("--ungroup", is_flag=True, help="Remove the alias from its group")
@click.option("--toggle-enable", is_flag=True, help="Enable a disabled alias or disable an enabled one")
@click.option("--toggle-global", is_flag=True, help="Toggle global expansion (zsh only)")
@click.pass_obj
@handle_failures
def edit(app, name, command, group, ungroup, toggle_enable, toggle_global):
    """Edit an existing alias"""
    if group and ungroup:
        raise click.UsageError("--group and --ungroup cannot be used together")

    config = app.load()
    new_group = resolution.KEEP
    if ungroup:
        new_group = UNGROUPED
    elif group:
        new_group = group

    outcome = resolution.edit_alias(
        config,
        name,
        app.confirmer,
        app.shell,
        command=command,
        group=new_group,
        toggle_enable=toggle_enable,
        toggle_global=toggle_global,
    )
    app.apply(config, outcome)

    if name in config.aliases:
        report(outcome, f"Edited alias: [cyan]{name}[/] = {config.aliases[name]}", f"Alias '{name}' was not changed")


@main.command()
@click.argument("name")
@click.argument("group", required=False)
@click.pass_obj
@handle_failures
def move(app, name, group):
    """Move an alias to GROUP, or out of its group when GROUP is omitted"""
    config = app.load()
    outcome = resolution.move_alias(config, name, group, app.confirmer)
    app.apply(config, outcome)
    target = f"group '{group}'" if group else "ungrouped aliases"
    report(outcome, f"Moved [cyan]{name}[/] to {target}", f"Alias '{name}' was not moved")


@main.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
@handle_failures
def remove(app, names):
    """Remove one or more aliases"""
    config = app.load()
    outcome = operations.remove_aliases(config, names)
    app.apply(config, outcome)
    console.print(f"[green]✔[/] Removed {', '.join(names)}")


@main.command()
@click.argument("old")
@click.argument("new")
@click.pass_obj
@handle_failures
def rename(app, old, new):
    """Rename an alias"""
    config = app.load()
    outcome = operations.rename_alias(config, old, new, app.shell)
    app.apply(config, outcome)
    console.print(f"[green]✔[/] Renamed alias [cyan]{old}[/] to [cyan]{new}[/]")


@main.command()
@click.argument("name")
@click.pass_obj
@handle_failures
def enable(app, name):
    """Enable an alias"""
    config = app.load()
    outcome = operations.enable_alias(config, name, app.shell)
    app.apply(config, outcome)
    report(outcome, f"Enabled alias [cyan]{name}[/]", f"Alias '{name}' is already enabled")


@main.command()
@click.argument("name")
@click.pass_obj
@handle_failures
def disable(app, name):
    """Disable an alias"""
    config = app.load()
    outcome = operations.disable_alias(config, name, app.shell)
    app.apply(config, outcome)
    report(outcome, f"Disabled alias [cyan]{name}[/]", f"Alias '{name}' is already disabled")


@main.command()
@click.option("--group", "-g", help="Only sort the aliases of GROUP")
@click.option("--ungrouped", is_flag=True, help="Only sort the ungrouped aliases")
@click.pass_obj
@handle_failures
def sort(app, group, ungrouped):
    """Sort aliases by name"""
    if group and ungrouped:
        raise click.UsageError("--group and --ungrouped cannot be used together")

    config = app.load()
    if group or ungrouped:
        outcome = operations.sort_aliases_in_group(config, group)
    else:
        outcome = operations.sort_all_aliases(config)
    app.apply(config, outcome)
    console.print("[green]✔[/] Sorted aliases")


@main.command(name="list")
@click.argument("pattern", required=False)
@click.option("--group", "-g", help="List aliases in GROUP")
@click.option("--ungrouped", is_flag=True, help="List ungrouped aliases")
@click.option("--enabled", "-e", "only_enabled", is_flag=True, help="List only enabled aliases")
@click.option("--disabled", "-d", "only_disabled", is_flag=True, help="List only disabled aliases")
@click.option("--global", "only_global", is_flag=True, help="List only global aliases")
@click.pass_obj
@handle_failures
def list_aliases(app, pattern, group, ungrouped, only_enabled, only_disabled, only_global):
    """List aliases, optionally matching PATTERN"""
    if only_enabled and only_disabled:
        raise click.UsageError("--enabled and --disabled cannot be used together")

    config = app.load()
    if only_enabled:
        grouped = get_enabled_aliases_grouped(config)
    elif only_disabled:
        grouped = get_disabled_aliases_grouped(config)
    else:
        grouped = get_all_groups(config)

    if only_global:
        grouped = filter_grouped(grouped, [name for names in get_global_aliases(config).values() for name in names])

    if group or ungrouped:
        scope = get_single_group(config, group)
        grouped = {group: [name for name in grouped.get(group, []) if name in scope]}

    if pattern:
        matches = search_aliases(config, pattern, app.settings.get("fuzzy_threshold"))
        grouped = filter_grouped(grouped, [name for name, _ in matches])

    grouped = {key: names for key, names in grouped.items() if names}
    if not grouped:
        console.print("[yellow]No aliases found.[/] Add one with 'aliasmgr add'")
        return

    for group_name, names in grouped.items():
        render_group(config, group_name, names)


def render_group(config: Config, group_name: Optional[str], names) -> None:
    if group_name is UNGROUPED:
        title = "[bold cyan]Ungrouped[/]"
    else:
        state = "" if config.groups.get(group_name, True) else " [dim](disabled)[/]"
        title = f"[bold cyan]📁 {group_name}[/]{state}"
    console.print(f"\n{title} ({len(names)} aliases)")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Command", style="white")
    table.add_column("Status", style="dim")

    for name in names:
        alias = config.aliases[name]
        status = "enabled" if alias.enabled else "disabled"
        if alias.is_global:
            status += ", global"
        table.add_row(name, alias.command, status)

    console.print(table)


@main.command()
@click.pass_obj
def sync(app):
    """Send every enabled alias to the shell"""
    config = app.load()
    send_alias_deltas_to_shell(generate_alias_script_content(config, app.shell))


@main.command()
@click.argument("shell", type=click.Choice([shell.value for shell in ShellType]))
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Custom location of the alias file")
def init(shell, config_path):
    """Print the script to evaluate in your shell rc file"""
    click.echo(generate_init_script(ShellType(shell), config_path))


@main.command()
@click.argument("source", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--group", "-g", help="Add the converted aliases to GROUP")
@click.pass_obj
@handle_failures
def convert(app, source, group):
    """Import alias definitions from a shell file (default: your rc files)"""
    scanner = AliasScanner()
    if source:
        aliases = scanner.scan_file(source)
        console.print(f"[cyan]Found {len(aliases)} aliases in {source.name}[/]")
    else:
        results = scanner.scan_system(app.shell)
        aliases = []
        for filename, file_aliases in results.items():
            console.print(f"[dim]  {filename}: {len(file_aliases)} aliases[/]")
            aliases.extend(file_aliases)
        console.print(f"[cyan]Found {len(aliases)} total aliases in shell files[/]")

    if not aliases:
        console.print("[yellow]No aliases found to import[/]")
        return

    config = app.load()
    outcome, rejected = convert_aliases(config, aliases, app.confirmer, group, app.shell)
    app.apply(config, outcome)

    console.print("\n[bold green]Import Complete![/]")
    console.print(f"  Imported: {len(aliases) - len(rejected)} aliases")
    if rejected:
        console.print(f"  Skipped: {', '.join(rejected)}")


@main.command()
@click.pass_obj
@handle_failures
def clear(app):
    """Remove every alias and group"""
    config = app.load()
    outcome = resolution.remove_everything(
        config, lambda: app.confirm("Remove all aliases and groups?")
    )
    app.apply(config, outcome)
    report(outcome, "Removed all aliases and groups", "Nothing was removed")


@main.command()
@click.pass_obj
def restore(app):
    """Restore the alias file from the latest backup"""
    if not app.storage.restore_latest_backup():
        console.print("[yellow]No backups found[/]")
        return
    config = app.load()
    send_alias_deltas_to_shell(generate_alias_script_content(config, app.shell))
    console.print(f"[green]✔[/] Restored {app.storage.storage_path}")


@main.command()
@click.pass_obj
def path(app):
    """Print the location of the alias file"""
    click.echo(str(app.settings.config_path))


@main.group()
def group():
    """Manage alias groups"""
    pass


@group.command(name="add")
@click.argument("name")
@click.option("--disabled", is_flag=True, help="Create the group disabled")
@click.pass_obj
@handle_failures
def group_add(app, name, disabled):
    """Create a new group"""
    config = app.load()
    outcome = operations.add_group(config, name, not disabled)
    app.apply(config, outcome)
    console.print(f"[green]✔[/] Created group [cyan]{name}[/]")


@group.command(name="remove")
@click.argument("name", required=False)
@click.option("--reassign", is_flag=True, help="Keep the aliases of the group as ungrouped aliases")
@click.pass_obj
@handle_failures
def group_remove(app, name, reassign):
    """Remove group NAME and its aliases, or every ungrouped alias if NAME is omitted"""
    config = app.load()
    if name is None:
        outcome = resolution.remove_ungrouped(config)
        app.apply(config, outcome)
        report(outcome, "Removed ungrouped aliases", "No ungrouped aliases to remove")
        return

    outcome = resolution.remove_group(config, name, reassign, app.shell)
    app.apply(config, outcome)
    if reassign:
        console.print(f"[green]✔[/] Removed group [cyan]{name}[/], its aliases are now ungrouped")
    else:
        console.print(f"[green]✔[/] Removed group [cyan]{name}[/] and its aliases")


@group.command(name="rename")
@click.argument("old")
@click.argument("new")
@click.pass_obj
@handle_failures
def group_rename(app, old, new):
    """Rename a group"""
    config = app.load()
    outcome = operations.rename_group(config, old, new)
    app.apply(config, outcome)
    console.print(f"[green]✔[/] Renamed group [cyan]{old}[/] to [cyan]{new}[/]")


@group.command(name="enable")
@click.argument("name")
@click.pass_obj
@handle_failures
def group_enable(app, name):
    """Enable a group"""
    config = app.load()
    outcome = operations.enable_group(config, name, app.shell)
    app.apply(config, outcome)
    report(outcome, f"Enabled group [cyan]{name}[/]", f"Group '{name}' is already enabled")


@group.command(name="disable")
@click.argument("name")
@click.pass_obj
@handle_failures
def group_disable(app, name):
    """Disable a group"""
    config = app.load()
    outcome = operations.disable_group(config, name, app.shell)
    app.apply(config, outcome)
    report(outcome, f"Disabled group [cyan]{name}[/]", f"Group '{name}' is already disabled")


@group.command(name="sort")
@click.pass_obj
@handle_failures
def group_sort(app):
    """Sort groups by name"""
    config = app.load()
    outcome = operations.sort_groups(config)
    app.apply(config, outcome)
    console.print("[green]✔[/] Sorted groups")


if __name__ == "__main__":
    main()
